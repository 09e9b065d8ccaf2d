"""Sorts for first-order terms.

A sort is a name for a domain of values. Every variable carries one and
every function symbol returns one; the logic compares sorts by name.

The libraries shipped with folproof live in a single sort, ``Set``
(everything is a set, as in the set-theoretic foundations they build on).
Additional atomic sorts can be declared in a signature when a theory needs
them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NewType

# ---------------------------------------------------------------------------
# Sort references: everywhere a sort is *used*, we use a plain string name.
# The actual sort declaration lives in the Signature.
# ---------------------------------------------------------------------------

SortRef = NewType("SortRef", str)

SET = SortRef("Set")


# ---------------------------------------------------------------------------
# Sort declarations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AtomicSort:
    """An opaque sort with no internal structure.

    Examples: Set, Elem
    """

    name: SortRef


SortDecl = AtomicSort
