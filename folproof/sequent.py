"""Sequents and theorems.

A sequent Γ ⊢ Δ reads "the conjunction of Γ implies the disjunction of Δ",
with free variables implicitly universally quantified. A Theorem is a sequent
together with the rule and premises it was derived from. Theorems are only
ever produced by ``folproof.kernel``; constructing one anywhere else raises
``TypeError``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .render import render_sequent
from .substitution import alpha_equivalent, canonical, free_vars
from .terms import Formula, Var

_KERNEL_SEAL = object()


class RuleViolation(Exception):
    """A proof step whose side conditions do not hold."""

    def __init__(self, rule: str, message: str):
        super().__init__(f"{rule}: {message}")
        self.rule = rule
        self.message = message


# ---------------------------------------------------------------------------
# Formula sets modulo α-equivalence
# ---------------------------------------------------------------------------


def contains(formulas: Iterable[Formula], formula: Formula) -> bool:
    return any(alpha_equivalent(f, formula) for f in formulas)


def without(formulas: Iterable[Formula], formula: Formula) -> frozenset[Formula]:
    key = canonical(formula)
    return frozenset(f for f in formulas if canonical(f) != key)


def free_vars_of_all(formulas: Iterable[Formula]) -> frozenset[Var]:
    return frozenset().union(*(free_vars(f) for f in formulas))


# ---------------------------------------------------------------------------
# Sequent
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Sequent:
    left: frozenset[Formula]
    right: frozenset[Formula]

    @classmethod
    def of(
        cls,
        left: Formula | Iterable[Formula] = (),
        right: Formula | Iterable[Formula] = (),
    ) -> Sequent:
        """Build a sequent from single formulas or collections of formulas."""
        return cls(_side(left), _side(right))

    def alpha_equivalent(self, other: Sequent) -> bool:
        return (
            frozenset(canonical(f) for f in self.left) == frozenset(canonical(f) for f in other.left)
            and frozenset(canonical(f) for f in self.right) == frozenset(canonical(f) for f in other.right)
        )

    @property
    def free_vars(self) -> frozenset[Var]:
        return free_vars_of_all(self.left | self.right)

    def __str__(self) -> str:
        return render_sequent(self.left, self.right)


def _side(side: Formula | Iterable[Formula]) -> frozenset[Formula]:
    # formula nodes are never iterable
    if isinstance(side, Iterable):
        return frozenset(side)
    return frozenset((side,))


# ---------------------------------------------------------------------------
# Theorem
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class Theorem:
    """A kernel-checked sequent.

    ``constrained`` names the function and predicate symbols fixed by the
    axioms and definitions this theorem depends on. Schema instantiation may
    not replace them.
    """

    sequent: Sequent
    rule: str
    premises: tuple[Theorem, ...]
    constrained: frozenset[str]
    _seal: object = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self._seal is not _KERNEL_SEAL:
            raise TypeError("Theorem objects can only be produced by folproof.kernel")

    @property
    def left(self) -> frozenset[Formula]:
        return self.sequent.left

    @property
    def right(self) -> frozenset[Formula]:
        return self.sequent.right

    @property
    def conclusion(self) -> Formula:
        """The single formula on the right; raises if there is not exactly one."""
        if len(self.right) != 1:
            raise RuleViolation(
                "conclusion", f"expected exactly one conclusion in {self.sequent}"
            )
        (formula,) = self.right
        return formula

    @property
    def size(self) -> int:
        """Number of distinct theorems in the derivation, this one included."""
        seen: set[int] = set()
        stack: list[Theorem] = [self]
        while stack:
            thm = stack.pop()
            if id(thm) in seen:
                continue
            seen.add(id(thm))
            stack.extend(thm.premises)
        return len(seen)

    def __str__(self) -> str:
        return str(self.sequent)
