"""Signatures for first-order theories.

A signature Σ = (S, F, P) consists of:
  S: a set of sort declarations
  F: a set of function symbols, each with a profile  f : s₁ × s₂ × ... → s
  P: a set of predicate symbols, each with a profile  p : s₁ × s₂ × ...

A function symbol with zero arguments is a constant. Equality is built into
the logic and never declared.

Signatures are immutable: extending one (which is what a definition does)
returns a new signature and leaves the original untouched.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .sorts import SortDecl, SortRef

# ---------------------------------------------------------------------------
# Symbols
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FnParam:
    """A named parameter of a function or predicate symbol."""

    name: str
    sort: SortRef


@dataclass(frozen=True)
class FnSymbol:
    """A function symbol with a profile.

    Examples:
        emptySet : → Set                      (constant)
        pair     : Set × Set → Set            (binary)
        inverse  : Set × Set × Set → Set      (defined by description)
    """

    name: str
    params: tuple[FnParam, ...]
    result: SortRef

    @property
    def arity(self) -> int:
        return len(self.params)

    @property
    def param_sorts(self) -> tuple[SortRef, ...]:
        return tuple(p.sort for p in self.params)

    @property
    def is_constant(self) -> bool:
        return self.arity == 0


@dataclass(frozen=True)
class PredSymbol:
    """A predicate symbol (holds or does not hold of its arguments).

    Examples:
        in        : Set × Set
        functional: Set
        group     : Set × Set
    """

    name: str
    params: tuple[FnParam, ...]

    @property
    def arity(self) -> int:
        return len(self.params)

    @property
    def param_sorts(self) -> tuple[SortRef, ...]:
        return tuple(p.sort for p in self.params)


# ---------------------------------------------------------------------------
# Signature
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Signature:
    """A many-sorted signature Σ = (S, F, P).

    S: sort declarations, keyed by name
    F: function symbols, keyed by name
    P: predicate symbols, keyed by name

    Invariant: every SortRef in F and P must reference a sort in S.
    """

    sorts: Mapping[str, SortDecl]
    functions: Mapping[str, FnSymbol]
    predicates: Mapping[str, PredSymbol]

    def get_sort(self, name: str) -> SortDecl | None:
        return self.sorts.get(name)

    def get_fn(self, name: str) -> FnSymbol | None:
        return self.functions.get(name)

    def get_pred(self, name: str) -> PredSymbol | None:
        return self.predicates.get(name)

    def declares(self, name: str) -> bool:
        """True if ``name`` is already used by a sort, function or predicate."""
        return name in self.sorts or name in self.functions or name in self.predicates

    def with_function(self, symbol: FnSymbol) -> Signature:
        functions = dict(self.functions)
        functions[symbol.name] = symbol
        return Signature(self.sorts, MappingProxyType(functions), self.predicates)

    def with_predicate(self, symbol: PredSymbol) -> Signature:
        predicates = dict(self.predicates)
        predicates[symbol.name] = symbol
        return Signature(self.sorts, self.functions, MappingProxyType(predicates))

    @property
    def sort_names(self) -> frozenset[str]:
        return frozenset(self.sorts.keys())

    @property
    def fn_names(self) -> frozenset[str]:
        return frozenset(self.functions.keys())

    @property
    def pred_names(self) -> frozenset[str]:
        return frozenset(self.predicates.keys())
