"""Finite models: evaluate terms, formulas and sequents in a concrete structure.

A ``Structure`` interprets the primitive symbols of a signature by Python
callables. Quantifiers range over ``structure.universe``; terms may evaluate
to values outside it (a pair, a whole carrier set), which is what lets the
same universe host both the elements of a group and the sets built from them.

Defined symbols are never interpreted directly:

* a defined predicate is evaluated through its body;
* a defined function is evaluated by searching the universe for the unique
  value satisfying its description.

Both are memoised per argument tuple, so evaluating ``group(G, *)`` once per
candidate identity element costs one evaluation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, assert_never

from .description import EMPTY_SET
from .sequent import Sequent
from .terms import (
    Biconditional,
    Conjunction,
    Disjunction,
    Equation,
    ExistentialQuant,
    FnApp,
    Formula,
    Implication,
    Negation,
    PredApp,
    Term,
    UniqueExistentialQuant,
    UniversalQuant,
    Var,
)
from .theory import Theory

logger = logging.getLogger(__name__)

Env = Mapping[Var, Any]


class ModelError(Exception):
    """A term or formula that cannot be evaluated in the structure."""


@dataclass(frozen=True)
class Structure:
    universe: frozenset[Hashable]
    functions: Mapping[str, Callable[..., Any]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    predicates: Mapping[str, Callable[..., bool]] = field(
        default_factory=lambda: MappingProxyType({})
    )


class Evaluator:
    def __init__(self, theory: Theory, structure: Structure):
        self.theory = theory
        self.structure = structure
        # Sorted once so that witness searches are deterministic.
        self._universe = tuple(sorted(structure.universe, key=repr))
        self._predicates: dict[tuple[str, tuple], bool] = {}
        self._functions: dict[tuple[str, tuple], Any] = {}

    # -- terms -------------------------------------------------------------

    def term(self, t: Term, env: Env | None = None) -> Any:
        env = env or {}
        match t:
            case Var():
                if t not in env:
                    raise ModelError(f"variable '{t.name}' is not assigned")
                return env[t]
            case FnApp(fn_name=name, args=args):
                values = tuple(self.term(a, env) for a in args)
                if name in self.theory.function_definitions:
                    return self._defined_function(name, values)
                interpretation = self.structure.functions.get(name)
                if interpretation is None:
                    raise ModelError(f"function '{name}' has no interpretation")
                return interpretation(*values)
            case _:
                assert_never(t)

    def _defined_function(self, name: str, values: tuple) -> Any:
        key = (name, values)
        if key in self._functions:
            return self._functions[key]

        definition = self.theory.function_definitions[name]
        description = definition.description
        env: dict[Var, Any] = dict(zip(definition.params, values, strict=True))
        witnesses = []
        for candidate in self._universe:
            env[description.variable] = candidate
            if self.formula(description.formula, env):
                witnesses.append(candidate)
        if len(witnesses) != 1:
            raise ModelError(
                f"{name}{values!r} has {len(witnesses)} candidate values in the universe"
            )
        logger.debug("%s%r = %r", name, values, witnesses[0])
        self._functions[key] = witnesses[0]
        return witnesses[0]

    # -- formulas ----------------------------------------------------------

    def formula(self, f: Formula, env: Env | None = None) -> bool:
        env = env or {}
        match f:
            case Equation(lhs=lhs, rhs=rhs):
                return self.term(lhs, env) == self.term(rhs, env)
            case PredApp(pred_name=name, args=args):
                values = tuple(self.term(a, env) for a in args)
                if name in self.theory.predicate_definitions:
                    return self._defined_predicate(name, values)
                interpretation = self.structure.predicates.get(name)
                if interpretation is None:
                    raise ModelError(f"predicate '{name}' has no interpretation")
                return bool(interpretation(*values))
            case Negation(formula=inner):
                return not self.formula(inner, env)
            case Conjunction(conjuncts=parts):
                return all(self.formula(p, env) for p in parts)
            case Disjunction(disjuncts=parts):
                return any(self.formula(p, env) for p in parts)
            case Implication(antecedent=a, consequent=c):
                return not self.formula(a, env) or self.formula(c, env)
            case Biconditional(lhs=lhs, rhs=rhs):
                return self.formula(lhs, env) == self.formula(rhs, env)
            case UniversalQuant(variable=v, body=body):
                return all(self.formula(body, {**env, v: d}) for d in self._universe)
            case ExistentialQuant(variable=v, body=body):
                return any(self.formula(body, {**env, v: d}) for d in self._universe)
            case UniqueExistentialQuant(variable=v, body=body):
                count = sum(1 for d in self._universe if self.formula(body, {**env, v: d}))
                return count == 1
            case _:
                assert_never(f)

    def _defined_predicate(self, name: str, values: tuple) -> bool:
        key = (name, values)
        if key not in self._predicates:
            definition = self.theory.predicate_definitions[name]
            env = dict(zip(definition.params, values, strict=True))
            self._predicates[key] = self.formula(definition.body, env)
        return self._predicates[key]

    def holds(self, formula: Formula, env: Env | None = None) -> bool:
        return self.formula(formula, env)

    def satisfies(self, sequent: Sequent, env: Env | None = None) -> bool:
        """Γ ⊢ Δ holds under ``env`` iff some formula of Δ holds whenever all of Γ do."""
        if not all(self.formula(f, env) for f in sequent.left):
            return True
        return any(self.formula(f, env) for f in sequent.right)


# ---------------------------------------------------------------------------
# Hereditarily finite sets
# ---------------------------------------------------------------------------


def _members(value: Any) -> frozenset:
    return value if isinstance(value, frozenset) else frozenset()


def _is_pair(value: Any) -> bool:
    return isinstance(value, tuple) and len(value) == 2


def _graph(relation: Any) -> list[tuple[Any, Any]]:
    return [p for p in _members(relation) if _is_pair(p)]


def _functional(relation: Any) -> bool:
    images: dict[Any, set] = {}
    for point, image in _graph(relation):
        images.setdefault(point, set()).add(image)
    return all(len(v) == 1 for v in images.values())


def _domain(relation: Any) -> frozenset:
    return frozenset(point for point, _ in _graph(relation))


def _function_from(relation: Any, domain: Any, codomain: Any) -> bool:
    if not isinstance(domain, frozenset) or not isinstance(codomain, frozenset):
        return False
    graph = _graph(relation)
    if len(graph) != len(_members(relation)):
        return False
    return (
        _functional(relation)
        and _domain(relation) == domain
        and all(image in codomain for _, image in graph)
    )


def set_theory_structure(elements: Iterable[Hashable]) -> Structure:
    """Sets as frozensets and ordered pairs as 2-tuples over ``elements``.

    The universe is ``elements`` plus the empty set, the value every
    conditional description falls back to.
    """
    empty = frozenset()
    return Structure(
        universe=frozenset(elements) | {empty},
        functions=MappingProxyType(
            {
                EMPTY_SET.fn_name: lambda: empty,
                "pair": lambda a, b: (a, b),
                "cartesianProduct": lambda x, y: frozenset(
                    (a, b) for a in _members(x) for b in _members(y)
                ),
                "relationDomain": _domain,
                "restrictedFunction": lambda f, x: frozenset(
                    p for p in _graph(f) if p[0] in _members(x)
                ),
            }
        ),
        predicates=MappingProxyType(
            {
                "in": lambda a, b: a in _members(b),
                "functional": _functional,
                "functionFrom": _function_from,
            }
        ),
    )
