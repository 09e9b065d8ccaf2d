"""Theories: a signature with axioms, definitions and proved theorems.

Theories are immutable. Adding an axiom, a definition or a theorem returns a
new ``Theory`` that shares everything else with the old one. The theorem
store is append-only: a name, once used, can never be rebound.

Definitions are conservative extensions:

* a predicate definition ``P(x₁, ..., xₙ) := body`` introduces
  ``⊢ P(x₁, ..., xₙ) ⇔ body``;
* a function definition ``F(x₁, ..., xₙ) := the u. φ(u)`` introduces
  ``Γ ⊢ ∀u. (u = F(x₁, ..., xₙ)) ⇔ φ(u)``, where ``Γ ⊢ ∃!u. φ(u)`` is the
  description's justification (Γ is empty for conditional descriptions).
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from . import kernel
from .check import check_closed_formula
from .description import DefiniteDescription
from .sequent import RuleViolation, Sequent, Theorem
from .signature import FnParam, FnSymbol, PredSymbol, Signature
from .substitution import free_vars, substitute, symbols_of
from .tactics import must, restate
from .terms import (
    Biconditional,
    Equation,
    FnApp,
    Formula,
    PredApp,
    Term,
    UniversalQuant,
    Var,
)

logger = logging.getLogger(__name__)


class DefinitionError(Exception):
    """An invalid extension of a theory."""


class DuplicateTheoremError(DefinitionError):
    pass


def _symbols(formula: Formula) -> frozenset[str]:
    fns, preds = symbols_of(formula)
    return fns | preds


# ---------------------------------------------------------------------------
# Theorem store
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TheoremStore:
    """Append-only, name-keyed collection of theorems."""

    entries: tuple[tuple[str, Theorem], ...] = ()

    def add(self, name: str, theorem: Theorem) -> TheoremStore:
        if name in self:
            raise DuplicateTheoremError(f"theorem '{name}' is already stored")
        return TheoremStore(self.entries + ((name, theorem),))

    def get(self, name: str) -> Theorem | None:
        for key, theorem in self.entries:
            if key == name:
                return theorem
        return None

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.entries)

    def __contains__(self, name: object) -> bool:
        return any(key == name for key, _ in self.entries)

    def __iter__(self) -> Iterator[tuple[str, Theorem]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PredicateDefinition:
    symbol: PredSymbol
    params: tuple[Var, ...]
    body: Formula
    definition: Theorem

    @property
    def name(self) -> str:
        return self.symbol.name

    def __call__(self, *args: Term) -> PredApp:
        return PredApp(self.symbol.name, tuple(args))

    def _mapping(self, args: tuple[Term, ...]) -> dict[Var, Term]:
        if len(args) != len(self.params):
            raise TypeError(f"{self.name} expects {len(self.params)} arguments, got {len(args)}")
        return dict(zip(self.params, args, strict=True))

    def body_at(self, *args: Term) -> Formula:
        return substitute(self.body, self._mapping(args))

    def unfold(self, *args: Term) -> Theorem:
        """⊢ P(args) ⇔ body[args]"""
        return must(kernel.instantiate_variables(self.definition, self._mapping(args)))


@dataclass(frozen=True)
class FunctionDefinition:
    symbol: FnSymbol
    params: tuple[Var, ...]
    description: DefiniteDescription
    definition: Theorem

    @property
    def name(self) -> str:
        return self.symbol.name

    def __call__(self, *args: Term) -> FnApp:
        return FnApp(self.symbol.name, tuple(args))

    def characterization(self, *args: Term) -> Theorem:
        """Γ[args] ⊢ ∀u. (u = F(args)) ⇔ φ[args](u)"""
        if len(args) != len(self.params):
            raise TypeError(f"{self.name} expects {len(self.params)} arguments, got {len(args)}")
        mapping = dict(zip(self.params, args, strict=True))
        return must(kernel.instantiate_variables(self.definition, mapping))

    def _at(self, value: Term, args: tuple[Term, ...]) -> tuple[Theorem, Biconditional]:
        general = self.characterization(*args)
        instance = must(kernel.instantiate_forall(general, general.conclusion, value))
        same = instance.conclusion
        if not isinstance(same, Biconditional):
            raise RuleViolation("characterization", f"expected a biconditional, got {same}")
        return instance, same

    def specification(self, *args: Term) -> Theorem:
        """Γ[args] ⊢ φ[args](F(args)): the defined value satisfies its description."""
        value = self(*args)
        instance, same = self._at(value, args)
        return restate(instance.left, same.rhs, instance, must(kernel.right_refl(value)))

    def uniqueness(self, value: Term, *args: Term) -> Theorem:
        """Γ[args], φ[args](value) ⊢ value = F(args)"""
        instance, same = self._at(value, args)
        return restate(instance.left | {same.rhs}, same.lhs, instance)


# ---------------------------------------------------------------------------
# Theory
# ---------------------------------------------------------------------------


def _frozen(mapping: Mapping[str, object], key: str, value: object) -> MappingProxyType:
    extended = dict(mapping)
    extended[key] = value
    return MappingProxyType(extended)


@dataclass(frozen=True)
class Theory:
    name: str
    signature: Signature
    axioms: Mapping[str, Theorem] = field(default_factory=lambda: MappingProxyType({}))
    predicate_definitions: Mapping[str, PredicateDefinition] = field(
        default_factory=lambda: MappingProxyType({})
    )
    function_definitions: Mapping[str, FunctionDefinition] = field(
        default_factory=lambda: MappingProxyType({})
    )
    theorems: TheoremStore = field(default_factory=TheoremStore)

    # -- extension ---------------------------------------------------------

    def with_axiom(self, name: str, formula: Formula) -> Theory:
        """Add ``⊢ formula``; its free variables are implicitly universal."""
        if name in self.axioms:
            raise DefinitionError(f"axiom '{name}' already exists")
        result = check_closed_formula(formula, self.signature, name, allow_free=True)
        if not result.is_well_formed:
            raise DefinitionError(
                f"axiom '{name}' is ill-formed: " + "; ".join(str(d) for d in result.errors)
            )
        axiom = kernel.introduce(Sequent.of((), formula), f"axiom:{name}", _symbols(formula))
        logger.debug("%s: axiom %s", self.name, name)
        return Theory(
            self.name,
            self.signature,
            _frozen(self.axioms, name, axiom),
            self.predicate_definitions,
            self.function_definitions,
            self.theorems,
        )

    def _check_new_symbol(self, name: str, params: tuple[Var, ...]) -> None:
        if self.signature.declares(name):
            raise DefinitionError(f"symbol '{name}' is already declared")
        if len({p.name for p in params}) != len(params):
            raise DefinitionError(f"parameters of '{name}' must be distinct variables")

    def define_predicate(
        self, name: str, params: tuple[Var, ...], body: Formula
    ) -> tuple[Theory, PredicateDefinition]:
        params = tuple(params)
        self._check_new_symbol(name, params)
        stray = free_vars(body) - set(params)
        if stray:
            names = ", ".join(sorted(v.name for v in stray))
            raise DefinitionError(f"body of '{name}' has free variables outside its parameters: {names}")
        result = check_closed_formula(body, self.signature, name, params=params)
        if not result.is_well_formed:
            raise DefinitionError(
                f"body of '{name}' is ill-formed: " + "; ".join(str(d) for d in result.errors)
            )

        symbol = PredSymbol(name, tuple(FnParam(p.name, p.sort) for p in params))
        statement = Biconditional(PredApp(name, params), body)
        theorem = kernel.introduce(
            Sequent.of((), statement), f"definition:{name}", _symbols(statement)
        )
        definition = PredicateDefinition(symbol, params, body, theorem)
        logger.debug("%s: defined predicate %s/%d", self.name, name, len(params))
        theory = Theory(
            self.name,
            self.signature.with_predicate(symbol),
            self.axioms,
            _frozen(self.predicate_definitions, name, definition),
            self.function_definitions,
            self.theorems,
        )
        return theory, definition

    def define_function(
        self, name: str, params: tuple[Var, ...], description: DefiniteDescription
    ) -> tuple[Theory, FunctionDefinition]:
        params = tuple(params)
        self._check_new_symbol(name, params)
        u = description.variable
        if u in params:
            raise DefinitionError(f"bound variable {u.name} of '{name}' is also a parameter")
        justification = description.justification
        stray = (
            free_vars(description.formula) - {u} | Sequent.of(justification.left).free_vars
        ) - set(params)
        if stray:
            names = ", ".join(sorted(v.name for v in stray))
            raise DefinitionError(f"description of '{name}' has free variables outside its parameters: {names}")
        result = check_closed_formula(
            description.formula, self.signature, name, params=(*params, u)
        )
        if not result.is_well_formed:
            raise DefinitionError(
                f"description of '{name}' is ill-formed: "
                + "; ".join(str(d) for d in result.errors)
            )

        symbol = FnSymbol(name, tuple(FnParam(p.name, p.sort) for p in params), u.sort)
        statement = UniversalQuant(
            u, Biconditional(Equation(u, FnApp(name, params)), description.formula)
        )
        theorem = kernel.introduce(
            Sequent.of(justification.left, statement),
            f"definition:{name}",
            _symbols(statement) | justification.constrained,
        )
        definition = FunctionDefinition(symbol, params, description, theorem)
        logger.debug(
            "%s: defined function %s/%d (%s)",
            self.name,
            name,
            len(params),
            "total" if description.is_total else "under assumptions",
        )
        theory = Theory(
            self.name,
            self.signature.with_function(symbol),
            self.axioms,
            self.predicate_definitions,
            _frozen(self.function_definitions, name, definition),
            self.theorems,
        )
        return theory, definition

    def with_theorem(self, name: str, theorem: Theorem) -> Theory:
        store = self.theorems.add(name, theorem)
        logger.debug("%s: stored theorem %s: %s", self.name, name, theorem)
        return Theory(
            self.name,
            self.signature,
            self.axioms,
            self.predicate_definitions,
            self.function_definitions,
            store,
        )

    def renamed(self, name: str) -> Theory:
        return Theory(
            name,
            self.signature,
            self.axioms,
            self.predicate_definitions,
            self.function_definitions,
            self.theorems,
        )

    # -- lookup ------------------------------------------------------------

    def axiom(self, name: str) -> Theorem:
        return self.axioms[name]

    def theorem(self, name: str) -> Theorem:
        theorem = self.theorems.get(name)
        if theorem is None:
            raise KeyError(name)
        return theorem

    def lookup(self, name: str) -> Theorem | None:
        """A stored theorem, an axiom or a definitional theorem named ``name``."""
        if name in self.theorems:
            return self.theorems.get(name)
        if name in self.axioms:
            return self.axioms[name]
        if name in self.predicate_definitions:
            return self.predicate_definitions[name].definition
        if name in self.function_definitions:
            return self.function_definitions[name].definition
        return None
