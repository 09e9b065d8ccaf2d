"""Terms and formulas of first-order logic with equality.

A term is a well-sorted expression built from:
  - Variables (with a declared sort)
  - Function applications (f(t₁, ..., tₙ) where f is in the signature)

A formula is built from equations and predicate applications with the
connectives ¬ ∧ ∨ ⇒ ⇔ and the quantifiers ∀ ∃ ∃!. Every quantifier binds
exactly one variable; nest them for more.

All nodes are frozen dataclasses: formulas are values, shared freely between
theorems and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass

from .sorts import SortRef

# ---------------------------------------------------------------------------
# Term AST
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Var:
    """A variable with a declared sort.

    Example: x : Set
    """

    name: str
    sort: SortRef


@dataclass(frozen=True)
class FnApp:
    """Application of a function symbol to arguments.

    Example: pair(x, y)      = FnApp("pair", (Var("x", Set), Var("y", Set)))
    Example: emptySet        = FnApp("emptySet", ())  [constant]
    """

    fn_name: str
    args: tuple[Term, ...]


# Union of all term forms
Term = Var | FnApp


# ---------------------------------------------------------------------------
# Formulas
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Equation:
    """An equation between two terms of the same sort.

    Example: app(*, pair(e, x)) = x
    """

    lhs: Term
    rhs: Term


@dataclass(frozen=True)
class PredApp:
    """Application of a predicate to arguments.

    Example: in(x, G)            = PredApp("in", (Var("x", Set), Var("G", Set)))
    Example: group(G, *)         (a defined predicate)
    """

    pred_name: str
    args: tuple[Term, ...]


@dataclass(frozen=True)
class Negation:
    """Logical negation of a formula.

    Example: ¬ group(G, *)
    """

    formula: Formula


@dataclass(frozen=True)
class Conjunction:
    """Logical AND of formulas. The empty conjunction is ⊤.

    Example: x ∈ G ∧ y ∈ G
    """

    conjuncts: tuple[Formula, ...]


@dataclass(frozen=True)
class Disjunction:
    """Logical OR of formulas. The empty disjunction is ⊥.

    Example: prem ∨ ¬ prem
    """

    disjuncts: tuple[Formula, ...]


@dataclass(frozen=True)
class Implication:
    """Logical implication.

    Example: x ∈ G ⇒ ∃y. isInverse(y, x, G, *)
    """

    antecedent: Formula
    consequent: Formula


@dataclass(frozen=True)
class Biconditional:
    """Logical biconditional (if and only if).

    Example: (y = inverse(x, G, *)) ⇔ isInverse(y, x, G, *)
    """

    lhs: Formula
    rhs: Formula


@dataclass(frozen=True)
class UniversalQuant:
    """Universal quantification over one variable.

    Example: ∀x. x ∈ G ⇒ x ∈ G
    """

    variable: Var
    body: Formula


@dataclass(frozen=True)
class ExistentialQuant:
    """Existential quantification over one variable.

    Example: ∃e. isNeutral(e, G, *)
    """

    variable: Var
    body: Formula


@dataclass(frozen=True)
class UniqueExistentialQuant:
    """Unique existence: exactly one value of the variable satisfies the body.

    ∃!x. φ is interchangeable with ∃y. ∀x. (φ ⇔ x = y) through the kernel
    rules ``right_exists_one`` / ``left_exists_one``; nothing else unfolds it.

    Example: ∃!e. isNeutral(e, G, *)
    """

    variable: Var
    body: Formula


# Union of all formula forms
Formula = (
    Equation
    | PredApp
    | Negation
    | Conjunction
    | Disjunction
    | Implication
    | Biconditional
    | UniversalQuant
    | ExistentialQuant
    | UniqueExistentialQuant
)

Quantifier = UniversalQuant | ExistentialQuant | UniqueExistentialQuant

TRUE: Formula = Conjunction(())
FALSE: Formula = Disjunction(())


# ---------------------------------------------------------------------------
# Predicate abstractions (for schema instantiation)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Lambda:
    """A formula abstracted over parameters: λ params. body.

    Used to instantiate a schematic predicate P by a concrete formula, e.g.
    P ↦ λu. isNeutral(u, G, *).
    """

    params: tuple[Var, ...]
    body: Formula

    @property
    def arity(self) -> int:
        return len(self.params)
