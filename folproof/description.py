"""Definite descriptions: "the unique u such that f(u)".

A description is never built without the theorem ``Γ ⊢ ∃!u. f(u)`` that
justifies it. ``conditional_description`` turns a *partial* justification
(one with assumptions Γ) into a *total* one: the description

    the u. (prem ⇒ f(u)) ∧ (¬prem ⇒ u = default)

comes with a freshly derived, assumption-free ``⊢ ∃!u. completeDef(u)``.
When prem holds it denotes what "the u. f(u)" denotes; otherwise it denotes
``default``.

The proof splits on ``prem ∨ ¬prem``:

* under prem, ``f(u) ⇔ completeDef(u)`` holds pointwise, so the justification
  is transported through the ∃! quantifier with
  ``lemmas.substitution_in_uniqueness_quantifier``;
* under ¬prem, ``default`` is a witness (by reflexivity) and any two
  witnesses equal ``default`` and hence each other (by transitivity).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from . import kernel, lemmas
from .check import check_closed_formula, infer_sort
from .render import render_formula
from .sequent import Theorem
from .signature import Signature
from .substitution import all_vars, alpha_equivalent, canonical, free_vars, fresh_var, substitute, term_vars
from .tactics import cases, existence_and_uniqueness, must, restate
from .terms import (
    Biconditional,
    Conjunction,
    Equation,
    FnApp,
    Formula,
    Implication,
    Lambda,
    Negation,
    Term,
    UniqueExistentialQuant,
    UniversalQuant,
    Var,
)

logger = logging.getLogger(__name__)

# The canonical "empty" element used when no default is given.
EMPTY_SET: Term = FnApp("emptySet", ())


class DescriptionError(Exception):
    pass


class MalformedDescription(DescriptionError):
    """A description request rejected before any proof step was attempted."""

    def __init__(self, component: str, message: str):
        super().__init__(f"{component}: {message}")
        self.component = component
        self.message = message


# ---------------------------------------------------------------------------
# Descriptions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DefiniteDescription:
    """The unique ``variable`` satisfying ``formula``.

    ``justification`` proves ``Γ ⊢ ∃!variable. formula``; Γ may be empty.
    """

    variable: Var
    formula: Formula
    justification: Theorem

    def __post_init__(self) -> None:
        right = self.justification.right
        if len(right) != 1:
            raise MalformedDescription(
                "justification", f"expected a single conclusion, got {len(right)}"
            )
        if not alpha_equivalent(self.justification.conclusion, self.conclusion):
            raise MalformedDescription(
                "justification",
                f"proves {render_formula(self.justification.conclusion)}, "
                f"not {render_formula(self.conclusion)}",
            )

    @property
    def conclusion(self) -> UniqueExistentialQuant:
        return UniqueExistentialQuant(self.variable, self.formula)

    @property
    def assumptions(self) -> frozenset[Formula]:
        return self.justification.left

    @property
    def is_total(self) -> bool:
        return not self.justification.left

    def at(self, term: Term) -> Formula:
        """The defining formula with ``term`` in place of the bound variable."""
        return substitute(self.formula, {self.variable: term})


@dataclass(frozen=True)
class ConditionalDescription(DefiniteDescription):
    """``the u. (premise ⇒ base_formula) ∧ (¬premise ⇒ u = default)``."""

    base_formula: Formula
    premise: Formula
    default: Term

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.justification.left:
            raise MalformedDescription(
                "justification", "a conditional description must be justified without assumptions"
            )

    def under_premise(self) -> Theorem:
        """premise ⊢ ∀u. completeDef(u) ⇔ f(u)"""
        same = Biconditional(self.formula, self.base_formula)
        pointwise = restate({self.premise}, same)
        return must(kernel.right_forall(pointwise, same, self.variable))

    def under_negation(self) -> Theorem:
        """¬premise ⊢ ∀u. completeDef(u) ⇔ u = default"""
        same = Biconditional(self.formula, Equation(self.variable, self.default))
        pointwise = restate({Negation(self.premise)}, same)
        return must(kernel.right_forall(pointwise, same, self.variable))


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


def _flatten(formula: Formula) -> Iterable[Formula]:
    if isinstance(formula, Conjunction):
        for part in formula.conjuncts:
            yield from _flatten(part)
    else:
        yield formula


def normalize_premise(assumptions: Iterable[Formula]) -> Formula | None:
    """Fold assumptions into one premise formula.

    Top-level conjunctions are flattened, α-equivalent duplicates dropped and
    the rest ordered by rendered text, so ``{A, B}``, ``{B, A, A}`` and
    ``{A ∧ B}`` give the same premise. None when there are no assumptions.
    """
    unique: dict[Formula, Formula] = {}
    for assumption in assumptions:
        for part in _flatten(assumption):
            unique.setdefault(canonical(part), part)
    parts = sorted(unique.values(), key=lambda f: (render_formula(f), repr(canonical(f))))
    match parts:
        case []:
            return None
        case [single]:
            return single
        case _:
            return Conjunction(tuple(parts))


def _validate(
    variable: object,
    formula: Formula,
    justification: Theorem,
    default: object,
    signature: Signature | None,
) -> None:
    if not isinstance(variable, Var):
        raise MalformedDescription("variable", f"expected a variable, got {variable!r}")
    if len(justification.right) != 1:
        raise MalformedDescription(
            "justification",
            f"expected exactly one conclusion, got {len(justification.right)}",
        )
    conclusion = justification.conclusion
    if not isinstance(conclusion, UniqueExistentialQuant):
        raise MalformedDescription(
            "justification", f"conclusion {render_formula(conclusion)} is not a ∃! formula"
        )
    if not alpha_equivalent(conclusion, UniqueExistentialQuant(variable, formula)):
        raise MalformedDescription(
            "formula",
            f"justification proves {render_formula(conclusion)}, which does not bind "
            f"{variable.name} over {render_formula(formula)}",
        )
    if not isinstance(default, (Var, FnApp)):
        raise MalformedDescription("default", f"expected a term, got {default!r}")
    if variable in term_vars(default):
        raise MalformedDescription(
            "default", f"default mentions the bound variable {variable.name}"
        )
    default_sort = infer_sort(default, signature)
    if default_sort is not None and default_sort != variable.sort:
        raise MalformedDescription(
            "default",
            f"default has sort '{default_sort}', bound variable has sort '{variable.sort}'",
        )
    for assumption in justification.left:
        if variable in free_vars(assumption):
            raise MalformedDescription(
                "premise", f"bound variable {variable.name} is free in an assumption"
            )
    if signature is not None:
        result = check_closed_formula(formula, signature, "description", allow_free=True)
        if not result.is_well_formed:
            raise MalformedDescription(
                "formula", "; ".join(str(d) for d in result.errors)
            )


def _prove_under_premise(
    variable: Var, formula: Formula, complete: Formula, premise: Formula, justification: Theorem
) -> Theorem:
    """premise ⊢ ∃!u. completeDef(u)"""
    u = variable
    forward = restate({premise, formula}, complete)
    backward = restate({premise, complete}, formula)
    same = Biconditional(formula, complete)
    pointwise = restate({premise}, same, forward, backward)
    closed = must(kernel.right_forall(pointwise, same, u))

    transport = must(
        kernel.instantiate_predicates(
            lemmas.substitution_in_uniqueness_quantifier(),
            {lemmas.P: Lambda((u,), formula), lemmas.Q: Lambda((u,), complete)},
        )
    )
    transported = must(kernel.cut(closed, transport, UniversalQuant(u, same)))

    unique_base = UniqueExistentialQuant(u, formula)
    assumed = restate({premise}, unique_base, justification)
    return must(kernel.cut(assumed, transported, unique_base))


def _prove_under_negation(
    variable: Var, complete: Formula, premise: Formula, default: Term
) -> Theorem:
    """¬premise ⊢ ∃!u. completeDef(u)"""
    u = variable
    negated = Negation(premise)

    at_default = substitute(complete, {u: default})
    witness = restate({negated}, at_default, must(kernel.right_refl(default)))
    existence = must(kernel.right_exists(witness, complete, u, default))

    v = fresh_var(u, all_vars(complete) | {u})
    uniqueness = restate(
        {negated, complete, substitute(complete, {u: v})},
        Equation(u, v),
        lemmas.transitivity(u, default, v),
        lemmas.symmetry(v, default),
    )
    return existence_and_uniqueness(u, complete, v, existence, uniqueness)


def conditional_description(
    variable: Var,
    formula: Formula,
    justification: Theorem,
    default: Term | None = None,
    *,
    signature: Signature | None = None,
) -> DefiniteDescription:
    """Build "the ``variable`` satisfying ``formula``" from its ∃! theorem.

    If ``justification`` proves ``⊢ ∃!u. f(u)`` without assumptions, the
    plain description is returned unchanged. Otherwise the result is a
    ``ConditionalDescription`` falling back to ``default`` (the empty set when
    omitted) outside the justification's assumptions.

    Raises ``MalformedDescription`` for an inconsistent request and lets any
    ``RuleViolation`` from a failing proof step propagate.
    """
    if default is None:
        default = EMPTY_SET
    _validate(variable, formula, justification, default, signature)

    premise = normalize_premise(justification.left)
    if premise is None:
        logger.debug("description of %s: no assumptions, using justification as is", variable.name)
        return DefiniteDescription(variable, formula, justification)

    logger.debug(
        "description of %s: splitting on premise %s", variable.name, render_formula(premise)
    )
    complete = Conjunction(
        (
            Implication(premise, formula),
            Implication(Negation(premise), Equation(variable, default)),
        )
    )
    goal = UniqueExistentialQuant(variable, complete)

    holds = _prove_under_premise(variable, formula, complete, premise, justification)
    fails = _prove_under_negation(variable, complete, premise, default)
    total = cases(goal, [(premise, holds), (Negation(premise), fails)])

    logger.info(
        "built conditional description of %s (%d derivation steps)", variable.name, total.size
    )
    return ConditionalDescription(
        variable=variable,
        formula=complete,
        justification=total,
        base_formula=formula,
        premise=premise,
        default=default,
    )
