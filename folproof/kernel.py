"""Primitive inference rules.

Every rule takes already-proved theorems (and the formulas/terms it needs)
and returns ``Ok(Theorem)`` when its side conditions hold or
``Err(RuleViolation)`` naming the unmet condition. Nothing else in the
package can build a ``Theorem``.

Formula membership in a sequent side is decided modulo α-equivalence.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from .propositional import DecisionLimitExceeded, is_valid
from .result import Err, Ok, Result
from .sequent import (
    _KERNEL_SEAL,
    RuleViolation,
    Sequent,
    Theorem,
    contains,
    free_vars_of_all,
    without,
)
from .substitution import all_vars, fresh_var, substitute
from .substitution import instantiate_predicates as instantiate_schema
from .terms import (
    Biconditional,
    Equation,
    ExistentialQuant,
    Formula,
    Lambda,
    Term,
    UniqueExistentialQuant,
    UniversalQuant,
    Var,
)

logger = logging.getLogger(__name__)

ProofStep = Result[Theorem, RuleViolation]


def _derive(
    left: Iterable[Formula],
    right: Iterable[Formula],
    rule: str,
    premises: tuple[Theorem, ...],
    constrained: frozenset[str] = frozenset(),
) -> Ok[Theorem]:
    constrained = constrained.union(*(p.constrained for p in premises))
    return Ok(
        Theorem(
            sequent=Sequent(frozenset(left), frozenset(right)),
            rule=rule,
            premises=premises,
            constrained=constrained,
            _seal=_KERNEL_SEAL,
        )
    )


def _reject(rule: str, message: str) -> Err[RuleViolation]:
    logger.debug("rejected %s: %s", rule, message)
    return Err(RuleViolation(rule, message))


# ---------------------------------------------------------------------------
# Structural rules
# ---------------------------------------------------------------------------


def hypothesis(formula: Formula) -> ProofStep:
    """φ ⊢ φ"""
    return _derive((formula,), (formula,), "hypothesis", ())


def weakening(
    thm: Theorem, left: Iterable[Formula] = (), right: Iterable[Formula] = ()
) -> ProofStep:
    return _derive(thm.left | set(left), thm.right | set(right), "weakening", (thm,))


def tautology(target: Sequent, *premises: Theorem) -> ProofStep:
    """Accept ``target`` when it follows propositionally from ``premises``."""
    try:
        valid = is_valid(target, (p.sequent for p in premises))
    except DecisionLimitExceeded as exc:
        return _reject("tautology", f"{target}: {exc}")
    if not valid:
        return _reject(
            "tautology",
            f"{target} does not follow propositionally from {len(premises)} premise(s)",
        )
    return _derive(target.left, target.right, "tautology", premises)


def cut(left_thm: Theorem, right_thm: Theorem, formula: Formula) -> ProofStep:
    """From Γ ⊢ Δ, φ and Σ, φ ⊢ Π derive Γ, Σ ⊢ Δ, Π."""
    if not contains(left_thm.right, formula):
        return _reject("cut", f"cut formula missing from the right of {left_thm}")
    if not contains(right_thm.left, formula):
        return _reject("cut", f"cut formula missing from the left of {right_thm}")
    return _derive(
        left_thm.left | without(right_thm.left, formula),
        without(left_thm.right, formula) | right_thm.right,
        "cut",
        (left_thm, right_thm),
    )


# ---------------------------------------------------------------------------
# Equality
# ---------------------------------------------------------------------------


def right_refl(term: Term) -> ProofStep:
    """⊢ t = t"""
    return _derive((), (Equation(term, term),), "right_refl", ())


def right_subst_eq(
    thm: Theorem, s: Term, t: Term, placeholder: Var, template: Formula
) -> ProofStep:
    """From Γ ⊢ Δ, φ[s/w] derive Γ, s = t ⊢ Δ, φ[t/w]."""
    at_s = substitute(template, {placeholder: s})
    if not contains(thm.right, at_s):
        return _reject("right_subst_eq", f"template instance missing from the right of {thm}")
    return _derive(
        thm.left | {Equation(s, t)},
        without(thm.right, at_s) | {substitute(template, {placeholder: t})},
        "right_subst_eq",
        (thm,),
    )


def left_subst_eq(
    thm: Theorem, s: Term, t: Term, placeholder: Var, template: Formula
) -> ProofStep:
    """From Γ, φ[s/w] ⊢ Δ derive Γ, s = t, φ[t/w] ⊢ Δ."""
    at_s = substitute(template, {placeholder: s})
    if not contains(thm.left, at_s):
        return _reject("left_subst_eq", f"template instance missing from the left of {thm}")
    return _derive(
        without(thm.left, at_s) | {Equation(s, t), substitute(template, {placeholder: t})},
        thm.right,
        "left_subst_eq",
        (thm,),
    )


# ---------------------------------------------------------------------------
# Quantifiers
# ---------------------------------------------------------------------------


def right_forall(thm: Theorem, formula: Formula, variable: Var) -> ProofStep:
    """From Γ ⊢ Δ, φ derive Γ ⊢ Δ, ∀x. φ when x is not free in Γ, Δ."""
    if not contains(thm.right, formula):
        return _reject("right_forall", f"formula missing from the right of {thm}")
    rest = without(thm.right, formula)
    if variable in free_vars_of_all(thm.left | rest):
        return _reject("right_forall", f"eigenvariable {variable.name} is free in the context")
    return _derive(
        thm.left, rest | {UniversalQuant(variable, formula)}, "right_forall", (thm,)
    )


def left_forall(thm: Theorem, formula: Formula, variable: Var, term: Term) -> ProofStep:
    """From Γ, φ[t/x] ⊢ Δ derive Γ, ∀x. φ ⊢ Δ."""
    instance = substitute(formula, {variable: term})
    if not contains(thm.left, instance):
        return _reject("left_forall", f"instance missing from the left of {thm}")
    return _derive(
        without(thm.left, instance) | {UniversalQuant(variable, formula)},
        thm.right,
        "left_forall",
        (thm,),
    )


def instantiate_forall(thm: Theorem, quantified: Formula, term: Term) -> ProofStep:
    """From Γ ⊢ Δ, ∀x. φ derive Γ ⊢ Δ, φ[t/x]."""
    if not isinstance(quantified, UniversalQuant):
        return _reject("instantiate_forall", "formula is not universally quantified")
    if not contains(thm.right, quantified):
        return _reject("instantiate_forall", f"formula missing from the right of {thm}")
    instance = substitute(quantified.body, {quantified.variable: term})
    return _derive(
        thm.left,
        without(thm.right, quantified) | {instance},
        "instantiate_forall",
        (thm,),
    )


def right_exists(thm: Theorem, formula: Formula, variable: Var, term: Term) -> ProofStep:
    """From Γ ⊢ Δ, φ[t/x] derive Γ ⊢ Δ, ∃x. φ."""
    instance = substitute(formula, {variable: term})
    if not contains(thm.right, instance):
        return _reject("right_exists", f"witness instance missing from the right of {thm}")
    return _derive(
        thm.left,
        without(thm.right, instance) | {ExistentialQuant(variable, formula)},
        "right_exists",
        (thm,),
    )


def left_exists(thm: Theorem, formula: Formula, variable: Var) -> ProofStep:
    """From Γ, φ ⊢ Δ derive Γ, ∃x. φ ⊢ Δ when x is not free in Γ, Δ."""
    if not contains(thm.left, formula):
        return _reject("left_exists", f"formula missing from the left of {thm}")
    rest = without(thm.left, formula)
    if variable in free_vars_of_all(rest | thm.right):
        return _reject("left_exists", f"eigenvariable {variable.name} is free in the context")
    return _derive(
        rest | {ExistentialQuant(variable, formula)}, thm.right, "left_exists", (thm,)
    )


def exists_one_expansion(quantified: UniqueExistentialQuant) -> ExistentialQuant:
    """∃!x. φ  ↦  ∃y. ∀x. (φ ⇔ x = y) with y fresh."""
    x = quantified.variable
    y = fresh_var(x, all_vars(quantified.body) | {x})
    return ExistentialQuant(
        y, UniversalQuant(x, Biconditional(quantified.body, Equation(x, y)))
    )


def right_exists_one(thm: Theorem, quantified: UniqueExistentialQuant) -> ProofStep:
    """From Γ ⊢ Δ, ∃y. ∀x. (φ ⇔ x = y) derive Γ ⊢ Δ, ∃!x. φ."""
    expansion = exists_one_expansion(quantified)
    if not contains(thm.right, expansion):
        return _reject("right_exists_one", f"expansion missing from the right of {thm}")
    return _derive(
        thm.left, without(thm.right, expansion) | {quantified}, "right_exists_one", (thm,)
    )


def left_exists_one(thm: Theorem, quantified: UniqueExistentialQuant) -> ProofStep:
    """From Γ, ∃y. ∀x. (φ ⇔ x = y) ⊢ Δ derive Γ, ∃!x. φ ⊢ Δ."""
    expansion = exists_one_expansion(quantified)
    if not contains(thm.left, expansion):
        return _reject("left_exists_one", f"expansion missing from the left of {thm}")
    return _derive(
        without(thm.left, expansion) | {quantified}, thm.right, "left_exists_one", (thm,)
    )


# ---------------------------------------------------------------------------
# Instantiation
# ---------------------------------------------------------------------------


def instantiate_variables(thm: Theorem, mapping: Mapping[Var, Term]) -> ProofStep:
    """Simultaneously substitute free variables throughout the sequent."""
    return _derive(
        (substitute(f, mapping) for f in thm.left),
        (substitute(f, mapping) for f in thm.right),
        "instantiate_variables",
        (thm,),
    )


def instantiate_predicates(thm: Theorem, mapping: Mapping[str, Lambda]) -> ProofStep:
    """Replace schematic predicates by formulas throughout the sequent.

    Symbols fixed by an axiom or definition the theorem relies on cannot be
    instantiated.
    """
    fixed = sorted(set(mapping) & thm.constrained)
    if fixed:
        return _reject(
            "instantiate_predicates", f"cannot instantiate constrained symbol(s) {fixed}"
        )
    try:
        left = [instantiate_schema(f, mapping) for f in thm.left]
        right = [instantiate_schema(f, mapping) for f in thm.right]
    except ValueError as exc:
        return _reject("instantiate_predicates", str(exc))
    return _derive(left, right, "instantiate_predicates", (thm,))


def introduce(sequent: Sequent, rule: str, constrained: Iterable[str]) -> Theorem:
    """Admit an axiom or a definitional theorem.

    Only ``folproof.theory`` calls this, when it extends a theory.
    """
    return _derive(sequent.left, sequent.right, rule, (), frozenset(constrained)).value

