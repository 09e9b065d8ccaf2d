"""Derived rules built from the kernel's primitive steps.

Unlike the kernel these raise ``RuleViolation`` instead of returning
``Err``: a failed step aborts the whole construction and nothing partial is
ever returned.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from . import kernel
from .result import Err, Ok, Result
from .sequent import RuleViolation, Sequent, Theorem, contains, without
from .substitution import alpha_equivalent, free_vars, fresh_var, substitute
from .terms import (
    Biconditional,
    Disjunction,
    Equation,
    ExistentialQuant,
    Formula,
    Implication,
    Term,
    UniqueExistentialQuant,
    UniversalQuant,
    Var,
)

logger = logging.getLogger(__name__)


def must(result: Result[Theorem, RuleViolation]) -> Theorem:
    match result:
        case Ok(value):
            return value
        case Err(error):
            raise error


def restate(
    left: Formula | Iterable[Formula], right: Formula | Iterable[Formula], *premises: Theorem
) -> Theorem:
    """Γ ⊢ Δ as a propositional consequence of ``premises``."""
    return must(kernel.tautology(Sequent.of(left, right), *premises))


def _peel_guards(thm: Theorem) -> Theorem:
    current = thm.conclusion
    while isinstance(current, Implication):
        thm = restate(thm.left | {current.antecedent}, current.consequent, thm)
        current = current.consequent
    return thm


def specialize(quantified: Formula, *terms: Term) -> Theorem:
    """Instantiate a chain ``∀x. (guard ⇒ ∀y. ...)`` at ``terms``.

    Returns ``quantified, guards... ⊢ body[terms]``; every guard met on the
    way is moved to the left.
    """
    thm = must(kernel.hypothesis(quantified))
    for term in terms:
        thm = _peel_guards(thm)
        current = thm.conclusion
        if not isinstance(current, UniversalQuant):
            raise RuleViolation("specialize", f"no universal quantifier left in {thm}")
        thm = must(kernel.instantiate_forall(thm, current, term))
    return _peel_guards(thm)


def cases(goal: Formula, branches: Sequence[tuple[Formula, Theorem]]) -> Theorem:
    """Combine per-guard proofs of ``goal`` over an exhaustive set of guards.

    Each branch theorem must be ``Γᵢ, guardᵢ ⊢ goal``. Exhaustiveness
    (``⊢ guard₁ ∨ ... ∨ guardₙ``) is checked by the decision procedure.
    The result is ``Γ₁, ..., Γₙ ⊢ goal``.
    """
    guards = tuple(guard for guard, _ in branches)
    match kernel.tautology(Sequent.of((), Disjunction(guards))):
        case Ok(exhaustive):
            pass
        case Err(error):
            raise RuleViolation("cases", f"guards are not exhaustive ({error.message})")

    context: frozenset[Formula] = frozenset()
    for guard, thm in branches:
        if len(thm.right) != 1 or not alpha_equivalent(thm.conclusion, goal):
            raise RuleViolation("cases", f"branch {thm} does not prove the goal")
        if not contains(thm.left, guard):
            raise RuleViolation("cases", f"branch {thm} does not assume its guard")
        context |= without(thm.left, guard)

    logger.debug("cases: %d branches combined", len(branches))
    return restate(context, goal, exhaustive, *(thm for _, thm in branches))


def existence_and_uniqueness(
    variable: Var,
    formula: Formula,
    other: Var,
    existence: Theorem,
    uniqueness: Theorem,
) -> Theorem:
    """From ``Γ ⊢ ∃u. φ`` and ``Σ, φ(u), φ(v) ⊢ u = v`` derive ``Γ, Σ ⊢ ∃!u. φ``.

    ``other`` (v) must not occur free in φ; u and v must not occur free in Σ.
    """
    u, v, phi = variable, other, formula
    if v in free_vars(phi):
        raise RuleViolation(
            "existence_and_uniqueness", f"{v.name} must not be free in the formula"
        )
    phi_v = substitute(phi, {u: v})
    context = without(without(uniqueness.left, phi), phi_v)
    same = Biconditional(phi, Equation(u, v))

    # φ(v), v = u ⊢ φ(u)
    backward = must(kernel.right_subst_eq(must(kernel.hypothesis(phi_v)), v, u, u, phi))
    # u = v ⊢ v = u
    w = fresh_var(u, {u, v})
    flipped = must(kernel.right_subst_eq(must(kernel.right_refl(u)), u, v, w, Equation(w, u)))
    pointwise = restate(context | {phi_v}, same, uniqueness, backward, flipped)

    closed = must(kernel.right_forall(pointwise, same, u))
    witnessed = must(kernel.right_exists(closed, UniversalQuant(u, same), v, v))
    assumed = must(kernel.left_exists(witnessed, phi_v, v))
    unique = must(kernel.right_exists_one(assumed, UniqueExistentialQuant(u, phi)))
    return must(kernel.cut(existence, unique, ExistentialQuant(v, phi_v)))
