"""Generic lemmas of first-order logic with equality.

Each lemma is proved once from the kernel rules alone (no axioms), cached,
and reused through variable or predicate-schema instantiation. The schematic
predicates are ``P`` and ``Q`` (unary, over ``x``).
"""

from __future__ import annotations

from functools import cache

from . import kernel
from .helpers import atom, eq, exists_one, iff, var
from .sequent import Theorem
from .tactics import must, restate
from .terms import Biconditional, Term, UniversalQuant

a, b, c, w = var("a"), var("b"), var("c"), var("w")
x, y = var("x"), var("y")

P = "P"
Q = "Q"


@cache
def equality_transitivity() -> Theorem:
    """a = b, b = c ⊢ a = c"""
    start = must(kernel.hypothesis(eq(a, b)))
    return must(kernel.right_subst_eq(start, b, c, w, eq(a, w)))


@cache
def equality_symmetry() -> Theorem:
    """a = b ⊢ b = a"""
    return must(kernel.right_subst_eq(must(kernel.right_refl(a)), a, b, w, eq(w, a)))


def transitivity(first: Term, middle: Term, last: Term) -> Theorem:
    """first = middle, middle = last ⊢ first = last"""
    return must(
        kernel.instantiate_variables(
            equality_transitivity(), {a: first, b: middle, c: last}
        )
    )


def symmetry(lhs: Term, rhs: Term) -> Theorem:
    """lhs = rhs ⊢ rhs = lhs"""
    return must(kernel.instantiate_variables(equality_symmetry(), {a: lhs, b: rhs}))


@cache
def substitution_in_uniqueness_quantifier() -> Theorem:
    """∃!x. P(x), ∀x. (P(x) ⇔ Q(x)) ⊢ ∃!x. Q(x)"""
    px, qx, same = atom(P, x), atom(Q, x), eq(x, y)
    p_unique, q_unique = iff(px, same), iff(qx, same)
    transfer = iff(px, qx)

    step = restate({transfer, p_unique}, q_unique)
    step = must(kernel.left_forall(step, transfer, x, x))
    step = must(kernel.left_forall(step, p_unique, x, x))
    step = must(kernel.right_forall(step, q_unique, x))
    step = must(kernel.right_exists(step, UniversalQuant(x, q_unique), y, y))
    step = must(kernel.left_exists(step, UniversalQuant(x, p_unique), y))
    step = must(kernel.left_exists_one(step, exists_one(x, px)))
    return must(kernel.right_exists_one(step, exists_one(x, qx)))


@cache
def exists_one_implies_exists() -> Theorem:
    """∃!x. P(x) ⊢ ∃x. P(x)"""
    px = atom(P, x)
    unique = Biconditional(px, eq(x, y))

    step = restate({iff(atom(P, y), eq(y, y))}, atom(P, y), must(kernel.right_refl(y)))
    step = must(kernel.left_forall(step, unique, x, y))
    step = must(kernel.right_exists(step, px, x, y))
    step = must(kernel.left_exists(step, UniversalQuant(x, unique), y))
    return must(kernel.left_exists_one(step, exists_one(x, px)))
