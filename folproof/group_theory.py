"""Group theory over the ambient set theory.

A group is a pair (G, *) where * is a set-theoretic function G × G → G,
``x * y`` abbreviating ``app(*, pair(x, y))``. The identity element and the
inverse are *defined* operators built with ``conditional_description``: they
denote the expected element when (G, *) is a group (and x ∈ G), and ∅
otherwise.

Every theorem is derived inside the kernel from the definitions below and
the set-theory axioms; ``build_group_theory`` runs all the proofs once and
returns the resulting library.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cache

from . import kernel
from .description import conditional_description
from .helpers import conj, eq, exists, forall, implies, var
from .lemmas import symmetry, transitivity
from .sequent import Theorem
from .settheory import (
    SetTheory,
    build_set_theory,
    cartesian_product,
    function_from,
    functional,
    member,
    pair,
    relation_domain,
    restricted_function,
)
from .tactics import existence_and_uniqueness, must, restate, specialize
from .terms import Conjunction, Formula, Term
from .theory import FunctionDefinition, PredicateDefinition, Theory

logger = logging.getLogger(__name__)

# Groups and their laws
G, H = var("G"), var("H")
star = var("*")

# Elements
x, y, z = var("x"), var("y"), var("z")
e, f = var("e"), var("f")


@dataclass(frozen=True)
class GroupTheory:
    """The group-theory library: its theory plus handles on every definition."""

    theory: Theory
    set_theory: SetTheory
    binary_function: PredicateDefinition
    associativity: PredicateDefinition
    is_neutral: PredicateDefinition
    identity_existence: PredicateDefinition
    is_inverse: PredicateDefinition
    inverse_existence: PredicateDefinition
    group: PredicateDefinition
    subgroup: PredicateDefinition
    identity: FunctionDefinition
    inverse: FunctionDefinition

    def theorem(self, name: str) -> Theorem:
        return self.theory.theorem(name)


def op(left: Term, law: Term, right: Term) -> Term:
    """left * right, i.e. app(*, pair(left, right))"""
    return build_set_theory().app(law, pair(left, right))


def _forall_part(definition: Formula) -> Formula:
    """The quantified conjunct of an unfolded ``isNeutral`` body."""
    if not isinstance(definition, Conjunction):
        raise TypeError(f"expected a conjunction, got {type(definition).__name__}")
    return definition.conjuncts[1]


class _Builder:
    """Accumulates definitions and theorems into the theory, in order."""

    def __init__(self, sets: SetTheory):
        self.sets = sets
        self.theory = sets.theory.renamed("group_theory")

    def predicate(self, name: str, params: tuple, body: Formula) -> PredicateDefinition:
        self.theory, definition = self.theory.define_predicate(name, params, body)
        return definition

    def function(self, name: str, params: tuple, description) -> FunctionDefinition:
        self.theory, definition = self.theory.define_function(name, params, description)
        return definition

    def store(self, name: str, theorem: Theorem) -> Theorem:
        self.theory = self.theory.with_theorem(name, theorem)
        logger.debug("proved %s (%d steps)", name, theorem.size)
        return theorem

    def axiom(self, name: str, **instance: Term) -> Theorem:
        """A set-theory axiom with its free variables instantiated by name."""
        general = self.sets.axiom(name)
        mapping = {var(key): value for key, value in instance.items()}
        return must(kernel.instantiate_variables(general, mapping))


@cache
def build_group_theory() -> GroupTheory:
    sets = build_set_theory()
    b = _Builder(sets)

    # -- definitions -------------------------------------------------------

    binary_function = b.predicate(
        "binaryFunction", (G, star), function_from(star, cartesian_product(G, G), G)
    )
    associativity = b.predicate(
        "associativity",
        (G, star),
        forall(
            x,
            implies(
                member(x, G),
                forall(
                    y,
                    implies(
                        member(y, G),
                        forall(
                            z,
                            implies(
                                member(z, G),
                                eq(op(op(x, star, y), star, z), op(x, star, op(y, star, z))),
                            ),
                        ),
                    ),
                ),
            ),
        ),
    )
    is_neutral = b.predicate(
        "isNeutral",
        (e, G, star),
        conj(
            member(e, G),
            forall(
                x,
                implies(member(x, G), conj(eq(op(e, star, x), x), eq(op(x, star, e), x))),
            ),
        ),
    )
    identity_existence = b.predicate(
        "identityExistence", (G, star), exists(e, is_neutral(e, G, star))
    )
    is_inverse = b.predicate(
        "isInverse",
        (y, x, G, star),
        conj(
            member(y, G),
            is_neutral(op(x, star, y), G, star),
            is_neutral(op(y, star, x), G, star),
        ),
    )
    inverse_existence = b.predicate(
        "inverseExistence",
        (G, star),
        forall(x, implies(member(x, G), exists(y, is_inverse(y, x, G, star)))),
    )
    group = b.predicate(
        "group",
        (G, star),
        conj(
            binary_function(G, star),
            associativity(G, star),
            identity_existence(G, star),
            inverse_existence(G, star),
        ),
    )

    # -- the group law as a function ------------------------------------------

    def operation_is_functional() -> Theorem:
        """group(G, *) ⊢ functional(*)"""
        return restate(
            {group(G, star)},
            functional(star),
            group.unfold(G, star),
            binary_function.unfold(G, star),
            b.axiom("function_from_implies_functional", f=star, x=cartesian_product(G, G), y=G),
        )

    group_operation_is_functional = b.store(
        "group_operation_is_functional", operation_is_functional()
    )

    def operation_domain() -> Theorem:
        """group(G, *) ⊢ relationDomain(*) = G × G"""
        return restate(
            {group(G, star)},
            eq(relation_domain(star), cartesian_product(G, G)),
            group.unfold(G, star),
            binary_function.unfold(G, star),
            b.axiom("function_from_implies_domain", f=star, x=cartesian_product(G, G), y=G),
        )

    group_operation_domain = b.store("group_operation_domain", operation_domain())

    def pair_in_operation_domain() -> Theorem:
        """group(G, *), x ∈ G, y ∈ G ⊢ (x, y) ∈ relationDomain(*)"""
        square = cartesian_product(G, G)
        in_square = restate(
            {member(x, G), member(y, G)},
            member(pair(x, y), square),
            b.axiom("pair_in_cartesian_product", a=x, b=y, x=G, y=G),
        )
        # G × G = relationDomain(*) moves the membership over
        moved = must(
            kernel.right_subst_eq(
                in_square, square, relation_domain(star), z, member(pair(x, y), z)
            )
        )
        return restate(
            {group(G, star), member(x, G), member(y, G)},
            member(pair(x, y), relation_domain(star)),
            moved,
            group_operation_domain,
            symmetry(relation_domain(star), square),
        )

    group_pair_in_operation_domain = b.store(
        "group_pair_in_operation_domain", pair_in_operation_domain()
    )

    # -- identity ------------------------------------------------------------

    def identity_uniqueness() -> Theorem:
        """group(G, *) ⊢ ∃!e. isNeutral(e, G, *)"""
        existence = restate(
            {group(G, star)},
            exists(e, is_neutral(e, G, star)),
            group.unfold(G, star),
            identity_existence.unfold(G, star),
        )

        # e * f = f by neutrality of e, e * f = e by neutrality of f
        left_neutral = specialize(_forall_part(is_neutral.body_at(e, G, star)), f)
        right_neutral = specialize(_forall_part(is_neutral.body_at(f, G, star)), e)
        ef = op(e, star, f)
        uniqueness = restate(
            {is_neutral(e, G, star), is_neutral(f, G, star)},
            eq(e, f),
            is_neutral.unfold(e, G, star),
            is_neutral.unfold(f, G, star),
            left_neutral,
            right_neutral,
            symmetry(ef, e),
            transitivity(e, ef, f),
        )
        return existence_and_uniqueness(e, is_neutral(e, G, star), f, existence, uniqueness)

    uniqueness_of_identity = b.store("identity_uniqueness", identity_uniqueness())
    identity = b.function(
        "identity",
        (G, star),
        conditional_description(
            e, is_neutral(e, G, star), uniqueness_of_identity, signature=b.theory.signature
        ),
    )

    # -- inverse -------------------------------------------------------------

    def inverse_uniqueness() -> Theorem:
        """group(G, *), x ∈ G ⊢ ∃!y. isInverse(y, x, G, *)"""
        context = {group(G, star), member(x, G)}
        existence = restate(
            context,
            exists(y, is_inverse(y, x, G, star)),
            group.unfold(G, star),
            inverse_existence.unfold(G, star),
            specialize(inverse_existence.body_at(G, star), x),
        )

        # z = (y * x) * z = y * (x * z) = y
        yx, xz = op(y, star, x), op(x, star, z)
        yx_z, y_xz = op(yx, star, z), op(y, star, xz)
        uniqueness = restate(
            context | {is_inverse(y, x, G, star), is_inverse(z, x, G, star)},
            eq(y, z),
            group.unfold(G, star),
            associativity.unfold(G, star),
            is_inverse.unfold(y, x, G, star),
            is_inverse.unfold(z, x, G, star),
            is_neutral.unfold(yx, G, star),
            is_neutral.unfold(xz, G, star),
            specialize(_forall_part(is_neutral.body_at(yx, G, star)), z),
            specialize(_forall_part(is_neutral.body_at(xz, G, star)), y),
            specialize(associativity.body_at(G, star), y, x, z),
            symmetry(yx_z, z),
            transitivity(z, yx_z, y_xz),
            transitivity(z, y_xz, y),
            symmetry(z, y),
        )
        return existence_and_uniqueness(y, is_inverse(y, x, G, star), z, existence, uniqueness)

    uniqueness_of_inverse = b.store("inverse_uniqueness", inverse_uniqueness())
    inverse = b.function(
        "inverse",
        (x, G, star),
        conditional_description(
            y, is_inverse(y, x, G, star), uniqueness_of_inverse, signature=b.theory.signature
        ),
    )

    def inverse_symmetry() -> Theorem:
        """group(G, *) ⊢ ∀x. x ∈ G ⇒ (isInverse(y, x, G, *) ⇒ isInverse(x, y, G, *))"""
        statement = implies(
            member(x, G), implies(is_inverse(y, x, G, star), is_inverse(x, y, G, star))
        )
        pointwise = restate(
            {group(G, star)},
            statement,
            is_inverse.unfold(y, x, G, star),
            is_inverse.unfold(x, y, G, star),
        )
        return must(kernel.right_forall(pointwise, statement, x))

    symmetric = b.store("inverse_symmetry", inverse_symmetry())

    inv_x = inverse(x, G, star)

    def inverse_is_inverse() -> Theorem:
        """group(G, *), x ∈ G ⊢ isInverse(inverse(x), x, G, *)"""
        return restate(
            {group(G, star), member(x, G)},
            is_inverse(inv_x, x, G, star),
            inverse.specification(x, G, star),
        )

    inverse_property = b.store("inverse_is_inverse", inverse_is_inverse())

    def inverse_is_involutive() -> Theorem:
        """group(G, *) ⊢ ∀x. x ∈ G ⇒ inverse(inverse(x)) = x"""
        inv_inv_x = inverse(inv_x, G, star)
        context = {group(G, star), member(x, G)}

        membership = restate(
            context,
            member(inv_x, G),
            inverse_property,
            is_inverse.unfold(inv_x, x, G, star),
        )
        # x is an inverse of inverse(x)
        flipped = must(kernel.instantiate_variables(symmetric, {y: inv_x}))
        flipped = must(kernel.instantiate_forall(flipped, flipped.conclusion, x))
        # ... hence x = inverse(inverse(x))
        unique = inverse.uniqueness(x, inv_x, G, star)

        pointwise = restate(
            context,
            eq(inv_inv_x, x),
            inverse_property,
            membership,
            flipped,
            unique,
            symmetry(x, inv_inv_x),
        )
        statement = implies(member(x, G), eq(inv_inv_x, x))
        guarded = restate({group(G, star)}, statement, pointwise)
        return must(kernel.right_forall(guarded, statement, x))

    b.store("inverse_is_involutive", inverse_is_involutive())

    def identity_is_neutral() -> Theorem:
        """group(G, *) ⊢ isNeutral(identity(G, *), G, *)"""
        return restate(
            {group(G, star)},
            is_neutral(identity(G, star), G, star),
            identity.specification(G, star),
        )

    b.store("identity_is_neutral", identity_is_neutral())

    def inverse_cancellation() -> Theorem:
        """group(G, *), x ∈ G ⊢ x * inverse(x) = identity(G, *) ∧ inverse(x) * x = identity(G, *)"""
        unit = identity(G, star)
        right, left = op(x, star, inv_x), op(inv_x, star, x)
        return restate(
            {group(G, star), member(x, G)},
            conj(eq(right, unit), eq(left, unit)),
            inverse_property,
            is_inverse.unfold(inv_x, x, G, star),
            identity.uniqueness(right, G, star),
            identity.uniqueness(left, G, star),
        )

    b.store("inverse_cancellation", inverse_cancellation())

    # -- subgroups -----------------------------------------------------------

    restricted = restricted_function(star, cartesian_product(H, H))
    subgroup = b.predicate(
        "subgroup",
        (H, G, star),
        conj(group(G, star), sets.subset(H, G), group(H, restricted)),
    )

    def subgroup_pair_in_parent_operation_domain() -> Theorem:
        """subgroup(H, G, *), x ∈ H, y ∈ H ⊢ (x, y) ∈ relationDomain(*)"""
        inclusion = sets.subset.body_at(H, G)
        return restate(
            {subgroup(H, G, star), member(x, H), member(y, H)},
            member(pair(x, y), relation_domain(star)),
            subgroup.unfold(H, G, star),
            sets.subset.unfold(H, G),
            specialize(inclusion, x),
            specialize(inclusion, y),
            group_pair_in_operation_domain,
        )

    parent_domain = b.store(
        "subgroup_pair_in_parent_operation_domain", subgroup_pair_in_parent_operation_domain()
    )

    def subgroup_operation() -> Theorem:
        """subgroup(H, G, *), x ∈ H, y ∈ H ⊢ x ★ y = x * y, with ★ the restriction of * to H × H"""
        app = sets.app
        p = pair(x, y)
        r = app(restricted, p)
        on_subgroup = {G: H, star: restricted}

        return restate(
            {subgroup(H, G, star), member(x, H), member(y, H)},
            eq(r, app(star, p)),
            subgroup.unfold(H, G, star),
            # r is the value of * at (x, y) if its graph edge lies in *
            app.uniqueness(r, star, p),
            # r's graph edge lies in ★ because ★ is a functional relation on H × H
            app.specification(restricted, p),
            must(kernel.instantiate_variables(group_operation_is_functional, on_subgroup)),
            must(kernel.instantiate_variables(group_pair_in_operation_domain, on_subgroup)),
            # ... and every edge of ★ is an edge of *
            b.axiom(
                "restricted_function_membership",
                u=pair(p, r),
                f=star,
                x=cartesian_product(H, H),
            ),
            group_operation_is_functional,
            parent_domain,
        )

    b.store("subgroup_operation", subgroup_operation())

    logger.info("group theory ready: %d theorems", len(b.theory.theorems))
    return GroupTheory(
        theory=b.theory,
        set_theory=sets,
        binary_function=binary_function,
        associativity=associativity,
        is_neutral=is_neutral,
        identity_existence=identity_existence,
        is_inverse=is_inverse,
        inverse_existence=inverse_existence,
        group=group,
        subgroup=subgroup,
        identity=identity,
        inverse=inverse,
    )
