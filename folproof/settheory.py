"""The ambient set-theory library.

Only the fragment the group-theory library relies on is axiomatised: the
empty set, ordered pairs and cartesian products, functions as sets of pairs,
their domains and restrictions. Free variables in axioms are implicitly
universally quantified.

Function application ``app(f, x)`` is not primitive. It is defined with
``conditional_description`` from ``function_application_uniqueness``, so
``app(f, x)`` is the unique ``z`` with ``(x, z) ∈ f`` whenever ``f`` is
functional and ``x`` lies in its domain, and ``∅`` otherwise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cache
from types import MappingProxyType

from .description import EMPTY_SET, conditional_description
from .helpers import app as fn_app
from .helpers import atom, atomic, conj, eq, exists, exists_one, fn, forall, iff, implies, neg, pred, var
from .sequent import Theorem
from .signature import Signature
from .sorts import SET
from .tactics import restate
from .terms import Formula, Term
from .theory import FunctionDefinition, PredicateDefinition, Theory

logger = logging.getLogger(__name__)

a, b, f, u, x, y, z = (var(n) for n in ("a", "b", "f", "u", "x", "y", "z"))


# ---------------------------------------------------------------------------
# Notation
# ---------------------------------------------------------------------------


def member(element: Term, container: Term) -> Formula:
    """element ∈ container"""
    return atom("in", element, container)


def pair(first: Term, second: Term) -> Term:
    return fn_app("pair", first, second)


def cartesian_product(left: Term, right: Term) -> Term:
    return fn_app("cartesianProduct", left, right)


def relation_domain(relation: Term) -> Term:
    return fn_app("relationDomain", relation)


def restricted_function(function: Term, domain: Term) -> Term:
    return fn_app("restrictedFunction", function, domain)


def functional(relation: Term) -> Formula:
    return atom("functional", relation)


def function_from(function: Term, domain: Term, codomain: Term) -> Formula:
    return atom("functionFrom", function, domain, codomain)


# ---------------------------------------------------------------------------
# Signature and axioms
# ---------------------------------------------------------------------------


def set_signature() -> Signature:
    return Signature(
        sorts=MappingProxyType({SET: atomic(SET)}),
        functions=MappingProxyType(
            {
                "emptySet": fn("emptySet", []),
                "pair": fn("pair", ["x", "y"]),
                "cartesianProduct": fn("cartesianProduct", ["x", "y"]),
                "relationDomain": fn("relationDomain", ["f"]),
                "restrictedFunction": fn("restrictedFunction", ["f", "x"]),
            }
        ),
        predicates=MappingProxyType(
            {
                "in": pred("in", ["x", "y"]),
                "functional": pred("functional", ["f"]),
                "functionFrom": pred("functionFrom", ["f", "x", "y"]),
            }
        ),
    )


AXIOMS: tuple[tuple[str, Formula], ...] = (
    ("empty_set", neg(member(x, EMPTY_SET))),
    (
        "pair_in_cartesian_product",
        implies(conj(member(a, x), member(b, y)), member(pair(a, b), cartesian_product(x, y))),
    ),
    ("function_from_implies_functional", implies(function_from(f, x, y), functional(f))),
    (
        "function_from_implies_domain",
        implies(function_from(f, x, y), eq(relation_domain(f), x)),
    ),
    (
        "function_application_uniqueness",
        implies(
            conj(functional(f), member(x, relation_domain(f))),
            exists_one(z, member(pair(x, z), f)),
        ),
    ),
    (
        "restricted_function_membership",
        iff(
            member(u, restricted_function(f, x)),
            conj(member(u, f), exists((a, b), conj(member(a, x), eq(u, pair(a, b))))),
        ),
    ),
)


# ---------------------------------------------------------------------------
# Library
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SetTheory:
    theory: Theory
    subset: PredicateDefinition
    app: FunctionDefinition

    def axiom(self, name: str) -> Theorem:
        return self.theory.axiom(name)


@cache
def build_set_theory() -> SetTheory:
    theory = Theory("set_theory", set_signature())
    for name, formula in AXIOMS:
        theory = theory.with_axiom(name, formula)

    theory, subset = theory.define_predicate(
        "subset", (x, y), forall(z, implies(member(z, x), member(z, y)))
    )

    # {functional(f), x ∈ relationDomain(f)} ⊢ ∃!z. (x, z) ∈ f
    uniqueness_axiom = theory.axiom("function_application_uniqueness")
    graph = member(pair(x, z), f)
    application_uniqueness = restate(
        {functional(f), member(x, relation_domain(f))}, exists_one(z, graph), uniqueness_axiom
    )
    theory = theory.with_theorem("application_uniqueness", application_uniqueness)
    description = conditional_description(
        z, graph, application_uniqueness, signature=theory.signature
    )
    theory, app = theory.define_function("app", (f, x), description)

    logger.debug("set theory ready: %d axioms", len(theory.axioms))
    return SetTheory(theory, subset, app)
