import dataclasses

import pytest

from folproof import kernel
from folproof.description import EMPTY_SET, ConditionalDescription
from folproof.group_theory import G, H, GroupTheory, _forall_part, build_group_theory, e, op, star, x, y
from folproof.helpers import conj, eq, exists_one, forall, iff, implies, var
from folproof.sequent import RuleViolation, Sequent
from folproof.settheory import (
    build_set_theory,
    cartesian_product,
    functional,
    member,
    pair,
    relation_domain,
    restricted_function,
)
from folproof.tactics import must
from folproof.theory import DefinitionError, DuplicateTheoremError

f, z = var("f"), var("z")


@pytest.fixture(scope="module")
def gt() -> GroupTheory:
    return build_group_theory()


def _proves(gt: GroupTheory, name: str, left, right) -> bool:
    return gt.theorem(name).sequent.alpha_equivalent(Sequent.of(left, right))


class TestSetTheory:
    def test_axioms(self) -> None:
        sets = build_set_theory()
        assert set(sets.theory.axioms) == {
            "empty_set",
            "pair_in_cartesian_product",
            "function_from_implies_functional",
            "function_from_implies_domain",
            "function_application_uniqueness",
            "restricted_function_membership",
        }

    def test_application_is_a_conditional_description(self) -> None:
        app = build_set_theory().app
        assert isinstance(app.description, ConditionalDescription)
        assert app.description.premise == conj(functional(f), member(x, relation_domain(f)))
        assert app.description.base_formula == member(pair(x, z), f)
        assert app.description.default == EMPTY_SET

    def test_application_characterisation(self) -> None:
        app = build_set_theory().app
        expected = Sequent.of((), forall(z, iff(eq(z, app(f, x)), app.description.formula)))
        assert app.definition.sequent.alpha_equivalent(expected)
        assert not app.definition.left


class TestDefinitions:
    def test_predicates(self, gt: GroupTheory) -> None:
        assert set(gt.theory.predicate_definitions) == {
            "subset",
            "binaryFunction",
            "associativity",
            "isNeutral",
            "identityExistence",
            "isInverse",
            "inverseExistence",
            "group",
            "subgroup",
        }

    def test_group_body(self, gt: GroupTheory) -> None:
        assert gt.group.body == conj(
            gt.binary_function(G, star),
            gt.associativity(G, star),
            gt.identity_existence(G, star),
            gt.inverse_existence(G, star),
        )

    def test_identity(self, gt: GroupTheory) -> None:
        d = gt.identity.description
        assert isinstance(d, ConditionalDescription)
        assert d.premise == gt.group(G, star)
        assert d.base_formula == gt.is_neutral(e, G, star)
        assert d.default == EMPTY_SET
        assert d.is_total

    def test_inverse(self, gt: GroupTheory) -> None:
        d = gt.inverse.description
        assert isinstance(d, ConditionalDescription)
        assert d.premise == conj(gt.group(G, star), member(x, G))
        assert d.base_formula == gt.is_inverse(y, x, G, star)
        assert gt.inverse.params == (x, G, star)

    def test_definitions_are_unconditional(self, gt: GroupTheory) -> None:
        for definition in (gt.identity, gt.inverse):
            assert not definition.definition.left
            assert "group" in definition.definition.constrained

    def test_symbol_cannot_be_redefined(self, gt: GroupTheory) -> None:
        with pytest.raises(DefinitionError):
            gt.theory.define_predicate("group", (G, star), gt.group.body)

    def test_store_is_append_only(self, gt: GroupTheory) -> None:
        with pytest.raises(DuplicateTheoremError):
            gt.theory.with_theorem("inverse_symmetry", gt.theorem("identity_uniqueness"))

    def test_neutral_part_needs_a_conjunction(self) -> None:
        with pytest.raises(TypeError, match="conjunction"):
            _forall_part(eq(x, y))

    def test_characterization_needs_a_biconditional(self) -> None:
        reflexive = must(kernel.right_forall(must(kernel.right_refl(z)), eq(z, z), z))
        broken = dataclasses.replace(build_set_theory().app, definition=reflexive)
        with pytest.raises(RuleViolation, match="biconditional"):
            broken.specification(f, x)


class TestTheorems:
    def test_all_stored(self, gt: GroupTheory) -> None:
        assert gt.theory.theorems.names == (
            "application_uniqueness",
            "group_operation_is_functional",
            "group_operation_domain",
            "group_pair_in_operation_domain",
            "identity_uniqueness",
            "inverse_uniqueness",
            "inverse_symmetry",
            "inverse_is_inverse",
            "inverse_is_involutive",
            "identity_is_neutral",
            "inverse_cancellation",
            "subgroup_pair_in_parent_operation_domain",
            "subgroup_operation",
        )

    def test_operation_facts(self, gt: GroupTheory) -> None:
        assert _proves(gt, "group_operation_is_functional", gt.group(G, star), functional(star))
        assert _proves(
            gt,
            "group_operation_domain",
            gt.group(G, star),
            eq(relation_domain(star), cartesian_product(G, G)),
        )
        assert _proves(
            gt,
            "group_pair_in_operation_domain",
            (gt.group(G, star), member(x, G), member(y, G)),
            member(pair(x, y), relation_domain(star)),
        )

    def test_identity_uniqueness(self, gt: GroupTheory) -> None:
        assert _proves(
            gt, "identity_uniqueness", gt.group(G, star), exists_one(e, gt.is_neutral(e, G, star))
        )

    def test_inverse_uniqueness(self, gt: GroupTheory) -> None:
        assert _proves(
            gt,
            "inverse_uniqueness",
            (gt.group(G, star), member(x, G)),
            exists_one(y, gt.is_inverse(y, x, G, star)),
        )

    def test_inverse_symmetry(self, gt: GroupTheory) -> None:
        statement = forall(
            x,
            implies(
                member(x, G),
                implies(gt.is_inverse(y, x, G, star), gt.is_inverse(x, y, G, star)),
            ),
        )
        assert _proves(gt, "inverse_symmetry", gt.group(G, star), statement)

    def test_inverse_is_inverse(self, gt: GroupTheory) -> None:
        assert _proves(
            gt,
            "inverse_is_inverse",
            (gt.group(G, star), member(x, G)),
            gt.is_inverse(gt.inverse(x, G, star), x, G, star),
        )

    def test_inverse_is_involutive(self, gt: GroupTheory) -> None:
        inv = gt.inverse
        statement = forall(x, implies(member(x, G), eq(inv(inv(x, G, star), G, star), x)))
        assert _proves(gt, "inverse_is_involutive", gt.group(G, star), statement)

    def test_identity_is_neutral(self, gt: GroupTheory) -> None:
        assert _proves(
            gt,
            "identity_is_neutral",
            gt.group(G, star),
            gt.is_neutral(gt.identity(G, star), G, star),
        )

    def test_inverse_cancellation(self, gt: GroupTheory) -> None:
        inv, unit = gt.inverse(x, G, star), gt.identity(G, star)
        assert _proves(
            gt,
            "inverse_cancellation",
            (gt.group(G, star), member(x, G)),
            conj(eq(op(x, star, inv), unit), eq(op(inv, star, x), unit)),
        )

    def test_subgroup_operation(self, gt: GroupTheory) -> None:
        restricted = restricted_function(star, cartesian_product(H, H))
        assert _proves(
            gt,
            "subgroup_operation",
            (gt.subgroup(H, G, star), member(x, H), member(y, H)),
            eq(op(x, restricted, y), op(x, star, y)),
        )

    def test_theorems_rest_on_the_library(self, gt: GroupTheory) -> None:
        thm = gt.theorem("subgroup_operation")
        assert {"subgroup", "app", "restrictedFunction"} <= thm.constrained
        assert thm.size > 1

    def test_lookup(self, gt: GroupTheory) -> None:
        assert gt.theory.lookup("inverse") is gt.inverse.definition
        assert gt.theory.lookup("empty_set") is gt.theory.axiom("empty_set")
        assert gt.theory.lookup("missing") is None
        with pytest.raises(KeyError):
            gt.theory.theorem("missing")


def test_library_is_built_once() -> None:
    assert build_group_theory() is build_group_theory()
