import pytest

from folproof import kernel
from folproof.cli import check_fixture
from folproof.description import ConditionalDescription, conditional_description
from folproof.fixtures import (
    GroupFixture,
    all_groups,
    cyclic_group,
    cyclic_with_subgroup,
    klein_four,
    two_element_group,
    two_element_non_group,
)
from folproof.group_theory import G, H, GroupTheory, build_group_theory, op, star, x, y
from folproof.helpers import app, atom, const, eq, exists_one, var
from folproof.lemmas import symmetry, transitivity
from folproof.models import Evaluator, ModelError, Structure, set_theory_structure
from folproof.settheory import build_set_theory, cartesian_product, member, pair, restricted_function
from folproof.tactics import existence_and_uniqueness, must, restate

EMPTY = frozenset()


@pytest.fixture(scope="module")
def gt() -> GroupTheory:
    return build_group_theory()


def _evaluator(gt: GroupTheory, fixture: GroupFixture) -> Evaluator:
    return Evaluator(gt.theory, fixture.structure())


class TestSetStructure:
    def test_primitives(self) -> None:
        s = set_theory_structure({1, 2})
        assert s.universe == {1, 2, EMPTY}
        assert s.functions["pair"](1, 2) == (1, 2)
        assert s.functions["cartesianProduct"](frozenset({1}), frozenset({1, 2})) == {(1, 1), (1, 2)}
        assert s.functions["emptySet"]() == EMPTY
        assert s.predicates["in"](1, frozenset({1}))
        assert not s.predicates["in"](1, 1)

    def test_functions_as_graphs(self) -> None:
        s = set_theory_structure({1, 2})
        graph = frozenset({(1, 2), (2, 2)})
        assert s.predicates["functional"](graph)
        assert not s.predicates["functional"](graph | {(1, 1)})
        assert s.functions["relationDomain"](graph) == {1, 2}
        assert s.functions["restrictedFunction"](graph, frozenset({1})) == {(1, 2)}
        assert s.predicates["functionFrom"](graph, frozenset({1, 2}), frozenset({2}))
        assert not s.predicates["functionFrom"](graph, frozenset({1}), frozenset({2}))


class TestGroups:
    @pytest.mark.parametrize("fixture", all_groups(), ids=lambda f: f.name)
    def test_fixture_is_a_group(self, gt: GroupTheory, fixture: GroupFixture) -> None:
        ev = _evaluator(gt, fixture)
        assert ev.holds(gt.group(G, star), fixture.env())

    def test_non_group(self, gt: GroupTheory) -> None:
        fixture = two_element_non_group()
        ev = _evaluator(gt, fixture)
        env = fixture.env()
        assert ev.holds(gt.associativity(G, star), env)
        assert not ev.holds(gt.identity_existence(G, star), env)
        assert not ev.holds(gt.group(G, star), env)

    def test_identity_of_two_element_group(self, gt: GroupTheory) -> None:
        fixture = two_element_group()
        assert _evaluator(gt, fixture).term(gt.identity(G, star), fixture.env()) == "a"

    @pytest.mark.parametrize("fixture", all_groups(), ids=lambda f: f.name)
    def test_identity(self, gt: GroupTheory, fixture: GroupFixture) -> None:
        ev = _evaluator(gt, fixture)
        assert ev.term(gt.identity(G, star), fixture.env()) == fixture.identity

    @pytest.mark.parametrize("fixture", all_groups(), ids=lambda f: f.name)
    def test_inverse_involution_and_cancellation(
        self, gt: GroupTheory, fixture: GroupFixture
    ) -> None:
        ev = _evaluator(gt, fixture)
        inv = gt.inverse(x, G, star)
        for element in fixture.carrier:
            env = fixture.env(x=element)
            assert ev.term(gt.inverse(inv, G, star), env) == element
            assert ev.term(op(inv, star, x), env) == fixture.identity
            assert ev.term(op(x, star, inv), env) == fixture.identity
            value = ev.term(inv, env)
            assert fixture.op(element, value) == fixture.identity

    def test_klein_elements_are_self_inverse(self, gt: GroupTheory) -> None:
        fixture = klein_four()
        ev = _evaluator(gt, fixture)
        for element in fixture.carrier:
            assert ev.term(gt.inverse(x, G, star), fixture.env(x=element)) == element

    @pytest.mark.parametrize("fixture", [cyclic_group(3), klein_four()], ids=lambda f: f.name)
    def test_symmetry(self, gt: GroupTheory, fixture: GroupFixture) -> None:
        ev = _evaluator(gt, fixture)
        for a in fixture.carrier:
            for b in fixture.carrier:
                env = fixture.env(x=a, y=b)
                assert ev.holds(gt.is_inverse(y, x, G, star), env) == ev.holds(
                    gt.is_inverse(x, y, G, star), env
                )


class TestSubgroup:
    def test_subgroup_holds(self, gt: GroupTheory) -> None:
        fixture = cyclic_with_subgroup()
        assert _evaluator(gt, fixture).holds(gt.subgroup(H, G, star), fixture.env())

    def test_non_subgroup(self, gt: GroupTheory) -> None:
        fixture = cyclic_with_subgroup()
        env = {**fixture.env(), H: frozenset({0, 1})}
        assert not _evaluator(gt, fixture).holds(gt.subgroup(H, G, star), env)

    def test_operations_coincide(self, gt: GroupTheory) -> None:
        fixture = cyclic_with_subgroup()
        ev = _evaluator(gt, fixture)
        restricted = restricted_function(star, cartesian_product(H, H))
        for a in fixture.subgroup:
            for b in fixture.subgroup:
                env = fixture.env(x=a, y=b)
                assert ev.term(op(x, restricted, y), env) == ev.term(op(x, star, y), env)
                assert ev.term(op(x, star, y), env) == (a + b) % 4


class TestDefaults:
    def test_identity_of_non_group_is_empty_set(self, gt: GroupTheory) -> None:
        fixture = two_element_non_group()
        assert _evaluator(gt, fixture).term(gt.identity(G, star), fixture.env()) == EMPTY

    def test_inverse_outside_carrier_is_empty_set(self, gt: GroupTheory) -> None:
        fixture = cyclic_group(3)
        env = fixture.env(x=EMPTY)
        assert _evaluator(gt, fixture).term(gt.inverse(x, G, star), env) == EMPTY

    def test_application_outside_domain_is_empty_set(self, gt: GroupTheory) -> None:
        fixture = cyclic_group(3)
        env = fixture.env(x=EMPTY, y=1)
        assert _evaluator(gt, fixture).term(op(x, star, y), env) == EMPTY

    @pytest.mark.parametrize(
        "fixture", [cyclic_group(3), two_element_non_group()], ids=lambda f: f.name
    )
    def test_inverse_is_total(self, gt: GroupTheory, fixture: GroupFixture) -> None:
        ev = _evaluator(gt, fixture)
        premise = gt.inverse.description.premise
        for element in fixture.structure().universe:
            env = fixture.env(x=element)
            value = ev.term(gt.inverse(x, G, star), env)
            if ev.holds(premise, env):
                assert ev.holds(gt.is_inverse(y, x, G, star), {**env, y: value})
            else:
                assert value == EMPTY

    def test_supplied_default_outside_premise(self) -> None:
        # choose(a, b) = the x with x = a when a ∈ b, and b otherwise
        a, b = var("a"), var("b")
        existence = must(kernel.right_exists(must(kernel.right_refl(a)), eq(x, a), x, a))
        uniqueness = restate(
            (eq(x, a), eq(y, a)), eq(x, y), transitivity(x, a, y), symmetry(y, a)
        )
        unique_a = existence_and_uniqueness(x, eq(x, a), y, existence, uniqueness)
        guarded = restate((member(a, b),), exists_one(x, eq(x, a)), unique_a)

        sets = build_set_theory().theory
        description = conditional_description(x, eq(x, a), guarded, default=b, signature=sets.signature)
        assert isinstance(description, ConditionalDescription)
        theory, choose = sets.define_function("choose", (a, b), description)

        one = frozenset({1})
        ev = Evaluator(theory, set_theory_structure({1, 2, one}))

        inside = {a: 1, b: one}
        assert ev.holds(member(a, b), inside)
        assert ev.holds(exists_one(x, description.formula), inside)
        assert ev.term(choose(a, b), inside) == 1

        outside = {a: 2, b: one}
        assert not ev.holds(member(a, b), outside)
        assert ev.holds(exists_one(x, description.formula), outside)
        assert ev.term(choose(a, b), outside) == one
        assert ev.term(choose(a, b), outside) != EMPTY


class TestEvaluator:
    def test_unassigned_variable(self, gt: GroupTheory) -> None:
        ev = Evaluator(gt.theory, set_theory_structure({0}))
        with pytest.raises(ModelError):
            ev.term(var("q"), {})

    def test_missing_interpretation(self, gt: GroupTheory) -> None:
        ev = Evaluator(gt.theory, Structure(universe=frozenset({0})))
        with pytest.raises(ModelError):
            ev.term(const("emptySet"))
        with pytest.raises(ModelError):
            ev.holds(atom("in", const("zero"), const("zero")))

    def test_ambiguous_description(self, gt: GroupTheory) -> None:
        # "in" holds of everything, so app(f, x) has every candidate as its value
        structure = set_theory_structure({0, 1})
        structure = Structure(
            structure.universe,
            structure.functions,
            {**structure.predicates, "in": lambda a, b: True},
        )
        ev = Evaluator(gt.theory, structure)
        with pytest.raises(ModelError):
            ev.term(app("app", const("emptySet"), const("emptySet")))

    def test_membership_of_pairs(self, gt: GroupTheory) -> None:
        fixture = cyclic_group(3)
        ev = _evaluator(gt, fixture)
        env = fixture.env(x=1, y=2)
        assert ev.holds(member(pair(x, y), cartesian_product(G, G)), env)


@pytest.mark.parametrize(
    "fixture",
    [two_element_group(), cyclic_with_subgroup(), two_element_non_group()],
    ids=lambda f: f.name,
)
def test_library_theorems_hold(gt: GroupTheory, fixture: GroupFixture) -> None:
    assert check_fixture(gt.theory, fixture) == []
