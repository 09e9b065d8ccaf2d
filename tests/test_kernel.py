import pytest

from folproof import kernel
from folproof.helpers import atom, disj, eq, exists, exists_one, forall, iff, implies, lam, neg, var
from folproof.result import Err, Ok
from folproof.sequent import RuleViolation, Sequent, Theorem
from folproof.settheory import build_set_theory
from folproof.tactics import cases, must, restate, specialize
from folproof.terms import TRUE

a, b = var("a"), var("b")
x, y, z = var("x"), var("y"), var("z")
p, q = atom("p"), atom("q")


def _rejected(result, rule: str) -> RuleViolation:
    match result:
        case Err(error):
            assert error.rule == rule
            return error
        case Ok(value):
            pytest.fail(f"expected {rule} to reject, got {value}")


class TestSeal:
    def test_theorems_cannot_be_forged(self) -> None:
        with pytest.raises(TypeError):
            Theorem(Sequent.of((), p), "forged", (), frozenset())

    def test_kernel_theorems_record_their_rule(self) -> None:
        thm = must(kernel.hypothesis(p))
        assert thm.rule == "hypothesis"
        assert thm.left == {p} and thm.right == {p}
        assert thm.size == 1


class TestStructural:
    def test_weakening(self) -> None:
        thm = must(kernel.weakening(must(kernel.hypothesis(p)), left=[q]))
        assert thm.left == {p, q}
        assert thm.premises[0].rule == "hypothesis"

    def test_cut(self) -> None:
        first = must(kernel.hypothesis(p))
        second = restate((p,), disj(p, q))
        result = must(kernel.cut(first, second, p))
        assert result.left == {p}
        assert result.right == {disj(p, q)}

    def test_cut_requires_the_formula(self) -> None:
        _rejected(kernel.cut(must(kernel.hypothesis(p)), must(kernel.hypothesis(q)), q), "cut")

    def test_tautology_rejects_non_consequence(self) -> None:
        error = _rejected(kernel.tautology(Sequent.of((), p)), "tautology")
        assert "does not follow" in error.message

    def test_bound_variables_never_match_free_ones(self) -> None:
        reflexive = must(kernel.right_forall(must(kernel.right_refl(x)), eq(x, x), x))
        lookalike = var("%0")
        _rejected(
            kernel.tautology(Sequent.of((), forall(x, eq(x, lookalike))), reflexive),
            "tautology",
        )
        assert not reflexive.sequent.alpha_equivalent(Sequent.of((), forall(x, eq(x, lookalike))))

    def test_rejections_are_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("DEBUG", logger="folproof.kernel"):
            kernel.tautology(Sequent.of((), q))
        assert any("rejected tautology" in r.getMessage() for r in caplog.records)


class TestEquality:
    def test_reflexivity(self) -> None:
        assert must(kernel.right_refl(a)).right == {eq(a, a)}

    def test_right_substitution(self) -> None:
        start = must(kernel.hypothesis(atom("P", a)))
        thm = must(kernel.right_subst_eq(start, a, b, z, atom("P", z)))
        assert thm.left == {atom("P", a), eq(a, b)}
        assert thm.right == {atom("P", b)}

    def test_right_substitution_needs_instance(self) -> None:
        start = must(kernel.hypothesis(atom("P", a)))
        _rejected(kernel.right_subst_eq(start, b, a, z, atom("P", z)), "right_subst_eq")

    def test_left_substitution(self) -> None:
        start = must(kernel.hypothesis(atom("P", a)))
        thm = must(kernel.left_subst_eq(start, a, b, z, atom("P", z)))
        assert thm.left == {eq(a, b), atom("P", b)}
        assert thm.right == {atom("P", a)}


class TestQuantifiers:
    def test_right_forall(self) -> None:
        thm = must(kernel.right_forall(must(kernel.right_refl(x)), eq(x, x), x))
        assert thm.right == {forall(x, eq(x, x))}

    def test_right_forall_eigenvariable(self) -> None:
        thm = must(kernel.hypothesis(atom("P", x)))
        error = _rejected(kernel.right_forall(thm, atom("P", x), x), "right_forall")
        assert "eigenvariable" in error.message

    def test_left_forall(self) -> None:
        thm = must(kernel.left_forall(must(kernel.hypothesis(atom("P", a))), atom("P", x), x, a))
        assert thm.left == {forall(x, atom("P", x))}

    def test_instantiate_forall(self) -> None:
        general = must(kernel.right_forall(must(kernel.right_refl(x)), eq(x, x), x))
        thm = must(kernel.instantiate_forall(general, forall(y, eq(y, y)), a))
        assert thm.right == {eq(a, a)}

    def test_instantiate_forall_needs_a_universal(self) -> None:
        _rejected(
            kernel.instantiate_forall(must(kernel.right_refl(a)), eq(a, a), b),
            "instantiate_forall",
        )

    def test_right_exists(self) -> None:
        thm = must(kernel.right_exists(must(kernel.right_refl(a)), eq(x, a), x, a))
        assert thm.right == {exists(x, eq(x, a))}

    def test_left_exists_eigenvariable(self) -> None:
        thm = must(kernel.hypothesis(atom("P", x)))
        _rejected(kernel.left_exists(thm, atom("P", x), x), "left_exists")

    def test_exists_one_expansion(self) -> None:
        expansion = kernel.exists_one_expansion(exists_one(x, atom("P", x)))
        assert expansion == exists(var("x'"), forall(x, iff(atom("P", x), eq(x, var("x'")))))

    def test_exists_one_rules_need_the_expansion(self) -> None:
        _rejected(
            kernel.right_exists_one(must(kernel.hypothesis(p)), exists_one(x, atom("P", x))),
            "right_exists_one",
        )
        _rejected(
            kernel.left_exists_one(must(kernel.hypothesis(p)), exists_one(x, atom("P", x))),
            "left_exists_one",
        )


class TestInstantiation:
    def test_variables(self) -> None:
        thm = must(kernel.instantiate_variables(must(kernel.hypothesis(atom("P", x))), {x: a}))
        assert thm.left == {atom("P", a)} and thm.right == {atom("P", a)}

    def test_predicates(self) -> None:
        thm = must(kernel.hypothesis(atom("P", a)))
        inst = must(kernel.instantiate_predicates(thm, {"P": lam(x, eq(x, b))}))
        assert inst.right == {eq(a, b)}

    def test_constrained_symbols_are_refused(self) -> None:
        axiom = build_set_theory().axiom("empty_set")
        assert "in" in axiom.constrained
        error = _rejected(
            kernel.instantiate_predicates(axiom, {"in": lam((a, b), TRUE)}),
            "instantiate_predicates",
        )
        assert "in" in error.message

    def test_arity_mismatch_is_a_rejection(self) -> None:
        thm = must(kernel.hypothesis(atom("P", a)))
        _rejected(
            kernel.instantiate_predicates(thm, {"P": lam((x, y), eq(x, y))}),
            "instantiate_predicates",
        )

    def test_constraints_propagate(self) -> None:
        axiom = build_set_theory().axiom("empty_set")
        derived = must(kernel.instantiate_variables(axiom, {x: a}))
        assert derived.constrained == axiom.constrained


class TestTactics:
    def test_specialize_peels_guards(self) -> None:
        quantified = forall(x, implies(atom("A", x), atom("B", x)))
        thm = specialize(quantified, a)
        assert thm.right == {atom("B", a)}
        assert atom("A", a) in thm.left

    def test_cases_combines_branches(self) -> None:
        goal = disj(p, q)
        holds = restate((p,), goal)
        fails = restate((neg(p), q), goal)
        thm = cases(goal, [(p, holds), (neg(p), fails)])
        assert thm.left == {q}
        assert thm.right == {goal}

    def test_cases_rejects_non_exhaustive_guards(self) -> None:
        with pytest.raises(RuleViolation, match="not exhaustive"):
            cases(q, [(p, restate((p, q), q))])

    def test_cases_requires_guard_on_the_left(self) -> None:
        with pytest.raises(RuleViolation, match="does not assume its guard"):
            cases(q, [(p, must(kernel.hypothesis(q))), (neg(p), must(kernel.hypothesis(q)))])

    def test_must_raises_the_violation(self) -> None:
        with pytest.raises(RuleViolation):
            must(kernel.tautology(Sequent.of((), p)))
