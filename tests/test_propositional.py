import pytest

from folproof.helpers import atom, conj, disj, eq, forall, iff, implies, neg, var
from folproof.propositional import DecisionLimitExceeded, is_valid
from folproof.sequent import Sequent

p, q, r = atom("p"), atom("q"), atom("r")
x, y = var("x"), var("y")


def test_excluded_middle() -> None:
    assert is_valid(Sequent.of((), disj(p, neg(p))))


def test_atom_alone_is_not_valid() -> None:
    assert not is_valid(Sequent.of((), p))


def test_empty_sequent_is_not_valid() -> None:
    assert not is_valid(Sequent.of())


def test_modus_ponens_from_premises() -> None:
    premises = [Sequent.of((), implies(p, q)), Sequent.of((), p)]
    assert is_valid(Sequent.of((), q), premises)


def test_premise_with_assumptions() -> None:
    # p ⊢ q and q ⊢ r give p ⊢ r
    premises = [Sequent.of(p, q), Sequent.of(q, r)]
    assert is_valid(Sequent.of(p, r), premises)
    assert not is_valid(Sequent.of(r, p), premises)


def test_conjunction_on_the_left() -> None:
    assert is_valid(Sequent.of(conj(p, q), q))
    assert is_valid(Sequent.of((p, q), conj(q, p)))


def test_biconditional() -> None:
    assert is_valid(Sequent.of((iff(p, q), q), p))


def test_equations_are_opaque_atoms() -> None:
    assert not is_valid(Sequent.of(eq(x, y), eq(y, x)))


def test_quantified_atoms_up_to_renaming() -> None:
    assert is_valid(Sequent.of(forall(x, atom("P", x)), forall(y, atom("P", y))))


def test_decision_limit() -> None:
    target = Sequent.of((), disj(iff(p, q), iff(p, neg(q))))
    assert is_valid(target, limit=100)
    with pytest.raises(DecisionLimitExceeded):
        is_valid(target, limit=0)


def test_empty_premise_is_contradiction() -> None:
    assert is_valid(Sequent.of(p, q), [Sequent.of((), ())])
    assert is_valid(Sequent.of((), disj(p, q)), [Sequent.of((), ())], limit=0)
