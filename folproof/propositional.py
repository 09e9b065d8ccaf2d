"""Propositional decision procedure.

Decides whether a target sequent follows from premise sequents by
propositional reasoning alone. Equations, predicate applications and
quantified formulas are opaque atoms, identified up to α-equivalence.

The question "do the premises entail the target" is turned into a CNF
satisfiability problem (Tseitin encoding) and handed to a DPLL solver with
unit propagation and pure-literal elimination. The target is valid iff the
clause set is unsatisfiable.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from typing import assert_never

from .config import settings
from .sequent import Sequent
from .substitution import canonical
from .terms import (
    Biconditional,
    Conjunction,
    Disjunction,
    Equation,
    ExistentialQuant,
    Formula,
    Implication,
    Negation,
    PredApp,
    UniqueExistentialQuant,
    UniversalQuant,
)

logger = logging.getLogger(__name__)

Clause = frozenset[int]


class DecisionLimitExceeded(Exception):
    """The solver ran out of its decision budget."""


# ---------------------------------------------------------------------------
# Tseitin encoding
# ---------------------------------------------------------------------------


class _Encoder:
    def __init__(self) -> None:
        self.literals: dict[Formula, int] = {}
        self.clauses: list[Clause] = []
        self.atoms = 0
        self._next = 1

    def _fresh(self) -> int:
        var = self._next
        self._next += 1
        return var

    def _add(self, *lits: int) -> None:
        self.clauses.append(frozenset(lits))

    def literal(self, formula: Formula) -> int:
        if isinstance(formula, Negation):
            return -self.literal(formula.formula)
        key = canonical(formula)
        if key in self.literals:
            return self.literals[key]
        lit = self._encode(key)
        self.literals[key] = lit
        return lit

    def _encode(self, formula: Formula) -> int:
        match formula:
            case Equation() | PredApp() | UniversalQuant() | ExistentialQuant() | UniqueExistentialQuant():
                self.atoms += 1
                return self._fresh()
            case Conjunction(conjuncts=parts):
                lits = [self.literal(p) for p in parts]
                v = self._fresh()
                for lit in lits:
                    self._add(-v, lit)
                self._add(v, *(-lit for lit in lits))
                return v
            case Disjunction(disjuncts=parts):
                lits = [self.literal(p) for p in parts]
                v = self._fresh()
                self._add(-v, *lits)
                for lit in lits:
                    self._add(v, -lit)
                return v
            case Implication(antecedent=a, consequent=c):
                la, lc = self.literal(a), self.literal(c)
                v = self._fresh()
                self._add(-v, -la, lc)
                self._add(v, la)
                self._add(v, -lc)
                return v
            case Biconditional(lhs=lhs, rhs=rhs):
                ll, lr = self.literal(lhs), self.literal(rhs)
                v = self._fresh()
                self._add(-v, -ll, lr)
                self._add(-v, ll, -lr)
                self._add(v, ll, lr)
                self._add(v, -ll, -lr)
                return v
            case Negation():
                raise AssertionError("negations are encoded as negative literals")
            case _:
                assert_never(formula)

    def premise(self, sequent: Sequent) -> None:
        self._add(
            *(-self.literal(f) for f in sequent.left),
            *(self.literal(f) for f in sequent.right),
        )

    def negated_target(self, sequent: Sequent) -> None:
        for f in sequent.left:
            self._add(self.literal(f))
        for f in sequent.right:
            self._add(-self.literal(f))


# ---------------------------------------------------------------------------
# DPLL
# ---------------------------------------------------------------------------


def _assign(clauses: list[Clause], lit: int) -> list[Clause] | None:
    """Simplify under ``lit`` being true; None on an empty clause."""
    out: list[Clause] = []
    for clause in clauses:
        if lit in clause:
            continue
        if -lit in clause:
            reduced = clause - {-lit}
            if not reduced:
                return None
            out.append(reduced)
        else:
            out.append(clause)
    return out


class _Solver:
    def __init__(self, limit: int):
        self.limit = limit
        self.decisions = 0

    def _simplify(self, clauses: list[Clause]) -> list[Clause] | None:
        while True:
            unit = next((c for c in clauses if len(c) == 1), None)
            if unit is not None:
                (lit,) = unit
                result = _assign(clauses, lit)
                if result is None:
                    return None
                clauses = result
                continue
            polarity = {lit for c in clauses for lit in c}
            pure = next((lit for lit in polarity if -lit not in polarity), None)
            if pure is None:
                return clauses
            clauses = [c for c in clauses if pure not in c]

    def satisfiable(self, clauses: list[Clause] | None) -> bool:
        if clauses is None:
            return False
        clauses = self._simplify(clauses)
        if clauses is None or frozenset() in clauses:
            return False
        if not clauses:
            return True

        self.decisions += 1
        if self.decisions > self.limit:
            raise DecisionLimitExceeded(f"gave up after {self.limit} decisions")

        shortest = min(len(c) for c in clauses)
        counts = Counter(lit for c in clauses if len(c) == shortest for lit in c)
        lit, _ = counts.most_common(1)[0]
        return self.satisfiable(_assign(clauses, lit)) or self.satisfiable(
            _assign(clauses, -lit)
        )


def is_valid(
    target: Sequent, premises: Iterable[Sequent] = (), limit: int | None = None
) -> bool:
    """True if ``target`` follows propositionally from ``premises``.

    Raises ``DecisionLimitExceeded`` when the search exceeds ``limit``
    decisions (``FOLPROOF_DECISION_LIMIT`` when not given).
    """
    if limit is None:
        limit = settings().decision_limit

    encoder = _Encoder()
    for premise in premises:
        encoder.premise(premise)
    encoder.negated_target(target)
    # drop clauses containing both l and ¬l
    clauses = [c for c in encoder.clauses if not any(-lit in c for lit in c)]

    solver = _Solver(limit)
    valid = not solver.satisfiable(clauses)
    logger.debug(
        "%s: %d atoms, %d clauses, %d decisions -> %s",
        target,
        encoder.atoms,
        len(clauses),
        solver.decisions,
        "valid" if valid else "invalid",
    )
    return valid
