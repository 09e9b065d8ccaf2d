"""Variables, substitution and α-equivalence.

Substitution is simultaneous and capture-avoiding. Whenever a binder would
capture a variable of an incoming term, the binder is renamed to a fresh
variable (the base name with primes appended) before descending.

α-equivalence is decided by comparing canonical forms, in which every bound
variable is replaced by a ``BoundIndex`` holding its binding depth. A
``BoundIndex`` never equals a ``Var``, whatever the variable is named.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import cache
from typing import assert_never

from .terms import (
    Biconditional,
    Conjunction,
    Disjunction,
    Equation,
    ExistentialQuant,
    FnApp,
    Formula,
    Implication,
    Lambda,
    Negation,
    PredApp,
    Quantifier,
    Term,
    UniqueExistentialQuant,
    UniversalQuant,
    Var,
)

Substitution = Mapping[Var, Term]

# ---------------------------------------------------------------------------
# Variable and symbol collection
# ---------------------------------------------------------------------------


def term_vars(term: Term) -> frozenset[Var]:
    match term:
        case Var():
            return frozenset((term,))
        case FnApp(args=args):
            return frozenset().union(*(term_vars(a) for a in args))
        case _:
            assert_never(term)


def _children(formula: Formula) -> tuple[Formula, ...]:
    match formula:
        case Equation() | PredApp():
            return ()
        case Negation(formula=inner):
            return (inner,)
        case Conjunction(conjuncts=parts):
            return parts
        case Disjunction(disjuncts=parts):
            return parts
        case Implication(antecedent=a, consequent=c):
            return (a, c)
        case Biconditional(lhs=lhs, rhs=rhs):
            return (lhs, rhs)
        case UniversalQuant(body=body) | ExistentialQuant(body=body) | UniqueExistentialQuant(body=body):
            return (body,)
        case _:
            assert_never(formula)


def _atom_terms(formula: Equation | PredApp) -> tuple[Term, ...]:
    if isinstance(formula, Equation):
        return (formula.lhs, formula.rhs)
    return formula.args


@cache
def free_vars(formula: Formula) -> frozenset[Var]:
    """Variables occurring free in ``formula``."""
    match formula:
        case Equation() | PredApp():
            return frozenset().union(*(term_vars(t) for t in _atom_terms(formula)))
        case UniversalQuant() | ExistentialQuant() | UniqueExistentialQuant():
            return free_vars(formula.body) - {formula.variable}
        case _:
            return frozenset().union(*(free_vars(c) for c in _children(formula)))


def free_vars_of(node: Term | Formula | Lambda) -> frozenset[Var]:
    if isinstance(node, (Var, FnApp)):
        return term_vars(node)
    if isinstance(node, Lambda):
        return free_vars(node.body) - set(node.params)
    return free_vars(node)


@cache
def all_vars(formula: Formula) -> frozenset[Var]:
    """Every variable occurring in ``formula``, free or bound."""
    match formula:
        case Equation() | PredApp():
            return frozenset().union(*(term_vars(t) for t in _atom_terms(formula)))
        case UniversalQuant() | ExistentialQuant() | UniqueExistentialQuant():
            return all_vars(formula.body) | {formula.variable}
        case _:
            return frozenset().union(*(all_vars(c) for c in _children(formula)))


def _term_fns(term: Term) -> set[str]:
    if isinstance(term, FnApp):
        names = {term.fn_name}
        for a in term.args:
            names |= _term_fns(a)
        return names
    return set()


def symbols_of(formula: Formula) -> tuple[frozenset[str], frozenset[str]]:
    """Function and predicate names occurring in ``formula``."""
    fns: set[str] = set()
    preds: set[str] = set()

    def visit(f: Formula) -> None:
        if isinstance(f, (Equation, PredApp)):
            for t in _atom_terms(f):
                fns.update(_term_fns(t))
            if isinstance(f, PredApp):
                preds.add(f.pred_name)
            return
        for c in _children(f):
            visit(c)

    visit(formula)
    return frozenset(fns), frozenset(preds)


def fresh_var(base: Var, avoid: Iterable[Var]) -> Var:
    """``base`` with primes appended until its name is unused in ``avoid``."""
    taken = {v.name for v in avoid}
    name = base.name
    while name in taken:
        name += "'"
    return Var(name, base.sort)


# ---------------------------------------------------------------------------
# Substitution
# ---------------------------------------------------------------------------


def substitute_term(term: Term, mapping: Substitution) -> Term:
    match term:
        case Var():
            return mapping.get(term, term)
        case FnApp(fn_name=name, args=args):
            return FnApp(name, tuple(substitute_term(a, mapping) for a in args))
        case _:
            assert_never(term)


def substitute(formula: Formula, mapping: Substitution) -> Formula:
    """Simultaneously replace free variables of ``formula`` per ``mapping``."""
    mapping = {k: t for k, t in mapping.items() if k != t}
    if not mapping:
        return formula
    return _substitute(formula, mapping)


def _substitute(formula: Formula, mapping: Substitution) -> Formula:
    match formula:
        case Equation(lhs=lhs, rhs=rhs):
            return Equation(substitute_term(lhs, mapping), substitute_term(rhs, mapping))
        case PredApp(pred_name=name, args=args):
            return PredApp(name, tuple(substitute_term(a, mapping) for a in args))
        case Negation(formula=inner):
            return Negation(_substitute(inner, mapping))
        case Conjunction(conjuncts=parts):
            return Conjunction(tuple(_substitute(p, mapping) for p in parts))
        case Disjunction(disjuncts=parts):
            return Disjunction(tuple(_substitute(p, mapping) for p in parts))
        case Implication(antecedent=a, consequent=c):
            return Implication(_substitute(a, mapping), _substitute(c, mapping))
        case Biconditional(lhs=lhs, rhs=rhs):
            return Biconditional(_substitute(lhs, mapping), _substitute(rhs, mapping))
        case UniversalQuant() | ExistentialQuant() | UniqueExistentialQuant():
            return _substitute_binder(formula, mapping)
        case _:
            assert_never(formula)


def _substitute_binder(formula: Quantifier, mapping: Substitution) -> Formula:
    free = free_vars(formula)
    inner = {k: t for k, t in mapping.items() if k != formula.variable and k in free}
    if not inner:
        return formula

    incoming: frozenset[Var] = frozenset().union(*(term_vars(t) for t in inner.values()))
    variable, body = formula.variable, formula.body
    if variable.name in {v.name for v in incoming}:
        renamed = fresh_var(variable, incoming | all_vars(body) | set(inner))
        body = _substitute(body, {variable: renamed})
        variable = renamed
    return type(formula)(variable, _substitute(body, inner))


def apply_lambda(lam: Lambda, args: tuple[Term, ...]) -> Formula:
    if len(args) != lam.arity:
        raise ValueError(f"λ of arity {lam.arity} applied to {len(args)} arguments")
    return substitute(lam.body, dict(zip(lam.params, args, strict=True)))


def instantiate_predicates(formula: Formula, mapping: Mapping[str, Lambda]) -> Formula:
    """Replace every application of a schematic predicate by its λ-body.

    Binders of ``formula`` that would capture a free variable of some λ-body
    are renamed first.
    """
    if not mapping:
        return formula
    danger: frozenset[Var] = frozenset().union(*(free_vars_of(lam) for lam in mapping.values()))
    return _instantiate(formula, mapping, danger)


def _instantiate(formula: Formula, mapping: Mapping[str, Lambda], danger: frozenset[Var]) -> Formula:
    match formula:
        case PredApp(pred_name=name, args=args) if name in mapping:
            return apply_lambda(mapping[name], args)
        case Equation() | PredApp():
            return formula
        case Negation(formula=inner):
            return Negation(_instantiate(inner, mapping, danger))
        case Conjunction(conjuncts=parts):
            return Conjunction(tuple(_instantiate(p, mapping, danger) for p in parts))
        case Disjunction(disjuncts=parts):
            return Disjunction(tuple(_instantiate(p, mapping, danger) for p in parts))
        case Implication(antecedent=a, consequent=c):
            return Implication(_instantiate(a, mapping, danger), _instantiate(c, mapping, danger))
        case Biconditional(lhs=lhs, rhs=rhs):
            return Biconditional(_instantiate(lhs, mapping, danger), _instantiate(rhs, mapping, danger))
        case UniversalQuant() | ExistentialQuant() | UniqueExistentialQuant():
            variable, body = formula.variable, formula.body
            if variable.name in {v.name for v in danger}:
                renamed = fresh_var(variable, danger | all_vars(body))
                body = substitute(body, {variable: renamed})
                variable = renamed
            return type(formula)(variable, _instantiate(body, mapping, danger))
        case _:
            assert_never(formula)


# ---------------------------------------------------------------------------
# α-equivalence
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BoundIndex(Var):
    """The variable bound at binding depth ``name`` in a canonical form."""


@cache
def canonical(formula: Formula) -> Formula:
    """``formula`` with bound variables renamed after their binding depth."""
    return _canonical(formula, {}, 0)


def _canonical(formula: Formula, env: Mapping[Var, Term], depth: int) -> Formula:
    match formula:
        case UniversalQuant() | ExistentialQuant() | UniqueExistentialQuant():
            bound = BoundIndex(str(depth), formula.variable.sort)
            body = _canonical(formula.body, {**env, formula.variable: bound}, depth + 1)
            return type(formula)(bound, body)
        case Equation(lhs=lhs, rhs=rhs):
            return Equation(substitute_term(lhs, env), substitute_term(rhs, env))
        case PredApp(pred_name=name, args=args):
            return PredApp(name, tuple(substitute_term(a, env) for a in args))
        case Negation(formula=inner):
            return Negation(_canonical(inner, env, depth))
        case Conjunction(conjuncts=parts):
            return Conjunction(tuple(_canonical(p, env, depth) for p in parts))
        case Disjunction(disjuncts=parts):
            return Disjunction(tuple(_canonical(p, env, depth) for p in parts))
        case Implication(antecedent=a, consequent=c):
            return Implication(_canonical(a, env, depth), _canonical(c, env, depth))
        case Biconditional(lhs=lhs, rhs=rhs):
            return Biconditional(_canonical(lhs, env, depth), _canonical(rhs, env, depth))
        case _:
            assert_never(formula)


def alpha_equivalent(a: Formula, b: Formula) -> bool:
    return a == b or canonical(a) == canonical(b)
