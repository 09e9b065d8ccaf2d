"""Builder helpers for constructing terms, formulas and signatures.

These are the primary public API for writing theories. Prefer them over
constructing AST nodes directly.
"""

from collections.abc import Sequence

from folproof.signature import FnParam, FnSymbol, PredSymbol
from folproof.sorts import SET, AtomicSort, SortRef
from folproof.terms import (
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
    Term,
    UniqueExistentialQuant,
    UniversalQuant,
    Var,
)

S = SortRef


def atomic(name: str) -> AtomicSort:
    return AtomicSort(name=S(name))


def param(name: str, sort: str = SET) -> FnParam:
    return FnParam(name=name, sort=S(sort))


def fn(name: str, params: Sequence[str], result: str = SET, sort: str = SET) -> FnSymbol:
    """Function symbol over a single parameter sort (the common case)."""
    return FnSymbol(
        name=name,
        params=tuple(param(p, sort) for p in params),
        result=S(result),
    )


def pred(name: str, params: Sequence[str], sort: str = SET) -> PredSymbol:
    return PredSymbol(name=name, params=tuple(param(p, sort) for p in params))


def var(name: str, sort: str = SET) -> Var:
    return Var(name=name, sort=S(sort))


def variables(*names: str, sort: str = SET) -> tuple[Var, ...]:
    return tuple(var(n, sort) for n in names)


def app(fn_name: str, *args: Term) -> FnApp:
    return FnApp(fn_name=fn_name, args=tuple(args))


def const(name: str) -> FnApp:
    return FnApp(fn_name=name, args=())


def atom(pred_name: str, *args: Term) -> PredApp:
    return PredApp(pred_name=pred_name, args=tuple(args))


def eq(lhs: Term, rhs: Term) -> Equation:
    return Equation(lhs=lhs, rhs=rhs)


def neg(formula: Formula) -> Negation:
    return Negation(formula=formula)


def conj(*conjuncts: Formula) -> Conjunction:
    return Conjunction(conjuncts=tuple(conjuncts))


def disj(*disjuncts: Formula) -> Disjunction:
    return Disjunction(disjuncts=tuple(disjuncts))


def implies(antecedent: Formula, consequent: Formula) -> Implication:
    return Implication(antecedent=antecedent, consequent=consequent)


def iff(lhs: Formula, rhs: Formula) -> Biconditional:
    """Biconditional: lhs ⇔ rhs."""
    return Biconditional(lhs=lhs, rhs=rhs)


def forall(bound: Var | Sequence[Var], body: Formula) -> Formula:
    """∀ over one variable, or nested ∀s over several (outermost first)."""
    bound_vars = (bound,) if isinstance(bound, Var) else tuple(bound)
    for v in reversed(bound_vars):
        body = UniversalQuant(variable=v, body=body)
    return body


def exists(bound: Var | Sequence[Var], body: Formula) -> Formula:
    bound_vars = (bound,) if isinstance(bound, Var) else tuple(bound)
    for v in reversed(bound_vars):
        body = ExistentialQuant(variable=v, body=body)
    return body


def exists_one(bound: Var, body: Formula) -> UniqueExistentialQuant:
    return UniqueExistentialQuant(variable=bound, body=body)


def lam(params: Var | Sequence[Var], body: Formula) -> Lambda:
    bound_vars = (params,) if isinstance(params, Var) else tuple(params)
    return Lambda(params=bound_vars, body=body)
