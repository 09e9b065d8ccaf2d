"""Unicode pretty-printing of terms, formulas and sequents.

Membership ``in(a, b)`` prints as ``a ∈ b`` and the empty-set constant as
``∅``; everything else prints in prefix form.
"""

from __future__ import annotations

from collections.abc import Iterable
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
    Negation,
    PredApp,
    Term,
    UniqueExistentialQuant,
    UniversalQuant,
    Var,
)

_CONSTANT_GLYPHS = {"emptySet": "∅"}


def render_term(term: Term) -> str:
    match term:
        case Var(name=name):
            return name
        case FnApp(fn_name=name, args=()):
            return _CONSTANT_GLYPHS.get(name, name)
        case FnApp(fn_name=name, args=args):
            return f"{name}({', '.join(render_term(a) for a in args)})"
        case _:
            assert_never(term)


def _is_compound(formula: Formula) -> bool:
    match formula:
        case Conjunction(conjuncts=parts):
            return len(parts) > 0
        case Disjunction(disjuncts=parts):
            return len(parts) > 0
        case Implication() | Biconditional():
            return True
        case UniversalQuant() | ExistentialQuant() | UniqueExistentialQuant():
            return True
        case _:
            return False


def _wrap(formula: Formula) -> str:
    text = render_formula(formula)
    return f"({text})" if _is_compound(formula) else text


def render_formula(formula: Formula) -> str:
    match formula:
        case Equation(lhs=lhs, rhs=rhs):
            return f"{render_term(lhs)} = {render_term(rhs)}"
        case PredApp(pred_name="in", args=(element, container)):
            return f"{render_term(element)} ∈ {render_term(container)}"
        case PredApp(pred_name=name, args=()):
            return name
        case PredApp(pred_name=name, args=args):
            return f"{name}({', '.join(render_term(a) for a in args)})"
        case Negation(formula=Equation() as inner):
            return f"¬({render_formula(inner)})"
        case Negation(formula=PredApp(pred_name="in") as inner):
            return f"¬({render_formula(inner)})"
        case Negation(formula=inner):
            return f"¬{_wrap(inner)}"
        case Conjunction(conjuncts=()):
            return "⊤"
        case Conjunction(conjuncts=parts):
            return " ∧ ".join(_wrap(p) for p in parts)
        case Disjunction(disjuncts=()):
            return "⊥"
        case Disjunction(disjuncts=parts):
            return " ∨ ".join(_wrap(p) for p in parts)
        case Implication(antecedent=a, consequent=c):
            return f"{_wrap(a)} ⇒ {_wrap(c)}"
        case Biconditional(lhs=lhs, rhs=rhs):
            return f"{_wrap(lhs)} ⇔ {_wrap(rhs)}"
        case UniversalQuant(variable=v, body=body):
            return f"∀{v.name}. {render_formula(body)}"
        case ExistentialQuant(variable=v, body=body):
            return f"∃{v.name}. {render_formula(body)}"
        case UniqueExistentialQuant(variable=v, body=body):
            return f"∃!{v.name}. {render_formula(body)}"
        case _:
            assert_never(formula)


def render_sequent(left: Iterable[Formula], right: Iterable[Formula]) -> str:
    """``Γ ⊢ Δ`` with each side sorted by rendered text."""
    lhs = ", ".join(sorted(render_formula(f) for f in left))
    rhs = ", ".join(sorted(render_formula(f) for f in right))
    return f"{lhs} ⊢ {rhs}" if lhs else f"⊢ {rhs}"
