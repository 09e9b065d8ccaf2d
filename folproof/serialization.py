"""JSON serialization for terms, formulas, sequents, theorems and theories.

Every type serializes to a dict with a "type" discriminator field.
Round-trip: from_json(to_json(x)) == x for terms, formulas, sequents and
signatures. Theorems and theories only serialize: a Theorem can only be
produced by the kernel, never read back from disk.
"""

from __future__ import annotations

import json
from typing import Any

from .sequent import Sequent, Theorem
from .signature import FnParam, FnSymbol, PredSymbol, Signature
from .sorts import AtomicSort, SortDecl, SortRef
from .render import render_formula, render_sequent
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
from .theory import Theory


# ---------------------------------------------------------------------------
# Signature
# ---------------------------------------------------------------------------


def sort_to_json(s: SortDecl) -> dict[str, Any]:
    if isinstance(s, AtomicSort):
        return {"type": "atomic", "name": s.name}
    raise TypeError(f"Unknown sort type: {type(s)}")


def sort_from_json(d: dict[str, Any]) -> SortDecl:
    t = d["type"]
    if t == "atomic":
        return AtomicSort(name=SortRef(d["name"]))
    raise ValueError(f"Unknown sort type: {t}")


def _params_to_json(params: tuple[FnParam, ...]) -> list[dict[str, Any]]:
    return [{"name": p.name, "sort": p.sort} for p in params]


def _params_from_json(params: list[dict[str, Any]]) -> tuple[FnParam, ...]:
    return tuple(FnParam(name=p["name"], sort=SortRef(p["sort"])) for p in params)


def fn_symbol_to_json(f: FnSymbol) -> dict[str, Any]:
    return {
        "type": "fn_symbol",
        "name": f.name,
        "params": _params_to_json(f.params),
        "result": f.result,
    }


def fn_symbol_from_json(d: dict[str, Any]) -> FnSymbol:
    return FnSymbol(
        name=d["name"],
        params=_params_from_json(d["params"]),
        result=SortRef(d["result"]),
    )


def pred_symbol_to_json(p: PredSymbol) -> dict[str, Any]:
    return {"type": "pred_symbol", "name": p.name, "params": _params_to_json(p.params)}


def pred_symbol_from_json(d: dict[str, Any]) -> PredSymbol:
    return PredSymbol(name=d["name"], params=_params_from_json(d["params"]))


def signature_to_json(sig: Signature) -> dict[str, Any]:
    return {
        "type": "signature",
        "sorts": {k: sort_to_json(v) for k, v in sig.sorts.items()},
        "functions": {k: fn_symbol_to_json(v) for k, v in sig.functions.items()},
        "predicates": {k: pred_symbol_to_json(v) for k, v in sig.predicates.items()},
    }


def signature_from_json(d: dict[str, Any]) -> Signature:
    sorts = {SortRef(k): sort_from_json(v) for k, v in d["sorts"].items()}
    functions = {k: fn_symbol_from_json(v) for k, v in d["functions"].items()}
    predicates = {k: pred_symbol_from_json(v) for k, v in d["predicates"].items()}
    return Signature(sorts=sorts, functions=functions, predicates=predicates)


# ---------------------------------------------------------------------------
# Terms
# ---------------------------------------------------------------------------


def term_to_json(t: Term) -> dict[str, Any]:
    if isinstance(t, Var):
        return {"type": "var", "name": t.name, "sort": t.sort}
    elif isinstance(t, FnApp):
        return {
            "type": "fn_app",
            "fn_name": t.fn_name,
            "args": [term_to_json(a) for a in t.args],
        }
    raise TypeError(f"Unknown term type: {type(t)}")


def term_from_json(d: dict[str, Any]) -> Term:
    t = d["type"]
    if t == "var":
        return Var(name=d["name"], sort=SortRef(d["sort"]))
    elif t == "fn_app":
        args = tuple(term_from_json(a) for a in d["args"])
        return FnApp(fn_name=d["fn_name"], args=args)
    raise ValueError(f"Unknown term type: {t}")


def _var_from_json(d: dict[str, Any]) -> Var:
    v = term_from_json(d)
    if not isinstance(v, Var):
        raise ValueError(f"Expected a bound variable, got {d['type']}")
    return v


# ---------------------------------------------------------------------------
# Formulas
# ---------------------------------------------------------------------------

_BINDERS: dict[type, str] = {
    UniversalQuant: "forall",
    ExistentialQuant: "exists",
    UniqueExistentialQuant: "exists_one",
}
_BINDER_TYPES = {name: cls for cls, name in _BINDERS.items()}


def formula_to_json(f: Formula) -> dict[str, Any]:
    if isinstance(f, Equation):
        return {
            "type": "equation",
            "lhs": term_to_json(f.lhs),
            "rhs": term_to_json(f.rhs),
        }
    elif isinstance(f, PredApp):
        return {
            "type": "pred_app",
            "pred_name": f.pred_name,
            "args": [term_to_json(a) for a in f.args],
        }
    elif isinstance(f, Negation):
        return {"type": "negation", "formula": formula_to_json(f.formula)}
    elif isinstance(f, Conjunction):
        return {
            "type": "conjunction",
            "conjuncts": [formula_to_json(c) for c in f.conjuncts],
        }
    elif isinstance(f, Disjunction):
        return {
            "type": "disjunction",
            "disjuncts": [formula_to_json(d) for d in f.disjuncts],
        }
    elif isinstance(f, Implication):
        return {
            "type": "implication",
            "antecedent": formula_to_json(f.antecedent),
            "consequent": formula_to_json(f.consequent),
        }
    elif isinstance(f, Biconditional):
        return {
            "type": "biconditional",
            "lhs": formula_to_json(f.lhs),
            "rhs": formula_to_json(f.rhs),
        }
    elif isinstance(f, (UniversalQuant, ExistentialQuant, UniqueExistentialQuant)):
        return {
            "type": _BINDERS[type(f)],
            "variable": term_to_json(f.variable),
            "body": formula_to_json(f.body),
        }
    raise TypeError(f"Unknown formula type: {type(f)}")


def formula_from_json(d: dict[str, Any]) -> Formula:
    t = d["type"]
    if t == "equation":
        return Equation(lhs=term_from_json(d["lhs"]), rhs=term_from_json(d["rhs"]))
    elif t == "pred_app":
        args = tuple(term_from_json(a) for a in d["args"])
        return PredApp(pred_name=d["pred_name"], args=args)
    elif t == "negation":
        return Negation(formula=formula_from_json(d["formula"]))
    elif t == "conjunction":
        return Conjunction(
            conjuncts=tuple(formula_from_json(c) for c in d["conjuncts"])
        )
    elif t == "disjunction":
        return Disjunction(
            disjuncts=tuple(formula_from_json(dd) for dd in d["disjuncts"])
        )
    elif t == "implication":
        return Implication(
            antecedent=formula_from_json(d["antecedent"]),
            consequent=formula_from_json(d["consequent"]),
        )
    elif t == "biconditional":
        return Biconditional(
            lhs=formula_from_json(d["lhs"]),
            rhs=formula_from_json(d["rhs"]),
        )
    elif t in _BINDER_TYPES:
        return _BINDER_TYPES[t](
            variable=_var_from_json(d["variable"]),
            body=formula_from_json(d["body"]),
        )
    raise ValueError(f"Unknown formula type: {t}")


# ---------------------------------------------------------------------------
# Sequents and theorems
# ---------------------------------------------------------------------------


def _ordered(formulas: frozenset[Formula]) -> list[Formula]:
    return sorted(formulas, key=render_formula)


def sequent_to_json(s: Sequent) -> dict[str, Any]:
    return {
        "type": "sequent",
        "left": [formula_to_json(f) for f in _ordered(s.left)],
        "right": [formula_to_json(f) for f in _ordered(s.right)],
    }


def sequent_from_json(d: dict[str, Any]) -> Sequent:
    if d["type"] != "sequent":
        raise ValueError(f"Unknown sequent type: {d['type']}")
    return Sequent(
        left=frozenset(formula_from_json(f) for f in d["left"]),
        right=frozenset(formula_from_json(f) for f in d["right"]),
    )


def theorem_to_json(thm: Theorem) -> dict[str, Any]:
    return {
        "type": "theorem",
        "sequent": sequent_to_json(thm.sequent),
        "text": render_sequent(thm.left, thm.right),
        "rule": thm.rule,
        "premises": len(thm.premises),
        "size": thm.size,
        "constrained": sorted(thm.constrained),
    }


# ---------------------------------------------------------------------------
# Theory
# ---------------------------------------------------------------------------


def theory_to_json(theory: Theory) -> dict[str, Any]:
    return {
        "type": "theory",
        "name": theory.name,
        "signature": signature_to_json(theory.signature),
        "axioms": {name: theorem_to_json(thm) for name, thm in theory.axioms.items()},
        "predicates": {
            name: {
                "params": [term_to_json(p) for p in d.params],
                "body": formula_to_json(d.body),
            }
            for name, d in theory.predicate_definitions.items()
        },
        "functions": {
            name: {
                "params": [term_to_json(p) for p in d.params],
                "variable": term_to_json(d.description.variable),
                "formula": formula_to_json(d.description.formula),
                "definition": theorem_to_json(d.definition),
            }
            for name, d in theory.function_definitions.items()
        },
        "theorems": {name: theorem_to_json(thm) for name, thm in theory.theorems},
    }


# ---------------------------------------------------------------------------
# Convenience: dump / load as JSON strings
# ---------------------------------------------------------------------------


def dumps(theory: Theory) -> str:
    return json.dumps(theory_to_json(theory), indent=2, ensure_ascii=False)


def dump_formula(f: Formula) -> str:
    return json.dumps(formula_to_json(f))


def load_formula(s: str) -> Formula:
    return formula_from_json(json.loads(s))
