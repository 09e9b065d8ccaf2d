"""Well-formedness checks for terms and formulas against a signature.

Checks performed:
  fn_declared / pred_declared   every symbol is in the signature
  fn_arity / pred_arity         argument counts match the profile
  fn_arg_sorts / pred_arg_sorts argument sorts match the profile
  equation_sort_match           both sides of an equation share a sort
  var_bound                     variables are bound or explicitly allowed free
  var_sort_consistent           a variable name is used with a single sort
  var_used (warning)            a quantifier binds a variable its body ignores
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from .signature import Signature
from .sorts import SortRef
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


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    check: str
    severity: Severity
    label: str | None
    message: str
    path: str | None

    def __str__(self) -> str:
        where = f" at {self.path}" if self.path else ""
        return f"[{self.check}]{where}: {self.message}"


@dataclass(frozen=True)
class CheckResult:
    label: str
    diagnostics: tuple[Diagnostic, ...]

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == Severity.ERROR)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == Severity.WARNING)

    @property
    def is_well_formed(self) -> bool:
        return len(self.errors) == 0


@dataclass
class CheckContext:
    sig: Signature
    label: str | None = None
    allow_free: bool = False
    diagnostics: list[Diagnostic] = field(default_factory=list)
    _var_env: list[dict[str, SortRef]] = field(default_factory=list)
    _var_used: list[set[str]] = field(default_factory=list)
    _seen_vars: dict[str, SortRef] = field(default_factory=dict)

    def error(self, check: str, message: str, path: str | None = None) -> None:
        self.diagnostics.append(Diagnostic(check, Severity.ERROR, self.label, message, path))

    def warning(self, check: str, message: str, path: str | None = None) -> None:
        self.diagnostics.append(
            Diagnostic(check, Severity.WARNING, self.label, message, path)
        )

    def push_scope(self) -> None:
        self._var_env.append({})
        self._var_used.append(set())

    def bind_vars(self, variables: Iterable[Var]) -> None:
        for v in variables:
            self._var_env[-1][v.name] = v.sort

    def pop_scope(self) -> tuple[dict[str, SortRef], set[str]]:
        return self._var_env.pop(), self._var_used.pop()

    def get_var_sort(self, name: str) -> SortRef | None:
        for i in range(len(self._var_env) - 1, -1, -1):
            if name in self._var_env[i]:
                self._var_used[i].add(name)
                return self._var_env[i][name]
        return None

    def observe_var(self, name: str, sort: SortRef, path: str) -> None:
        if name in self._seen_vars:
            if self._seen_vars[name] != sort:
                self.error(
                    "var_sort_consistent",
                    f"Variable '{name}' appears with sort '{self._seen_vars[name]}' and '{sort}'",
                    path,
                )
        else:
            self._seen_vars[name] = sort


def check_term(term: Term, ctx: CheckContext, path: str) -> SortRef | None:
    if isinstance(term, Var):
        sort = ctx.get_var_sort(term.name)
        ctx.observe_var(term.name, term.sort, path)
        if sort is None:
            if ctx.allow_free:
                return term.sort
            ctx.error("var_bound", f"Variable '{term.name}' is not bound by any quantifier", path)
            return None
        return term.sort
    elif isinstance(term, FnApp):
        fn = ctx.sig.get_fn(term.fn_name)
        if fn is None:
            ctx.error("fn_declared", f"Function '{term.fn_name}' is not declared", path)
            return None
        if len(term.args) != len(fn.params):
            ctx.error(
                "fn_arity",
                f"Function '{term.fn_name}' expects {len(fn.params)} arguments, got {len(term.args)}",
                path,
            )
        else:
            for i, (arg, param) in enumerate(zip(term.args, fn.params, strict=True)):
                arg_sort = check_term(arg, ctx, f"{path}.args[{i}]")
                if arg_sort is not None and arg_sort != param.sort:
                    ctx.error(
                        "fn_arg_sorts",
                        f"Argument {i} to '{term.fn_name}' expected sort '{param.sort}', got '{arg_sort}'",
                        f"{path}.args[{i}]",
                    )
        return fn.result
    ctx.error(  # type: ignore[unreachable]
        "formula_term_separation", f"Expected Term, got {type(term).__name__}", path
    )
    return None


def check_formula(formula: Formula, ctx: CheckContext, path: str) -> None:
    if isinstance(formula, Equation):
        lhs_sort = check_term(formula.lhs, ctx, f"{path}.lhs")
        rhs_sort = check_term(formula.rhs, ctx, f"{path}.rhs")
        if lhs_sort is not None and rhs_sort is not None and lhs_sort != rhs_sort:
            ctx.error(
                "equation_sort_match",
                f"LHS sort '{lhs_sort}' does not match RHS sort '{rhs_sort}'",
                path,
            )
    elif isinstance(formula, PredApp):
        pred = ctx.sig.get_pred(formula.pred_name)
        if pred is None:
            ctx.error("pred_declared", f"Predicate '{formula.pred_name}' is not declared", path)
        elif len(formula.args) != len(pred.params):
            ctx.error(
                "pred_arity",
                f"Predicate '{formula.pred_name}' expects {len(pred.params)} arguments, got {len(formula.args)}",
                path,
            )
        else:
            for i, (arg, param) in enumerate(zip(formula.args, pred.params, strict=True)):
                arg_sort = check_term(arg, ctx, f"{path}.args[{i}]")
                if arg_sort is not None and arg_sort != param.sort:
                    ctx.error(
                        "pred_arg_sorts",
                        f"Argument {i} to predicate '{formula.pred_name}' expected '{param.sort}', got '{arg_sort}'",
                        f"{path}.args[{i}]",
                    )
    elif isinstance(formula, Negation):
        check_formula(formula.formula, ctx, f"{path}.formula")
    elif isinstance(formula, (Conjunction, Disjunction)):
        subformulas = (
            formula.conjuncts if isinstance(formula, Conjunction) else formula.disjuncts
        )
        attr = "conjuncts" if isinstance(formula, Conjunction) else "disjuncts"
        for i, f in enumerate(subformulas):
            check_formula(f, ctx, f"{path}.{attr}[{i}]")
    elif isinstance(formula, Implication):
        check_formula(formula.antecedent, ctx, f"{path}.antecedent")
        check_formula(formula.consequent, ctx, f"{path}.consequent")
    elif isinstance(formula, Biconditional):
        check_formula(formula.lhs, ctx, f"{path}.lhs")
        check_formula(formula.rhs, ctx, f"{path}.rhs")
    elif isinstance(formula, (UniversalQuant, ExistentialQuant, UniqueExistentialQuant)):
        v = formula.variable
        if ctx.sig.get_sort(v.sort) is None:
            ctx.error("sort_resolved", f"Sort '{v.sort}' of '{v.name}' is not declared", path)
        ctx.observe_var(v.name, v.sort, f"{path}.variable")
        ctx.push_scope()
        ctx.bind_vars((v,))
        check_formula(formula.body, ctx, f"{path}.body")
        _env, used = ctx.pop_scope()
        if v.name not in used:
            ctx.warning(
                "var_used",
                f"Variable '{v.name}' bound by quantifier is unused",
                f"{path}.variable",
            )
    else:
        ctx.error(  # type: ignore[unreachable]
            "formula_term_separation",
            f"Expected Formula, got {type(formula).__name__}",
            path,
        )


def check_closed_formula(
    formula: Formula,
    sig: Signature,
    label: str,
    params: Iterable[Var] = (),
    allow_free: bool = False,
) -> CheckResult:
    """Check ``formula`` with ``params`` pre-bound.

    With ``allow_free`` any other free variable is accepted too (axioms are
    stated with implicitly universal free variables).
    """
    ctx = CheckContext(sig=sig, label=label, allow_free=allow_free)
    ctx.push_scope()
    ctx.bind_vars(params)
    check_formula(formula, ctx, "formula")
    ctx.pop_scope()
    return CheckResult(label, tuple(ctx.diagnostics))


def infer_sort(term: Term, sig: Signature | None = None) -> SortRef | None:
    """Sort of ``term``; None when it cannot be determined."""
    match term:
        case Var(sort=sort):
            return sort
        case FnApp(fn_name=name):
            if sig is None:
                return None
            fn = sig.get_fn(name)
            return fn.result if fn is not None else None
        case _:
            return None
