"""Markdown reports of a theory, rendered with Jinja2 templates."""

import os
from typing import Any

import jinja2

from folproof.render import render_formula, render_sequent, render_term
from folproof.theory import Theory

_TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")
_ENV = jinja2.Environment(
    loader=jinja2.FileSystemLoader(_TEMPLATE_DIR),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
)
_ENV.filters["formula"] = render_formula
_ENV.filters["term"] = render_term
_ENV.filters["sequent"] = lambda thm: render_sequent(thm.left, thm.right)


def render(template_name: str, **kwargs: Any) -> str:
    """Render a Jinja2 template with the given keyword arguments."""
    template = _ENV.get_template(template_name)
    return template.render(**kwargs)


def render_report(theory: Theory) -> str:
    return render(
        "theory_report.md.j2",
        theory=theory,
        functions=sorted(theory.signature.functions.values(), key=lambda s: s.name),
        predicates=sorted(theory.signature.predicates.values(), key=lambda s: s.name),
        axioms=list(theory.axioms.items()),
        predicate_definitions=list(theory.predicate_definitions.values()),
        function_definitions=list(theory.function_definitions.values()),
        theorems=list(theory.theorems),
    )
