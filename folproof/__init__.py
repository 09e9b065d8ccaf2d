"""folproof: a small sequent-calculus kernel with conditional definite
descriptions, and a group-theory library built on top of it."""

from .description import (
    ConditionalDescription,
    DefiniteDescription,
    DescriptionError,
    MalformedDescription,
    conditional_description,
)
from .group_theory import GroupTheory, build_group_theory
from .result import Err, Ok, Result
from .sequent import RuleViolation, Sequent, Theorem
from .settheory import SetTheory, build_set_theory
from .theory import DefinitionError, DuplicateTheoremError, Theory

__all__ = [
    "ConditionalDescription",
    "DefiniteDescription",
    "DefinitionError",
    "DescriptionError",
    "DuplicateTheoremError",
    "Err",
    "GroupTheory",
    "MalformedDescription",
    "Ok",
    "Result",
    "RuleViolation",
    "Sequent",
    "SetTheory",
    "Theorem",
    "Theory",
    "build_group_theory",
    "build_set_theory",
    "conditional_description",
]
