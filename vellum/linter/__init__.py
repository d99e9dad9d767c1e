"""
Document checker for Vellum.

Runs after a successful parse and collects every theme, style class,
reference, attribute, handler and version problem in a document instead
of stopping at the first one.
"""

from __future__ import annotations

__all__ = [
    "DocumentLinter",
    "LintContext",
    "LintFinding",
    "LintResult",
    "LintRule",
    "LintSeverity",
    "get_default_rules",
]

from .core import DocumentLinter, LintContext, LintFinding, LintResult, LintSeverity
from .rules import LintRule
from .builtin_rules import get_default_rules
