"""
Vellum declarative UI markup.

Vellum turns XML-based UI documents into a typed intermediate
representation that rendering backends consume. The package is
organised into:

* ``ir`` – dataclasses for widgets, attribute values, binding
  expressions, layout, style, themes and style classes.
* ``expr`` – the tokenizer and recursive-descent parser for the
  ``{...}`` binding expression language.
* ``parser`` – markup parsing, attribute classification, typed
  layout/style value parsers and document assembly.  Structural
  problems fail fast with a single :class:`~vellum.errors.ParseError`.
* ``themes`` – theme and style class inheritance resolution with
  cycle and depth protection.
* ``linter`` – post-parse checks that collect every independent
  problem in a document.
* ``cli`` – the ``vellum`` command.
"""

from __future__ import annotations

__version__ = "0.4.0"

from .errors import ExpressionError, ParseError, ParseErrorKind, ThemeError, ThemeErrorKind, VellumError
from .ir import Document, WidgetKind, WidgetNode
from .parser import parse, parse_file, parse_theme_document, validate_widget_versions
from .themes import resolve_style_classes, resolve_themes

__all__ = [
    "__version__",
    "Document",
    "WidgetKind",
    "WidgetNode",
    "ExpressionError",
    "ParseError",
    "ParseErrorKind",
    "ThemeError",
    "ThemeErrorKind",
    "VellumError",
    "parse",
    "parse_file",
    "parse_theme_document",
    "resolve_style_classes",
    "resolve_themes",
    "validate_widget_versions",
]
