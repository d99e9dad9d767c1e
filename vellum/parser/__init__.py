"""Markup parsing: text to widget tree, themes and style classes."""

from .attributes import classify_value, parse_event, parse_version
from .document import (
    ROOT_TAG,
    DocumentParser,
    VersionWarning,
    parse,
    parse_file,
    validate_no_circular_dependencies,
    validate_widget_versions,
)
from .markup import MarkupAttribute, MarkupElement, MarkupTree, parse_markup
from .theme_parser import parse_style_class, parse_theme, parse_theme_document
from .widgets import WIDGET_CONSTRAINTS, WidgetParser

__all__ = [
    "ROOT_TAG",
    "DocumentParser",
    "VersionWarning",
    "parse",
    "parse_file",
    "validate_no_circular_dependencies",
    "validate_widget_versions",
    "classify_value",
    "parse_event",
    "parse_version",
    "MarkupAttribute",
    "MarkupElement",
    "MarkupTree",
    "parse_markup",
    "parse_style_class",
    "parse_theme",
    "parse_theme_document",
    "WIDGET_CONSTRAINTS",
    "WidgetParser",
]
