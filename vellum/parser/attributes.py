"""
Attribute-level parsing shared by the widget, theme and class parsers.

The central piece is :func:`classify_value`, which decides whether a raw
attribute string is a literal, a single binding or an interpolation of
literal text and bindings.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from vellum.errors import ExpressionError, ParseError, ParseErrorKind
from vellum.expr.parser import parse_binding_expr
from vellum.ir.expr import BindingExpr, Literal
from vellum.ir.layout import Breakpoint
from vellum.ir.node import (
    AttributeValue,
    BindingPart,
    BindingValue,
    EventBinding,
    EventKind,
    InterpolatedPart,
    InterpolatedValue,
    LiteralPart,
    SchemaVersion,
    StaticValue,
)
from vellum.ir.span import SourceMap, Span
from vellum.ir.theme import StateSelector, WidgetState

VERSION_SUGGESTION = 'Use format: version="1.0"'

_VERSION_PART_RE = re.compile(r"^\d+$")


def _expression_position(
    value: str, index: int, span: Span, source: Optional[SourceMap] = None
) -> Tuple[int, int, int]:
    """
    Absolute (byte offset, line, column) of ``value[index]``.

    XML normalizes newlines inside attribute values to spaces, so when the
    document's source map is known the line and column come from it.
    """
    offset = span.start + len(value[:index].encode("utf-8"))
    if source is not None:
        line, column = source.line_col(offset)
        return offset, line, column
    prefix = value[:index]
    newlines = prefix.count("\n")
    if not newlines:
        return offset, span.line, span.column + index
    return offset, span.line + newlines, index - prefix.rfind("\n")


def parse_binding(
    value: str, index: int, text: str, span: Span, source: Optional[SourceMap] = None
) -> BindingExpr:
    """Parse ``text`` found at ``value[index]``, converting failures to ``ParseError``."""
    offset, line, column = _expression_position(value, index, span, source)
    try:
        return parse_binding_expr(text, offset, line, column)
    except ExpressionError as exc:
        raise ParseError(
            ParseErrorKind.INVALID_EXPRESSION,
            f"Invalid expression: {exc.message}",
            exc.span or span,
            suggestion="Check the expression syntax inside { }",
        ) from exc


def classify_value(value: str, span: Span, source: Optional[SourceMap] = None) -> AttributeValue:
    """
    Classify a raw attribute string.

    ``span`` locates the first character of ``value`` in the document and
    ``source``, when given, maps binding offsets back to lines and columns.
    Returns :class:`StaticValue` when there is no ``{expr}`` region,
    :class:`BindingValue` when the whole value is one ``{expr}``, and
    :class:`InterpolatedValue` otherwise. An unmatched ``{`` makes the
    rest of the string literal text.
    """
    if "{" not in value or "}" not in value:
        return StaticValue(value)

    parts: List[InterpolatedPart] = []
    pos = 0
    while pos < len(value):
        open_index = value.find("{", pos)
        if open_index == -1:
            break
        close_index = value.find("}", open_index + 1)
        if close_index == -1:
            break
        if open_index > pos:
            parts.append(LiteralPart(value[pos:open_index]))
        inner = value[open_index + 1:close_index]
        parts.append(BindingPart(parse_binding(value, open_index + 1, inner, span, source)))
        pos = close_index + 1

    if pos < len(value):
        parts.append(LiteralPart(value[pos:]))

    if len(parts) == 1 and isinstance(parts[0], BindingPart):
        return BindingValue(parts[0].binding)
    if not parts:
        return StaticValue("")
    if len(parts) == 1:
        return StaticValue(parts[0].text)
    return InterpolatedValue(tuple(parts))


def parse_event(
    name: str, value: str, span: Span, source: Optional[SourceMap] = None
) -> Optional[EventBinding]:
    """
    Parse an ``on_<event>`` attribute.

    Accepts ``handler``, ``handler:{expr}`` and ``handler:'literal'``.
    When the parameter does not parse, the whole value is kept as the
    handler name. Returns ``None`` for names that are not known events.
    """
    event = EventKind.from_attribute(name)
    if event is None:
        return None

    if ":" not in value:
        return EventBinding(event, value, None, span)

    handler, param_text = value.split(":", 1)
    param_index = len(handler) + 1
    if len(param_text) >= 2 and param_text.startswith("'") and param_text.endswith("'"):
        offset, line, column = _expression_position(value, param_index, span, source)
        end = offset + len(param_text.encode("utf-8"))
        param = BindingExpr(Literal.of_string(param_text[1:-1]), Span(offset, end, line, column))
        return EventBinding(event, handler, param, span)

    cleaned = param_text.strip("{").strip("}")
    if param_text.startswith("{"):
        param_index += len(param_text) - len(param_text.lstrip("{"))
    offset, line, column = _expression_position(value, param_index, span, source)
    try:
        param = parse_binding_expr(cleaned, offset, line, column)
    except ExpressionError:
        return EventBinding(event, value, None, span)
    return EventBinding(event, handler, param, span)


def split_breakpoint(name: str) -> Optional[Tuple[Breakpoint, str]]:
    """Split ``mobile-spacing`` into ``(Breakpoint.MOBILE, "spacing")``."""
    if "-" not in name:
        return None
    prefix, attribute = name.split("-", 1)
    breakpoint = Breakpoint.from_prefix(prefix)
    if breakpoint is None or not attribute:
        return None
    return breakpoint, attribute


def split_state(name: str) -> Optional[Tuple[WidgetState, str]]:
    """Split ``hover:background`` into ``(WidgetState.HOVER, "background")``."""
    if ":" not in name:
        return None
    prefix, attribute = name.split(":", 1)
    state = WidgetState.from_prefix(prefix)
    if state is None or not attribute:
        return None
    return state, attribute


def split_state_selector(name: str) -> Optional[Tuple[StateSelector, str]]:
    """Split ``hover:focus:background`` into a selector and attribute name.

    Every prefix segment must be a valid state. Returns ``None`` when the
    name has no prefix or any prefix segment is not a state.
    """
    segments = name.split(":")
    if len(segments) < 2 or not segments[-1]:
        return None
    states = []
    for segment in segments[:-1]:
        state = WidgetState.from_prefix(segment)
        if state is None:
            return None
        states.append(state)
    return StateSelector.combined(states), segments[-1]


def parse_version(text: str, span: Span) -> SchemaVersion:
    """Parse a ``major.minor`` version declaration."""
    trimmed = text.strip()
    if not trimmed:
        raise ParseError(
            ParseErrorKind.INVALID_VALUE,
            "Version attribute cannot be empty",
            span,
            suggestion=VERSION_SUGGESTION,
        )
    parts = trimmed.split(".")
    if len(parts) != 2 or not all(_VERSION_PART_RE.match(part) for part in parts):
        raise ParseError(
            ParseErrorKind.INVALID_VALUE,
            f"Invalid version format '{trimmed}'. Expected 'major.minor' (e.g., '1.0')",
            span,
            suggestion=VERSION_SUGGESTION,
        )
    return SchemaVersion(int(parts[0]), int(parts[1]))


def split_list(value: str) -> List[str]:
    """Split a comma-separated list, dropping empty entries."""
    return [item.strip() for item in value.split(",") if item.strip()]


__all__ = [
    "classify_value",
    "parse_binding",
    "parse_event",
    "split_breakpoint",
    "split_state",
    "split_state_selector",
    "parse_version",
    "split_list",
]
