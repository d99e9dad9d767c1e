"""Unified error model for Vellum.

Two families of errors live here:

- Fail-fast parse errors (:class:`ParseError`) raised while building the
  widget tree. The first one aborts the parse.
- Coded theme errors (:class:`ThemeError`) and style class errors raised by
  theme validation and inheritance resolution. The checker collects these
  instead of stopping at the first.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Iterable, List, Optional

if TYPE_CHECKING:
    from vellum.ir.span import Span


class VellumError(Exception):
    """Base class for all errors surfaced to users."""

    code: Optional[str] = None
    suggestion: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        span: Optional["Span"] = None,
        path: Optional[str] = None,
        code: Optional[str] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.span = span
        self.path = path
        if code is not None:
            self.code = code
        if suggestion is not None:
            self.suggestion = suggestion

    @property
    def line(self) -> Optional[int]:
        return self.span.line if self.span is not None else None

    @property
    def column(self) -> Optional[int]:
        return self.span.column if self.span is not None else None

    def location(self) -> str:
        if self.path and self.span is not None:
            return f"{self.path}:{self.span.line}:{self.span.column}"
        if self.span is not None:
            return f"{self.span.line}:{self.span.column}"
        if self.path:
            return self.path
        return "unknown location"

    def format(self) -> str:
        components = [self.message]
        meta_parts = []
        location_desc = self.location()
        if location_desc != "unknown location":
            meta_parts.append(location_desc)
        if self.code:
            meta_parts.append(self.code)
        if meta_parts:
            components[-1] = f"{components[-1]} ({'; '.join(meta_parts)})"
        if self.suggestion:
            components.append(f"Suggestion: {self.suggestion}")
        return " ".join(part for part in components if part)


class ParseErrorKind(str, Enum):
    """Categories of fail-fast parse errors."""

    XML_SYNTAX = "xml_syntax"
    UNKNOWN_WIDGET = "unknown_widget"
    MISSING_ATTRIBUTE = "missing_attribute"
    INVALID_VALUE = "invalid_value"
    INVALID_EXPRESSION = "invalid_expression"
    UNSUPPORTED_VERSION = "unsupported_version"


class ParseError(VellumError):
    """Raised when a document cannot be turned into a valid widget tree."""

    def __init__(
        self,
        kind: ParseErrorKind,
        message: str,
        span: "Span",
        *,
        suggestion: Optional[str] = None,
        path: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            span=span,
            path=path,
            code=kind.name,
            suggestion=suggestion,
        )
        self.kind = kind

    def __str__(self) -> str:
        return f"{self.kind.name} at line {self.span.line}, column {self.span.column}: {self.message}"


class ExpressionError(VellumError):
    """Raised by the binding-expression tokenizer and parser.

    ``offset`` is the character position of the problem within the
    expression text.
    """

    code = "EXPRESSION_ERROR"

    def __init__(self, message: str, *, offset: int = 0, span: Optional["Span"] = None) -> None:
        super().__init__(message, span=span)
        self.offset = offset


class StyleValueError(VellumError, ValueError):
    """A literal layout or style value failed to parse or validate."""

    code = "INVALID_STYLE_VALUE"


class ThemeErrorKind(Enum):
    """Theme errors with stable short codes for tooling and docs."""

    NO_THEMES_DEFINED = "THEME_001"
    INVALID_DEFAULT_THEME = "THEME_002"
    MISSING_PALETTE_COLOR = "THEME_003"
    INVALID_COLOR_VALUE = "THEME_004"
    DUPLICATE_THEME_NAME = "THEME_005"
    THEME_NOT_FOUND = "THEME_006"
    CIRCULAR_INHERITANCE = "THEME_007"
    EXCEEDS_MAX_DEPTH = "THEME_008"

    @property
    def code(self) -> str:
        return self.value


class ThemeError(VellumError):
    """Coded theme validation or inheritance error."""

    def __init__(
        self,
        kind: ThemeErrorKind,
        message: str,
        *,
        span: Optional["Span"] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        super().__init__(
            f"{kind.code}: {message}",
            span=span,
            code=kind.code,
            suggestion=suggestion,
        )
        self.kind = kind


class StyleClassError(VellumError):
    """Style class inheritance or validation error."""

    code = "STYLE_CLASS_ERROR"


def find_similar(target: str, candidates: Iterable[str], max_distance: int = 2) -> List[str]:
    """Find similar names using Levenshtein distance, closest first."""

    def levenshtein(s1: str, s2: str) -> int:
        if len(s1) < len(s2):
            return levenshtein(s2, s1)
        if len(s2) == 0:
            return len(s1)
        previous_row = range(len(s2) + 1)
        for i, c1 in enumerate(s1):
            current_row = [i + 1]
            for j, c2 in enumerate(s2):
                insertions = previous_row[j + 1] + 1
                deletions = current_row[j] + 1
                substitutions = previous_row[j] + (c1 != c2)
                current_row.append(min(insertions, deletions, substitutions))
            previous_row = current_row
        return previous_row[-1]

    similar = [
        (name, levenshtein(target.lower(), name.lower()))
        for name in candidates
    ]
    similar.sort(key=lambda x: (x[1], x[0]))
    return [name for name, dist in similar if dist <= max_distance]


__all__ = [
    "VellumError",
    "ParseErrorKind",
    "ParseError",
    "ExpressionError",
    "StyleValueError",
    "ThemeErrorKind",
    "ThemeError",
    "StyleClassError",
    "find_similar",
]
