"""
Widget tree construction from markup elements.

Each element is turned into a :class:`WidgetNode` in a fixed order: kind
lookup, attribute classification, classes and theme reference, children,
arity checks, structured layout and style, deprecated attribute
normalization, and finally the per-kind constraint table. Every violation
raises :class:`ParseError` immediately.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from vellum.errors import ParseError, ParseErrorKind, StyleValueError, find_similar
from vellum.ir.node import (
    AttributeValue,
    BindingValue,
    CustomWidget,
    Kind,
    StaticValue,
    WidgetKind,
    WidgetNode,
)
from vellum.ir.span import Span
from vellum.ir.style import StyleProperties
from vellum.ir.theme import WidgetState

from .attributes import classify_value, parse_event, split_breakpoint, split_state
from .markup import MarkupElement
from .style_parser import build_layout, build_style

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RangeRule:
    attribute: str
    low: int
    high: int


@dataclass(frozen=True)
class WidgetConstraints:
    """Structural rules for one widget kind.

    ``required`` and ``non_empty`` pair an attribute with the suggestion
    shown when it is missing. ``bindings`` lists attributes that must be a
    single ``{expr}``. ``children`` is the exact child count, if fixed.
    """

    required: Tuple[Tuple[str, str], ...] = ()
    non_empty: Tuple[Tuple[str, str], ...] = ()
    ranges: Tuple[RangeRule, ...] = ()
    bindings: Tuple[Tuple[str, str], ...] = ()
    children: Optional[int] = None


OPTIONS_SUGGESTION = 'Add a comma-separated list: options="Option1,Option2"'

WIDGET_CONSTRAINTS: Dict[WidgetKind, WidgetConstraints] = {
    WidgetKind.COMBOBOX: WidgetConstraints(non_empty=(("options", OPTIONS_SUGGESTION),)),
    WidgetKind.PICK_LIST: WidgetConstraints(non_empty=(("options", OPTIONS_SUGGESTION),)),
    WidgetKind.CANVAS: WidgetConstraints(
        required=(
            ("width", 'Add width attribute: width="400"'),
            ("height", 'Add height attribute: height="300"'),
            ("program", 'Add program attribute: program="{chart}"'),
        ),
        ranges=(RangeRule("width", 50, 4000), RangeRule("height", 50, 4000)),
        bindings=(("program", 'Bind the program to your model: program="{chart}"'),),
        children=0,
    ),
    WidgetKind.GRID: WidgetConstraints(
        required=(("columns", 'Add columns attribute: columns="5"'),),
        ranges=(RangeRule("columns", 1, 20),),
    ),
    WidgetKind.TOOLTIP: WidgetConstraints(
        required=(("message", 'Add message attribute: message="Help text"'),),
        children=1,
    ),
    WidgetKind.FOR: WidgetConstraints(
        required=(
            ("each", 'Add each attribute: each="item"'),
            ("in", 'Add in attribute: in="{items}"'),
        ),
    ),
}

# (old name, new name, widget kinds)
DEPRECATED_ATTRIBUTES = [
    ("path", "src", (WidgetKind.IMAGE, WidgetKind.SVG)),
    ("active", "toggled", (WidgetKind.TOGGLER,)),
    ("is_toggled", "toggled", (WidgetKind.TOGGLER,)),
    ("secure", "password", (WidgetKind.TEXT_INPUT,)),
]


def _static_values(attributes: Dict[str, AttributeValue]) -> Dict[str, str]:
    return {name: value.text for name, value in attributes.items() if isinstance(value, StaticValue)}


def _number(text: str) -> Optional[float]:
    try:
        return float(text.strip())
    except ValueError:
        return None


class WidgetParser:
    """Builds widget nodes from markup elements.

    ``custom_widgets`` names tags the application provides itself; they
    become :class:`CustomWidget` kinds instead of unknown-widget errors.
    """

    def __init__(self, custom_widgets: Optional[Iterable[str]] = None):
        self.custom_widgets = frozenset(custom_widgets or ())
        self.logger = logging.getLogger(__name__)

    def resolve_kind(self, element: MarkupElement) -> Kind:
        kind = WidgetKind.from_tag(element.tag)
        if kind is not None:
            return kind
        if element.tag in self.custom_widgets:
            return CustomWidget(element.tag)

        valid = WidgetKind.all_standard()
        suggestion = f"Valid widgets are: {', '.join(valid)}"
        similar = find_similar(element.tag, valid)
        if similar:
            suggestion = f"Did you mean '{similar[0]}'? {suggestion}"
        raise ParseError(
            ParseErrorKind.UNKNOWN_WIDGET,
            f"Unknown widget: {element.tag}",
            element.span,
            suggestion=suggestion,
        )

    def parse(self, element: MarkupElement) -> WidgetNode:
        kind = self.resolve_kind(element)
        node = WidgetNode(kind=kind, span=element.span)
        state_attributes: Dict[WidgetState, Dict[str, AttributeValue]] = {}

        for attribute in element.attributes:
            name, value = attribute.name, attribute.value

            if name == "id":
                node.id = value
                continue

            event = parse_event(name, value, attribute.span, attribute.source)
            if event is not None:
                node.events.append(event)
                continue

            breakpoint_split = split_breakpoint(name)
            if breakpoint_split is not None:
                breakpoint, base_name = breakpoint_split
                node.breakpoint_attributes.setdefault(breakpoint, {})[base_name] = classify_value(
                    value, attribute.span, attribute.source
                )
                continue

            state_split = split_state(name)
            if state_split is not None and ":" not in state_split[1]:
                state, base_name = state_split
                state_attributes.setdefault(state, {})[base_name] = classify_value(
                    value, attribute.span, attribute.source
                )
                continue
            if ":" in name:
                self.logger.debug(f"Unknown state prefix in '{name}', keeping it as a plain attribute")

            node.attributes[name] = classify_value(value, attribute.span, attribute.source)

        class_value = node.attributes.get("class")
        if isinstance(class_value, StaticValue):
            node.classes = class_value.text.split()
        node.theme_ref = node.attributes.get("theme")

        node.children = [self.parse(child) for child in element.children]

        constraints = self._constraints(kind)
        if constraints is not None and constraints.children is not None:
            self._check_children(kind, constraints.children, node.children, element.span)

        node.layout, node.style = self._structured(kind, node.attributes, element.span)
        node.inline_state_variants = self._state_variants(state_attributes, element.span)

        self._normalize_deprecated(kind, node.attributes)

        if constraints is not None:
            self._check_constraints(kind, constraints, node.attributes, element.span)

        return node

    # ------------------------------------------------------------------

    @staticmethod
    def _constraints(kind: Kind) -> Optional[WidgetConstraints]:
        if isinstance(kind, CustomWidget):
            return None
        return WIDGET_CONSTRAINTS.get(kind)

    def _check_children(self, kind: WidgetKind, expected: int, children, span: Span) -> None:
        count = len(children)
        if count == expected:
            return
        if kind == WidgetKind.TOOLTIP:
            raise ParseError(
                ParseErrorKind.INVALID_VALUE,
                f"Tooltip widget must have exactly one child, found {count}",
                span,
                suggestion="Wrap a single widget in <tooltip></tooltip>",
            )
        if expected == 0:
            message = f"{kind.display_name} widget cannot have children, found {count}"
        else:
            message = f"{kind.display_name} widget must have exactly {expected} children, found {count}"
        raise ParseError(
            ParseErrorKind.INVALID_VALUE,
            message,
            span,
            suggestion=f"Remove child elements from <{kind.tag}>" if expected == 0 else None,
        )

    def _structured(self, kind: Kind, attributes: Dict[str, AttributeValue], span: Span):
        values = _static_values(attributes)
        try:
            layout = build_layout(values, skip_position=kind == WidgetKind.TOOLTIP)
            style = build_style(values)
        except StyleValueError as exc:
            raise ParseError(ParseErrorKind.INVALID_VALUE, exc.message, span) from exc
        return layout, style

    def _state_variants(
        self,
        state_attributes: Dict[WidgetState, Dict[str, AttributeValue]],
        span: Span,
    ) -> Dict[WidgetState, StyleProperties]:
        variants: Dict[WidgetState, StyleProperties] = {}
        for state, attributes in state_attributes.items():
            try:
                style = build_style(_static_values(attributes))
            except StyleValueError as exc:
                raise ParseError(
                    ParseErrorKind.INVALID_VALUE,
                    f"Invalid style in {state.value} state: {exc.message}",
                    span,
                ) from exc
            if style is not None:
                variants[state] = style
        return variants

    def _normalize_deprecated(self, kind: Kind, attributes: Dict[str, AttributeValue]) -> None:
        for old_name, new_name, kinds in DEPRECATED_ATTRIBUTES:
            if kind in kinds and old_name in attributes:
                attributes[new_name] = attributes.pop(old_name)
                self.logger.warning(
                    f"Attribute '{old_name}' is deprecated for {kind.display_name} widgets, use '{new_name}' instead"
                )

    def _check_constraints(
        self,
        kind: WidgetKind,
        constraints: WidgetConstraints,
        attributes: Dict[str, AttributeValue],
        span: Span,
    ) -> None:
        for name, suggestion in constraints.non_empty:
            value = attributes.get(name)
            if not isinstance(value, StaticValue) or not value.text.strip():
                raise ParseError(
                    ParseErrorKind.MISSING_ATTRIBUTE,
                    f"{kind.display_name} widget requires '{name}' attribute to be non-empty",
                    span,
                    suggestion=suggestion,
                )

        for name, suggestion in constraints.required:
            if name not in attributes:
                raise ParseError(
                    ParseErrorKind.MISSING_ATTRIBUTE,
                    f"{kind.display_name} widget requires '{name}' attribute",
                    span,
                    suggestion=suggestion,
                )

        for rule in constraints.ranges:
            value = attributes.get(rule.attribute)
            if not isinstance(value, StaticValue):
                continue
            number = _number(value.text)
            if number is None or rule.low <= number <= rule.high:
                continue
            raise ParseError(
                ParseErrorKind.INVALID_VALUE,
                f"{rule.attribute} for {kind.display_name} {rule.attribute} must be between "
                f"{rule.low} and {rule.high}, found {number:g}",
                span,
                suggestion=f"Use {rule.attribute} value between {rule.low} and {rule.high}",
            )

        for name, suggestion in constraints.bindings:
            if name in attributes and not isinstance(attributes[name], BindingValue):
                raise ParseError(
                    ParseErrorKind.INVALID_VALUE,
                    f"{kind.display_name} widget '{name}' attribute must be a binding expression",
                    span,
                    suggestion=suggestion,
                )


__all__ = [
    "RangeRule",
    "WidgetConstraints",
    "WIDGET_CONSTRAINTS",
    "DEPRECATED_ATTRIBUTES",
    "WidgetParser",
]
