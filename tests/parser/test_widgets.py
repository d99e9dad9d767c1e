"""Tests for widget tree construction and per-widget constraints."""

import logging

import pytest

from vellum import parse
from vellum.errors import ParseError, ParseErrorKind
from vellum.ir.expr import FieldAccess
from vellum.ir.layout import Breakpoint, Length
from vellum.ir.node import BindingValue, CustomWidget, EventKind, StaticValue, WidgetKind
from vellum.ir.style import Color
from vellum.ir.theme import WidgetState


def parse_error(source, **kwargs):
    with pytest.raises(ParseError) as exc_info:
        parse(source, **kwargs)
    return exc_info.value


class TestWidgetTree:
    """Kinds, ids, children and derived fields."""

    def test_children_in_order(self):
        root = parse('<column><text value="a" /><row><space /></row></column>').root
        assert root.kind is WidgetKind.COLUMN
        assert [child.kind for child in root.children] == [WidgetKind.TEXT, WidgetKind.ROW]
        assert root.children[1].children[0].kind is WidgetKind.SPACE

    def test_id_is_not_an_attribute(self):
        node = parse('<button id="save" label="Save" />').root
        assert node.id == "save"
        assert "id" not in node.attributes

    def test_events(self):
        node = parse('<button on_click="submit" on_press="pressed:{row.id}" />').root
        assert [event.event for event in node.events] == [EventKind.CLICK, EventKind.PRESS]
        assert node.event(EventKind.PRESS).param.expr == FieldAccess(("row", "id"))
        assert "on_click" not in node.attributes

    def test_unknown_event_name_stays_an_attribute(self):
        node = parse('<button on_hover="x" />').root
        assert node.events == []
        assert node.attributes["on_hover"] == StaticValue("x")

    def test_classes_from_literal(self):
        node = parse('<container class="card  elevated" />').root
        assert node.classes == ["card", "elevated"]

    def test_dynamic_classes_not_split(self):
        node = parse('<container class="{style_name}" />').root
        assert node.classes == []
        assert isinstance(node.attributes["class"], BindingValue)

    def test_theme_reference(self):
        assert parse('<column theme="dark" />').root.theme_ref == StaticValue("dark")
        node = parse('<column theme="{current_theme}" />').root
        assert isinstance(node.theme_ref, BindingValue)

    def test_breakpoint_attributes(self):
        node = parse('<column spacing="20" mobile-spacing="10" tablet-padding="4 8" />').root
        assert node.breakpoint_attributes[Breakpoint.MOBILE] == {"spacing": StaticValue("10")}
        assert node.breakpoint_attributes[Breakpoint.TABLET] == {"padding": StaticValue("4 8")}
        assert "mobile-spacing" not in node.attributes
        assert node.layout.spacing == 20.0

    def test_state_attributes(self):
        node = parse('<button label="Go" hover:background="#ff0000" />').root
        assert node.inline_state_variants[WidgetState.HOVER].background == Color(1.0, 0.0, 0.0)
        assert "hover:background" not in node.attributes

    def test_unknown_state_prefix_stays_an_attribute(self):
        node = parse('<button pressed:background="#fff" />').root
        assert node.inline_state_variants == {}
        assert "pressed:background" in node.attributes

    def test_invalid_state_style(self):
        error = parse_error('<button hover:opacity="2" />')
        assert error.message.startswith("Invalid style in hover state:")

    def test_span(self):
        node = parse('<column>\n    <text value="x" />\n</column>').root.children[0]
        assert (node.span.line, node.span.column) == (2, 5)


class TestStructuredValues:
    """Layout and style are only present when attributes ask for them."""

    def test_absent_when_unused(self):
        node = parse('<text value="plain" />').root
        assert node.layout is None
        assert node.style is None

    def test_present_when_used(self):
        node = parse('<container width="fill" background="#000000" opacity="0.5" />').root
        assert node.layout.width == Length.fill()
        assert node.style.background == Color(0.0, 0.0, 0.0)
        assert node.style.opacity == 0.5

    def test_bindings_are_not_typed(self):
        node = parse('<container width="{w}" />').root
        assert node.layout is None

    def test_invalid_literal(self):
        error = parse_error('<container padding="1 2 3" />')
        assert error.kind is ParseErrorKind.INVALID_VALUE
        assert "Expected 1, 2, or 4 values" in error.message

    def test_tooltip_position_is_not_layout(self):
        node = parse('<tooltip message="Help" position="top"><button /></tooltip>').root
        assert node.layout is None


class TestUnknownWidgets:
    """Unknown tags and custom widgets."""

    def test_unknown_widget(self):
        error = parse_error('<column><buton /></column>')
        assert error.kind is ParseErrorKind.UNKNOWN_WIDGET
        assert error.message == "Unknown widget: buton"
        assert error.suggestion.startswith("Did you mean 'button'?")
        assert error.span.line == 1
        assert error.span.column == 9

    def test_custom_widget(self):
        node = parse('<column><gauge value="{level}" /></column>', custom_widgets=["gauge"]).root
        kind = node.children[0].kind
        assert isinstance(kind, CustomWidget)
        assert kind.name == "gauge"


class TestArity:
    """Tooltip needs exactly one child; canvas none."""

    def test_tooltip_without_child(self):
        error = parse_error('<tooltip message="Help" />')
        assert error.message == "Tooltip widget must have exactly one child, found 0"

    def test_tooltip_with_two_children(self):
        error = parse_error('<tooltip message="Help"><button /><button /></tooltip>')
        assert error.message == "Tooltip widget must have exactly one child, found 2"

    def test_tooltip_with_one_child(self):
        node = parse('<tooltip message="Help"><button label="?" /></tooltip>').root
        assert len(node.children) == 1

    def test_tooltip_requires_message(self):
        error = parse_error('<tooltip><button /></tooltip>')
        assert error.kind is ParseErrorKind.MISSING_ATTRIBUTE
        assert error.message == "Tooltip widget requires 'message' attribute"

    def test_canvas_with_child(self):
        source = '<vellum version="1.1"><canvas width="100" height="100" program="{p}"><text value="x" /></canvas></vellum>'
        error = parse_error(source)
        assert error.message == "Canvas widget cannot have children, found 1"


class TestConstraints:
    """Per-widget required attributes and ranges."""

    def test_canvas_range(self):
        source = '<vellum version="1.1"><canvas width="10" height="10" program="{p}" /></vellum>'
        error = parse_error(source)
        assert error.kind is ParseErrorKind.INVALID_VALUE
        assert error.message == "width for Canvas width must be between 50 and 4000, found 10"
        assert error.suggestion == "Use width value between 50 and 4000"

    def test_canvas_missing_program(self):
        source = '<vellum version="1.1"><canvas width="100" height="100" /></vellum>'
        error = parse_error(source)
        assert error.message == "Canvas widget requires 'program' attribute"

    def test_canvas_program_must_be_binding(self):
        source = '<vellum version="1.1"><canvas width="100" height="100" program="chart" /></vellum>'
        error = parse_error(source)
        assert "'program' attribute must be a binding expression" in error.message

    def test_canvas_valid(self):
        source = '<vellum version="1.1"><canvas width="400" height="300" program="{chart}" /></vellum>'
        node = parse(source).root
        assert node.kind is WidgetKind.CANVAS

    def test_grid_columns_range(self):
        error = parse_error('<grid columns="25" />')
        assert error.message == "columns for Grid columns must be between 1 and 20, found 25"

    def test_grid_requires_columns(self):
        assert parse_error("<grid />").kind is ParseErrorKind.MISSING_ATTRIBUTE

    def test_selection_needs_options(self):
        error = parse_error('<pick_list options="" />')
        assert error.message == "PickList widget requires 'options' attribute to be non-empty"
        assert parse_error("<combobox />").message == "ComboBox widget requires 'options' attribute to be non-empty"

    def test_for_loop(self):
        node = parse('<for each="item" in="{items}"><text value="{item.name}" /></for>').root
        assert node.kind is WidgetKind.FOR
        assert parse_error('<for each="item"><text value="x" /></for>').message == (
            "For widget requires 'in' attribute"
        )


class TestDeprecatedAttributes:
    """Old attribute names are renamed with a warning."""

    def test_image_path(self, caplog):
        with caplog.at_level(logging.WARNING, logger="vellum.parser.widgets"):
            node = parse('<image path="logo.png" />').root
        assert node.attributes["src"] == StaticValue("logo.png")
        assert "path" not in node.attributes
        assert "deprecated" in caplog.text

    def test_toggler_active(self):
        node = parse('<toggler active="{on}" />').root
        assert "toggled" in node.attributes

    def test_text_input_secure(self):
        node = parse('<text_input secure="true" />').root
        assert node.attributes["password"] == StaticValue("true")
