"""Tests for the generic markup tree."""

import pytest

from vellum.errors import ParseError, ParseErrorKind
from vellum.parser.markup import parse_markup


class TestMarkupTree:
    """Elements, attributes and positions."""

    def test_elements_and_attributes(self):
        tree = parse_markup('<column spacing="4"><text value="a" /><!-- note --><row /></column>')
        root = tree.root
        assert root.tag == "column"
        assert root.get("spacing") == "4"
        assert [child.tag for child in root.children] == ["text", "row"]

    def test_attribute_order_is_kept(self):
        tree = parse_markup('<text z="1" a="2" m="3" />')
        assert [attribute.name for attribute in tree.root.attributes] == ["z", "a", "m"]

    def test_attribute_value_span(self):
        tree = parse_markup('<column>\n  <text value="hi" />\n</column>')
        attribute = tree.root.children[0].attribute("value")
        assert (attribute.span.line, attribute.span.column) == (2, 16)
        assert attribute.span.end - attribute.span.start == 2

    def test_element_span(self):
        tree = parse_markup('<column>\n  <text value="hi" />\n</column>')
        text = tree.root.children[0]
        assert (text.span.line, text.span.column) == (2, 3)
        assert (tree.root.span.start, tree.root.span.end) == (0, 40)

    def test_xml_declaration_detected(self):
        assert parse_markup('<?xml version="1.0"?>\n<column />').has_declaration
        assert not parse_markup("<column />").has_declaration

    def test_namespace_declarations_dropped(self):
        tree = parse_markup('<column xmlns="urn:x" xmlns:v="urn:v" spacing="2" />')
        assert tree.root.attribute_map() == {"spacing": "2"}

    def test_bytes_input(self):
        assert parse_markup("<text value=\"é\" />".encode("utf-8")).root.get("value") == "é"


class TestMarkupErrors:
    """Malformed markup raises XML syntax errors with a location."""

    def test_unclosed_tag(self):
        with pytest.raises(ParseError) as exc_info:
            parse_markup("<column>\n  <text value=\"x\">\n</column>")
        assert exc_info.value.kind is ParseErrorKind.XML_SYNTAX
        assert exc_info.value.line == 3
        assert exc_info.value.message.startswith("XML parse error:")

    def test_empty_document(self):
        with pytest.raises(ParseError) as exc_info:
            parse_markup("")
        assert exc_info.value.kind is ParseErrorKind.XML_SYNTAX
