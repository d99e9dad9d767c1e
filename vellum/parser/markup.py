"""
Generic markup tree built on :mod:`xml.parsers.expat`.

The widget parser only needs element names, ordered attributes, child
elements and source positions, so this module reduces the XML document to
:class:`MarkupElement` values carrying byte-offset spans. Text, comments
and processing instructions are dropped.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union
from xml.parsers import expat

from vellum.errors import ParseError, ParseErrorKind
from vellum.ir.span import SourceMap, Span

logger = logging.getLogger(__name__)

_ATTRIBUTE_RE = re.compile(rb"""([^\s=/>]+)\s*=\s*("[^"]*"|'[^']*')""")


@dataclass
class MarkupAttribute:
    name: str
    value: str
    span: Span
    source: Optional[SourceMap] = field(default=None, repr=False, compare=False)


@dataclass
class MarkupElement:
    tag: str
    attributes: List[MarkupAttribute] = field(default_factory=list)
    children: List["MarkupElement"] = field(default_factory=list)
    span: Span = field(default_factory=Span)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute.value
        return default

    def attribute(self, name: str) -> Optional[MarkupAttribute]:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None

    def attribute_map(self) -> dict:
        return {attribute.name: attribute.value for attribute in self.attributes}


@dataclass
class MarkupTree:
    root: MarkupElement
    source: SourceMap
    has_declaration: bool = False


class _TreeBuilder:
    """Collects expat callbacks into :class:`MarkupElement` values."""

    def __init__(self, data: bytes, source_map: SourceMap):
        self.data = data
        self.source_map = source_map
        self.parser = expat.ParserCreate()
        self.parser.ordered_attributes = True
        self.parser.StartElementHandler = self.start_element
        self.parser.EndElementHandler = self.end_element
        self.parser.XmlDeclHandler = self.xml_declaration
        self.stack: List[Tuple[MarkupElement, int]] = []
        self.root: Optional[MarkupElement] = None
        self.has_declaration = False

    def xml_declaration(self, version, encoding, standalone) -> None:
        self.has_declaration = True

    def start_element(self, name: str, attributes: List[str]) -> None:
        start = self.parser.CurrentByteIndex
        tag_end = self._tag_end(start)
        raw_tag = self.data[start:tag_end]
        offsets = {
            match.group(1).decode("utf-8", errors="replace"): start + match.start(2) + 1
            for match in _ATTRIBUTE_RE.finditer(raw_tag)
        }

        element = MarkupElement(tag=name)
        for index in range(0, len(attributes), 2):
            attr_name, attr_value = attributes[index], attributes[index + 1]
            if attr_name == "xmlns" or attr_name.startswith("xmlns:"):
                continue
            value_start = offsets.get(attr_name, start)
            value_end = value_start + len(attr_value.encode("utf-8"))
            element.attributes.append(
                MarkupAttribute(
                    attr_name, attr_value, self.source_map.span(value_start, value_end), self.source_map
                )
            )

        if self.stack:
            self.stack[-1][0].children.append(element)
        else:
            self.root = element
        self.stack.append((element, start))

    def end_element(self, name: str) -> None:
        element, start = self.stack.pop()
        end = self._tag_end(self.parser.CurrentByteIndex)
        element.span = self.source_map.span(start, end)

    def _tag_end(self, index: int) -> int:
        """Offset just past the ``>`` closing the tag that starts at ``index``."""
        quote = None
        for position in range(index, len(self.data)):
            byte = self.data[position]
            if quote is not None:
                if byte == quote:
                    quote = None
            elif byte in (0x22, 0x27):
                quote = byte
            elif byte == 0x3E:
                return position + 1
        return len(self.data)

    def parse(self) -> MarkupElement:
        self.parser.Parse(self.data, True)
        if self.root is None:
            raise ParseError(ParseErrorKind.XML_SYNTAX, "Document has no root element", Span())
        return self.root


def parse_markup(source: Union[str, bytes]) -> MarkupTree:
    """Parse XML text into a :class:`MarkupTree`, raising ``ParseError`` on bad markup."""
    data = source.encode("utf-8") if isinstance(source, str) else source
    source_map = SourceMap(data)
    builder = _TreeBuilder(data, source_map)
    try:
        root = builder.parse()
    except expat.ExpatError as exc:
        line = exc.lineno or 1
        column = (exc.offset or 0) + 1
        offset = source_map.offset_of(line, exc.offset or 0)
        message = expat.errors.messages.get(exc.code, str(exc)) if exc.code else str(exc)
        logger.debug(f"XML syntax error at {line}:{column}: {message}")
        raise ParseError(
            ParseErrorKind.XML_SYNTAX,
            f"XML parse error: {message}",
            Span(offset, offset, line, column),
        ) from exc
    return MarkupTree(root=root, source=source_map, has_declaration=builder.has_declaration)


__all__ = ["MarkupAttribute", "MarkupElement", "MarkupTree", "parse_markup"]
