"""
Document assembly: the ``parse`` entry point.

A document is either a bare widget (the legacy form, implicitly version
1.0 with no themes) or a ``<vellum>`` wrapper::

    <vellum version="1.1">
        <themes> ... </themes>
        <style_classes> ... </style_classes>
        <global_theme name="dark" />
        <follow_system enabled="false" />
        <column> ... </column>
    </vellum>
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Union

from vellum.errors import ParseError, ParseErrorKind, ThemeError
from vellum.ir.document import Document
from vellum.ir.node import (
    DEFAULT_VERSION,
    MAX_SUPPORTED_VERSION,
    Kind,
    SchemaVersion,
    WidgetKind,
    WidgetNode,
)
from vellum.ir.span import Span
from vellum.ir.theme import StyleClass, Theme

from .attributes import parse_version
from .markup import MarkupElement, MarkupTree, parse_markup
from .theme_parser import (
    CLASS_SECTIONS,
    FOLLOW_SYSTEM_SECTION,
    GLOBAL_THEME_SECTIONS,
    THEMES_SECTION,
    parse_bool,
    parse_classes_section,
    parse_themes_section,
)
from .widgets import WidgetParser

logger = logging.getLogger(__name__)

ROOT_TAG = "vellum"


@dataclass(frozen=True)
class VersionWarning:
    """A widget that needs a newer schema version than the document declares."""

    widget: Kind
    declared: SchemaVersion
    required: SchemaVersion
    span: Span

    @property
    def message(self) -> str:
        return (
            f"Widget '{self.widget.tag}' requires schema v{self.required} "
            f"but document declares v{self.declared}"
        )

    @property
    def suggestion(self) -> str:
        return f'Update to <{ROOT_TAG} version="{self.required}"> or remove this widget'


def check_version_supported(version: SchemaVersion, span: Span) -> None:
    if version > MAX_SUPPORTED_VERSION:
        raise ParseError(
            ParseErrorKind.UNSUPPORTED_VERSION,
            f"Schema version {version} is not supported. "
            f"Maximum supported version: {MAX_SUPPORTED_VERSION}",
            span,
            suggestion=f'Upgrade vellum to support v{version}, or use version="{MAX_SUPPORTED_VERSION}"',
        )


def validate_widget_versions(document: Document) -> List[VersionWarning]:
    """Report widgets newer than the declared version without failing."""
    return [
        VersionWarning(node.kind, document.version, node.kind.minimum_version, node.span)
        for node in document.walk()
        if node.kind.minimum_version > document.version
    ]


def validate_no_circular_dependencies(path: Union[str, Path], visited: Optional[Set[Path]] = None) -> None:
    """Include cycles cannot occur: documents do not include other files yet."""
    return None


def _check_widget_versions_strict(root: WidgetNode, version: SchemaVersion) -> None:
    for node in root.walk():
        required = node.kind.minimum_version
        if required > version:
            warning = VersionWarning(node.kind, version, required, node.span)
            raise ParseError(
                ParseErrorKind.UNSUPPORTED_VERSION,
                warning.message,
                node.span,
                suggestion=warning.suggestion,
            )


class DocumentParser:
    """Turns markup text into a :class:`Document`."""

    def __init__(self, custom_widgets: Optional[Iterable[str]] = None):
        self.widgets = WidgetParser(custom_widgets)
        self.logger = logging.getLogger(__name__)

    def parse(self, source: Union[str, bytes]) -> Document:
        return self.parse_tree(parse_markup(source))

    def parse_tree(self, tree: MarkupTree) -> Document:
        root = tree.root
        if root.tag == ROOT_TAG:
            return self.parse_wrapper(root)

        self.logger.debug(f"Parsing bare <{root.tag}> root as a version {DEFAULT_VERSION} document")
        return Document(root=self.widgets.parse(root), version=DEFAULT_VERSION, follow_system=True)

    def parse_wrapper(self, root: MarkupElement) -> Document:
        version_attribute = root.attribute("version")
        if version_attribute is not None:
            version = parse_version(version_attribute.value, version_attribute.span)
            check_version_supported(version, version_attribute.span)
        else:
            version = DEFAULT_VERSION

        themes: Dict[str, Theme] = {}
        style_classes: Dict[str, StyleClass] = {}
        global_theme: Optional[str] = None
        follow_system = True
        widget: Optional[WidgetNode] = None

        for child in root.children:
            if child.tag == THEMES_SECTION:
                themes.update(self._themes(child))
            elif child.tag in CLASS_SECTIONS:
                style_classes.update(parse_classes_section(child))
            elif child.tag in GLOBAL_THEME_SECTIONS:
                name = child.get("name")
                if name is not None:
                    global_theme = name
            elif child.tag == FOLLOW_SYSTEM_SECTION:
                follow_system = parse_bool(child.get("enabled", "true"))
            else:
                if widget is not None:
                    raise ParseError(
                        ParseErrorKind.XML_SYNTAX,
                        f"Multiple root widgets found in <{ROOT_TAG}>",
                        child.span,
                        suggestion="Only one root widget is allowed",
                    )
                widget = self.widgets.parse(child)

        if widget is None:
            if not themes and not style_classes:
                raise ParseError(
                    ParseErrorKind.XML_SYNTAX,
                    f"No root widget found in <{ROOT_TAG}>",
                    root.span,
                    suggestion=f"Add a widget like <column> or <row> inside <{ROOT_TAG}>",
                )
            self.logger.debug("Theme-only document, using an empty column as root")
            widget = WidgetNode(kind=WidgetKind.COLUMN, span=root.span)

        _check_widget_versions_strict(widget, version)

        return Document(
            root=widget,
            version=version,
            themes=themes,
            style_classes=style_classes,
            global_theme=global_theme,
            follow_system=follow_system,
        )

    @staticmethod
    def _themes(section: MarkupElement) -> Dict[str, Theme]:
        try:
            return parse_themes_section(section)
        except ThemeError as exc:
            raise ParseError(
                ParseErrorKind.INVALID_VALUE,
                exc.message,
                exc.span or section.span,
                suggestion=exc.suggestion,
            ) from exc


def parse(source: Union[str, bytes], *, custom_widgets: Optional[Iterable[str]] = None) -> Document:
    """Parse markup text into a :class:`Document`, raising :class:`ParseError` on the first problem."""
    return DocumentParser(custom_widgets).parse(source)


def parse_file(path: Union[str, Path], *, custom_widgets: Optional[Iterable[str]] = None) -> Document:
    """Read and parse a document file, attaching the path to any :class:`ParseError`."""
    path = Path(path)
    try:
        return parse(path.read_bytes(), custom_widgets=custom_widgets)
    except ParseError as exc:
        exc.path = str(path)
        raise


__all__ = [
    "ROOT_TAG",
    "VersionWarning",
    "DocumentParser",
    "check_version_supported",
    "validate_widget_versions",
    "validate_no_circular_dependencies",
    "parse",
    "parse_file",
]
