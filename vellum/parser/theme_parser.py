"""
Theme and style class parsing.

Themes are written as::

    <theme name="dark" extends="base">
        <palette primary="#3498db" background="#1e1e1e" ... />
        <typography font_family="Inter" font_size_base="16" />
        <spacing unit="8" />
        <base_styles>
            <button border_radius="6" />
        </base_styles>
    </theme>

Style classes carry style and layout attributes directly, with state
variants either as prefixed attributes (``hover:background``,
``hover:focus:opacity``) or as child elements (``<hover background=.../>``).
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Union

from vellum.errors import (
    ParseError,
    ParseErrorKind,
    StyleValueError,
    ThemeError,
    ThemeErrorKind,
    find_similar,
)
from vellum.ir.node import WidgetKind
from vellum.ir.style import StyleProperties
from vellum.ir.theme import (
    PALETTE_COLORS,
    FontWeight,
    SpacingScale,
    StateSelector,
    StyleClass,
    Theme,
    ThemeDocument,
    ThemePalette,
    Typography,
    WidgetState,
)

from .attributes import split_state_selector
from .markup import MarkupElement, parse_markup
from .style_parser import LAYOUT_ATTRIBUTES, STYLE_ATTRIBUTES, build_layout, build_style, parse_color

logger = logging.getLogger(__name__)

DEFAULT_THEME_NAME = "default"

THEMES_SECTION = "themes"
CLASS_SECTIONS = ("style_classes", "classes", "styles")
CLASS_TAGS = ("class", "style")
GLOBAL_THEME_SECTIONS = ("global_theme", "default_theme")
FOLLOW_SYSTEM_SECTION = "follow_system"

TYPOGRAPHY_NUMBERS = ("font_size_base", "font_size_small", "font_size_large", "line_height")
TYPOGRAPHY_ATTRIBUTES = ("font_family", "font_weight") + TYPOGRAPHY_NUMBERS

CLASS_ATTRIBUTES = sorted(LAYOUT_ATTRIBUTES | STYLE_ATTRIBUTES | {"name", "extends"})


def _invalid(message: str, element: MarkupElement, suggestion: Optional[str] = None) -> ParseError:
    return ParseError(ParseErrorKind.INVALID_VALUE, message, element.span, suggestion=suggestion)


def _unknown_attribute(name: str, where: str, valid: List[str], element: MarkupElement) -> ParseError:
    similar = find_similar(name, valid)
    suggestion = f"Did you mean '{similar[0]}'?" if similar else f"Valid attributes are: {', '.join(valid)}"
    return _invalid(f"Unknown {where} attribute '{name}'", element, suggestion)


def parse_bool(text: str, default: bool = True) -> bool:
    """``true``/``false`` in any case; anything else falls back to ``default``."""
    lowered = text.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return default


# ----------------------------------------------------------------------
# Themes
# ----------------------------------------------------------------------

def parse_palette(element: MarkupElement, theme_name: str) -> ThemePalette:
    """Parse ``<palette>``; invalid colors raise ``THEME_004``."""
    valid = [name for name, _ in PALETTE_COLORS]
    colors = {}
    for attribute in element.attributes:
        if attribute.name not in valid:
            raise _unknown_attribute(attribute.name, "palette", valid, element)
        try:
            colors[attribute.name] = parse_color(attribute.value)
        except StyleValueError as exc:
            raise ThemeError(
                ThemeErrorKind.INVALID_COLOR_VALUE,
                f"Theme '{theme_name}' has invalid color value for {attribute.name}: {exc.message}",
                span=attribute.span,
                suggestion=f'Use a hex or named color, e.g. {attribute.name}="#3498db"',
            ) from exc
    return ThemePalette(**colors)


def parse_typography(element: MarkupElement) -> Typography:
    values: Dict[str, object] = {}
    for attribute in element.attributes:
        name, text = attribute.name, attribute.value.strip()
        if name == "font_family":
            values[name] = text
        elif name == "font_weight":
            try:
                values[name] = FontWeight(text.lower())
            except ValueError:
                options = ", ".join(weight.value for weight in FontWeight)
                raise _invalid(
                    f"Invalid font_weight '{text}'",
                    element,
                    f"Use one of: {options}",
                ) from None
        elif name in TYPOGRAPHY_NUMBERS:
            try:
                values[name] = float(text)
            except ValueError:
                raise _invalid(
                    f"Invalid typography value for {name}: '{text}'",
                    element,
                    f'Use a number, e.g. {name}="16"',
                ) from None
        else:
            raise _unknown_attribute(name, "typography", list(TYPOGRAPHY_ATTRIBUTES), element)
    return Typography(**values)


def parse_spacing(element: MarkupElement) -> SpacingScale:
    text = element.get("unit")
    if text is None:
        return SpacingScale()
    try:
        return SpacingScale(unit=float(text))
    except ValueError:
        raise _invalid(f"Invalid spacing unit: '{text}'", element, 'Use a number, e.g. <spacing unit="8" />') from None


def parse_base_styles(element: MarkupElement) -> Dict[str, StyleProperties]:
    styles: Dict[str, StyleProperties] = {}
    for child in element.children:
        if WidgetKind.from_tag(child.tag) is None:
            valid = WidgetKind.all_standard()
            similar = find_similar(child.tag, valid)
            raise ParseError(
                ParseErrorKind.UNKNOWN_WIDGET,
                f"Unknown widget in base_styles: {child.tag}",
                child.span,
                suggestion=f"Did you mean '{similar[0]}'?" if similar else f"Valid widgets are: {', '.join(valid)}",
            )
        try:
            style = build_style(child.attribute_map())
        except StyleValueError as exc:
            raise _invalid(f"Invalid base style for '{child.tag}': {exc.message}", child) from exc
        styles[child.tag] = style if style is not None else StyleProperties()
    return styles


def parse_theme(element: MarkupElement) -> Theme:
    """Parse a ``<theme>`` element. The name defaults to ``"default"``."""
    name = element.get("name") or DEFAULT_THEME_NAME
    extends = element.get("extends")
    theme = Theme(name=name, extends=extends.strip() or None if extends else None, span=element.span)

    for child in element.children:
        if child.tag == "palette":
            theme.palette = parse_palette(child, name)
        elif child.tag == "typography":
            theme.typography = parse_typography(child)
        elif child.tag == "spacing":
            theme.spacing = parse_spacing(child)
        elif child.tag == "base_styles":
            theme.base_styles = parse_base_styles(child)
        else:
            raise _invalid(
                f"Unknown element <{child.tag}> in theme '{name}'",
                child,
                "Themes contain <palette>, <typography>, <spacing> and <base_styles>",
            )
    logger.debug(f"Parsed theme '{name}'" + (f" extending '{theme.extends}'" if theme.extends else ""))
    return theme


def parse_themes_section(element: MarkupElement) -> Dict[str, Theme]:
    themes: Dict[str, Theme] = {}
    for child in element.children:
        if child.tag != "theme":
            continue
        theme = parse_theme(child)
        if theme.name in themes:
            raise ThemeError(
                ThemeErrorKind.DUPLICATE_THEME_NAME,
                f"Duplicate theme name '{theme.name}'",
                span=child.span,
                suggestion="Give each <theme> a unique name",
            )
        themes[theme.name] = theme
    return themes


# ----------------------------------------------------------------------
# Style classes
# ----------------------------------------------------------------------

def _build_state_style(values: Dict[str, str], selector: Union[WidgetState, StateSelector],
                       element: MarkupElement) -> StyleProperties:
    label = selector.value if isinstance(selector, WidgetState) else str(selector)
    try:
        style = build_style(values)
    except StyleValueError as exc:
        raise _invalid(f"Invalid style in {label} state: {exc.message}", element) from exc
    return style if style is not None else StyleProperties()


def parse_style_class(element: MarkupElement) -> StyleClass:
    """Parse a ``<class>`` (or ``<style>``) element."""
    name = (element.get("name") or "").strip()
    if not name:
        raise _invalid("Style class must have a name", element, 'Add a name: <class name="primary_button">')

    base: Dict[str, str] = {}
    extends: List[str] = []
    single: Dict[WidgetState, Dict[str, str]] = {}
    combined: Dict[StateSelector, Dict[str, str]] = {}

    for attribute in element.attributes:
        key, value = attribute.name, attribute.value
        if key == "name":
            continue
        if key == "extends":
            extends = value.split()
            continue
        if ":" in key:
            split = split_state_selector(key)
            if split is None:
                prefix = key.rsplit(":", 1)[0]
                raise _invalid(
                    f"Invalid state prefix: {prefix}",
                    element,
                    f"Valid states are: {', '.join(state.value for state in WidgetState)}",
                )
            selector, attr_name = split
            if selector.is_single:
                single.setdefault(selector.states[0], {})[attr_name] = value
            else:
                combined.setdefault(selector, {})[attr_name] = value
            continue
        if key not in LAYOUT_ATTRIBUTES and key not in STYLE_ATTRIBUTES:
            raise _unknown_attribute(key, "style class", CLASS_ATTRIBUTES, element)
        base[key] = value

    for child in element.children:
        state = WidgetState.from_prefix(child.tag)
        if state is None:
            raise _invalid(
                f"Unknown element <{child.tag}> in style class '{name}'",
                child,
                f"Use a state element such as <hover>; valid states are: "
                f"{', '.join(s.value for s in WidgetState)}",
            )
        single.setdefault(state, {}).update(child.attribute_map())

    try:
        style = build_style(base)
        layout = build_layout(base)
    except StyleValueError as exc:
        raise _invalid(f"Invalid style class '{name}': {exc.message}", element) from exc

    return StyleClass(
        name=name,
        style=style if style is not None else StyleProperties(),
        layout=layout,
        extends=extends,
        state_variants={
            state: _build_state_style(values, state, element) for state, values in single.items()
        },
        combined_state_variants={
            selector: _build_state_style(values, selector, element) for selector, values in combined.items()
        },
        span=element.span,
    )


def parse_classes_section(element: MarkupElement) -> Dict[str, StyleClass]:
    classes: Dict[str, StyleClass] = {}
    for child in element.children:
        if child.tag in CLASS_TAGS:
            style_class = parse_style_class(child)
            classes[style_class.name] = style_class
    return classes


# ----------------------------------------------------------------------
# Standalone theme documents
# ----------------------------------------------------------------------

def parse_theme_document(source: Union[str, bytes]) -> ThemeDocument:
    """
    Parse a standalone theme file.

    The root is either a wrapper element holding ``<themes>``,
    ``<default_theme name=.../>`` and ``<follow_system enabled=.../>``
    sections, or a bare ``<themes>`` element. The result is validated, so
    an empty document raises ``THEME_001``, an unknown default theme
    raises ``THEME_002`` and a broken ``extends`` chain raises
    ``THEME_006``, ``THEME_007`` or ``THEME_008``.
    """
    tree = parse_markup(source)
    root = tree.root

    document = ThemeDocument(follow_system=True)
    sections = [root] if root.tag == THEMES_SECTION else root.children
    for section in sections:
        if section.tag == THEMES_SECTION:
            for name, theme in parse_themes_section(section).items():
                if name in document.themes:
                    raise ThemeError(
                        ThemeErrorKind.DUPLICATE_THEME_NAME,
                        f"Duplicate theme name '{name}'",
                        span=theme.span,
                        suggestion="Give each <theme> a unique name",
                    )
                document.themes[name] = theme
        elif section.tag in GLOBAL_THEME_SECTIONS:
            document.default_theme = section.get("name")
        elif section.tag == FOLLOW_SYSTEM_SECTION:
            document.follow_system = parse_bool(section.get("enabled", "true"))
        else:
            raise _invalid(
                f"Unexpected element <{section.tag}> in theme document",
                section,
                "Theme documents contain <themes>, <default_theme> and <follow_system>",
            )

    if root.tag == THEMES_SECTION and root.get("default") is not None:
        document.default_theme = root.get("default")

    document.validate()
    document.validate_inheritance()
    logger.info(f"Loaded {len(document.themes)} theme(s), default: {document.default_theme or 'none'}")
    return document


__all__ = [
    "DEFAULT_THEME_NAME",
    "CLASS_SECTIONS",
    "GLOBAL_THEME_SECTIONS",
    "FOLLOW_SYSTEM_SECTION",
    "THEMES_SECTION",
    "parse_bool",
    "parse_palette",
    "parse_typography",
    "parse_spacing",
    "parse_base_styles",
    "parse_theme",
    "parse_themes_section",
    "parse_style_class",
    "parse_classes_section",
    "parse_theme_document",
]
