"""Tests for theme, style class and theme document parsing."""

import pytest

from vellum.errors import ParseError, ParseErrorKind, ThemeError, ThemeErrorKind
from vellum.ir.layout import Padding
from vellum.ir.style import Color
from vellum.ir.theme import FontWeight, StateSelector, WidgetState
from vellum.parser.markup import parse_markup
from vellum.parser.theme_parser import (
    parse_bool,
    parse_style_class,
    parse_theme,
    parse_theme_document,
)


def theme(source):
    return parse_theme(parse_markup(source).root)


def style_class(source):
    return parse_style_class(parse_markup(source).root)


class TestParseTheme:
    """``<theme>`` elements."""

    def test_full_theme(self, palette):
        parsed = theme(f'''<theme name="light">
            <palette {palette()} />
            <typography font_family="Inter" font_size_base="16" font_weight="bold" line_height="1.5" />
            <spacing unit="8" />
            <base_styles><button border_radius="6" /></base_styles>
        </theme>''')
        assert parsed.name == "light"
        assert parsed.palette.primary == Color.from_rgb8(0x34, 0x98, 0xDB)
        assert parsed.palette.missing() == []
        assert parsed.typography.font_family == "Inter"
        assert parsed.typography.font_weight is FontWeight.BOLD
        assert parsed.spacing.unit == 8.0
        assert parsed.base_styles["button"].border.radius.top_left == 6.0
        assert parsed.validation_errors() == []

    def test_name_defaults(self):
        assert theme('<theme />').name == "default"

    def test_extends(self):
        parsed = theme('<theme name="dark" extends="light"><palette background="#000" /></theme>')
        assert parsed.extends == "light"
        assert parsed.palette.background == Color(0.0, 0.0, 0.0)
        assert parsed.palette.primary is None

    def test_invalid_color(self):
        with pytest.raises(ThemeError) as exc_info:
            theme('<theme name="t"><palette primary="blurple" /></theme>')
        assert exc_info.value.kind is ThemeErrorKind.INVALID_COLOR_VALUE
        assert exc_info.value.message.startswith("THEME_004: Theme 't' has invalid color value for primary")

    def test_unknown_palette_color(self):
        with pytest.raises(ParseError) as exc_info:
            theme('<theme><palette primry="#fff" /></theme>')
        assert exc_info.value.message == "Unknown palette attribute 'primry'"
        assert exc_info.value.suggestion == "Did you mean 'primary'?"

    def test_bad_typography(self):
        with pytest.raises(ParseError):
            theme('<theme><typography font_weight="heavy" /></theme>')
        with pytest.raises(ParseError):
            theme('<theme><typography font_size_base="big" /></theme>')

    def test_bad_spacing(self):
        with pytest.raises(ParseError) as exc_info:
            theme('<theme><spacing unit="wide" /></theme>')
        assert exc_info.value.message == "Invalid spacing unit: 'wide'"

    def test_unknown_base_style_widget(self):
        with pytest.raises(ParseError) as exc_info:
            theme('<theme><base_styles><buton opacity="1" /></base_styles></theme>')
        assert exc_info.value.kind is ParseErrorKind.UNKNOWN_WIDGET

    def test_unknown_child(self):
        with pytest.raises(ParseError) as exc_info:
            theme('<theme name="t"><colors /></theme>')
        assert exc_info.value.message == "Unknown element <colors> in theme 't'"


class TestParseStyleClass:
    """``<class>`` elements."""

    def test_base_style_and_layout(self):
        parsed = style_class('<class name="card" padding="16" background="#ffffff" border_radius="8" />')
        assert parsed.name == "card"
        assert parsed.layout.padding == Padding(16, 16, 16, 16)
        assert parsed.style.background == Color(1.0, 1.0, 1.0)
        assert parsed.extends == []

    def test_multiple_parents(self):
        assert style_class('<class name="x" extends="a  b" />').extends == ["a", "b"]

    def test_state_prefixes(self):
        parsed = style_class(
            '<class name="btn" hover:background="#ff0000" active:hover:opacity="0.5" focus:opacity="0.9" />'
        )
        assert parsed.state_variants[WidgetState.HOVER].background == Color(1.0, 0.0, 0.0)
        assert parsed.state_variants[WidgetState.FOCUS].opacity == 0.9
        selector = StateSelector.combined([WidgetState.HOVER, WidgetState.ACTIVE])
        assert parsed.combined_state_variants[selector].opacity == 0.5

    def test_state_child_elements(self):
        parsed = style_class('<class name="btn"><hover background="#000000" /><disabled opacity="0.4" /></class>')
        assert parsed.state_variants[WidgetState.HOVER].background == Color(0.0, 0.0, 0.0)
        assert parsed.state_variants[WidgetState.DISABLED].opacity == 0.4

    def test_layout_absent_when_unused(self):
        assert style_class('<class name="c" opacity="0.5" />').layout is None

    def test_missing_name(self):
        with pytest.raises(ParseError) as exc_info:
            style_class('<class opacity="1" />')
        assert exc_info.value.message == "Style class must have a name"

    def test_invalid_state_prefix(self):
        with pytest.raises(ParseError) as exc_info:
            style_class('<class name="c" pressed:opacity="1" />')
        assert exc_info.value.message == "Invalid state prefix: pressed"

    def test_unknown_attribute(self):
        with pytest.raises(ParseError) as exc_info:
            style_class('<class name="c" backgroud="#fff" />')
        assert exc_info.value.suggestion == "Did you mean 'background'?"

    def test_invalid_value(self):
        with pytest.raises(ParseError) as exc_info:
            style_class('<class name="c" opacity="3" />')
        assert exc_info.value.message.startswith("Invalid style class 'c':")


class TestThemeDocuments:
    """Standalone theme files."""

    def test_wrapper_document(self, theme_document):
        document = parse_theme_document(theme_document)
        assert set(document.themes) == {"light", "dark"}
        assert document.default_theme == "dark"
        assert document.follow_system is False
        assert document.resolve_inheritance()["dark"].palette.primary is not None

    def test_bare_themes_root(self, palette):
        source = f'<themes default="light"><theme name="light"><palette {palette()} /></theme></themes>'
        document = parse_theme_document(source)
        assert document.default_theme == "light"
        assert document.follow_system is True

    def test_no_themes_defined(self):
        with pytest.raises(ThemeError) as exc_info:
            parse_theme_document("<theme_document><themes /></theme_document>")
        assert exc_info.value.kind is ThemeErrorKind.NO_THEMES_DEFINED
        assert exc_info.value.code == "THEME_001"

    def test_default_theme_not_found(self, palette):
        source = f'''<theme_document>
            <themes>
                <theme name="light"><palette {palette()} /></theme>
                <theme name="dark" extends="light" />
            </themes>
            <default_theme name="ocean" />
        </theme_document>'''
        with pytest.raises(ThemeError) as exc_info:
            parse_theme_document(source)
        assert exc_info.value.code == "THEME_002"
        assert "Available: dark, light" in exc_info.value.message

    def test_duplicate_theme_name(self, palette):
        source = f'''<themes>
            <theme name="a"><palette {palette()} /></theme>
            <theme name="a"><palette {palette()} /></theme>
        </themes>'''
        with pytest.raises(ThemeError) as exc_info:
            parse_theme_document(source)
        assert exc_info.value.code == "THEME_005"

    def test_incomplete_palette_without_parent(self):
        with pytest.raises(ThemeError) as exc_info:
            parse_theme_document('<themes><theme name="a"><palette primary="#fff" /></theme></themes>')
        assert exc_info.value.code == "THEME_003"

    def test_inheritance_cycle(self):
        source = '<themes><theme name="a" extends="b" /><theme name="b" extends="a" /></themes>'
        with pytest.raises(ThemeError) as exc_info:
            parse_theme_document(source)
        assert exc_info.value.code == "THEME_007"
        assert "a → b → a" in exc_info.value.message

    def test_missing_parent(self):
        with pytest.raises(ThemeError) as exc_info:
            parse_theme_document('<themes><theme name="a" extends="ghost" /></themes>')
        assert exc_info.value.code == "THEME_006"
        assert "Parent theme 'ghost' not found for theme 'a'" in exc_info.value.message

    def test_unexpected_section(self):
        with pytest.raises(ParseError):
            parse_theme_document("<theme_document><widgets /></theme_document>")


def test_parse_bool():
    assert parse_bool("TRUE") is True
    assert parse_bool(" false ") is False
    assert parse_bool("maybe") is True
    assert parse_bool("maybe", default=False) is False
