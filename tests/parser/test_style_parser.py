"""Tests for typed layout and style value parsers."""

import math

import pytest

from vellum.errors import StyleValueError
from vellum.ir.layout import Alignment, Direction, Justification, Length, LengthKind, Padding, Position
from vellum.ir.style import (
    BackgroundImage,
    BorderRadius,
    BorderStyle,
    Color,
    LinearGradient,
    RadialGradient,
    RadialShape,
    Rotate,
    Scale,
    ScaleXY,
    Translate,
)
from vellum.parser.style_parser import (
    build_layout,
    build_style,
    parse_alignment,
    parse_angle,
    parse_background,
    parse_border_radius,
    parse_color,
    parse_direction,
    parse_fill_portion,
    parse_justification,
    parse_length,
    parse_opacity,
    parse_padding,
    parse_percentage,
    parse_position,
    parse_shadow,
    parse_spacing,
    parse_transform,
)


def close(color, r, g, b, a=1.0):
    return all(math.isclose(x, y, abs_tol=0.005) for x, y in zip(
        (color.r, color.g, color.b, color.a), (r, g, b, a)
    ))


class TestColors:
    """Hex, functional and named colors."""

    def test_hex_forms(self):
        assert parse_color("#3498db") == Color.from_rgb8(0x34, 0x98, 0xDB)
        assert parse_color("#fff") == Color.from_rgb8(255, 255, 255)
        assert close(parse_color("#00000080"), 0, 0, 0, 128 / 255)

    def test_rgb(self):
        assert parse_color("rgb(255, 0, 0)") == Color(1.0, 0.0, 0.0)
        assert close(parse_color("rgba(0, 0, 255, 0.5)"), 0, 0, 1, 0.5)
        assert close(parse_color("rgb(100%, 50%, 0%)"), 1, 0.5, 0)

    def test_hsl(self):
        assert close(parse_color("hsl(0, 100%, 50%)"), 1, 0, 0)
        assert close(parse_color("hsla(120deg, 100%, 50%, 0.25)"), 0, 1, 0, 0.25)

    def test_named(self):
        assert parse_color("red") == Color(1.0, 0.0, 0.0)
        assert parse_color("CornflowerBlue") == parse_color("#6495ed")

    @pytest.mark.parametrize("text", ["#12", "#ggg", "rgb(300, 0, 0)", "rgb(1, 2)", "hsl(0, 50, 50)", "notacolor"])
    def test_invalid(self, text):
        with pytest.raises(StyleValueError) as exc_info:
            parse_color(text)
        assert exc_info.value.message.startswith("Invalid color")


class TestLengths:
    """Sizing keywords, percentages, portions and pixels."""

    def test_keywords(self):
        assert parse_length("fill") == Length.fill()
        assert parse_length("Shrink") == Length.shrink()

    def test_fill_portion(self):
        assert parse_length("fill_portion(3)") == Length(LengthKind.FILL_PORTION, 3)
        with pytest.raises(StyleValueError):
            parse_fill_portion("0")
        with pytest.raises(StyleValueError):
            parse_fill_portion("two")

    def test_percentage_and_pixels(self):
        assert parse_length("50%") == Length.percentage(50)
        assert parse_length("120") == Length.fixed(120)
        assert parse_percentage("100%") == 100.0
        with pytest.raises(StyleValueError):
            parse_percentage("150%")

    def test_invalid(self):
        with pytest.raises(StyleValueError) as exc_info:
            parse_length("wide")
        assert exc_info.value.message == "Invalid length value: wide"


class TestBoxValues:
    """Padding shorthand and scalar values."""

    def test_padding_shorthand(self):
        assert parse_padding("8") == Padding(8, 8, 8, 8)
        assert parse_padding("4 12") == Padding(4, 12, 4, 12)
        assert parse_padding("1 2 3 4") == Padding(1, 2, 3, 4)

    def test_padding_three_values_rejected(self):
        with pytest.raises(StyleValueError) as exc_info:
            parse_padding("1 2 3")
        assert "Expected 1, 2, or 4 values" in exc_info.value.message

    def test_spacing(self):
        assert parse_spacing("10") == 10.0
        with pytest.raises(StyleValueError):
            parse_spacing("-1")

    def test_opacity(self):
        assert parse_opacity("0.5") == 0.5
        with pytest.raises(StyleValueError):
            parse_opacity("1.5")
        with pytest.raises(StyleValueError):
            parse_opacity("nan")


class TestKeywords:
    """Enumerated layout values."""

    def test_alignment(self):
        assert parse_alignment("center") is Alignment.CENTER
        with pytest.raises(StyleValueError) as exc_info:
            parse_alignment("middle")
        assert "Expected start, center, end, or stretch" in exc_info.value.message

    def test_others(self):
        assert parse_justification("space_between") is Justification.SPACE_BETWEEN
        assert parse_direction("vertical_reverse") is Direction.VERTICAL_REVERSE
        assert parse_position("absolute") is Position.ABSOLUTE


class TestBackgrounds:
    """Colors, images and gradients."""

    def test_image(self):
        assert parse_background("url('bg.png')") == BackgroundImage("bg.png")

    def test_linear_gradient(self):
        gradient = parse_background("linear-gradient(90deg, #ff0000, #0000ff)")
        assert isinstance(gradient, LinearGradient)
        assert gradient.angle == 90.0
        assert [stop.offset for stop in gradient.stops] == [0.0, 1.0]

    def test_gradient_stops_spread_evenly(self):
        gradient = parse_background("linear-gradient(0.25turn, red, green, blue)")
        assert gradient.angle == 90.0
        assert [stop.offset for stop in gradient.stops] == [0.0, 0.5, 1.0]

    def test_explicit_offsets_and_functional_colors(self):
        gradient = parse_background("linear-gradient(45deg, rgb(255, 0, 0) 0%, rgba(0, 0, 255, 0.5) 100%)")
        assert len(gradient.stops) == 2
        assert close(gradient.stops[1].color, 0, 0, 1, 0.5)

    def test_radial(self):
        gradient = parse_background("radial-gradient(circle, white, black)")
        assert isinstance(gradient, RadialGradient)
        assert gradient.shape is RadialShape.CIRCLE

    def test_descending_offsets_rejected(self):
        with pytest.raises(StyleValueError) as exc_info:
            parse_background("linear-gradient(0deg, red 80%, blue 20%)")
        assert "ascending order" in exc_info.value.message

    def test_single_stop_rejected(self):
        with pytest.raises(StyleValueError):
            parse_background("linear-gradient(0deg, red)")

    def test_angles(self):
        assert parse_angle("450deg") == 90.0
        assert math.isclose(parse_angle(f"{math.pi}rad"), 180.0)
        assert parse_angle("30") == 30.0


class TestComposites:
    """Borders, shadows and transforms."""

    def test_border_radius(self):
        assert parse_border_radius("6") == BorderRadius.uniform(6)
        assert parse_border_radius("1 2 3 4") == BorderRadius(1, 2, 3, 4)
        with pytest.raises(StyleValueError):
            parse_border_radius("1 2")

    def test_shadow(self):
        shadow = parse_shadow("2 4 8 rgba(0, 0, 0, 0.3)")
        assert (shadow.offset_x, shadow.offset_y, shadow.blur_radius) == (2, 4, 8)
        assert close(shadow.color, 0, 0, 0, 0.3)

    def test_shadow_needs_four_parts(self):
        with pytest.raises(StyleValueError):
            parse_shadow("2 4 #000")

    def test_transforms(self):
        assert parse_transform("scale(1.5)") == Scale(1.5)
        assert parse_transform("scale(1, 2)") == ScaleXY(1, 2)
        assert parse_transform("rotate(45deg)") == Rotate(45)
        assert parse_transform("translate(10, -5)") == Translate(10, -5)
        with pytest.raises(StyleValueError):
            parse_transform("skew(10)")


class TestBuilders:
    """Structured layout and style from attribute maps."""

    def test_no_relevant_attributes(self):
        assert build_layout({"label": "x"}) is None
        assert build_style({"label": "x"}) is None

    def test_layout(self):
        layout = build_layout({"width": "fill", "padding": "4 8", "spacing": "10"})
        assert layout.width == Length.fill()
        assert layout.padding == Padding(4, 8, 4, 8)
        assert layout.spacing == 10.0
        assert layout.height is None

    def test_align_shorthand(self):
        layout = build_layout({"align": "center"})
        assert layout.align_items is Alignment.CENTER
        assert layout.justify_content is Justification.CENTER

    def test_skip_position(self):
        assert build_layout({"position": "top"}, skip_position=True) is None

    def test_layout_relationships_checked(self):
        with pytest.raises(StyleValueError) as exc_info:
            build_layout({"min_width": "300", "max_width": "100"})
        assert exc_info.value.message.startswith("Layout validation failed:")

    def test_style_with_border(self):
        style = build_style({"background": "#ffffff", "border_width": "2", "border_style": "dashed"})
        assert style.background == Color(1.0, 1.0, 1.0)
        assert style.border.width == 2.0
        assert style.border.style is BorderStyle.DASHED
        assert style.border.color == Color(0.0, 0.0, 0.0)
