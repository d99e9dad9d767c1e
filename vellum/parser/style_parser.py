"""
Typed parsers for literal layout and style attribute values.

Each ``parse_*`` function takes the literal text of one attribute and
returns a typed value or raises :class:`StyleValueError`. They hold no
state, so the same functions serve plain, breakpoint-prefixed and
state-prefixed attributes as well as style class and theme definitions.
"""

from __future__ import annotations

import colorsys
import math
import re
from typing import Dict, List, Mapping, Optional, Tuple

from vellum.errors import StyleValueError
from vellum.ir.layout import (
    Alignment,
    Direction,
    Justification,
    LayoutConstraints,
    Length,
    Padding,
    Position,
)
from vellum.ir.style import (
    BLACK,
    Background,
    BackgroundImage,
    Border,
    BorderRadius,
    BorderStyle,
    Color,
    ColorStop,
    LinearGradient,
    RadialGradient,
    RadialShape,
    Rotate,
    Scale,
    ScaleXY,
    Shadow,
    StyleProperties,
    Transform,
    Translate,
    validate_gradient,
)

from .colors import NAMED_COLORS

LAYOUT_ATTRIBUTES = frozenset({
    "width", "height", "min_width", "max_width", "min_height", "max_height",
    "padding", "spacing", "align_items", "justify_content", "align_self",
    "align_x", "align_y", "align", "direction", "position",
    "top", "right", "bottom", "left", "z_index",
})

STYLE_ATTRIBUTES = frozenset({
    "background", "color", "border_width", "border_color", "border_radius",
    "border_style", "shadow", "opacity", "transform",
})

_HEX_RE = re.compile(r"^#([0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_FUNCTION_RE = re.compile(r"^([a-z-]+)\((.*)\)$", re.DOTALL)


def _number(text: str, what: str) -> float:
    try:
        value = float(text.strip())
    except ValueError:
        raise StyleValueError(f"Invalid {what}: {text.strip()}") from None
    if not math.isfinite(value):
        raise StyleValueError(f"Invalid {what}: {text.strip()}")
    return value


def _keyword(text: str, enum_type, what: str, expected: str):
    try:
        return enum_type(text.strip().lower())
    except ValueError:
        raise StyleValueError(f"Invalid {what}: '{text}'. Expected {expected}") from None


def _split_arguments(text: str) -> List[str]:
    """Split on commas that are not nested inside parentheses."""
    parts, depth, current = [], 0, []
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    parts.append("".join(current).strip())
    return parts


# ----------------------------------------------------------------------
# Colors
# ----------------------------------------------------------------------

def parse_color(text: str) -> Color:
    """Parse ``#RGB``, ``#RRGGBB``, ``#RRGGBBAA``, ``rgb()``, ``hsl()`` or a color name."""
    value = text.strip()
    lowered = value.lower()

    if lowered in NAMED_COLORS:
        return _parse_hex(NAMED_COLORS[lowered])

    if value.startswith("#"):
        if not _HEX_RE.match(value):
            raise StyleValueError(f"Invalid color '{text}': invalid hex format")
        return _parse_hex(value)

    match = _FUNCTION_RE.match(lowered)
    if match:
        name, args = match.group(1), match.group(2)
        components = [c for c in re.split(r"[\s,/]+", args.strip()) if c]
        if name in ("rgb", "rgba"):
            return _parse_rgb(text, components)
        if name in ("hsl", "hsla"):
            return _parse_hsl(text, components)

    raise StyleValueError(f"Invalid color '{text}': unrecognized color format")


def _parse_hex(value: str) -> Color:
    digits = value[1:]
    if len(digits) in (3, 4):
        digits = "".join(ch * 2 for ch in digits)
    r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
    a = int(digits[6:8], 16) / 255.0 if len(digits) == 8 else 1.0
    return Color.from_rgb8(r, g, b, a)


def _alpha(text: str, component: str) -> float:
    if component.endswith("%"):
        alpha = _number(component[:-1], "alpha") / 100.0
    else:
        alpha = _number(component, "alpha")
    if not 0.0 <= alpha <= 1.0:
        raise StyleValueError(f"Invalid color '{text}': alpha must be between 0 and 1")
    return alpha


def _parse_rgb(text: str, components: List[str]) -> Color:
    if len(components) not in (3, 4):
        raise StyleValueError(f"Invalid color '{text}': expected 3 or 4 components")
    channels = []
    for component in components[:3]:
        if component.endswith("%"):
            channel = _number(component[:-1], "color component") / 100.0
        else:
            channel = _number(component, "color component") / 255.0
        if not 0.0 <= channel <= 1.0:
            raise StyleValueError(f"Invalid color '{text}': component out of range")
        channels.append(channel)
    alpha = _alpha(text, components[3]) if len(components) == 4 else 1.0
    return Color(channels[0], channels[1], channels[2], alpha)


def _parse_hsl(text: str, components: List[str]) -> Color:
    if len(components) not in (3, 4):
        raise StyleValueError(f"Invalid color '{text}': expected 3 or 4 components")
    hue_text = components[0]
    if hue_text.endswith("deg"):
        hue_text = hue_text[:-3]
    hue = (_number(hue_text, "hue") % 360.0) / 360.0
    percents = []
    for component in components[1:3]:
        if not component.endswith("%"):
            raise StyleValueError(f"Invalid color '{text}': saturation and lightness need '%'")
        percent = _number(component[:-1], "color component") / 100.0
        if not 0.0 <= percent <= 1.0:
            raise StyleValueError(f"Invalid color '{text}': component out of range")
        percents.append(percent)
    saturation, lightness = percents
    r, g, b = colorsys.hls_to_rgb(hue, lightness, saturation)
    alpha = _alpha(text, components[3]) if len(components) == 4 else 1.0
    return Color(r, g, b, alpha)


# ----------------------------------------------------------------------
# Layout values
# ----------------------------------------------------------------------

def parse_length(text: str) -> Length:
    """Parse ``fill``, ``shrink``, ``fill_portion(n)``, ``n%`` or pixels."""
    value = text.strip()
    lowered = value.lower()
    if lowered == "fill":
        return Length.fill()
    if lowered == "shrink":
        return Length.shrink()
    if lowered.startswith("fill_portion(") and lowered.endswith(")"):
        return Length.fill_portion(parse_fill_portion(value[13:-1]))
    if value.endswith("%"):
        return Length.percentage(_number(value[:-1], "percentage"))
    return Length.fixed(_number(value, "length value"))


def parse_fill_portion(text: str) -> int:
    try:
        portion = int(text.strip())
    except ValueError:
        raise StyleValueError(f"Invalid fill_portion: {text}") from None
    if not 1 <= portion <= 255:
        raise StyleValueError(f"fill_portion must be 1-255, got {portion}")
    return portion


def parse_percentage(text: str) -> float:
    value = text.strip()
    if not value.endswith("%"):
        raise StyleValueError(f"Percentage must end with '%', got {value}")
    percent = _number(value[:-1], "percentage")
    if not 0.0 <= percent <= 100.0:
        raise StyleValueError(f"Percentage must be 0.0-100.0, got {percent:g}")
    return percent


def parse_padding(text: str) -> Padding:
    """Parse 1, 2 or 4 space-separated values with CSS shorthand expansion."""
    parts = text.split()
    if len(parts) == 1:
        return Padding.all(_number(parts[0], "padding"))
    if len(parts) == 2:
        vertical = _number(parts[0], "vertical padding")
        horizontal = _number(parts[1], "horizontal padding")
        return Padding(vertical, horizontal, vertical, horizontal)
    if len(parts) == 4:
        top, right, bottom, left = (
            _number(part, label)
            for part, label in zip(parts, ("top padding", "right padding", "bottom padding", "left padding"))
        )
        return Padding(top, right, bottom, left)
    raise StyleValueError(f"Invalid padding format: '{text}'. Expected 1, 2, or 4 values")


def parse_spacing(text: str) -> float:
    value = _number(text, "spacing")
    if value < 0:
        raise StyleValueError(f"Spacing must be non-negative, got {value:g}")
    return value


def parse_constraint(text: str) -> float:
    value = _number(text, "constraint value")
    if value < 0:
        raise StyleValueError(f"Constraint must be non-negative, got {value:g}")
    return value


def parse_alignment(text: str) -> Alignment:
    return _keyword(text, Alignment, "alignment", "start, center, end, or stretch")


def parse_justification(text: str) -> Justification:
    return _keyword(
        text, Justification, "justification",
        "start, center, end, space_between, space_around, or space_evenly",
    )


def parse_direction(text: str) -> Direction:
    return _keyword(
        text, Direction, "direction",
        "horizontal, horizontal_reverse, vertical, or vertical_reverse",
    )


def parse_position(text: str) -> Position:
    return _keyword(text, Position, "position", "relative or absolute")


def parse_float_attr(text: str, name: str) -> float:
    return _number(text, f"{name} value")


def parse_int_attr(text: str, name: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise StyleValueError(f"Invalid {name} value: {text.strip()}") from None


# ----------------------------------------------------------------------
# Style values
# ----------------------------------------------------------------------

def parse_background(text: str) -> Background:
    """Parse a color, ``url(path)`` image or CSS gradient."""
    value = text.strip()
    if value.startswith(("linear-gradient(", "radial-gradient(")):
        return parse_gradient(value)
    if value.startswith("url(") and value.endswith(")"):
        path = value[4:-1].strip().strip("'\"")
        return BackgroundImage(path)
    return parse_color(value)


def parse_gradient(text: str):
    value = text.strip()
    match = _FUNCTION_RE.match(value)
    if not match or match.group(1) not in ("linear-gradient", "radial-gradient"):
        raise StyleValueError(
            f"Invalid gradient format: '{text}'. Expected linear-gradient(...) or radial-gradient(...)"
        )
    name, inner = match.group(1), match.group(2)
    parts = _split_arguments(inner)
    if len(parts) < 2:
        raise StyleValueError(f"Gradient requires a {'angle' if name.startswith('linear') else 'shape'} and color stops")

    stops = parse_color_stops(parts[1:])
    if name == "linear-gradient":
        gradient = LinearGradient(parse_angle(parts[0]), stops)
    else:
        shape = _keyword(parts[0], RadialShape, "radial shape", "circle or ellipse")
        gradient = RadialGradient(shape, stops)
    validate_gradient(gradient)
    return gradient


def parse_angle(text: str) -> float:
    """Parse an angle in ``deg``, ``rad``, ``turn`` or bare degrees."""
    value = text.strip()
    if value.endswith("deg"):
        return _number(value[:-3], "degree value") % 360.0
    if value.endswith("rad"):
        return math.degrees(_number(value[:-3], "radian value")) % 360.0
    if value.endswith("turn"):
        return (_number(value[:-4], "turn value") * 360.0) % 360.0
    return _number(value, "angle") % 360.0


def parse_color_stops(parts: List[str]) -> Tuple[ColorStop, ...]:
    """Parse ``color [offset]`` stops; missing offsets are spread evenly."""
    parsed: List[Tuple[Color, Optional[float]]] = []
    for part in parts:
        pieces = part.rsplit(None, 1)
        if not pieces:
            raise StyleValueError("Empty color stop")
        offset: Optional[float] = None
        color_text = part
        if len(pieces) == 2 and re.match(r"^-?[\d.]+%?$", pieces[1]):
            color_text = pieces[0]
            if pieces[1].endswith("%"):
                offset = _number(pieces[1][:-1], "offset") / 100.0
            else:
                offset = _number(pieces[1], "offset")
        parsed.append((parse_color(color_text), offset))

    count = len(parsed)
    stops = []
    for index, (color, offset) in enumerate(parsed):
        if offset is None:
            offset = index / (count - 1) if count > 1 else 0.0
        stops.append(ColorStop(color, offset))
    return tuple(stops)


def parse_border_width(text: str) -> float:
    value = _number(text, "border width")
    if value < 0:
        raise StyleValueError(f"Border width must be non-negative, got {value:g}")
    return value


def parse_border_radius(text: str) -> BorderRadius:
    parts = text.split()
    if len(parts) == 1:
        radius = BorderRadius.uniform(_number(parts[0], "border radius"))
    elif len(parts) == 4:
        radius = BorderRadius(*(_number(part, "border radius") for part in parts))
    else:
        raise StyleValueError(f"Invalid border radius format: '{text}'. Expected 1 or 4 values")
    if min(radius.top_left, radius.top_right, radius.bottom_right, radius.bottom_left) < 0:
        raise StyleValueError("Border radius values must be non-negative")
    return radius


def parse_border_style(text: str) -> BorderStyle:
    return _keyword(text, BorderStyle, "border style", "solid, dashed, or dotted")


def parse_shadow(text: str) -> Shadow:
    """Parse ``offset_x offset_y blur color``."""
    parts = text.split()
    if len(parts) < 4:
        raise StyleValueError(
            f"Invalid shadow format: '{text}'. Expected: offset_x offset_y blur color"
        )
    return Shadow(
        offset_x=_number(parts[0], "offset_x"),
        offset_y=_number(parts[1], "offset_y"),
        blur_radius=_number(parts[2], "blur_radius"),
        color=parse_color(" ".join(parts[3:])),
    )


def parse_opacity(text: str) -> float:
    value = _number(text, "opacity")
    if not 0.0 <= value <= 1.0:
        raise StyleValueError(f"Opacity must be 0.0-1.0, got {value:g}")
    return value


def parse_transform(text: str) -> Transform:
    """Parse ``scale(n)``, ``scale(x, y)``, ``rotate(deg)`` or ``translate(x, y)``."""
    value = text.strip()
    match = _FUNCTION_RE.match(value)
    if match:
        name, args = match.group(1), _split_arguments(match.group(2))
        if name == "scale" and len(args) == 1:
            return Scale(_number(args[0], "scale value"))
        if name == "scale" and len(args) == 2:
            return ScaleXY(_number(args[0], "scale x"), _number(args[1], "scale y"))
        if name == "rotate" and len(args) == 1:
            angle = args[0][:-3] if args[0].endswith("deg") else args[0]
            return Rotate(_number(angle, "rotate value"))
        if name == "translate" and len(args) == 2:
            return Translate(_number(args[0], "translate x"), _number(args[1], "translate y"))
    raise StyleValueError(
        f"Invalid transform format: '{text}'. Expected scale(n), rotate(n), or translate(x, y)"
    )


# ----------------------------------------------------------------------
# Builders over attribute maps
# ----------------------------------------------------------------------

def build_border(
    width: Optional[float] = None,
    color: Optional[Color] = None,
    radius: Optional[BorderRadius] = None,
    style: Optional[BorderStyle] = None,
) -> Optional[Border]:
    if width is None and color is None and radius is None and style is None:
        return None
    border = Border(
        width=width if width is not None else 0.0,
        color=color if color is not None else BLACK,
        radius=radius if radius is not None else BorderRadius(),
        style=style if style is not None else BorderStyle.SOLID,
    )
    border.validate()
    return border


_LAYOUT_PARSERS = {
    "width": parse_length,
    "height": parse_length,
    "min_width": parse_constraint,
    "max_width": parse_constraint,
    "min_height": parse_constraint,
    "max_height": parse_constraint,
    "padding": parse_padding,
    "spacing": parse_spacing,
    "align_items": parse_alignment,
    "justify_content": parse_justification,
    "align_self": parse_alignment,
    "align_x": parse_alignment,
    "align_y": parse_alignment,
    "direction": parse_direction,
    "position": parse_position,
    "top": lambda text: parse_float_attr(text, "top"),
    "right": lambda text: parse_float_attr(text, "right"),
    "bottom": lambda text: parse_float_attr(text, "bottom"),
    "left": lambda text: parse_float_attr(text, "left"),
    "z_index": lambda text: parse_int_attr(text, "z_index"),
}

_ALIGN_TO_JUSTIFY = {
    Alignment.START: Justification.START,
    Alignment.CENTER: Justification.CENTER,
    Alignment.END: Justification.END,
    Alignment.STRETCH: Justification.CENTER,
}


def build_layout(values: Mapping[str, str], *, skip_position: bool = False) -> Optional[LayoutConstraints]:
    """
    Build layout constraints from literal attribute values.

    Returns ``None`` when no layout attribute is present. ``skip_position``
    leaves ``position`` alone for widgets that give it another meaning.
    """
    fields: Dict[str, object] = {}
    for name, parser in _LAYOUT_PARSERS.items():
        if name == "position" and skip_position:
            continue
        if name in values:
            fields[name] = parser(values[name])

    if "align" in values:
        alignment = parse_alignment(values["align"])
        fields["align_items"] = alignment
        fields["justify_content"] = _ALIGN_TO_JUSTIFY[alignment]

    if not fields:
        return None
    layout = LayoutConstraints(**fields)
    try:
        layout.validate()
    except StyleValueError as exc:
        raise StyleValueError(f"Layout validation failed: {exc.message}") from exc
    return layout


def build_style(values: Mapping[str, str]) -> Optional[StyleProperties]:
    """Build style properties from literal attribute values, or ``None`` if none apply."""
    if not any(name in values for name in STYLE_ATTRIBUTES):
        return None

    def get(name, parser):
        return parser(values[name]) if name in values else None

    style = StyleProperties(
        background=get("background", parse_background),
        color=get("color", parse_color),
        border=build_border(
            get("border_width", parse_border_width),
            get("border_color", parse_color),
            get("border_radius", parse_border_radius),
            get("border_style", parse_border_style),
        ),
        shadow=get("shadow", parse_shadow),
        opacity=get("opacity", parse_opacity),
        transform=get("transform", parse_transform),
    )
    style.validate()
    return style


__all__ = [
    "LAYOUT_ATTRIBUTES",
    "STYLE_ATTRIBUTES",
    "parse_color",
    "parse_length",
    "parse_fill_portion",
    "parse_percentage",
    "parse_padding",
    "parse_spacing",
    "parse_constraint",
    "parse_alignment",
    "parse_justification",
    "parse_direction",
    "parse_position",
    "parse_float_attr",
    "parse_int_attr",
    "parse_background",
    "parse_gradient",
    "parse_angle",
    "parse_color_stops",
    "parse_border_width",
    "parse_border_radius",
    "parse_border_style",
    "parse_shadow",
    "parse_opacity",
    "parse_transform",
    "build_border",
    "build_layout",
    "build_style",
]
