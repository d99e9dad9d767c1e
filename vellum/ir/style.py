"""Visual style types: colors, backgrounds, borders, shadows and transforms."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Optional, Tuple, Union

from vellum.errors import StyleValueError


@dataclass(frozen=True)
class Color:
    """RGBA color with components in the range 0.0 to 1.0."""

    r: float
    g: float
    b: float
    a: float = 1.0

    @classmethod
    def from_rgb8(cls, r: int, g: int, b: int, a: float = 1.0) -> "Color":
        return cls(r / 255.0, g / 255.0, b / 255.0, a)

    def validate(self) -> None:
        for label, value in (("Red", self.r), ("Green", self.g), ("Blue", self.b), ("Alpha", self.a)):
            if not 0.0 <= value <= 1.0:
                raise StyleValueError(f"{label} component out of range: {value}")

    def to_hex(self) -> str:
        channels = [round(c * 255) for c in (self.r, self.g, self.b)]
        text = "#" + "".join(f"{c:02x}" for c in channels)
        if self.a < 1.0:
            text += f"{round(self.a * 255):02x}"
        return text

    def __str__(self) -> str:
        return self.to_hex()


BLACK = Color(0.0, 0.0, 0.0, 1.0)


@dataclass(frozen=True)
class ColorStop:
    color: Color
    offset: float


class RadialShape(str, Enum):
    CIRCLE = "circle"
    ELLIPSE = "ellipse"


@dataclass(frozen=True)
class LinearGradient:
    angle: float
    stops: Tuple[ColorStop, ...]


@dataclass(frozen=True)
class RadialGradient:
    shape: RadialShape
    stops: Tuple[ColorStop, ...]


Gradient = Union[LinearGradient, RadialGradient]

MIN_GRADIENT_STOPS = 2
MAX_GRADIENT_STOPS = 8


def validate_gradient(gradient: Gradient) -> None:
    if isinstance(gradient, LinearGradient) and not 0.0 <= gradient.angle <= 360.0:
        raise StyleValueError(f"Gradient angle must be 0.0-360.0, got {gradient.angle:g}")
    stops = gradient.stops
    if len(stops) < MIN_GRADIENT_STOPS:
        raise StyleValueError("Gradient must have at least 2 color stops")
    if len(stops) > MAX_GRADIENT_STOPS:
        raise StyleValueError("Gradient cannot have more than 8 color stops")
    last_offset = -1.0
    for stop in stops:
        if not 0.0 <= stop.offset <= 1.0:
            raise StyleValueError(f"Color stop offset must be 0.0-1.0, got {stop.offset:g}")
        if stop.offset <= last_offset:
            raise StyleValueError("Color stop offsets must be in ascending order")
        stop.color.validate()
        last_offset = stop.offset


class ImageFit(str, Enum):
    FILL = "fill"
    CONTAIN = "contain"
    COVER = "cover"
    SCALE_DOWN = "scale_down"


@dataclass(frozen=True)
class BackgroundImage:
    path: str
    fit: ImageFit = ImageFit.COVER


Background = Union[Color, LinearGradient, RadialGradient, BackgroundImage]


class BorderStyle(str, Enum):
    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"


@dataclass(frozen=True)
class BorderRadius:
    top_left: float = 0.0
    top_right: float = 0.0
    bottom_right: float = 0.0
    bottom_left: float = 0.0

    @classmethod
    def uniform(cls, value: float) -> "BorderRadius":
        return cls(value, value, value, value)


@dataclass(frozen=True)
class Border:
    width: float = 0.0
    color: Color = BLACK
    radius: BorderRadius = BorderRadius()
    style: BorderStyle = BorderStyle.SOLID

    def validate(self) -> None:
        if self.width < 0:
            raise StyleValueError(f"Border width must be non-negative, got {self.width:g}")
        self.color.validate()
        if min(self.radius.top_left, self.radius.top_right,
               self.radius.bottom_right, self.radius.bottom_left) < 0:
            raise StyleValueError("Border radius values must be non-negative")


@dataclass(frozen=True)
class Shadow:
    offset_x: float
    offset_y: float
    blur_radius: float
    color: Color


@dataclass(frozen=True)
class Scale:
    factor: float


@dataclass(frozen=True)
class ScaleXY:
    x: float
    y: float


@dataclass(frozen=True)
class Rotate:
    degrees: float


@dataclass(frozen=True)
class Translate:
    x: float
    y: float


Transform = Union[Scale, ScaleXY, Rotate, Translate]


@dataclass(frozen=True)
class StyleProperties:
    """Visual properties of a widget; ``None`` fields are unspecified."""

    background: Optional[Background] = None
    color: Optional[Color] = None
    border: Optional[Border] = None
    shadow: Optional[Shadow] = None
    opacity: Optional[float] = None
    transform: Optional[Transform] = None

    def validate(self) -> None:
        if isinstance(self.background, Color):
            self.background.validate()
        elif isinstance(self.background, (LinearGradient, RadialGradient)):
            validate_gradient(self.background)
        if self.color is not None:
            self.color.validate()
        if self.border is not None:
            self.border.validate()
        if self.opacity is not None and not 0.0 <= self.opacity <= 1.0:
            raise StyleValueError(f"Opacity must be 0.0-1.0, got {self.opacity:g}")

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def merged_over(self, parent: Optional["StyleProperties"]) -> "StyleProperties":
        """Field-by-field merge where values set here win over ``parent``.

        Composite values such as borders are taken whole from one side.
        """
        if parent is None:
            return self
        return StyleProperties(**{
            f.name: getattr(self, f.name) if getattr(self, f.name) is not None else getattr(parent, f.name)
            for f in fields(self)
        })


__all__ = [
    "Color",
    "ColorStop",
    "RadialShape",
    "LinearGradient",
    "RadialGradient",
    "Gradient",
    "validate_gradient",
    "ImageFit",
    "BackgroundImage",
    "Background",
    "BorderStyle",
    "BorderRadius",
    "Border",
    "Shadow",
    "Scale",
    "ScaleXY",
    "Rotate",
    "Translate",
    "Transform",
    "StyleProperties",
]
