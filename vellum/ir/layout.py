"""Layout constraint types attached to widgets and style classes."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Optional

from vellum.errors import StyleValueError


class LengthKind(str, Enum):
    FIXED = "fixed"
    FILL = "fill"
    SHRINK = "shrink"
    FILL_PORTION = "fill_portion"
    PERCENTAGE = "percentage"


@dataclass(frozen=True)
class Length:
    """Widget sizing: fixed pixels, fill, shrink, fill_portion(n) or n%."""

    kind: LengthKind
    value: float = 0.0

    @classmethod
    def fixed(cls, pixels: float) -> "Length":
        return cls(LengthKind.FIXED, float(pixels))

    @classmethod
    def fill(cls) -> "Length":
        return cls(LengthKind.FILL)

    @classmethod
    def shrink(cls) -> "Length":
        return cls(LengthKind.SHRINK)

    @classmethod
    def fill_portion(cls, portion: int) -> "Length":
        return cls(LengthKind.FILL_PORTION, portion)

    @classmethod
    def percentage(cls, percent: float) -> "Length":
        return cls(LengthKind.PERCENTAGE, float(percent))

    def __str__(self) -> str:
        if self.kind == LengthKind.FIXED:
            return f"{self.value:g}"
        if self.kind == LengthKind.FILL_PORTION:
            return f"fill_portion({int(self.value)})"
        if self.kind == LengthKind.PERCENTAGE:
            return f"{self.value:g}%"
        return self.kind.value


@dataclass(frozen=True)
class Padding:
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0

    @classmethod
    def all(cls, value: float) -> "Padding":
        return cls(value, value, value, value)


class Alignment(str, Enum):
    """Cross-axis alignment."""
    START = "start"
    CENTER = "center"
    END = "end"
    STRETCH = "stretch"


class Justification(str, Enum):
    """Main-axis distribution."""
    START = "start"
    CENTER = "center"
    END = "end"
    SPACE_BETWEEN = "space_between"
    SPACE_AROUND = "space_around"
    SPACE_EVENLY = "space_evenly"


class Direction(str, Enum):
    HORIZONTAL = "horizontal"
    HORIZONTAL_REVERSE = "horizontal_reverse"
    VERTICAL = "vertical"
    VERTICAL_REVERSE = "vertical_reverse"


class Position(str, Enum):
    RELATIVE = "relative"
    ABSOLUTE = "absolute"


class Breakpoint(str, Enum):
    """Responsive tiers usable as ``<tier>-<attribute>`` prefixes."""
    MOBILE = "mobile"
    TABLET = "tablet"
    DESKTOP = "desktop"

    @classmethod
    def from_prefix(cls, prefix: str) -> Optional["Breakpoint"]:
        try:
            return cls(prefix.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class LayoutConstraints:
    """Sizing, spacing, alignment and positioning for a widget.

    Every field is optional; ``None`` means "not specified here" so that
    class inheritance can fall back to a parent's value.
    """

    width: Optional[Length] = None
    height: Optional[Length] = None
    min_width: Optional[float] = None
    max_width: Optional[float] = None
    min_height: Optional[float] = None
    max_height: Optional[float] = None
    padding: Optional[Padding] = None
    spacing: Optional[float] = None
    align_items: Optional[Alignment] = None
    justify_content: Optional[Justification] = None
    align_self: Optional[Alignment] = None
    align_x: Optional[Alignment] = None
    align_y: Optional[Alignment] = None
    direction: Optional[Direction] = None
    position: Optional[Position] = None
    top: Optional[float] = None
    right: Optional[float] = None
    bottom: Optional[float] = None
    left: Optional[float] = None
    z_index: Optional[int] = None

    def validate(self) -> None:
        """Check relationships between fields, raising :class:`StyleValueError`."""
        if self.min_width is not None and self.max_width is not None and self.min_width > self.max_width:
            raise StyleValueError(f"min_width ({self.min_width:g}) > max_width ({self.max_width:g})")
        if self.min_height is not None and self.max_height is not None and self.min_height > self.max_height:
            raise StyleValueError(f"min_height ({self.min_height:g}) > max_height ({self.max_height:g})")
        if self.spacing is not None and self.spacing < 0:
            raise StyleValueError(f"spacing must be non-negative, got {self.spacing:g}")
        if self.padding is not None and min(
            self.padding.top, self.padding.right, self.padding.bottom, self.padding.left
        ) < 0:
            raise StyleValueError("padding values must be non-negative")

        for length in (self.width, self.height):
            if length is None:
                continue
            if length.kind == LengthKind.FILL_PORTION and not 1 <= length.value <= 255:
                raise StyleValueError(f"fill_portion must be 1-255, got {int(length.value)}")
            if length.kind == LengthKind.PERCENTAGE and not 0.0 <= length.value <= 100.0:
                raise StyleValueError(f"percentage must be 0.0-100.0, got {length.value:g}")

        if self.position is not None and all(
            offset is None for offset in (self.top, self.right, self.bottom, self.left)
        ):
            raise StyleValueError(
                "position requires at least one offset (top, right, bottom, or left)"
            )

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def merged_over(self, parent: Optional["LayoutConstraints"]) -> "LayoutConstraints":
        """Field-by-field merge where values set here win over ``parent``."""
        if parent is None:
            return self
        return LayoutConstraints(**{
            f.name: getattr(self, f.name) if getattr(self, f.name) is not None else getattr(parent, f.name)
            for f in fields(self)
        })


__all__ = [
    "LengthKind",
    "Length",
    "Padding",
    "Alignment",
    "Justification",
    "Direction",
    "Position",
    "Breakpoint",
    "LayoutConstraints",
]
