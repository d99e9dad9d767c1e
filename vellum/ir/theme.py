"""
Theme and style class IR.

Themes bundle a palette, typography and a spacing scale. Style classes
are reusable named styles applied to widgets via ``class="..."``. Both
support inheritance by name; inheritance is resolved on demand by
:mod:`vellum.themes.resolver` rather than stored resolved.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Dict, List, Optional, Tuple

from vellum.errors import StyleValueError, ThemeError, ThemeErrorKind
from vellum.ir.layout import LayoutConstraints
from vellum.ir.span import Span
from vellum.ir.style import Color, StyleProperties

MAX_INHERITANCE_DEPTH = 5

DEFAULT_FONT_SIZE_BASE = 16.0


class WidgetState(str, Enum):
    """Interaction states usable as style selectors."""

    HOVER = "hover"
    FOCUS = "focus"
    ACTIVE = "active"
    DISABLED = "disabled"

    @classmethod
    def from_prefix(cls, prefix: str) -> Optional["WidgetState"]:
        try:
            return cls(prefix.strip().lower())
        except ValueError:
            return None

    @property
    def order(self) -> int:
        return list(WidgetState).index(self)


@dataclass(frozen=True)
class StateSelector:
    """A single state or an AND-combination of states.

    Combined selectors are canonical: states are deduplicated and sorted,
    so ``hover:active`` and ``active:hover`` compare equal.
    """

    states: Tuple[WidgetState, ...]

    @classmethod
    def single(cls, state: WidgetState) -> "StateSelector":
        return cls((state,))

    @classmethod
    def combined(cls, states) -> "StateSelector":
        unique = sorted(set(states), key=lambda s: s.order)
        if not unique:
            raise ValueError("StateSelector requires at least one state")
        return cls(tuple(unique))

    @property
    def is_single(self) -> bool:
        return len(self.states) == 1

    def matches(self, active_states) -> bool:
        active = set(active_states)
        return all(state in active for state in self.states)

    def specificity(self) -> int:
        return len(self.states)

    def __str__(self) -> str:
        return ":".join(state.value for state in self.states)


PALETTE_COLORS = [
    ("primary", "primary color for main UI elements"),
    ("secondary", "secondary/accent color"),
    ("success", "success state color"),
    ("warning", "warning state color"),
    ("danger", "danger/error state color"),
    ("background", "background color for containers"),
    ("surface", "surface color for cards, buttons, etc."),
    ("text", "primary text color"),
    ("text_secondary", "secondary/disabled text color"),
]


@dataclass(frozen=True)
class ThemePalette:
    primary: Optional[Color] = None
    secondary: Optional[Color] = None
    success: Optional[Color] = None
    warning: Optional[Color] = None
    danger: Optional[Color] = None
    background: Optional[Color] = None
    surface: Optional[Color] = None
    text: Optional[Color] = None
    text_secondary: Optional[Color] = None

    def missing(self) -> List[str]:
        return [name for name, _ in PALETTE_COLORS if getattr(self, name) is None]

    def merged_over(self, parent: "ThemePalette") -> "ThemePalette":
        return _merge_fields(self, parent)


class FontWeight(str, Enum):
    THIN = "thin"
    LIGHT = "light"
    NORMAL = "normal"
    MEDIUM = "medium"
    BOLD = "bold"
    BLACK = "black"


TYPOGRAPHY_EXAMPLE = (
    "\nExample typography configuration:"
    "\n  <typography"
    '\n      font_family="Inter, sans-serif"'
    '\n      font_size_base="16"'
    '\n      font_size_small="12"'
    '\n      font_size_large="20"'
    '\n      font_weight="normal"'
    '\n      line_height="1.5" />'
)

SPACING_EXAMPLE = (
    "Valid spacing examples:\n"
    '  - <spacing unit="4" />   (4px base)\n'
    '  - <spacing unit="8" />   (8px base, recommended)\n'
    '  - <spacing unit="16" />  (16px base)\n'
)


@dataclass(frozen=True)
class Typography:
    font_family: Optional[str] = None
    font_size_base: Optional[float] = None
    font_size_small: Optional[float] = None
    font_size_large: Optional[float] = None
    font_weight: Optional[FontWeight] = None
    line_height: Optional[float] = None

    def problems(self) -> List[str]:
        """Describe every out-of-range value."""
        errors = []
        base = self.font_size_base
        if base is not None:
            if base <= 0:
                errors.append(f"font_size_base must be positive, got {base:g}")
            elif base < 8:
                errors.append(f"font_size_base {base:g} is very small (recommended: 14-18px)")
            elif base > 32:
                errors.append(f"font_size_base {base:g} is very large (recommended: 14-18px)")

        reference = base if base is not None else DEFAULT_FONT_SIZE_BASE
        small = self.font_size_small
        if small is not None:
            if small <= 0:
                errors.append(f"font_size_small must be positive, got {small:g}")
            elif small >= reference:
                errors.append("font_size_small should be smaller than font_size_base")

        large = self.font_size_large
        if large is not None:
            if large <= 0:
                errors.append(f"font_size_large must be positive, got {large:g}")
            elif large <= reference:
                errors.append("font_size_large should be larger than font_size_base")

        height = self.line_height
        if height is not None:
            if height <= 0:
                errors.append(f"line_height must be positive, got {height:g}")
            elif height < 1.0:
                errors.append(f"line_height {height:g} is too tight (recommended: 1.4-1.6)")
            elif height > 2.5:
                errors.append(f"line_height {height:g} is too loose (recommended: 1.4-1.6)")
        return errors

    def merged_over(self, parent: "Typography") -> "Typography":
        return _merge_fields(self, parent)


@dataclass(frozen=True)
class SpacingScale:
    unit: Optional[float] = None

    def get(self, multiplier: int) -> float:
        return (self.unit if self.unit is not None else 8.0) * multiplier

    def merged_over(self, parent: "SpacingScale") -> "SpacingScale":
        return _merge_fields(self, parent)


@dataclass
class Theme:
    name: str
    palette: ThemePalette = field(default_factory=ThemePalette)
    typography: Typography = field(default_factory=Typography)
    spacing: SpacingScale = field(default_factory=SpacingScale)
    base_styles: Dict[str, StyleProperties] = field(default_factory=dict)
    extends: Optional[str] = None
    span: Span = field(default_factory=Span, compare=False)

    def validation_errors(self) -> List[ThemeError]:
        """Collect every problem with this theme's own values."""
        errors: List[ThemeError] = []

        missing = self.palette.missing()
        if missing and self.extends is None:
            message = (
                f"Invalid theme '{self.name}': Theme '{self.name}' is missing "
                f"{len(missing)} required color(s): {', '.join(missing)}"
                "\n\nTip: If you want to inherit colors from another theme, "
                "add 'extends=\"parent_theme\"' attribute to this theme."
                "\nExample: <theme name=\"dark\" extends=\"base\">"
            )
            errors.append(ThemeError(ThemeErrorKind.MISSING_PALETTE_COLOR, message, span=self.span))

        for color_name, _ in PALETTE_COLORS:
            color = getattr(self.palette, color_name)
            if color is None:
                continue
            try:
                color.validate()
            except StyleValueError as exc:
                errors.append(ThemeError(
                    ThemeErrorKind.INVALID_COLOR_VALUE,
                    f"Theme '{self.name}' has invalid color value for {color_name}: {exc.message}",
                    span=self.span,
                ))

        problems = self.typography.problems()
        if problems:
            message = f"Invalid theme '{self.name}': Typography validation failed for theme '{self.name}':\n"
            message += "".join(f"  - {problem}\n" for problem in problems)
            if self.extends is None:
                message += "\nTip: Missing typography values will inherit from parent theme if 'extends' is used."
            message += TYPOGRAPHY_EXAMPLE
            errors.append(ThemeError(ThemeErrorKind.MISSING_PALETTE_COLOR, message, span=self.span))

        unit = self.spacing.unit
        if unit is not None and unit <= 0:
            message = (
                f"Invalid theme '{self.name}': spacing unit must be positive, got {unit:g}\n"
                + SPACING_EXAMPLE
            )
            errors.append(ThemeError(ThemeErrorKind.MISSING_PALETTE_COLOR, message, span=self.span))

        for widget_name, style in sorted(self.base_styles.items()):
            try:
                style.validate()
            except StyleValueError as exc:
                errors.append(ThemeError(
                    ThemeErrorKind.MISSING_PALETTE_COLOR,
                    f"Invalid theme '{self.name}': Invalid base style for '{widget_name}': {exc.message}",
                    span=self.span,
                ))
        return errors

    def validate(self) -> None:
        """Raise the first validation error, if any."""
        errors = self.validation_errors()
        if errors:
            raise errors[0]

    def inherit_from(self, parent: "Theme") -> "Theme":
        """A new theme with unset values filled in from ``parent``."""
        base_styles = dict(parent.base_styles)
        base_styles.update(self.base_styles)
        return Theme(
            name=self.name,
            palette=self.palette.merged_over(parent.palette),
            typography=self.typography.merged_over(parent.typography),
            spacing=self.spacing.merged_over(parent.spacing),
            base_styles=base_styles,
            extends=self.extends,
            span=self.span,
        )


@dataclass
class StyleClass:
    name: str
    style: StyleProperties = field(default_factory=StyleProperties)
    layout: Optional[LayoutConstraints] = None
    extends: List[str] = field(default_factory=list)
    state_variants: Dict[WidgetState, StyleProperties] = field(default_factory=dict)
    combined_state_variants: Dict[StateSelector, StyleProperties] = field(default_factory=dict)
    span: Span = field(default_factory=Span, compare=False)

    def validate(self) -> None:
        """Check this class's own values, raising :class:`StyleValueError`."""
        try:
            self.style.validate()
        except StyleValueError as exc:
            raise StyleValueError(f"Invalid style: {exc.message}", span=self.span) from exc
        if self.layout is not None:
            try:
                self.layout.validate()
            except StyleValueError as exc:
                raise StyleValueError(f"Invalid layout: {exc.message}", span=self.span) from exc
        for state, style in self.state_variants.items():
            try:
                style.validate()
            except StyleValueError as exc:
                raise StyleValueError(
                    f"Invalid style for state {state.value}: {exc.message}", span=self.span
                ) from exc
        for selector, style in self.combined_state_variants.items():
            try:
                style.validate()
            except StyleValueError as exc:
                raise StyleValueError(
                    f"Invalid style for state selector {selector}: {exc.message}", span=self.span
                ) from exc

    def inherit_from(self, parent: "StyleClass") -> "StyleClass":
        """A new class with unset values filled in from ``parent``."""
        layout = self.layout.merged_over(parent.layout) if self.layout is not None else parent.layout
        state_variants = {
            state: style.merged_over(parent.state_variants.get(state))
            for state, style in self.state_variants.items()
        }
        for state, style in parent.state_variants.items():
            state_variants.setdefault(state, style)
        combined = {
            selector: style.merged_over(parent.combined_state_variants.get(selector))
            for selector, style in self.combined_state_variants.items()
        }
        for selector, style in parent.combined_state_variants.items():
            combined.setdefault(selector, style)
        return StyleClass(
            name=self.name,
            style=self.style.merged_over(parent.style),
            layout=layout,
            extends=list(self.extends),
            state_variants=state_variants,
            combined_state_variants=combined,
            span=self.span,
        )


@dataclass
class ThemeDocument:
    """A standalone theme definition document or the themes of a UI document."""

    themes: Dict[str, Theme] = field(default_factory=dict)
    default_theme: Optional[str] = None
    follow_system: bool = True

    def validate(self) -> None:
        """Raise the first of: no themes, bad default, invalid theme."""
        if not self.themes:
            raise ThemeError(ThemeErrorKind.NO_THEMES_DEFINED, "At least one theme must be defined")
        if self.default_theme is not None and self.default_theme not in self.themes:
            available = ", ".join(sorted(self.themes))
            raise ThemeError(
                ThemeErrorKind.INVALID_DEFAULT_THEME,
                f"Default theme '{self.default_theme}' not found. Available: {available}",
            )
        for name in sorted(self.themes):
            self.themes[name].validate()

    def validate_inheritance(self) -> None:
        from vellum.themes.resolver import validate_theme_inheritance

        validate_theme_inheritance(self.themes)

    def resolve_inheritance(self) -> Dict[str, Theme]:
        from vellum.themes.resolver import resolve_themes

        return resolve_themes(self.themes)

    def effective_default(self, system_preference: Optional[str] = None) -> str:
        """Theme to apply at startup: system preference, declared default, then "light"."""
        if self.follow_system and system_preference and system_preference in self.themes:
            return system_preference
        if self.default_theme is not None:
            return self.default_theme
        return "light"


def _merge_fields(child, parent):
    values = {}
    for f in fields(child):
        value = getattr(child, f.name)
        values[f.name] = value if value is not None else getattr(parent, f.name)
    return type(child)(**values)


__all__ = [
    "MAX_INHERITANCE_DEPTH",
    "WidgetState",
    "StateSelector",
    "PALETTE_COLORS",
    "ThemePalette",
    "FontWeight",
    "Typography",
    "SpacingScale",
    "Theme",
    "StyleClass",
    "ThemeDocument",
]
