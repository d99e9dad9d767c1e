"""Theme and style class inheritance."""

from .resolver import (
    InheritanceResolver,
    resolve_style_class,
    resolve_style_classes,
    resolve_theme,
    resolve_themes,
    validate_class_inheritance,
    validate_theme_inheritance,
)

__all__ = [
    "InheritanceResolver",
    "resolve_style_class",
    "resolve_style_classes",
    "resolve_theme",
    "resolve_themes",
    "validate_class_inheritance",
    "validate_theme_inheritance",
]
