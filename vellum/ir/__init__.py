"""Typed intermediate representation produced by the parser."""

from .document import Document
from .expr import (
    BinaryOp,
    BinaryOperator,
    BindingExpr,
    Conditional,
    Expr,
    FieldAccess,
    Literal,
    LiteralKind,
    MethodCall,
    SharedFieldAccess,
    UnaryOp,
    UnaryOperator,
)
from .layout import (
    Alignment,
    Breakpoint,
    Direction,
    Justification,
    LayoutConstraints,
    Length,
    LengthKind,
    Padding,
    Position,
)
from .node import (
    DEFAULT_VERSION,
    MAX_SUPPORTED_VERSION,
    AttributeValue,
    BindingPart,
    BindingValue,
    CustomWidget,
    EventBinding,
    EventKind,
    InterpolatedValue,
    LiteralPart,
    SchemaVersion,
    StaticValue,
    WidgetKind,
    WidgetNode,
)
from .span import SourceMap, Span
from .style import (
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
    Translate,
)
from .theme import (
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

__all__ = [
    "Document",
    "BinaryOp",
    "BinaryOperator",
    "BindingExpr",
    "Conditional",
    "Expr",
    "FieldAccess",
    "Literal",
    "LiteralKind",
    "MethodCall",
    "SharedFieldAccess",
    "UnaryOp",
    "UnaryOperator",
    "Alignment",
    "Breakpoint",
    "Direction",
    "Justification",
    "LayoutConstraints",
    "Length",
    "LengthKind",
    "Padding",
    "Position",
    "DEFAULT_VERSION",
    "MAX_SUPPORTED_VERSION",
    "AttributeValue",
    "BindingPart",
    "BindingValue",
    "CustomWidget",
    "EventBinding",
    "EventKind",
    "InterpolatedValue",
    "LiteralPart",
    "SchemaVersion",
    "StaticValue",
    "WidgetKind",
    "WidgetNode",
    "SourceMap",
    "Span",
    "BackgroundImage",
    "Border",
    "BorderRadius",
    "BorderStyle",
    "Color",
    "ColorStop",
    "LinearGradient",
    "RadialGradient",
    "RadialShape",
    "Rotate",
    "Scale",
    "ScaleXY",
    "Shadow",
    "StyleProperties",
    "Translate",
    "FontWeight",
    "SpacingScale",
    "StateSelector",
    "StyleClass",
    "Theme",
    "ThemeDocument",
    "ThemePalette",
    "Typography",
    "WidgetState",
]
