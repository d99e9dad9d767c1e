"""Widget tree IR: widget kinds, attribute values, events and nodes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .expr import BindingExpr, Expr
from .layout import Breakpoint, LayoutConstraints
from .span import Span
from .style import StyleProperties
from .theme import WidgetState


@dataclass(frozen=True, order=True)
class SchemaVersion:
    """Document schema version, ordered by (major, minor)."""

    major: int
    minor: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


V1_0 = SchemaVersion(1, 0)
V1_1 = SchemaVersion(1, 1)

MAX_SUPPORTED_VERSION = V1_1
DEFAULT_VERSION = V1_0


class WidgetKind(str, Enum):
    """Built-in widget kinds, valued by their markup tag."""

    COLUMN = "column"
    ROW = "row"
    CONTAINER = "container"
    SCROLLABLE = "scrollable"
    STACK = "stack"
    TEXT = "text"
    IMAGE = "image"
    SVG = "svg"
    BUTTON = "button"
    TEXT_INPUT = "text_input"
    CHECKBOX = "checkbox"
    SLIDER = "slider"
    PICK_LIST = "pick_list"
    TOGGLER = "toggler"
    SPACE = "space"
    RULE = "rule"
    RADIO = "radio"
    COMBOBOX = "combobox"
    PROGRESS_BAR = "progress_bar"
    TOOLTIP = "tooltip"
    GRID = "grid"
    CANVAS = "canvas"
    FLOAT = "float"
    DATE_PICKER = "date_picker"
    TIME_PICKER = "time_picker"
    COLOR_PICKER = "color_picker"
    MENU = "menu"
    MENU_ITEM = "menu_item"
    MENU_SEPARATOR = "menu_separator"
    CONTEXT_MENU = "context_menu"
    DATA_TABLE = "data_table"
    DATA_COLUMN = "data_column"
    TREE_VIEW = "tree_view"
    TREE_NODE = "tree_node"
    FOR = "for"
    IF = "if"

    @classmethod
    def from_tag(cls, tag: str) -> Optional["WidgetKind"]:
        try:
            return cls(tag)
        except ValueError:
            return None

    @classmethod
    def all_standard(cls) -> List[str]:
        return [kind.value for kind in cls]

    @property
    def display_name(self) -> str:
        """CamelCase name used in messages, e.g. ``TextInput``."""
        if self is WidgetKind.COMBOBOX:
            return "ComboBox"
        return "".join(part.capitalize() for part in self.value.split("_"))

    @property
    def minimum_version(self) -> SchemaVersion:
        return V1_1 if self in _V1_1_KINDS else V1_0

    @property
    def is_custom(self) -> bool:
        return False

    @property
    def tag(self) -> str:
        return self.value


_V1_1_KINDS = frozenset({
    WidgetKind.CANVAS,
    WidgetKind.DATE_PICKER,
    WidgetKind.TIME_PICKER,
    WidgetKind.COLOR_PICKER,
    WidgetKind.MENU,
    WidgetKind.MENU_ITEM,
    WidgetKind.MENU_SEPARATOR,
    WidgetKind.CONTEXT_MENU,
    WidgetKind.DATA_TABLE,
    WidgetKind.DATA_COLUMN,
    WidgetKind.TREE_VIEW,
    WidgetKind.TREE_NODE,
})


@dataclass(frozen=True)
class CustomWidget:
    """A widget kind registered by the application rather than built in."""

    name: str

    @property
    def display_name(self) -> str:
        return self.name

    @property
    def minimum_version(self) -> SchemaVersion:
        return V1_0

    @property
    def is_custom(self) -> bool:
        return True

    @property
    def tag(self) -> str:
        return self.name


Kind = Union[WidgetKind, CustomWidget]


@dataclass(frozen=True)
class StaticValue:
    """A literal attribute value."""
    text: str


@dataclass(frozen=True)
class BindingValue:
    """An attribute that is exactly one ``{expression}``."""
    binding: BindingExpr

    @property
    def expr(self) -> Expr:
        return self.binding.expr


@dataclass(frozen=True)
class LiteralPart:
    text: str


@dataclass(frozen=True)
class BindingPart:
    binding: BindingExpr


InterpolatedPart = Union[LiteralPart, BindingPart]


@dataclass(frozen=True)
class InterpolatedValue:
    """Literal text mixed with one or more expressions."""
    parts: Tuple[InterpolatedPart, ...]

    def skeleton(self, placeholder: str = "{}") -> str:
        """The literal text with each expression replaced by ``placeholder``."""
        return "".join(
            part.text if isinstance(part, LiteralPart) else placeholder
            for part in self.parts
        )

    def bindings(self) -> List[BindingExpr]:
        return [part.binding for part in self.parts if isinstance(part, BindingPart)]


AttributeValue = Union[StaticValue, BindingValue, InterpolatedValue]


class EventKind(str, Enum):
    CLICK = "click"
    PRESS = "press"
    RELEASE = "release"
    CHANGE = "change"
    INPUT = "input"
    SUBMIT = "submit"
    SELECT = "select"
    TOGGLE = "toggle"
    SCROLL = "scroll"
    CANCEL = "cancel"
    OPEN = "open"
    CLOSE = "close"

    @classmethod
    def from_attribute(cls, name: str) -> Optional["EventKind"]:
        """Map ``on_click`` style attribute names to an event kind."""
        if not name.startswith(EVENT_PREFIX):
            return None
        try:
            return cls(name[len(EVENT_PREFIX):])
        except ValueError:
            return None

    @property
    def attribute(self) -> str:
        return f"{EVENT_PREFIX}{self.value}"


EVENT_PREFIX = "on_"


@dataclass(frozen=True)
class EventBinding:
    event: EventKind
    handler: str
    param: Optional[BindingExpr] = None
    span: Span = field(default_factory=Span, compare=False)


@dataclass
class WidgetNode:
    kind: Kind
    id: Optional[str] = None
    attributes: Dict[str, AttributeValue] = field(default_factory=dict)
    events: List[EventBinding] = field(default_factory=list)
    children: List["WidgetNode"] = field(default_factory=list)
    span: Span = field(default_factory=Span, compare=False)
    style: Optional[StyleProperties] = None
    layout: Optional[LayoutConstraints] = None
    theme_ref: Optional[AttributeValue] = None
    classes: List[str] = field(default_factory=list)
    breakpoint_attributes: Dict[Breakpoint, Dict[str, AttributeValue]] = field(default_factory=dict)
    inline_state_variants: Dict[WidgetState, StyleProperties] = field(default_factory=dict)

    def walk(self) -> Iterator["WidgetNode"]:
        """Yield this node and every descendant in document order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def attribute(self, name: str) -> Optional[AttributeValue]:
        return self.attributes.get(name)

    def static_attribute(self, name: str) -> Optional[str]:
        value = self.attributes.get(name)
        if isinstance(value, StaticValue):
            return value.text
        return None

    def event(self, kind: EventKind) -> Optional[EventBinding]:
        for binding in self.events:
            if binding.event == kind:
                return binding
        return None


__all__ = [
    "SchemaVersion",
    "V1_0",
    "V1_1",
    "MAX_SUPPORTED_VERSION",
    "DEFAULT_VERSION",
    "WidgetKind",
    "CustomWidget",
    "Kind",
    "StaticValue",
    "BindingValue",
    "LiteralPart",
    "BindingPart",
    "InterpolatedPart",
    "InterpolatedValue",
    "AttributeValue",
    "EventKind",
    "EVENT_PREFIX",
    "EventBinding",
    "WidgetNode",
]
