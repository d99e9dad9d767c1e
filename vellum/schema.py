"""Attribute schemas per widget kind, used to flag unknown attributes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Tuple

from vellum.ir.node import CustomWidget, Kind, WidgetKind

COMMON_STYLE_ATTRIBUTES: Tuple[str, ...] = (
    "background",
    "color",
    "border_color",
    "border_width",
    "border_radius",
    "border_style",
    "shadow",
    "opacity",
    "transform",
    "style",
    "text_color",
)

COMMON_LAYOUT_ATTRIBUTES: Tuple[str, ...] = (
    "width",
    "height",
    "min_width",
    "max_width",
    "min_height",
    "max_height",
    "padding",
    "spacing",
    "align_items",
    "justify_content",
    "align",
    "align_x",
    "align_y",
    "align_self",
    "direction",
    "position",
    "top",
    "right",
    "bottom",
    "left",
    "z_index",
    "class",
    "theme",
)

COMMON_EVENTS: Tuple[str, ...] = (
    "on_click",
    "on_press",
    "on_release",
    "on_change",
    "on_input",
    "on_submit",
    "on_select",
    "on_toggle",
    "on_scroll",
)

PICKER_EVENTS: Tuple[str, ...] = ("on_submit", "on_cancel", "on_open", "on_close")


@dataclass(frozen=True)
class WidgetSchema:
    required: Tuple[str, ...] = ()
    optional: Tuple[str, ...] = ()
    events: Tuple[str, ...] = COMMON_EVENTS
    style_attributes: Tuple[str, ...] = COMMON_STYLE_ATTRIBUTES
    layout_attributes: Tuple[str, ...] = COMMON_LAYOUT_ATTRIBUTES
    permissive: bool = False

    def all_valid(self) -> FrozenSet[str]:
        return frozenset(self.all_valid_names())

    def all_valid_names(self) -> List[str]:
        names: List[str] = ["id"]
        for group in (self.required, self.optional, self.events,
                      self.style_attributes, self.layout_attributes):
            names.extend(group)
        return names

    def accepts(self, name: str) -> bool:
        return self.permissive or name in self.all_valid()


WIDGET_SCHEMAS: Dict[WidgetKind, WidgetSchema] = {
    WidgetKind.COLUMN: WidgetSchema(),
    WidgetKind.ROW: WidgetSchema(),
    WidgetKind.CONTAINER: WidgetSchema(),
    WidgetKind.STACK: WidgetSchema(),
    WidgetKind.FLOAT: WidgetSchema(optional=("offset_x", "offset_y")),
    WidgetKind.SCROLLABLE: WidgetSchema(events=("on_scroll",)),
    WidgetKind.TEXT: WidgetSchema(required=("value",), optional=("size", "weight", "font")),
    WidgetKind.IMAGE: WidgetSchema(required=("src",), optional=("fit", "filter_method", "path")),
    WidgetKind.SVG: WidgetSchema(required=("src",), optional=("path",)),
    WidgetKind.BUTTON: WidgetSchema(
        optional=("label", "enabled"),
        events=("on_click", "on_press", "on_release"),
    ),
    WidgetKind.TEXT_INPUT: WidgetSchema(
        optional=("placeholder", "value", "password", "secure", "icon", "size"),
        events=("on_input", "on_submit", "on_change"),
    ),
    WidgetKind.CHECKBOX: WidgetSchema(
        optional=("checked", "label", "icon", "size"),
        events=("on_toggle",),
    ),
    WidgetKind.RADIO: WidgetSchema(
        required=("label", "value"),
        optional=("selected", "disabled", "size", "text_size"),
        events=("on_select",),
    ),
    WidgetKind.SLIDER: WidgetSchema(
        optional=("min", "max", "value", "step"),
        events=("on_change", "on_release"),
    ),
    WidgetKind.PICK_LIST: WidgetSchema(
        optional=("placeholder", "selected", "options"),
        events=("on_select",),
    ),
    WidgetKind.COMBOBOX: WidgetSchema(
        optional=("placeholder", "value", "selected", "options"),
        events=("on_input", "on_select"),
    ),
    WidgetKind.TOGGLER: WidgetSchema(
        optional=("toggled", "active", "is_toggled", "label"),
        events=("on_toggle",),
    ),
    WidgetKind.SPACE: WidgetSchema(events=()),
    WidgetKind.RULE: WidgetSchema(optional=("orientation", "thickness"), events=()),
    WidgetKind.PROGRESS_BAR: WidgetSchema(optional=("value", "min", "max", "style"), events=()),
    WidgetKind.TOOLTIP: WidgetSchema(
        optional=("message", "position", "delay", "gap"),
        layout_attributes=("class", "theme"),
    ),
    WidgetKind.GRID: WidgetSchema(optional=("columns",)),
    WidgetKind.CANVAS: WidgetSchema(optional=("program",), events=("on_click", "on_press", "on_release")),
    WidgetKind.DATE_PICKER: WidgetSchema(optional=("value", "show", "format"), events=PICKER_EVENTS),
    WidgetKind.TIME_PICKER: WidgetSchema(
        optional=("value", "show", "format", "use_24h", "show_seconds"),
        events=PICKER_EVENTS,
    ),
    WidgetKind.COLOR_PICKER: WidgetSchema(optional=("value", "show", "show_alpha"), events=PICKER_EVENTS),
    WidgetKind.MENU: WidgetSchema(optional=("label", "position")),
    WidgetKind.MENU_ITEM: WidgetSchema(required=("label",), optional=("icon", "shortcut", "disabled")),
    WidgetKind.MENU_SEPARATOR: WidgetSchema(events=()),
    WidgetKind.CONTEXT_MENU: WidgetSchema(optional=("menu",)),
    WidgetKind.DATA_TABLE: WidgetSchema(optional=("data",), events=("on_row_click", "on_select")),
    WidgetKind.DATA_COLUMN: WidgetSchema(optional=("header", "field", "width"), events=()),
    WidgetKind.TREE_VIEW: WidgetSchema(
        optional=("nodes", "expanded", "selected", "indent_size", "node_height"),
        events=("on_toggle", "on_select"),
    ),
    WidgetKind.TREE_NODE: WidgetSchema(optional=("label", "icon", "expanded", "selected")),
    WidgetKind.FOR: WidgetSchema(required=("each", "in"), optional=("template",), events=()),
    WidgetKind.IF: WidgetSchema(required=("condition",), events=()),
}

CUSTOM_SCHEMA = WidgetSchema(events=(), style_attributes=(), layout_attributes=(), permissive=True)


def get_widget_schema(kind: Kind) -> WidgetSchema:
    if isinstance(kind, CustomWidget):
        return CUSTOM_SCHEMA
    return WIDGET_SCHEMAS[kind]


__all__ = [
    "COMMON_STYLE_ATTRIBUTES",
    "COMMON_LAYOUT_ATTRIBUTES",
    "COMMON_EVENTS",
    "WidgetSchema",
    "WIDGET_SCHEMAS",
    "get_widget_schema",
]
