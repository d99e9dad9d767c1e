"""The parsed document: schema version, root widget, themes and classes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from .node import DEFAULT_VERSION, SchemaVersion, WidgetNode
from .theme import StyleClass, Theme, ThemeDocument


@dataclass
class Document:
    root: WidgetNode
    version: SchemaVersion = DEFAULT_VERSION
    themes: Dict[str, Theme] = field(default_factory=dict)
    style_classes: Dict[str, StyleClass] = field(default_factory=dict)
    global_theme: Optional[str] = None
    follow_system: bool = True

    def walk(self) -> Iterator[WidgetNode]:
        return self.root.walk()

    def theme_document(self) -> ThemeDocument:
        """View the document's themes as a :class:`ThemeDocument`."""
        return ThemeDocument(
            themes=dict(self.themes),
            default_theme=self.global_theme,
            follow_system=self.follow_system,
        )


__all__ = ["Document"]
