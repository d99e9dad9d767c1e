"""
Theme and style class inheritance resolution.

Both themes (single parent via ``extends``) and style classes (any number
of parents) form inheritance graphs keyed by name. Resolution walks the
graph with an explicit stack instead of recursion, tracking each entity as
unvisited, visiting or resolved:

- reaching an entity that is still *visiting* is a cycle,
- a chain longer than :data:`MAX_INHERITANCE_DEPTH` entities is rejected,
- a resolved entity is the child's own values merged over its resolved
  parents, child first.

Inputs are never modified; resolved entities are new values.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, Generic, List, Mapping, Sequence, Tuple, TypeVar

from vellum.errors import StyleClassError, ThemeError, ThemeErrorKind, VellumError
from vellum.ir.theme import MAX_INHERITANCE_DEPTH, StyleClass, Theme

logger = logging.getLogger(__name__)

T = TypeVar("T")

CHAIN_SEPARATOR = " → "


class VisitState(Enum):
    VISITING = "visiting"
    RESOLVED = "resolved"


class InheritanceResolver(Generic[T]):
    """
    Resolves one inheritance graph.

    ``parents`` lists the parent names of an entity, ``merge`` builds the
    resolved entity from the entity and its resolved parents, and the three
    error callbacks build the exception raised for a missing parent, a
    cycle (given the full chain) and an over-deep chain.
    """

    def __init__(
        self,
        entities: Mapping[str, T],
        parents: Callable[[T], Sequence[str]],
        merge: Callable[[T, List[T]], T],
        *,
        not_found: Callable[[str, str], VellumError],
        circular: Callable[[List[str]], VellumError],
        too_deep: Callable[[str], VellumError],
        max_depth: int = MAX_INHERITANCE_DEPTH,
    ):
        self.entities = entities
        self.parents = parents
        self.merge = merge
        self.not_found = not_found
        self.circular = circular
        self.too_deep = too_deep
        self.max_depth = max_depth
        self.state: Dict[str, VisitState] = {}
        self.depth: Dict[str, int] = {}
        self.resolved: Dict[str, T] = {}

    def resolve(self, name: str) -> T:
        if name in self.resolved:
            return self.resolved[name]

        path: List[str] = []
        stack: List[Tuple[str, int]] = [(name, 0)]
        while stack:
            current, index = stack[-1]
            entity = self.entities[current]
            parent_names = self.parents(entity)

            if index == 0 and current not in self.state:
                self.state[current] = VisitState.VISITING
                path.append(current)
                if len(path) > self.max_depth:
                    raise self.too_deep(path[0])

            if index < len(parent_names):
                stack[-1] = (current, index + 1)
                parent = parent_names[index]
                if parent not in self.entities:
                    raise self.not_found(parent, current)
                parent_state = self.state.get(parent)
                if parent_state is VisitState.VISITING:
                    raise self.circular(path + [parent])
                if parent_state is None:
                    stack.append((parent, 0))
                continue

            depth = 1 + max((self.depth[parent] for parent in parent_names), default=0)
            if depth > self.max_depth:
                raise self.too_deep(current)
            if parent_names:
                merged = self.merge(entity, [self.resolved[parent] for parent in parent_names])
            else:
                merged = entity
            self.resolved[current] = merged
            self.depth[current] = depth
            self.state[current] = VisitState.RESOLVED
            path.pop()
            stack.pop()

        return self.resolved[name]

    def resolve_all(self) -> Dict[str, T]:
        for name in sorted(self.entities):
            self.resolve(name)
        return {name: self.resolved[name] for name in self.entities}


# ----------------------------------------------------------------------
# Themes
# ----------------------------------------------------------------------

def _theme_resolver(themes: Mapping[str, Theme]) -> InheritanceResolver[Theme]:
    def circular(chain: List[str]) -> ThemeError:
        return ThemeError(
            ThemeErrorKind.CIRCULAR_INHERITANCE,
            f"Circular theme inheritance detected: {CHAIN_SEPARATOR.join(chain)}",
            span=themes[chain[0]].span,
            suggestion="Remove one of the 'extends' attributes to break the cycle",
        )

    def not_found(parent: str, child: str) -> ThemeError:
        available = ", ".join(sorted(themes)) or "none"
        return ThemeError(
            ThemeErrorKind.THEME_NOT_FOUND,
            f"Parent theme '{parent}' not found for theme '{child}'",
            span=themes[child].span,
            suggestion=f"Available themes: {available}",
        )

    def too_deep(name: str) -> ThemeError:
        return ThemeError(
            ThemeErrorKind.EXCEEDS_MAX_DEPTH,
            f"Theme inheritance depth exceeds {MAX_INHERITANCE_DEPTH} levels for '{name}'",
            span=themes[name].span,
            suggestion=f"Flatten the chain to at most {MAX_INHERITANCE_DEPTH} themes",
        )

    return InheritanceResolver(
        themes,
        parents=lambda theme: [theme.extends] if theme.extends else [],
        merge=lambda theme, parents: theme.inherit_from(parents[0]),
        not_found=not_found,
        circular=circular,
        too_deep=too_deep,
    )


def resolve_theme(name: str, themes: Mapping[str, Theme]) -> Theme:
    """Resolve a single theme against its ancestors."""
    if name not in themes:
        raise ThemeError(
            ThemeErrorKind.THEME_NOT_FOUND,
            f"Theme '{name}' not found",
            suggestion=f"Available themes: {', '.join(sorted(themes)) or 'none'}",
        )
    return _theme_resolver(themes).resolve(name)


def resolve_themes(themes: Mapping[str, Theme]) -> Dict[str, Theme]:
    """Resolve every theme, raising the first inheritance error found."""
    resolved = _theme_resolver(themes).resolve_all()
    logger.debug(f"Resolved inheritance for {len(resolved)} theme(s)")
    return resolved


def validate_theme_inheritance(themes: Mapping[str, Theme]) -> None:
    """
    Check that every theme resolves and that the resolved palettes are complete.

    Palette colors missing on a theme with a parent are only reported
    here, once inheritance has had the chance to supply them.
    """
    resolved = resolve_themes(themes)
    for name in sorted(resolved):
        theme = resolved[name]
        missing = theme.palette.missing()
        if missing and theme.extends is not None:
            raise ThemeError(
                ThemeErrorKind.MISSING_PALETTE_COLOR,
                f"Theme '{name}' is missing {len(missing)} required color(s) after inheritance: "
                f"{', '.join(missing)}",
                span=theme.span,
                suggestion="Define the colors on this theme or one of its ancestors",
            )


# ----------------------------------------------------------------------
# Style classes
# ----------------------------------------------------------------------

def _merge_class(style_class: StyleClass, parents: List[StyleClass]) -> StyleClass:
    # Earlier parents take priority over later ones.
    combined = parents[0]
    for parent in parents[1:]:
        combined = combined.inherit_from(parent)
    return style_class.inherit_from(combined)


def _class_resolver(classes: Mapping[str, StyleClass]) -> InheritanceResolver[StyleClass]:
    def circular(chain: List[str]) -> StyleClassError:
        return StyleClassError(
            f"Circular style class dependency detected: {CHAIN_SEPARATOR.join(chain)}",
            span=classes[chain[0]].span,
            code="STYLE_CLASS_CIRCULAR",
            suggestion="Remove one of the 'extends' references to break the cycle",
        )

    def not_found(parent: str, child: str) -> StyleClassError:
        return StyleClassError(
            f"Parent class '{parent}' not found",
            span=classes[child].span,
            code="STYLE_CLASS_NOT_FOUND",
            suggestion=f"Define <class name=\"{parent}\"> or remove it from '{child}' extends",
        )

    def too_deep(name: str) -> StyleClassError:
        return StyleClassError(
            f"Style class inheritance depth exceeds {MAX_INHERITANCE_DEPTH} levels (class: {name})",
            span=classes[name].span,
            code="STYLE_CLASS_DEPTH",
        )

    return InheritanceResolver(
        classes,
        parents=lambda style_class: style_class.extends,
        merge=_merge_class,
        not_found=not_found,
        circular=circular,
        too_deep=too_deep,
    )


def resolve_style_class(name: str, classes: Mapping[str, StyleClass]) -> StyleClass:
    if name not in classes:
        raise StyleClassError(f"Style class '{name}' not found", code="STYLE_CLASS_NOT_FOUND")
    return _class_resolver(classes).resolve(name)


def resolve_style_classes(classes: Mapping[str, StyleClass]) -> Dict[str, StyleClass]:
    return _class_resolver(classes).resolve_all()


def validate_class_inheritance(classes: Mapping[str, StyleClass]) -> None:
    resolve_style_classes(classes)


__all__ = [
    "InheritanceResolver",
    "VisitState",
    "resolve_theme",
    "resolve_themes",
    "validate_theme_inheritance",
    "resolve_style_class",
    "resolve_style_classes",
    "validate_class_inheritance",
]
