"""Workspace configuration support for the Vellum CLI."""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

CONFIG_CANDIDATES = ("vellum.toml", ".vellumrc")
DEFAULT_EXTENSIONS = (".vellum", ".xml")


@dataclass
class CheckConfig:
    """Settings for ``vellum check``."""

    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    strict: bool = False
    require_xml_declaration: bool = False
    exclude: List[str] = field(default_factory=list)
    handlers: Optional[List[str]] = None


@dataclass
class WidgetsConfig:
    """Application-provided widgets accepted in place of built-in tags."""

    custom: List[str] = field(default_factory=list)


@dataclass
class WorkspaceConfig:
    """Resolved workspace configuration."""

    root: Path
    check: CheckConfig = field(default_factory=CheckConfig)
    widgets: WidgetsConfig = field(default_factory=WidgetsConfig)
    source: Optional[Path] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    def is_excluded(self, path: Path) -> bool:
        try:
            relative = path.resolve().relative_to(self.root)
        except ValueError:
            relative = path
        return any(relative.match(pattern) or relative.as_posix().startswith(pattern.rstrip("/") + "/")
                   for pattern in self.check.exclude)

    def discover_documents(self, target: Path) -> List[Path]:
        """Markup files under ``target`` (or ``target`` itself), sorted, minus exclusions."""
        if target.is_file():
            return [target]
        extensions = {ext if ext.startswith(".") else f".{ext}" for ext in self.check.extensions}
        return sorted(
            path
            for path in target.rglob("*")
            if path.is_file() and path.suffix in extensions and not self.is_excluded(path)
        )


def _read_json_config(path: Path) -> Dict[str, Any]:
    content = path.read_text(encoding="utf-8")
    return json.loads(content)


def _read_toml_config(path: Path) -> Dict[str, Any]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _string_list(value: Any) -> List[str]:
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    if isinstance(value, str):
        return [value]
    return []


def _parse_check(data: Dict[str, Any]) -> CheckConfig:
    section = data.get("check") or {}
    extensions = _string_list(section.get("extensions")) or list(DEFAULT_EXTENSIONS)
    handlers = section.get("handlers")
    return CheckConfig(
        extensions=extensions,
        strict=bool(section.get("strict", False)),
        require_xml_declaration=bool(section.get("require_xml_declaration", False)),
        exclude=_string_list(section.get("exclude")),
        handlers=_string_list(handlers) if handlers is not None else None,
    )


def _parse_widgets(data: Dict[str, Any]) -> WidgetsConfig:
    section = data.get("widgets") or {}
    return WidgetsConfig(custom=_string_list(section.get("custom")))


def locate_config_file(root: Path, explicit: Optional[Path] = None) -> Optional[Path]:
    if explicit is not None:
        return explicit if explicit.exists() else None
    for candidate in CONFIG_CANDIDATES:
        path = root / candidate
        if path.exists():
            return path
    return None


def load_workspace_config(root: Path, explicit: Optional[Path] = None) -> WorkspaceConfig:
    root = root.resolve()
    config_path = locate_config_file(root, explicit)
    if config_path is None:
        return WorkspaceConfig(root=root)

    if config_path.suffix == ".toml":
        data = _read_toml_config(config_path)
    else:
        data = _read_json_config(config_path)

    return WorkspaceConfig(
        root=root,
        check=_parse_check(data),
        widgets=_parse_widgets(data),
        source=config_path,
        raw=data,
    )


def apply_cli_overrides(
    config: WorkspaceConfig,
    *,
    strict: Optional[bool] = None,
    require_xml_declaration: Optional[bool] = None,
    custom_widgets: Iterable[str] = (),
) -> WorkspaceConfig:
    """Command-line flags win over file settings."""
    if strict is not None:
        config.check.strict = strict
    if require_xml_declaration is not None:
        config.check.require_xml_declaration = require_xml_declaration
    for name in custom_widgets:
        if name not in config.widgets.custom:
            config.widgets.custom.append(name)
    return config


__all__ = [
    "CONFIG_CANDIDATES",
    "CheckConfig",
    "WidgetsConfig",
    "WorkspaceConfig",
    "locate_config_file",
    "load_workspace_config",
    "apply_cli_overrides",
]
