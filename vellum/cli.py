"""
Command line interface for Vellum.

Commands:
    - check: Parse and check every document under a path
    - inspect: Show the parsed widget tree of one document
    - themes: Show the resolved themes of a document
    - widgets: List the built-in widgets and their schema versions
    - expr: Show the syntax tree of a binding expression
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from vellum import __version__
from vellum.config import apply_cli_overrides, load_workspace_config
from vellum.errors import ExpressionError, ParseError, StyleClassError, ThemeError, VellumError
from vellum.expr.parser import parse_expression
from vellum.ir.expr import (
    BinaryOp,
    Conditional,
    Expr,
    FieldAccess,
    Literal,
    MethodCall,
    SharedFieldAccess,
    UnaryOp,
)
from vellum.ir.node import (
    BindingValue,
    InterpolatedValue,
    StaticValue,
    WidgetKind,
    WidgetNode,
)
from vellum.linter import DocumentLinter, LintResult, LintSeverity
from vellum.parser.document import DocumentParser
from vellum.schema import get_widget_schema
from vellum.themes.resolver import resolve_style_classes, resolve_themes

console = Console()

SEVERITY_STYLES = {
    LintSeverity.ERROR: "bold red",
    LintSeverity.WARNING: "yellow",
    LintSeverity.INFO: "cyan",
    LintSeverity.HINT: "dim",
}


def _print_error(error: VellumError) -> None:
    console.print(f"[bold red]error[/bold red] {escape(error.format())}")


def _parser_for(path: Path, custom_widgets) -> DocumentParser:
    workspace = load_workspace_config(path.parent if path.is_file() else path)
    return DocumentParser(list(workspace.widgets.custom) + list(custom_widgets))


def _load_document(path: Path, custom_widgets=()):
    parser = _parser_for(path, custom_widgets)
    try:
        return parser.parse(path.read_bytes())
    except ParseError as exc:
        exc.path = str(path)
        _print_error(exc)
        sys.exit(1)


@click.group()
@click.version_option(__version__, prog_name="vellum")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, verbose):
    """Vellum declarative UI markup tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# ----------------------------------------------------------------------
# check
# ----------------------------------------------------------------------

def _render_result(result: LintResult) -> None:
    for finding in result.findings:
        location = result.file_path
        if finding.line is not None:
            location = f"{location}:{finding.line}:{finding.column}"
        line = Text()
        line.append(f"{finding.severity.value:<7}", style=SEVERITY_STYLES[finding.severity])
        line.append(f" {location} ", style="bold")
        line.append(f"[{finding.rule_id}] ", style="magenta")
        line.append(finding.message)
        console.print(line)
        if finding.code_context:
            console.print(f"        [dim]{escape(finding.code_context)}[/dim]")
        if finding.suggestion:
            console.print(f"        [green]suggestion:[/green] {escape(finding.suggestion)}")
    for failure in result.rule_failures:
        console.print(f"[bold red]error[/bold red]   {escape(result.file_path)}: {escape(failure)}")
    for warning in result.warnings:
        console.print(f"[yellow]warning[/yellow] {escape(result.file_path)}: {escape(warning)}")


@cli.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path), default=".")
@click.option("--config", "config_path", type=click.Path(path_type=Path), help="Explicit config file")
@click.option("--strict/--no-strict", default=None, help="Treat version warnings as errors")
@click.option("--require-xml-declaration/--no-require-xml-declaration", default=None,
              help="Require <?xml ...?> at the top of each document")
@click.option("--custom-widget", "custom_widgets", multiple=True, help="Accept a custom widget tag")
@click.option("--json-output", is_flag=True, help="Output findings as JSON")
def check(path: Path, config_path: Optional[Path], strict, require_xml_declaration, custom_widgets, json_output):
    """Parse and check every document under PATH."""
    root = path if path.is_dir() else path.parent
    workspace = load_workspace_config(root, config_path)
    apply_cli_overrides(
        workspace,
        strict=strict,
        require_xml_declaration=require_xml_declaration,
        custom_widgets=custom_widgets,
    )

    files = workspace.discover_documents(path)
    if not files:
        console.print(f"[yellow]No documents found under {escape(str(path))}[/yellow]")
        return

    linter = DocumentLinter(config=workspace.check, custom_widgets=workspace.widgets.custom)
    results: List[LintResult] = []
    for file_path in files:
        results.append(linter.lint_document(file_path.read_bytes(), str(file_path)))

    if json_output:
        console.print_json(data=[
            {
                "file": result.file_path,
                "success": result.success(),
                "findings": [
                    {
                        "rule": finding.rule_id,
                        "severity": finding.severity.value,
                        "message": finding.message,
                        "line": finding.line,
                        "column": finding.column,
                        "suggestion": finding.suggestion,
                    }
                    for finding in result.findings
                ],
                "rule_failures": result.rule_failures,
            }
            for result in results
        ])
    else:
        for result in results:
            _render_result(result)
        errors = sum(result.error_count() + len(result.rule_failures) for result in results)
        warnings = sum(result.warning_count() for result in results)
        failed = sum(1 for result in results if not result.success())
        style = "bold red" if failed else "bold green"
        console.print(
            f"[{style}]Checked {len(results)} file(s): {errors} error(s), {warnings} warning(s)[/{style}]"
        )

    if any(not result.success() for result in results):
        sys.exit(1)


# ----------------------------------------------------------------------
# inspect / themes
# ----------------------------------------------------------------------

def _describe_value(value) -> str:
    if isinstance(value, StaticValue):
        return repr(value.text)
    if isinstance(value, BindingValue):
        return "{binding}"
    if isinstance(value, InterpolatedValue):
        return repr(value.skeleton("{…}"))
    return str(value)


def _widget_label(node: WidgetNode) -> Text:
    label = Text(node.kind.tag, style="bold blue")
    if node.id:
        label.append(f" #{node.id}", style="cyan")
    for name in sorted(node.attributes):
        label.append(f" {name}=", style="dim")
        label.append(_describe_value(node.attributes[name]))
    for event in node.events:
        label.append(f" {event.event.attribute}→{event.handler}", style="magenta")
    return label


def _add_widget(tree: Tree, node: WidgetNode) -> None:
    branch = tree.add(_widget_label(node))
    for child in node.children:
        _add_widget(branch, child)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--custom-widget", "custom_widgets", multiple=True, help="Accept a custom widget tag")
def inspect(file: Path, custom_widgets):
    """Show the parsed widget tree of FILE."""
    document = _load_document(file, custom_widgets)
    tree = Tree(f"[bold]{escape(file.name)}[/bold] (schema v{document.version})")
    _add_widget(tree, document.root)
    if document.themes:
        themes = tree.add("[bold green]themes[/bold green]")
        for name in sorted(document.themes):
            theme = document.themes[name]
            themes.add(name + (f" extends {theme.extends}" if theme.extends else ""))
    if document.style_classes:
        classes = tree.add("[bold green]style classes[/bold green]")
        for name in sorted(document.style_classes):
            style_class = document.style_classes[name]
            classes.add(name + (f" extends {' '.join(style_class.extends)}" if style_class.extends else ""))
    console.print(tree)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def themes(file: Path):
    """Show the resolved themes and style classes of FILE."""
    document = _load_document(file)
    try:
        resolved = resolve_themes(document.themes)
        classes = resolve_style_classes(document.style_classes)
    except (ThemeError, StyleClassError) as exc:
        exc.path = str(file)
        _print_error(exc)
        sys.exit(1)

    table = Table(title=f"Themes ({len(resolved)})")
    table.add_column("Name", style="bold blue")
    table.add_column("Extends", style="cyan")
    table.add_column("Primary")
    table.add_column("Background")
    table.add_column("Text")
    table.add_column("Spacing", justify="right")
    for name in sorted(resolved):
        theme = resolved[name]
        palette = theme.palette
        table.add_row(
            name + (" (global)" if name == document.global_theme else ""),
            theme.extends or "",
            palette.primary.to_hex() if palette.primary else "-",
            palette.background.to_hex() if palette.background else "-",
            palette.text.to_hex() if palette.text else "-",
            f"{theme.spacing.unit:g}" if theme.spacing.unit is not None else "-",
        )
    console.print(table)

    if classes:
        class_table = Table(title=f"Style classes ({len(classes)})")
        class_table.add_column("Name", style="bold blue")
        class_table.add_column("Extends", style="cyan")
        class_table.add_column("States")
        for name in sorted(classes):
            style_class = classes[name]
            states = [state.value for state in style_class.state_variants]
            states.extend(str(selector) for selector in style_class.combined_state_variants)
            class_table.add_row(name, " ".join(style_class.extends), ", ".join(states))
        console.print(class_table)


# ----------------------------------------------------------------------
# widgets / expr
# ----------------------------------------------------------------------

@cli.command()
def widgets():
    """List built-in widgets with their minimum schema version."""
    table = Table(title="Built-in widgets")
    table.add_column("Tag", style="bold blue")
    table.add_column("Name")
    table.add_column("Since", style="green")
    table.add_column("Required attributes", style="cyan")
    for kind in WidgetKind:
        schema = get_widget_schema(kind)
        table.add_row(kind.tag, kind.display_name, f"v{kind.minimum_version}", ", ".join(schema.required))
    console.print(table)


def _expr_label(expr: Expr) -> str:
    if isinstance(expr, Literal):
        return f"Literal {expr.kind.value} {expr.value!r}"
    if isinstance(expr, FieldAccess):
        return f"Field {'.'.join(expr.path)}"
    if isinstance(expr, SharedFieldAccess):
        return f"Shared {'.'.join(expr.path)}"
    if isinstance(expr, MethodCall):
        return f"Call .{expr.method}()"
    if isinstance(expr, BinaryOp):
        return f"Binary {expr.op.value}"
    if isinstance(expr, UnaryOp):
        return f"Unary {expr.op.value}"
    if isinstance(expr, Conditional):
        return "If"
    return type(expr).__name__


def _add_expr(tree: Tree, expr: Expr) -> None:
    branch = tree.add(_expr_label(expr))
    for child in expr.children():
        _add_expr(branch, child)


@cli.command()
@click.argument("source")
def expr(source: str):
    """Show the syntax tree of a binding expression (without braces)."""
    try:
        parsed = parse_expression(source)
    except ExpressionError as exc:
        console.print(f"[bold red]error[/bold red] {escape(exc.message)}")
        console.print(f"  {escape(source)}")
        console.print(f"  {' ' * exc.offset}[bold red]^[/bold red]")
        sys.exit(1)
    tree = Tree(f"[bold]{escape(source)}[/bold]")
    _add_expr(tree, parsed)
    console.print(tree)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
