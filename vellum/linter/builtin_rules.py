"""Built-in document rules."""

from __future__ import annotations

from typing import List

from vellum.errors import StyleClassError, StyleValueError, ThemeError, find_similar
from vellum.ir.node import StaticValue
from vellum.ir.theme import WidgetState
from vellum.parser.attributes import split_state_selector
from vellum.parser.document import validate_widget_versions
from vellum.parser.markup import MarkupElement
from vellum.parser.style_parser import LAYOUT_ATTRIBUTES, STYLE_ATTRIBUTES, build_layout, build_style
from vellum.schema import get_widget_schema
from vellum.themes.resolver import validate_class_inheritance, validate_theme_inheritance

from .core import LintContext, LintFinding, LintSeverity
from .rules import LintRule

VALID_STATES = ", ".join(state.value for state in WidgetState)


def _did_you_mean(name: str, candidates, fallback: str = "") -> str:
    similar = find_similar(name, candidates)
    if similar:
        return f"Did you mean '{similar[0]}'?"
    return fallback or None


class ThemeRule(LintRule):
    """Theme values, inheritance and the global theme reference."""

    def __init__(self):
        super().__init__(
            rule_id="theme",
            description="Validate theme values, inheritance and the global theme reference",
        )

    def check(self, context: LintContext) -> List[LintFinding]:
        findings = []
        document = context.document

        for name in sorted(document.themes):
            for error in document.themes[name].validation_errors():
                findings.append(self._from_theme_error(context, error))

        if document.themes:
            try:
                validate_theme_inheritance(document.themes)
            except ThemeError as error:
                findings.append(self._from_theme_error(context, error))

        if document.global_theme is not None and document.global_theme not in document.themes:
            available = ", ".join(sorted(document.themes)) or "none"
            findings.append(context.finding(
                self.rule_id,
                f"Global theme '{document.global_theme}' not found. Available: {available}",
                suggestion=_did_you_mean(document.global_theme, document.themes,
                                         "Define the theme inside <themes>"),
            ))
        return findings

    def _from_theme_error(self, context: LintContext, error: ThemeError) -> LintFinding:
        return context.finding(self.rule_id, error.message, error.span, suggestion=error.suggestion)


class StyleClassRule(LintRule):
    """Style class values and inheritance."""

    def __init__(self):
        super().__init__(
            rule_id="style-class",
            description="Validate style class values and inheritance",
        )

    def check(self, context: LintContext) -> List[LintFinding]:
        findings = []
        classes = context.document.style_classes
        for name in sorted(classes):
            try:
                classes[name].validate()
            except StyleValueError as error:
                findings.append(context.finding(
                    self.rule_id,
                    f"Invalid style class '{name}': {error.message}",
                    classes[name].span,
                ))
        try:
            validate_class_inheritance(classes)
        except StyleClassError as error:
            findings.append(context.finding(self.rule_id, error.message, error.span, suggestion=error.suggestion))
        return findings


class ReferenceRule(LintRule):
    """Widgets referencing classes or themes that do not exist."""

    def __init__(self):
        super().__init__(
            rule_id="unknown-reference",
            description="Detect references to undefined style classes and themes",
        )

    def check(self, context: LintContext) -> List[LintFinding]:
        findings = []
        document = context.document
        for node in document.walk():
            for class_name in node.classes:
                if class_name not in document.style_classes:
                    findings.append(context.finding(
                        self.rule_id,
                        f"Unknown style class '{class_name}' on {node.kind.display_name}",
                        node.span,
                        suggestion=_did_you_mean(class_name, document.style_classes,
                                                 f'Define <class name="{class_name}"> in <style_classes>'),
                    ))
            if isinstance(node.theme_ref, StaticValue) and node.theme_ref.text not in document.themes:
                theme_name = node.theme_ref.text
                findings.append(context.finding(
                    self.rule_id,
                    f"Unknown theme '{theme_name}' on {node.kind.display_name}",
                    node.span,
                    suggestion=_did_you_mean(theme_name, document.themes, "Define the theme inside <themes>"),
                ))
        return findings


class WidgetAttributeRule(LintRule):
    """Unknown, missing and unsupported widget attributes and events."""

    def __init__(self):
        super().__init__(
            rule_id="widget-attribute",
            description="Detect unknown attributes, missing required attributes and unsupported events",
        )

    def check(self, context: LintContext) -> List[LintFinding]:
        findings = []
        for node in context.document.walk():
            schema = get_widget_schema(node.kind)
            if schema.permissive:
                continue
            widget = node.kind.display_name
            valid = schema.all_valid_names()

            for name in sorted(node.attributes):
                if ":" in name or schema.accepts(name):
                    continue
                findings.append(context.finding(
                    self.rule_id,
                    f"Unknown attribute '{name}' for {widget}",
                    node.span,
                    suggestion=_did_you_mean(name, valid, f"Valid attributes are: {', '.join(sorted(set(valid)))}"),
                ))

            for name in schema.required:
                if name not in node.attributes:
                    findings.append(context.finding(
                        self.rule_id,
                        f"Missing required attribute '{name}' for {widget}",
                        node.span,
                        suggestion=f'Add {name}="..." to <{node.kind.tag}>',
                    ))

            for event in node.events:
                if event.event.attribute not in schema.events:
                    findings.append(context.finding(
                        self.rule_id,
                        f"Event '{event.event.attribute}' is not supported by {widget}",
                        event.span,
                        severity=LintSeverity.WARNING,
                        suggestion=f"Supported events: {', '.join(schema.events) or 'none'}",
                    ))
        return findings


class HandlerRule(LintRule):
    """Empty event handlers, and handlers missing from the configured registry."""

    def __init__(self):
        super().__init__(
            rule_id="event-handler",
            description="Detect empty and unregistered event handlers",
        )

    def check(self, context: LintContext) -> List[LintFinding]:
        findings = []
        registry = context.config.handlers
        for node in context.document.walk():
            for event in node.events:
                handler = event.handler.strip()
                if not handler:
                    findings.append(context.finding(
                        self.rule_id,
                        f"Empty handler for {event.event.attribute} on {node.kind.display_name}",
                        event.span,
                        suggestion=f'Name a handler: {event.event.attribute}="handle_{event.event.value}"',
                    ))
                elif registry is not None and handler not in registry:
                    findings.append(context.finding(
                        self.rule_id,
                        f"Unknown handler '{handler}'",
                        event.span,
                        suggestion=_did_you_mean(handler, registry, "Register the handler in [check] handlers"),
                    ))
        return findings


class ResponsiveAttributeRule(LintRule):
    """Breakpoint-prefixed and state-prefixed attributes on widgets."""

    def __init__(self):
        super().__init__(
            rule_id="responsive-attribute",
            description="Validate breakpoint and state prefixed attributes",
        )

    def check(self, context: LintContext) -> List[LintFinding]:
        findings = []
        known = LAYOUT_ATTRIBUTES | STYLE_ATTRIBUTES

        for node in context.document.walk():
            for breakpoint, attributes in node.breakpoint_attributes.items():
                for name, value in sorted(attributes.items()):
                    attribute = f"{breakpoint.value}-{name}"
                    if name not in known:
                        findings.append(context.finding(
                            self.rule_id,
                            f"Unknown attribute '{name}' in breakpoint attribute '{attribute}'",
                            node.span,
                            suggestion=_did_you_mean(name, known, "Breakpoints apply to layout and style attributes"),
                        ))
                    elif isinstance(value, StaticValue):
                        message = _value_problem(name, value.text)
                        if message is not None:
                            findings.append(context.finding(
                                self.rule_id,
                                f"Invalid value for '{attribute}': {message}",
                                node.span,
                            ))

        for element in _walk_elements(context.tree.root):
            for attribute in element.attributes:
                if ":" not in attribute.name:
                    continue
                findings.extend(self._check_state_attribute(context, element, attribute.name))
        return findings

    def _check_state_attribute(self, context: LintContext, element: MarkupElement, name: str) -> List[LintFinding]:
        if element.tag in ("class", "style"):
            return []
        prefix = name.rpartition(":")[0]
        split = split_state_selector(name)
        if split is None:
            return [context.finding(
                self.rule_id,
                f"Invalid state prefix '{prefix}' in attribute '{name}'",
                element.span,
                suggestion=f"Valid states are: {VALID_STATES}",
            )]
        selector, base = split
        if not selector.is_single:
            return [context.finding(
                self.rule_id,
                f"Combined state selector '{selector}' is only supported in style classes",
                element.span,
                severity=LintSeverity.WARNING,
                suggestion="Move the combined state styles into a <class> and reference it with class=\"...\"",
            )]
        if base not in STYLE_ATTRIBUTES:
            return [context.finding(
                self.rule_id,
                f"Attribute '{base}' cannot be used in {selector} state",
                element.span,
                suggestion=_did_you_mean(base, STYLE_ATTRIBUTES,
                                         f"State variants accept: {', '.join(sorted(STYLE_ATTRIBUTES))}"),
            )]
        return []


class SchemaVersionRule(LintRule):
    """Widgets newer than the declared schema version."""

    def __init__(self):
        super().__init__(
            rule_id="schema-version",
            description="Detect widgets that require a newer schema version",
        )

    def check(self, context: LintContext) -> List[LintFinding]:
        severity = LintSeverity.ERROR if context.config.strict else LintSeverity.WARNING
        return [
            context.finding(self.rule_id, warning.message, warning.span,
                            severity=severity, suggestion=warning.suggestion)
            for warning in validate_widget_versions(context.document)
        ]


class XmlDeclarationRule(LintRule):
    """Require a leading ``<?xml ...?>`` declaration when configured."""

    def __init__(self):
        super().__init__(
            rule_id="xml-declaration",
            description="Require an XML declaration at the start of each document",
        )

    def check(self, context: LintContext) -> List[LintFinding]:
        if not context.config.require_xml_declaration or context.tree.has_declaration:
            return []
        return [LintFinding(
            rule_id=self.rule_id,
            message="Missing XML declaration",
            severity=LintSeverity.ERROR,
            line=1,
            column=1,
            suggestion='Start the file with <?xml version="1.0" encoding="UTF-8"?>',
        )]


def _walk_elements(root: MarkupElement):
    stack = [root]
    while stack:
        element = stack.pop()
        yield element
        stack.extend(reversed(element.children))


def _value_problem(name: str, text: str):
    try:
        if name in LAYOUT_ATTRIBUTES:
            build_layout({name: text})
        else:
            build_style({name: text})
    except StyleValueError as error:
        return error.message
    return None


def get_default_rules() -> List[LintRule]:
    """Get the default set of rules."""
    return [
        ThemeRule(),
        StyleClassRule(),
        ReferenceRule(),
        WidgetAttributeRule(),
        HandlerRule(),
        ResponsiveAttributeRule(),
        SchemaVersionRule(),
        XmlDeclarationRule(),
    ]
