"""Tests for the built-in document rules."""

from vellum.config import CheckConfig
from vellum.linter import DocumentLinter, LintSeverity
from vellum.linter.builtin_rules import (
    HandlerRule,
    ReferenceRule,
    ResponsiveAttributeRule,
    SchemaVersionRule,
    StyleClassRule,
    ThemeRule,
    WidgetAttributeRule,
    XmlDeclarationRule,
)


def lint(rule, source, config=None, custom_widgets=()):
    linter = DocumentLinter([rule], config=config, custom_widgets=custom_widgets)
    return linter.lint_document(source)


class TestThemeRule:
    """Theme values, inheritance and the global theme."""

    def test_incomplete_palette_without_parent(self):
        source = '<vellum><themes><theme name="solo"><palette primary="#fff" /></theme></themes><column /></vellum>'
        result = lint(ThemeRule(), source)
        assert len(result.findings) == 1
        finding = result.findings[0]
        assert finding.rule_id == "theme"
        assert finding.message.startswith("THEME_003:")
        assert finding.line == 1

    def test_typography_and_spacing_collected(self, palette):
        source = f'''<vellum><themes>
            <theme name="t">
                <palette {palette()} />
                <typography font_size_base="4" />
                <spacing unit="0" />
            </theme>
        </themes><column /></vellum>'''
        result = lint(ThemeRule(), source)
        messages = [finding.message for finding in result.findings]
        assert len(messages) == 2
        assert any("Typography validation failed" in message for message in messages)
        assert any("spacing unit must be positive" in message for message in messages)

    def test_cycle_reported(self):
        source = '''<vellum><themes>
            <theme name="A" extends="B" />
            <theme name="B" extends="A" />
        </themes><column /></vellum>'''
        result = lint(ThemeRule(), source)
        assert any("THEME_007" in finding.message for finding in result.findings)

    def test_unknown_global_theme(self, palette):
        source = f'''<vellum>
            <themes><theme name="dark"><palette {palette()} /></theme></themes>
            <global_theme name="drak" />
            <column />
        </vellum>'''
        result = lint(ThemeRule(), source)
        assert len(result.findings) == 1
        assert result.findings[0].message == "Global theme 'drak' not found. Available: dark"
        assert result.findings[0].suggestion == "Did you mean 'dark'?"

    def test_clean(self, full_document):
        assert lint(ThemeRule(), full_document).findings == []


class TestStyleClassRule:
    def test_cycle(self):
        source = '''<vellum><style_classes>
            <class name="a" extends="b" />
            <class name="b" extends="a" />
        </style_classes><column /></vellum>'''
        result = lint(StyleClassRule(), source)
        assert len(result.findings) == 1
        assert "Circular style class dependency detected: a → b → a" == result.findings[0].message

    def test_missing_parent(self):
        source = '''<vellum><style_classes>
            <class name="primary" extends="bsae" opacity="1" />
        </style_classes><column /></vellum>'''
        result = lint(StyleClassRule(), source)
        assert len(result.findings) == 1
        assert result.findings[0].message == "Parent class 'bsae' not found"
        assert result.findings[0].line == 2


class TestReferenceRule:
    def test_unknown_class_and_theme(self, palette):
        source = f'''<vellum>
            <themes><theme name="dark"><palette {palette()} /></theme></themes>
            <style_classes><class name="card" opacity="1" /></style_classes>
            <column class="crad" theme="light" />
        </vellum>'''
        result = lint(ReferenceRule(), source)
        messages = [finding.message for finding in result.findings]
        assert "Unknown style class 'crad' on Column" in messages
        assert "Unknown theme 'light' on Column" in messages
        class_finding = next(f for f in result.findings if "crad" in f.message)
        assert class_finding.suggestion == "Did you mean 'card'?"
        assert class_finding.line == 4

    def test_dynamic_theme_ignored(self):
        result = lint(ReferenceRule(), '<column theme="{current}" />')
        assert result.findings == []


class TestWidgetAttributeRule:
    def test_unknown_attribute(self):
        result = lint(WidgetAttributeRule(), '<button lable="Save" />')
        assert len(result.findings) == 1
        assert result.findings[0].message == "Unknown attribute 'lable' for Button"
        assert result.findings[0].suggestion == "Did you mean 'label'?"

    def test_missing_required(self):
        result = lint(WidgetAttributeRule(), '<column><text /></column>')
        assert result.findings[0].message == "Missing required attribute 'value' for Text"

    def test_unsupported_event_is_a_warning(self):
        result = lint(WidgetAttributeRule(), '<button label="x" on_change="go" />')
        assert len(result.findings) == 1
        assert result.findings[0].severity is LintSeverity.WARNING
        assert result.findings[0].message == "Event 'on_change' is not supported by Button"
        assert result.success()

    def test_custom_widgets_are_permissive(self):
        result = lint(WidgetAttributeRule(), '<gauge anything="1" />', custom_widgets=["gauge"])
        assert result.findings == []


class TestHandlerRule:
    def test_empty_handler(self):
        result = lint(HandlerRule(), '<button on_click="" />')
        assert result.findings[0].message == "Empty handler for on_click on Button"

    def test_registry(self):
        config = CheckConfig(handlers=["save", "cancel"])
        result = lint(HandlerRule(), '<row><button on_click="save" /><button on_click="sav" /></row>', config)
        assert len(result.findings) == 1
        assert result.findings[0].message == "Unknown handler 'sav'"
        assert result.findings[0].suggestion == "Did you mean 'save'?"

    def test_no_registry_accepts_any_name(self):
        assert lint(HandlerRule(), '<button on_click="anything" />').findings == []


class TestResponsiveAttributeRule:
    def test_unknown_breakpoint_attribute(self):
        result = lint(ResponsiveAttributeRule(), '<column mobile-spacin="4" />')
        assert result.findings[0].message == "Unknown attribute 'spacin' in breakpoint attribute 'mobile-spacin'"
        assert result.findings[0].suggestion == "Did you mean 'spacing'?"

    def test_invalid_breakpoint_value(self):
        result = lint(ResponsiveAttributeRule(), '<column tablet-padding="1 2 3" />')
        assert result.findings[0].message.startswith("Invalid value for 'tablet-padding':")

    def test_invalid_state_prefix(self):
        result = lint(ResponsiveAttributeRule(), '<button pressed:background="#fff" />')
        assert result.findings[0].message == "Invalid state prefix 'pressed' in attribute 'pressed:background'"

    def test_non_style_state_attribute(self):
        result = lint(ResponsiveAttributeRule(), '<button hover:label="x" />')
        assert result.findings[0].message == "Attribute 'label' cannot be used in hover state"

    def test_combined_state_on_widget_warns(self):
        result = lint(ResponsiveAttributeRule(), '<button hover:focus:opacity="0.5" />')
        assert result.findings[0].severity is LintSeverity.WARNING
        assert "only supported in style classes" in result.findings[0].message

    def test_style_classes_are_skipped(self):
        source = '''<vellum><style_classes>
            <class name="b" hover:focus:opacity="0.5" />
        </style_classes><column /></vellum>'''
        assert lint(ResponsiveAttributeRule(), source).findings == []

    def test_valid_attributes(self):
        result = lint(ResponsiveAttributeRule(), '<column mobile-spacing="4" hover:opacity="0.9" />')
        assert result.findings == []


class TestSchemaVersionRule:
    def test_warning_by_default(self):
        result = lint(SchemaVersionRule(), '<column><date_picker /></column>')
        assert result.findings[0].severity is LintSeverity.WARNING
        assert result.findings[0].suggestion == 'Update to <vellum version="1.1"> or remove this widget'
        assert result.success()

    def test_error_when_strict(self):
        result = lint(SchemaVersionRule(), '<column><date_picker /></column>', CheckConfig(strict=True))
        assert result.findings[0].severity is LintSeverity.ERROR
        assert not result.success()


class TestXmlDeclarationRule:
    def test_not_required_by_default(self):
        assert lint(XmlDeclarationRule(), "<column />").findings == []

    def test_required(self):
        config = CheckConfig(require_xml_declaration=True)
        result = lint(XmlDeclarationRule(), "<column />", config)
        assert result.findings[0].message == "Missing XML declaration"
        assert (result.findings[0].line, result.findings[0].column) == (1, 1)
        present = lint(XmlDeclarationRule(), '<?xml version="1.0"?>\n<column />', config)
        assert present.findings == []
