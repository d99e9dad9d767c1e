"""Shared sample documents and fixtures for the Vellum test suite."""

import pytest

from vellum.parser.document import DocumentParser


# A complete wrapper document exercising themes, classes and bindings
FULL_DOCUMENT = '''<?xml version="1.0" encoding="UTF-8"?>
<vellum version="1.0">
    <themes>
        <theme name="light">
            <palette primary="#3498db" secondary="#2ecc71" success="#27ae60"
                     warning="#f39c12" danger="#e74c3c" background="#ecf0f1"
                     surface="#ffffff" text="#2c3e50" text_secondary="#7f8c8d" />
            <typography font_family="Inter" font_size_base="16" line_height="1.5" />
            <spacing unit="8" />
        </theme>
        <theme name="dark" extends="light">
            <palette background="#1e1e1e" text="#ecf0f1" />
        </theme>
    </themes>
    <style_classes>
        <class name="card" padding="16" background="#ffffff" border_radius="8" />
        <class name="primary_button" extends="card" background="#3498db"
               hover:background="#2980b9" hover:active:opacity="0.8" />
    </style_classes>
    <global_theme name="dark" />
    <column padding="20" spacing="10">
        <text value="Total: {count} items" class="card" />
        <button label="Save" on_click="save_item:{item.id}" class="primary_button" />
    </column>
</vellum>
'''

# The legacy form: a bare widget root with no wrapper
BARE_DOCUMENT = '''<column>
    <text value="Hello" />
    <button label="Go" on_click="go" />
</column>
'''

# Themes whose problems only the checker reports
PROBLEMATIC_DOCUMENT = '''<vellum version="1.0">
    <themes>
        <theme name="base">
            <palette primary="#3498db" />
        </theme>
    </themes>
    <style_classes>
        <class name="a" extends="b" />
        <class name="b" extends="a" />
    </style_classes>
    <global_theme name="dakr" />
    <column>
        <text value="x" class="missing" />
        <button label="Go" on_click="" />
    </column>
</vellum>
'''

THEME_DOCUMENT = '''<theme_document>
    <themes>
        <theme name="light">
            <palette primary="#3498db" secondary="#2ecc71" success="#27ae60"
                     warning="#f39c12" danger="#e74c3c" background="#ffffff"
                     surface="#f5f5f5" text="#000000" text_secondary="#666666" />
        </theme>
        <theme name="dark" extends="light">
            <palette background="#121212" text="#ffffff" />
        </theme>
    </themes>
    <default_theme name="dark" />
    <follow_system enabled="false" />
</theme_document>
'''


def full_palette(**overrides):
    """Palette attribute string with every required color set."""
    colors = {
        "primary": "#3498db",
        "secondary": "#2ecc71",
        "success": "#27ae60",
        "warning": "#f39c12",
        "danger": "#e74c3c",
        "background": "#ffffff",
        "surface": "#f5f5f5",
        "text": "#000000",
        "text_secondary": "#666666",
    }
    colors.update(overrides)
    return " ".join(f'{name}="{value}"' for name, value in colors.items())


@pytest.fixture
def parser():
    """A document parser with no custom widgets."""
    return DocumentParser()


@pytest.fixture
def full_document():
    return FULL_DOCUMENT


@pytest.fixture
def bare_document():
    return BARE_DOCUMENT


@pytest.fixture
def problematic_document():
    return PROBLEMATIC_DOCUMENT


@pytest.fixture
def theme_document():
    return THEME_DOCUMENT


@pytest.fixture
def palette():
    """The :func:`full_palette` helper, for building theme markup."""
    return full_palette
