"""Fixtures for comment parser tests."""

import pytest


@pytest.fixture
def registry():
    """Registry with the @flowdoc-* comment parsers."""
    from flowdoc.graph.factory import create_registry

    return create_registry()


@pytest.fixture
def parse(registry):
    """Parse a text and return the ParsedContent list."""
    from flowdoc.graph.parsers import ParseContext

    def _parse(text: str):
        return registry.parse_text(text, ParseContext(source_id="src/app.ts"))

    return _parse
