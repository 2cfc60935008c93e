"""Pytest fixtures for core tests."""

import pytest


@pytest.fixture
def sample_source_location():
    """Create a sample source location."""
    from flowdoc.graph import SourceLocation

    return SourceLocation(path="src/register.ts", line=10)


@pytest.fixture
def linear_graph():
    """REG-1 -> REG-2 -> REG-3 through explicit dependencies."""
    from tests.core.graph_test_helpers import build_graph, make_node

    return build_graph(
        make_node("REG-1", "Open form"),
        make_node("REG-2", "Validate input", dependency="REG-1"),
        make_node("REG-3", "Submit", dependency="REG-2"),
    )


@pytest.fixture
def branching_graph():
    """START with two explicit branches, one of them into another repo."""
    from tests.core.graph_test_helpers import build_graph, make_node

    return build_graph(
        make_node("START", "Choose payment", children=["CARD", "billing@INVOICE-1"]),
        make_node("CARD", "Pay by card"),
        make_node("DONE", "Show receipt", dependency="CARD"),
        external_repos={"billing"},
    )
