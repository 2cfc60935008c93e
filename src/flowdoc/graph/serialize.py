"""Graph Serialization - Export TopicGraph to various formats.

This module provides functions to serialize TopicGraph and FlowNode
to JSON-compatible dicts, markdown outlines and plain text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from flowdoc.graph.collation import collation_key
from flowdoc.graph.references import CrossRepoRef, parse_reference

if TYPE_CHECKING:
    from flowdoc.graph.builder import TopicGraph
    from flowdoc.graph.diagnostics import GraphError, GraphWarning
    from flowdoc.graph.FlowNode import FlowNode, Link


def _serialize_link(link: Link) -> dict[str, Any]:
    result: dict[str, Any] = {"target": link.target, "type": link.kind.value}
    parsed = {
        "symbol": link.symbol,
        "filePath": link.file_path,
        "line": link.line,
        "url": link.url,
    }
    result["parsed"] = {k: v for k, v in parsed.items() if v is not None}
    return result


def serialize_node(node: FlowNode) -> dict[str, Any]:
    """Serialize a FlowNode to a JSON-compatible dict.

    Args:
        node: The node to serialize.

    Returns:
        Dict suitable for JSON serialization.
    """
    result: dict[str, Any] = {
        "topic": node.topic,
        "id": node.id,
        "step": node.step,
        "dependency": node.dependency,
        "dependencyNote": node.dependency_note,
        "children": list(node.children) if node.children is not None else None,
        "links": [_serialize_link(link) for link in node.links],
    }
    if node.inferred:
        result["inferred"] = True
    if node.source:
        result["sourceFile"] = node.source.path
        result["sourceLine"] = node.source.line
    return result


def serialize_warning(warning: GraphWarning) -> dict[str, Any]:
    result: dict[str, Any] = {
        "kind": warning.kind.value,
        "nodeId": warning.node_id,
        "message": warning.message,
    }
    if warning.source:
        result["sourceFile"] = warning.source.path
        result["sourceLine"] = warning.source.line
    return result


def serialize_error(error: GraphError) -> dict[str, Any]:
    return {
        "kind": error.kind.value,
        "message": error.message,
        "sourceFile": error.source.path,
        "sourceLine": error.source.line,
        "partialData": {k: v for k, v in error.partial_data.items() if v is not None},
    }


def serialize_graph(graph: TopicGraph) -> dict[str, Any]:
    """Serialize a TopicGraph to a JSON-compatible dict.

    Args:
        graph: The graph to serialize.

    Returns:
        Dict with topic, nodes (sorted by id), roots, children, warnings
        and errors.
    """
    node_ids = sorted(graph.nodes_by_id, key=collation_key)
    return {
        "topic": graph.topic,
        "nodes": [serialize_node(graph.nodes_by_id[node_id]) for node_id in node_ids],
        "roots": list(graph.roots),
        "children": {
            parent: list(graph.children_by_parent[parent])
            for parent in sorted(graph.children_by_parent, key=collation_key)
        },
        "warnings": [serialize_warning(w) for w in graph.warnings],
        "errors": [serialize_error(e) for e in graph.errors],
    }


def _outline_lines(graph: TopicGraph, style: str) -> list[str]:
    """Render the graph as an indented outline, cycle-safe."""
    lines: list[str] = []
    rendered: set[str] = set()
    bullet = "- " if style == "markdown" else ""
    indent_unit = "  "

    # Stack of (reference, depth); reversed pushes keep child order
    stack: list[tuple[str, int]] = [(root_id, 0) for root_id in reversed(graph.roots)]
    while stack:
        ref_text, depth = stack.pop()
        indent = indent_unit * depth
        node = graph.find_by_id(ref_text)

        if node is None:
            ref = parse_reference(ref_text)
            if isinstance(ref, CrossRepoRef):
                lines.append(f"{indent}{bullet}↗ {ref}")
            else:
                lines.append(f"{indent}{bullet}? {ref_text}")
            continue

        if node.id in rendered:
            lines.append(f"{indent}{bullet}↺ {node.id} (see above)")
            continue
        rendered.add(node.id)

        if style == "markdown":
            text = f"{indent}{bullet}**{node.id}**: {node.step}"
        else:
            text = f"{indent}{node.id}  {node.step}"
        if node.dependency_note:
            text += f" [{node.dependency_note}]"
        if node.inferred:
            text += " (auto-linked)"
        lines.append(text)

        for child_id in reversed(graph.children_by_parent.get(node.id, [])):
            stack.append((child_id, depth + 1))

    return lines


def graph_to_markdown(graph: TopicGraph) -> str:
    """Render a TopicGraph as a nested markdown list.

    Nodes reached a second time (several parents or a cycle) are shown as
    a back-reference instead of being expanded again.
    """
    lines = [f"# {graph.topic}", ""]
    lines.extend(_outline_lines(graph, "markdown"))
    if graph.warnings:
        lines.extend(["", "## Warnings", ""])
        lines.extend(f"- {w}" for w in graph.warnings)
    if graph.errors:
        lines.extend(["", "## Parse errors", ""])
        lines.extend(f"- {e}" for e in graph.errors)
    return "\n".join(lines) + "\n"


def graph_to_text(graph: TopicGraph) -> str:
    """Render a TopicGraph as a plain indented tree."""
    lines = [graph.topic]
    lines.extend(_outline_lines(graph, "text"))
    return "\n".join(lines) + "\n"


__all__ = [
    "serialize_node",
    "serialize_warning",
    "serialize_error",
    "serialize_graph",
    "graph_to_markdown",
    "graph_to_text",
]
