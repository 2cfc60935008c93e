"""Graph module - Flow graph data structures.

Exports:
- FlowNode: One step of a documented flow
- Link / LinkKind: Typed references attached to a step
- SourceLocation: Portable file location reference
- LocalRef / CrossRepoRef / MalformedRef: Parsed node references
- GraphWarning / WarningKind: Structural problems found while building
- GraphError / ErrorKind: Incomplete comment blocks

Note: TopicGraph is in flowdoc.graph.builder (use graph.factory.build_topic_graph()
to scan and build in one step)
"""

from flowdoc.graph.diagnostics import ErrorKind, GraphError, GraphWarning, WarningKind
from flowdoc.graph.FlowNode import FlowNode, Link, LinkKind, SourceLocation
from flowdoc.graph.references import CrossRepoRef, LocalRef, MalformedRef, parse_reference

__all__ = [
    "FlowNode",
    "Link",
    "LinkKind",
    "SourceLocation",
    "LocalRef",
    "CrossRepoRef",
    "MalformedRef",
    "parse_reference",
    "GraphWarning",
    "WarningKind",
    "GraphError",
    "ErrorKind",
]
