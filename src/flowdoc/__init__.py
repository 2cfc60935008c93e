"""
flowdoc - Process-flow documentation from tagged code comments

flowdoc collects ``@flowdoc-*`` comment tags scattered across a codebase,
builds one navigable step graph per topic (registration flow, payment flow,
...) and lets you walk it step by step, including hops into other
repositories.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("flowdoc")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__license__ = "MIT"

from flowdoc.graph.builder import TopicGraph, build_graph, get_children, has_children
from flowdoc.graph.diagnostics import ErrorKind, GraphError, GraphWarning, WarningKind
from flowdoc.graph.FlowNode import FlowNode, Link, LinkKind, SourceLocation

__all__ = [
    "__version__",
    "FlowNode",
    "Link",
    "LinkKind",
    "SourceLocation",
    "TopicGraph",
    "build_graph",
    "get_children",
    "has_children",
    "GraphWarning",
    "WarningKind",
    "GraphError",
    "ErrorKind",
]
