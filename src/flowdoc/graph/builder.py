"""Graph Builder - Constructs a TopicGraph from parsed node records.

This module turns the flat list of records found in comment tags into one
validated, deterministically ordered graph per topic:

1. filter records to the topic (record order kept)
2. drop duplicate ids, first record wins
3. resolve ``dependency`` edges
4. resolve explicit ``children`` edges
5. sort roots and child lists
6. infer missing edges from numeric ids (see flowdoc.graph.autolink)
7. detect cycles (advisory only)
8. attach the parse errors of the topic

Nothing here raises on bad input; anomalies become GraphWarning records.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from flowdoc.graph.autolink import auto_link
from flowdoc.graph.collation import collation_key
from flowdoc.graph.diagnostics import GraphError, GraphWarning, WarningKind
from flowdoc.graph.FlowNode import FlowNode
from flowdoc.graph.references import CrossRepoRef, MalformedRef, parse_reference


@dataclass
class TopicGraph:
    """Container for the graph of one topic.

    Attributes:
        topic: The topic name.
        nodes_by_id: Node records by id, in record order.
        children_by_parent: Parent id to sorted child references. Child
            references may be cross-repo ("repo@id"); parents are always
            local ids.
        roots: Sorted ids of nodes without a resolved local dependency.
        warnings: Structural warnings, in detection order.
        errors: Parse errors reported for this topic.
    """

    topic: str
    nodes_by_id: dict[str, FlowNode] = field(default_factory=dict)
    children_by_parent: dict[str, list[str]] = field(default_factory=dict)
    roots: list[str] = field(default_factory=list)
    warnings: list[GraphWarning] = field(default_factory=list)
    errors: list[GraphError] = field(default_factory=list)

    def find_by_id(self, node_id: str) -> FlowNode | None:
        """Find node by ID.

        Args:
            node_id: The node ID to find.

        Returns:
            The matching FlowNode, or None if not found.
        """
        return self.nodes_by_id.get(node_id)

    def node_count(self) -> int:
        """Return total number of nodes in the graph."""
        return len(self.nodes_by_id)

    def warnings_of_kind(self, kind: WarningKind) -> list[GraphWarning]:
        """Return warnings of a single kind."""
        return [w for w in self.warnings if w.kind == kind]

    def has_cycles(self) -> bool:
        """Check if cycle detection reported anything."""
        return any(w.kind == WarningKind.CYCLE_DETECTED for w in self.warnings)

    def has_problems(self) -> bool:
        """Check if the graph has warnings or parse errors."""
        return bool(self.warnings or self.errors)


def get_children(graph: TopicGraph, node_id: str) -> list[str]:
    """Get child references of a node; empty for unknown or childless ids."""
    return list(graph.children_by_parent.get(node_id, ()))


def has_children(graph: TopicGraph, node_id: str) -> bool:
    """Check if a node has children."""
    return bool(graph.children_by_parent.get(node_id))


class GraphBuilder:
    """Builder for constructing a TopicGraph from node records.

    Usage:
        builder = GraphBuilder("user-registration", external_repos={"billing"})
        builder.add_records(records)
        builder.add_errors(parse_errors)
        graph = builder.build()

    Records of other topics are ignored, so the full workspace record list
    can be passed for every topic. A builder holds no global state; separate
    builders may run concurrently.
    """

    def __init__(
        self,
        topic: str,
        external_repos: Iterable[str] | None = None,
        auto_link_numeric: bool = True,
    ) -> None:
        """Initialize the graph builder.

        Args:
            topic: Topic whose graph is built.
            external_repos: Names accepted as cross-repo targets. Only used
                to decide whether a warning is due.
            auto_link_numeric: Whether numeric auto-linking runs.
        """
        self.topic = topic
        self.external_repos = frozenset(external_repos or ())
        self.auto_link_numeric = auto_link_numeric
        self._records: list[FlowNode] = []
        self._errors: list[GraphError] = []

    def add_record(self, record: FlowNode) -> None:
        """Queue a node record (records of other topics are dropped)."""
        if record.topic == self.topic:
            self._records.append(record)

    def add_records(self, records: Iterable[FlowNode]) -> None:
        for record in records:
            self.add_record(record)

    def add_errors(self, errors: Iterable[GraphError]) -> None:
        """Queue parse errors (errors of other topics are dropped)."""
        self._errors.extend(e for e in errors if e.topic == self.topic)

    def build(self) -> TopicGraph:
        """Build the final TopicGraph.

        Returns:
            Complete TopicGraph with warnings and errors populated.
        """
        graph = TopicGraph(topic=self.topic)

        self._index_nodes(graph)
        explicit_children = self._resolve_edges(graph)

        graph.roots.sort(key=collation_key)
        for child_ids in graph.children_by_parent.values():
            child_ids.sort(key=collation_key)

        if self.auto_link_numeric:
            auto_link(
                graph.nodes_by_id,
                graph.children_by_parent,
                graph.roots,
                explicit_children=explicit_children,
            )

        graph.warnings.extend(detect_cycles(graph))
        graph.errors = list(self._errors)
        return graph

    def _index_nodes(self, graph: TopicGraph) -> None:
        """Populate nodes_by_id, first record wins on duplicate ids."""
        for record in self._records:
            if record.id in graph.nodes_by_id:
                graph.warnings.append(
                    GraphWarning(
                        kind=WarningKind.DUPLICATE_ID,
                        node_id=record.id,
                        message=f'Duplicate ID "{record.id}" found. Keeping first occurrence.',
                        source=record.source,
                    )
                )
                continue
            graph.nodes_by_id[record.id] = record

    def _resolve_edges(self, graph: TopicGraph) -> set[str]:
        """Resolve dependency and children declarations into edges.

        Returns:
            Ids of local nodes reached through an explicit children tag.
        """
        nodes = graph.nodes_by_id
        children = graph.children_by_parent

        # Dependency edges first, so children tags can be deduplicated
        # against every edge a dependency already implies.
        for node_id, node in nodes.items():
            if not node.dependency:
                graph.roots.append(node_id)
                continue
            if node.dependency in nodes:
                children.setdefault(node.dependency, []).append(node_id)
                continue

            ref = parse_reference(node.dependency)
            if not (isinstance(ref, CrossRepoRef) and ref.is_known(self.external_repos)):
                graph.warnings.append(
                    GraphWarning(
                        kind=WarningKind.MISSING_DEPENDENCY,
                        node_id=node_id,
                        message=f'Dependency "{node.dependency}" not found. Node treated as root.',
                        source=node.source,
                    )
                )
            # Unresolved and external dependencies still make an entry point
            graph.roots.append(node_id)

        explicit: set[str] = set()
        for node_id, node in nodes.items():
            if not node.children:
                continue
            existing = children.get(node_id, [])
            seen = set(existing)

            for child_ref in node.children:
                if child_ref in seen:
                    continue
                if child_ref in nodes:
                    existing.append(child_ref)
                    seen.add(child_ref)
                    explicit.add(child_ref)
                    continue

                ref = parse_reference(child_ref)
                if isinstance(ref, CrossRepoRef):
                    if not ref.is_known(self.external_repos):
                        graph.warnings.append(
                            GraphWarning(
                                kind=WarningKind.MISSING_DEPENDENCY,
                                node_id=node_id,
                                message=(
                                    f'Child reference "{child_ref}" points to unknown '
                                    f'repository "{ref.repo}". Add it to .flowdoc.toml '
                                    f'under [repos].'
                                ),
                                source=node.source,
                            )
                        )
                    # Cross-repo children are kept regardless, for navigation
                    existing.append(child_ref)
                    seen.add(child_ref)
                elif isinstance(ref, MalformedRef):
                    graph.warnings.append(
                        GraphWarning(
                            kind=WarningKind.MISSING_DEPENDENCY,
                            node_id=node_id,
                            message=f'Child reference "{child_ref}" is not a valid repo@id reference.',
                            source=node.source,
                        )
                    )
                else:
                    graph.warnings.append(
                        GraphWarning(
                            kind=WarningKind.MISSING_DEPENDENCY,
                            node_id=node_id,
                            message=f'Child reference "{child_ref}" not found in topic.',
                            source=node.source,
                        )
                    )

            if existing:
                children[node_id] = existing

        return explicit


def detect_cycles(graph: TopicGraph) -> list[GraphWarning]:
    """Find cycles with an iterative depth-first search.

    Traversal starts at every root, then at any node not reached from a
    root (a pure dependency loop has no root). An edge into a node still on
    the active path closes a cycle; each such node is reported once.
    Edges are never removed.

    Args:
        graph: Graph with edges resolved.

    Returns:
        One CYCLE_DETECTED warning per node that closes a cycle.
    """
    nodes = graph.nodes_by_id
    children = graph.children_by_parent
    visited: set[str] = set()
    on_path: set[str] = set()
    reported: set[str] = set()
    warnings: list[GraphWarning] = []

    start_ids = list(graph.roots) + sorted(nodes, key=collation_key)

    for start_id in start_ids:
        if start_id in visited:
            continue
        visited.add(start_id)
        on_path.add(start_id)
        # Stack of (node id, iterator over its children)
        stack: list[tuple[str, Iterator[str]]] = [(start_id, iter(children.get(start_id, [])))]

        while stack:
            node_id, child_iter = stack[-1]
            child_id = next(child_iter, None)
            if child_id is None:
                stack.pop()
                on_path.discard(node_id)
                continue
            if child_id in on_path:
                if child_id not in reported:
                    reported.add(child_id)
                    child = nodes.get(child_id)
                    warnings.append(
                        GraphWarning(
                            kind=WarningKind.CYCLE_DETECTED,
                            node_id=child_id,
                            message=f'Cycle detected involving node "{child_id}"',
                            source=child.source if child else None,
                        )
                    )
                continue
            if child_id in visited:
                continue
            visited.add(child_id)
            on_path.add(child_id)
            stack.append((child_id, iter(children.get(child_id, []))))

    return warnings


def build_graph(
    records: Iterable[FlowNode],
    topic: str,
    external_repos: Iterable[str] | None = None,
    parser_errors: Iterable[GraphError] | None = None,
) -> TopicGraph:
    """Build the graph of one topic.

    Args:
        records: Node records in any order, any topics.
        topic: Topic to build.
        external_repos: Names recognised as cross-repo targets.
        parser_errors: Parse errors; those of this topic are attached.

    Returns:
        The TopicGraph. Never raises for malformed input.
    """
    builder = GraphBuilder(topic, external_repos=external_repos)
    builder.add_records(records)
    if parser_errors:
        builder.add_errors(parser_errors)
    return builder.build()


__all__ = [
    "TopicGraph",
    "GraphBuilder",
    "build_graph",
    "detect_cycles",
    "get_children",
    "has_children",
]
