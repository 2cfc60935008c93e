"""Navigation - Step-by-step walking of a topic graph.

This is the state behind a "prev / next" flow viewer: which node is
current, where "prev" goes, which "next" options exist and which branch
the user picked last time at a fork. Rendering is left to the caller.

Graphs may contain cycles (reported as warnings, never removed), so every
traversal here keeps a visited set.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from flowdoc.graph.builder import TopicGraph, get_children
from flowdoc.graph.FlowNode import FlowNode
from flowdoc.graph.references import CrossRepoRef, parse_reference


@dataclass(frozen=True)
class NextOption:
    """A candidate for the "next" step.

    Attributes:
        id: Child reference (local id or "repo@id").
        step: Display text; cross-repo children show as "[repo] id".
        is_external: True for cross-repo children.
    """

    id: str
    step: str
    is_external: bool = False


@dataclass(frozen=True)
class Breadcrumb:
    """One entry of the full step list of a topic."""

    id: str
    step: str
    is_current: bool = False


@dataclass(frozen=True)
class CrossRepoTarget:
    """Navigation request that leaves this repository.

    Attributes:
        topic: Topic of the current graph; cross-repo hops keep the topic.
        repo: Name of the external repository.
        node_id: Node id in that repository.
    """

    topic: str
    repo: str
    node_id: str


def next_options(graph: TopicGraph, node_id: str) -> list[NextOption]:
    """List the children of a node as display options."""
    options = []
    for child_id in get_children(graph, node_id):
        ref = parse_reference(child_id)
        if isinstance(ref, CrossRepoRef) and child_id not in graph.nodes_by_id:
            options.append(NextOption(id=child_id, step=f"[{ref.repo}] {ref.node_id}", is_external=True))
            continue
        child = graph.find_by_id(child_id)
        options.append(NextOption(id=child_id, step=child.step if child else ""))
    return options


def breadcrumbs(graph: TopicGraph, current_id: str | None = None) -> list[Breadcrumb]:
    """List every reachable step in depth-first order from the roots.

    Each node appears once even if several parents, or a cycle, lead to it.

    Args:
        graph: The topic graph.
        current_id: Node to flag as current.

    Returns:
        Breadcrumbs in traversal order.
    """
    result: list[Breadcrumb] = []
    visited: set[str] = set()

    for root_id in graph.roots:
        stack = [root_id]
        while stack:
            node_id = stack.pop()
            if node_id in visited:
                continue
            visited.add(node_id)
            node = graph.find_by_id(node_id)
            if node is None:
                continue
            result.append(Breadcrumb(id=node.id, step=node.step, is_current=node.id == current_id))
            # Reverse so the first child is visited first
            stack.extend(reversed(get_children(graph, node_id)))

    return result


@dataclass
class FlowNavigator:
    """Cursor over a TopicGraph.

    Usage:
        nav = FlowNavigator(graph)
        nav.start()
        while nav.go_next():
            print(nav.current.step)
    """

    graph: TopicGraph
    current_id: str | None = None
    branch_selections: dict[str, str] = field(default_factory=dict)

    @property
    def current(self) -> FlowNode | None:
        if self.current_id is None:
            return None
        return self.graph.find_by_id(self.current_id)

    def start(self, node_id: str | None = None) -> FlowNode | None:
        """Move to ``node_id`` if it exists, else to the first root."""
        self.branch_selections.clear()
        if node_id is not None and node_id in self.graph.nodes_by_id:
            self.current_id = node_id
        elif self.graph.roots:
            self.current_id = self.graph.roots[0]
        else:
            self.current_id = None
        return self.current

    def jump_to(self, node_id: str) -> bool:
        """Move to a node of this graph; unknown ids are ignored."""
        if node_id not in self.graph.nodes_by_id:
            return False
        self.current_id = node_id
        return True

    def prev_target(self) -> str | None:
        """Reference "prev" leads to: a local id or a cross-repo reference."""
        node = self.current
        if node is None or not node.dependency:
            return None
        if node.dependency in self.graph.nodes_by_id:
            return node.dependency
        if isinstance(parse_reference(node.dependency), CrossRepoRef):
            return node.dependency
        return None

    def next_options(self) -> list[NextOption]:
        if self.current_id is None:
            return []
        return next_options(self.graph, self.current_id)

    def go_prev(self) -> FlowNode | CrossRepoTarget | None:
        """Step back to the dependency.

        Returns:
            The new current node, a CrossRepoTarget when the dependency lives
            in another repository, or None if there is nowhere to go.
        """
        target = self.prev_target()
        if target is None:
            return None
        if target in self.graph.nodes_by_id:
            self.current_id = target
            return self.current
        return self._cross_repo_target(target)

    def go_next(self) -> FlowNode | CrossRepoTarget | None:
        """Step forward.

        With one child, follow it. With several, follow the branch chosen
        last time at this node, if any; otherwise stay (the caller should
        offer next_options()).
        """
        if self.current_id is None:
            return None
        children = get_children(self.graph, self.current_id)
        if len(children) == 1:
            return self._follow(children[0])
        saved = self.branch_selections.get(self.current_id)
        if saved is not None and saved in children:
            return self._follow(saved)
        return None

    def select_branch(self, child_id: str) -> FlowNode | CrossRepoTarget | None:
        """Pick one of several children and remember the choice."""
        if isinstance(parse_reference(child_id), CrossRepoRef) and child_id not in self.graph.nodes_by_id:
            return self._cross_repo_target(child_id)
        if self.current_id is not None:
            self.branch_selections[self.current_id] = child_id
        return self._follow(child_id)

    def breadcrumbs(self) -> list[Breadcrumb]:
        return breadcrumbs(self.graph, self.current_id)

    def _follow(self, child_id: str) -> FlowNode | CrossRepoTarget | None:
        if child_id in self.graph.nodes_by_id:
            self.current_id = child_id
            return self.current
        return self._cross_repo_target(child_id)

    def _cross_repo_target(self, reference: str) -> CrossRepoTarget | None:
        ref = parse_reference(reference)
        if not isinstance(ref, CrossRepoRef):
            return None
        return CrossRepoTarget(topic=self.graph.topic, repo=ref.repo, node_id=ref.node_id)


__all__ = [
    "NextOption",
    "Breadcrumb",
    "CrossRepoTarget",
    "FlowNavigator",
    "next_options",
    "breadcrumbs",
]
