"""FlowNode - Node records extracted from @flowdoc-* comment blocks.

This module provides the core data structures of a flow:
- LinkKind: Enum of link target types
- Link: A typed reference attached to a node (symbol, file, url)
- SourceLocation: Portable file location reference
- FlowNode: One step of a documented flow
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class LinkKind(Enum):
    """Types of link targets a node can carry."""

    SYMBOL = "symbol"
    FILE = "file"
    URL = "url"


@dataclass(frozen=True)
class Link:
    """A typed reference embedded in a node.

    Attributes:
        target: Normalized target string (always prefixed, e.g. "url:...").
        kind: The type of target.
        symbol: Symbol name for SYMBOL links.
        file_path: Path for FILE links.
        line: 1-based line for FILE links, if given.
        url: Address for URL links.
    """

    target: str
    kind: LinkKind
    symbol: str | None = None
    file_path: str | None = None
    line: int | None = None
    url: str | None = None


@dataclass(frozen=True)
class SourceLocation:
    """Portable reference to a location in a file.

    Used for diagnostics only; graph construction never reads files.
    """

    path: str
    line: int  # 1-based line number

    def __str__(self) -> str:
        return f"{self.path}:{self.line}"


@dataclass(frozen=True)
class FlowNode:
    """One step of a documented flow.

    FlowNode records are immutable. Graph construction never changes a
    caller's record; when a missing dependency is inferred the graph keeps
    a copy made with ``with_inferred_dependency()``.

    Attributes:
        topic: Name of the flow this step belongs to.
        id: Identifier, unique within the topic.
        step: Human-readable description of the step.
        dependency: Single parent reference, possibly "repo@id".
        dependency_note: Bracketed note split off the dependency tag.
        children: Declared child references, or None when not declared.
        links: Typed references attached to the step.
        source: Where the comment block starts.
        inferred: True when ``dependency`` was filled in by auto-linking.
    """

    topic: str
    id: str
    step: str
    dependency: str | None = None
    dependency_note: str | None = None
    children: tuple[str, ...] | None = None
    links: tuple[Link, ...] = ()
    source: SourceLocation | None = None
    inferred: bool = False

    def __post_init__(self) -> None:
        # Accept lists from callers but store tuples so records stay hashable
        if self.children is not None and not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))
        if not isinstance(self.links, tuple):
            object.__setattr__(self, "links", tuple(self.links))

    @property
    def source_file(self) -> str | None:
        return self.source.path if self.source else None

    @property
    def source_line(self) -> int | None:
        return self.source.line if self.source else None

    @property
    def has_explicit_dependency(self) -> bool:
        """True if the author declared a dependency for this node."""
        return self.dependency is not None and not self.inferred

    def with_inferred_dependency(self, dependency: str) -> FlowNode:
        """Return a copy of this node with an auto-linked dependency."""
        return replace(self, dependency=dependency, inferred=True)
