"""Diagnostics - Warning and error records attached to topic graphs.

Graph construction never raises. Every structural anomaly becomes a
GraphWarning; every incomplete comment block found by the parser becomes
a GraphError that is passed through to the graph of its topic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from flowdoc.graph.FlowNode import SourceLocation


class WarningKind(Enum):
    """Structural problems detected while building a graph."""

    DUPLICATE_ID = "duplicate-id"
    MISSING_DEPENDENCY = "missing-dependency"
    CYCLE_DETECTED = "cycle-detected"


class ErrorKind(Enum):
    """Parse problems: a comment block lacks a required tag."""

    MISSING_TOPIC = "missing-topic"
    MISSING_ID = "missing-id"
    MISSING_STEP = "missing-step"


@dataclass(frozen=True)
class GraphWarning:
    """A recoverable structural problem found during graph build.

    Attributes:
        kind: What went wrong.
        node_id: The node the warning is about.
        message: Human-readable explanation.
        source: Location of the offending comment block, if known.
    """

    kind: WarningKind
    node_id: str
    message: str
    source: SourceLocation | None = None

    @property
    def source_file(self) -> str | None:
        return self.source.path if self.source else None

    @property
    def source_line(self) -> int | None:
        return self.source.line if self.source else None

    def __str__(self) -> str:
        where = f" ({self.source})" if self.source else ""
        return f"[{self.kind.value}] {self.node_id}: {self.message}{where}"


@dataclass(frozen=True)
class GraphError:
    """A comment block the parser could not turn into a node.

    Attributes:
        kind: Which required tag is missing.
        message: Human-readable explanation.
        source: Where the block starts.
        topic: Topic seen in the block, if any.
        node_id: Id seen in the block, if any.
        step: Step text seen in the block, if any.
    """

    kind: ErrorKind
    message: str
    source: SourceLocation
    topic: str | None = None
    node_id: str | None = None
    step: str | None = None

    @property
    def partial_data(self) -> dict[str, str | None]:
        return {"topic": self.topic, "id": self.node_id, "step": self.step}

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message} ({self.source})"


@dataclass
class DiagnosticSummary:
    """Counts of warnings and errors, by kind, for reporting."""

    warnings: dict[str, int] = field(default_factory=dict)
    errors: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_lists(
        cls, warnings: list[GraphWarning], errors: list[GraphError]
    ) -> DiagnosticSummary:
        summary = cls()
        for warning in warnings:
            key = warning.kind.value
            summary.warnings[key] = summary.warnings.get(key, 0) + 1
        for error in errors:
            key = error.kind.value
            summary.errors[key] = summary.errors.get(key, 0) + 1
        return summary

    @property
    def total(self) -> int:
        return sum(self.warnings.values()) + sum(self.errors.values())
