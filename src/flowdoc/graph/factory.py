"""Graph Factory - Shared entry point for building topic graphs.

Commands use this module instead of scanning files themselves:
- scan_workspace() collects node records and parse errors from the
  configured directories of a repository
- build_topic_graph() builds the graph of one topic from a scan
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from flowdoc.associates import get_external_repo_names
from flowdoc.config import get_config
from flowdoc.graph.builder import TopicGraph, build_graph
from flowdoc.graph.collation import collate
from flowdoc.graph.deserializer import (
    DomainFile,
    DomainStdio,
    SourceReadError,
    read_gitignore_globs,
)
from flowdoc.graph.diagnostics import GraphError
from flowdoc.graph.FlowNode import FlowNode, SourceLocation
from flowdoc.graph.parsers import ContentKind, ParsedContent, ParserRegistry
from flowdoc.graph.parsers.comment import create_comment_parsers


@dataclass
class ScanResult:
    """Node records and problems collected from a set of source files.

    Attributes:
        nodes: Node records in file order, then line order.
        errors: Parse errors for incomplete comment blocks.
        read_errors: Files that matched but could not be read.
        files_scanned: Number of files read.
    """

    nodes: list[FlowNode] = field(default_factory=list)
    errors: list[GraphError] = field(default_factory=list)
    read_errors: list[SourceReadError] = field(default_factory=list)
    files_scanned: int = 0

    def topics(self) -> list[str]:
        """Distinct topics, in collation order."""
        return collate({node.topic for node in self.nodes})

    def nodes_for_topic(self, topic: str) -> list[FlowNode]:
        return [node for node in self.nodes if node.topic == topic]

    def topic_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for node in self.nodes:
            counts[node.topic] = counts.get(node.topic, 0) + 1
        return {topic: counts[topic] for topic in collate(counts)}

    def unscoped_errors(self) -> list[GraphError]:
        """Parse errors without a topic; no topic graph will carry them."""
        return [e for e in self.errors if not e.topic]


def create_registry() -> ParserRegistry:
    """Registry with the @flowdoc-* comment parsers."""
    return ParserRegistry(create_comment_parsers())


def _source_of(content: ParsedContent) -> SourceLocation:
    source_ctx = getattr(content, "source_context", None)
    source_path = source_ctx.source_id if source_ctx else ""
    return SourceLocation(path=source_path, line=content.start_line)


def add_parsed_content(result: ScanResult, content: ParsedContent) -> None:
    """Convert one parsed region into a record or an error on the result."""
    data = content.parsed_data
    if content.content_type == ContentKind.FLOW_NODE:
        result.nodes.append(
            FlowNode(
                topic=data["topic"],
                id=data["id"],
                step=data["step"],
                dependency=data.get("dependency"),
                dependency_note=data.get("dependency_note"),
                children=data.get("children"),
                links=tuple(data.get("links", [])),
                source=_source_of(content),
            )
        )
    elif content.content_type == ContentKind.PARSE_ERROR:
        result.errors.append(
            GraphError(
                kind=data["kind"],
                message=data["message"],
                source=_source_of(content),
                topic=data.get("topic"),
                node_id=data.get("id"),
                step=data.get("step"),
            )
        )


def scan_text(text: str, source_id: str = "<stdin>") -> ScanResult:
    """Scan a single in-memory text."""
    result = ScanResult(files_scanned=1)
    for content in DomainStdio(text, source_id).deserialize(create_registry()):
        add_parsed_content(result, content)
    return result


def scan_workspace(
    config: dict[str, Any] | None = None,
    repo_root: Path | None = None,
    config_path: Path | None = None,
) -> ScanResult:
    """Scan the configured directories of a repository.

    Args:
        config: Pre-loaded config dict (optional).
        repo_root: Repository root for relative paths (defaults to cwd).
        config_path: Path to config file (optional).

    Returns:
        ScanResult with records from every matching file.
    """
    repo_root = (repo_root or Path.cwd()).resolve()
    if config is None:
        config = get_config(config_path, repo_root)

    scan_config = config.get("scan", {})
    skip_globs = read_gitignore_globs(repo_root) if scan_config.get("use_gitignore", True) else []
    registry = create_registry()
    result = ScanResult()
    seen_files: set[Path] = set()

    for scan_path in scan_config.get("paths", ["."]):
        domain_file = DomainFile(
            repo_root / scan_path,
            patterns=scan_config.get("patterns"),
            recursive=True,
            skip_dirs=scan_config.get("skip_dirs", []),
            skip_files=scan_config.get("skip_files", []),
            skip_globs=skip_globs,
            relative_to=repo_root,
        )
        # Overlapping scan paths must not produce duplicate records
        domain_file.seen = seen_files
        for parsed in domain_file.deserialize(registry):
            add_parsed_content(result, parsed)
        result.files_scanned += domain_file.files_read
        result.read_errors.extend(domain_file.read_errors)

    return result


def build_topic_graph(
    topic: str,
    config: dict[str, Any] | None = None,
    repo_root: Path | None = None,
    scan: ScanResult | None = None,
) -> TopicGraph:
    """Build the graph of one topic.

    Args:
        topic: Topic to build.
        config: Pre-loaded config dict (optional).
        repo_root: Repository root (defaults to cwd).
        scan: Reuse an existing scan instead of reading files again.

    Returns:
        The TopicGraph, with configured repos as cross-repo targets.
    """
    if repo_root is None:
        repo_root = Path.cwd()
    if config is None:
        config = get_config(None, repo_root)
    if scan is None:
        scan = scan_workspace(config, repo_root)
    return build_graph(
        scan.nodes,
        topic,
        external_repos=get_external_repo_names(config),
        parser_errors=scan.errors,
    )


__all__ = [
    "ScanResult",
    "create_registry",
    "add_parsed_content",
    "scan_text",
    "scan_workspace",
    "build_topic_graph",
]
