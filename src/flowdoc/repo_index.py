"""
flowdoc.repo_index - Shared index files for cross-repository navigation.

Each repository writes a JSON index of where its nodes live::

    {"user-registration": {"REG-001": {"sourceFile": "src/a.ts", "sourceLine": 12}}}

The files sit together in one directory (``[index] dir``), one file per
repository, named after the encoded absolute repository path. Another
repository resolves a "repo@id" reference by reading that file.
"""
from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import quote

from flowdoc.associates import find_external_repo
from flowdoc.exceptions import RepoIndexError
from flowdoc.graph.FlowNode import FlowNode
from flowdoc.graph.references import CrossRepoRef, LocalRef, parse_reference

# Characters encodeURIComponent leaves alone besides letters, digits and "_.-~"
_UNRESERVED_EXTRA = "!*'()"

RepoIndex = dict[str, dict[str, dict[str, Any]]]


@dataclass(frozen=True)
class NodeLocation:
    """Where a node of another repository is defined."""

    source_file: str
    source_line: int

    def resolve(self, repo_path: Path) -> Path:
        path = Path(self.source_file)
        return path if path.is_absolute() else repo_path / path


@dataclass(frozen=True)
class CrossRepoResolution:
    """Outcome of resolving a cross-repository reference.

    Attributes:
        reference: The reference as written.
        path: Absolute file of the node when found.
        line: Line of the node when found.
        reason: Why it could not be resolved, otherwise None.
    """

    reference: str
    path: Path | None = None
    line: int | None = None
    reason: str | None = None

    @property
    def found(self) -> bool:
        return self.reason is None


def encode_repo_path(repo_path: str | Path) -> str:
    """Encode a repository path for use in a file name."""
    return quote(str(repo_path), safe=_UNRESERVED_EXTRA).replace("%", "_")


def index_path(index_dir: Path, repo_path: str | Path) -> Path:
    """Path of the index file for a repository."""
    return Path(index_dir) / f"index-{encode_repo_path(repo_path)}.json"


def build_repo_index(nodes: Iterable[FlowNode]) -> RepoIndex:
    """Map topic -> node id -> location. Later records overwrite earlier ones."""
    index: RepoIndex = {}
    for node in nodes:
        index.setdefault(node.topic, {})[node.id] = {
            "sourceFile": node.source_file,
            "sourceLine": node.source_line,
        }
    return index


def write_repo_index(index_dir: Path, repo_path: str | Path, nodes: Iterable[FlowNode]) -> Path:
    """Write the index of a repository, creating index_dir as needed.

    Returns:
        Path of the written file.

    Raises:
        RepoIndexError: If the directory or file cannot be written.
    """
    target = index_path(index_dir, repo_path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(build_repo_index(nodes), indent=2), encoding="utf-8")
    except OSError as e:
        raise RepoIndexError(f"Failed to write cross-repo index {target}: {e}") from e
    return target


def read_repo_index(index_dir: Path, repo_path: str | Path) -> RepoIndex | None:
    """Read the index of a repository; None when absent or unreadable."""
    try:
        content = index_path(index_dir, repo_path).read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def get_cross_repo_node_location(
    index_dir: Path, repo_path: str | Path, topic: str, node_id: str
) -> NodeLocation | None:
    index = read_repo_index(index_dir, repo_path)
    if not index:
        return None
    entry = (index.get(topic) or {}).get(node_id)
    if not isinstance(entry, dict) or "sourceFile" not in entry:
        return None
    return NodeLocation(source_file=entry["sourceFile"], source_line=int(entry.get("sourceLine", 1)))


def delete_repo_index(index_dir: Path, repo_path: str | Path) -> bool:
    """Delete the index of a repository.

    Returns:
        True if a file was removed, False if there was none.
    """
    try:
        index_path(index_dir, repo_path).unlink()
    except FileNotFoundError:
        return False
    return True


def resolve_cross_repo_target(
    reference: str,
    topic: str,
    config: dict[str, Any],
    index_dir: Path,
    repo_root: Path | None = None,
) -> CrossRepoResolution:
    """Resolve "repo@id" to a file location through the target repo's index.

    Args:
        reference: The cross-repository reference.
        topic: Topic to look the node up in (hops keep the topic).
        config: Configuration with the [repos] table.
        index_dir: Directory holding index files.
        repo_root: Base for relative repo paths.

    Returns:
        CrossRepoResolution with a location, or the reason it failed.
    """
    ref = parse_reference(reference)
    if isinstance(ref, LocalRef):
        return CrossRepoResolution(reference, reason=f'"{reference}" is not a cross-repo reference')
    if not isinstance(ref, CrossRepoRef):
        return CrossRepoResolution(reference, reason=f'"{reference}" is not a valid repo@id reference')

    repo = find_external_repo(config, ref.repo, repo_root)
    if repo is None:
        return CrossRepoResolution(reference, reason=f'Unknown repository "{ref.repo}"')

    index = read_repo_index(index_dir, repo.path)
    if index is None:
        return CrossRepoResolution(
            reference, reason=f'No index for repository "{ref.repo}" ({repo.path})'
        )

    location = get_cross_repo_node_location(index_dir, repo.path, topic, ref.node_id)
    if location is None:
        return CrossRepoResolution(
            reference,
            reason=f'Node "{ref.node_id}" not found in topic "{topic}" of repository "{ref.repo}"',
        )
    return CrossRepoResolution(
        reference, path=location.resolve(repo.path), line=location.source_line
    )


__all__ = [
    "NodeLocation",
    "CrossRepoResolution",
    "encode_repo_path",
    "index_path",
    "build_repo_index",
    "write_repo_index",
    "read_repo_index",
    "get_cross_repo_node_location",
    "delete_repo_index",
    "resolve_cross_repo_target",
]
