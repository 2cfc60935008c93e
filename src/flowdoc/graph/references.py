"""References - Parsing of dependency and child reference strings.

A reference is either a plain local node id or a cross-repository
reference written as ``<repo>@<node-id>``. Parsing happens once, into a
small tagged union, instead of ad hoc separator searches at call sites:

- LocalRef: a node id in the same topic graph
- CrossRepoRef: a node owned by another repository's graph
- MalformedRef: an ``@`` at the very start or end (no repo or no id)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

CROSS_REPO_SEPARATOR = "@"


@dataclass(frozen=True)
class LocalRef:
    """Reference to a node in the same topic."""

    node_id: str

    def __str__(self) -> str:
        return self.node_id


@dataclass(frozen=True)
class CrossRepoRef:
    """Reference to a node hosted by another repository.

    The remote id is opaque here; it is only handed to the other graph.
    """

    repo: str
    node_id: str

    def __str__(self) -> str:
        return f"{self.repo}{CROSS_REPO_SEPARATOR}{self.node_id}"

    def is_known(self, repo_names: set[str] | frozenset[str] | None) -> bool:
        """Check whether the repository name is configured."""
        return bool(repo_names) and self.repo in repo_names


@dataclass(frozen=True)
class MalformedRef:
    """Reference with a dangling separator, e.g. ``@NODE`` or ``repo@``."""

    raw: str

    def __str__(self) -> str:
        return self.raw


Reference = Union[LocalRef, CrossRepoRef, MalformedRef]


def parse_reference(raw: str) -> Reference:
    """Classify a reference string.

    The first ``@`` splits repository name from remote id. It must sit
    strictly inside the string: both sides non-empty.

    Args:
        raw: Reference text as written in a dependency or children tag.

    Returns:
        LocalRef, CrossRepoRef or MalformedRef.
    """
    at_index = raw.find(CROSS_REPO_SEPARATOR)
    if at_index == -1:
        return LocalRef(raw)
    if 0 < at_index < len(raw) - 1:
        return CrossRepoRef(repo=raw[:at_index], node_id=raw[at_index + 1 :])
    return MalformedRef(raw)


def is_cross_repo(raw: str) -> bool:
    """Check if a reference string is a well-formed cross-repo reference."""
    return isinstance(parse_reference(raw), CrossRepoRef)


__all__ = [
    "CROSS_REPO_SEPARATOR",
    "LocalRef",
    "CrossRepoRef",
    "MalformedRef",
    "Reference",
    "parse_reference",
    "is_cross_repo",
]
