"""
flowdoc.associates - External repository configuration.

Repositories that child references may point into ("repo@id") are
declared in ``.flowdoc.toml``::

    [repos.billing]
    path = "../billing-service"

Graph construction only needs the names; navigation and the
cross-repository index also need the paths.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class ExternalRepo:
    """
    A repository that cross-repository references may target.

    Attributes:
        name: Name used in "repo@id" references.
        path: Repository root, absolute once resolved.
    """

    name: str
    path: Path


def _repo_entries(config: dict[str, Any]) -> list[tuple[str, str]]:
    """(name, raw path) for every well-formed [repos.<name>] entry."""
    repos = config.get("repos") or {}
    if not isinstance(repos, dict):
        return []
    entries = []
    for name, entry in repos.items():
        if not isinstance(entry, dict):
            continue
        path = entry.get("path")
        if isinstance(path, str) and path.strip():
            entries.append((name, path.strip()))
    return entries


def get_external_repos(config: dict[str, Any], repo_root: Path | None = None) -> list[ExternalRepo]:
    """
    Get the configured external repositories.

    Args:
        config: Configuration dict.
        repo_root: Base for relative paths (defaults to cwd).

    Returns:
        ExternalRepo entries in config order; entries without a string
        ``path`` are ignored.
    """
    base = repo_root or Path.cwd()
    repos = []
    for name, raw_path in _repo_entries(config):
        path = Path(raw_path).expanduser()
        if not path.is_absolute():
            path = base / path
        repos.append(ExternalRepo(name=name, path=path.resolve()))
    return repos


def get_external_repo_names(config: dict[str, Any]) -> set[str]:
    """Names of the configured external repositories."""
    return {name for name, _ in _repo_entries(config)}


def find_external_repo(
    config: dict[str, Any], name: str, repo_root: Path | None = None
) -> ExternalRepo | None:
    for repo in get_external_repos(config, repo_root):
        if repo.name == name:
            return repo
    return None


__all__ = [
    "ExternalRepo",
    "get_external_repos",
    "get_external_repo_names",
    "find_external_repo",
]
