"""
flowdoc.commands.index - Cross-repository index management.

- `flowdoc index write` - Write or refresh this repository's index
- `flowdoc index show` - Print this repository's index
- `flowdoc index delete` - Remove this repository's index
- `flowdoc index locate REF --topic T` - Resolve a repo@id reference
"""

from __future__ import annotations

import argparse
import json
import sys

from flowdoc.commands.context import Workspace, load_workspace
from flowdoc.config import get_index_dir
from flowdoc.graph.factory import scan_workspace
from flowdoc.repo_index import (
    delete_repo_index,
    index_path,
    read_repo_index,
    resolve_cross_repo_target,
    write_repo_index,
)


def run(args: argparse.Namespace) -> int:
    """Run the index command."""
    workspace = load_workspace(args)
    if workspace is None:
        return 1

    action = getattr(args, "index_action", None)

    if action == "write":
        return _write(workspace, args)
    elif action == "show":
        return _show(workspace)
    elif action == "delete":
        return _delete(workspace, args)
    elif action == "locate":
        return _locate(workspace, args)
    else:
        print("Usage: flowdoc index <write|show|delete|locate>", file=sys.stderr)
        return 1


def _write(workspace: Workspace, args: argparse.Namespace) -> int:
    scan = scan_workspace(workspace.config, workspace.repo_root)
    target = write_repo_index(get_index_dir(workspace.config), workspace.repo_root, scan.nodes)
    if not args.quiet:
        print(f"Indexed {len(scan.nodes)} nodes in {len(scan.topics())} topics: {target}")
    return 0


def _show(workspace: Workspace) -> int:
    index_dir = get_index_dir(workspace.config)
    index = read_repo_index(index_dir, workspace.repo_root)
    if index is None:
        print(
            f"No index at {index_path(index_dir, workspace.repo_root)} "
            "(run 'flowdoc index write')",
            file=sys.stderr,
        )
        return 1
    print(json.dumps(index, indent=2))
    return 0


def _delete(workspace: Workspace, args: argparse.Namespace) -> int:
    removed = delete_repo_index(get_index_dir(workspace.config), workspace.repo_root)
    if not args.quiet:
        print("Index deleted." if removed else "No index to delete.")
    return 0


def _locate(workspace: Workspace, args: argparse.Namespace) -> int:
    resolution = resolve_cross_repo_target(
        args.reference,
        args.topic,
        workspace.config,
        get_index_dir(workspace.config),
        repo_root=workspace.repo_root,
    )
    if not resolution.found:
        print(f"Error: {resolution.reason}", file=sys.stderr)
        return 1
    print(f"{resolution.path}:{resolution.line}")
    return 0
