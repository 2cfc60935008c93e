"""
flowdoc.commands.topics - List documented topics.
"""

from __future__ import annotations

import argparse
import json
import sys

from flowdoc.commands.context import load_workspace
from flowdoc.graph.factory import scan_workspace


def run(args: argparse.Namespace) -> int:
    """Run the topics command."""
    workspace = load_workspace(args)
    if workspace is None:
        return 1

    scan = scan_workspace(workspace.config, workspace.repo_root)
    counts = scan.topic_counts()

    if getattr(args, "json", False):
        print(json.dumps([{"topic": t, "nodes": n} for t, n in counts.items()], indent=2))
        return 0

    if not counts:
        if not args.quiet:
            print(f"No @flowdoc topics found ({scan.files_scanned} files scanned).", file=sys.stderr)
        return 0

    width = max(len(t) for t in counts)
    for topic, count in counts.items():
        noun = "node" if count == 1 else "nodes"
        print(f"{topic.ljust(width)}  {count} {noun}")

    if args.verbose:
        print(f"\n{scan.files_scanned} files scanned", file=sys.stderr)
    return 0
