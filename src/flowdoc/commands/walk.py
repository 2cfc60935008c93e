"""
flowdoc.commands.walk - Print the step sequence of a topic.
"""

from __future__ import annotations

import argparse
import sys

from flowdoc.commands.context import load_workspace
from flowdoc.graph.factory import build_topic_graph
from flowdoc.graph.navigation import FlowNavigator


def run(args: argparse.Namespace) -> int:
    """Run the walk command."""
    workspace = load_workspace(args)
    if workspace is None:
        return 1

    graph = build_topic_graph(args.topic, workspace.config, workspace.repo_root)
    if graph.node_count() == 0:
        print(f"Error: Unknown topic: {args.topic}", file=sys.stderr)
        return 1

    start = getattr(args, "start", None)
    if start is not None and graph.find_by_id(start) is None:
        print(f"Error: Node {start} not found in topic {args.topic}", file=sys.stderr)
        return 1

    navigator = FlowNavigator(graph)
    current = navigator.start(start)

    crumbs = navigator.breadcrumbs()
    width = len(str(len(crumbs)))
    for position, crumb in enumerate(crumbs, start=1):
        marker = ">" if crumb.is_current else " "
        print(f"{marker} {str(position).rjust(width)}. {crumb.id}  {crumb.step}")

    if args.verbose and current is not None:
        options = navigator.next_options()
        if options:
            print(f"\nNext from {current.id}:", file=sys.stderr)
            for option in options:
                print(f"  {option.id}  {option.step}", file=sys.stderr)
    return 0
