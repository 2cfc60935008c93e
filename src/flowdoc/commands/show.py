"""
flowdoc.commands.show - Print the graph of one topic.
"""

from __future__ import annotations

import argparse
import json
import sys

from flowdoc.commands.context import load_workspace
from flowdoc.graph.factory import build_topic_graph, scan_workspace
from flowdoc.graph.serialize import graph_to_markdown, graph_to_text, serialize_graph


def run(args: argparse.Namespace) -> int:
    """Run the show command."""
    workspace = load_workspace(args)
    if workspace is None:
        return 1

    scan = scan_workspace(workspace.config, workspace.repo_root)
    known = set(scan.topics()) | {e.topic for e in scan.errors if e.topic}
    if args.topic not in known:
        print(f"Error: Unknown topic: {args.topic}", file=sys.stderr)
        return 1

    graph = build_topic_graph(args.topic, workspace.config, workspace.repo_root, scan=scan)

    output_format = getattr(args, "format", "text")
    if output_format == "json":
        print(json.dumps(serialize_graph(graph), indent=2))
    elif output_format == "markdown":
        print(graph_to_markdown(graph), end="")
    else:
        print(graph_to_text(graph), end="")
        if graph.has_problems() and not args.quiet:
            print(
                f"\n{len(graph.warnings)} warnings, {len(graph.errors)} parse errors "
                f"(run 'flowdoc validate {args.topic}' for details)",
                file=sys.stderr,
            )
    return 0
