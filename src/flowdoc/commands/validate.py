"""
flowdoc.commands.validate - Report graph warnings and parse errors.

Exit status:
- 0 when no topic has warnings or parse errors
- 1 otherwise (with --warnings-ok, only parse errors count)
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from flowdoc.commands.context import load_workspace
from flowdoc.graph.builder import TopicGraph
from flowdoc.graph.collation import collate
from flowdoc.graph.diagnostics import DiagnosticSummary, GraphError, GraphWarning
from flowdoc.graph.factory import ScanResult, build_topic_graph, scan_workspace
from flowdoc.graph.serialize import serialize_error, serialize_warning


def run(args: argparse.Namespace) -> int:
    """Run the validate command."""
    workspace = load_workspace(args)
    if workspace is None:
        return 1

    scan = scan_workspace(workspace.config, workspace.repo_root)
    topics = _select_topics(scan, getattr(args, "topics", None) or [])
    graphs = [
        build_topic_graph(topic, workspace.config, workspace.repo_root, scan=scan)
        for topic in topics
    ]
    # Blocks without a topic belong to no graph but are still broken
    unscoped = scan.unscoped_errors() if not getattr(args, "topics", None) else []

    warnings: list[GraphWarning] = [w for g in graphs for w in g.warnings]
    errors: list[GraphError] = [e for g in graphs for e in g.errors] + unscoped
    summary = DiagnosticSummary.from_lists(warnings, errors)

    if getattr(args, "json", False):
        print(json.dumps(_to_json(graphs, unscoped, scan, summary), indent=2))
    else:
        _print_report(graphs, unscoped, scan, args)

    if errors:
        return 1
    if warnings and not getattr(args, "warnings_ok", False):
        return 1
    return 0


def _select_topics(scan: ScanResult, requested: list[str]) -> list[str]:
    """Requested topics, or every topic seen in records or parse errors."""
    if requested:
        return list(dict.fromkeys(requested))
    seen = set(scan.topics()) | {e.topic for e in scan.errors if e.topic}
    return collate(seen)


def _print_report(
    graphs: list[TopicGraph],
    unscoped: list[GraphError],
    scan: ScanResult,
    args: argparse.Namespace,
) -> None:
    for graph in graphs:
        if not graph.has_problems():
            if args.verbose:
                print(f"✓ {graph.topic} ({graph.node_count()} nodes)")
            continue
        print(f"{graph.topic}:")
        for error in graph.errors:
            print(f"  ❌ {error}")
        for warning in graph.warnings:
            print(f"  ⚠️  {warning}")

    if unscoped:
        print("(no topic):")
        for error in unscoped:
            print(f"  ❌ {error}")

    if scan.read_errors and not args.quiet:
        for read_error in scan.read_errors:
            print(f"Skipped {read_error}", file=sys.stderr)

    if args.quiet:
        return

    warning_count = sum(len(g.warnings) for g in graphs)
    error_count = sum(len(g.errors) for g in graphs) + len(unscoped)
    print("─" * 60)
    print(f"{len(graphs)} topics checked, {scan.files_scanned} files scanned")
    if error_count:
        print(f"❌ {error_count} parse errors")
    if warning_count:
        print(f"⚠️  {warning_count} warnings")
    if not error_count and not warning_count:
        print("✓ All flows valid")


def _to_json(
    graphs: list[TopicGraph],
    unscoped: list[GraphError],
    scan: ScanResult,
    summary: DiagnosticSummary,
) -> dict[str, Any]:
    return {
        "topics": {
            graph.topic: {
                "nodes": graph.node_count(),
                "warnings": [serialize_warning(w) for w in graph.warnings],
                "errors": [serialize_error(e) for e in graph.errors],
            }
            for graph in graphs
        },
        "unscopedErrors": [serialize_error(e) for e in unscoped],
        "readErrors": [{"path": r.path, "reason": r.reason} for r in scan.read_errors],
        "summary": {"warnings": summary.warnings, "errors": summary.errors, "total": summary.total},
    }
