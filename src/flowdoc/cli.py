"""
flowdoc.cli - Command-line interface.

Main entry point for the flowdoc CLI tool.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from flowdoc import __version__
from flowdoc.commands import index, show, topics, validate, walk


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="flowdoc",
        description="Process-flow documentation from @flowdoc-* code comments",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  flowdoc topics                       # List documented flows
  flowdoc show user-registration       # Print a flow as a tree
  flowdoc show checkout --format json  # Machine-readable graph
  flowdoc validate                     # Report problems in every flow
  flowdoc walk checkout                # Step list of a flow
  flowdoc index write                  # Publish this repo for cross-repo hops

Configuration:
  Settings are read from .flowdoc.toml in the repository root (or any
  parent directory). FLOWDOC_<SECTION>_<KEY> environment variables
  override single values, e.g. FLOWDOC_SCAN_PATHS='["src"]'.

For detailed command help: flowdoc <command> --help
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"flowdoc {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "--root",
        type=Path,
        help="Repository root (default: directory of the config file, else cwd)",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # topics command
    topics_parser = subparsers.add_parser(
        "topics",
        help="List topics with their node counts",
    )
    topics_parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON",
    )

    # show command
    show_parser = subparsers.add_parser(
        "show",
        help="Print the graph of one topic",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Formats:
  text      Indented tree (default)
  markdown  Nested bullet list with warnings and parse errors
  json      Nodes, roots, children, warnings and errors
""",
    )
    show_parser.add_argument("topic", help="Topic name")
    show_parser.add_argument(
        "--format",
        choices=["text", "markdown", "json"],
        default="text",
        help="Output format (default: text)",
    )

    # validate command
    validate_parser = subparsers.add_parser(
        "validate",
        help="Report graph warnings and parse errors",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit status is 1 when any topic has a parse error or a warning
(duplicate-id, missing-dependency, cycle-detected).

Examples:
  flowdoc validate                    # All topics
  flowdoc validate checkout refunds   # Selected topics
  flowdoc validate --warnings-ok      # Fail on parse errors only
""",
    )
    validate_parser.add_argument(
        "topics",
        nargs="*",
        metavar="TOPIC",
        help="Topics to validate (default: all)",
    )
    validate_parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output JSON",
    )
    validate_parser.add_argument(
        "--warnings-ok",
        action="store_true",
        help="Only fail on parse errors",
    )

    # walk command
    walk_parser = subparsers.add_parser(
        "walk",
        help="Print the step sequence of a topic",
    )
    walk_parser.add_argument("topic", help="Topic name")
    walk_parser.add_argument(
        "--start",
        metavar="ID",
        help="Node to mark as current (default: first root)",
    )

    # index command
    index_parser = subparsers.add_parser(
        "index",
        help="Manage this repository's cross-repo index file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Index files let other repositories resolve "repo@id" references into
this one. They are stored in [index] dir (default ~/.cache/flowdoc).

Examples:
  flowdoc index write                          # Write or refresh the index
  flowdoc index show                           # Print this repo's index
  flowdoc index locate billing@PAY-1 --topic checkout
""",
    )
    index_subparsers = index_parser.add_subparsers(dest="index_action")
    index_subparsers.add_parser("write", help="Write this repository's index")
    index_subparsers.add_parser("show", help="Print this repository's index")
    index_subparsers.add_parser("delete", help="Delete this repository's index")
    locate_parser = index_subparsers.add_parser(
        "locate", help="Resolve a repo@id reference through its index"
    )
    locate_parser.add_argument("reference", help="Cross-repo reference (repo@id)")
    locate_parser.add_argument("--topic", required=True, help="Topic of the reference")

    # completion command - shell tab-completion setup
    completion_parser = subparsers.add_parser(
        "completion",
        help="Generate shell tab-completion scripts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Shell Completion Setup:

  First, install the completion extra:
    pip install flowdoc[completion]

  Bash (add to ~/.bashrc):
    eval "$(register-python-argcomplete flowdoc)"

  Zsh (add to ~/.zshrc):
    autoload -U bashcompinit
    bashcompinit
    eval "$(register-python-argcomplete flowdoc)"

  Fish (add to ~/.config/fish/config.fish):
    register-python-argcomplete --shell fish flowdoc | source
""",
    )
    completion_parser.add_argument(
        "--shell",
        choices=["bash", "zsh", "fish", "tcsh"],
        help="Generate script for specific shell",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()

    # Enable shell tab-completion if argcomplete is installed
    # Install with: pip install flowdoc[completion]
    try:
        import argcomplete

        argcomplete.autocomplete(parser)
    except ImportError:
        pass

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        if args.command == "topics":
            return topics.run(args)
        elif args.command == "show":
            return show.run(args)
        elif args.command == "validate":
            return validate.run(args)
        elif args.command == "walk":
            return walk.run(args)
        elif args.command == "index":
            return index.run(args)
        elif args.command == "completion":
            return completion_command(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except Exception as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


def completion_command(args: argparse.Namespace) -> int:
    """Handle completion command - print setup or a shell script."""
    try:
        import argcomplete  # noqa: F401
    except ImportError:
        print("Error: argcomplete not installed.", file=sys.stderr)
        print("Install with: pip install flowdoc[completion]", file=sys.stderr)
        return 1

    if not args.shell:
        print("""
Shell Completion Setup for flowdoc
==================================

Bash (add to ~/.bashrc):
  eval "$(register-python-argcomplete flowdoc)"

Zsh (add to ~/.zshrc):
  autoload -U bashcompinit
  bashcompinit
  eval "$(register-python-argcomplete flowdoc)"

Fish (add to ~/.config/fish/config.fish):
  register-python-argcomplete --shell fish flowdoc | source

Generate script for a specific shell:
  flowdoc completion --shell bash
""")
        return 0

    import subprocess

    cmd = ["register-python-argcomplete"]
    if args.shell in ("fish", "tcsh"):
        cmd.append(f"--shell={args.shell}")
    cmd.append("flowdoc")

    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError:
        print("Error: register-python-argcomplete not found.", file=sys.stderr)
        print("Make sure argcomplete is properly installed.", file=sys.stderr)
        return 1
    if result.returncode != 0:
        print(f"Error generating completion script: {result.stderr}", file=sys.stderr)
        return 1
    print(result.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
