"""
flowdoc.commands.context - Config and repository root for a command run.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from flowdoc.config import find_config_file, get_config
from flowdoc.exceptions import ConfigError


@dataclass
class Workspace:
    """What every command needs: the merged config and the repo root."""

    config: dict[str, Any]
    repo_root: Path
    config_path: Path | None = None


def load_workspace(args: argparse.Namespace) -> Workspace | None:
    """Load configuration for a command; None after printing a config error.

    The repository root is ``--root`` if given, else the directory holding
    the config file, else the working directory.
    """
    root = getattr(args, "root", None)
    config_path = getattr(args, "config", None)
    if config_path is None:
        config_path = find_config_file(root or Path.cwd())

    try:
        config = get_config(config_path, root)
    except ConfigError as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return None

    if root is None:
        root = config_path.parent if config_path else Path.cwd()
    return Workspace(config=config, repo_root=Path(root).resolve(), config_path=config_path)
