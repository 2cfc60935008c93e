"""
flowdoc.config - Configuration loading and defaults

Configuration lives in ``.flowdoc.toml`` at (or above) the repository
root. Values are merged over DEFAULT_CONFIG and may be overridden with
``FLOWDOC_<SECTION>_<KEY>`` environment variables.
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import ParseError

from flowdoc.exceptions import ConfigError

CONFIG_FILENAME = ".flowdoc.toml"
ENV_PREFIX = "FLOWDOC_"

DEFAULT_CONFIG: dict[str, Any] = {
    "project": {
        "name": "",
    },
    "scan": {
        "paths": ["."],
        "patterns": [
            "*.php",
            "*.ts",
            "*.tsx",
            "*.js",
            "*.jsx",
            "*.py",
            "*.go",
            "*.java",
            "*.rb",
            "*.cs",
        ],
        "skip_dirs": ["node_modules", ".git", "vendor", "dist", "build"],
        "skip_files": [],
        "use_gitignore": True,
    },
    "repos": {},
    "index": {
        "dir": "~/.cache/flowdoc",
    },
}


def parse_toml(content: str) -> dict[str, Any]:
    """Parse TOML text into plain Python containers.

    Raises:
        ConfigError: If the text is not valid TOML.
    """
    return parse_toml_document(content).unwrap()


def parse_toml_document(content: str) -> tomlkit.TOMLDocument:
    """Parse TOML text into a tomlkit document (keeps comments and layout).

    Raises:
        ConfigError: If the text is not valid TOML.
    """
    try:
        return tomlkit.parse(content)
    except ParseError as e:
        raise ConfigError(f"Invalid TOML: {e}") from e


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge two config dicts; values from override win.

    Neither input is modified.
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def find_config_file(start_dir: Path) -> Path | None:
    """Find .flowdoc.toml in start_dir or any parent directory.

    Args:
        start_dir: Directory to start searching from.

    Returns:
        Path to the config file, or None if none exists.
    """
    current = Path(start_dir).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def _try_parse_env_value(value: str) -> Any:
    """Convert an environment variable value to a typed value.

    JSON arrays and objects are decoded, "true"/"false" (any case) become
    booleans, anything else (including malformed JSON) stays a string.
    """
    stripped = value.strip()
    if stripped.startswith(("[", "{")):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            return value
    if stripped.lower() == "true":
        return True
    if stripped.lower() == "false":
        return False
    return value


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply FLOWDOC_<SECTION>_<KEY> environment variables to config.

    The first underscore after the prefix separates the section from the
    key, so FLOWDOC_SCAN_SKIP_DIRS sets config["scan"]["skip_dirs"].
    Missing sections are created. The config is modified in place and
    returned.
    """
    for name, raw_value in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        section, sep, key = name[len(ENV_PREFIX) :].lower().partition("_")
        if not sep or not section or not key:
            continue
        target = config.setdefault(section, {})
        if not isinstance(target, dict):
            continue
        target[key] = _try_parse_env_value(raw_value)
    return config


def load_config(config_path: Path) -> dict[str, Any]:
    """Load a config file, merged over defaults, with env overrides.

    Args:
        config_path: Path to a .flowdoc.toml file.

    Returns:
        Complete configuration dict.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        content = Path(config_path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e
    user_config = parse_toml(content)
    return _apply_env_overrides(merge_configs(DEFAULT_CONFIG, user_config))


def get_config(config_path: Path | None = None, start_dir: Path | None = None) -> dict[str, Any]:
    """Get configuration for a repository.

    Uses config_path when given, else searches upwards from start_dir (or
    the working directory). Without any config file, the defaults (plus
    env overrides) are returned.
    """
    if config_path is None:
        config_path = find_config_file(start_dir or Path.cwd())
    if config_path is None:
        return _apply_env_overrides(copy.deepcopy(DEFAULT_CONFIG))
    return load_config(config_path)


def get_index_dir(config: dict[str, Any]) -> Path:
    """Directory holding cross-repository index files."""
    return Path(config.get("index", {}).get("dir", DEFAULT_CONFIG["index"]["dir"])).expanduser()


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
    "parse_toml",
    "parse_toml_document",
    "merge_configs",
    "find_config_file",
    "load_config",
    "get_config",
    "get_index_dir",
]
