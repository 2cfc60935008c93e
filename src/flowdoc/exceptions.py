"""
flowdoc.exceptions - Exception types raised by the library.

Graph construction itself never raises; these cover the genuinely
exceptional cases around it.
"""


class FlowDocError(Exception):
    """Base class for flowdoc errors."""


class ConfigError(FlowDocError):
    """A configuration file could not be read or parsed."""


class RepoIndexError(FlowDocError):
    """A cross-repository index file could not be written."""


__all__ = ["FlowDocError", "ConfigError", "RepoIndexError"]
