"""
flowdoc.commands - CLI command implementations
"""

__all__ = [
    "index",
    "show",
    "topics",
    "validate",
    "walk",
]
