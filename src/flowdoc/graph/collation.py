"""Collation - Deterministic, locale-style ordering of node ids.

Ids are compared by their case-folded text first, so "reg-2" and "REG-2"
sort next to each other rather than all capitals before all lowercase.
Ties are broken lowercase-first, then by the raw string, which makes the
order total and independent of the process locale.

This approximates locale-aware comparison; it is not a full Unicode
collation. Punctuation and accented letters keep code point order after
case folding: "A-1" sorts before "A_1" (ICU root collation has the
reverse), and "é" sorts after "z" instead of next to "e". locale.strxfrm
is not used because its result depends on the locale of the running
process, and graph order must not.
"""

from __future__ import annotations

from collections.abc import Iterable


def collation_key(value: str) -> tuple[str, str, str]:
    """Sort key approximating locale-aware lexicographic order.

    Case-insensitive comparison first, lowercase before uppercase on ties.
    Punctuation and non-ASCII letters compare by code point.
    """
    return (value.casefold(), value.swapcase(), value)


def collate(values: Iterable[str]) -> list[str]:
    """Return values sorted ascending by collation_key."""
    return sorted(values, key=collation_key)


def is_collated(values: list[str]) -> bool:
    """Check that a list is already in ascending collation order."""
    keys = [collation_key(v) for v in values]
    return all(a <= b for a, b in zip(keys, keys[1:]))
