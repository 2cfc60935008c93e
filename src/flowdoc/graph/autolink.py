"""Numeric auto-linking - Infer missing edges from numbered ids.

Authors often number the steps of a flow (``PAY-1``, ``PAY-2``, ...) and
leave out the dependency tags. This module fills those gaps: a node whose
id ends in a number is linked after the node with the same prefix and the
previous number.

Only silence is bridged. A node that declares a dependency, or that some
other node lists in its ``children`` tag, is never given an inferred edge.

Numbers are compared as normalized digit strings, so ids with arbitrarily
long numeric suffixes never go through int().
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from flowdoc.graph.collation import collation_key
from flowdoc.graph.FlowNode import FlowNode

# Prefix is everything up to the trailing run of ASCII digits
_NUMERIC_ID = re.compile(r"(?P<prefix>.*?)(?P<digits>[0-9]+)", re.DOTALL)


@dataclass(frozen=True)
class NumericId:
    """Numeric identity of an id: ``S-007`` is prefix ``S-``, digits ``7``.

    ``digits`` has no leading zeros ("0" for zero).
    """

    prefix: str
    digits: str

    @property
    def key(self) -> tuple[str, str]:
        return (self.prefix, self.digits)

    @property
    def has_predecessor(self) -> bool:
        return self.digits not in ("0", "1")

    def predecessor_key(self) -> tuple[str, str]:
        return (self.prefix, _decrement(self.digits))

    def successor_key(self) -> tuple[str, str]:
        return (self.prefix, _increment(self.digits))


def _increment(digits: str) -> str:
    head = digits.rstrip("9")
    carried = len(digits) - len(head)
    if not head:
        return "1" + "0" * carried
    return head[:-1] + str(int(head[-1]) + 1) + "0" * carried


def _decrement(digits: str) -> str:
    # digits is normalized and greater than zero
    head = digits.rstrip("0")
    borrowed = len(digits) - len(head)
    result = head[:-1] + str(int(head[-1]) - 1) + "9" * borrowed
    return result.lstrip("0") or "0"


def parse_numeric_id(node_id: str) -> NumericId | None:
    """Split an id into prefix and normalized digits.

    Leading zeros are insignificant: ``S-001``, ``S-01`` and ``S-1`` all
    denote 1 under prefix ``S-``.

    Args:
        node_id: The id to inspect.

    Returns:
        NumericId, or None if the id does not end in an ASCII digit.
    """
    match = _NUMERIC_ID.fullmatch(node_id)
    if not match:
        return None
    digits = match.group("digits").lstrip("0") or "0"
    return NumericId(prefix=match.group("prefix"), digits=digits)


def build_numeric_lookup(node_ids: list[str]) -> dict[tuple[str, str], str]:
    """Map (prefix, digits) to node id.

    On collision (``S-01`` and ``S-1``) the first id in the given order
    wins. Callers pass ids in record order, so the earliest record wins.
    """
    lookup: dict[tuple[str, str], str] = {}
    for node_id in node_ids:
        numeric = parse_numeric_id(node_id)
        if numeric is not None and numeric.key not in lookup:
            lookup[numeric.key] = node_id
    return lookup


def _insert_child(children: dict[str, list[str]], parent_id: str, child_id: str) -> bool:
    siblings = children.setdefault(parent_id, [])
    if child_id in siblings:
        return False
    siblings.append(child_id)
    siblings.sort(key=collation_key)
    return True


def auto_link(
    nodes: dict[str, FlowNode],
    children: dict[str, list[str]],
    roots: list[str],
    explicit_children: set[str] | None = None,
) -> int:
    """Fill missing edges by numeric adjacency, in place.

    Args:
        nodes: Node map of one topic, in record order. Nodes that receive an
            inferred dependency are replaced by an updated copy.
        children: Parent id to sorted child ids; updated in place.
        roots: Sorted root ids; linked nodes are removed from it.
        explicit_children: Ids that some node declares in a children tag.

    Returns:
        Number of edges added.
    """
    # Ids named in a children tag already have an authored parent. They never
    # get an inferred dependency, even when they declare none themselves.
    claimed = explicit_children or set()
    lookup = build_numeric_lookup(list(nodes))
    added = 0

    # Predecessor pass: attach silent nodes after the previous number
    for node_id in list(nodes):
        node = nodes[node_id]
        numeric = parse_numeric_id(node_id)
        if numeric is None or not numeric.has_predecessor:
            continue
        if node.dependency or node_id in claimed:
            continue
        predecessor = lookup.get(numeric.predecessor_key())
        if predecessor is None or predecessor == node_id:
            continue
        nodes[node_id] = node.with_inferred_dependency(predecessor)
        if node_id in roots:
            roots.remove(node_id)
        if _insert_child(children, predecessor, node_id):
            added += 1

    # Successor pass: link the next number unless it carries its own dependency
    for node_id in list(nodes):
        numeric = parse_numeric_id(node_id)
        if numeric is None:
            continue
        successor = lookup.get(numeric.successor_key())
        if successor is None or successor == node_id:
            continue
        if successor in children.get(node_id, []):
            continue
        successor_node = nodes[successor]
        if successor_node.dependency or successor in claimed:
            continue
        nodes[successor] = successor_node.with_inferred_dependency(node_id)
        if successor in roots:
            roots.remove(successor)
        if _insert_child(children, node_id, successor):
            added += 1

    return added


__all__ = [
    "NumericId",
    "parse_numeric_id",
    "build_numeric_lookup",
    "auto_link",
]
