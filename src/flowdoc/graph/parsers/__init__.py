"""Parsers - Comment-tag parsers and the registry that runs them.

A source text is split into numbered lines and offered to each registered
parser, lowest priority first. A parser claims the lines of every block it
recognizes and later parsers only see what is left, so the one-liner parser
(priority 10) splits any ``@flowdoc-*`` tag block around a ``@flowdoc-line``.

Each claimed block comes back as ParsedContent of kind FLOW_NODE (all
required tags present) or PARSE_ERROR (one per missing required tag).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

NumberedLine = tuple[int, str]


class ContentKind(str, Enum):
    """What a claimed block turned into."""

    FLOW_NODE = "flow_node"
    PARSE_ERROR = "parse_error"


@dataclass(frozen=True)
class ParseContext:
    """Where the text being parsed came from.

    Attributes:
        source_id: Path relative to the repo root, or a label such as "<stdin>".
    """

    source_id: str


@dataclass
class ParsedContent:
    """One claimed comment block.

    Attributes:
        content_type: FLOW_NODE or PARSE_ERROR.
        start_line: First line of the block (1-based).
        end_line: Last line of the block, inclusive.
        raw_text: The block's lines joined with newlines.
        parsed_data: Node fields for FLOW_NODE; kind, message and the
            partial topic/id/step for PARSE_ERROR.
    """

    content_type: ContentKind
    start_line: int
    end_line: int
    raw_text: str
    parsed_data: dict[str, Any] = field(default_factory=dict)

    @property
    def lines(self) -> range:
        """Line numbers claimed by this block."""
        return range(self.start_line, self.end_line + 1)


class TagParser(Protocol):
    """A parser that claims comment blocks from unclaimed numbered lines."""

    priority: int

    def claim_and_parse(
        self,
        lines: list[NumberedLine],
        context: ParseContext,
    ) -> Iterator[ParsedContent]: ...


class ParserRegistry:
    """Runs tag parsers over a text in priority order.

    Parsers with equal priority run in registration order.
    """

    def __init__(self, parsers: Iterable[TagParser] = ()) -> None:
        self._parsers: list[TagParser] = []
        for parser in parsers:
            self.register(parser)

    @property
    def parsers(self) -> list[TagParser]:
        return list(self._parsers)

    def register(self, parser: TagParser) -> None:
        self._parsers.append(parser)
        self._parsers.sort(key=lambda p: p.priority)

    def parse_lines(self, lines: list[NumberedLine], context: ParseContext) -> list[ParsedContent]:
        """Parse numbered lines into blocks, returned in file order.

        Args:
            lines: (line_number, text) pairs.
            context: Source of the lines.

        Returns:
            Blocks from every parser, sorted by start line.
        """
        blocks: list[ParsedContent] = []
        remaining = list(lines)

        for parser in self._parsers:
            if not remaining:
                break
            claimed: set[int] = set()
            for block in parser.claim_and_parse(remaining, context):
                claimed.update(block.lines)
                blocks.append(block)
            remaining = [(ln, text) for ln, text in remaining if ln not in claimed]

        blocks.sort(key=lambda b: b.start_line)
        return blocks

    def parse_text(self, text: str, context: ParseContext) -> list[ParsedContent]:
        return self.parse_lines(split_lines(text), context)


def split_lines(text: str) -> list[NumberedLine]:
    """Number the lines of a text (1-based), tolerating CRLF endings."""
    return [(i + 1, line.rstrip("\r")) for i, line in enumerate(text.split("\n"))]


__all__ = [
    "ContentKind",
    "NumberedLine",
    "ParseContext",
    "ParsedContent",
    "ParserRegistry",
    "TagParser",
    "split_lines",
]
