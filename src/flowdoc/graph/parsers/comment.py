"""Comment tag parsers - @flowdoc-* blocks and one-liners.

Two parsers share this module:

- OneLinerParser (priority 10) claims single lines of the form
  ``// @flowdoc-line: TOPIC | ID | STEP | links | dependency | children``
- BlockTagParser (priority 20) claims runs of consecutive comment lines
  carrying ``@flowdoc-<tag>: value`` tags::

      // @flowdoc-topic: user-registration
      // @flowdoc-id: REG-003
      // @flowdoc-step: Submit registration data to the backend API
      // @flowdoc-dependency: REG-002 [Only if validation passes]
      // @flowdoc-links: file:src/api.ts:55; url:https://example.com/docs

A block missing topic, id or step yields one "parse_error" content per
missing tag instead of a "flow_node".
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from flowdoc.graph.diagnostics import ErrorKind
from flowdoc.graph.FlowNode import Link, LinkKind
from flowdoc.graph.parsers import ContentKind, NumberedLine, ParseContext, ParsedContent

COMMENT_MARKERS = ("//", "#", "*", "/*")

COMMENT_LINE_PATTERN = re.compile(r"^\s*(?://|#|\*|/\*)\s*")
TAG_PATTERN = re.compile(r"@flowdoc-(?P<tag>topic|id|step|dependency|links|children):\s*(?P<value>.+)")
LINE_TAG_PATTERN = re.compile(r"@flowdoc-line:\s*(?P<value>.+)")
DEPENDENCY_WITH_NOTE_PATTERN = re.compile(r"^(?P<id>\S+)\s*\[(?P<note>.+)\]$")
LINK_SEPARATOR = re.compile(r"\s*;\s*")
CHILDREN_SEPARATOR = re.compile(r"\s*,\s*")


def is_comment_line(line: str) -> bool:
    """Check if a line is a comment in one of the supported styles."""
    return line.strip().startswith(COMMENT_MARKERS)


def parse_link(raw: str) -> Link:
    """Parse one link: ``symbol:X``, ``file:path[:line]``, ``url:X`` or bare URL."""
    trimmed = raw.strip()

    if trimmed.startswith("symbol:"):
        return Link(target=trimmed, kind=LinkKind.SYMBOL, symbol=trimmed[len("symbol:") :])

    if trimmed.startswith("file:"):
        rest = trimmed[len("file:") :]
        colon = rest.rfind(":")
        if colon > 0:
            line_text = rest[colon + 1 :]
            line = int(line_text) if line_text.isdigit() else None
            return Link(target=trimmed, kind=LinkKind.FILE, file_path=rest[:colon], line=line)
        return Link(target=trimmed, kind=LinkKind.FILE, file_path=rest)

    if trimmed.startswith("url:"):
        return Link(target=trimmed, kind=LinkKind.URL, url=trimmed[len("url:") :])

    return Link(target=f"url:{trimmed}", kind=LinkKind.URL, url=trimmed)


def parse_links(raw: str) -> list[Link]:
    return [parse_link(part) for part in LINK_SEPARATOR.split(raw) if part]


def parse_children(raw: str) -> list[str]:
    """Split a comma-separated children list; "repo@id" entries are kept."""
    return [part.strip() for part in CHILDREN_SEPARATOR.split(raw) if part.strip()]


def parse_dependency(raw: str) -> tuple[str, str | None]:
    """Split ``ID [note]`` into id and note."""
    match = DEPENDENCY_WITH_NOTE_PATTERN.match(raw.strip())
    if match:
        return match.group("id"), match.group("note")
    return raw.strip(), None


@dataclass
class PendingBlock:
    """Tags collected so far for one comment block."""

    start_line: int
    end_line: int
    topic: str | None = None
    id: str | None = None
    step: str | None = None
    dependency: str | None = None
    dependency_note: str | None = None
    links_raw: str | None = None
    children_raw: str | None = None
    raw_lines: list[str] | None = None

    def set_tag(self, tag: str, value: str) -> None:
        if tag == "dependency":
            self.dependency, self.dependency_note = parse_dependency(value)
        elif tag == "links":
            self.links_raw = value
        elif tag == "children":
            self.children_raw = value
        else:
            setattr(self, tag, value)


def finalize_block(block: PendingBlock) -> Iterator[ParsedContent]:
    """Turn a finished block into flow_node or parse_error content."""
    raw_text = "\n".join(block.raw_lines or [])
    missing: list[tuple[ErrorKind, str]] = []

    if not block.topic:
        suffix = f" (id: {block.id})" if block.id else ""
        missing.append((ErrorKind.MISSING_TOPIC, f"Missing @flowdoc-topic in block{suffix}."))
    if not block.id:
        suffix = f" (topic: {block.topic})" if block.topic else ""
        missing.append((ErrorKind.MISSING_ID, f"Missing @flowdoc-id in block{suffix}."))
    if not block.step:
        suffix = f" (id: {block.id})" if block.id else ""
        missing.append((ErrorKind.MISSING_STEP, f"Missing @flowdoc-step in block{suffix}."))

    if missing:
        for kind, message in missing:
            yield ParsedContent(
                content_type=ContentKind.PARSE_ERROR,
                start_line=block.start_line,
                end_line=block.end_line,
                raw_text=raw_text,
                parsed_data={
                    "kind": kind,
                    "message": message,
                    "topic": block.topic,
                    "id": block.id,
                    "step": block.step,
                },
            )
        return

    data: dict[str, Any] = {
        "topic": block.topic,
        "id": block.id,
        "step": block.step,
        "dependency": block.dependency or None,
        "dependency_note": block.dependency_note or None,
        "children": parse_children(block.children_raw) if block.children_raw else None,
        "links": parse_links(block.links_raw) if block.links_raw else [],
    }
    yield ParsedContent(
        content_type=ContentKind.FLOW_NODE,
        start_line=block.start_line,
        end_line=block.end_line,
        raw_text=raw_text,
        parsed_data=data,
    )


class OneLinerParser:
    """Parser for ``@flowdoc-line`` one-liners.

    Priority: 10 (before tag blocks, so a one-liner ends any open block)

    Fields are pipe separated: topic, id, step are required positions;
    links, dependency and children are optional and may be left empty.
    """

    priority = 10

    def claim_and_parse(
        self,
        lines: list[NumberedLine],
        context: ParseContext,
    ) -> Iterator[ParsedContent]:
        for ln, text in lines:
            if not is_comment_line(text):
                continue
            block = self.parse_line(ln, text)
            if block is not None:
                yield from finalize_block(block)

    @staticmethod
    def parse_line(ln: int, text: str) -> PendingBlock | None:
        """Parse one line; None if it is not a usable one-liner."""
        match = LINE_TAG_PATTERN.search(COMMENT_LINE_PATTERN.sub("", text, count=1))
        if not match:
            return None

        parts = [p.strip() for p in match.group("value").split("|")]
        if len(parts) < 3:
            return None
        parts += [""] * (6 - len(parts))
        topic, node_id, step, links_raw, dependency_raw, children_raw = parts[:6]

        block = PendingBlock(
            start_line=ln,
            end_line=ln,
            topic=topic or None,
            id=node_id or None,
            step=step or None,
            raw_lines=[text],
        )
        if links_raw:
            block.links_raw = links_raw
        if dependency_raw:
            block.set_tag("dependency", dependency_raw)
        if children_raw:
            block.children_raw = children_raw
        return block


class BlockTagParser:
    """Parser for multi-line ``@flowdoc-<tag>:`` comment blocks.

    Priority: 20

    A block is a run of consecutive comment lines that each carry a tag.
    It ends at a non-comment line, a comment line without a tag, a line
    already claimed by an earlier parser, or end of file. Repeating a tag
    inside a block overwrites the earlier value.
    """

    priority = 20

    def claim_and_parse(
        self,
        lines: list[NumberedLine],
        context: ParseContext,
    ) -> Iterator[ParsedContent]:
        current: PendingBlock | None = None

        for ln, text in lines:
            if current is not None and ln != current.end_line + 1:
                # Gap: something in between was claimed elsewhere
                yield from finalize_block(current)
                current = None

            tag_match = None
            if is_comment_line(text):
                tag_match = TAG_PATTERN.search(COMMENT_LINE_PATTERN.sub("", text, count=1))

            if tag_match is None:
                if current is not None:
                    yield from finalize_block(current)
                    current = None
                continue

            if current is None:
                current = PendingBlock(start_line=ln, end_line=ln, raw_lines=[])
            current.end_line = ln
            current.raw_lines.append(text)
            current.set_tag(tag_match.group("tag"), tag_match.group("value").strip())

        if current is not None:
            yield from finalize_block(current)


def create_comment_parsers() -> list[OneLinerParser | BlockTagParser]:
    """Return the parsers needed for @flowdoc-* comments."""
    return [OneLinerParser(), BlockTagParser()]


__all__ = [
    "OneLinerParser",
    "BlockTagParser",
    "create_comment_parsers",
    "is_comment_line",
    "parse_link",
    "parse_links",
    "parse_children",
    "parse_dependency",
]
