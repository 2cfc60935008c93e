"""Deserializer - Feed source text through the parser registry.

Sources are files found under a directory (DomainFile) or text handed in
directly (DomainStdio). Both yield ParsedContentWithContext so the factory
knows which file each block came from.
"""

from __future__ import annotations

import fnmatch
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Protocol, runtime_checkable

from flowdoc.graph.parsers import ParseContext, ParsedContent, ParserRegistry


@dataclass
class DomainContext:
    """Context for a source being deserialized.

    Attributes:
        source_type: Type of source ("file", "stdin").
        source_id: Identifier for the source (path relative to the root).
    """

    source_type: str
    source_id: str


@dataclass
class ParsedContentWithContext(ParsedContent):
    """ParsedContent with source context attached."""

    source_context: DomainContext | None = None


@dataclass
class SourceReadError:
    """A file that matched the scan but could not be read."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


@runtime_checkable
class DomainDeserializer(Protocol):
    """Protocol for domain deserializers."""

    def iterate_sources(self) -> Iterator[tuple[DomainContext, str]]:
        """Yield (context, text) for every readable source."""
        ...

    def deserialize(self, registry: ParserRegistry) -> Iterator[ParsedContentWithContext]:
        """Parse every source with the registry."""
        ...


def _deserialize_sources(
    sources: Iterator[tuple[DomainContext, str]], registry: ParserRegistry
) -> Iterator[ParsedContentWithContext]:
    for ctx, content in sources:
        parse_ctx = ParseContext(source_id=ctx.source_id)
        for parsed in registry.parse_text(content, parse_ctx):
            yield ParsedContentWithContext(
                content_type=parsed.content_type,
                start_line=parsed.start_line,
                end_line=parsed.end_line,
                raw_text=parsed.raw_text,
                parsed_data=parsed.parsed_data,
                source_context=ctx,
            )


class DomainFile:
    """Deserializer for a file or a directory tree.

    Files are visited in sorted order so that record order, and with it
    first-wins duplicate handling, is stable between runs.
    """

    def __init__(
        self,
        path: Path | str,
        patterns: list[str] | None = None,
        recursive: bool = True,
        skip_dirs: list[str] | None = None,
        skip_files: list[str] | None = None,
        skip_globs: list[str] | None = None,
        relative_to: Path | None = None,
    ) -> None:
        """Initialize file deserializer.

        Args:
            path: Path to file or directory.
            patterns: File name globs to include (default: ["*"]).
            recursive: Whether to search subdirectories.
            skip_dirs: Directory names to skip anywhere in the tree.
            skip_files: File names to skip.
            skip_globs: Relative-path globs to skip (from .gitignore).
            relative_to: Root used to make source ids relative.
        """
        self.path = Path(path)
        self.patterns = patterns or ["*"]
        self.recursive = recursive
        self.skip_dirs = skip_dirs or []
        self.skip_files = skip_files or []
        self.skip_globs = skip_globs or []
        self.relative_to = relative_to
        self.read_errors: list[SourceReadError] = []
        self.seen: set[Path] = set()
        self.files_read = 0

    def _should_skip(self, file_path: Path) -> bool:
        """Check a file against skip_files, skip_dirs and skip_globs."""
        if file_path.name in self.skip_files:
            return True

        try:
            rel_path = file_path.relative_to(self.path)
            dir_parts = rel_path.parts[:-1]
        except ValueError:
            rel_path = file_path
            dir_parts = file_path.parts[:-1]

        if any(part in self.skip_dirs for part in dir_parts):
            return True

        rel_text = rel_path.as_posix()
        for glob in self.skip_globs:
            if fnmatch.fnmatch(rel_text, glob) or fnmatch.fnmatch(file_path.name, glob):
                return True
            # Directory entry: skip anything underneath it
            if any(fnmatch.fnmatch(part, glob) for part in dir_parts):
                return True
        return False

    def iter_files(self) -> Iterator[Path]:
        """Yield matching files, deduplicated across patterns, in sorted order."""
        if self.path.is_file():
            if not self._should_skip(self.path):
                yield self.path
            return
        if not self.path.is_dir():
            return

        found: set[Path] = set()
        for pattern in self.patterns:
            file_iter = self.path.rglob(pattern) if self.recursive else self.path.glob(pattern)
            for file_path in file_iter:
                if file_path.is_file() and not self._should_skip(file_path):
                    found.add(file_path)
        yield from sorted(found)

    def iterate_sources(self) -> Iterator[tuple[DomainContext, str]]:
        """Iterate over file sources; unreadable files go to read_errors.

        Files whose resolved path is already in ``seen`` are skipped.
        """
        for file_path in self.iter_files():
            resolved = file_path.resolve()
            if resolved in self.seen:
                continue
            self.seen.add(resolved)
            source = self._read_file(file_path)
            if source is not None:
                self.files_read += 1
                yield source

    def _source_id(self, file_path: Path) -> str:
        if self.relative_to is not None:
            try:
                return file_path.relative_to(self.relative_to).as_posix()
            except ValueError:
                pass
        return str(file_path)

    def _read_file(self, file_path: Path) -> tuple[DomainContext, str] | None:
        source_id = self._source_id(file_path)
        try:
            content = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            self.read_errors.append(SourceReadError(source_id, "not valid UTF-8"))
            return None
        except OSError as e:
            self.read_errors.append(SourceReadError(source_id, e.strerror or str(e)))
            return None
        ctx = DomainContext(source_type="file", source_id=source_id)
        return ctx, content

    def deserialize(self, registry: ParserRegistry) -> Iterator[ParsedContentWithContext]:
        """Deserialize files using parser registry."""
        yield from _deserialize_sources(self.iterate_sources(), registry)


class DomainStdio:
    """Deserializer for text held in memory (stdin, editor buffers)."""

    def __init__(self, content: str, source_id: str = "<stdin>") -> None:
        self.content = content
        self.source_id = source_id

    def iterate_sources(self) -> Iterator[tuple[DomainContext, str]]:
        yield DomainContext(source_type="stdin", source_id=self.source_id), self.content

    def deserialize(self, registry: ParserRegistry) -> Iterator[ParsedContentWithContext]:
        yield from _deserialize_sources(self.iterate_sources(), registry)


def read_gitignore_globs(root: Path) -> list[str]:
    """Turn simple .gitignore entries into skip globs.

    Comments, blank lines and negations are ignored. Leading and trailing
    slashes are dropped, so ``/build/`` becomes ``build``.
    """
    gitignore = root / ".gitignore"
    if not gitignore.is_file():
        return []
    globs = []
    for line in gitignore.read_text(encoding="utf-8", errors="replace").splitlines():
        entry = line.strip()
        if not entry or entry.startswith(("#", "!")):
            continue
        entry = entry.strip("/")
        if entry.startswith("**/"):
            entry = entry[3:]
        if entry:
            globs.append(entry)
    return globs
