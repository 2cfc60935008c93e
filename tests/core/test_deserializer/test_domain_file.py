"""Tests for DomainFile and DomainStdio deserializers."""

from flowdoc.graph.deserializer import (
    DomainDeserializer,
    DomainFile,
    DomainStdio,
    ParsedContentWithContext,
    read_gitignore_globs,
)
from flowdoc.graph.factory import create_registry


class TestDomainFile:
    def test_iter_files_sorted_and_filtered(self, source_tree):
        domain = DomainFile(
            source_tree,
            patterns=["*.ts", "*.py"],
            skip_dirs=["node_modules"],
        )

        files = [p.relative_to(source_tree).as_posix() for p in domain.iter_files()]

        assert files == ["src/blob.ts", "src/pay.ts", "src/refund.py"]

    def test_non_utf8_file_becomes_read_error(self, source_tree):
        domain = DomainFile(
            source_tree,
            patterns=["*.ts"],
            skip_dirs=["node_modules"],
            relative_to=source_tree,
        )

        sources = [ctx.source_id for ctx, _ in domain.iterate_sources()]

        assert sources == ["src/pay.ts"]
        assert [(e.path, e.reason) for e in domain.read_errors] == [("src/blob.ts", "not valid UTF-8")]
        assert domain.files_read == 1

    def test_deserialize_attaches_context(self, source_tree):
        domain = DomainFile(source_tree / "src", patterns=["*.py"], relative_to=source_tree)

        (content,) = list(domain.deserialize(create_registry()))

        assert isinstance(content, ParsedContentWithContext)
        assert content.content_type == "flow_node"
        assert content.parsed_data["id"] == "REF-1"
        assert content.source_context.source_id == "src/refund.py"
        assert content.source_context.source_type == "file"

    def test_single_file_path(self, source_tree):
        domain = DomainFile(source_tree / "src" / "pay.ts")

        assert list(domain.iter_files()) == [source_tree / "src" / "pay.ts"]

    def test_missing_path_yields_nothing(self, tmp_path):
        assert list(DomainFile(tmp_path / "absent").iter_files()) == []

    def test_skip_files(self, source_tree):
        domain = DomainFile(source_tree / "src", patterns=["*.ts"], skip_files=["blob.ts"])

        assert [p.name for p in domain.iter_files()] == ["pay.ts"]

    def test_skip_globs_match_directories_and_names(self, tmp_path, write_block):
        write_block(tmp_path / "generated" / "api.ts")
        write_block(tmp_path / "app.min.ts")
        write_block(tmp_path / "app.ts")

        domain = DomainFile(tmp_path, patterns=["*.ts"], skip_globs=["generated", "*.min.ts"])

        assert [p.name for p in domain.iter_files()] == ["app.ts"]

    def test_seen_files_are_not_read_twice(self, source_tree):
        seen: set = set()
        first = DomainFile(source_tree / "src", patterns=["*.py"])
        first.seen = seen
        second = DomainFile(source_tree, patterns=["*.py"])
        second.seen = seen

        assert len(list(first.iterate_sources())) == 1
        assert list(second.iterate_sources()) == []

    def test_satisfies_protocol(self, tmp_path):
        assert isinstance(DomainFile(tmp_path), DomainDeserializer)
        assert isinstance(DomainStdio(""), DomainDeserializer)


class TestDomainStdio:
    def test_parses_text(self):
        text = "# @flowdoc-line: checkout | PAY-1 | Start\n"

        (content,) = list(DomainStdio(text, "buffer.py").deserialize(create_registry()))

        assert content.parsed_data["id"] == "PAY-1"
        assert content.source_context.source_type == "stdin"
        assert content.source_context.source_id == "buffer.py"


class TestGitignore:
    def test_simple_entries_become_globs(self, tmp_path):
        (tmp_path / ".gitignore").write_text(
            "# build output\n/generated/\n*.min.js\n\n!keep.min.js\n**/tmp\n",
            encoding="utf-8",
        )

        assert read_gitignore_globs(tmp_path) == ["generated", "*.min.js", "tmp"]

    def test_no_gitignore(self, tmp_path):
        assert read_gitignore_globs(tmp_path) == []
