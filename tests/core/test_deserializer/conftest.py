"""Fixtures for deserializer tests."""

import pytest

BLOCK = """\
// @flowdoc-topic: {topic}
// @flowdoc-id: {node_id}
// @flowdoc-step: {step}
"""


@pytest.fixture
def write_block():
    """Write a one-node comment block to a file, creating parent dirs."""

    def _write(path, topic="checkout", node_id="PAY-1", step="Start payment"):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(BLOCK.format(topic=topic, node_id=node_id, step=step), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def source_tree(tmp_path, write_block):
    """A small repository with sources, vendored code and a binary file."""
    write_block(tmp_path / "src" / "pay.ts", node_id="PAY-1")
    write_block(tmp_path / "src" / "refund.py", topic="refunds", node_id="REF-1")
    write_block(tmp_path / "node_modules" / "lib" / "x.ts", node_id="VENDOR-1")
    write_block(tmp_path / "README.md", node_id="DOC-1")
    (tmp_path / "src" / "blob.ts").write_bytes(b"\xff\xfe\x00not utf-8")
    return tmp_path
