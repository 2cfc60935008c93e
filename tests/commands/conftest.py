"""Fixtures for CLI command tests."""

import os

import pytest


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("FLOWDOC_"):
            monkeypatch.delenv(name)


@pytest.fixture
def project(tmp_path):
    """Repository with a config file, two topics and its own index dir."""
    root = tmp_path / "shop"
    (root / "src").mkdir(parents=True)
    (root / ".flowdoc.toml").write_text(
        '[project]\nname = "shop"\n\n'
        f'[index]\ndir = "{(tmp_path / "index").as_posix()}"\n\n'
        '[repos.billing]\npath = "../billing"\n',
        encoding="utf-8",
    )
    (root / "src" / "checkout.ts").write_text(
        "// @flowdoc-line: checkout | PAY-1 | Open cart\n"
        "// @flowdoc-line: checkout | PAY-2 | Charge card | | | billing@INV-1\n"
        "// @flowdoc-line: checkout | PAY-3 | Show receipt\n",
        encoding="utf-8",
    )
    (root / "src" / "signup.py").write_text(
        "# @flowdoc-line: signup | SIGN-1 | Enter email\n",
        encoding="utf-8",
    )
    return root


@pytest.fixture
def run_cli(project):
    """Run flowdoc against the project; returns the exit code."""
    from flowdoc.cli import main

    def _run(*argv):
        return main(["--root", str(project), *argv])

    return _run
