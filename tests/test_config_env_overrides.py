"""Tests for FLOWDOC_<SECTION>_<KEY> environment variable overrides."""
from __future__ import annotations


class TestTryParseEnvValue:
    def test_json_list_parsed(self):
        from flowdoc.config import _try_parse_env_value

        assert _try_parse_env_value('["src", "lib"]') == ["src", "lib"]

    def test_json_object_parsed(self):
        from flowdoc.config import _try_parse_env_value

        assert _try_parse_env_value('{"path": "../billing"}') == {"path": "../billing"}

    def test_booleans_any_case(self):
        from flowdoc.config import _try_parse_env_value

        assert _try_parse_env_value("true") is True
        assert _try_parse_env_value("TRUE") is True
        assert _try_parse_env_value("False") is False

    def test_plain_string_passthrough(self):
        from flowdoc.config import _try_parse_env_value

        assert _try_parse_env_value("shop") == "shop"

    def test_malformed_json_returns_string(self):
        from flowdoc.config import _try_parse_env_value

        assert _try_parse_env_value("[not valid json") == "[not valid json"


class TestApplyEnvOverrides:
    def test_sets_list(self, monkeypatch):
        from flowdoc.config import _apply_env_overrides

        monkeypatch.setenv("FLOWDOC_SCAN_PATHS", '["src"]')

        result = _apply_env_overrides({"scan": {"paths": ["."]}})

        assert result["scan"]["paths"] == ["src"]

    def test_key_may_contain_underscores(self, monkeypatch):
        from flowdoc.config import _apply_env_overrides

        monkeypatch.setenv("FLOWDOC_SCAN_USE_GITIGNORE", "false")

        result = _apply_env_overrides({"scan": {"use_gitignore": True}})

        assert result["scan"]["use_gitignore"] is False

    def test_creates_missing_section(self, monkeypatch):
        from flowdoc.config import _apply_env_overrides

        monkeypatch.setenv("FLOWDOC_INDEX_DIR", "/tmp/flows")

        assert _apply_env_overrides({})["index"]["dir"] == "/tmp/flows"

    def test_incomplete_names_ignored(self, monkeypatch):
        from flowdoc.config import _apply_env_overrides

        monkeypatch.setenv("FLOWDOC_ORPHAN", "x")

        assert _apply_env_overrides({}) == {}

    def test_load_config_applies_overrides(self, tmp_path, monkeypatch):
        from flowdoc.config import load_config

        config_file = tmp_path / ".flowdoc.toml"
        config_file.write_text('[project]\nname = "shop"\n', encoding="utf-8")
        monkeypatch.setenv("FLOWDOC_PROJECT_NAME", "store")

        assert load_config(config_file)["project"]["name"] == "store"
