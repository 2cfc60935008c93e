"""Tests for external repository configuration."""

from flowdoc.associates import (
    ExternalRepo,
    find_external_repo,
    get_external_repo_names,
    get_external_repos,
)


class TestExternalRepos:
    def test_relative_paths_resolve_against_root(self, tmp_path):
        config = {"repos": {"billing": {"path": "../billing"}}}

        (repo,) = get_external_repos(config, tmp_path / "app")

        assert repo == ExternalRepo(name="billing", path=(tmp_path / "billing").resolve())

    def test_absolute_paths_kept(self, tmp_path):
        config = {"repos": {"shipping": {"path": str(tmp_path / "ship")}}}

        (repo,) = get_external_repos(config, tmp_path)

        assert repo.path == (tmp_path / "ship").resolve()

    def test_config_order_and_invalid_entries(self, tmp_path):
        config = {
            "repos": {
                "zeta": {"path": "z"},
                "broken": {"url": "https://example.com"},
                "blank": {"path": "  "},
                "scalar": "not-a-table",
                "alpha": {"path": "a"},
            }
        }

        assert [r.name for r in get_external_repos(config, tmp_path)] == ["zeta", "alpha"]
        assert get_external_repo_names(config) == {"zeta", "alpha"}

    def test_no_repos_section(self):
        assert get_external_repos({}) == []
        assert get_external_repo_names({"repos": None}) == set()

    def test_find_external_repo(self, tmp_path):
        config = {"repos": {"billing": {"path": "b"}}}

        assert find_external_repo(config, "billing", tmp_path).path == (tmp_path / "b").resolve()
        assert find_external_repo(config, "other", tmp_path) is None
