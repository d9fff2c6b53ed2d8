"""Unit tests for tidycontext.config."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tidycontext.config import CacheSettings, FanoutSettings, GitHubSettings, Settings


class TestDefaults:
    def test_github_defaults(self) -> None:
        github = GitHubSettings()
        assert github.api_url == "https://api.github.com"
        assert github.org == "tidymodels"
        assert github.repos_per_page == 100
        assert github.repos_sort == "updated"
        assert github.code_search_per_page == 100
        assert github.doc_search_per_page == 50
        assert github.doc_file_extension == ".R"
        assert github.manifest_path == "DESCRIPTION"
        assert github.readme_path == "README.md"

    def test_cache_defaults(self) -> None:
        cache = CacheSettings()
        assert cache.repos_ttl_seconds == 3600
        assert cache.coalesce_refresh is True

    def test_fanout_unbounded_by_default(self) -> None:
        assert FanoutSettings().max_concurrency is None


class TestEnvironmentOverrides:
    def test_nested_env_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TIDYCONTEXT__GITHUB__ORG", "tidyverse")
        monkeypatch.setenv("TIDYCONTEXT__CACHE__REPOS_TTL_SECONDS", "60")
        settings = Settings()
        assert settings.github.org == "tidyverse"
        assert settings.cache.repos_ttl_seconds == 60

    def test_constructor_beats_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TIDYCONTEXT__SERVER__PORT", "9000")
        assert Settings(server={"port": 9100}).server.port == 9100


class TestToken:
    def test_no_token_anywhere(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        assert GitHubSettings().resolve_token() is None

    def test_env_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")
        assert GitHubSettings().resolve_token() == "ghp_env"

    def test_configured_token_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")
        assert GitHubSettings(token="ghp_config").resolve_token() == "ghp_config"

    def test_blank_configured_token_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")
        assert GitHubSettings(token="  ").resolve_token() == "ghp_env"

    def test_token_hidden_from_repr(self) -> None:
        assert "ghp_secret" not in repr(GitHubSettings(token="ghp_secret"))


class TestConfigValidation:
    def test_wrong_type_raises_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            Settings(server={"port": "not-a-number"})  # type: ignore[arg-type]

    def test_unknown_top_level_field_raises_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            Settings(completely_unknown_field="oops")  # type: ignore[call-arg]

    def test_unknown_nested_field_raises_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            CacheSettings(repos_ttl_secnds=10)  # type: ignore[call-arg]

    def test_invalid_transport(self) -> None:
        with pytest.raises(ValidationError):
            Settings(server={"transport": "carrier-pigeon"})  # type: ignore[arg-type]

    def test_max_concurrency_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            FanoutSettings(max_concurrency=0)
