"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (TIDYCONTEXT__GITHUB__ORG=tidyverse)
  2. tidycontext.yaml       (searched in cwd, then the platform config dir)
  3. Hardcoded defaults

The config file is optional — all fields have sensible defaults. The GitHub
token additionally falls back to the conventional ``GITHUB_TOKEN`` variable.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, ConfigDict, SecretStr, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_CONFIG_DIR = platformdirs.user_config_dir("tidycontext")


def _find_config_file() -> str | None:
    """Return the path of the first tidycontext.yaml found, or None."""
    candidates = [
        Path("tidycontext.yaml"),
        Path(_DEFAULT_CONFIG_DIR) / "tidycontext.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ServerSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    transport: Literal["stdio", "http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8080


class GitHubSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    api_url: str = "https://api.github.com"
    org: str = "tidymodels"
    token: SecretStr | None = None
    timeout_seconds: float = 30.0
    repos_per_page: int = 100
    repos_sort: str = "updated"
    code_search_per_page: int = 100
    doc_search_per_page: int = 50
    issue_search_per_page: int = 30
    doc_file_extension: str = ".R"
    manifest_path: str = "DESCRIPTION"
    readme_path: str = "README.md"

    def resolve_token(self) -> str | None:
        """Configured token, else ``GITHUB_TOKEN``. ``None`` means unauthenticated."""
        if self.token is not None and self.token.get_secret_value().strip():
            return self.token.get_secret_value()
        return os.environ.get("GITHUB_TOKEN") or None


class CacheSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    repos_ttl_seconds: float = 3600.0
    coalesce_refresh: bool = True


class FanoutSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    max_concurrency: int | None = None

    @field_validator("max_concurrency")
    @classmethod
    def validate_max_concurrency(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            raise ValueError("max_concurrency must be >= 1")
        return v


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: TIDYCONTEXT__SERVER__PORT=9090
        env_prefix="TIDYCONTEXT__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    server: ServerSettings = ServerSettings()
    github: GitHubSettings = GitHubSettings()
    cache: CacheSettings = CacheSettings()
    fanout: FanoutSettings = FanoutSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
