from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, field_validator

from tidycontext.models.github import clean_content_path

_NAME_RE = re.compile(r"^[A-Za-z0-9._-]+$")


def _required(v: str, field: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{field} must not be empty")
    return v


def _optional_name(v: str | None, field: str) -> str | None:
    if v is None:
        return None
    v = v.strip()
    if not v:
        return None
    if not _NAME_RE.match(v):
        raise ValueError(f"Invalid {field}: {v!r}")
    return v


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class ListPackagesInput(BaseModel):
    refresh: bool = False


class PackageDetailsInput(BaseModel):
    package: str

    @field_validator("package")
    @classmethod
    def validate_package(cls, v: str) -> str:
        return _required(v, "package")


class SearchFunctionsInput(BaseModel):
    query: str
    package: str | None = None

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        v = _required(v, "query")
        if len(v) > 256:
            raise ValueError("query must not exceed 256 characters")
        return v

    @field_validator("package")
    @classmethod
    def validate_package(cls, v: str | None) -> str | None:
        return _optional_name(v, "package")


class SearchIssuesInput(BaseModel):
    query: str
    repo: str | None = None
    state: Literal["open", "closed", "all"] = "open"

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        return _required(v, "query")

    @field_validator("repo")
    @classmethod
    def validate_repo(cls, v: str | None) -> str | None:
        return _optional_name(v, "repo")


class GenerateCodeInput(BaseModel):
    task: str
    template: Literal["recipe", "model", "tune", "evaluation"] | None = None

    @field_validator("task")
    @classmethod
    def validate_task(cls, v: str) -> str:
        return _required(v, "task")


class ReadFileInput(BaseModel):
    repo: str
    path: str

    @field_validator("repo")
    @classmethod
    def validate_repo(cls, v: str) -> str:
        v = _required(v, "repo")
        if not _NAME_RE.match(v):
            raise ValueError(f"Invalid repo: {v!r}")
        return v

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        v = clean_content_path(_required(v, "path"))
        if not v:
            raise ValueError("path must not be empty")
        return v


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


class PackageSummary(BaseModel):
    """Row returned by list_tidymodels_packages."""

    name: str
    description: str | None
    stars: int
    forks: int
    url: str
    updated_at: str | None


class PackageInfo(BaseModel):
    """Package reference card.

    Manifest-derived fields stay ``None`` on the reduced record built when the
    DESCRIPTION file could not be fetched; dump with ``exclude_none=True``.
    """

    name: str
    title: str | None = None
    version: str | None = None
    description: str | None = None
    depends: str | None = None
    imports: str | None = None
    suggests: str | None = None
    stars: int
    open_issues: int
    url: str
    language: str | None = None
    updated_at: str | None = None
    readme_excerpt: str | None = None


class DocResult(BaseModel):
    """One code-search hit with its matching roxygen blocks, or an error."""

    repository: str
    path: str
    url: str
    documentation: str | None = None
    error: str | None = None


class IssueSummary(BaseModel):
    repository: str
    number: int
    title: str
    state: str
    url: str
    comments: int
    labels: list[str]
    created_at: str | None
    updated_at: str | None
