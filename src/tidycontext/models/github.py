"""GitHub REST response shapes, validated at the fetch boundary.

Only the fields the server uses are declared; anything else GitHub sends is
ignored. Field names are ours, aliases are GitHub's.
"""

from __future__ import annotations

import base64
import binascii
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from tidycontext.errors import ErrorCode, TidyContextError

_UNSAFE_SEGMENTS = frozenset({"", ".", ".."})


def clean_content_path(path: str) -> str:
    """Return ``path`` relative to the repository root.

    A leading ``/`` is dropped. Empty, ``.`` and ``..`` segments are rejected
    with ``ValueError``: the URL joiner would resolve them and let a request
    leave ``/repos/{org}/{repo}/contents/``.
    """
    path = path.lstrip("/")
    if path and any(segment in _UNSAFE_SEGMENTS for segment in path.split("/")):
        raise ValueError(f"Invalid path: {path!r}")
    return path


def check_repo_name(repo: str) -> str:
    if repo in _UNSAFE_SEGMENTS or "/" in repo:
        raise ValueError(f"Invalid repo: {repo!r}")
    return repo


class RepositoryRecord(BaseModel):
    """One organization repository as returned by ``GET /orgs/{org}/repos``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str | None = None
    stars: int = Field(default=0, alias="stargazers_count")
    forks: int = Field(default=0, alias="forks_count")
    open_issues: int = Field(default=0, alias="open_issues_count")
    url: str = Field(alias="html_url")
    language: str | None = None
    updated_at: str | None = None


class FileDescriptor(BaseModel):
    """Single-file response from the contents API."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    path: str
    type: Literal["file", "symlink", "submodule"] = "file"
    encoding: str | None = None
    content: str | None = None
    html_url: str | None = None

    def decoded_text(self) -> str:
        """Decode the payload to text. Only base64 payloads are accepted."""
        if self.encoding != "base64" or self.content is None:
            raise TidyContextError(
                code=ErrorCode.FETCH_FAILED,
                message=f"Invalid file data format for {self.path}",
                suggestion="The path may point at a submodule or a file too large to inline.",
                recoverable=False,
            )
        try:
            return base64.b64decode(self.content).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise TidyContextError(
                code=ErrorCode.FETCH_FAILED,
                message=f"Could not decode {self.path}: {exc}",
                recoverable=False,
            ) from exc


class DirectoryEntry(BaseModel):
    """One element of a directory listing from the contents API."""

    name: str
    path: str
    type: str
    size: int = 0
    html_url: str | None = None


class RepositoryRef(BaseModel):
    name: str
    full_name: str | None = None


class CodeSearchItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    repository: RepositoryRef
    path: str
    url: str = Field(alias="html_url")


class CodeSearchResponse(BaseModel):
    total_count: int = 0
    items: list[CodeSearchItem] = []


class IssueLabel(BaseModel):
    name: str


class IssueRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    number: int
    title: str
    state: str
    url: str = Field(alias="html_url")
    repository_url: str = ""
    created_at: str | None = None
    updated_at: str | None = None
    comments: int = 0
    labels: list[IssueLabel] = []

    @property
    def repository(self) -> str:
        # https://api.github.com/repos/<org>/<name>
        return self.repository_url.rstrip("/").rsplit("/", 1)[-1]


class IssueSearchResponse(BaseModel):
    total_count: int = 0
    items: list[IssueRecord] = []
