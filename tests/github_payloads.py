"""GitHub REST payload builders shared by unit and integration tests."""

from __future__ import annotations

import base64
from typing import Any

API_HOST = "api.github.com"
ORG = "tidymodels"


def repo_payload(name: str, **overrides: Any) -> dict[str, Any]:
    """A trimmed ``GET /orgs/{org}/repos`` element."""
    payload = {
        "id": abs(hash(name)) % 100000,
        "name": name,
        "full_name": f"{ORG}/{name}",
        "description": f"{name} description",
        "stargazers_count": 10,
        "forks_count": 2,
        "open_issues_count": 3,
        "html_url": f"https://github.com/{ORG}/{name}",
        "language": "R",
        "updated_at": "2025-01-01T00:00:00Z",
    }
    payload.update(overrides)
    return payload


def file_payload(path: str, text: str) -> dict[str, Any]:
    """A ``GET /repos/{org}/{repo}/contents/{path}`` single-file response."""
    return {
        "name": path.rsplit("/", 1)[-1],
        "path": path,
        "type": "file",
        "encoding": "base64",
        "content": base64.b64encode(text.encode("utf-8")).decode("ascii"),
        "html_url": f"https://github.com/{ORG}/repo/blob/main/{path}",
    }


def search_item(repo: str, path: str) -> dict[str, Any]:
    return {
        "name": path.rsplit("/", 1)[-1],
        "path": path,
        "html_url": f"https://github.com/{ORG}/{repo}/blob/main/{path}",
        "repository": {"name": repo, "full_name": f"{ORG}/{repo}"},
    }


def contents_path(repo: str, path: str) -> str:
    return f"/repos/{ORG}/{repo}/contents/{path}"
