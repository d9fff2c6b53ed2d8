"""GitHub REST fetcher.

One method per upstream endpoint. Each call issues exactly one request on the
shared ``httpx.AsyncClient``; there are no retries and no caching here. Every
failure leaves this module as a ``TidyContextError``:

- 404                               -> NOT_FOUND (not recoverable)
- other non-2xx, network, timeouts  -> FETCH_FAILED (recoverable)
- malformed or undecodable payloads -> FETCH_FAILED (not recoverable)
- dot segments in a repo or path    -> INVALID_INPUT (nothing is sent)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from tidycontext import __version__
from tidycontext.errors import ErrorCode, TidyContextError
from tidycontext.models.github import (
    CodeSearchItem,
    CodeSearchResponse,
    DirectoryEntry,
    FileDescriptor,
    IssueRecord,
    IssueSearchResponse,
    RepositoryRecord,
    check_repo_name,
    clean_content_path,
)

if TYPE_CHECKING:
    from tidycontext.config import GitHubSettings

log = structlog.get_logger()

_REPO_LIST = TypeAdapter(list[RepositoryRecord])
_DIRECTORY = TypeAdapter(list[DirectoryEntry])


def build_http_client(settings: GitHubSettings) -> httpx.AsyncClient:
    """Create the shared client. Authorization is sent only when a token exists."""
    headers = {
        "Accept": "application/vnd.github+json",
        "User-Agent": f"tidycontext/{__version__}",
        "X-GitHub-Api-Version": "2022-11-28",
    }
    token = settings.resolve_token()
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return httpx.AsyncClient(
        base_url=settings.api_url,
        headers=headers,
        timeout=httpx.Timeout(settings.timeout_seconds),
        follow_redirects=True,
    )


class GitHubFetcher:
    def __init__(self, client: httpx.AsyncClient, settings: GitHubSettings) -> None:
        self._client = client
        self._settings = settings

    @property
    def org(self) -> str:
        return self._settings.org

    async def list_org_repositories(self) -> list[RepositoryRecord]:
        data = await self._get_json(
            f"/orgs/{quote(self.org)}/repos",
            params={"per_page": self._settings.repos_per_page, "sort": self._settings.repos_sort},
        )
        return self._validate(_REPO_LIST, data, what="repository list")

    async def get_contents(
        self, repo: str, path: str = ""
    ) -> FileDescriptor | list[DirectoryEntry]:
        data = await self._get_json(self._contents_path(repo, path))
        if isinstance(data, list):
            return self._validate(_DIRECTORY, data, what=f"listing of {repo}/{path}")
        return self._validate(FileDescriptor, data, what=f"{repo}/{path}")

    async def get_file_text(self, repo: str, path: str) -> str:
        """Fetch a single file and return its decoded UTF-8 text."""
        contents = await self.get_contents(repo, path)
        if isinstance(contents, list):
            raise TidyContextError(
                code=ErrorCode.FETCH_FAILED,
                message=f"Invalid file data format for {repo}/{path}: path is a directory",
                suggestion="Request a file path, not a directory.",
                recoverable=False,
            )
        return contents.decoded_text()

    async def search_code(self, query: str, per_page: int | None = None) -> list[CodeSearchItem]:
        data = await self._get_json(
            "/search/code",
            params={"q": query, "per_page": per_page or self._settings.code_search_per_page},
        )
        return self._validate(CodeSearchResponse, data, what="code search").items

    async def search_issues(self, query: str, per_page: int | None = None) -> list[IssueRecord]:
        data = await self._get_json(
            "/search/issues",
            params={"q": query, "per_page": per_page or self._settings.issue_search_per_page},
        )
        return self._validate(IssueSearchResponse, data, what="issue search").items

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _contents_path(self, repo: str, path: str) -> str:
        try:
            repo = check_repo_name(repo)
            path = clean_content_path(path)
        except ValueError as exc:
            raise TidyContextError(
                code=ErrorCode.INVALID_INPUT,
                message=str(exc),
                suggestion="Use a repository name and a path relative to its root.",
                recoverable=False,
            ) from exc
        return f"/repos/{quote(self.org, safe='')}/{quote(repo, safe='')}/contents/{quote(path)}"

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            log.warning("github_request_error", path=path, error=str(exc))
            raise TidyContextError(
                code=ErrorCode.FETCH_FAILED,
                message=f"Request to {path} failed: {exc.__class__.__name__}: {exc}",
                suggestion="GitHub may be unreachable. Try again shortly.",
                recoverable=True,
            ) from exc

        if response.status_code == 404:
            raise TidyContextError(
                code=ErrorCode.NOT_FOUND,
                message=f"Not found: {path}",
                recoverable=False,
            )
        if not response.is_success:
            log.warning("github_bad_status", path=path, status_code=response.status_code)
            suggestion = "GitHub returned an error. Try again shortly."
            if response.status_code in (403, 429):
                suggestion = "Rate limit likely exceeded. Set GITHUB_TOKEN for higher limits."
            raise TidyContextError(
                code=ErrorCode.FETCH_FAILED,
                message=f"HTTP {response.status_code} from {path}",
                suggestion=suggestion,
                recoverable=True,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise TidyContextError(
                code=ErrorCode.FETCH_FAILED,
                message=f"Response from {path} is not valid JSON",
                recoverable=False,
            ) from exc

    @staticmethod
    def _validate(schema: Any, data: Any, *, what: str) -> Any:
        try:
            if isinstance(schema, TypeAdapter):
                return schema.validate_python(data)
            return schema.model_validate(data)
        except ValidationError as exc:
            raise TidyContextError(
                code=ErrorCode.FETCH_FAILED,
                message=f"Unexpected response shape for {what}: {exc.error_count()} error(s)",
                recoverable=False,
            ) from exc
