"""Lookup flows over the GitHub organization.

``ReferenceResolver`` owns the repository snapshot cache and the content
cache, and combines them with the fetcher and the fan-out helper. Per-item
failures inside a flow become degraded entries, never exceptions. The only
errors a flow raises are the ones with nothing to degrade to: the repository
list unavailable with no snapshot cached, or a failed top-level search.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from tidycontext.aggregate import Ok, fan_out
from tidycontext.cache import ContentCache, RepositoryCache
from tidycontext.errors import ErrorCode, TidyContextError
from tidycontext.models.cache import ContentKey
from tidycontext.models.tools import DocResult, IssueSummary, PackageInfo, PackageSummary
from tidycontext.parsing import parse_description, render_documentation, truncate_readme

if TYPE_CHECKING:
    from tidycontext.config import Settings
    from tidycontext.fetcher import GitHubFetcher
    from tidycontext.models.github import CodeSearchItem, RepositoryRecord

log = structlog.get_logger()

CORE_PACKAGES = frozenset(
    {"parsnip", "recipes", "rsample", "tune", "dials", "workflows", "yardstick"}
)


def is_r_package(repo: RepositoryRecord) -> bool:
    """Heuristic used by the package listing."""
    return repo.language == "R" or repo.name.startswith("r") or repo.name in CORE_PACKAGES


class ReferenceResolver:
    def __init__(
        self,
        fetcher: GitHubFetcher,
        settings: Settings,
        *,
        repo_cache: RepositoryCache | None = None,
        content_cache: ContentCache | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._github = settings.github
        self._max_concurrency = settings.fanout.max_concurrency
        self.repo_cache = repo_cache or RepositoryCache(
            fetcher.list_org_repositories,
            ttl_seconds=settings.cache.repos_ttl_seconds,
            coalesce=settings.cache.coalesce_refresh,
        )
        self.content_cache = content_cache or ContentCache()

    # ------------------------------------------------------------------
    # Pass-throughs
    # ------------------------------------------------------------------

    async def list_repositories(self, force_refresh: bool = False) -> list[RepositoryRecord]:
        snapshot = await self.repo_cache.get(force_refresh)
        return list(snapshot.repositories)

    async def get_repository(self, name: str) -> RepositoryRecord:
        for repo in await self.list_repositories():
            if repo.name == name:
                return repo
        raise TidyContextError(
            code=ErrorCode.NOT_FOUND,
            message=f"Repository not found: {name}",
            suggestion=f"List the {self._github.org} packages to see valid names.",
            recoverable=False,
        )

    async def get_file_content(self, repo: str, path: str) -> str:
        key = ContentKey(repo, path.lstrip("/"))
        return await self.content_cache.get_or_fetch(
            key, lambda: self._fetcher.get_file_text(key.repo, key.path)
        )

    async def search_code(self, query: str, repo: str | None = None) -> list[CodeSearchItem]:
        return await self._fetcher.search_code(self._scoped_query(query, repo))

    async def search_issues(
        self, query: str, repo: str | None = None, state: str = "open"
    ) -> list[IssueSummary]:
        parts = [self._scoped_query(query, repo), "is:issue"]
        if state != "all":
            parts.append(f"state:{state}")
        issues = await self._fetcher.search_issues(" ".join(parts))
        return [
            IssueSummary(
                repository=issue.repository,
                number=issue.number,
                title=issue.title,
                state=issue.state,
                url=issue.url,
                comments=issue.comments,
                labels=[label.name for label in issue.labels],
                created_at=issue.created_at,
                updated_at=issue.updated_at,
            )
            for issue in issues
        ]

    async def list_packages(self, force_refresh: bool = False) -> list[PackageSummary]:
        return [
            PackageSummary(
                name=repo.name,
                description=repo.description,
                stars=repo.stars,
                forks=repo.forks,
                url=repo.url,
                updated_at=repo.updated_at,
            )
            for repo in await self.list_repositories(force_refresh)
            if is_r_package(repo)
        ]

    # ------------------------------------------------------------------
    # Package reference flow
    # ------------------------------------------------------------------

    async def resolve_packages(self, package_filter: str | None = None) -> list[PackageInfo]:
        """Reference cards for every repository whose name contains ``package_filter``.

        Raises only when the repository list itself is unavailable.
        """
        repos = [
            repo
            for repo in await self.list_repositories()
            if not package_filter or package_filter in repo.name
        ]
        outcomes = await fan_out(repos, self._package_info, max_concurrency=self._max_concurrency)

        packages = []
        for repo, outcome in zip(repos, outcomes, strict=True):
            if isinstance(outcome, Ok):
                packages.append(outcome.value)
            else:
                log.info("package_manifest_unavailable", repo=repo.name, reason=outcome.reason)
                packages.append(self._reduced_info(repo))
        return packages

    async def _package_info(self, repo: RepositoryRecord) -> PackageInfo:
        manifest = await self.get_file_content(repo.name, self._github.manifest_path)
        try:
            readme = await self.get_file_content(repo.name, self._github.readme_path)
        except TidyContextError as exc:
            log.debug("readme_unavailable", repo=repo.name, error=exc.message)
            readme = ""

        fields = parse_description(manifest, repo.description)
        return PackageInfo(
            name=repo.name,
            title=fields.title,
            version=fields.version,
            description=fields.description,
            depends=fields.depends,
            imports=fields.imports,
            suggests=fields.suggests,
            stars=repo.stars,
            open_issues=repo.open_issues,
            url=repo.url,
            language=repo.language,
            updated_at=repo.updated_at,
            readme_excerpt=truncate_readme(readme),
        )

    @staticmethod
    def _reduced_info(repo: RepositoryRecord) -> PackageInfo:
        return PackageInfo(
            name=repo.name,
            description=repo.description,
            stars=repo.stars,
            open_issues=repo.open_issues,
            url=repo.url,
            language=repo.language,
            updated_at=repo.updated_at,
        )

    # ------------------------------------------------------------------
    # Function documentation search flow
    # ------------------------------------------------------------------

    async def search_docs(self, query: str, package_name: str | None = None) -> list[DocResult]:
        """Roxygen documentation mentioning ``query`` in the organization's R sources."""
        search = f"{self._scoped_query(query, package_name)} path:{self._github.doc_file_extension}"
        items = await self._fetcher.search_code(search, per_page=self._github.doc_search_per_page)
        items = items[: self._github.doc_search_per_page]

        async def document(item: CodeSearchItem) -> str:
            text = await self.get_file_content(item.repository.name, item.path)
            return render_documentation(text, query)

        outcomes = await fan_out(items, document, max_concurrency=self._max_concurrency)

        results = []
        for item, outcome in zip(items, outcomes, strict=True):
            entry = DocResult(repository=item.repository.name, path=item.path, url=item.url)
            if isinstance(outcome, Ok):
                entry.documentation = outcome.value
            else:
                entry.error = f"Failed to fetch content: {outcome.reason}"
            results.append(entry)
        return results

    def _scoped_query(self, query: str, repo: str | None) -> str:
        org = self._github.org
        if repo:
            return f"org:{org} repo:{org}/{repo} {query}"
        return f"org:{org} {query}"
