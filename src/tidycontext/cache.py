"""In-memory caches for GitHub data.

Two caches with different lifetimes live here:

``RepositoryCache`` holds one snapshot of the organization's repository list
and refreshes it once it is older than the TTL. A failed refresh never
replaces the snapshot: callers get the previous one back, and only a failure
with nothing cached propagates as ``FETCH_FAILED``.

``ContentCache`` maps ``(repo, path)`` to decoded file text. Entries never
expire and are never invalidated; a failed fetch stores nothing, so the next
call retries.

Both are plain process-scoped state with no persistence. Under asyncio the
snapshot swap and the dict insert need no locking; the only lock is the
optional single-flight guard around repository refreshes.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

import structlog

from tidycontext.errors import ErrorCode, TidyContextError
from tidycontext.models.cache import CacheSnapshot

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from tidycontext.models.cache import ContentKey
    from tidycontext.models.github import RepositoryRecord

log = structlog.get_logger()


class RepositoryCache:
    """Time-bounded cache of the whole repository collection."""

    def __init__(
        self,
        fetch: Callable[[], Awaitable[Sequence[RepositoryRecord]]],
        ttl_seconds: float = 3600.0,
        *,
        coalesce: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetch = fetch
        self._ttl = ttl_seconds
        self._clock = clock
        self._snapshot = CacheSnapshot()
        self._lock = asyncio.Lock() if coalesce else None
        # Completed refresh attempts; lets waiters see that one finished.
        self._attempts = 0
        self._last_error: TidyContextError | None = None

    @property
    def snapshot(self) -> CacheSnapshot:
        return self._snapshot

    def is_stale(self) -> bool:
        snapshot = self._snapshot
        if snapshot.is_empty or snapshot.captured_at is None:
            return True
        return (self._clock() - snapshot.captured_at) > self._ttl

    async def get(self, force_refresh: bool = False) -> CacheSnapshot:
        if not force_refresh and not self.is_stale():
            return self._snapshot

        if self._lock is None:
            return await self._refresh()

        attempts_seen = self._attempts
        async with self._lock:
            if self._attempts != attempts_seen:
                # A refresh finished while we waited; share its outcome.
                if self._last_error is None or not self._snapshot.is_empty:
                    return self._snapshot
                raise self._fatal(self._last_error)
            return await self._refresh()

    async def _refresh(self) -> CacheSnapshot:
        log.info("repos_refresh_started", cached=len(self._snapshot.repositories))
        try:
            records = await self._fetch()
        except TidyContextError as exc:
            self._attempts += 1
            self._last_error = exc
            if not self._snapshot.is_empty:
                log.warning(
                    "repos_refresh_failed_serving_stale",
                    error=exc.message,
                    cached=len(self._snapshot.repositories),
                )
                return self._snapshot
            log.error("repos_refresh_failed", error=exc.message)
            raise self._fatal(exc) from exc

        snapshot = CacheSnapshot(repositories=tuple(records), captured_at=self._clock())
        self._snapshot = snapshot
        self._attempts += 1
        self._last_error = None
        log.info("repos_refreshed", count=len(snapshot.repositories))
        return snapshot

    @staticmethod
    def _fatal(cause: TidyContextError) -> TidyContextError:
        return TidyContextError(
            code=ErrorCode.FETCH_FAILED,
            message=f"Failed to fetch repositories: {cause.message}",
            suggestion=cause.suggestion,
            recoverable=True,
        )


class ContentCache:
    """Keyed cache of decoded file text. No expiry."""

    def __init__(self) -> None:
        self._entries: dict[ContentKey, str] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    async def get_or_fetch(self, key: ContentKey, fetch: Callable[[], Awaitable[str]]) -> str:
        if key in self._entries:
            log.debug("content_cache_hit", repo=key.repo, path=key.path)
            return self._entries[key]

        content = await fetch()
        # Insert-if-absent: a concurrent fetch of the same key may have won.
        stored = self._entries.setdefault(key, content)
        log.debug("content_cache_stored", repo=key.repo, path=key.path, size=len(stored))
        return stored
