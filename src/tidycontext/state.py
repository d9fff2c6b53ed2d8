"""Application state shared by every request handler."""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from tidycontext.fetcher import GitHubFetcher, build_http_client
from tidycontext.resolver import ReferenceResolver

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    import httpx

    from tidycontext.config import Settings

log = structlog.get_logger()


@dataclass
class AppState:
    """Created once at startup, torn down at shutdown. Nothing persists."""

    settings: Settings
    http_client: httpx.AsyncClient
    fetcher: GitHubFetcher
    resolver: ReferenceResolver


def create_state(settings: Settings, http_client: httpx.AsyncClient) -> AppState:
    fetcher = GitHubFetcher(http_client, settings.github)
    return AppState(
        settings=settings,
        http_client=http_client,
        fetcher=fetcher,
        resolver=ReferenceResolver(fetcher, settings),
    )


@asynccontextmanager
async def app_state(settings: Settings) -> AsyncIterator[AppState]:
    async with build_http_client(settings.github) as client:
        state = create_state(settings, client)
        log.info(
            "state_ready",
            org=settings.github.org,
            authenticated=settings.github.resolve_token() is not None,
        )
        yield state
    log.info("state_closed")
