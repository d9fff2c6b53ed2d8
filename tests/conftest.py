"""Shared fixtures: settings, a respx router for GitHub, and wired app state."""

from __future__ import annotations

import pytest
import respx

from tidycontext.config import Settings
from tidycontext.fetcher import build_http_client
from tidycontext.state import AppState, create_state


@pytest.fixture()
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Default settings, unauthenticated regardless of the host environment."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    return Settings()


@pytest.fixture()
def github():
    """respx router intercepting every httpx request."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture()
async def app_state(settings: Settings, github: respx.MockRouter) -> AppState:
    async with build_http_client(settings.github) as client:
        yield create_state(settings, client)
