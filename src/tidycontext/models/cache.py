from __future__ import annotations

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict

from tidycontext.models.github import RepositoryRecord


class CacheSnapshot(BaseModel):
    """Whole-collection copy of the organization's repositories.

    Either empty (never fetched, or the organization listed no repositories)
    or fully populated; replaced wholesale, never patched.
    """

    model_config = ConfigDict(frozen=True)

    repositories: tuple[RepositoryRecord, ...] = ()
    captured_at: float | None = None  # clock() reading at refresh time

    @property
    def is_empty(self) -> bool:
        return not self.repositories


class ContentKey(NamedTuple):
    """Content cache key. A tuple key, so no separator can collide."""

    repo: str
    path: str
