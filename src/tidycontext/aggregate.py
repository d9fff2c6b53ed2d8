"""Concurrent fan-out with all-settle semantics.

``fan_out`` runs one coroutine per item and waits for every one of them.
A failing item never cancels the others, and its exception comes back as a
``Failed`` outcome in that item's slot. The result list always has the same
length and order as the input.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

import structlog

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

log = structlog.get_logger()

I = TypeVar("I")  # noqa: E741
O = TypeVar("O")  # noqa: E741


@dataclass(frozen=True, slots=True)
class Ok(Generic[O]):
    value: O

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Failed:
    error: Exception

    @property
    def ok(self) -> bool:
        return False

    @property
    def reason(self) -> str:
        return str(self.error) or self.error.__class__.__name__


Outcome = Ok[O] | Failed


async def fan_out(
    items: Iterable[I],
    op: Callable[[I], Awaitable[O]],
    *,
    max_concurrency: int | None = None,
) -> list[Outcome[O]]:
    """Apply ``op`` to every item concurrently and collect every outcome.

    ``max_concurrency`` caps in-flight operations; ``None`` means unbounded.
    Cancellation of the caller is not captured and propagates normally.
    """
    items = list(items)
    if not items:
        return []

    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    async def settle(index: int, item: I) -> Outcome[O]:
        try:
            if semaphore is None:
                return Ok(await op(item))
            async with semaphore:
                return Ok(await op(item))
        except Exception as exc:
            log.debug("fanout_item_failed", index=index, error=str(exc))
            return Failed(exc)

    return list(await asyncio.gather(*(settle(i, item) for i, item in enumerate(items))))
