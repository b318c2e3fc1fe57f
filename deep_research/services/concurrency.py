from __future__ import annotations

import asyncio
from typing import Awaitable, Iterable, TypeVar

T = TypeVar("T")


async def gather_bounded(aws: Iterable[Awaitable[T]], limit: int = 0) -> list[T]:
    """Await all awaitables concurrently, preserving input order.

    `limit` caps how many run at once; 0 or less means unbounded.
    Exceptions propagate like `asyncio.gather`.
    """
    items = list(aws)
    if limit <= 0 or len(items) <= limit:
        return list(await asyncio.gather(*items))

    semaphore = asyncio.Semaphore(limit)

    async def run_one(aw: Awaitable[T]) -> T:
        async with semaphore:
            return await aw

    return list(await asyncio.gather(*(run_one(aw) for aw in items)))
