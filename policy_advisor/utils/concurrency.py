"""Bounded-concurrency helpers for provider fan-out.

:func:`throttled_gather` is a drop-in for ``asyncio.gather`` that runs each
awaitable under a semaphore.  The ingestion pipeline uses it to embed the
chunks of one document concurrently while keeping results in input order,
so chunk indices stay aligned with chunking order no matter which call
finishes first.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

_T = TypeVar("_T")


async def throttled_gather(
    coros: list[Awaitable[_T]],
    semaphore: asyncio.Semaphore | None = None,
    limit: int = 4,
    return_exceptions: bool = False,
) -> list[_T | BaseException]:
    """Run awaitables concurrently, at most *limit* at a time.

    Parameters
    ----------
    coros:
        Awaitable objects to execute.
    semaphore:
        Optional shared semaphore.  When omitted a fresh one of size
        *limit* is created for this call.
    limit:
        Concurrency bound used when no semaphore is supplied.  Values
        below 1 are treated as 1.
    return_exceptions:
        Mirrors ``asyncio.gather``.  Defaults to ``False`` so the first
        failure propagates to the caller.

    Returns
    -------
    list
        Results in the same order as *coros*.
    """
    if semaphore is None:
        semaphore = asyncio.Semaphore(max(1, limit))

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    tasks = [asyncio.ensure_future(_wrapped(c)) for c in coros]
    try:
        return await asyncio.gather(*tasks, return_exceptions=return_exceptions)
    except BaseException:
        # Stop siblings still queued behind the semaphore.
        for task in tasks:
            task.cancel()
        raise
