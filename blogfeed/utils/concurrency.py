"""Shared concurrency primitives for the tag fan-out.

**gather_with_deadline** is an ``asyncio.gather`` replacement for the
fan-out-then-join pattern used by the aggregation service: every awaitable
becomes its own task, the caller suspends at a single join point, and the
results come back in input order.  Exceptions are returned in place rather
than raised, so one failing task never cancels its siblings.  When an
overall deadline is given, tasks still running at the deadline are cancelled
and reported as :class:`asyncio.TimeoutError` instances.

**bounded** wraps an awaitable in an optional semaphore so callers can cap
how many outbound requests are in flight at once.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

import structlog

from blogfeed.utils.logging import get_logger

_T = TypeVar("_T")

_logger: structlog.BoundLogger = get_logger(__name__)


async def bounded(coro: Awaitable[_T], semaphore: asyncio.Semaphore | None) -> _T:
    """Await *coro*, holding *semaphore* for its duration when one is given."""
    if semaphore is None:
        return await coro
    async with semaphore:
        return await coro


async def gather_with_deadline(
    coros: list[Awaitable[_T]],
    deadline: float | None = None,
) -> list[_T | BaseException]:
    """Run awaitables concurrently and join on all of them.

    Parameters
    ----------
    coros:
        Awaitable objects to execute concurrently, one task each.
    deadline:
        Seconds to wait for the whole batch.  ``None`` (or ``0``) waits
        for every task however long it takes.

    Returns
    -------
    list[_T | BaseException]
        One entry per input in the same order: the task's result, the
        exception it raised, or ``asyncio.TimeoutError`` if it was still
        running when the deadline passed.
    """
    if not coros:
        return []

    tasks = [asyncio.ensure_future(c) for c in coros]
    timeout = deadline if deadline else None

    try:
        _done, pending = await asyncio.wait(tasks, timeout=timeout)
    except asyncio.CancelledError:
        # Our caller was cancelled: take the whole batch down with it.
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    if pending:
        _logger.warning("fan_out_deadline_exceeded", pending=len(pending), deadline=deadline)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    results: list[_T | BaseException] = []
    for task in tasks:
        if task in pending:
            results.append(asyncio.TimeoutError(f"deadline of {deadline}s exceeded"))
        elif task.cancelled():
            results.append(asyncio.CancelledError())
        elif task.exception() is not None:
            results.append(task.exception())
        else:
            results.append(task.result())
    return results
