from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from loguru import logger
from tqdm import tqdm

from parallai.core.models import Outcome

"""
Bounded concurrent fan-out.

Runs one async operation per input key with at most `limit` operations in
flight at a time. Results are written into pre-indexed slots, so the order
returned to the caller is always the input order no matter how the
operations interleave. The executor always waits for every key before it
reports anything.
"""

K = TypeVar("K")
R = TypeVar("R")


async def run_bounded(
    count: int,
    limit: int,
    worker: Callable[[int], Awaitable[None]],
    progress_desc: str | None = None,
) -> None:
    """
    Run worker(0) .. worker(count - 1) with at most `limit` running at once.

    Each call holds one semaphore permit for its whole duration and gives it
    back however it finishes. Returns when every call has finished.
    Workers are expected to record their own failures; an exception escaping
    a worker propagates once all workers are done.

    Args:
        count (int): Number of items
        limit (int): Maximum number of concurrent workers (>= 1)
        worker (Callable[[int], Awaitable[None]]): Coroutine function taking the item index
        progress_desc (str | None): Show a tqdm bar with this description when set

    Raises:
        ValueError: If limit is less than 1
    """
    if limit < 1:
        raise ValueError(f"Concurrency limit must be at least 1, got {limit}")

    semaphore = asyncio.Semaphore(limit)
    pbar = tqdm(total=count, desc=progress_desc, unit="req") if progress_desc else None

    async def _guarded(index: int) -> None:
        async with semaphore:
            try:
                await worker(index)
            finally:
                if pbar is not None:
                    pbar.update(1)

    try:
        results = await asyncio.gather(
            *(_guarded(i) for i in range(count)), return_exceptions=True
        )
    finally:
        if pbar is not None:
            pbar.close()

    for result in results:
        if isinstance(result, BaseException):
            raise result


async def fan_out_settled(
    keys: Sequence[K],
    limit: int,
    op: Callable[[K], Awaitable[R]],
    progress: bool = False,
) -> list[Outcome[K, R]]:
    """
    Run op over every key and report each outcome.

    Args:
        keys (Sequence[K]): Input keys
        limit (int): Maximum number of concurrent operations (>= 1)
        op (Callable[[K], Awaitable[R]]): Async operation for a single key
        progress (bool): Show a progress bar

    Returns:
        list[Outcome[K, R]]: One outcome per key, in input order

    Example:
        >>> outcomes = await fan_out_settled(["a", "b"], 4, fetch_model)
        >>> [o.key for o in outcomes if not o.ok]
        ['b']
    """
    outcomes: list[Outcome[K, R]] = [Outcome(key=key) for key in keys]

    async def _run(index: int) -> None:
        slot = outcomes[index]
        try:
            slot.value = await op(slot.key)
        except Exception as e:
            slot.error = e

    await run_bounded(
        len(keys), limit, _run, progress_desc="Completed requests" if progress else None
    )
    return outcomes


async def fan_out(
    keys: Sequence[K],
    limit: int,
    op: Callable[[K], Awaitable[R]],
    progress: bool = False,
) -> list[R]:
    """
    Run op over every key and return all results, or the first failure.

    All keys run to completion first. Then the error slots are scanned in
    input order and the first error found is raised; results of the other
    keys and any further errors are dropped. An empty key list gives an
    empty result; it never means "everything".

    Args:
        keys (Sequence[K]): Input keys
        limit (int): Maximum number of concurrent operations (>= 1)
        op (Callable[[K], Awaitable[R]]): Async operation for a single key
        progress (bool): Show a progress bar

    Returns:
        list[R]: Results in input order

    Raises:
        Exception: The error of the lowest-index failing key
    """
    outcomes = await fan_out_settled(keys, limit, op, progress=progress)

    failed = [o for o in outcomes if not o.ok]
    if failed:
        if len(failed) > 1:
            logger.debug(
                f"{len(failed)} / {len(outcomes)} keys failed; "
                f"reporting the error for {failed[0].key!r}"
            )
        assert failed[0].error is not None
        raise failed[0].error

    return [o.value for o in outcomes]  # type: ignore[misc]
