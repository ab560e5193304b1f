"""
Fan-Out Scheduler

Architectural Intent:
- The only concurrency primitive in the application layer
- Runs one async worker per item with a fixed ceiling on how many are in
  flight; as each finishes, the next queued item is admitted
- Used once per phase: per-key version listing, then per-version deletion

Failure Isolation:
- Workers are expected to turn their own failures into Outcome values
- A worker that raises anyway does not cancel its siblings; the exception
  object takes its slot in the result list
"""

from __future__ import annotations
import asyncio
import logging
from typing import Awaitable, Callable, Sequence, TypeVar, Union

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 256

ItemT = TypeVar("ItemT")
ResultT = TypeVar("ResultT")


async def map_concurrent(
    items: Sequence[ItemT],
    worker: Callable[[ItemT], Awaitable[ResultT]],
    limit: int = DEFAULT_CONCURRENCY,
) -> list[Union[ResultT, BaseException]]:
    """Apply `worker` to every item, at most `limit` at a time, keeping input order."""
    if limit < 1:
        raise ValueError(f"Concurrency limit must be at least 1, got {limit}")
    if not items:
        return []

    semaphore = asyncio.Semaphore(limit)

    async def admit(item: ItemT) -> ResultT:
        async with semaphore:
            return await worker(item)

    results = await asyncio.gather(
        *(admit(item) for item in items),
        return_exceptions=True,
    )

    failures = sum(1 for r in results if isinstance(r, BaseException))
    if failures:
        logger.warning("%d of %d workers raised", failures, len(results))
    return list(results)
