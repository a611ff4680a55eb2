"""
Bounded retry for flaky operations.

Only the exception types named in `retry_on` are retried; anything else
propagates from the attempt that raised it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from querybot.constants import DEFAULT_QUERY_ATTEMPTS, DEFAULT_QUERY_RETRY_DELAY

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    attempts: int = DEFAULT_QUERY_ATTEMPTS
    delay: float = DEFAULT_QUERY_RETRY_DELAY

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ValueError("attempts must be at least 1")
        if self.delay < 0:
            raise ValueError("delay must not be negative")


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    retry_on: tuple[type[BaseException], ...],
    *,
    sleep: SleepFunc = asyncio.sleep,
    description: str = "operation",
) -> T:
    """Run `operation` up to `policy.attempts` times.

    A fixed `policy.delay` is slept between a failed attempt and the next
    one. When the last attempt fails its error is logged and re-raised.
    """
    for attempt in range(1, policy.attempts + 1):
        try:
            return await operation()
        except retry_on as exc:
            if attempt == policy.attempts:
                logger.error(
                    "%s failed after %d attempts: %s", description, attempt, exc
                )
                raise
            logger.debug(
                "%s attempt %d/%d failed: %s", description, attempt, policy.attempts, exc
            )
            await sleep(policy.delay)
    raise AssertionError("unreachable")  # pragma: no cover
