"""Async retry logic with exponential backoff for storage writes."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from gomarketplace.core.constants import (
    CART_WRITE_ATTEMPTS,
    CART_WRITE_INITIAL_DELAY,
    CART_WRITE_MAX_DELAY,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_with_retry(
    func: Callable[[], Awaitable[T]],
    max_attempts: int = CART_WRITE_ATTEMPTS,
    initial_delay: float = CART_WRITE_INITIAL_DELAY,
    max_delay: float = CART_WRITE_MAX_DELAY,
    exponential_base: float = 2.0,
    exceptions: tuple = (Exception,),
    name: str | None = None,
) -> T:
    """Await ``func()`` until it succeeds or ``max_attempts`` is exhausted.

    Args:
        func: Zero-argument coroutine factory, called once per attempt
        max_attempts: Maximum number of attempts (at least 1)
        initial_delay: Delay before the second attempt in seconds
        max_delay: Maximum delay between attempts
        exponential_base: Multiplier applied to the delay after each failure
        exceptions: Tuple of exceptions to catch and retry
        name: Operation name used in log messages

    Raises:
        The last exception raised by ``func`` once all attempts fail.
    """
    label = name or getattr(func, "__name__", "operation")
    attempts = max(1, max_attempts)
    delay = initial_delay
    last_exception: BaseException | None = None

    for attempt in range(attempts):
        try:
            return await func()
        except exceptions as e:
            last_exception = e

            if attempt < attempts - 1:
                logger.warning(
                    f"{label} failed (attempt {attempt + 1}/{attempts}): {e}. "
                    f"Retrying in {delay:.2f}s..."
                )
                await asyncio.sleep(delay)
                delay = min(delay * exponential_base, max_delay)
            else:
                logger.error(f"{label} failed after {attempts} attempts: {e}")

    assert last_exception is not None
    raise last_exception
