"""
Retry with linearly increasing backoff.
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    attempts: int = 3,
    delay: float = 2.0,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    description: str = "operation",
) -> T:
    """
    Run an async operation, retrying on failure.

    Waits delay * attempt seconds after each failed attempt. The last
    error is re-raised once all attempts are used.

    Args:
        operation: Zero-argument coroutine factory
        attempts: Total number of tries (at least 1)
        delay: Base delay in seconds
        retry_on: Exception types that trigger a retry
        description: Name used in log messages
    """
    attempts = max(1, attempts)

    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except retry_on as e:
            if attempt == attempts:
                logger.error(f"{description} failed after {attempts} attempts: {e}")
                raise
            logger.warning(f"{description} attempt {attempt}/{attempts} failed: {e}")
            await asyncio.sleep(delay * attempt)

    raise RuntimeError("unreachable")
