"""Bounded, fixed-delay retry for async UI steps."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from redeployer.errors import ConfigurationError, DiscoveryError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Retrying cannot change the outcome of these
NON_RETRYABLE_ERRORS = (ConfigurationError, DiscoveryError)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    label: str,
    max_attempts: int,
    delay_seconds: float,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Await operation() up to max_attempts times, sequentially.

    Sleeps delay_seconds between failed attempts (never after the last one).
    Returns the first successful result; re-raises the last failure once
    attempts are exhausted.
    """
    max_attempts = max(1, max_attempts)
    for attempt in range(1, max_attempts + 1):
        logger.info("Attempting %s - attempt %s/%s", label, attempt, max_attempts)
        try:
            return await operation()
        except NON_RETRYABLE_ERRORS:
            raise
        except Exception as e:
            logger.error(
                "Error in %s - attempt %s/%s: %s",
                label,
                attempt,
                max_attempts,
                e,
                exc_info=True,
                extra={"label": label, "attempt": attempt},
            )
            if attempt == max_attempts:
                raise
            await sleep(delay_seconds)
