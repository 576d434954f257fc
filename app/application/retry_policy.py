"""
Retry policy for upstream rate limiting.

Upstream throttles aggressively. Calls that hit a 429 are retried with
exponential backoff:

    attempt 1 -> 429 -> sleep base_delay
    attempt 2 -> 429 -> sleep base_delay * multiplier
    ...
    attempt max_attempts -> 429 -> RateLimitedError

Any other exception ends the call immediately. The pause is an
asyncio.sleep, so only the waiting request is suspended.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from app.config import Settings
from app.domain.entities import RateLimitedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff settings (no jitter)"""

    max_attempts: int = 3
    base_delay_ms: int = 1000
    multiplier: float = 2.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1 (got {self.max_attempts})")

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the given (1-based) failed attempt"""
        return self.base_delay_ms * (self.multiplier ** (attempt - 1)) / 1000

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.retry_max_attempts,
            base_delay_ms=settings.retry_base_delay_ms,
            multiplier=settings.retry_multiplier,
        )


DEFAULT_RETRY_POLICY = RetryPolicy()


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    *,
    description: str = "upstream call",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
) -> T:
    """
    Run an async operation, retrying only on RateLimitedError.

    Args:
        operation: Zero-argument coroutine function to call on each attempt
        policy: Attempt limit and backoff settings
        description: Label used in log messages
        sleep: Awaitable pause (injectable for tests)

    Returns:
        Result of the first successful attempt

    Raises:
        RateLimitedError: Still rate limited after policy.max_attempts attempts
        Exception: Any other error from the operation, unchanged and not retried
    """
    for attempt in range(1, policy.max_attempts + 1):
        try:
            return await operation()
        except RateLimitedError:
            if attempt >= policy.max_attempts:
                logger.error(
                    f"❌ Max retries exceeded for {description} due to rate limiting "
                    f"({policy.max_attempts} attempts)"
                )
                raise

            delay = policy.delay_for(attempt)
            logger.warning(
                f"⚠️ {description} rate limited on attempt {attempt}/{policy.max_attempts}, "
                f"retrying in {delay:.1f}s"
            )
            await sleep(delay)

    raise AssertionError("unreachable")  # Unreachable, but satisfies type checker
