"""Bounded retry with exponential backoff for outbound calls.

Only errors the remote side marks as transient (rate limiting, temporary
unavailability) are retried. Anything else, or the last transient error
once attempts run out, propagates to the caller.
"""

import logging
import time
from typing import Callable, Optional, Tuple, Type, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ATTEMPTS = 4
DEFAULT_BASE_DELAY = 2.0
DEFAULT_MAX_DELAY = 60.0


class RateLimitedError(Exception):
    """Transient failure: the remote side asked us to slow down."""

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


def backoff_delay(attempt: int, base_delay: float = DEFAULT_BASE_DELAY, max_delay: float = DEFAULT_MAX_DELAY) -> float:
    """Delay before retry number `attempt` (1-based): base * 2^(attempt-1), capped."""
    return min(base_delay * (2 ** (attempt - 1)), max_delay)


def with_retry(
    func: Callable[[], T],
    attempts: int = DEFAULT_ATTEMPTS,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
    retry_on: Tuple[Type[BaseException], ...] = (RateLimitedError,),
    sleep: Callable[[float], None] = time.sleep,
    description: str = "call",
) -> T:
    """Call func, retrying transient failures.

    Args:
        func: Zero-argument callable.
        attempts: Total attempts including the first (>= 1).
        base_delay: Seconds before the first retry; doubles each time.
        max_delay: Upper bound on a single delay.
        retry_on: Exception types considered transient.
        sleep: Injected for tests.
        description: Used in log messages.

    Returns:
        Whatever func returns.

    Raises:
        The last transient error after `attempts` failures, or the first
        non-transient error immediately.
    """
    if attempts < 1:
        raise ValueError(f"attempts must be >= 1, got {attempts}")

    for attempt in range(1, attempts + 1):
        try:
            return func()
        except retry_on as e:
            if attempt == attempts:
                logger.error(f"{description} failed after {attempts} attempt(s): {e}")
                raise
            delay = backoff_delay(attempt, base_delay, max_delay)
            retry_after = getattr(e, "retry_after", None)
            if retry_after is not None:
                delay = min(max(delay, retry_after), max_delay)
            logger.warning(f"{description} attempt {attempt}/{attempts} failed ({e}); retrying in {delay:.1f}s")
            sleep(delay)

    # Unreachable: the loop either returns or raises
    raise AssertionError("retry loop exited without result")
