"""Retry utility with exponential backoff.

Supports transient vs permanent failure classification via
retryable_exceptions, and a pluggable backoff schedule so a single retry
loop can apply different delays to different failure kinds while sharing
one attempt counter.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from typing import Any

logger = logging.getLogger(__name__)

BackoffFn = Callable[[int, Exception], float]


@dataclass
class RetryState:
    """Transient state of one retried invocation.

    attempt counts completed attempts that failed with a retryable error;
    next_delay is the sleep scheduled before the next attempt.
    """

    attempt: int = 0
    next_delay: float = 0.0


def exponential_backoff(base_delay: float) -> BackoffFn:
    """Return a schedule of base_delay * 2^attempt seconds."""

    def backoff(attempt: int, exc: Exception) -> float:
        return base_delay * (2**attempt)

    return backoff


def retry_with_backoff(
    max_retries: int = 3,
    base_delay: float = 1.0,
    retryable_exceptions: tuple[type[Exception], ...] | None = None,
    backoff: BackoffFn | None = None,
) -> Callable:
    """Decorator for retrying async functions with exponential backoff.

    Delay follows the formula: base_delay * 2^attempt, unless a custom
    backoff callable is supplied.

    Args:
        max_retries: Maximum number of retry attempts (default 3).
        base_delay: Base delay in seconds before first retry (default 1.0).
        retryable_exceptions: Tuple of exception types eligible for retry.
            If None, all exceptions are retried. Non-retryable exceptions
            are re-raised immediately with _retry_count attached.
        backoff: Optional callable ``(attempt, exc) -> seconds`` where
            attempt is zero-based. Overrides the exponential schedule.

    Returns:
        Decorator that wraps an async function with retry logic.

    Raises:
        ValueError: If max_retries is negative.
    """
    if max_retries < 0:
        raise ValueError(f"max_retries must be >= 0, got {max_retries}")
    schedule = backoff or exponential_backoff(base_delay)

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            state = RetryState()
            last_error: Exception | None = None
            for attempt in range(max_retries + 1):
                state.attempt = attempt
                try:
                    return await func(*args, **kwargs)
                except Exception as exc:
                    last_error = exc
                    # Permanent failure: re-raise immediately
                    if retryable_exceptions is not None and not isinstance(
                        exc, retryable_exceptions
                    ):
                        exc._retry_count = attempt  # type: ignore[attr-defined]
                        raise
                    if attempt < max_retries:
                        state.next_delay = schedule(attempt, exc)
                        logger.warning(
                            "Retry %d/%d for %s after %.1fs: %s",
                            attempt + 1,
                            max_retries,
                            func.__name__,
                            state.next_delay,
                            exc,
                            extra={"attempt": attempt + 1},
                        )
                        await asyncio.sleep(state.next_delay)
            # Exhausted all retries, attach retry count before raising
            last_error._retry_count = max_retries  # type: ignore[union-attr]
            raise last_error  # type: ignore[misc]

        return wrapper

    return decorator
