"""Retry policy shared by the upstream clients.

A :class:`RetryPolicy` is a value object describing how many attempts an
operation gets, how long to wait between them and which failures deserve
another attempt. :func:`retry_with_policy` runs an async operation under a
policy. The delay before attempt ``n + 1`` is::

    min(base_delay * backoff_factor ** (n - 1), max_delay) + uniform(0, jitter)
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from anirec.shared.constants import HTTPStatusCodes
from anirec.shared.errors import AniRecError, UpstreamError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_any_error(error: Exception) -> bool:
    return True


def retry_server_error(error: Exception) -> bool:
    """Retry only when the upstream answered with HTTP 500."""
    return (
        isinstance(error, UpstreamError)
        and error.status_code == HTTPStatusCodes.INTERNAL_SERVER_ERROR
    )


@dataclass(frozen=True)
class RetryPolicy:
    """How an operation is retried.

    Attributes:
        max_attempts: Total attempts, including the first one
        base_delay: Delay after the first failed attempt, in seconds
        backoff_factor: Multiplier applied per further attempt
        max_delay: Upper bound on the backoff part of the delay
        jitter: Upper bound of the uniform random delay added on top
        retry_if: Predicate deciding whether a failure is retried
    """

    max_attempts: int = 3
    base_delay: float = 0.5
    backoff_factor: float = 1.5
    max_delay: float | None = None
    jitter: float = 0.0
    retry_if: Callable[[Exception], bool] = retry_any_error

    def compute_delay(self, attempt: int) -> float:
        """Delay in seconds after failed attempt number ``attempt`` (1-based)."""
        delay = self.base_delay * self.backoff_factor ** (attempt - 1)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        if self.jitter > 0:
            delay += random.uniform(0, self.jitter)
        return delay

    def should_retry(self, error: Exception, attempt: int) -> bool:
        return attempt < self.max_attempts and self.retry_if(error)


async def retry_with_policy(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    operation_name: str = "operation",
) -> T:
    """Await ``operation()`` until it succeeds or the policy gives up.

    The last failure is re-raised unchanged. Cancellation is never retried.
    """
    attempt = 1
    while True:
        try:
            return await operation()
        except Exception as e:
            if not policy.should_retry(e, attempt):
                raise

            delay = policy.compute_delay(attempt)
            logger.warning(
                "%s failed (attempt %d/%d), retrying in %.2fs: %s",
                operation_name,
                attempt,
                policy.max_attempts,
                delay,
                e.message if isinstance(e, AniRecError) else e,
                extra={
                    "operation": operation_name,
                    "context": {"attempt": attempt, "delay": delay},
                },
            )
            await asyncio.sleep(delay)
            attempt += 1
