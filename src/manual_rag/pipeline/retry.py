"""Reusable retry policy returning an outcome instead of raising.

A policy is a maximum attempt count, a backoff function and a predicate
deciding which exceptions are worth another attempt. ``run`` returns
``Success`` or ``Failure``; exceptions the predicate rejects propagate
unchanged.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from manual_rag.errors import ExtractionParseError, RateLimitedError, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# (failed_attempts, exception) -> seconds to wait
Backoff = Callable[[int, BaseException], float]

RETRYABLE_ERRORS: tuple[type[BaseException], ...] = (
    RateLimitedError,
    TransportError,
    ExtractionParseError,
)


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    attempts: int


@dataclass(frozen=True)
class Failure:
    cause: BaseException
    attempts: int


Outcome = Success | Failure


def is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, RETRYABLE_ERRORS)


def rate_limit_aware_backoff(retry_delay: float) -> Backoff:
    """Linear waits after a 429, exponential waits after any other failure.

    After the k-th failed attempt: ``retry_delay * k`` when rate limited,
    ``retry_delay * 2**k`` otherwise.
    """

    def backoff(failed_attempts: int, exc: BaseException) -> float:
        if isinstance(exc, RateLimitedError):
            return retry_delay * failed_attempts
        return retry_delay * 2**failed_attempts

    return backoff


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    backoff: Backoff = field(default_factory=lambda: rate_limit_aware_backoff(2.0))
    retryable: Callable[[BaseException], bool] = is_retryable

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    def run(
        self,
        fn: Callable[[], T],
        sleep: Callable[[float], None] = time.sleep,
        before_attempt: Callable[[int], None] | None = None,
        label: str = "call",
    ) -> Success[T] | Failure:
        """Call ``fn`` until it succeeds or the attempt budget runs out.

        Args:
            fn: Zero-argument callable to invoke.
            sleep: Used for backoff waits.
            before_attempt: Called with the 1-based attempt number before
                every attempt (pacing, deadline checks). Anything it raises
                propagates.
            label: Names the call in log messages.

        Returns:
            ``Success`` with the value, or ``Failure`` with the last
            retryable exception. No wait follows the final attempt.
        """
        attempt = 0
        while True:
            attempt += 1
            if before_attempt is not None:
                before_attempt(attempt)
            try:
                return Success(fn(), attempts=attempt)
            except Exception as exc:
                if not self.retryable(exc):
                    raise
                if attempt >= self.max_attempts:
                    logger.error("Giving up on %s after %d attempts: %s", label, attempt, exc)
                    return Failure(cause=exc, attempts=attempt)
                delay = self.backoff(attempt, exc)
                logger.warning(
                    "Error processing %s, attempt %d/%d: %s; retrying in %.1fs",
                    label, attempt, self.max_attempts, exc, delay,
                )
                sleep(delay)
