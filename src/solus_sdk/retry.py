"""Fixed-delay retry policy for HTTP attempts."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, TypeVar

from .context import Context
from .exceptions import ErrorKind, SolusError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRIES_EXHAUSTED_MESSAGE = "exceeded retry limit"

# fn(attempt) -> (should_retry, error, result)
AttemptFunc = Callable[[int], tuple[bool, BaseException | None, T | None]]


@dataclass(frozen=True)
class RetryPolicy:
    """How many times a failed attempt is repeated and how long to wait.

    ``retries`` counts the attempts made after the first one, so the default
    policy sends at most six requests, one second apart. ``max_attempts`` is
    an absolute ceiling on the total number of attempts whatever ``retries``
    says.
    """

    retries: int = 5
    retry_after: float = 1.0
    max_attempts: int = 10

    def __post_init__(self) -> None:
        if self.retries < 0:
            raise ValueError("retries must be non-negative")
        if self.retry_after < 0:
            raise ValueError("retry_after must be non-negative")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    @property
    def total_attempts(self) -> int:
        return min(self.retries + 1, self.max_attempts)


def should_retry(status_code: int | None, exc: BaseException | None) -> bool:
    """Classify one completed attempt.

    Transport failures, a missing status code (0) and 5xx responses are
    retryable; every other response, 4xx included, is final.
    """
    if exc is not None:
        return True
    if status_code is None:
        return True
    return status_code == 0 or status_code >= 500


def retry(fn: AttemptFunc, policy: RetryPolicy, ctx: Context) -> T | None:
    """Invoke ``fn`` until it stops asking for a retry or the budget runs out.

    ``fn`` receives the 1-based attempt number and returns
    ``(should_retry, error, result)``. A final attempt with an error raises
    that error. When the last allowed attempt still asks for a retry, a
    ``RETRIES_EXHAUSTED`` error chained from the last failure is raised.
    """
    attempt = 1
    while True:
        again, error, result = fn(attempt)
        if not again:
            if error is not None:
                raise error
            return result
        if attempt >= policy.total_attempts:
            raise SolusError(
                ErrorKind.RETRIES_EXHAUSTED,
                RETRIES_EXHAUSTED_MESSAGE,
                cause=error,
            ) from error
        logger.warning(
            "Retrying request after failed attempt",
            extra={"attempt": attempt, "retry_after": policy.retry_after, "error": str(error)},
        )
        ctx.sleep(policy.retry_after)
        attempt += 1
