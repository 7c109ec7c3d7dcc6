"""Resilience – TenacityRetryPolicy adapter.

Wraps a coroutine factory in :class:`tenacity.AsyncRetrying`.  ``FlagService``
runs it *inside* its single-flight operation, so retries of one refresh never
multiply concurrent fetches.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, TypeVar

import tenacity

from flagsync.kernel.errors import is_retryable
from flagsync.observability.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


def _log_retry(retry_state: tenacity.RetryCallState) -> None:
    outcome = retry_state.outcome
    error = outcome.exception() if outcome is not None else None
    logger.info(
        "retry.attempt_failed",
        attempt=retry_state.attempt_number,
        error=repr(error),
    )


class TenacityRetryPolicy:
    """Retry policy backed by the ``tenacity`` library.

    Parameters
    ----------
    max_attempts:
        Maximum number of call attempts (including the first call).
    wait:
        A ``tenacity`` wait strategy, e.g.
        ``tenacity.wait_exponential(multiplier=1, max=10)``.
        Defaults to ``wait_fixed(1)``.
    retry:
        A ``tenacity`` retry predicate, e.g.
        ``tenacity.retry_if_exception_type(IOError)``.
        Defaults to retrying errors flagged ``retryable`` (:class:`NetworkError`
        and its subclasses).
    reraise:
        Whether to re-raise the original exception after all attempts are
        exhausted.  Defaults to ``True``.
    kwargs:
        Additional keyword arguments forwarded to :class:`tenacity.AsyncRetrying`.

    Example
    -------
    ::

        policy = TenacityRetryPolicy(
            max_attempts=3,
            wait=tenacity.wait_exponential(multiplier=0.5, max=8),
        )
        flags = await policy.execute_async(fetcher.fetch_all)
    """

    def __init__(
        self,
        max_attempts: int = 3,
        wait: Any = None,
        retry: Any = None,
        reraise: bool = True,
        **kwargs: Any,
    ) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts!r}")
        self._max_attempts = max_attempts
        self._wait = wait if wait is not None else tenacity.wait_fixed(1)
        self._retry = retry if retry is not None else tenacity.retry_if_exception(is_retryable)
        self._reraise = reraise
        self._extra_kwargs = kwargs

    @classmethod
    def for_network_errors(cls, max_attempts: int, *, max_wait: float = 8.0) -> TenacityRetryPolicy:
        """Exponential backoff on retryable errors; everything else fails fast."""
        return cls(
            max_attempts=max_attempts,
            wait=tenacity.wait_exponential(multiplier=0.5, max=max_wait),
        )

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def _build_async_retrying(self) -> tenacity.AsyncRetrying:
        return tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(self._max_attempts),
            wait=self._wait,
            retry=self._retry,
            reraise=self._reraise,
            after=_log_retry,
            **self._extra_kwargs,
        )

    async def execute_async(self, func: Callable[[], Awaitable[T]]) -> T:
        """Execute *func* asynchronously with tenacity retry."""
        async for attempt in self._build_async_retrying():
            with attempt:
                result = await func()
        return result  # type: ignore[return-value]


__all__ = ["TenacityRetryPolicy"]
