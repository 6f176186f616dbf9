"""Retry policy for transient HTTP answers.

Example:
    async for attempt in retrying(on=on_status_code(429, 503), max_attempts=3):
        with attempt:
            data = await http.request("GET", "/servers")
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeAlias

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from scaleway_baremetal.observability.logger import logger

RetryPredicate: TypeAlias = Callable[[BaseException], bool]

_log = logger.bind(component="retry")


def on_status_code(*codes: int) -> RetryPredicate:
    """Predicate matching exceptions whose `status` attribute is one of codes."""

    def predicate(e: BaseException) -> bool:
        return getattr(e, "status", None) in codes

    return predicate


def _log_retry(state: RetryCallState) -> None:
    if state.outcome is None or state.next_action is None:
        return
    _log.warning(
        "Retry {attempt} after {error}. Waiting {delay:.1f}s...",
        attempt=state.attempt_number,
        error=state.outcome.exception(),
        delay=state.next_action.sleep,
    )


def retrying(
    *,
    on: RetryPredicate,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
) -> AsyncRetrying:
    """Build an async retry loop with exponential backoff.

    The last exception is re-raised unchanged once attempts run out.
    """
    return AsyncRetrying(
        retry=retry_if_exception(on),
        stop=stop_after_attempt(max(1, max_attempts)),
        wait=wait_exponential(multiplier=base_delay, max=max_delay),
        before_sleep=_log_retry,
        reraise=True,
    )
