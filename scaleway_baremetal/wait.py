"""Generic wait/polling driver.

wait_for polls a coroutine until it reports a terminal result, raises,
or the deadline passes. The delay between attempts comes from an
IntervalStrategy, and time comes from a Clock, so tests can drive the
loop without sleeping.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Protocol, TypeAlias, TypeVar

from .errors import WaitTimeoutError
from .observability.logger import logger

DEFAULT_TIMEOUT = 300.0

T = TypeVar("T")

IntervalStrategy: TypeAlias = Callable[[int], float]
Poll: TypeAlias = Callable[[], Awaitable[tuple[T, bool]]]

_log = logger.bind(component="wait")


# =============================================================================
# Interval Strategies
# =============================================================================


def linear_interval(delay: float) -> IntervalStrategy:
    """Constant `delay` seconds between attempts."""
    if delay < 0:
        raise ValueError(f"delay must be non-negative, got {delay}")
    return lambda _attempt: delay


def exponential_interval(base: float, factor: float = 2.0, cap: float = 60.0) -> IntervalStrategy:
    """`min(cap, base * factor**attempt)` seconds before the next attempt."""
    if base < 0 or factor < 1 or cap < 0:
        raise ValueError(f"invalid exponential interval: {base=}, {factor=}, {cap=}")

    def strategy(attempt: int) -> float:
        try:
            return min(cap, base * factor**attempt)
        except OverflowError:
            return cap

    return strategy


# =============================================================================
# Clock
# =============================================================================


class Clock(Protocol):
    def now(self) -> float: ...

    async def sleep(self, seconds: float) -> None: ...


class MonotonicClock:
    def now(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


# =============================================================================
# Driver
# =============================================================================


async def wait_for(
    poll: Poll[T],
    *,
    interval: IntervalStrategy,
    timeout: float | None = None,
    retry_on: tuple[type[Exception], ...] = (),
    clock: Clock | None = None,
    description: str = "resource",
) -> T:
    """Poll until `poll` returns a terminal result.

    Attempt 0 runs immediately. Attempt n >= 1 runs after sleeping
    `interval(n - 1)` seconds. Sleeping counts against the timeout, and
    the driver never sleeps past the deadline.

    Args:
        poll: Coroutine function returning `(value, terminal)`.
        interval: Delay strategy, from attempt index to seconds.
        timeout: Deadline in seconds. None or 0 means DEFAULT_TIMEOUT.
        retry_on: Exception types that do not end the wait. They are kept
            as the last error and polling continues.
        clock: Time source, MonotonicClock by default.
        description: Name used in log messages.

    Returns:
        The value of the first terminal attempt.

    Raises:
        WaitTimeoutError: If the deadline passes first.
        Exception: Whatever `poll` raises outside of `retry_on`.
    """
    clock = clock or MonotonicClock()
    deadline = timeout or DEFAULT_TIMEOUT
    start = clock.now()

    last_value: T | None = None
    last_error: Exception | None = None
    attempt = 0

    while True:
        try:
            value, terminal = await poll()
        except retry_on as e:
            last_error = e
            _log.debug(
                "Waiting for {description}: attempt {attempt} failed: {error}",
                description=description, attempt=attempt, error=e,
            )
        else:
            last_value, last_error = value, None
            if terminal:
                _log.debug(
                    "Waiting for {description}: terminal after {n} attempts",
                    description=description, n=attempt + 1,
                )
                return value

        delay = max(0.0, interval(attempt))
        remaining = deadline - (clock.now() - start)
        if delay > remaining:
            await clock.sleep(max(0.0, remaining))
            raise _timeout(description, deadline, last_value, last_error)

        await clock.sleep(delay)
        if clock.now() - start > deadline:
            raise _timeout(description, deadline, last_value, last_error)
        attempt += 1


def _timeout(
    description: str,
    deadline: float,
    last_value: object,
    last_error: Exception | None,
) -> WaitTimeoutError:
    _log.warning(
        "Timeout waiting for {description} after {deadline:.1f}s",
        description=description, deadline=deadline,
    )
    error = WaitTimeoutError(deadline, last_value, last_error)
    error.__cause__ = last_error
    return error
