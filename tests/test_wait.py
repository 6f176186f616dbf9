from __future__ import annotations

import pytest

from scaleway_baremetal import (
    DEFAULT_TIMEOUT,
    WaitTimeoutError,
    exponential_interval,
    linear_interval,
    wait_for,
)
from tests.conftest import FakeClock

pytestmark = [pytest.mark.unit]


def scripted(*results: tuple[str, bool] | Exception):
    """Poll function returning (or raising) the given results in order."""
    calls = {"n": 0}

    async def poll() -> tuple[str, bool]:
        result = results[min(calls["n"], len(results) - 1)]
        calls["n"] += 1
        if isinstance(result, Exception):
            raise result
        return result

    return poll, calls


# ─── Interval strategies ─────────────────────────────────────────────


class TestIntervals:
    def test_linear_is_constant(self):
        strategy = linear_interval(5)
        assert [strategy(n) for n in range(4)] == [5, 5, 5, 5]

    def test_exponential_grows_and_caps(self):
        strategy = exponential_interval(1, factor=2, cap=10)
        assert [strategy(n) for n in range(6)] == [1, 2, 4, 8, 10, 10]

    def test_exponential_huge_attempt_is_capped(self):
        assert exponential_interval(1.0, cap=30.0)(100_000) == 30.0

    @pytest.mark.parametrize("kwargs", [
        {"base": -1},
        {"base": 1, "factor": 0.5},
        {"base": 1, "cap": -1},
    ])
    def test_exponential_rejects_invalid(self, kwargs):
        with pytest.raises(ValueError):
            exponential_interval(**kwargs)

    def test_linear_rejects_negative(self):
        with pytest.raises(ValueError):
            linear_interval(-1)


# ─── Driver ──────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_terminal_on_first_attempt_does_not_sleep(clock: FakeClock):
    poll, calls = scripted(("done", True))

    result = await wait_for(poll, interval=linear_interval(5), timeout=60, clock=clock)

    assert result == "done"
    assert calls["n"] == 1
    assert clock.sleeps == []


@pytest.mark.asyncio
async def test_sleeps_interval_between_attempts(clock: FakeClock):
    poll, calls = scripted(("a", False), ("b", False), ("c", True))

    result = await wait_for(
        poll, interval=exponential_interval(1, cap=100), timeout=60, clock=clock,
    )

    assert result == "c"
    assert calls["n"] == 3
    assert clock.sleeps == [1, 2]


@pytest.mark.asyncio
async def test_timeout_call_count_and_elapsed(clock: FakeClock):
    poll, calls = scripted(("pending", False))

    with pytest.raises(WaitTimeoutError) as exc_info:
        await wait_for(poll, interval=linear_interval(5), timeout=60, clock=clock)

    assert calls["n"] == 13
    assert clock.elapsed >= 60
    assert exc_info.value.timeout == 60
    assert exc_info.value.last_value == "pending"


@pytest.mark.asyncio
async def test_never_sleeps_past_deadline(clock: FakeClock):
    poll, calls = scripted(("pending", False))

    with pytest.raises(WaitTimeoutError):
        await wait_for(poll, interval=linear_interval(7), timeout=10, clock=clock)

    assert calls["n"] == 2
    assert clock.sleeps == [7, 3]
    assert clock.elapsed == 10


@pytest.mark.asyncio
@pytest.mark.parametrize("timeout", [None, 0])
async def test_missing_timeout_uses_default(clock: FakeClock, timeout):
    poll, calls = scripted(("pending", False))

    with pytest.raises(WaitTimeoutError) as exc_info:
        await wait_for(poll, interval=linear_interval(100), timeout=timeout, clock=clock)

    assert exc_info.value.timeout == DEFAULT_TIMEOUT
    assert calls["n"] == 4
    assert clock.elapsed == DEFAULT_TIMEOUT


@pytest.mark.asyncio
async def test_poll_error_propagates(clock: FakeClock):
    poll, calls = scripted(("a", False), RuntimeError("boom"))

    with pytest.raises(RuntimeError, match="boom"):
        await wait_for(poll, interval=linear_interval(1), timeout=60, clock=clock)

    assert calls["n"] == 2


@pytest.mark.asyncio
async def test_retry_on_keeps_polling(clock: FakeClock):
    poll, calls = scripted(ConnectionError("flaky"), ("ok", True))

    result = await wait_for(
        poll, interval=linear_interval(1), timeout=60,
        retry_on=(ConnectionError,), clock=clock,
    )

    assert result == "ok"
    assert calls["n"] == 2


@pytest.mark.asyncio
async def test_timeout_chains_last_tolerated_error(clock: FakeClock):
    error = ConnectionError("still flaky")
    poll, _ = scripted(error)

    with pytest.raises(WaitTimeoutError) as exc_info:
        await wait_for(
            poll, interval=linear_interval(5), timeout=10,
            retry_on=(ConnectionError,), clock=clock,
        )

    assert exc_info.value.last_error is error
    assert exc_info.value.__cause__ is error
    assert "still flaky" in str(exc_info.value)


@pytest.mark.asyncio
async def test_timeout_error_is_builtin_timeout(clock: FakeClock):
    poll, _ = scripted(("x", False))

    with pytest.raises(TimeoutError):
        await wait_for(poll, interval=linear_interval(1), timeout=2, clock=clock)


@pytest.mark.asyncio
async def test_real_clock_short_wait():
    poll, calls = scripted(("a", False), ("b", True))

    result = await wait_for(poll, interval=linear_interval(0.01), timeout=5)

    assert result == "b"
    assert calls["n"] == 2
