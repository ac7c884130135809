"""
Unit tests for the circuit breaker guarding translation providers.
"""
import pytest

from multisearch.core.circuit_breaker import CircuitBreaker, CircuitBreakerOpenError, CircuitState


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


async def succeed():
    return "success"


async def fail():
    raise RuntimeError("provider down")


async def run_failures(cb, count):
    for _ in range(count):
        with pytest.raises(RuntimeError):
            await cb.call_async(fail)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def breaker(clock):
    return CircuitBreaker(
        "test",
        failure_threshold=0.5,
        time_window_seconds=60,
        open_duration_seconds=30,
        half_open_test_percentage=1.0,
        min_requests_for_threshold=4,
        clock=clock,
    )


@pytest.mark.asyncio
async def test_closed_state_passes_calls(breaker):
    assert breaker.state == CircuitState.CLOSED
    assert await breaker.call_async(succeed) == "success"


@pytest.mark.asyncio
async def test_stays_closed_below_min_requests(breaker):
    await run_failures(breaker, 3)

    assert breaker.state == CircuitState.CLOSED


@pytest.mark.asyncio
async def test_opens_when_error_rate_exceeds_threshold(breaker):
    await breaker.call_async(succeed)
    await run_failures(breaker, 3)

    assert breaker.state == CircuitState.OPEN
    with pytest.raises(CircuitBreakerOpenError):
        await breaker.call_async(succeed)


@pytest.mark.asyncio
async def test_stays_closed_when_error_rate_low(breaker):
    for _ in range(4):
        await breaker.call_async(succeed)
    await run_failures(breaker, 1)

    assert breaker.state == CircuitState.CLOSED


@pytest.mark.asyncio
async def test_old_failures_leave_the_window(breaker, clock):
    await run_failures(breaker, 3)
    clock.advance(61)
    await breaker.call_async(succeed)

    assert breaker.state == CircuitState.CLOSED
    assert breaker.get_metrics()["recent_requests"] == 1


@pytest.mark.asyncio
async def test_half_open_after_open_duration(breaker, clock):
    await run_failures(breaker, 4)
    assert breaker.state == CircuitState.OPEN

    clock.advance(30)

    assert breaker.state == CircuitState.HALF_OPEN


@pytest.mark.asyncio
async def test_half_open_closes_after_successful_probes(breaker, clock):
    await run_failures(breaker, 4)
    assert breaker.state == CircuitState.OPEN
    clock.advance(30)

    for _ in range(5):
        await breaker.call_async(succeed)

    assert breaker.state == CircuitState.CLOSED


@pytest.mark.asyncio
async def test_half_open_reopens_after_failed_probes(breaker, clock):
    await run_failures(breaker, 4)
    assert breaker.state == CircuitState.OPEN
    clock.advance(30)

    await breaker.call_async(succeed)
    await run_failures(breaker, 4)

    assert breaker.state == CircuitState.OPEN


@pytest.mark.asyncio
async def test_half_open_rejects_calls_not_selected_as_probe(clock):
    cb = CircuitBreaker(
        "sampled",
        min_requests_for_threshold=2,
        half_open_test_percentage=0.5,
        clock=clock,
    )
    await run_failures(cb, 2)
    assert cb.state == CircuitState.OPEN
    clock.advance(30)

    with pytest.raises(CircuitBreakerOpenError):
        await cb.call_async(succeed)
    assert await cb.call_async(succeed) == "success"


@pytest.mark.asyncio
async def test_reset(breaker):
    await run_failures(breaker, 4)
    assert breaker.state == CircuitState.OPEN

    breaker.reset()

    assert breaker.state == CircuitState.CLOSED
    assert await breaker.call_async(succeed) == "success"


def test_get_metrics_snapshot(breaker):
    metrics = breaker.get_metrics()

    assert metrics["name"] == "test"
    assert metrics["state"] == "closed"
    assert metrics["recent_requests"] == 0
    assert metrics["error_rate"] == 0.0
