"""
Circuit breaker for external translation providers.

Defaults:
- Opens at a 50% error rate over a 60 second window (min 10 calls)
- Stays open for 30 seconds
- Half-open: lets every Nth call through as a probe; 3 successes out of
  5 probes close it again, otherwise it reopens
"""
import time
from collections import deque
from enum import Enum
from threading import Lock
from typing import Any, Awaitable, Callable, Optional

from multisearch.core.logging import get_logger

logger = get_logger(__name__)

HALF_OPEN_PROBES = 5
HALF_OPEN_REQUIRED_SUCCESSES = 3


class CircuitState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"  # Normal operation
    OPEN = "open"  # Failing, calls rejected
    HALF_OPEN = "half_open"  # Probing recovery


class CircuitBreakerOpenError(Exception):
    """Raised when the breaker rejects a call."""
    pass


class CircuitBreaker:
    """Sliding-window circuit breaker guarding one provider."""

    def __init__(
        self,
        name: str,
        failure_threshold: float = 0.5,
        time_window_seconds: int = 60,
        open_duration_seconds: int = 30,
        half_open_test_percentage: float = 0.1,
        min_requests_for_threshold: int = 10,
        clock: Callable[[], float] = time.time,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.time_window_seconds = time_window_seconds
        self.open_duration_seconds = open_duration_seconds
        self.half_open_test_percentage = half_open_test_percentage
        self.min_requests_for_threshold = min_requests_for_threshold
        self._clock = clock

        self._state = CircuitState.CLOSED
        self._lock = Lock()
        self._history: deque = deque()  # (timestamp, success)
        self._opened_at: Optional[float] = None
        self._half_open_calls = 0
        self._probe_successes = 0
        self._probe_failures = 0

    @property
    def state(self) -> CircuitState:
        with self._lock:
            self._refresh()
            return self._state

    def _refresh(self) -> None:
        now = self._clock()
        cutoff = now - self.time_window_seconds
        while self._history and self._history[0][0] < cutoff:
            self._history.popleft()

        if self._state == CircuitState.OPEN:
            if self._opened_at is not None and now - self._opened_at >= self.open_duration_seconds:
                self._state = CircuitState.HALF_OPEN
                self._half_open_calls = 0
                self._probe_successes = 0
                self._probe_failures = 0
                logger.info("circuit_breaker_half_open", circuit_breaker=self.name)
        elif self._state == CircuitState.CLOSED and len(self._history) >= self.min_requests_for_threshold:
            failures = sum(1 for _, ok in self._history if not ok)
            error_rate = failures / len(self._history)
            if error_rate >= self.failure_threshold:
                self._trip(now)
                logger.warning(
                    "circuit_breaker_opened",
                    circuit_breaker=self.name,
                    error_rate=error_rate,
                    failures=failures,
                    total=len(self._history),
                )

    def _trip(self, now: float) -> None:
        self._state = CircuitState.OPEN
        self._opened_at = now
        self._history.clear()

    def _admit(self) -> None:
        """Raise CircuitBreakerOpenError unless the call may proceed."""
        with self._lock:
            self._refresh()
            if self._state == CircuitState.OPEN:
                raise CircuitBreakerOpenError(f"Circuit breaker {self.name} is OPEN")
            if self._state == CircuitState.HALF_OPEN:
                self._half_open_calls += 1
                every = max(1, int(round(1 / self.half_open_test_percentage)))
                if self._half_open_calls % every != 0:
                    raise CircuitBreakerOpenError(
                        f"Circuit breaker {self.name} is HALF_OPEN, call not selected as probe"
                    )

    def _record(self, success: bool) -> None:
        now = self._clock()
        with self._lock:
            if self._state != CircuitState.HALF_OPEN:
                self._history.append((now, success))
                return

            if success:
                self._probe_successes += 1
            else:
                self._probe_failures += 1

            if self._probe_successes + self._probe_failures < HALF_OPEN_PROBES:
                return
            if self._probe_successes >= HALF_OPEN_REQUIRED_SUCCESSES:
                self._state = CircuitState.CLOSED
                self._opened_at = None
                logger.info(
                    "circuit_breaker_closed",
                    circuit_breaker=self.name,
                    success_count=self._probe_successes,
                    failure_count=self._probe_failures,
                )
            else:
                self._trip(now)
                logger.warning(
                    "circuit_breaker_reopened",
                    circuit_breaker=self.name,
                    success_count=self._probe_successes,
                    failure_count=self._probe_failures,
                )

    async def call_async(self, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        """
        Await func(*args, **kwargs) under breaker protection.

        Raises:
            CircuitBreakerOpenError: the breaker is open or the call was not
                picked as a half-open probe
        """
        self._admit()
        try:
            result = await func(*args, **kwargs)
        except Exception:
            self._record(False)
            raise
        self._record(True)
        return result

    def reset(self) -> None:
        """Force the breaker back to CLOSED with an empty history."""
        with self._lock:
            self._state = CircuitState.CLOSED
            self._opened_at = None
            self._history.clear()

    def get_metrics(self) -> dict:
        """Snapshot for health reporting."""
        with self._lock:
            self._refresh()
            failures = sum(1 for _, ok in self._history if not ok)
            total = len(self._history)
            return {
                "name": self.name,
                "state": self._state.value,
                "recent_requests": total,
                "recent_failures": failures,
                "error_rate": failures / total if total else 0.0,
                "opened_at": self._opened_at,
            }
