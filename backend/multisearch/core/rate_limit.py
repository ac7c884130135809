"""
Pluggable rate limiting for the translation gateway.

The gateway asks a RateLimiter before every translation. The default
NoopRateLimiter never limits; SlidingWindowRateLimiter is an opt-in
per-client, in-process sliding window.
"""
import time
from collections import deque
from threading import Lock
from typing import Callable, Deque, Dict, Protocol

from fastapi import Request

from multisearch.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_LIMIT = 60
DEFAULT_WINDOW_SECONDS = 60


class RateLimiter(Protocol):
    def is_rate_limited(self, client_id: str) -> bool:
        ...


class NoopRateLimiter:
    """Never limits. Extension point for a real limiter."""

    def is_rate_limited(self, client_id: str) -> bool:
        return False


class SlidingWindowRateLimiter:
    """
    In-process sliding window counter keyed by client id.

    A call is counted when it is admitted; rejected calls are not counted.
    """

    def __init__(
        self,
        limit: int = DEFAULT_LIMIT,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._history: Dict[str, Deque[float]] = {}
        self._lock = Lock()

    def is_rate_limited(self, client_id: str) -> bool:
        now = self._clock()
        cutoff = now - self.window_seconds
        with self._lock:
            window = self._history.setdefault(client_id, deque())
            while window and window[0] <= cutoff:
                window.popleft()

            if len(window) >= self.limit:
                logger.warning(
                    "rate_limit_exceeded",
                    client_id=client_id[:10] + "..." if len(client_id) > 10 else client_id,
                    count=len(window),
                    limit=self.limit,
                )
                return True

            window.append(now)
            return False

    def reset(self, client_id: str) -> None:
        with self._lock:
            self._history.pop(client_id, None)


def get_client_ip(request: Request) -> str:
    """Extract the client IP used as translation client id."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # First hop is the original client
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    if request.client:
        return request.client.host

    return "anonymous"
