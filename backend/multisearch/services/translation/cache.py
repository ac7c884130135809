"""
Translation cache.

Key format: translation:{md5(text-target_language)}
TTL: 24 hours, checked on every read; stale entries are evicted lazily on
read (no background sweeper).
"""
import hashlib
import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Optional, Protocol

from multisearch.core.logging import get_logger
from multisearch.models.translation import TranslationResponse

logger = get_logger(__name__)

TRANSLATION_CACHE_TTL_SECONDS = 24 * 60 * 60  # 24h


@dataclass(frozen=True)
class CacheEntry:
    data: TranslationResponse
    timestamp: float


class TranslationCache(Protocol):
    def get(self, key: str) -> Optional[TranslationResponse]:
        ...

    def set(self, key: str, value: TranslationResponse) -> None:
        ...

    def evict(self, key: str) -> None:
        ...

    def clear(self) -> None:
        ...


class InMemoryTTLCache:
    """Process-local TTL cache owned by one TranslationGateway."""

    def __init__(
        self,
        ttl_seconds: float = TRANSLATION_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = Lock()

    def get(self, key: str) -> Optional[TranslationResponse]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            if self._clock() - entry.timestamp >= self.ttl_seconds:
                del self._entries[key]
                logger.debug("translation_cache_entry_expired", key=key)
                return None

            return entry.data

    def set(self, key: str, value: TranslationResponse) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(data=value, timestamp=self._clock())

    def evict(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def hash_text(text: str) -> str:
    """Generate hash for cache keys."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def translation_cache_key(text: str, target_language: str) -> str:
    return f"translation:{hash_text(f'{text}-{target_language}')}"
