import os
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .logger import get_logger

logger = get_logger(__name__)

CACHE_TTL_SECONDS = float(os.getenv("CACHE_TTL_SECONDS", "300"))


@dataclass(frozen=True)
class CacheEntry:
    data: Any
    timestamp: float


class ResponseCache:
    """
    In-memory holder for the last successful fetch per key.

    Entries are never evicted on errors; they only age out by TTL or get
    replaced by the next successful put().
    """

    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[CacheEntry]:
        return self._entries.get(key)

    def put(self, key: str, data: Any) -> CacheEntry:
        entry = CacheEntry(data=data, timestamp=self._clock())
        self._entries[key] = entry
        logger.debug("Cached %r at %.3f", key, entry.timestamp)
        return entry

    def is_valid(self, entry: Optional[CacheEntry]) -> bool:
        if entry is None:
            return False
        return (self._clock() - entry.timestamp) < self.ttl_seconds

    def get_valid(self, key: str) -> Optional[CacheEntry]:
        entry = self.get(key)
        if entry is not None and not self.is_valid(entry):
            logger.debug("Cache entry %r expired (age %.1fs)", key, self._clock() - entry.timestamp)
            return None
        return entry
