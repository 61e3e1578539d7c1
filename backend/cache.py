"""In-memory result cache keyed by rounded coordinate.

Entries expire lazily: a stale entry is dropped when it is next read. There
is no background eviction and no lock; callers sharing one cache across
threads must synchronize access themselves.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable

import config
from models import Coordinate, Pub

logger = logging.getLogger(__name__)


def cache_key(coordinate: Coordinate, precision: int = config.CACHE_PRECISION) -> str:
    return f"{coordinate.latitude:.{precision}f},{coordinate.longitude:.{precision}f}"


@dataclass(frozen=True)
class CacheEntry:
    results: tuple[Pub, ...]
    fetched_at: float


class PubCache:
    def __init__(self, ttl_s: float = config.CACHE_TTL_S, clock: Callable[[], float] = time.monotonic):
        self.ttl_s = ttl_s
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> list[Pub] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        age = self._clock() - entry.fetched_at
        if age >= self.ttl_s:
            logger.debug("Cache entry %s expired (age %.0fs)", key, age)
            del self._entries[key]
            return None
        return [pub.model_copy(deep=True) for pub in entry.results]

    def put(self, key: str, results: list[Pub]) -> None:
        # Pub.tags is a plain dict, so stored and returned pubs are copies
        results = tuple(pub.model_copy(deep=True) for pub in results)
        self._entries[key] = CacheEntry(results=results, fetched_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries
