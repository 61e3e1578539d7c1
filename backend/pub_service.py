"""Pub discovery: nearby pubs from Overpass with caching and mock fallback.

find_nearby() never raises. Any failure talking to Overpass (timeout,
transport error, bad status, unreadable body) returns the mock sample set
instead, flagged with is_mock=True, and nothing is cached for that key.

Concurrent calls for the same key are not coalesced; each one that misses
the cache issues its own upstream request.
"""

import logging
import random
import time
from typing import Callable

import httpx

import config
from cache import PubCache, cache_key
from errors import PubDiscoveryError
from mock_data import mock_pubs_near
from models import Coordinate, Pub
from overpass import build_query, fetch_elements, parse_response

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("name", "category", "cuisine", "address")


def search_pubs(pubs: list[Pub], term: str | None) -> list[Pub]:
    """Case-insensitive substring filter over name, category, cuisine and address."""
    if not term:
        return pubs
    needle = term.lower()
    return [
        pub for pub in pubs
        if any(needle in value.lower() for value in (getattr(pub, f) for f in SEARCH_FIELDS) if value)
    ]


class PubService:
    def __init__(
        self,
        endpoint: str = config.OVERPASS_URL,
        ttl_s: float = config.CACHE_TTL_S,
        radius_m: float = config.DEFAULT_RADIUS_M,
        timeout_s: float = config.REQUEST_TIMEOUT_S,
        max_results: int = config.MAX_RESULTS,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
    ):
        self.endpoint = endpoint
        self.radius_m = radius_m
        self.timeout_s = timeout_s
        self.max_results = max_results
        self.cache = PubCache(ttl_s=ttl_s, clock=clock)
        self._client = client
        self._rng = rng or random.Random()

    async def find_nearby(self, coordinate: Coordinate, radius_m: float | None = None) -> list[Pub]:
        radius_m = radius_m if radius_m is not None else self.radius_m
        key = cache_key(coordinate)

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s (%d pubs)", key, len(cached))
            return cached

        logger.info("Cache miss for %s, querying Overpass (radius %.0fm)", key, radius_m)
        try:
            pubs = await self._query(coordinate, radius_m)
        except (PubDiscoveryError, httpx.HTTPError, ValueError) as e:
            logger.warning("Overpass query for %s failed: %s; using mock pubs", key, e)
            return mock_pubs_near(coordinate, self._rng)
        except Exception:
            logger.exception("Unexpected error querying Overpass for %s; using mock pubs", key)
            return mock_pubs_near(coordinate, self._rng)

        self.cache.put(key, pubs)
        logger.info("Found %d pubs near %s", len(pubs), key)
        return pubs

    async def _query(self, coordinate: Coordinate, radius_m: float) -> list[Pub]:
        query = build_query(coordinate, radius_m)
        if self._client is not None:
            payload = await fetch_elements(self._client, self.endpoint, query, self.timeout_s)
        else:
            async with httpx.AsyncClient() as client:
                payload = await fetch_elements(client, self.endpoint, query, self.timeout_s)
        return parse_response(payload, limit=self.max_results)

    def search(self, pubs: list[Pub], term: str | None) -> list[Pub]:
        return search_pubs(pubs, term)

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("Pub cache cleared")
