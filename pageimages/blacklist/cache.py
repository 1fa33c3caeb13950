# pageimages/blacklist/cache.py
# Responsibility: Process-wide blacklist of file keys, backed by a shared Redis entry with expiry.

import threading
import time
from functools import lru_cache
from typing import Any, Dict, FrozenSet, List, Optional

from pageimages.blacklist.sources import BlacklistSourceFetcher
from pageimages.config.settings import settings
from pageimages.services.redis_cache import RedisCacheManager


class BlacklistCache:
    """
    Two-tier cache of disallowed images.

    Tier 1 is an in-process memo: once built, a process keeps its snapshot
    until restarted or purged. Tier 2 is a Redis entry shared by all
    processes, rebuilt from the sources when absent or expired. Concurrent
    rebuilds in different processes simply overwrite each other.
    """

    def __init__(
        self,
        cache: Optional[RedisCacheManager] = None,
        fetcher: Optional[BlacklistSourceFetcher] = None,
        sources: Optional[List[Dict[str, Any]]] = None,
        ttl_seconds: Optional[int] = None,
        key: Optional[str] = None
    ):
        self.cache = cache or RedisCacheManager()
        self.fetcher = fetcher or BlacklistSourceFetcher()
        self.sources = list(settings.PAGEIMAGES.BLACKLIST_SOURCES if sources is None else sources)
        self.ttl_seconds = ttl_seconds or settings.PAGEIMAGES.BLACKLIST_EXPIRY_SECONDS
        self.key = key or settings.REDIS.BLACKLIST_KEY

        self.entries: Optional[FrozenSet[str]] = None
        self.fetched_at: Optional[float] = None
        self._lock = threading.Lock()

    def get_blacklist(self) -> FrozenSet[str]:
        """
        Returns the current blacklist snapshot.

        Raises:
            BlacklistConfigurationError: A configured source is malformed.
        """
        if self.entries is not None:
            return self.entries

        with self._lock:
            if self.entries is not None:
                return self.entries

            cached = self.cache.get(self.key)
            if cached is not None:
                self._remember(cached)
                return self.entries

            print(f"[Blacklist] Cache miss, fetching {len(self.sources)} source(s)")
            entries = self._fetch_all()
            self.cache.set(self.key, sorted(entries), self.ttl_seconds)
            self._remember(entries)
            return self.entries

    def _fetch_all(self) -> FrozenSet[str]:
        collected: List[str] = []
        for source in self.sources:
            collected.extend(self.fetcher.fetch(source))
        return frozenset(collected)

    def _remember(self, entries) -> None:
        self.entries = frozenset(entries)
        self.fetched_at = time.time()

    def purge(self) -> None:
        """Drops both the in-process snapshot and the shared Redis entry."""
        with self._lock:
            self.entries = None
            self.fetched_at = None
            self.cache.delete(self.key)


@lru_cache()
def get_blacklist_cache() -> BlacklistCache:
    """Dependency injection provider for the process-wide BlacklistCache."""
    return BlacklistCache()
