"""
In-process response cache.

A ResponseCache is a named set of independent regions. Each region has its own
TTL and entry cap; entries are evicted in insertion order (a refresh via put
counts as a new insertion, a hit does not). Failed fetches are cached the same
way as successful ones so a broken provider is not hammered within the TTL.
"""
import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Hashable

from investfeed.config import Settings
from investfeed.schemas.cache import CacheRegionStats

logger = logging.getLogger(__name__)

QUOTES = "quotes"
COMPANY_OVERVIEW = "companyOverview"
EARNINGS = "earnings"
SECTOR_PERFORMANCE = "sectorPerformance"
SECTOR_PE = "sectorPE"
INDUSTRY_PE = "industryPE"


def _is_stale(fetched_at: float, ttl_seconds: float, now: float) -> bool:
    return now - fetched_at >= ttl_seconds


class CacheRegion:
    def __init__(
        self,
        name: str,
        ttl_seconds: float,
        max_entries: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries < 1:
            raise ValueError(f"Cache region '{name}' needs max_entries >= 1, got {max_entries}")
        if ttl_seconds <= 0:
            raise ValueError(f"Cache region '{name}' needs a positive TTL, got {ttl_seconds}")
        self.name = name
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[Hashable, tuple[Any, float]] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get(self, key: Hashable) -> tuple[Any, bool]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None, False
            value, fetched_at = entry
            if _is_stale(fetched_at, self.ttl_seconds, self._clock()):
                # left in place; swept on the next put
                self.misses += 1
                return None, False
            self.hits += 1
            return value, True

    def put(self, key: Hashable, value: Any) -> None:
        with self._lock:
            now = self._clock()
            self._sweep(now)
            if key in self._entries:
                self._entries.move_to_end(key)
            elif len(self._entries) >= self.max_entries:
                evicted_key, _ = self._entries.popitem(last=False)
                self.evictions += 1
                logger.debug(f"Cache region {self.name} full, evicted {evicted_key!r}")
            self._entries[key] = (value, now)

    def invalidate(self, key: Hashable) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def purge_expired(self) -> int:
        with self._lock:
            return self._sweep(self._clock())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> CacheRegionStats:
        with self._lock:
            return CacheRegionStats(
                name=self.name,
                ttl_seconds=self.ttl_seconds,
                max_entries=self.max_entries,
                size=len(self._entries),
                hits=self.hits,
                misses=self.misses,
                evictions=self.evictions,
            )

    def _sweep(self, now: float) -> int:
        # Entries are ordered by stamp, so expired ones sit at the front.
        removed = 0
        while self._entries:
            _, fetched_at = next(iter(self._entries.values()))
            if not _is_stale(fetched_at, self.ttl_seconds, now):
                break
            self._entries.popitem(last=False)
            removed += 1
        return removed


class ResponseCache:
    def __init__(self, regions: list[CacheRegion]):
        self._regions: dict[str, CacheRegion] = {}
        for region in regions:
            if region.name in self._regions:
                raise ValueError(f"Duplicate cache region '{region.name}'")
            self._regions[region.name] = region

    @classmethod
    def from_settings(cls, settings: Settings, clock: Callable[[], float] = time.monotonic) -> "ResponseCache":
        policies = [
            (QUOTES, settings.quote_cache_ttl, settings.quote_cache_size),
            (COMPANY_OVERVIEW, settings.overview_cache_ttl, settings.overview_cache_size),
            (EARNINGS, settings.earnings_cache_ttl, settings.earnings_cache_size),
            (SECTOR_PERFORMANCE, settings.sector_performance_cache_ttl, settings.sector_performance_cache_size),
            (SECTOR_PE, settings.sector_pe_cache_ttl, settings.sector_pe_cache_size),
            (INDUSTRY_PE, settings.industry_pe_cache_ttl, settings.industry_pe_cache_size),
        ]
        return cls([CacheRegion(name, ttl, size, clock=clock) for name, ttl, size in policies])

    def region(self, name: str) -> CacheRegion:
        try:
            return self._regions[name]
        except KeyError:
            raise KeyError(f"Unknown cache region '{name}'") from None

    def region_names(self) -> list[str]:
        return list(self._regions)

    def get(self, region: str, key: Hashable) -> tuple[Any, bool]:
        return self.region(region).get(key)

    def put(self, region: str, key: Hashable, value: Any) -> None:
        self.region(region).put(key, value)

    def get_or_fetch(self, region: str, key: Hashable, fetch: Callable[[], Any]) -> Any:
        """Return the cached outcome for key, or call fetch() and cache whatever it returns.

        Two concurrent misses on one key both fetch; the later put wins.
        """
        value, found = self.get(region, key)
        if found:
            logger.debug(f"Cache hit {region}/{key}")
            return value
        logger.info(f"Cache miss {region}/{key}, fetching")
        value = fetch()
        self.put(region, key, value)
        return value

    def invalidate(self, region: str, key: Hashable) -> bool:
        return self.region(region).invalidate(key)

    def clear(self, region: str | None = None) -> None:
        if region is not None:
            self.region(region).clear()
            return
        for r in self._regions.values():
            r.clear()

    def purge_expired(self) -> int:
        return sum(r.purge_expired() for r in self._regions.values())

    def stats(self) -> list[CacheRegionStats]:
        return [r.stats() for r in self._regions.values()]
