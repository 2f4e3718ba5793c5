from pydantic import BaseModel


class CacheRegionStats(BaseModel):
    name: str
    ttl_seconds: float
    max_entries: int
    size: int = 0  # includes expired entries not yet swept
    hits: int = 0
    misses: int = 0
    evictions: int = 0
