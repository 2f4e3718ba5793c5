from fastapi import APIRouter, Depends, HTTPException

from investfeed.api.dependencies import get_aggregator
from investfeed.schemas.cache import CacheRegionStats
from investfeed.services.data_aggregator import DataAggregator

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/cache", response_model=list[CacheRegionStats])
def cache_stats(aggregator: DataAggregator = Depends(get_aggregator)):
    """Size, limits and hit/miss counters of every cache region."""
    return aggregator.cache.stats()


@router.delete("/cache")
def clear_cache(region: str | None = None, aggregator: DataAggregator = Depends(get_aggregator)):
    """Drop cached responses, for one region or all of them."""
    if region is not None and region not in aggregator.cache.region_names():
        raise HTTPException(status_code=404, detail=f"Unknown cache region '{region}'")
    aggregator.cache.clear(region)
    cleared = [region] if region is not None else aggregator.cache.region_names()
    return {"message": "Cache cleared", "regions": cleared}
