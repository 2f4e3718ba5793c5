from functools import lru_cache

from fastapi import HTTPException

from investfeed.config import get_settings
from investfeed.schemas.errors import FetchError
from investfeed.services.data_aggregator import DataAggregator

# FetchError kind -> HTTP status returned to API callers
ERROR_STATUS = {
    "config": 503,
    "transport": 502,
    "parse": 502,
    "upstream": 502,
    "empty": 404,
}


@lru_cache
def get_aggregator() -> DataAggregator:
    """Process-wide aggregator, so every request shares one response cache."""
    return DataAggregator(get_settings())


def unwrap(result):
    """Return result unchanged, or raise the HTTPException matching a FetchError."""
    if isinstance(result, FetchError):
        raise HTTPException(
            status_code=ERROR_STATUS.get(result.kind, 502),
            detail=result.model_dump(),
        )
    return result
