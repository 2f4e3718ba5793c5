from investfeed.schemas.cache import CacheRegionStats
from investfeed.schemas.errors import (
    AnyFetchError,
    ConfigError,
    EmptyResult,
    FetchError,
    ParseError,
    TransportError,
    UpstreamError,
)
from investfeed.schemas.scorecard import MetricScore, NormalizedMetric, Scorecard
from investfeed.schemas.stock import Earnings, EarningsEntry, PeerComparison, Quote

__all__ = [
    "AnyFetchError",
    "CacheRegionStats",
    "ConfigError",
    "Earnings",
    "EarningsEntry",
    "EmptyResult",
    "FetchError",
    "MetricScore",
    "NormalizedMetric",
    "ParseError",
    "PeerComparison",
    "Quote",
    "Scorecard",
    "TransportError",
    "UpstreamError",
]
