from fastapi import APIRouter, Depends, Query

from investfeed.api.dependencies import get_aggregator, unwrap
from investfeed.api.validation import validate_exchange
from investfeed.schemas.stock import PeerComparison
from investfeed.services.data_aggregator import DataAggregator

router = APIRouter(prefix="/api", tags=["sectors"])


@router.get("/sectors/performance", response_model=dict[str, dict[str, str]])
def get_sector_performance(aggregator: DataAggregator = Depends(get_aggregator)):
    """Sector performance by timeframe, e.g. {"Real-Time Performance": {"Energy": "1.02%"}}."""
    return unwrap(aggregator.get_sector_performance())


@router.get("/sectors/pe/{exchange}", response_model=dict[str, float])
def get_sector_pe(exchange: str, aggregator: DataAggregator = Depends(get_aggregator)):
    exchange = validate_exchange(exchange)
    return unwrap(aggregator.get_sector_pe(exchange))


@router.get("/sectors/pe/{exchange}/compare", response_model=PeerComparison)
def compare_sector_pe(
    exchange: str,
    sector: str = Query(..., min_length=1, max_length=100),
    aggregator: DataAggregator = Depends(get_aggregator),
):
    exchange = validate_exchange(exchange)
    return unwrap(aggregator.compare_sector_pe(exchange, sector))


@router.get("/industries/pe/{exchange}", response_model=dict[str, float])
def get_industry_pe(exchange: str, aggregator: DataAggregator = Depends(get_aggregator)):
    exchange = validate_exchange(exchange)
    return unwrap(aggregator.get_industry_pe(exchange))


@router.get("/industries/pe/{exchange}/compare", response_model=PeerComparison)
def compare_industry_pe(
    exchange: str,
    industry: str = Query(..., min_length=1, max_length=100),
    aggregator: DataAggregator = Depends(get_aggregator),
):
    exchange = validate_exchange(exchange)
    return unwrap(aggregator.compare_industry_pe(exchange, industry))
