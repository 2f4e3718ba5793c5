from fastapi import APIRouter, Depends

from investfeed.api.dependencies import get_aggregator, unwrap
from investfeed.api.validation import validate_ticker
from investfeed.schemas.stock import Quote
from investfeed.services.data_aggregator import DataAggregator

router = APIRouter(prefix="/api/stock", tags=["stock"])


@router.get("/{ticker}/quote", response_model=Quote)
def get_quote(ticker: str, aggregator: DataAggregator = Depends(get_aggregator)):
    """Latest price, volume and trading day."""
    ticker = validate_ticker(ticker)
    return unwrap(aggregator.get_quote(ticker))


@router.get("/{ticker}/overview", response_model=dict[str, str])
def get_company_overview(ticker: str, aggregator: DataAggregator = Depends(get_aggregator)):
    """Key fundamentals; unavailable metrics are reported as "N/A"."""
    ticker = validate_ticker(ticker)
    return unwrap(aggregator.get_company_overview(ticker))
