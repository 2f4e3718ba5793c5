from fastapi import APIRouter, Depends

from investfeed.api.dependencies import get_aggregator, unwrap
from investfeed.api.validation import validate_ticker
from investfeed.schemas.stock import Earnings
from investfeed.services.data_aggregator import DataAggregator

router = APIRouter(prefix="/api/stock", tags=["earnings"])


@router.get("/{ticker}/earnings", response_model=Earnings)
def get_earnings(ticker: str, aggregator: DataAggregator = Depends(get_aggregator)):
    ticker = validate_ticker(ticker)
    return unwrap(aggregator.get_earnings(ticker))
