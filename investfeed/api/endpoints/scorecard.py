from fastapi import APIRouter, Depends

from investfeed.api.dependencies import get_aggregator
from investfeed.api.validation import validate_ticker
from investfeed.schemas.scorecard import Scorecard
from investfeed.services.data_aggregator import DataAggregator

router = APIRouter(prefix="/api/stock", tags=["scorecard"])


@router.get("/{ticker}/health-score", response_model=Scorecard)
def get_health_score(ticker: str, aggregator: DataAggregator = Depends(get_aggregator)):
    """Always 200: fetch failures are reported in the scorecard summary."""
    ticker = validate_ticker(ticker)
    return aggregator.compute_health_score(ticker)
