import logging
import time
from typing import Callable

import httpx

from investfeed.analysis.health_scorer import HealthScorer
from investfeed.config import Settings, get_settings
from investfeed.schemas.errors import FetchError
from investfeed.schemas.scorecard import Scorecard
from investfeed.schemas.stock import Earnings, PeerComparison, Quote
from investfeed.services.alphavantage_service import AlphaVantageService
from investfeed.services.cache_manager import ResponseCache
from investfeed.services.fmp_service import FmpService

logger = logging.getLogger(__name__)


def _compare(exchange: str, requested: str, ratios: dict[str, float]) -> PeerComparison:
    matched = next((name for name in ratios if name.lower() == requested.strip().lower()), None)
    return PeerComparison(
        exchange=exchange,
        requested=requested,
        matched=matched,
        pe=ratios[matched] if matched is not None else None,
        others={name: pe for name, pe in ratios.items() if name != matched},
    )


class DataAggregator:
    """Entry point for collaborators: every market-data and scoring call goes through here."""

    def __init__(
        self,
        settings: Settings | None = None,
        cache: ResponseCache | None = None,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        settings = settings or get_settings()
        self.cache = cache or ResponseCache.from_settings(settings, clock=clock)
        self.alphavantage = AlphaVantageService(
            settings.alphavantage_api_key,
            settings.alphavantage_url,
            self.cache,
            timeout=settings.http_timeout,
            transport=transport,
        )
        self.fmp = FmpService(
            settings.fmp_api_key,
            settings.fmp_url,
            self.cache,
            timeout=settings.http_timeout,
            transport=transport,
        )
        self.scorer = HealthScorer()

    def get_quote(self, symbol: str) -> Quote | FetchError:
        return self.alphavantage.get_quote(symbol)

    def get_company_overview(self, symbol: str) -> dict[str, str] | FetchError:
        return self.alphavantage.get_company_overview(symbol)

    def get_earnings(self, symbol: str) -> Earnings | FetchError:
        return self.alphavantage.get_earnings(symbol)

    def get_sector_performance(self) -> dict[str, dict[str, str]] | FetchError:
        return self.alphavantage.get_sector_performance()

    def get_sector_pe(self, exchange: str) -> dict[str, float] | FetchError:
        return self.fmp.get_sector_pe(exchange)

    def get_industry_pe(self, exchange: str) -> dict[str, float] | FetchError:
        return self.fmp.get_industry_pe(exchange)

    def compute_health_score(self, symbol: str) -> Scorecard:
        logger.info(f"Calculating health scorecard for symbol: {symbol}")
        overview = self.get_company_overview(symbol)
        if isinstance(overview, FetchError):
            summary = f"Error fetching company overview: {overview.describe()}"
            logger.error(f"Cannot calculate health score for {symbol}: {summary}")
            return Scorecard(ticker=symbol, score=0, summary_message=summary)
        ticker = overview.get("Symbol")
        return self.scorer.score(overview, ticker=ticker if ticker and ticker != "N/A" else symbol)

    # --- Peer comparison ---

    def compare_sector_pe(self, exchange: str, sector: str) -> PeerComparison | FetchError:
        ratios = self.get_sector_pe(exchange)
        if isinstance(ratios, FetchError):
            return ratios
        return _compare(exchange, sector, ratios)

    def compare_industry_pe(self, exchange: str, industry: str) -> PeerComparison | FetchError:
        ratios = self.get_industry_pe(exchange)
        if isinstance(ratios, FetchError):
            return ratios
        return _compare(exchange, industry, ratios)
