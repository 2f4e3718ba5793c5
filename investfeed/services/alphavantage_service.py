import logging

from investfeed.schemas.errors import FetchError
from investfeed.schemas.stock import Earnings, EarningsEntry, Quote
from investfeed.services.cache_manager import (
    COMPANY_OVERVIEW,
    EARNINGS,
    QUOTES,
    SECTOR_PERFORMANCE,
)
from investfeed.services.error_classifier import ALPHA_VANTAGE
from investfeed.services.provider_client import ProviderClient, na

logger = logging.getLogger(__name__)

OVERVIEW_METRICS = [
    "Symbol", "MarketCapitalization", "EBITDA", "PERatio", "EPS",
    "RevenuePerShareTTM", "GrossProfitTTM", "DilutedEPSTTM",
    "QuarterlyEarningsGrowthYOY", "QuarterlyRevenueGrowthYOY",
    "AnalystTargetPrice", "TrailingPE", "ForwardPE", "PriceToSalesRatioTTM",
    "PriceToBookRatio", "EVToRevenue", "EVToEBITDA", "Beta",
    "SharesOutstanding", "DividendYield", "ProfitMargin", "ReturnOnEquityTTM",
    "ReturnOnAssetsTTM", "DebtToEquity", "CurrentRatio", "BookValue",
]

# The SECTOR endpoint takes no symbol; its single cache entry lives under this key.
SECTOR_PERFORMANCE_KEY = "ALL"


def _is_missing(value) -> bool:
    return value is None or value == "" or value == "None"


def _earnings_entries(raw, label: str, symbol: str) -> list[EarningsEntry]:
    if raw is None:
        logger.debug(f"No '{label}' field found for symbol {symbol}")
        return []
    if not isinstance(raw, list):
        logger.warning(f"Expected a list for '{label}' of {symbol}, got {type(raw).__name__}")
        return []
    return [
        EarningsEntry(
            fiscal_date_ending=na(item.get("fiscalDateEnding")),
            reported_eps=na(item.get("reportedEPS")),
        )
        for item in raw
        if isinstance(item, dict)
    ]


class AlphaVantageService(ProviderClient):
    family = ALPHA_VANTAGE

    # --- Quotes ---

    def get_quote(self, symbol: str) -> Quote | FetchError:
        return self.cache.get_or_fetch(QUOTES, symbol, lambda: self._fetch_quote(symbol))

    def _fetch_quote(self, symbol: str) -> Quote | FetchError:
        logger.info(f"Fetching stock data for symbol: {symbol}")
        payload, error = self._get("quote", symbol, params={"function": "GLOBAL_QUOTE", "symbol": symbol})
        if error:
            return error

        global_quote = payload.get("Global Quote") if isinstance(payload, dict) else None
        if not isinstance(global_quote, dict):
            return self.classifier.empty("quote", symbol, "'Global Quote' missing from response", snippet=str(payload))
        if not global_quote:
            return self.classifier.empty("quote", symbol, "'Global Quote' is empty")

        logger.info(f"Successfully fetched stock data for symbol: {symbol}")
        return Quote(
            symbol=na(global_quote.get("01. symbol")),
            price=na(global_quote.get("05. price")),
            volume=na(global_quote.get("06. volume")),
            latest_trading_day=na(global_quote.get("07. latest trading day")),
        )

    # --- Company Overview ---

    def get_company_overview(self, symbol: str) -> dict[str, str] | FetchError:
        result = self.cache.get_or_fetch(COMPANY_OVERVIEW, symbol, lambda: self._fetch_company_overview(symbol))
        if isinstance(result, dict):
            return dict(result)  # callers must not mutate the cached map
        return result

    def _fetch_company_overview(self, symbol: str) -> dict[str, str] | FetchError:
        logger.info(f"Fetching company overview for symbol: {symbol}")
        payload, error = self._get("company overview", symbol, params={"function": "OVERVIEW", "symbol": symbol})
        if error:
            return error

        if not isinstance(payload, dict) or not payload or ("Symbol" in payload and payload["Symbol"] is None):
            return self.classifier.empty(
                "company overview", symbol, "Symbol may be invalid or delisted", snippet=str(payload)
            )

        result = {}
        for metric in OVERVIEW_METRICS:
            value = payload.get(metric)
            if _is_missing(value):
                logger.debug(f"Metric '{metric}' not available for symbol {symbol}")
                result[metric] = "N/A"
            else:
                result[metric] = str(value)
        logger.info(f"Successfully fetched company overview for symbol: {symbol}")
        return result

    # --- Earnings ---

    def get_earnings(self, symbol: str) -> Earnings | FetchError:
        return self.cache.get_or_fetch(EARNINGS, symbol, lambda: self._fetch_earnings(symbol))

    def _fetch_earnings(self, symbol: str) -> Earnings | FetchError:
        logger.info(f"Fetching earnings data for symbol: {symbol}")
        payload, error = self._get("earnings", symbol, params={"function": "EARNINGS", "symbol": symbol})
        if error:
            return error

        if not isinstance(payload, dict) or not payload or ("symbol" in payload and payload["symbol"] is None):
            return self.classifier.empty("earnings", symbol, "Symbol may be invalid or delisted", snippet=str(payload))

        earnings = Earnings(
            symbol=str(payload.get("symbol") or symbol),
            annual_earnings=_earnings_entries(payload.get("annualEarnings"), "annualEarnings", symbol),
            quarterly_earnings=_earnings_entries(payload.get("quarterlyEarnings"), "quarterlyEarnings", symbol),
        )
        logger.info(f"Successfully fetched earnings data for symbol: {symbol}")
        return earnings

    # --- Sector Performance ---

    def get_sector_performance(self) -> dict[str, dict[str, str]] | FetchError:
        result = self.cache.get_or_fetch(SECTOR_PERFORMANCE, SECTOR_PERFORMANCE_KEY, self._fetch_sector_performance)
        if isinstance(result, dict):
            return {rank: dict(sectors) for rank, sectors in result.items()}
        return result

    def _fetch_sector_performance(self) -> dict[str, dict[str, str]] | FetchError:
        logger.info("Fetching sector performance data.")
        payload, error = self._get("sector performance", SECTOR_PERFORMANCE_KEY, params={"function": "SECTOR"})
        if error:
            return error

        if not isinstance(payload, dict):
            return self.classifier.empty(
                "sector performance", SECTOR_PERFORMANCE_KEY, "expected a JSON object", snippet=str(payload)
            )

        result: dict[str, dict[str, str]] = {}  # keeps rank order
        for key, value in payload.items():
            if not key.startswith("Rank "):
                continue
            rank_name = key.split(":", 1)[-1].strip()
            if not isinstance(value, dict):
                logger.warning(f"Expected an object for rank category '{key}', got {type(value).__name__}")
                continue
            result[rank_name] = {str(sector): na(performance) for sector, performance in value.items()}

        if not result:
            return self.classifier.empty(
                "sector performance",
                SECTOR_PERFORMANCE_KEY,
                "Unexpected response format or no 'Rank' categories found",
                snippet=str(payload),
            )
        logger.info("Successfully fetched sector performance data.")
        return result
