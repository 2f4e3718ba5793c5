import logging
import math
from datetime import date
from typing import Callable

import httpx

from investfeed.schemas.errors import FetchError
from investfeed.services.cache_manager import INDUSTRY_PE, SECTOR_PE, ResponseCache
from investfeed.services.error_classifier import FMP
from investfeed.services.provider_client import ProviderClient

logger = logging.getLogger(__name__)


def _parse_pe(value) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        pe = float(value)
    else:
        try:
            pe = float(str(value).strip())
        except ValueError:
            return None
    return pe if math.isfinite(pe) else None


class FmpService(ProviderClient):
    """Financial Modeling Prep v4 valuation ratios, keyed by exchange."""

    family = FMP

    def __init__(
        self,
        api_key: str,
        base_url: str,
        cache: ResponseCache,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
        today: Callable[[], date] = date.today,
    ):
        super().__init__(api_key, base_url, cache, timeout=timeout, transport=transport)
        self.today = today

    def get_sector_pe(self, exchange: str) -> dict[str, float] | FetchError:
        result = self.cache.get_or_fetch(
            SECTOR_PE,
            exchange,
            lambda: self._fetch_pe_ratios("sector P/E", "/sector_price_earning_ratio", "sector", exchange),
        )
        return dict(result) if isinstance(result, dict) else result

    def get_industry_pe(self, exchange: str) -> dict[str, float] | FetchError:
        result = self.cache.get_or_fetch(
            INDUSTRY_PE,
            exchange,
            lambda: self._fetch_pe_ratios("industry P/E", "/industry_price_earning_ratio", "industry", exchange),
        )
        return dict(result) if isinstance(result, dict) else result

    def _fetch_pe_ratios(self, service: str, path: str, name_field: str, exchange: str) -> dict[str, float] | FetchError:
        current_date = self.today().isoformat()
        logger.info(f"Fetching FMP {service} ratios for exchange: {exchange}, date: {current_date}")
        payload, error = self._get(service, exchange, path, params={"date": current_date, "exchange": exchange})
        if error:
            return error

        if not isinstance(payload, list):
            return self.classifier.empty(service, exchange, "expected a JSON array", snippet=str(payload))
        if not payload:
            return self.classifier.empty(service, exchange, f"Empty data array (exchange: {exchange}, date: {current_date})")

        result: dict[str, float] = {}
        for item in payload:
            if not isinstance(item, dict):
                continue
            name = item.get(name_field)
            raw_pe = item.get("pe")
            if not name or raw_pe is None:
                continue
            pe = _parse_pe(raw_pe)
            if pe is None:
                logger.warning(f"Could not parse P/E value '{raw_pe}' for {name_field} '{name}'")
                continue
            # first occurrence of a duplicate name wins
            result.setdefault(str(name), pe)

        if not result:
            logger.warning(f"No usable {service} rows for exchange {exchange} on {current_date}")
        else:
            logger.info(f"Successfully fetched FMP {service} ratios for exchange: {exchange}, date: {current_date}")
        return result
