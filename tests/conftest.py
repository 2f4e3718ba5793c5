from datetime import date

import httpx
import pytest

from investfeed.config import Settings
from investfeed.services.alphavantage_service import AlphaVantageService
from investfeed.services.cache_manager import ResponseCache
from investfeed.services.data_aggregator import DataAggregator
from investfeed.services.fmp_service import FmpService

AV_URL = "https://av.example.test/query"
FMP_URL = "https://fmp.example.test/api/v4"


class ManualClock:
    """Monotonic clock the tests move forward by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeUpstream:
    """Canned provider responses, routed by Alpha Vantage `function` or FMP path."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._routes = {}

    def reply(self, route: str, json=None, text: str | None = None, status: int = 200, exc: type | None = None):
        self._routes[route] = (json, text, status, exc)

    def calls(self, route: str) -> int:
        return sum(1 for r in self.requests if self._route_of(r) == route)

    @staticmethod
    def _route_of(request: httpx.Request) -> str:
        return request.url.params.get("function") or request.url.path.rsplit("/", 1)[-1]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._route_of(request)
        if route not in self._routes:
            raise AssertionError(f"Unexpected upstream call: {request.url}")
        json_body, text, status, exc = self._routes[route]
        if exc is not None:
            raise exc("simulated failure", request=request)
        if json_body is not None:
            return httpx.Response(status, json=json_body)
        return httpx.Response(status, text=text or "")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        alphavantage_api_key="test-av-key",
        alphavantage_url=AV_URL,
        fmp_api_key="test-fmp-key",
        fmp_url=FMP_URL,
    )


@pytest.fixture
def cache(settings, clock):
    return ResponseCache.from_settings(settings, clock=clock)


@pytest.fixture
def alphavantage(cache, upstream):
    return AlphaVantageService("test-av-key", AV_URL, cache, transport=upstream.transport)


@pytest.fixture
def fmp(cache, upstream):
    return FmpService(
        "test-fmp-key",
        FMP_URL,
        cache,
        transport=upstream.transport,
        today=lambda: date(2024, 3, 18),
    )


@pytest.fixture
def aggregator(settings, cache, upstream):
    return DataAggregator(settings, cache=cache, transport=upstream.transport)


@pytest.fixture
def strong_overview():
    return {
        "Symbol": "IBM",
        "ProfitMargin": "0.20",
        "ReturnOnEquityTTM": "0.20",
        "CurrentRatio": "2.0",
        "DebtToEquity": "0.3",
        "QuarterlyRevenueGrowthYOY": "0.12",
        "QuarterlyEarningsGrowthYOY": "0.12",
    }
