import httpx
import pytest

from investfeed.schemas.errors import ConfigError, EmptyResult, ParseError, TransportError, UpstreamError
from investfeed.schemas.stock import Earnings, Quote
from investfeed.services.alphavantage_service import OVERVIEW_METRICS, AlphaVantageService

GLOBAL_QUOTE = {
    "Global Quote": {
        "01. symbol": "IBM",
        "02. open": "168.0100",
        "05. price": "169.5000",
        "06. volume": "3954893",
        "07. latest trading day": "2024-03-15",
    }
}


def test_get_quote_maps_global_quote_fields(alphavantage, upstream):
    """The numbered Global Quote keys are reshaped into a Quote"""
    upstream.reply("GLOBAL_QUOTE", json=GLOBAL_QUOTE)

    quote = alphavantage.get_quote("IBM")

    assert isinstance(quote, Quote)
    assert quote.symbol == "IBM"
    assert quote.price == "169.5000"
    assert quote.volume == "3954893"
    assert quote.latest_trading_day == "2024-03-15"


def test_get_quote_defaults_missing_fields_to_na(alphavantage, upstream):
    """Fields the provider leaves out are reported as N/A"""
    upstream.reply("GLOBAL_QUOTE", json={"Global Quote": {"01. symbol": "IBM"}})

    quote = alphavantage.get_quote("IBM")

    assert quote.price == "N/A"
    assert quote.latest_trading_day == "N/A"


def test_get_quote_sends_symbol_and_api_key(alphavantage, upstream):
    """The request carries function, symbol and the credential"""
    upstream.reply("GLOBAL_QUOTE", json=GLOBAL_QUOTE)

    alphavantage.get_quote("IBM")

    params = upstream.requests[0].url.params
    assert params["function"] == "GLOBAL_QUOTE"
    assert params["symbol"] == "IBM"
    assert params["apikey"] == "test-av-key"


def test_repeated_quote_is_served_from_cache(alphavantage, upstream, clock):
    """A second call inside the TTL does not reach the provider"""
    upstream.reply("GLOBAL_QUOTE", json=GLOBAL_QUOTE)

    first = alphavantage.get_quote("IBM")
    clock.advance(600)
    second = alphavantage.get_quote("IBM")

    assert first == second
    assert upstream.calls("GLOBAL_QUOTE") == 1


def test_quote_is_refetched_after_ttl(alphavantage, upstream, clock):
    """Once the 15 minute TTL passes the provider is asked again"""
    upstream.reply("GLOBAL_QUOTE", json=GLOBAL_QUOTE)

    alphavantage.get_quote("IBM")
    clock.advance(900)
    alphavantage.get_quote("IBM")

    assert upstream.calls("GLOBAL_QUOTE") == 2


def test_placeholder_credential_never_calls_provider(settings, cache, upstream):
    """A placeholder key yields ConfigError on the first and the cached call, with no HTTP"""
    service = AlphaVantageService("YOUR_API_KEY", settings.alphavantage_url, cache, transport=upstream.transport)

    first = service.get_quote("IBM")
    second = service.get_quote("IBM")

    assert isinstance(first, ConfigError)
    assert isinstance(second, ConfigError)
    assert upstream.requests == []


def test_missing_credential_is_rejected_at_construction(settings, cache):
    """None is a wiring mistake, not a runtime condition"""
    with pytest.raises(ValueError):
        AlphaVantageService(None, settings.alphavantage_url, cache)


def test_rate_limit_note_is_upstream_error_and_cached(alphavantage, upstream):
    """A throttling note is surfaced verbatim and served from cache on repeat"""
    note = "Thank you for using Alpha Vantage! Please consider spreading out your free API requests."
    upstream.reply("GLOBAL_QUOTE", json={"Note": note})

    first = alphavantage.get_quote("IBM")
    second = alphavantage.get_quote("IBM")

    assert isinstance(first, UpstreamError)
    assert first.provider_message == note
    assert second == first
    assert upstream.calls("GLOBAL_QUOTE") == 1


@pytest.mark.parametrize("body", [{}, {"Global Quote": {}}])
def test_missing_or_empty_global_quote_is_empty_result(alphavantage, upstream, body):
    """An unknown symbol answers with an empty object"""
    upstream.reply("GLOBAL_QUOTE", json=body)

    assert isinstance(alphavantage.get_quote("ZZZZ"), EmptyResult)


def test_server_error_is_transport_error_and_cached(alphavantage, upstream):
    """HTTP 500 is a TransportError and is not retried within the TTL"""
    upstream.reply("GLOBAL_QUOTE", text="Internal Server Error", status=500)

    first = alphavantage.get_quote("IBM")
    alphavantage.get_quote("IBM")

    assert isinstance(first, TransportError)
    assert first.status_code == 500
    assert upstream.calls("GLOBAL_QUOTE") == 1


def test_timeout_is_transport_error(alphavantage, upstream):
    """A timed-out call becomes a cached TransportError"""
    upstream.reply("GLOBAL_QUOTE", exc=httpx.ReadTimeout)

    result = alphavantage.get_quote("IBM")
    repeat = alphavantage.get_quote("IBM")

    assert isinstance(result, TransportError)
    assert "timed out" in result.message
    assert repeat == result
    assert upstream.calls("GLOBAL_QUOTE") == 1


def test_non_json_body_is_parse_error(alphavantage, upstream):
    """An HTML error page is a ParseError"""
    upstream.reply("GLOBAL_QUOTE", text="<html>Service Unavailable</html>")

    result = alphavantage.get_quote("IBM")

    assert isinstance(result, ParseError)
    assert result.snippet.startswith("<html>")


def test_company_overview_projects_known_metrics(alphavantage, upstream):
    """Only the overview allow-list is kept and missing values read N/A"""
    upstream.reply(
        "OVERVIEW",
        json={
            "Symbol": "IBM",
            "Name": "International Business Machines",
            "PERatio": "22.5",
            "EBITDA": "None",
            "Beta": "",
        },
    )

    overview = alphavantage.get_company_overview("IBM")

    assert list(overview) == OVERVIEW_METRICS
    assert overview["Symbol"] == "IBM"
    assert overview["PERatio"] == "22.5"
    assert overview["EBITDA"] == "N/A"
    assert overview["Beta"] == "N/A"
    assert overview["DividendYield"] == "N/A"
    assert "Name" not in overview


def test_company_overview_empty_payload_is_empty_result(alphavantage, upstream):
    """Alpha Vantage answers {} for unknown symbols"""
    upstream.reply("OVERVIEW", json={})

    result = alphavantage.get_company_overview("ZZZZ")

    assert isinstance(result, EmptyResult)
    assert result.service == "company overview"


def test_company_overview_copies_do_not_leak_into_cache(alphavantage, upstream):
    """Mutating a returned overview leaves the cached one intact"""
    upstream.reply("OVERVIEW", json={"Symbol": "IBM", "PERatio": "22.5"})

    first = alphavantage.get_company_overview("IBM")
    first["PERatio"] = "0"
    second = alphavantage.get_company_overview("IBM")

    assert second["PERatio"] == "22.5"
    assert upstream.calls("OVERVIEW") == 1


def test_earnings_are_reshaped(alphavantage, upstream):
    """Annual and quarterly entries keep only date and reported EPS"""
    upstream.reply(
        "EARNINGS",
        json={
            "symbol": "IBM",
            "annualEarnings": [
                {"fiscalDateEnding": "2023-12-31", "reportedEPS": "9.61"},
                {"fiscalDateEnding": "2022-12-31", "reportedEPS": "9.12"},
            ],
            "quarterlyEarnings": [
                {
                    "fiscalDateEnding": "2023-12-31",
                    "reportedDate": "2024-01-24",
                    "reportedEPS": "3.87",
                    "estimatedEPS": "3.78",
                },
                {"fiscalDateEnding": "2023-09-30"},
            ],
        },
    )

    earnings = alphavantage.get_earnings("IBM")

    assert isinstance(earnings, Earnings)
    assert earnings.symbol == "IBM"
    assert [e.reported_eps for e in earnings.annual_earnings] == ["9.61", "9.12"]
    assert earnings.quarterly_earnings[0].fiscal_date_ending == "2023-12-31"
    assert earnings.quarterly_earnings[1].reported_eps == "N/A"


def test_earnings_missing_arrays_become_empty_lists(alphavantage, upstream):
    """A payload without earnings arrays still yields an Earnings value"""
    upstream.reply("EARNINGS", json={"symbol": "IBM"})

    earnings = alphavantage.get_earnings("IBM")

    assert earnings.annual_earnings == []
    assert earnings.quarterly_earnings == []


def test_earnings_serialize_with_provider_field_names(alphavantage, upstream):
    """By-alias dumps use the camelCase names the provider uses"""
    upstream.reply(
        "EARNINGS",
        json={"symbol": "IBM", "annualEarnings": [{"fiscalDateEnding": "2023-12-31", "reportedEPS": "9.61"}]},
    )

    dumped = alphavantage.get_earnings("IBM").model_dump(by_alias=True)

    assert dumped["annualEarnings"] == [{"fiscalDateEnding": "2023-12-31", "reportedEPS": "9.61"}]
    assert dumped["quarterlyEarnings"] == []


def test_sector_performance_rekeys_rank_categories(alphavantage, upstream):
    """Rank keys are renamed to the text after the colon and keep their order"""
    upstream.reply(
        "SECTOR",
        json={
            "Meta Data": {"Information": "US Sector Performance (realtime & historical)"},
            "Rank A: Real-Time Performance": {"Information Technology": "1.25%", "Energy": "-0.40%"},
            "Rank B: 1 Day Performance": {"Energy": "0.80%"},
            "Rank F: Year-to-Date (YTD) Performance": {"Utilities": "3.10%"},
        },
    )

    performance = alphavantage.get_sector_performance()

    assert list(performance) == [
        "Real-Time Performance",
        "1 Day Performance",
        "Year-to-Date (YTD) Performance",
    ]
    assert performance["Real-Time Performance"] == {"Information Technology": "1.25%", "Energy": "-0.40%"}


def test_sector_performance_without_ranks_is_empty_result(alphavantage, upstream):
    """A payload with no Rank categories is an EmptyResult"""
    upstream.reply("SECTOR", json={"Meta Data": {"Last Refreshed": "2024-03-15"}})

    assert isinstance(alphavantage.get_sector_performance(), EmptyResult)


def test_sector_performance_is_cached_under_one_key(alphavantage, upstream):
    """The endpoint takes no symbol so every call shares one entry"""
    upstream.reply("SECTOR", json={"Rank A: Real-Time Performance": {"Energy": "0.10%"}})

    first = alphavantage.get_sector_performance()
    first["Real-Time Performance"]["Energy"] = "changed"
    second = alphavantage.get_sector_performance()

    assert second["Real-Time Performance"]["Energy"] == "0.10%"
    assert upstream.calls("SECTOR") == 1
