from pydantic import BaseModel, Field


class Quote(BaseModel):
    symbol: str = "N/A"
    price: str = "N/A"
    volume: str = "N/A"
    latest_trading_day: str = Field("N/A", alias="latestTradingDay")

    model_config = {"frozen": True, "populate_by_name": True}


class EarningsEntry(BaseModel):
    fiscal_date_ending: str = Field("N/A", alias="fiscalDateEnding")
    reported_eps: str = Field("N/A", alias="reportedEPS")

    model_config = {"frozen": True, "populate_by_name": True}


class Earnings(BaseModel):
    symbol: str
    annual_earnings: list[EarningsEntry] = Field([], alias="annualEarnings")
    quarterly_earnings: list[EarningsEntry] = Field([], alias="quarterlyEarnings")

    model_config = {"frozen": True, "populate_by_name": True}


class PeerComparison(BaseModel):
    exchange: str
    requested: str  # sector or industry name as asked for
    matched: str | None = None  # provider's spelling, None when not listed
    pe: float | None = None
    others: dict[str, float] = {}

    model_config = {"frozen": True}
