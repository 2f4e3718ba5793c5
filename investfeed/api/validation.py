"""API request validation utilities."""
import re
from fastapi import HTTPException

_CODE_PATTERN = re.compile(r'^[A-Z0-9.\-]{1,10}$')


def _validate_code(value: str, label: str) -> str:
    if not value or not value.strip():
        raise HTTPException(status_code=400, detail=f"{label} cannot be empty")

    value = value.upper().strip()

    if not _CODE_PATTERN.match(value):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid {label.lower()} format: '{value}'. Use 1-10 alphanumeric characters."
        )

    return value


def validate_ticker(ticker: str) -> str:
    """Validate and normalize ticker symbol.

    Examples: AAPL, BRK.B, SPY, QQQ, MSFT
    """
    return _validate_code(ticker, "Ticker")


def validate_exchange(exchange: str) -> str:
    """Validate and normalize an exchange code such as NYSE or NASDAQ."""
    return _validate_code(exchange, "Exchange")
