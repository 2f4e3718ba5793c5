from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Provider credentials; empty or the documented placeholder means "not configured"
    alphavantage_api_key: str = ""
    alphavantage_url: str = "https://www.alphavantage.co/query"
    fmp_api_key: str = ""
    fmp_url: str = "https://financialmodelingprep.com/api/v4"

    http_timeout: float = 30.0  # seconds

    # Cache TTLs in seconds
    quote_cache_ttl: int = 900  # 15 min
    overview_cache_ttl: int = 86400  # 24h
    earnings_cache_ttl: int = 86400  # 24h
    sector_performance_cache_ttl: int = 3600  # 1h
    sector_pe_cache_ttl: int = 86400  # 24h
    industry_pe_cache_ttl: int = 86400  # 24h

    # Cache capacities (entries per region)
    quote_cache_size: int = 200
    overview_cache_size: int = 500
    earnings_cache_size: int = 500
    sector_performance_cache_size: int = 100
    sector_pe_cache_size: int = 200
    industry_pe_cache_size: int = 500

    log_level: str = "INFO"

    model_config = {"env_file": ".env"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
