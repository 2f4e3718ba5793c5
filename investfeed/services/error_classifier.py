"""
Maps the ways an upstream call can fail onto the FetchError taxonomy.

Checks run in a fixed order and the first match wins:
  1. credential missing or still the placeholder      -> ConfigError
  2. the HTTP call raised (timeout, refused, non-2xx)  -> TransportError
  3. empty body                                       -> EmptyResult
  4. body is not JSON                                 -> ParseError
  5. provider error key in the parsed body            -> UpstreamError
  6. expected payload shape missing (client-specific) -> EmptyResult, via empty()
"""
import json
import logging
from typing import Any

import httpx

from investfeed.schemas.errors import (
    ConfigError,
    EmptyResult,
    FetchError,
    ParseError,
    TransportError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

MAX_SNIPPET_LENGTH = 500


class ProviderFamily:
    """How one family of providers authenticates and reports errors."""

    def __init__(self, name: str, placeholder: str, signal_keys: tuple[str, ...], key_param: str = "apikey"):
        self.name = name
        self.placeholder = placeholder
        self.signal_keys = signal_keys
        self.key_param = key_param

    def __repr__(self) -> str:
        return f"ProviderFamily({self.name!r})"


# Alpha Vantage answers HTTP 200 and reports problems through sentinel keys.
ALPHA_VANTAGE = ProviderFamily(
    "Alpha Vantage",
    placeholder="YOUR_API_KEY",
    signal_keys=("Error Message", "Information", "Note"),
)

# FMP wraps its error object in a one-element array (sometimes a bare object).
FMP = ProviderFamily(
    "FMP",
    placeholder="YOUR_FMP_API_KEY",
    signal_keys=("Error Message",),
)


def truncate(text: str | None, limit: int = MAX_SNIPPET_LENGTH) -> str:
    if not text:
        return ""
    return text[:limit]


class ErrorClassifier:
    def __init__(self, family: ProviderFamily):
        self.family = family

    def check_credential(self, api_key: str | None, service: str, key: str) -> ConfigError | None:
        if api_key and api_key.strip() and api_key != self.family.placeholder:
            return None
        logger.warning(f"{self.family.name} API key is not configured ({service} for {key})")
        return ConfigError(
            service=service,
            key=key,
            message=f"{self.family.name} API key not configured",
        )

    def classify_response(
        self,
        service: str,
        key: str,
        body: str | None = None,
        exc: Exception | None = None,
    ) -> tuple[Any, FetchError | None]:
        """Classify one call outcome after the credential check has passed.

        Returns (parsed_payload, None) when nothing is wrong, otherwise
        (None, error) with exactly one error variant.
        """
        if exc is not None:
            return None, self.from_exception(exc, service, key)

        if body is None or not body.strip():
            logger.warning(f"No response received from {self.family.name} for {service} ({key})")
            return None, EmptyResult(
                service=service,
                key=key,
                message=f"No data received from {self.family.name} for {service}",
                reason="empty response body",
            )

        try:
            payload = json.loads(body)
        except (ValueError, RecursionError) as e:
            logger.warning(f"Failed to parse {self.family.name} {service} response for {key}: {e}")
            return None, ParseError(
                service=service,
                key=key,
                message=f"Failed to parse {self.family.name} {service} response for {key}",
                detail=truncate(str(e)),
                snippet=truncate(body),
            )

        upstream = self.upstream_signal(payload, service, key)
        if upstream:
            return None, upstream
        return payload, None

    def from_exception(self, exc: Exception, service: str, key: str) -> TransportError:
        status_code = None
        body = None
        if isinstance(exc, httpx.HTTPStatusError):
            status_code = exc.response.status_code
            body = truncate(exc.response.text)
            message = f"{self.family.name} returned HTTP {status_code} for {service} ({key})"
        elif isinstance(exc, httpx.TimeoutException):
            message = f"{self.family.name} request timed out for {service} ({key})"
        else:
            message = f"Failed to fetch {self.family.name} {service} data for {key}: {exc}"
        logger.error(message)
        return TransportError(
            service=service,
            key=key,
            message=message,
            status_code=status_code,
            body=body,
        )

    def upstream_signal(self, payload: Any, service: str, key: str) -> UpstreamError | None:
        carrier = payload
        if isinstance(payload, list) and len(payload) == 1:
            carrier = payload[0]
        if not isinstance(carrier, dict):
            return None

        for signal in self.family.signal_keys:
            if signal in carrier:
                provider_message = str(carrier[signal])
                logger.warning(f"{self.family.name} API error/info in {service} for {key}: {provider_message}")
                return UpstreamError(
                    service=service,
                    key=key,
                    message=f"{self.family.name} API error in {service} for {key}",
                    provider=self.family.name,
                    signal=signal,
                    provider_message=provider_message,
                )
        return None

    def empty(self, service: str, key: str, reason: str, snippet: str | None = None) -> EmptyResult:
        """EmptyResult for a payload that parsed fine but lacks the expected data."""
        if snippet:
            logger.warning(f"{self.family.name} {service} for {key}: {reason}. Response: {truncate(snippet)}")
        else:
            logger.warning(f"{self.family.name} {service} for {key}: {reason}")
        return EmptyResult(
            service=service,
            key=key,
            message=f"No {service} data found for {key}",
            reason=reason,
        )
