import logging
from typing import Any

import httpx

from investfeed.schemas.errors import FetchError
from investfeed.services.cache_manager import ResponseCache
from investfeed.services.error_classifier import ErrorClassifier, ProviderFamily

logger = logging.getLogger(__name__)


class ProviderClient:
    """Shared GET-and-classify plumbing for one upstream provider family."""

    family: ProviderFamily

    def __init__(
        self,
        api_key: str,
        base_url: str,
        cache: ResponseCache,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        if api_key is None:
            raise ValueError(f"{self.family.name} credential must be a string (empty when unset)")
        if cache is None:
            raise ValueError("A ResponseCache is required")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.cache = cache
        self.timeout = timeout
        self.transport = transport
        self.classifier = ErrorClassifier(self.family)

    def _get(self, service: str, key: str, path: str = "", params: dict | None = None) -> tuple[Any, FetchError | None]:
        config_error = self.classifier.check_credential(self.api_key, service, key)
        if config_error:
            return None, config_error

        params = dict(params or {})
        params[self.family.key_param] = self.api_key
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.get(f"{self.base_url}{path}", params=params)
                resp.raise_for_status()
                body = resp.text
        except httpx.HTTPError as e:
            return self.classifier.classify_response(service, key, exc=e)
        return self.classifier.classify_response(service, key, body=body)


def na(value: Any) -> str:
    """Provider value as display text; missing values become "N/A"."""
    if value is None:
        return "N/A"
    return str(value)
