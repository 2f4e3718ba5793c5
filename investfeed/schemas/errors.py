"""
Upstream failure taxonomy.

Every failed provider call resolves to exactly one of these variants, whichever
provider produced it. The ``kind`` field is the discriminator used when the
error travels as JSON.
"""
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class FetchError(BaseModel):
    kind: str
    service: str  # operation that failed, e.g. "quote", "sectorPE"
    key: str = ""  # symbol or exchange the call was made for
    message: str

    model_config = {"frozen": True}

    def describe(self) -> str:
        """Text suitable for showing to a user."""
        return self.message


class ConfigError(FetchError):
    kind: Literal["config"] = "config"


class TransportError(FetchError):
    kind: Literal["transport"] = "transport"
    status_code: int | None = None
    body: str | None = None

    def describe(self) -> str:
        details = []
        if self.status_code is not None:
            details.append(f"HTTP {self.status_code}")
        if self.body:
            details.append(self.body)
        if not details:
            return self.message
        return f"{self.message} (Details: {' - '.join(details)})"


class ParseError(FetchError):
    kind: Literal["parse"] = "parse"
    detail: str = ""  # parser diagnostic
    snippet: str = ""  # start of the offending body

    def describe(self) -> str:
        if self.detail:
            return f"{self.message} (Details: {self.detail})"
        return self.message


class UpstreamError(FetchError):
    kind: Literal["upstream"] = "upstream"
    provider: str = ""
    signal: str = ""  # response key that carried the provider message
    provider_message: str = ""

    def describe(self) -> str:
        return f"{self.message}: {self.provider_message}"


class EmptyResult(FetchError):
    kind: Literal["empty"] = "empty"
    reason: str = ""

    def describe(self) -> str:
        if self.reason:
            return f"{self.message} ({self.reason})"
        return self.message


AnyFetchError = Annotated[
    Union[ConfigError, TransportError, ParseError, UpstreamError, EmptyResult],
    Field(discriminator="kind"),
]
