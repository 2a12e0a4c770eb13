"""
Core types shared by the Twilio transport client and webhook pipeline.

- error taxonomy (TwilioError and subclasses)
- inbound request / outbound webhook response value types
- FromFields: capability every inbound payload type implements
- MarkupDocument: capability consumed from the TwiML builder
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

import httpx

FieldMap = dict[str, str]


class TwilioError(Exception):
    """Base exception for Twilio client and webhook errors."""

    default_message = "Twilio error"

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
    ) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.error_code = error_code


class NetworkError(TwilioError):
    """The outbound request could not be built (e.g. invalid URL or header)."""

    default_message = "Failed to build request"


class TransmissionError(TwilioError):
    """The transport failed to complete the exchange (DNS, TCP, TLS, timeout)."""

    default_message = "Transmission failed"


class HTTPError(TwilioError):
    """The remote API answered with a non-success status."""

    def __init__(self, status_code: int, body: str | None = None) -> None:
        super().__init__(
            message=f"Invalid HTTP status code: {status_code}",
            error_code=str(status_code),
        )
        self.status_code = status_code
        self.body = body


class ParsingError(TwilioError):
    """A response body or inbound field map did not decode into the target type."""

    default_message = "Parsing error"


class AuthError(TwilioError):
    """Missing X-Twilio-Signature header or signature mismatch."""

    default_message = "Missing or invalid `X-Twilio-Signature` header in request"


class BadRequest(TwilioError):
    """Malformed inbound request shape."""

    default_message = "Bad request"


class FromFields(Protocol):
    """Inbound payload types are constructed from a webhook field map.

    Implementations raise ParsingError when required fields are absent or
    malformed.
    """

    @classmethod
    def from_fields(cls, fields: FieldMap) -> Any: ...


class MarkupDocument(Protocol):
    """A document that serializes to a single response body."""

    content_type: str

    def as_twiml(self) -> str: ...


@dataclass(frozen=True)
class InboundRequest:
    """A fully-read inbound HTTP request handed over by the hosting server.

    `uri` is the request target: path plus optional `?query`.
    Headers are case-insensitive.
    """

    method: str
    uri: str
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: bytes = b""

    def __post_init__(self) -> None:
        if not isinstance(self.headers, httpx.Headers):
            object.__setattr__(self, "headers", httpx.Headers(self.headers))
        object.__setattr__(self, "method", self.method.upper())


@dataclass(frozen=True)
class WebhookResponse:
    """Response returned to the hosting server."""

    status_code: int = 200
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str = ""
