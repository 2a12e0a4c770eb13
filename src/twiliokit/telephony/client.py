"""
Twilio REST transport client.

Builds signed, form-encoded requests against
<base-url>/Accounts/<account-sid>/<endpoint>.json and decodes typed JSON
responses. One attempt per call; errors surface as TwilioError subclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from twiliokit.shared.logging import get_logger
from twiliokit.telephony.calls import Call, OutboundCall
from twiliokit.telephony.config import DEFAULT_API_BASE_URL, TwilioConfig
from twiliokit.telephony.interface import (
    HTTPError,
    InboundRequest,
    NetworkError,
    ParsingError,
    TransmissionError,
    WebhookResponse,
)
from twiliokit.telephony.messages import Message, OutboundMessage
from twiliokit.telephony.twiml import Twiml
from twiliokit.telephony.webhooks import handler

logger = get_logger(__name__)

T = TypeVar("T")

GET = "GET"
POST = "POST"
PUT = "PUT"

_SUCCESS_STATUSES = (200, 201)


def url_encode(params: Sequence[tuple[str, str]]) -> str:
    """Render params as `k=v&` pairs, then escape literal `+` as `%2B`.

    The trailing `&` is part of the wire format Twilio has always received
    from this client. No other escaping is applied.
    """
    encoded = "".join(f"{key}={value}&" for key, value in params)
    return encoded.replace("+", "%2B")


@dataclass(frozen=True)
class ClientIdentity:
    """Account SID and auth token; fixed for the lifetime of a client."""

    account_sid: str
    auth_token: str

    def __repr__(self) -> str:
        return f"ClientIdentity(account_sid={self.account_sid!r}, auth_token='***')"


class TwilioClient:
    """Twilio REST client and webhook entry point.

    Uses httpx.AsyncClient for outbound requests. An injected client is
    never closed by this object.
    """

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        *,
        base_url: str = DEFAULT_API_BASE_URL,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._identity = ClientIdentity(account_sid=account_sid, auth_token=auth_token)
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._http_client = http_client
        self._owns_client = http_client is None

    @classmethod
    def from_config(
        cls,
        config: TwilioConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> TwilioClient:
        return cls(
            config.account_sid,
            config.auth_token,
            base_url=config.api_base_url,
            http_client=http_client,
            timeout=config.timeout_seconds,
        )

    @property
    def identity(self) -> ClientIdentity:
        return self._identity

    def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
        return self._http_client

    async def aclose(self) -> None:
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> TwilioClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _get_auth(self) -> tuple[str, str]:
        return (self._identity.account_sid, self._identity.auth_token)

    def endpoint_url(self, endpoint: str) -> str:
        return f"{self._base_url}/Accounts/{self._identity.account_sid}/{endpoint}.json"

    async def send_request(
        self,
        method: str,
        endpoint: str,
        params: Sequence[tuple[str, str]],
        response_type: type[T],
    ) -> T:
        """Send one request and decode the JSON body into `response_type`.

        Raises:
            NetworkError: the request could not be built.
            TransmissionError: the exchange did not complete.
            HTTPError: status other than 200/201.
            ParsingError: the body does not decode into `response_type`.
        """
        client = self._get_client()
        url = self.endpoint_url(endpoint)

        try:
            request = client.build_request(
                method,
                url,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                content=url_encode(params),
            )
        except (httpx.InvalidURL, httpx.UnsupportedProtocol, ValueError, TypeError) as e:
            raise NetworkError(f"Invalid request: {e!s}", error_code="NETWORK_ERROR") from e

        logger.info(
            "Sending Twilio API request",
            extra={"method": method, "endpoint": endpoint},
        )

        try:
            response = await client.send(request, auth=self._get_auth())
        except httpx.UnsupportedProtocol as e:
            raise NetworkError(f"Invalid request: {e!s}", error_code="NETWORK_ERROR") from e
        except httpx.RequestError as e:
            raise TransmissionError(f"HTTP error: {e!s}", error_code="HTTP_ERROR") from e

        if response.status_code not in _SUCCESS_STATUSES:
            logger.warning(
                "Twilio API returned non-success status",
                extra={
                    "method": method,
                    "endpoint": endpoint,
                    "status_code": response.status_code,
                },
            )
            raise HTTPError(response.status_code, body=response.text)

        try:
            return TypeAdapter(response_type).validate_json(response.content)
        except ValidationError as e:
            raise ParsingError(f"Failed to decode response: {e.error_count()} errors") from e

    async def send_message(self, msg: OutboundMessage) -> Message:
        return await self.send_request(POST, "Messages", msg.to_params(), Message)

    async def make_call(self, call: OutboundCall) -> Call:
        return await self.send_request(POST, "Calls", call.to_params(), Call)

    def parse_request(self, request: InboundRequest, payload_type: type[T]) -> T:
        """Authenticate an inbound webhook and build `payload_type` from its fields."""
        return handler.parse_request(request, payload_type, self._identity.auth_token)

    def respond_to_webhook(
        self,
        request: InboundRequest,
        payload_type: type[T],
        logic: Callable[[T], Twiml],
    ) -> WebhookResponse:
        """Authenticate, parse, run `logic` and render its TwiML as the response."""
        return handler.respond_to_webhook(
            request, payload_type, logic, self._identity.auth_token
        )
