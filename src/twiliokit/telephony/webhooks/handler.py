"""
Inbound webhook dispatch.

Received -> authenticate -> parse -> logic -> render.
Authentication and parsing failures become an opaque 400; nothing about the
cause is sent back to the caller.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from twiliokit.shared.logging import get_logger
from twiliokit.telephony.interface import (
    AuthError,
    BadRequest,
    InboundRequest,
    MarkupDocument,
    ParsingError,
    WebhookResponse,
)
from twiliokit.telephony.webhooks.signature import authenticate

logger = get_logger(__name__)

T = TypeVar("T")

ERROR_BODY = "Error."


def parse_request(request: InboundRequest, payload_type: type[T], auth_token: str) -> T:
    """Authenticate `request` and convert its fields with `payload_type.from_fields`."""
    fields = authenticate(request, auth_token)
    return payload_type.from_fields(fields)  # type: ignore[attr-defined]


def render(document: MarkupDocument) -> WebhookResponse:
    body = document.as_twiml()
    return WebhookResponse(
        headers={
            "Content-Type": document.content_type,
            "Content-Length": str(len(body.encode("utf-8"))),
        },
        body=body,
    )


def bad_request() -> WebhookResponse:
    return WebhookResponse(
        status_code=400,
        headers={
            "Content-Type": "text/plain",
            "Content-Length": str(len(ERROR_BODY)),
        },
        body=ERROR_BODY,
    )


def respond_to_webhook(
    request: InboundRequest,
    payload_type: type[T],
    logic: Callable[[T], MarkupDocument],
    auth_token: str,
) -> WebhookResponse:
    """Dispatch one webhook to `logic` and serialize the document it returns.

    Exceptions raised by `logic` propagate to the caller unchanged.
    """
    try:
        payload = parse_request(request, payload_type, auth_token)
    except (AuthError, BadRequest, ParsingError) as e:
        logger.warning(
            "Rejected Twilio webhook",
            extra={"reason": type(e).__name__, "method": request.method},
        )
        return bad_request()

    return render(logic(payload))
