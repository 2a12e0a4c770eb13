"""
FastAPI adapter for Twilio webhook endpoints.

The core pipeline works on InboundRequest/WebhookResponse; this module reads
the Starlette request (the only inbound suspension point is the body read)
and turns the core response back into a Starlette Response.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from fastapi import APIRouter, Request, Response

from twiliokit.shared.logging import correlation_id_var, get_logger
from twiliokit.telephony.client import TwilioClient
from twiliokit.telephony.interface import InboundRequest, MarkupDocument, WebhookResponse

logger = get_logger(__name__)

WebhookRoute = tuple[type[Any], Callable[[Any], MarkupDocument]]


def _raw_target(request: Request) -> str:
    # Twilio signs the URL as sent, so use the undecoded path and query
    raw_path = request.scope.get("raw_path") or request.scope["path"].encode("utf-8")
    target = raw_path.decode("latin-1")
    query = request.scope.get("query_string", b"").decode("latin-1")
    if query:
        target = f"{target}?{query}"
    return target


async def to_inbound_request(request: Request) -> InboundRequest:
    body = await request.body()
    return InboundRequest(
        method=request.method,
        uri=_raw_target(request),
        headers=request.headers.raw,
        body=body,
    )


def to_http_response(resp: WebhookResponse) -> Response:
    return Response(
        content=resp.body,
        status_code=resp.status_code,
        headers=dict(resp.headers),
    )


def build_router(
    client: TwilioClient,
    routes: Mapping[str, WebhookRoute],
    prefix: str = "",
) -> APIRouter:
    """Register one GET+POST endpoint per path.

    `routes` maps a path to (payload type, logic). Paths not in the table are
    answered 404 by the framework.
    """
    router = APIRouter(prefix=prefix, tags=["twilio-webhooks"])

    for path, (payload_type, logic) in routes.items():
        router.add_api_route(
            path,
            _make_endpoint(client, payload_type, logic),
            methods=["GET", "POST"],
            include_in_schema=False,
        )

    return router


def _make_endpoint(
    client: TwilioClient,
    payload_type: type[Any],
    logic: Callable[[Any], MarkupDocument],
) -> Callable[[Request], Any]:
    async def endpoint(request: Request) -> Response:
        inbound = await to_inbound_request(request)
        token = correlation_id_var.set(request.headers.get("I-Twilio-Idempotency-Token"))
        try:
            logger.info("Twilio webhook received", extra={"path": request.url.path})
            resp = client.respond_to_webhook(inbound, payload_type, logic)
        finally:
            correlation_id_var.reset(token)
        return to_http_response(resp)

    return endpoint
