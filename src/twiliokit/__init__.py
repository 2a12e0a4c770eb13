"""
twiliokit: Twilio REST client with signed webhook dispatch.

Outbound: TwilioClient.send_request / send_message / make_call.
Inbound: TwilioClient.parse_request / respond_to_webhook.
"""

from twiliokit.telephony.calls import Call, CallStatus, OutboundCall
from twiliokit.telephony.client import GET, POST, PUT, ClientIdentity, TwilioClient, url_encode
from twiliokit.telephony.interface import (
    AuthError,
    BadRequest,
    HTTPError,
    InboundRequest,
    NetworkError,
    ParsingError,
    TransmissionError,
    TwilioError,
    WebhookResponse,
)
from twiliokit.telephony.messages import Message, MessageStatus, OutboundMessage
from twiliokit.telephony.twiml import Twiml

__all__ = [
    "GET",
    "POST",
    "PUT",
    "AuthError",
    "BadRequest",
    "Call",
    "CallStatus",
    "ClientIdentity",
    "HTTPError",
    "InboundRequest",
    "Message",
    "MessageStatus",
    "NetworkError",
    "OutboundCall",
    "OutboundMessage",
    "ParsingError",
    "TransmissionError",
    "Twiml",
    "TwilioClient",
    "TwilioError",
    "WebhookResponse",
    "url_encode",
]
