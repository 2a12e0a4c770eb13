"""
SMS message resources.

Message decodes both the REST JSON (lowercase keys) and the inbound SMS
webhook field map (From, To, Body, MessageSid, ...).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from twiliokit.telephony.interface import FieldMap, ParsingError


class MessageStatus(str, Enum):
    """Twilio message status values."""

    QUEUED = "queued"
    SENDING = "sending"
    SENT = "sent"
    FAILED = "failed"
    DELIVERED = "delivered"
    UNDELIVERED = "undelivered"
    RECEIVING = "receiving"
    RECEIVED = "received"
    ACCEPTED = "accepted"
    SCHEDULED = "scheduled"
    READ = "read"
    CANCELED = "canceled"
    PARTIALLY_DELIVERED = "partially_delivered"


class Message(BaseModel):
    """A Twilio message, sent or received."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    from_: str = Field(..., alias="from")
    to: str
    body: str | None = None
    sid: str
    # statuses Twilio adds later stay plain strings instead of failing validation
    status: MessageStatus | str | None = Field(default=None, union_mode="left_to_right")

    @classmethod
    def from_fields(cls, fields: FieldMap) -> Message:
        sid = fields.get("MessageSid") or fields.get("SmsSid")
        status = fields.get("SmsStatus") or fields.get("MessageStatus")
        try:
            return cls(
                from_=fields["From"],
                to=fields["To"],
                body=fields.get("Body"),
                sid=sid,
                status=status or None,
            )
        except KeyError as e:
            raise ParsingError(f"Missing field {e.args[0]} in message payload") from e
        except ValidationError as e:
            raise ParsingError(f"Invalid message payload: {e.error_count()} errors") from e


@dataclass(frozen=True)
class OutboundMessage:
    """Request to send an SMS."""

    from_: str
    to: str
    body: str

    def to_params(self) -> list[tuple[str, str]]:
        return [("To", self.to), ("From", self.from_), ("Body", self.body)]
