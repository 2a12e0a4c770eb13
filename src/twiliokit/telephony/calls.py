"""
Voice call resources.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from twiliokit.telephony.interface import FieldMap, ParsingError


class CallStatus(str, Enum):
    """Twilio call status values (wire spelling)."""

    QUEUED = "queued"
    RINGING = "ringing"
    IN_PROGRESS = "in-progress"
    CANCELED = "canceled"
    COMPLETED = "completed"
    FAILED = "failed"
    BUSY = "busy"
    NO_ANSWER = "no-answer"


class Call(BaseModel):
    """A Twilio voice call."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    from_: str = Field(..., alias="from")
    to: str
    sid: str
    # statuses Twilio adds later stay plain strings instead of failing validation
    status: CallStatus | str = Field(..., union_mode="left_to_right")

    @classmethod
    def from_fields(cls, fields: FieldMap) -> Call:
        try:
            return cls(
                from_=fields["From"],
                to=fields["To"],
                sid=fields["CallSid"],
                status=fields["CallStatus"].lower(),
            )
        except KeyError as e:
            raise ParsingError(f"Missing field {e.args[0]} in call payload") from e
        except ValidationError as e:
            raise ParsingError(f"Invalid call payload: {e.error_count()} errors") from e


@dataclass(frozen=True)
class OutboundCall:
    """Request to place a call; Twilio fetches TwiML from `url` once answered."""

    from_: str
    to: str
    url: str

    def to_params(self) -> list[tuple[str, str]]:
        return [("To", self.to), ("From", self.from_), ("Url", self.url)]
