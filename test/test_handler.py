"""Tests for webhook dispatch: parse, invoke logic, render."""

import pytest

from twiliokit.telephony.calls import Call, CallStatus
from twiliokit.telephony.client import TwilioClient
from twiliokit.telephony.interface import InboundRequest, ParsingError
from twiliokit.telephony.messages import Message
from twiliokit.telephony.twiml import Message as MessageVerb
from twiliokit.telephony.twiml import Twiml
from twiliokit.telephony.webhooks.handler import ERROR_BODY, parse_request, respond_to_webhook
from twiliokit.telephony.webhooks.signature import compute_signature

TOKEN = "test_auth_token_12345"

SMS_BODY = b"MessageSid=SM1&From=%2B15551234567&To=%2B15550000000&Body=hi+there"
SMS_SIGNED = (
    "https://example.com/message"
    "MessageSidSM1From+15551234567To+15550000000Bodyhi there"
)


def _sms_request(signature: str | None = None, body: bytes = SMS_BODY) -> InboundRequest:
    headers = {"Host": "example.com"}
    if signature is not None:
        headers["X-Twilio-Signature"] = signature
    return InboundRequest(method="POST", uri="/message", headers=headers, body=body)


def _echo(msg: Message) -> Twiml:
    return Twiml().add(MessageVerb(txt=f"You told me: '{msg.body}'"))


class TestParseRequest:
    def test_builds_message(self) -> None:
        msg = parse_request(_sms_request(compute_signature(TOKEN, SMS_SIGNED)), Message, TOKEN)

        assert msg.sid == "SM1"
        assert msg.from_ == "+15551234567"
        assert msg.body == "hi there"

    def test_missing_required_field_is_parsing_error(self) -> None:
        body = b"MessageSid=SM1&To=%2B15550000000"
        signed = "https://example.com/messageMessageSidSM1To+15550000000"

        with pytest.raises(ParsingError):
            parse_request(_sms_request(compute_signature(TOKEN, signed), body), Message, TOKEN)

    def test_client_delegates_with_its_token(self) -> None:
        client = TwilioClient("AC1", TOKEN)
        msg = client.parse_request(_sms_request(compute_signature(TOKEN, SMS_SIGNED)), Message)

        assert msg.to == "+15550000000"


class TestRespondToWebhook:
    def test_success_renders_twiml(self) -> None:
        resp = respond_to_webhook(
            _sms_request(compute_signature(TOKEN, SMS_SIGNED)), Message, _echo, TOKEN
        )

        assert resp.status_code == 200
        assert resp.headers["Content-Type"] == "text/xml"
        assert "<Message>You told me: &apos;hi there&apos;</Message>" in resp.body
        assert resp.headers["Content-Length"] == str(len(resp.body.encode("utf-8")))

    def test_content_length_counts_bytes(self) -> None:
        def logic(_: Message) -> Twiml:
            return Twiml().add(MessageVerb(txt="café ☎"))

        resp = respond_to_webhook(
            _sms_request(compute_signature(TOKEN, SMS_SIGNED)), Message, logic, TOKEN
        )

        assert int(resp.headers["Content-Length"]) == len(resp.body.encode("utf-8"))
        assert int(resp.headers["Content-Length"]) > len(resp.body)

    def test_missing_signature_is_400_without_calling_logic(self) -> None:
        called = []

        def logic(msg: Message) -> Twiml:
            called.append(msg)
            return Twiml()

        resp = respond_to_webhook(_sms_request(None), Message, logic, TOKEN)

        assert resp.status_code == 400
        assert resp.body == ERROR_BODY
        assert resp.headers["Content-Type"] == "text/plain"
        assert called == []

    def test_bad_signature_is_400(self) -> None:
        resp = respond_to_webhook(
            _sms_request(compute_signature("wrong", SMS_SIGNED)), Message, _echo, TOKEN
        )

        assert resp.status_code == 400
        assert resp.body == ERROR_BODY

    def test_parsing_failure_is_400(self) -> None:
        signed = "https://example.com/messageMessageSidSM1From+15551234567To+15550000000Bodyhi there"
        resp = respond_to_webhook(
            _sms_request(compute_signature(TOKEN, signed)), Call, lambda c: Twiml(), TOKEN
        )

        assert resp.status_code == 400
        assert resp.body == ERROR_BODY

    def test_logic_errors_propagate(self) -> None:
        def logic(_: Message) -> Twiml:
            raise RuntimeError("caller bug")

        with pytest.raises(RuntimeError, match="caller bug"):
            respond_to_webhook(
                _sms_request(compute_signature(TOKEN, SMS_SIGNED)), Message, logic, TOKEN
            )

    def test_same_document_renders_identically(self) -> None:
        request = _sms_request(compute_signature(TOKEN, SMS_SIGNED))

        first = respond_to_webhook(request, Message, _echo, TOKEN)
        second = respond_to_webhook(request, Message, _echo, TOKEN)

        assert first.body == second.body
        assert first.headers == second.headers

    def test_call_webhook_via_get(self) -> None:
        uri = "/call?CallSid=CA1&From=%2B1&To=%2B2&CallStatus=in-progress"
        request = InboundRequest(
            method="GET",
            uri=uri,
            headers={
                "Host": "example.com",
                "X-Twilio-Signature": compute_signature(TOKEN, f"https://example.com{uri}"),
            },
        )
        seen: list[Call] = []

        def logic(call: Call) -> Twiml:
            seen.append(call)
            return Twiml()

        client = TwilioClient("AC1", TOKEN)
        resp = client.respond_to_webhook(request, Call, logic)

        assert resp.status_code == 200
        assert seen[0].status == CallStatus.IN_PROGRESS
        assert seen[0].sid == "CA1"


class TestStatusCallbacks:
    @pytest.mark.parametrize("status", ["partially_delivered", "delivery_unknown"])
    def test_status_callback_with_new_status_is_accepted(self, status: str) -> None:
        body = f"MessageSid=SM1&From=%2B1&To=%2B2&MessageStatus={status}".encode()
        signed = f"https://example.com/statusMessageSidSM1From+1To+2MessageStatus{status}"
        request = InboundRequest(
            method="POST",
            uri="/status",
            headers={"Host": "example.com", "X-Twilio-Signature": compute_signature(TOKEN, signed)},
            body=body,
        )
        seen: list[Message] = []

        def logic(msg: Message) -> Twiml:
            seen.append(msg)
            return Twiml()

        resp = respond_to_webhook(request, Message, logic, TOKEN)

        assert resp.status_code == 200
        assert seen[0].status == status
