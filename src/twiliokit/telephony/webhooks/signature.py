"""
X-Twilio-Signature validation.

Twilio signs the HTTPS URL it called and, for POST, every submitted field
appended as key+value. We rebuild that string byte for byte, HMAC-SHA1 it
with the auth token and compare in constant time.

Every malformed-input check runs before the HMAC is computed.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
from base64 import b64decode, b64encode
from urllib.parse import parse_qsl, urlsplit

from twiliokit.telephony.interface import AuthError, BadRequest, FieldMap, InboundRequest

SIGNATURE_HEADER = "X-Twilio-Signature"


def fields_from_urlencoded(encoded: str) -> FieldMap:
    """Decode an application/x-www-form-urlencoded string into a field map.

    Keys keep their first-seen position; a repeated key keeps its last value.
    Percent-escapes that do not decode as UTF-8 raise BadRequest.
    """
    try:
        pairs = parse_qsl(encoded, keep_blank_values=True, errors="strict")
    except UnicodeDecodeError as e:
        raise BadRequest("Undecodable form encoding") from e
    fields: FieldMap = {}
    for key, value in pairs:
        fields[key] = value
    return fields


def _request_target(uri: str) -> str:
    # absolute-form targets (proxies) carry scheme and authority; keep path + query only
    if "://" in uri:
        parts = urlsplit(uri)
        target = parts.path or "/"
        if parts.query:
            target = f"{target}?{parts.query}"
        return target
    return uri


def canonical_string(host: str, target: str, fields: FieldMap, *, include_fields: bool) -> str:
    """Build the string Twilio signed: https://<host><target>[k1v1k2v2...]."""
    suffix = "".join(f"{key}{value}" for key, value in fields.items()) if include_fields else ""
    return f"https://{host}{target}{suffix}"


def compute_signature(auth_token: str, canonical: str) -> str:
    """Base64 HMAC-SHA1 of `canonical` keyed with `auth_token`."""
    return b64encode(_digest(auth_token, canonical)).decode("ascii")


def _digest(auth_token: str, canonical: str) -> bytes:
    return hmac.new(
        auth_token.encode("utf-8"),
        canonical.encode("utf-8"),
        hashlib.sha1,
    ).digest()


def authenticate(request: InboundRequest, auth_token: str) -> FieldMap:
    """Validate the request signature and return its field map.

    Raises:
        AuthError: header missing or signature mismatch.
        BadRequest: undecodable signature, missing Host, `*` target,
            unsupported method or undecodable body.
    """
    header = request.headers.get(SIGNATURE_HEADER)
    if header is None:
        raise AuthError()
    try:
        signature = b64decode(header, validate=True)
    except (binascii.Error, ValueError) as e:
        raise BadRequest("Invalid signature encoding") from e

    host = request.headers.get("Host")
    if not host:
        raise BadRequest("Missing Host header")

    target = _request_target(request.uri)
    if target == "*":
        raise BadRequest("Wildcard request target")

    if request.method == "GET":
        _, _, query = target.partition("?")
        fields = fields_from_urlencoded(query)
        include_fields = False
    elif request.method == "POST":
        try:
            body = request.body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise BadRequest("Undecodable form body") from e
        fields = fields_from_urlencoded(body)
        include_fields = True
    else:
        raise BadRequest(f"Unsupported method {request.method}")

    expected = _digest(auth_token, canonical_string(host, target, fields, include_fields=include_fields))
    if not hmac.compare_digest(expected, signature):
        raise AuthError("Signature mismatch")

    return fields
