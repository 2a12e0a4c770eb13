"""
Shared fixtures for twiliokit tests.
"""
from __future__ import annotations

import pytest

from twiliokit.telephony.client import TwilioClient

ACCOUNT_SID = "AC_TEST_ACCOUNT_SID"
AUTH_TOKEN = "test_auth_token_12345"


@pytest.fixture
def account_sid() -> str:
    return ACCOUNT_SID


@pytest.fixture
def auth_token() -> str:
    return AUTH_TOKEN


@pytest.fixture
def twilio_client() -> TwilioClient:
    return TwilioClient(ACCOUNT_SID, AUTH_TOKEN)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer TWILIO_* variables out of config tests."""
    for name in ("TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN", "TWILIO_API_BASE_URL", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
