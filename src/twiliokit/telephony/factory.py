"""
Twilio client factory.

Single source of truth for configuration:
- use TwilioConfig (Pydantic Settings) which loads from OS env + .env
- never read raw os.getenv("TWILIO_*") here
"""

from __future__ import annotations

from functools import lru_cache

from twiliokit.shared.logging import get_logger
from twiliokit.telephony.client import TwilioClient
from twiliokit.telephony.config import TwilioConfig
from twiliokit.telephony.config import get_twilio_config as _get_settings_twilio_config

logger = get_logger(__name__)


def _mask(s: str, keep: int = 6) -> str:
    if not s:
        return ""
    if len(s) <= keep:
        return "*" * len(s)
    return f"{s[:keep]}***"


@lru_cache(maxsize=1)
def get_twilio_config() -> TwilioConfig:
    """Return cached TwilioConfig loaded from OS env + .env."""
    return _get_settings_twilio_config()


@lru_cache(maxsize=1)
def get_twilio_client() -> TwilioClient:
    """Create and cache the Twilio client using TwilioConfig."""
    cfg = get_twilio_config()

    if not cfg.account_sid or not cfg.auth_token:
        raise ValueError("TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN must be configured")

    logger.info(
        "Twilio config resolved",
        extra={
            "account_sid": _mask(cfg.account_sid),
            "api_base_url": cfg.api_base_url,
            "webhook_base_url": cfg.webhook_base_url,
            "timeout_seconds": cfg.timeout_seconds,
        },
    )

    return TwilioClient.from_config(cfg)
