"""
Twilio client configuration.

Single source of truth for credentials: TwilioConfig (Pydantic Settings)
loads from OS env + .env with the TWILIO_ prefix.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "https://api.twilio.com/2010-04-01"


class TwilioConfig(BaseSettings):
    """Twilio credentials and endpoints from environment."""

    model_config = SettingsConfigDict(
        env_prefix="TWILIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Client identity
    account_sid: str = Field(default="")
    auth_token: str = Field(default="")

    # REST API
    api_base_url: str = Field(default=DEFAULT_API_BASE_URL)
    timeout_seconds: float = Field(default=30.0, ge=1, le=300)

    # Public base URL Twilio calls back on (used when building callback URLs)
    webhook_base_url: str = Field(default="http://localhost:8000")

    def get_webhook_url(self, path: str = "/message") -> str:
        base = self.webhook_base_url.rstrip("/")
        return f"{base}{path}"


def get_twilio_config() -> TwilioConfig:
    return TwilioConfig()
