"""
Example FastAPI application answering Twilio SMS and voice webhooks.

Run with:
    uvicorn --factory twiliokit.main:create_app
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from twiliokit.config import get_settings
from twiliokit.shared.logging import get_logger, setup_logging
from twiliokit.telephony.calls import Call
from twiliokit.telephony.client import TwilioClient
from twiliokit.telephony.factory import get_twilio_client
from twiliokit.telephony.messages import Message
from twiliokit.telephony.twiml import Message as MessageVerb
from twiliokit.telephony.twiml import Say, Twiml, Voice
from twiliokit.telephony.webhooks.router import build_router

logger = get_logger(__name__)


def echo_message(msg: Message) -> Twiml:
    return Twiml().add(MessageVerb(txt=f"You told me: '{msg.body or ''}'"))


def say_goodbye(_: Call) -> Twiml:
    return Twiml().add(
        Say(txt="Thanks for using twiliokit. Bye!", voice=Voice.WOMAN, language="en")
    )


def create_app(client: TwilioClient | None = None) -> FastAPI:
    setup_logging()
    settings = get_settings()
    twilio = client or get_twilio_client()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Starting webhook server", extra={"app_env": settings.app_env})
        yield
        await twilio.aclose()

    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
    app.include_router(
        build_router(
            twilio,
            {
                "/message": (Message, echo_message),
                "/call": (Call, say_goodbye),
            },
        )
    )
    return app
