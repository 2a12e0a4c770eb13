"""
Twilio telephony package.

Keep package import side-effects to a minimum to avoid circular imports.
Do not import client/factory here.
"""

__all__ = [
    "calls",
    "client",
    "config",
    "factory",
    "interface",
    "messages",
    "twiml",
    "webhooks",
]
