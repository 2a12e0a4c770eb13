"""
Inbound Twilio webhooks: signature validation, dispatch and HTTP adapter.
"""
