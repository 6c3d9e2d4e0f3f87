"""
SMS Relay Utilities
===================

Shared helper modules for the SMS relay Lambda. It includes:

- logger.py          → structured JSON logging
- config.py          → environment-driven Settings
- secrets.py         → AWS Secrets Manager integration
- signature.py       → Telnyx webhook signature verification
- telnyx_client.py   → auto-reply sender (Telnyx messages API)
- mailgun_client.py  → email sender (Mailgun messages API)

All helpers are stateless between requests and safe to reuse across warm
Lambda invocations.
"""

from sms_relay.utils.logger import get_logger

__all__ = [
    "get_logger",
]
