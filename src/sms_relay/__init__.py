"""
SMS Relay
=========

Root package for the AWS Lambda that relays inbound Telnyx SMS/MMS webhooks.
Each destination number has a route in DynamoDB that either forwards the
message (text and inlined images) as email through Mailgun, or answers the
sender with an automatic SMS reply through Telnyx.

Modules under this package:
- webhook.py    → HTTP entry point (request gate + event filter)
- relay.py      → route dispatch (auto_reply / forward_email)
- payload.py    → phone number validation and field extraction
- routes.py     → DynamoDB route lookups
- media.py      → MMS image inlining as data URIs
- email_body.py → forwarded email bodies and timestamp formatting
- utils/        → logging, config, secrets, signatures, provider clients

Environment variables expected:
  • ROUTES_TABLE               - DynamoDB table holding route:<number> items
  • FROM_EMAIL                 - Sender address for forwarded mail
  • MAILGUN_DOMAIN             - Mailgun sending domain
  • MAILGUN_API_KEY            - Mailgun API key
  • MAILGUN_BASE_URL           - Mailgun API root (default: https://api.mailgun.net/v3)
  • TELNYX_API_KEY             - Telnyx API key for auto replies
  • TELNYX_PUBLIC_KEY          - Enables webhook signature verification (optional)
  • PROVIDER_SECRET_NAME       - Secrets Manager secret with the keys above (optional)
  • DISPLAY_TIMEZONE           - Zone for "Received at" (default: America/Chicago)
  • HTTP_TIMEOUT_SECONDS       - Timeout for outbound HTTP calls (default: 10)
  • LOG_LEVEL                  - Log verbosity (default: INFO)

Handlers in this package are stateless and Lambda-optimized.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
