import os
from dataclasses import dataclass
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sms_relay.utils.logger import get_logger
from sms_relay.utils.secrets import get_provider_secrets

logger = get_logger("config")

DEFAULT_MAILGUN_BASE_URL = "https://api.mailgun.net/v3"
DEFAULT_DISPLAY_TIMEZONE = "America/Chicago"
DEFAULT_HTTP_TIMEOUT_SECONDS = "10"


@dataclass(frozen=True)
class Settings:
    """Provider credentials and runtime options for one Lambda container."""

    routes_table: str
    from_email: Optional[str] = None
    mailgun_domain: Optional[str] = None
    mailgun_api_key: Optional[str] = None
    mailgun_base_url: str = DEFAULT_MAILGUN_BASE_URL
    telnyx_api_key: Optional[str] = None
    telnyx_public_key: Optional[str] = None
    display_timezone: str = DEFAULT_DISPLAY_TIMEZONE
    http_timeout_seconds: float = 10.0


def load_settings() -> Settings:
    """
    Load settings from environment variables.

    ROUTES_TABLE:         DynamoDB table holding route:<number> entries (required)
    FROM_EMAIL:           sender address for forwarded mail
    MAILGUN_DOMAIN:       Mailgun sending domain
    MAILGUN_API_KEY:      Mailgun key
    MAILGUN_BASE_URL:     Mailgun API root (EU accounts use api.eu.mailgun.net)
    TELNYX_API_KEY:       Telnyx key used for auto replies
    TELNYX_PUBLIC_KEY:    base64 Ed25519 key; enables webhook signature checks
    PROVIDER_SECRET_NAME: Secrets Manager secret filling any unset key above
    DISPLAY_TIMEZONE:     zone used to render the received-at time
    HTTP_TIMEOUT_SECONDS: timeout for every outbound HTTP call

    Raises RuntimeError with a clear message if something is missing/invalid.
    """
    routes_table = os.getenv("ROUTES_TABLE")
    if not routes_table:
        msg = "Missing required environment variables: ROUTES_TABLE"
        logger.error(msg)
        raise RuntimeError(msg)

    keys = {
        "mailgun_api_key": os.getenv("MAILGUN_API_KEY"),
        "telnyx_api_key": os.getenv("TELNYX_API_KEY"),
        "telnyx_public_key": os.getenv("TELNYX_PUBLIC_KEY"),
    }

    secret_name = os.getenv("PROVIDER_SECRET_NAME")
    if secret_name:
        secrets = get_provider_secrets(secret_name)
        for name, value in keys.items():
            if not value:
                keys[name] = secrets.get(name)

    display_timezone = os.getenv("DISPLAY_TIMEZONE", DEFAULT_DISPLAY_TIMEZONE)
    try:
        ZoneInfo(display_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        msg = f"Invalid DISPLAY_TIMEZONE='{display_timezone}'."
        logger.error(msg)
        raise RuntimeError(msg)

    timeout_str = os.getenv("HTTP_TIMEOUT_SECONDS", DEFAULT_HTTP_TIMEOUT_SECONDS)
    try:
        http_timeout_seconds = float(timeout_str)
    except ValueError:
        msg = (
            f"Invalid HTTP_TIMEOUT_SECONDS='{timeout_str}'. "
            "Must be a number of seconds."
        )
        logger.error(msg)
        raise RuntimeError(msg)

    return Settings(
        routes_table=routes_table,
        from_email=os.getenv("FROM_EMAIL"),
        mailgun_domain=os.getenv("MAILGUN_DOMAIN"),
        mailgun_base_url=os.getenv("MAILGUN_BASE_URL", DEFAULT_MAILGUN_BASE_URL).rstrip("/"),
        display_timezone=display_timezone,
        http_timeout_seconds=http_timeout_seconds,
        **keys,
    )
