"""HTML and plain-text bodies for forwarded messages."""

import html
import re
from datetime import datetime
from typing import Any, Tuple
from zoneinfo import ZoneInfo

UNKNOWN_TIME = "(Unknown time)"

_BLOCK_END = re.compile(r"<br\s*/?>|</(?:p|h2)>", re.IGNORECASE)
_TAG = re.compile(r"<[^>]+>")
_BLANK_LINES = re.compile(r"\n{2,}")


def format_timestamp(occurred_at: Any, tz_name: str) -> str:
    """
    Render an ISO 8601 timestamp like "1/15/2024, 9:04:05 AM CST" in tz_name.
    """
    if not isinstance(occurred_at, str) or not occurred_at:
        return UNKNOWN_TIME
    try:
        parsed = datetime.fromisoformat(occurred_at.replace("Z", "+00:00"))
    except ValueError:
        return UNKNOWN_TIME
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=ZoneInfo("UTC"))

    local = parsed.astimezone(ZoneInfo(tz_name))
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return (
        f"{local.month}/{local.day}/{local.year}, "
        f"{hour}:{local.minute:02d}:{local.second:02d} {meridiem} {local.tzname()}"
    )


def build_html(from_phone: str, friendly_date: str, text: str, media_html: str) -> str:
    message = html.escape(text).replace("\n", "<br>")
    return (
        "<h2>New SMS Received</h2>\n"
        f"<p><strong>From:</strong> {html.escape(from_phone)}</p>\n"
        f"<p><strong>Received at:</strong> {html.escape(friendly_date)}</p>\n"
        f"<p><strong>Message:</strong> {message}</p>\n"
        f"{media_html}"
    )


def html_to_text(body: str) -> str:
    text = _BLOCK_END.sub("\n", body)
    text = _TAG.sub("", text)
    text = html.unescape(text)
    lines = [line.strip() for line in text.splitlines()]
    return _BLANK_LINES.sub("\n", "\n".join(lines)).strip()


def build_text(from_phone: str, friendly_date: str, text: str, media_html: str) -> str:
    # The message is kept verbatim; only the media markup is flattened
    lines = [
        "New SMS Received",
        f"From: {from_phone}",
        f"Received at: {friendly_date}",
        f"Message: {text}",
    ]
    media_text = html_to_text(media_html)
    if media_text:
        lines.append(media_text)
    return "\n".join(lines)


def compose_email(
    from_phone: str, friendly_date: str, text: str, media_html: str
) -> Tuple[str, str, str]:
    """Return (subject, html, plain text) for a forwarded message."""
    body = build_html(from_phone, friendly_date, text, media_html)
    plain = build_text(from_phone, friendly_date, text, media_html)
    return f"New SMS from {from_phone}", body, plain
