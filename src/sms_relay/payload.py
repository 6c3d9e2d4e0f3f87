"""Extraction and validation of fields from a Telnyx message payload."""

import re
from typing import Any, Dict, Optional

E164_MIN_DIGITS = 8
E164_MAX_DIGITS = 15

UNKNOWN_SENDER = "(Unknown)"
NO_TEXT = "(No text)"

_NON_DIGITS = re.compile(r"\D")


def normalize_phone_number(value: Any) -> Optional[str]:
    """
    Return the canonical "+<digits>" form of an international number, or None.

    The value must start with "+" and carry 8 to 15 digits; spaces, dashes
    and parentheses are dropped, so "+1 (555) 123-4567" -> "+15551234567".
    """
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed.startswith("+"):
        return None
    digits = _NON_DIGITS.sub("", trimmed)
    if not E164_MIN_DIGITS <= len(digits) <= E164_MAX_DIGITS:
        return None
    return f"+{digits}"


def get_to_phone(payload: Dict[str, Any]) -> Optional[str]:
    # "to" arrives as a list of recipients, a single recipient or a bare string
    to = payload.get("to")
    if isinstance(to, list):
        first = to[0] if to else None
        candidate = first.get("phone_number") if isinstance(first, dict) else None
        if candidate:
            return normalize_phone_number(candidate)
    if isinstance(to, dict):
        candidate = to.get("phone_number")
        if candidate:
            return normalize_phone_number(candidate)
    return normalize_phone_number(to)


def get_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    """The `payload` object of an event's `data`, or {} when malformed."""
    payload = data.get("payload")
    return payload if isinstance(payload, dict) else {}


def _raw_from(payload: Dict[str, Any]) -> Any:
    sender = payload.get("from")
    return sender.get("phone_number") if isinstance(sender, dict) else None


def get_from_phone(payload: Dict[str, Any]) -> str:
    """Sender as shown in forwarded email; never fails."""
    raw = _raw_from(payload)
    return raw if isinstance(raw, str) and raw else UNKNOWN_SENDER


def get_from_phone_for_reply(payload: Dict[str, Any]) -> Optional[str]:
    """Sender as a reply address; None when it cannot be validated."""
    return normalize_phone_number(_raw_from(payload))


def get_text(payload: Dict[str, Any]) -> str:
    text = payload.get("text")
    return text if isinstance(text, str) and text else NO_TEXT
