import base64
import json
from typing import Any, Dict, Optional

from sms_relay.payload import get_payload
from sms_relay.relay import Relay
from sms_relay.utils.config import load_settings
from sms_relay.utils.logger import get_logger
from sms_relay.utils.signature import SIGNATURE_HEADER, TIMESTAMP_HEADER, WebhookVerifier

logger = get_logger("webhook")

EVENT_MESSAGE_RECEIVED = "message.received"
DIRECTION_INBOUND = "inbound"

# Built once per container on first use
_relay: Optional[Relay] = None
_verifier: Optional[WebhookVerifier] = None


def _response(status_code: int, body: str) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "text/plain"},
        "body": body,
    }


def ok_response() -> Dict[str, Any]:
    return _response(200, "OK")


def _get_method(event: dict) -> str:
    # HttpApi (v2) first, then REST API (v1)
    method = event.get("requestContext", {}).get("http", {}).get("method")
    return (method or event.get("httpMethod") or "").upper()


def _get_header(event: dict, name: str) -> Optional[str]:
    headers = event.get("headers") or {}
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def _raw_body(event: dict) -> bytes:
    body = event.get("body") or ""
    if isinstance(body, dict):
        return json.dumps(body).encode("utf-8")
    if event.get("isBase64Encoded"):
        return base64.b64decode(body)
    return body.encode("utf-8")


def _parse_body(event: dict) -> dict:
    """
    Extract and parse the JSON body from the Lambda event.

    - For API Gateway / HttpApi: event["body"] is a JSON string, possibly
      base64 encoded.
    - For direct test invocations: event["body"] may already be a dict.

    Raises ValueError when the body is not a JSON envelope with a `data` object.
    """
    body = event.get("body")
    if isinstance(body, dict):
        payload = body
    else:
        raw = _raw_body(event)
        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning(
                "webhook.invalid_json",
                extra={"body_preview": raw[:200].decode("utf-8", "replace")},
            )
            raise ValueError("invalid_json")

    if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
        logger.warning("webhook.missing_data", extra={"body_preview": str(payload)[:200]})
        raise ValueError("missing_data")
    return payload


def _get_relay() -> Relay:
    global _relay
    if _relay is None:
        _relay = Relay.from_settings(load_settings())
    return _relay


def _get_verifier(relay: Relay) -> Optional[WebhookVerifier]:
    global _verifier
    public_key = relay.settings.telnyx_public_key
    if not public_key:
        return None
    if _verifier is None:
        _verifier = WebhookVerifier(public_key)
    return _verifier


def is_inbound_message(data: dict) -> bool:
    payload = get_payload(data)
    return (
        data.get("event_type") == EVENT_MESSAGE_RECEIVED
        and payload.get("direction") == DIRECTION_INBOUND
    )


def handle_event(event: dict, relay: Relay, verifier: Optional[WebhookVerifier] = None) -> Dict[str, Any]:
    """Run one webhook delivery through the gate, filter and relay."""
    if _get_method(event) != "POST":
        return _response(405, "Method not allowed")

    try:
        if verifier is not None:
            verified = verifier.verify(
                _raw_body(event),
                _get_header(event, SIGNATURE_HEADER),
                _get_header(event, TIMESTAMP_HEADER),
            )
            if not verified:
                return _response(401, "Unauthorized")
        else:
            logger.debug("webhook.signature_check_skipped")

        data = _parse_body(event)["data"]

        if not is_inbound_message(data):
            logger.info(
                "webhook.ignored_event",
                extra={
                    "event_type": data.get("event_type"),
                    "direction": get_payload(data).get("direction"),
                },
            )
            return ok_response()

        relay.handle_message(data)
        return ok_response()

    except Exception:
        logger.exception("webhook.unhandled_error")
        return _response(500, "Internal Server Error")


def lambda_handler(event, context):
    logger.info(
        "webhook.lambda_start",
        extra={"request_id": getattr(context, "aws_request_id", None)},
    )

    if _get_method(event) != "POST":
        return _response(405, "Method not allowed")

    try:
        relay = _get_relay()
        verifier = _get_verifier(relay)
    except RuntimeError as e:
        # Misconfiguration is a 500, not a 4xx
        logger.error("webhook.env_error", extra={"error": str(e)})
        return _response(500, "Internal Server Error")

    return handle_event(event, relay, verifier)
