# utils/telnyx_client.py

from typing import Optional

import requests

from sms_relay.utils.logger import get_logger

logger = get_logger("telnyx_client")

TELNYX_MESSAGES_URL = "https://api.telnyx.com/v2/messages"


class TelnyxClient:
    """
    Minimal Telnyx messaging client used for auto replies.

    Sends are fire-and-forget from the caller's point of view: failures are
    logged and reported as False, never raised.
    """

    def __init__(
        self,
        api_key: Optional[str],
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    def send_message(self, from_number: str, to_number: str, text: str) -> bool:
        if not self.api_key:
            logger.error("telnyx.missing_api_key", extra={"to": to_number})
            return False

        try:
            resp = self.session.post(
                TELNYX_MESSAGES_URL,
                json={"from": from_number, "to": to_number, "text": text},
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(
                "telnyx.reply_transport_error",
                extra={"error": str(e), "to": to_number},
            )
            return False

        if not resp.ok:
            logger.error(
                "telnyx.reply_error",
                extra={"status": resp.status_code, "response": resp.text, "to": to_number},
            )
            return False

        logger.info("telnyx.reply_sent", extra={"from": from_number, "to": to_number})
        return True
