# utils/mailgun_client.py

from typing import Optional

import requests

from sms_relay.utils.config import DEFAULT_MAILGUN_BASE_URL
from sms_relay.utils.logger import get_logger

logger = get_logger("mailgun_client")


class MailgunClient:
    """
    Minimal Mailgun client for forwarding messages as email.

    Same failure policy as TelnyxClient: log, return False, never raise.
    """

    def __init__(
        self,
        api_key: Optional[str],
        domain: Optional[str],
        from_email: Optional[str],
        base_url: str = DEFAULT_MAILGUN_BASE_URL,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        self.api_key = api_key
        self.domain = domain
        self.from_email = from_email
        self.base_url = base_url
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def messages_url(self) -> str:
        return f"{self.base_url}/{self.domain}/messages"

    def send_email(self, to: str, subject: str, html: str, text: str) -> bool:
        missing = [
            name
            for name, value in [
                ("MAILGUN_API_KEY", self.api_key),
                ("MAILGUN_DOMAIN", self.domain),
                ("FROM_EMAIL", self.from_email),
            ]
            if not value
        ]
        if missing:
            logger.error("mailgun.missing_config", extra={"missing": missing})
            return False

        data = {
            "from": f"SMS Alerts <{self.from_email}>",
            "to": to,
            "subject": subject,
            "html": html,
            "text": text,
        }

        try:
            resp = self.session.post(
                self.messages_url,
                auth=("api", self.api_key),
                data=data,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(
                "mailgun.transport_error",
                extra={"error": str(e), "to": to},
            )
            return False

        if not resp.ok:
            logger.error(
                "mailgun.send_error",
                extra={"status": resp.status_code, "response": resp.text, "to": to},
            )
            return False

        logger.info("mailgun.email_sent", extra={"to": to})
        return True
