from typing import Any, Dict, Optional

import requests

from sms_relay.email_body import compose_email, format_timestamp
from sms_relay.media import MediaInliner
from sms_relay.payload import (
    get_from_phone,
    get_from_phone_for_reply,
    get_payload,
    get_text,
    get_to_phone,
)
from sms_relay.routes import RouteStore
from sms_relay.utils.config import Settings
from sms_relay.utils.logger import get_logger
from sms_relay.utils.mailgun_client import MailgunClient
from sms_relay.utils.telnyx_client import TelnyxClient

logger = get_logger("relay")

MODE_AUTO_REPLY = "auto_reply"
MODE_FORWARD_EMAIL = "forward_email"


class Relay:
    """
    Routes one inbound message to its configured action.

    Every outcome other than an exception is a normal return: skipped
    messages are logged, never reported to the webhook sender.
    """

    def __init__(
        self,
        settings: Settings,
        routes: RouteStore,
        telnyx: TelnyxClient,
        mailgun: MailgunClient,
        media: MediaInliner,
    ):
        self.settings = settings
        self.routes = routes
        self.telnyx = telnyx
        self.mailgun = mailgun
        self.media = media

    @classmethod
    def from_settings(cls, settings: Settings, dynamodb_client: Any = None) -> "Relay":
        session = requests.Session()
        timeout = settings.http_timeout_seconds
        return cls(
            settings=settings,
            routes=RouteStore(settings.routes_table, client=dynamodb_client),
            telnyx=TelnyxClient(settings.telnyx_api_key, session=session, timeout=timeout),
            mailgun=MailgunClient(
                settings.mailgun_api_key,
                settings.mailgun_domain,
                settings.from_email,
                base_url=settings.mailgun_base_url,
                session=session,
                timeout=timeout,
            ),
            media=MediaInliner(session=session, timeout=timeout),
        )

    def handle_message(self, data: Dict[str, Any]) -> None:
        """Process the `data` object of a message.received event."""
        payload = get_payload(data)
        to_phone = get_to_phone(payload)
        if not to_phone:
            logger.error("relay.invalid_destination", extra={"to": payload.get("to")})
            return

        route = self.routes.get_route(to_phone)
        if not route:
            logger.error("relay.no_route", extra={"to": to_phone})
            return

        mode = route.get("mode")
        if mode == MODE_AUTO_REPLY:
            self._auto_reply(route, payload, to_phone)
        elif mode == MODE_FORWARD_EMAIL:
            self._forward_email(route, data, payload, to_phone)
        else:
            logger.error("relay.unsupported_mode", extra={"mode": mode, "to": to_phone})

    def _auto_reply(self, route: Dict[str, Any], payload: Dict[str, Any], to_phone: str) -> Optional[bool]:
        reply_text = route.get("reply_text")
        if not reply_text:
            logger.error("relay.missing_reply_text", extra={"to": to_phone})
            return None

        reply_to = get_from_phone_for_reply(payload)
        if not reply_to:
            logger.error("relay.invalid_sender", extra={"to": to_phone, "from": get_from_phone(payload)})
            return None

        sent = self.telnyx.send_message(to_phone, reply_to, reply_text)
        logger.info("relay.auto_reply_done", extra={"to": to_phone, "sent": sent})
        return sent

    def _forward_email(
        self,
        route: Dict[str, Any],
        data: Dict[str, Any],
        payload: Dict[str, Any],
        to_phone: str,
    ) -> Optional[bool]:
        recipient = route.get("email")
        if not recipient:
            logger.error("relay.missing_email", extra={"to": to_phone})
            return None

        from_phone = get_from_phone(payload)
        friendly_date = format_timestamp(data.get("occurred_at"), self.settings.display_timezone)
        media_html = self.media.inline(payload.get("media"))
        subject, body_html, body_text = compose_email(
            from_phone, friendly_date, get_text(payload), media_html
        )

        sent = self.mailgun.send_email(recipient, subject, body_html, body_text)
        logger.info("relay.forward_email_done", extra={"to": to_phone, "sent": sent})
        return sent
