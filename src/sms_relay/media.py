import base64
import html
from typing import Any, Dict, Iterable, Optional

import requests

from sms_relay.utils.logger import get_logger

logger = get_logger("media")

IMAGE_HTML = (
    '<p><strong>Image:</strong><br><img src="{src}" alt="MMS Image" '
    'style="max-width: 300px;"></p>'
)
FAILED_HTML = "<p><strong>Image:</strong> Failed to load {url}</p>"


class MediaInliner:
    """
    Turns MMS image attachments into inline HTML.

    Attachments are fetched one at a time, in order. A failed fetch yields a
    "Failed to load" line and never stops the remaining attachments.
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = 10.0):
        self.session = session or requests.Session()
        self.timeout = timeout

    def inline(self, media: Optional[Iterable[Dict[str, Any]]]) -> str:
        if not isinstance(media, list):
            return ""
        parts = []
        for item in media:
            if not isinstance(item, dict):
                continue
            content_type = item.get("content_type")
            url = item.get("url")
            if not (isinstance(content_type, str) and content_type.startswith("image/")):
                continue
            if not (isinstance(url, str) and url):
                continue
            parts.append(self._inline_one(content_type, url))
        return "".join(parts)

    def _inline_one(self, content_type: str, url: str) -> str:
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("media.fetch_error", extra={"url": url, "error": str(e)})
            return FAILED_HTML.format(url=html.escape(url))

        if not resp.ok:
            logger.warning("media.fetch_status", extra={"url": url, "status": resp.status_code})
            return FAILED_HTML.format(url=html.escape(url))

        encoded = base64.b64encode(resp.content).decode("ascii")
        data_uri = f"data:{content_type};base64,{encoded}"
        return IMAGE_HTML.format(src=html.escape(data_uri))
