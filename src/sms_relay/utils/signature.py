import base64
import binascii
import time
from typing import Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from sms_relay.utils.logger import get_logger

logger = get_logger("signature")

SIGNATURE_HEADER = "telnyx-signature-ed25519"
TIMESTAMP_HEADER = "telnyx-timestamp"
DEFAULT_TOLERANCE_SECONDS = 300


class WebhookVerifier:
    """
    Verifies Telnyx webhook signatures.

    Telnyx signs "<timestamp>|<raw body>" with Ed25519 and sends the base64
    signature and the unix timestamp as headers. The public key comes from
    the Mission Control portal as base64 of the raw 32-byte key.
    """

    def __init__(self, public_key_b64: str, tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS):
        try:
            raw_key = base64.b64decode(public_key_b64, validate=True)
            self._public_key = Ed25519PublicKey.from_public_bytes(raw_key)
        except (binascii.Error, ValueError) as e:
            raise RuntimeError("TELNYX_PUBLIC_KEY is not a valid base64 Ed25519 key") from e
        self.tolerance_seconds = tolerance_seconds

    def verify(
        self,
        raw_body: bytes,
        signature_b64: Optional[str],
        timestamp: Optional[str],
        now: Optional[float] = None,
    ) -> bool:
        if not signature_b64 or not timestamp:
            logger.warning("signature.missing_headers")
            return False

        try:
            sent_at = int(timestamp)
        except ValueError:
            logger.warning("signature.bad_timestamp", extra={"timestamp": timestamp})
            return False

        now = time.time() if now is None else now
        if abs(now - sent_at) > self.tolerance_seconds:
            logger.warning("signature.stale_timestamp", extra={"timestamp": timestamp})
            return False

        try:
            signature = base64.b64decode(signature_b64, validate=True)
            self._public_key.verify(signature, timestamp.encode() + b"|" + raw_body)
        except (binascii.Error, InvalidSignature):
            logger.warning("signature.invalid")
            return False

        return True
