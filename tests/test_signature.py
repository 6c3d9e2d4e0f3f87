import base64

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from sms_relay.utils.signature import WebhookVerifier

NOW = 1_700_000_000
BODY = b'{"data": {"event_type": "message.received"}}'


@pytest.fixture
def keypair():
    private_key = Ed25519PrivateKey.generate()
    public_raw = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    return private_key, base64.b64encode(public_raw).decode("ascii")


def sign(private_key, timestamp: str, body: bytes) -> str:
    return base64.b64encode(private_key.sign(timestamp.encode() + b"|" + body)).decode("ascii")


def test_valid_signature(keypair):
    private_key, public_b64 = keypair
    verifier = WebhookVerifier(public_b64)
    assert verifier.verify(BODY, sign(private_key, str(NOW), BODY), str(NOW), now=NOW + 10)


def test_tampered_body_rejected(keypair):
    private_key, public_b64 = keypair
    verifier = WebhookVerifier(public_b64)
    signature = sign(private_key, str(NOW), BODY)
    assert not verifier.verify(BODY + b" ", signature, str(NOW), now=NOW)


def test_stale_timestamp_rejected(keypair):
    private_key, public_b64 = keypair
    verifier = WebhookVerifier(public_b64)
    signature = sign(private_key, str(NOW), BODY)
    assert not verifier.verify(BODY, signature, str(NOW), now=NOW + 301)


@pytest.mark.parametrize(
    "signature, timestamp",
    [(None, str(NOW)), ("c2ln", None), ("not base64!", str(NOW)), ("c2ln", "soon")],
)
def test_missing_or_garbled_headers_rejected(keypair, signature, timestamp):
    _, public_b64 = keypair
    assert not WebhookVerifier(public_b64).verify(BODY, signature, timestamp, now=NOW)


def test_bad_public_key():
    with pytest.raises(RuntimeError):
        WebhookVerifier("dG9vLXNob3J0")
