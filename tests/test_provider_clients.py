import json
from urllib.parse import parse_qs

import requests
import responses

from sms_relay.utils.mailgun_client import MailgunClient
from sms_relay.utils.telnyx_client import TelnyxClient
from tests.conftest import MAILGUN_URL, TELNYX_URL


@responses.activate
def test_telnyx_reply_posts_json_with_bearer():
    responses.add(responses.POST, TELNYX_URL, json={"data": {"id": "msg-1"}}, status=200)

    assert TelnyxClient("KEY-telnyx").send_message("+15551230000", "+15557654321", "Thanks!") is True

    request = responses.calls[0].request
    assert request.headers["Authorization"] == "Bearer KEY-telnyx"
    assert json.loads(request.body) == {"from": "+15551230000", "to": "+15557654321", "text": "Thanks!"}


@responses.activate
def test_telnyx_error_status_returns_false():
    responses.add(responses.POST, TELNYX_URL, json={"errors": [{"code": "40310"}]}, status=422)

    assert TelnyxClient("KEY-telnyx").send_message("+15551230000", "+15557654321", "Thanks!") is False


@responses.activate
def test_telnyx_transport_error_returns_false():
    responses.add(responses.POST, TELNYX_URL, body=requests.exceptions.ConnectTimeout("slow"))

    assert TelnyxClient("KEY-telnyx").send_message("+15551230000", "+15557654321", "Thanks!") is False


@responses.activate
def test_telnyx_without_key_makes_no_call():
    assert TelnyxClient(None).send_message("+15551230000", "+15557654321", "Thanks!") is False
    assert len(responses.calls) == 0


@responses.activate
def test_mailgun_posts_form_with_basic_auth():
    responses.add(responses.POST, MAILGUN_URL, json={"id": "<1@mg>"}, status=200)
    client = MailgunClient("key-mailgun", "mg.example.com", "alerts@example.com")

    assert client.send_email("a@b.com", "New SMS from +1", "<p>hi</p>", "hi") is True

    request = responses.calls[0].request
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert request.headers["Authorization"].startswith("Basic ")
    form = parse_qs(request.body)
    assert form["from"] == ["SMS Alerts <alerts@example.com>"]
    assert form["to"] == ["a@b.com"]
    assert form["subject"] == ["New SMS from +1"]
    assert form["html"] == ["<p>hi</p>"]
    assert form["text"] == ["hi"]


@responses.activate
def test_mailgun_eu_base_url():
    url = "https://api.eu.mailgun.net/v3/mg.example.com/messages"
    responses.add(responses.POST, url, status=200)
    client = MailgunClient(
        "key-mailgun", "mg.example.com", "alerts@example.com", base_url="https://api.eu.mailgun.net/v3"
    )

    assert client.send_email("a@b.com", "s", "h", "t") is True
    assert responses.calls[0].request.url == url


@responses.activate
def test_mailgun_error_status_returns_false():
    responses.add(responses.POST, MAILGUN_URL, body="Forbidden", status=401)
    client = MailgunClient("bad-key", "mg.example.com", "alerts@example.com")

    assert client.send_email("a@b.com", "s", "h", "t") is False


@responses.activate
def test_mailgun_missing_config_makes_no_call():
    client = MailgunClient("key-mailgun", None, "alerts@example.com")

    assert client.send_email("a@b.com", "s", "h", "t") is False
    assert len(responses.calls) == 0
