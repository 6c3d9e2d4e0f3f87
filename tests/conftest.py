"""
Shared fixtures for the SMS relay tests.

Uses moto to mock DynamoDB / Secrets Manager and responses to mock HTTP.
"""

import json
import os
from typing import Any, Dict, Optional

import boto3
import pytest
from moto import mock_aws

from sms_relay.relay import Relay
from sms_relay.utils.config import Settings

TABLE_NAME = "sms-relay-routes"
DESTINATION = "+15551230000"
SENDER = "+15557654321"
MAILGUN_URL = "https://api.mailgun.net/v3/mg.example.com/messages"
TELNYX_URL = "https://api.telnyx.com/v2/messages"


@pytest.fixture
def aws_credentials() -> None:
    """Set up mock AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def dynamodb(aws_credentials):
    """Mock DynamoDB client with an empty route table."""
    with mock_aws():
        client = boto3.client("dynamodb", region_name="us-east-1")
        client.create_table(
            TableName=TABLE_NAME,
            KeySchema=[{"AttributeName": "pk", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "pk", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        yield client


@pytest.fixture
def put_route(dynamodb):
    def _put(phone: str, config: Any) -> None:
        raw = config if isinstance(config, str) else json.dumps(config)
        dynamodb.put_item(
            TableName=TABLE_NAME,
            Item={"pk": {"S": f"route:{phone}"}, "config": {"S": raw}},
        )

    return _put


@pytest.fixture
def settings() -> Settings:
    return Settings(
        routes_table=TABLE_NAME,
        from_email="alerts@example.com",
        mailgun_domain="mg.example.com",
        mailgun_api_key="key-mailgun",
        telnyx_api_key="KEY-telnyx",
    )


@pytest.fixture
def relay(settings, dynamodb) -> Relay:
    return Relay.from_settings(settings, dynamodb_client=dynamodb)


def make_payload(
    to: Any = DESTINATION,
    sender: Optional[str] = SENDER,
    text: Optional[str] = "Hello there",
    media: Optional[list] = None,
    direction: str = "inbound",
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "direction": direction,
        "from": {"phone_number": sender},
        "to": to,
        "media": media or [],
    }
    if text is not None:
        payload["text"] = text
    return payload


def make_event(
    payload: Optional[Dict[str, Any]] = None,
    event_type: str = "message.received",
    occurred_at: str = "2024-01-15T15:04:05.000+00:00",
    method: str = "POST",
) -> Dict[str, Any]:
    """API Gateway HttpApi (v2) event carrying a Telnyx webhook."""
    body = {
        "data": {
            "event_type": event_type,
            "occurred_at": occurred_at,
            "payload": payload if payload is not None else make_payload(),
        }
    }
    return {
        "requestContext": {"http": {"method": method}},
        "headers": {"content-type": "application/json"},
        "body": json.dumps(body),
        "isBase64Encoded": False,
    }
