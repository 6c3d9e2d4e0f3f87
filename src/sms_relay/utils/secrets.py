import json
import os
from typing import Dict, Optional

import boto3
from botocore.exceptions import ClientError

from sms_relay.utils.logger import get_logger

logger = get_logger("secrets")


def get_provider_secrets(secret_name: str, region_name: Optional[str] = None) -> Dict[str, str]:
    """
    Fetch provider credentials from AWS Secrets Manager.

    Expects the secret value to be a JSON object, e.g.:

        {
          "mailgun_api_key": "...",
          "telnyx_api_key": "...",
          "telnyx_public_key": "..."   # optional
        }
    """
    region_name = region_name or os.getenv("AWS_REGION", "us-east-1")

    logger.info(
        "Fetching provider secrets from Secrets Manager",
        extra={"secret_name": secret_name, "region": region_name},
    )

    client = boto3.client("secretsmanager", region_name=region_name)

    try:
        resp = client.get_secret_value(SecretId=secret_name)
    except ClientError as e:
        logger.error(
            "Could not read secret from Secrets Manager",
            extra={"secret_name": secret_name, "error": str(e)},
        )
        raise RuntimeError(f"Secret '{secret_name}' could not be read") from e
    secret_str = resp.get("SecretString")

    if not secret_str:
        msg = f"Secret '{secret_name}' has no SecretString payload"
        logger.error(msg)
        raise RuntimeError(msg)

    try:
        data = json.loads(secret_str)
    except json.JSONDecodeError as e:
        logger.error(
            "SecretString is not valid JSON",
            extra={"secret_name": secret_name, "error": str(e)},
        )
        raise RuntimeError(f"Secret '{secret_name}' is not valid JSON") from e

    if not isinstance(data, dict):
        raise RuntimeError(f"Secret '{secret_name}' must be a JSON object")

    return {k: v for k, v in data.items() if isinstance(v, str)}
