import json
from typing import Any, Dict, Optional

import boto3

from sms_relay.utils.logger import get_logger

logger = get_logger("routes")

ROUTE_KEY_PREFIX = "route:"
CONFIG_ATTRIBUTE = "config"


def route_key(phone_number: str) -> str:
    return f"{ROUTE_KEY_PREFIX}{phone_number}"


class RouteStore:
    """
    Read-only view over the DynamoDB route table.

    Items look like {"pk": "route:+15551230000", "config": "<json>"}; they are
    written by an administrator, never by this service.
    """

    def __init__(self, table_name: str, client: Any = None):
        self.table_name = table_name
        self.client = client or boto3.client("dynamodb")

    def get_route(self, phone_number: Optional[str]) -> Optional[Dict[str, Any]]:
        """
        Return the parsed route for a canonical number, or None.

        Missing items and unparseable config both mean "no route". DynamoDB
        errors are not caught.
        """
        if not phone_number:
            return None

        resp = self.client.get_item(
            TableName=self.table_name,
            Key={"pk": {"S": route_key(phone_number)}},
        )
        raw = resp.get("Item", {}).get(CONFIG_ATTRIBUTE, {}).get("S")
        if not raw:
            return None

        try:
            route = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(
                "routes.invalid_config_json",
                extra={"phone_number": phone_number, "error": str(e)},
            )
            return None

        if not isinstance(route, dict):
            logger.error(
                "routes.config_not_object",
                extra={"phone_number": phone_number, "config_preview": raw[:200]},
            )
            return None

        return route
