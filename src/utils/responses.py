"""HTTP API response helpers shared by the handler modules."""

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel

_GATEWAY_KEYS = ("requestContext", "pathParameters", "queryStringParameters", "headers")


def json_response(status: int, body: Any) -> Dict:
    """Format a JSON API Gateway HTTP API response."""
    if isinstance(body, BaseModel):
        payload = body.model_dump_json()
    else:
        payload = json.dumps(body, default=str)
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": payload,
    }


def parse_body(event: Dict) -> Dict:
    """Return the JSON body, or the event itself for direct invocations."""
    payload_body = event.get("body")
    if payload_body:
        return json.loads(payload_body)
    return {k: v for k, v in event.items() if k not in _GATEWAY_KEYS}


def path_id(event: Dict, name: str = "id") -> Optional[str]:
    """Read a path parameter placed by API Gateway."""
    return (event.get("pathParameters") or {}).get(name)
