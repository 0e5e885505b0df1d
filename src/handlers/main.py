"""
Single entrypoint Lambda that routes HTTP API requests to thin handler modules.

One function keeps the warm caches (speech audio, DB pool, Bedrock client)
shared across routes while the code stays organized by delegating to modules.
"""

from typing import Callable, Dict, Tuple
import json

from . import (
    chat,
    conversations,
    dashboard,
    health_check,
    speech,
    technicians,
    tickets,
    transcripts,
)


def _response(status: int, body: Dict) -> Dict:
    """Format a JSON API Gateway HTTP API response."""
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def _with_path_id(event: Dict, path: str) -> Dict:
    """Fill ``pathParameters.id`` from ``/<collection>/<id>/...`` when the gateway did not."""
    if (event.get("pathParameters") or {}).get("id"):
        return event
    segments = [s for s in path.split("/") if s]
    if len(segments) >= 2:
        event = dict(event)
        event["pathParameters"] = {**(event.get("pathParameters") or {}), "id": segments[1]}
    return event


def lambda_handler(event, context):
    """
    Entry point invoked by API Gateway HTTP API.

    The event contains the HTTP method and path; we route it to the correct
    handler. Longer prefixes come first where two routes share a stem.
    """
    method = event.get("requestContext", {}).get("http", {}).get("method", "")
    path = event.get("requestContext", {}).get("http", {}).get("path", "")
    route_key = f"{method.upper()} {path}"

    route_table: Tuple[Tuple[str, Callable], ...] = (
        ("GET /health", health_check.lambda_handler),
        ("POST /chat", chat.lambda_handler),
        ("POST /speech", speech.lambda_handler),
        ("POST /transcripts/evaluate", transcripts.evaluate_handler),
        ("POST /transcripts", transcripts.lambda_handler),
        ("GET /dashboard", dashboard.lambda_handler),
        ("PUT /technicians/", technicians.status_handler),
        ("GET /technicians", technicians.list_handler),
        ("POST /tickets/", tickets.close_handler),
        ("GET /tickets", tickets.list_handler),
        ("POST /conversations/", conversations.reset_handler),
        ("GET /conversations/", conversations.messages_handler),
        ("POST /conversations", conversations.start_handler),
    )

    for prefix, handler in route_table:
        if route_key.startswith(prefix):
            return handler(_with_path_id(event, path), context)

    return _response(404, {"message": "Route not found", "route": route_key})
