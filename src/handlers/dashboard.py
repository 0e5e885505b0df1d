"""Handler for GET /dashboard: a full snapshot of technicians and tickets."""

from __future__ import annotations

import uuid
from typing import Dict, Optional

from utils.logging_config import get_logger
from utils.responses import json_response

logger = get_logger(__name__)

_dashboard: Optional["DashboardService"] = None


def _get_dashboard():
    """Lazy-load DashboardService, kept fresh by the shared notifier."""
    global _dashboard
    if _dashboard is None:
        from services.dashboard_service import DashboardService
        from services.notification_service import get_notifier
        _dashboard = DashboardService()
        _dashboard.attach(get_notifier())
    return _dashboard


def lambda_handler(event, context) -> Dict:
    correlation_id = str(uuid.uuid4())
    query = event.get("queryStringParameters") or {}
    try:
        limit = int(query["ticket_limit"]) if query.get("ticket_limit") else None
        snapshot = _get_dashboard().snapshot(ticket_limit=limit)
        return json_response(200, snapshot)
    except ValueError as exc:
        return json_response(400, {"message": "Invalid request", "error": str(exc)})
    except Exception as exc:
        logger.exception("Dashboard snapshot failed", extra={"correlation_id": correlation_id})
        return json_response(
            500,
            {"message": "Dashboard unavailable", "error": str(exc), "correlation_id": correlation_id},
        )
