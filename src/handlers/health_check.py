"""Lightweight health check handler."""

import os
from datetime import datetime, timezone

from utils.responses import json_response


def lambda_handler(event, context):
    """Report liveness plus which backing services are configured."""
    return json_response(
        200,
        {
            "status": "ok",
            "service": "facility-ops",
            "environment": os.environ.get("ENVIRONMENT", "dev"),
            "database_configured": bool(
                os.environ.get("DATABASE_URL") or os.environ.get("DB_SECRET_ARN")
            ),
            "event_bus": os.environ.get("EVENT_BUS_NAME"),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )
