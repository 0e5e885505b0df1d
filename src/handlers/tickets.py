"""Ticket history handlers: GET /tickets, POST /tickets/{id}/close."""

from __future__ import annotations

import uuid
from typing import Dict, Optional

from models.response import ApiResponse
from utils.error_handling import AppError, to_response
from utils.logging_config import get_logger
from utils.responses import json_response, path_id

logger = get_logger(__name__)

_ticket_service: Optional["TicketService"] = None


def _get_ticket_service():
    """Lazy-load TicketService."""
    global _ticket_service
    if _ticket_service is None:
        from services.ticket_service import TicketService
        _ticket_service = TicketService()
    return _ticket_service


def _get_notifier():
    """Shared NotificationService, so an attached dashboard sees the change."""
    from services.notification_service import get_notifier
    return get_notifier()


def list_handler(event, context) -> Dict:
    """Tickets newest first; ``?limit=`` caps the page."""
    from services.dashboard_service import ticket_row

    correlation_id = str(uuid.uuid4())
    query = event.get("queryStringParameters") or {}
    try:
        limit = int(query["limit"]) if query.get("limit") else None
        tickets = _get_ticket_service().tickets.list_recent(limit=limit)
        rows = [ticket_row(t).model_dump(mode="json") for t in tickets]
        return json_response(
            200,
            ApiResponse(message="ok", data=rows, count=len(rows), correlation_id=correlation_id),
        )
    except ValueError as exc:
        return json_response(400, {"message": "Invalid request", "error": str(exc)})
    except Exception as exc:
        logger.exception("Ticket listing failed", extra={"correlation_id": correlation_id})
        return json_response(500, {"message": "Ticket listing failed", "error": str(exc)})


def close_handler(event, context) -> Dict:
    """Close a ticket and free its technician."""
    from services.notification_service import TECHNICIANS_TABLE, TICKETS_TABLE, ChangeEvent

    correlation_id = str(uuid.uuid4())
    ticket_id = path_id(event)
    if not ticket_id:
        return json_response(400, {"message": "ticket id is required"})

    try:
        ticket = _get_ticket_service().close_ticket(ticket_id)
        notifier = _get_notifier()
        notifier.publish(TICKETS_TABLE, ChangeEvent.UPDATE, ticket.id)
        if ticket.technician_id:
            notifier.publish(TECHNICIANS_TABLE, ChangeEvent.UPDATE, ticket.technician_id)
        logger.info("Ticket closed", extra={"ticket_id": ticket.id})
        return json_response(
            200,
            ApiResponse(
                message="closed",
                data=ticket.model_dump(mode="json"),
                correlation_id=correlation_id,
            ),
        )
    except AppError as exc:
        return to_response(exc, correlation_id)
    except Exception as exc:
        logger.exception(
            "Ticket close failed", extra={"correlation_id": correlation_id, "ticket_id": ticket_id}
        )
        return json_response(500, {"message": "Ticket close failed", "error": str(exc)})
