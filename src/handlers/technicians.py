"""Technician directory handlers: GET /technicians, PUT /technicians/{id}/status."""

from __future__ import annotations

import uuid
from typing import Dict, Optional

from models.response import ApiResponse
from models.technician import StatusUpdate
from utils.error_handling import AppError, NotFoundError, to_response
from utils.logging_config import get_logger
from utils.responses import json_response, parse_body, path_id

logger = get_logger(__name__)

_technicians: Optional["TechnicianRepository"] = None


def _get_technicians():
    """Lazy-load TechnicianRepository."""
    global _technicians
    if _technicians is None:
        from repositories.technician_repo import TechnicianRepository
        _technicians = TechnicianRepository()
    return _technicians


def _get_notifier():
    """Shared NotificationService, so an attached dashboard sees the change."""
    from services.notification_service import get_notifier
    return get_notifier()


def list_handler(event, context) -> Dict:
    """All technicians ordered by name."""
    from services.dashboard_service import technician_card

    correlation_id = str(uuid.uuid4())
    try:
        cards = [technician_card(t) for t in _get_technicians().list_all()]
        return json_response(
            200,
            ApiResponse(
                message="ok",
                data=[c.model_dump(mode="json") for c in cards],
                count=len(cards),
                correlation_id=correlation_id,
            ),
        )
    except Exception as exc:
        logger.exception("Technician listing failed", extra={"correlation_id": correlation_id})
        return json_response(500, {"message": "Technician listing failed", "error": str(exc)})


def status_handler(event, context) -> Dict:
    """Set a technician's status by id."""
    from services.notification_service import TECHNICIANS_TABLE, ChangeEvent

    correlation_id = str(uuid.uuid4())
    technician_id = path_id(event)
    if not technician_id:
        return json_response(400, {"message": "technician id is required"})

    try:
        update = StatusUpdate.model_validate(parse_body(event))
        if not _get_technicians().set_status(technician_id, update.status):
            raise NotFoundError(f"Technician {technician_id} not found")
        _get_notifier().publish(TECHNICIANS_TABLE, ChangeEvent.UPDATE, technician_id)
        logger.info(
            "Technician status updated",
            extra={"technician_id": technician_id, "status": update.status.value},
        )
        return json_response(
            200,
            ApiResponse(
                message="updated",
                data={"id": technician_id, "status": update.status.value},
                correlation_id=correlation_id,
            ),
        )
    except AppError as exc:
        return to_response(exc, correlation_id)
    except ValueError as exc:
        return json_response(
            400,
            {"message": "Invalid request", "error": str(exc), "correlation_id": correlation_id},
        )
    except Exception as exc:
        logger.exception(
            "Technician status update failed",
            extra={"correlation_id": correlation_id, "technician_id": technician_id},
        )
        return json_response(500, {"message": "Technician status update failed", "error": str(exc)})
