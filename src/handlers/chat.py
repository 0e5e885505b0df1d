"""
Language-understanding gateway for POST /chat.

Request ``{"message": str}``, response ``{"response": str}``. Model failures
never surface here: the assistant service already collapses them into the
fixed acknowledgment.
"""

from __future__ import annotations

import uuid
from typing import Dict, Optional

from utils.error_handling import AppError, to_response
from utils.logging_config import get_logger
from utils.responses import json_response, parse_body
from utils.validators import ensure_text

logger = get_logger(__name__)

# Lazy-loaded service to avoid import-time client creation
_assistant: Optional["AssistantService"] = None


def _get_assistant():
    """Lazy-load AssistantService."""
    global _assistant
    if _assistant is None:
        from services.assistant_service import AssistantService
        _assistant = AssistantService()
    return _assistant


def lambda_handler(event, context) -> Dict:
    correlation_id = str(uuid.uuid4())
    try:
        payload = parse_body(event)
        message = ensure_text(payload.get("message"), "message")
        reply = _get_assistant().reply(message)
        logger.info("Chat reply served", extra={"correlation_id": correlation_id})
        return json_response(200, {"response": reply})
    except AppError as exc:
        return to_response(exc, correlation_id)
    except ValueError as exc:
        logger.warning("Chat request rejected", extra={"correlation_id": correlation_id})
        return json_response(400, {"error": str(exc), "correlation_id": correlation_id})
    except Exception as exc:
        logger.exception("Chat request failed", extra={"correlation_id": correlation_id})
        return json_response(500, {"error": str(exc), "correlation_id": correlation_id})
