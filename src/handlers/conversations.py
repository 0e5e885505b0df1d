"""
Chat session handlers for the interactive listener.

POST /conversations                 start (welcome line)
GET  /conversations/{id}/messages   transcript, oldest first
POST /conversations/{id}/reset      clear and seed the reset line
"""

from __future__ import annotations

import uuid
from typing import Dict, Optional

from utils.error_handling import AppError, to_response
from utils.logging_config import get_logger
from utils.responses import json_response, parse_body, path_id

logger = get_logger(__name__)

_conversations: Optional["ConversationService"] = None


def _get_conversations():
    """Lazy-load ConversationService."""
    global _conversations
    if _conversations is None:
        from services.conversation_service import ConversationService
        _conversations = ConversationService()
    return _conversations


def start_handler(event, context) -> Dict:
    """Start a session unless the client cannot recognize speech at all."""
    correlation_id = str(uuid.uuid4())
    try:
        payload = parse_body(event)
        supported = bool(payload.get("speech_recognition_supported", True))
        session = _get_conversations().start_session(recognition_supported=supported)
        return json_response(201, session)
    except AppError as exc:
        logger.info(
            "Voice session not started",
            extra={"correlation_id": correlation_id, "reason": str(exc)},
        )
        return to_response(exc, correlation_id)
    except Exception as exc:
        logger.exception("Conversation start failed", extra={"correlation_id": correlation_id})
        return json_response(500, {"message": "Conversation start failed", "error": str(exc)})


def messages_handler(event, context) -> Dict:
    correlation_id = str(uuid.uuid4())
    session_id = path_id(event)
    if not session_id:
        return json_response(400, {"message": "session id is required"})
    try:
        messages = _get_conversations().history(session_id)
        return json_response(
            200,
            {
                "session_id": session_id,
                "messages": [m.model_dump(mode="json") for m in messages],
            },
        )
    except AppError as exc:
        return to_response(exc, correlation_id)
    except Exception as exc:
        logger.exception(
            "Conversation history failed",
            extra={"correlation_id": correlation_id, "session_id": session_id},
        )
        return json_response(500, {"message": "Conversation history failed", "error": str(exc)})


def reset_handler(event, context) -> Dict:
    correlation_id = str(uuid.uuid4())
    session_id = path_id(event)
    if not session_id:
        return json_response(400, {"message": "session id is required"})
    try:
        session = _get_conversations().reset(session_id)
        return json_response(200, session)
    except AppError as exc:
        return to_response(exc, correlation_id)
    except Exception as exc:
        logger.exception(
            "Conversation reset failed",
            extra={"correlation_id": correlation_id, "session_id": session_id},
        )
        return json_response(500, {"message": "Conversation reset failed", "error": str(exc)})
