"""
Speech synthesis gateway for POST /speech.

Request ``{"text": str}``; success ``{"audioContent": base64}``, failure
``{"error": str}`` with a non-2xx status so the client switches to its
on-device voice.
"""

from __future__ import annotations

import uuid
from typing import Dict, Optional

from models.speech import SpeechRequest
from utils.error_handling import AppError, to_response
from utils.logging_config import get_logger
from utils.responses import json_response, parse_body

logger = get_logger(__name__)

_speech: Optional["SpeechService"] = None


def _get_speech():
    """Lazy-load SpeechService."""
    global _speech
    if _speech is None:
        from services.speech_service import SpeechService
        _speech = SpeechService()
    return _speech


def lambda_handler(event, context) -> Dict:
    correlation_id = str(uuid.uuid4())
    try:
        request = SpeechRequest.model_validate(parse_body(event))
        audio = _get_speech().synthesize(request.text)
        return json_response(200, {"audioContent": audio})
    except AppError as exc:
        logger.warning(
            "Speech request failed",
            extra={"correlation_id": correlation_id, "error": str(exc)},
        )
        return to_response(exc, correlation_id)
    except ValueError as exc:
        return json_response(400, {"error": str(exc), "correlation_id": correlation_id})
    except Exception as exc:
        logger.exception("Speech synthesis crashed", extra={"correlation_id": correlation_id})
        return json_response(500, {"error": str(exc), "correlation_id": correlation_id})
