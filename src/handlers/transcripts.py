"""
Dispatch handlers.

POST /transcripts runs the full pipeline for one recognized utterance.
POST /transcripts/evaluate only runs the dispatch engine (no gateway calls,
no writes), which is handy for tuning the keyword lists.
"""

from __future__ import annotations

import uuid
from typing import Dict, Optional

from models.dispatch import EvaluateRequest, TranscriptRequest
from utils.error_handling import AppError, to_response
from utils.logging_config import get_logger
from utils.responses import json_response, parse_body

logger = get_logger(__name__)

# Lazy-loaded services to avoid import-time DB connections
_dispatcher: Optional["DispatchService"] = None
_engine: Optional["DispatchEngine"] = None


def _get_dispatcher():
    """Lazy-load DispatchService."""
    global _dispatcher
    if _dispatcher is None:
        from services.dispatch_service import DispatchService
        _dispatcher = DispatchService()
    return _dispatcher


def _get_engine():
    """Lazy-load DispatchEngine."""
    global _engine
    if _engine is None:
        from services.dispatch_engine import DispatchEngine
        _engine = DispatchEngine()
    return _engine


def lambda_handler(event, context) -> Dict:
    """Handle POST /transcripts."""
    correlation_id = str(uuid.uuid4())
    try:
        request = TranscriptRequest.model_validate(parse_body(event))
        result = _get_dispatcher().handle_transcript(request, correlation_id=correlation_id)
        return json_response(200, result)
    except AppError as exc:
        return to_response(exc, correlation_id)
    except ValueError as exc:
        logger.warning("Transcript rejected", extra={"correlation_id": correlation_id})
        return json_response(
            400,
            {"message": "Invalid request", "error": str(exc), "correlation_id": correlation_id},
        )
    except Exception as exc:
        logger.exception("Dispatch failed", extra={"correlation_id": correlation_id})
        return json_response(
            500,
            {"message": "Dispatch failed", "error": str(exc), "correlation_id": correlation_id},
        )


def evaluate_handler(event, context) -> Dict:
    """Handle POST /transcripts/evaluate."""
    correlation_id = str(uuid.uuid4())
    try:
        request = EvaluateRequest.model_validate(parse_body(event))
        engine = _get_engine()
        outcome = engine.classify(request.transcript, request.assistant_reply)
        decision = engine.evaluate(request.transcript, request.assistant_reply)
        return json_response(
            200,
            {
                "classification": outcome.model_dump(mode="json"),
                "decision": decision.model_dump(mode="json"),
                "correlation_id": correlation_id,
            },
        )
    except ValueError as exc:
        return json_response(
            400,
            {"message": "Invalid request", "error": str(exc), "correlation_id": correlation_id},
        )
    except Exception as exc:
        logger.exception("Evaluation failed", extra={"correlation_id": correlation_id})
        return json_response(
            500,
            {"message": "Evaluation failed", "error": str(exc), "correlation_id": correlation_id},
        )
