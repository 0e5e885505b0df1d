"""Custom exceptions and helpers for consistent error responses."""

import json
from typing import Any, Dict, Optional


class AppError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(AppError):
    """Raised when a requested resource is missing."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, status_code=400)


class ExternalServiceError(AppError):
    """Raised when a hosted gateway (Bedrock, Polly) fails."""

    def __init__(self, message: str = "Upstream service failed"):
        super().__init__(message, status_code=502)


class UnsupportedCapabilityError(AppError):
    """Raised when the client cannot run the voice pipeline at all."""

    def __init__(self, message: str = "Speech recognition is not supported in this browser"):
        super().__init__(message, status_code=400)


def to_response(error: AppError, correlation_id: Optional[str] = None) -> Dict[str, Any]:
    """Convert an AppError into a Lambda proxy integration response."""
    body: Dict[str, Any] = {"error": str(error), "status": "error"}
    if correlation_id:
        body["correlation_id"] = correlation_id
    return {
        "statusCode": error.status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }
