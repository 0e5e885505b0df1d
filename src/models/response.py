"""Common response wrapper for list and update endpoints."""

from typing import Any, Optional

from pydantic import BaseModel


class ApiResponse(BaseModel):
    """Generic API response."""

    message: str
    data: Optional[Any] = None
    count: Optional[int] = None
    correlation_id: Optional[str] = None
