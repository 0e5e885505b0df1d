"""Technician directory models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator


class TechnicianStatus(str, Enum):
    """Availability states held by the directory."""

    AVAILABLE = "available"
    BUSY = "busy"
    OFFLINE = "offline"


class Technician(BaseModel):
    """A technician record as stored in the directory."""

    id: str
    name: str
    status: TechnicianStatus
    created_at: Optional[datetime] = None


class StatusUpdate(BaseModel):
    """Payload for PUT /technicians/{id}/status."""

    status: TechnicianStatus

    @field_validator("status", mode="before")
    @classmethod
    def normalize(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value
