"""Ticket models (building / P-level schema)."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Priority(str, Enum):
    """Priority tiers, most to least urgent."""

    P1 = "P1"
    P2 = "P2"
    P3 = "P3"
    P4 = "P4"

    @property
    def label(self) -> str:
        return _PRIORITY_LABELS[self]


_PRIORITY_LABELS = {
    Priority.P1: "Critical",
    Priority.P2: "High",
    Priority.P3: "Medium",
    Priority.P4: "Low",
}


class TicketStatus(str, Enum):
    """Lifecycle of a ticket."""

    OPEN = "open"
    CLOSED = "closed"


class TicketCreate(BaseModel):
    """Fields written by the dispatch pipeline; id and created_at come from the store."""

    complaint: str
    building: str
    date: str
    priority: Priority
    technician_id: Optional[str] = None
    technician_name: Optional[str] = None
    status: TicketStatus = TicketStatus.OPEN


class Ticket(TicketCreate):
    """A persisted ticket."""

    id: str
    created_at: datetime
