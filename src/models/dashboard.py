"""View models for the operations dashboard."""

from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, Field

from models.technician import Technician
from models.ticket import Ticket


class TechnicianCard(Technician):
    initials: str
    status_color: str


class TicketRow(Ticket):
    priority_label: str
    priority_color: str


class DashboardSnapshot(BaseModel):
    """Full refetch of both tables; the client replaces its state wholesale."""

    technicians: List[TechnicianCard] = Field(default_factory=list)
    tickets: List[TicketRow] = Field(default_factory=list)
    status_counts: Dict[str, int] = Field(default_factory=dict)
    refreshed_at: datetime
