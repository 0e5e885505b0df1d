"""
Operations dashboard: technician status and ticket history.

No diffing: every change event triggers a full refetch of both tables.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from typing import Callable, List, Optional

from models.dashboard import DashboardSnapshot, TechnicianCard, TicketRow
from models.technician import Technician, TechnicianStatus
from models.ticket import Priority, Ticket
from repositories.technician_repo import TechnicianRepository
from repositories.ticket_repo import TicketRepository
from services.notification_service import (
    TECHNICIANS_TABLE,
    TICKETS_TABLE,
    NotificationService,
)
from utils.logging_config import get_logger

logger = get_logger(__name__)

STATUS_COLORS = {
    TechnicianStatus.AVAILABLE: "green",
    TechnicianStatus.BUSY: "yellow",
    TechnicianStatus.OFFLINE: "gray",
}

PRIORITY_COLORS = {
    Priority.P1: "red",
    Priority.P2: "yellow",
    Priority.P3: "green",
    Priority.P4: "blue",
}


def initials(name: str) -> str:
    return "".join(part[0] for part in name.split() if part).upper()


def technician_card(technician: Technician) -> TechnicianCard:
    return TechnicianCard(
        **technician.model_dump(),
        initials=initials(technician.name),
        status_color=STATUS_COLORS.get(technician.status, "gray"),
    )


def ticket_row(ticket: Ticket) -> TicketRow:
    return TicketRow(
        **ticket.model_dump(),
        priority_label=ticket.priority.label,
        priority_color=PRIORITY_COLORS[ticket.priority],
    )


class DashboardService:
    """Builds snapshots and keeps the latest one fresh on change events."""

    def __init__(
        self,
        technicians: Optional[TechnicianRepository] = None,
        tickets: Optional[TicketRepository] = None,
    ) -> None:
        self.technicians = technicians or TechnicianRepository()
        self.tickets = tickets or TicketRepository(self.technicians.engine)
        self.latest: Optional[DashboardSnapshot] = None
        self._unsubscribers: List[Callable[[], None]] = []

    def snapshot(self, ticket_limit: Optional[int] = None) -> DashboardSnapshot:
        technicians = self.technicians.list_all()
        tickets = self.tickets.list_recent(limit=ticket_limit)
        counts = Counter(t.status.value for t in technicians)
        snapshot = DashboardSnapshot(
            technicians=[technician_card(t) for t in technicians],
            tickets=[ticket_row(t) for t in tickets],
            status_counts={status.value: counts.get(status.value, 0) for status in TechnicianStatus},
            refreshed_at=datetime.now(timezone.utc),
        )
        self.latest = snapshot
        return snapshot

    def attach(self, notifier: NotificationService) -> None:
        """Refetch on insert/update/delete of either table."""
        for table in (TECHNICIANS_TABLE, TICKETS_TABLE):
            self._unsubscribers.append(notifier.subscribe(table, self._on_change))

    def detach(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def _on_change(self, table, event, record_id) -> None:
        logger.info("Dashboard refresh", extra={"table": table, "event": event.value})
        self.snapshot()
