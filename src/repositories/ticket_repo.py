"""Ticket store repository."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import insert, select, update

from models.ticket import Ticket, TicketCreate, TicketStatus
from repositories.postgres_repo import PostgresRepository
from repositories.schema import tickets


class TicketRepository(PostgresRepository):
    """Insert and list tickets; the store assigns id and creation time."""

    def insert(self, data: TicketCreate) -> Ticket:
        ticket = Ticket(
            id=str(uuid.uuid4()),
            created_at=datetime.now(timezone.utc),
            **data.model_dump(),
        )
        row = ticket.model_dump()
        row["priority"] = ticket.priority.value
        row["status"] = ticket.status.value
        self.execute(insert(tickets).values(**row))
        return ticket

    def get(self, ticket_id: str) -> Optional[Ticket]:
        row = self.fetch_one(select(tickets).where(tickets.c.id == ticket_id))
        return Ticket.model_validate(row) if row else None

    def list_recent(self, limit: Optional[int] = None) -> List[Ticket]:
        """Newest first."""
        stmt = select(tickets).order_by(tickets.c.created_at.desc())
        if limit:
            stmt = stmt.limit(limit)
        return [Ticket.model_validate(row) for row in self.fetch_all(stmt)]

    def close(self, ticket_id: str) -> bool:
        """Close an open ticket; False if it was missing or already closed."""
        stmt = (
            update(tickets)
            .where(tickets.c.id == ticket_id)
            .where(tickets.c.status == TicketStatus.OPEN.value)
            .values(status=TicketStatus.CLOSED.value)
        )
        return self.execute(stmt) == 1
