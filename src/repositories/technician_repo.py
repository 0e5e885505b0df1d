"""Technician directory repository."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy import insert, select, update

from models.technician import Technician, TechnicianStatus
from repositories.postgres_repo import PostgresRepository
from repositories.schema import technicians
from utils.logging_config import get_logger

logger = get_logger(__name__)


class TechnicianRepository(PostgresRepository):
    """Reads and conditional status writes on the technicians table."""

    def list_all(self) -> List[Technician]:
        """All technicians ordered by name, as the dashboard shows them."""
        rows = self.fetch_all(select(technicians).order_by(technicians.c.name))
        return [Technician.model_validate(row) for row in rows]

    def get(self, technician_id: str) -> Optional[Technician]:
        row = self.fetch_one(select(technicians).where(technicians.c.id == technician_id))
        return Technician.model_validate(row) if row else None

    def find_available(
        self, limit: int = 1, exclude: Iterable[str] = ()
    ) -> List[Technician]:
        """Technicians currently available; store order, no secondary sort."""
        stmt = select(technicians).where(
            technicians.c.status == TechnicianStatus.AVAILABLE.value
        )
        skipped = list(exclude)
        if skipped:
            stmt = stmt.where(technicians.c.id.not_in(skipped))
        return [Technician.model_validate(row) for row in self.fetch_all(stmt.limit(limit))]

    def compare_and_set_status(
        self, technician_id: str, expected: TechnicianStatus, new: TechnicianStatus
    ) -> bool:
        """Single conditional write; True only if the row still had ``expected``."""
        stmt = (
            update(technicians)
            .where(technicians.c.id == technician_id)
            .where(technicians.c.status == expected.value)
            .values(status=new.value)
        )
        return self.execute(stmt) == 1

    def claim_available(self) -> Optional[Technician]:
        """
        Atomically take one available technician and mark it busy.

        A concurrent dispatch may claim the same candidate between our read and
        our write; the conditional update then touches no row, that technician
        is skipped, and the next one is read. Gives up only once no available
        technician is left to try.
        """
        lost: List[str] = []
        while True:
            candidates = self.find_available(limit=1, exclude=lost)
            if not candidates:
                return None
            candidate = candidates[0]
            if self.compare_and_set_status(
                candidate.id, TechnicianStatus.AVAILABLE, TechnicianStatus.BUSY
            ):
                return candidate.model_copy(update={"status": TechnicianStatus.BUSY})
            lost.append(candidate.id)
            logger.info(
                "Technician claimed concurrently; retrying",
                extra={"technician_id": candidate.id, "attempt": len(lost)},
            )

    def set_status(self, technician_id: str, status: TechnicianStatus) -> bool:
        """Unconditional directory write by id."""
        stmt = (
            update(technicians)
            .where(technicians.c.id == technician_id)
            .values(status=status.value)
        )
        return self.execute(stmt) == 1

    def add(
        self, name: str, status: TechnicianStatus = TechnicianStatus.AVAILABLE
    ) -> Technician:
        technician = Technician(
            id=str(uuid.uuid4()),
            name=name,
            status=status,
            created_at=datetime.now(timezone.utc),
        )
        row = technician.model_dump()
        row["status"] = technician.status.value
        self.execute(insert(technicians).values(**row))
        return technician
