"""
Technician assignment and ticket persistence.

The claim on a technician is a single conditional write, so two dispatch
runs can never both take the same available technician. The ticket is
inserted only after a successful claim; if that insert fails the claim is
released again.
"""

from __future__ import annotations

import os
from typing import Optional

from models.dispatch import AssignmentResult, AssignmentStatus, CreateTicket
from models.technician import TechnicianStatus
from models.ticket import Ticket, TicketCreate, TicketStatus
from repositories.technician_repo import TechnicianRepository
from repositories.ticket_repo import TicketRepository
from utils.error_handling import NotFoundError, ValidationError
from utils.logging_config import get_logger

logger = get_logger(__name__)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes")


class TicketService:
    """Opens and closes tickets against the directory and the store."""

    def __init__(
        self,
        technicians: Optional[TechnicianRepository] = None,
        tickets: Optional[TicketRepository] = None,
        persist_unassigned: Optional[bool] = None,
    ) -> None:
        self.technicians = technicians or TechnicianRepository()
        self.tickets = tickets or TicketRepository(self.technicians.engine)
        self.persist_unassigned = (
            _env_flag("PERSIST_UNASSIGNED_TICKETS")
            if persist_unassigned is None
            else persist_unassigned
        )

    def open_ticket(self, decision: CreateTicket) -> AssignmentResult:
        """Claim a technician, then persist the ticket referencing them."""
        try:
            technician = self.technicians.claim_available()
        except Exception as exc:
            logger.error(
                "Technician lookup failed", extra={"building": decision.building, "error": str(exc)}
            )
            return AssignmentResult(status=AssignmentStatus.FAILED, reason="technician_lookup_failed")

        if technician is None:
            return self._without_technician(decision)

        data = TicketCreate(
            complaint=decision.complaint,
            building=decision.building,
            date=decision.date,
            priority=decision.priority,
            technician_id=technician.id,
            technician_name=technician.name,
        )
        try:
            ticket = self.tickets.insert(data)
        except Exception as exc:
            logger.error(
                "Ticket insert failed; releasing technician",
                extra={"technician_id": technician.id, "error": str(exc)},
            )
            self._release(technician.id)
            return AssignmentResult(status=AssignmentStatus.FAILED, reason="ticket_insert_failed")

        logger.info(
            "Ticket created",
            extra={
                "ticket_id": ticket.id,
                "building": ticket.building,
                "priority": ticket.priority.value,
                "technician_id": technician.id,
            },
        )
        return AssignmentResult(
            status=AssignmentStatus.ASSIGNED, ticket=ticket, technician=technician
        )

    def _without_technician(self, decision: CreateTicket) -> AssignmentResult:
        if not self.persist_unassigned:
            logger.info(
                "No available technicians; ticket not persisted",
                extra={"building": decision.building, "priority": decision.priority.value},
            )
            return AssignmentResult(status=AssignmentStatus.NO_TECHNICIAN)

        try:
            ticket = self.tickets.insert(
                TicketCreate(
                    complaint=decision.complaint,
                    building=decision.building,
                    date=decision.date,
                    priority=decision.priority,
                )
            )
        except Exception as exc:
            logger.error("Unassigned ticket insert failed", extra={"error": str(exc)})
            return AssignmentResult(status=AssignmentStatus.FAILED, reason="ticket_insert_failed")
        logger.info("Unassigned ticket stored", extra={"ticket_id": ticket.id})
        return AssignmentResult(status=AssignmentStatus.UNASSIGNED, ticket=ticket)

    def _release(self, technician_id: str) -> None:
        try:
            released = self.technicians.compare_and_set_status(
                technician_id, TechnicianStatus.BUSY, TechnicianStatus.AVAILABLE
            )
            if not released:
                logger.warning(
                    "Technician was not busy on release", extra={"technician_id": technician_id}
                )
        except Exception as exc:
            logger.error(
                "Technician release failed",
                extra={"technician_id": technician_id, "error": str(exc)},
            )

    def close_ticket(self, ticket_id: str) -> Ticket:
        """Close an open ticket and hand its technician back to the pool."""
        ticket = self.tickets.get(ticket_id)
        if ticket is None:
            raise NotFoundError(f"Ticket {ticket_id} not found")
        if not self.tickets.close(ticket_id):
            raise ValidationError(f"Ticket {ticket_id} is already closed")
        if ticket.technician_id:
            self._release(ticket.technician_id)
        return ticket.model_copy(update={"status": TicketStatus.CLOSED})
