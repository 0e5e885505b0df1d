"""Models for the dispatch engine and the per-utterance pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from models.speech import SpokenReply
from models.technician import Technician
from models.ticket import Priority, Ticket


class ClassificationOutcome(BaseModel):
    """Transient match results for one transcript; never persisted."""

    is_child_input: bool
    has_location: bool
    has_problem: bool
    building: Optional[str] = None
    priority: Priority = Priority.P4


class Suppressed(BaseModel):
    """The transcript must not produce a ticket (e.g. a child speaking)."""

    kind: Literal["suppressed"] = "suppressed"
    reason: str


class Incomplete(BaseModel):
    """Location or problem is missing; a normal, frequent outcome."""

    kind: Literal["incomplete"] = "incomplete"
    has_location: bool = False
    has_problem: bool = False


class CreateTicket(BaseModel):
    """Everything needed to materialize a ticket."""

    kind: Literal["create_ticket"] = "create_ticket"
    building: str
    priority: Priority
    complaint: str
    date: str


DispatchDecision = Annotated[
    Union[Suppressed, Incomplete, CreateTicket], Field(discriminator="kind")
]


class ListenerMode(str, Enum):
    """Silent background listener or interactive chat UI."""

    SILENT = "silent"
    INTERACTIVE = "interactive"


class AssignmentStatus(str, Enum):
    """What happened when the pipeline tried to open a ticket."""

    ASSIGNED = "assigned"
    NO_TECHNICIAN = "no_technician"
    UNASSIGNED = "unassigned"
    FAILED = "failed"


class AssignmentResult(BaseModel):
    """Outcome of technician claim + ticket insert."""

    status: AssignmentStatus
    ticket: Optional[Ticket] = None
    technician: Optional[Technician] = None
    reason: Optional[str] = None


class TranscriptRequest(BaseModel):
    """Inbound utterance from one of the listeners."""

    transcript: str
    mode: ListenerMode = ListenerMode.SILENT
    session_id: Optional[str] = None

    @field_validator("transcript")
    @classmethod
    def validate_transcript(cls, value: str) -> str:
        """Reject blank transcripts before any gateway is called."""
        if not (value or "").strip():
            raise ValueError("transcript must be provided")
        return value


class EvaluateRequest(TranscriptRequest):
    """Engine-only evaluation, optionally with the assistant reply to inspect."""

    assistant_reply: Optional[str] = None


class DispatchResult(BaseModel):
    """Everything the listener needs to render and speak after one utterance."""

    transcript: str
    mode: ListenerMode
    decision: DispatchDecision
    assistant_reply: str
    assignment: Optional[AssignmentResult] = None
    acknowledgment: Optional[str] = None
    speech: List[SpokenReply] = Field(default_factory=list)
    correlation_id: str
