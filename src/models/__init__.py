"""Pydantic models for API payloads and store records."""

from models.conversation import ChatMessage, ConversationSession, MessageRole  # noqa: F401
from models.dashboard import DashboardSnapshot, TechnicianCard, TicketRow  # noqa: F401
from models.dispatch import (  # noqa: F401
    AssignmentResult,
    AssignmentStatus,
    ClassificationOutcome,
    CreateTicket,
    DispatchDecision,
    DispatchResult,
    Incomplete,
    ListenerMode,
    Suppressed,
    TranscriptRequest,
)
from models.response import ApiResponse  # noqa: F401
from models.speech import SpokenReply  # noqa: F401
from models.technician import StatusUpdate, Technician, TechnicianStatus  # noqa: F401
from models.ticket import Priority, Ticket, TicketCreate, TicketStatus  # noqa: F401
