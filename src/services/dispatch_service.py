"""
Per-utterance dispatch pipeline.

assistant reply -> dispatch engine -> (conditionally) claim + insert ->
change notification -> acknowledgment. The silent background listener and
the interactive chat share this flow; only the interactive mode keeps a chat
transcript and speaks its replies.
"""

from __future__ import annotations

import time
import uuid
from typing import List, Optional

from models.conversation import MessageRole
from models.dispatch import (
    AssignmentResult,
    AssignmentStatus,
    CreateTicket,
    DispatchResult,
    ListenerMode,
    TranscriptRequest,
)
from models.speech import SpokenReply
from services.assistant_service import AssistantService
from services.conversation_service import ConversationService
from services.dispatch_engine import DispatchEngine
from services.notification_service import (
    TECHNICIANS_TABLE,
    TICKETS_TABLE,
    ChangeEvent,
    NotificationService,
    get_notifier,
)
from services.speech_service import SpeechService
from services.ticket_service import TicketService
from utils.logging_config import get_logger

logger = get_logger(__name__)

NO_TECHNICIAN_MESSAGE = "No technician is available right now. Your request has been noted."
PROCESSING_ERROR_MESSAGE = (
    "I'm sorry, I'm having trouble processing your request right now."
)


def assigned_message(result: AssignmentResult) -> str:
    return (
        f"Ticket created successfully with priority {result.ticket.priority.value}. "
        f"Technician {result.technician.name} has been assigned."
    )


class DispatchService:
    """Runs one transcript through the whole pipeline."""

    def __init__(
        self,
        assistant: Optional[AssistantService] = None,
        engine: Optional[DispatchEngine] = None,
        tickets: Optional[TicketService] = None,
        notifier: Optional[NotificationService] = None,
        speech: Optional[SpeechService] = None,
        conversations: Optional[ConversationService] = None,
    ) -> None:
        self.assistant = assistant or AssistantService()
        self.engine = engine or DispatchEngine()
        self.tickets = tickets or TicketService()
        self.notifier = notifier or get_notifier()
        self._speech = speech
        self._conversations = conversations

    @property
    def speech(self) -> SpeechService:
        if self._speech is None:
            self._speech = SpeechService()
        return self._speech

    @property
    def conversations(self) -> ConversationService:
        if self._conversations is None:
            self._conversations = ConversationService()
        return self._conversations

    def handle_transcript(
        self, request: TranscriptRequest, correlation_id: Optional[str] = None
    ) -> DispatchResult:
        correlation_id = correlation_id or str(uuid.uuid4())
        interactive = request.mode == ListenerMode.INTERACTIVE
        start = time.perf_counter()

        if interactive and request.session_id:
            self._log_message(request.session_id, MessageRole.USER, request.transcript)

        reply = self.assistant.reply(request.transcript)
        outcome = self.engine.classify(request.transcript, reply)
        decision = self.engine.evaluate(request.transcript, reply)
        logger.info(
            "Transcript classified",
            extra={
                "correlation_id": correlation_id,
                "mode": request.mode.value,
                "transcript": request.transcript,
                "decision": decision.kind,
                "is_child_input": outcome.is_child_input,
                "has_location": outcome.has_location,
                "has_problem": outcome.has_problem,
                "building": outcome.building,
                "priority": outcome.priority.value,
            },
        )

        assignment: Optional[AssignmentResult] = None
        acknowledgment: Optional[str] = None
        try:
            if isinstance(decision, CreateTicket):
                assignment = self.tickets.open_ticket(decision)
                acknowledgment = self._acknowledge(assignment)
        except Exception:
            logger.exception(
                "Dispatch pipeline failed", extra={"correlation_id": correlation_id}
            )
            if interactive:
                acknowledgment = PROCESSING_ERROR_MESSAGE

        speech: List[SpokenReply] = []
        if interactive:
            for text in filter(None, (reply, acknowledgment)):
                if request.session_id:
                    self._log_message(request.session_id, MessageRole.ASSISTANT, text)
                speech.append(self.speech.speak(text))

        logger.info(
            "Transcript dispatched",
            extra={
                "correlation_id": correlation_id,
                "assignment": assignment.status.value if assignment else None,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return DispatchResult(
            transcript=request.transcript,
            mode=request.mode,
            decision=decision,
            assistant_reply=reply,
            assignment=assignment,
            acknowledgment=acknowledgment,
            speech=speech,
            correlation_id=correlation_id,
        )

    def _acknowledge(self, assignment: AssignmentResult) -> Optional[str]:
        if assignment.status == AssignmentStatus.ASSIGNED:
            self.notifier.publish(TICKETS_TABLE, ChangeEvent.INSERT, assignment.ticket.id)
            self.notifier.publish(
                TECHNICIANS_TABLE, ChangeEvent.UPDATE, assignment.technician.id
            )
            return assigned_message(assignment)
        if assignment.status == AssignmentStatus.UNASSIGNED:
            self.notifier.publish(TICKETS_TABLE, ChangeEvent.INSERT, assignment.ticket.id)
            return NO_TECHNICIAN_MESSAGE
        if assignment.status == AssignmentStatus.NO_TECHNICIAN:
            return NO_TECHNICIAN_MESSAGE
        return None

    def _log_message(self, session_id: str, role: MessageRole, text: str) -> None:
        try:
            self.conversations.append(session_id, role, text)
        except Exception as exc:
            logger.warning(
                "Conversation log write failed",
                extra={"session_id": session_id, "error": str(exc)},
            )
