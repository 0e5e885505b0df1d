"""
Pydantic model validation tests.

Ensures all models validate correctly and reject invalid data.
No AWS connection required.

Run with: pytest tests/unit/test_models.py -v
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
from pydantic import TypeAdapter, ValidationError

# Add src to path to simulate Lambda environment
SRC_PATH = Path(__file__).parent.parent.parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


class TestTechnicianModels:
    """Test Technician and StatusUpdate models."""

    def test_valid_technician(self):
        from models.technician import Technician, TechnicianStatus

        tech = Technician(id="t-1", name="Alex Morgan", status="available")
        assert tech.status == TechnicianStatus.AVAILABLE
        assert tech.created_at is None

    def test_unknown_status_rejected(self):
        from models.technician import Technician

        with pytest.raises(ValidationError):
            Technician(id="t-1", name="Alex Morgan", status="on-leave")

    def test_status_update_is_case_insensitive(self):
        from models.technician import StatusUpdate, TechnicianStatus

        update = StatusUpdate(status="  Busy ")
        assert update.status == TechnicianStatus.BUSY


class TestTicketModels:
    """Test Ticket and Priority models."""

    def test_ticket_defaults_to_open(self):
        from models.ticket import TicketCreate, TicketStatus

        data = TicketCreate(
            complaint="Leak in building A",
            building="Building A",
            date="03/07/2024",
            priority="P1",
        )
        assert data.status == TicketStatus.OPEN
        assert data.technician_id is None

    def test_priority_labels(self):
        from models.ticket import Priority

        assert [p.label for p in Priority] == ["Critical", "High", "Medium", "Low"]

    def test_invalid_priority_rejected(self):
        from models.ticket import TicketCreate

        with pytest.raises(ValidationError):
            TicketCreate(complaint="x", building="Building A", date="03/07/2024", priority="P5")

    def test_ticket_requires_id_and_created_at(self):
        from models.ticket import Ticket

        with pytest.raises(ValidationError):
            Ticket(complaint="x", building="Building A", date="03/07/2024", priority="P4")


class TestDispatchModels:
    """Test dispatch decision and pipeline models."""

    def test_decision_union_discriminates_on_kind(self):
        from models.dispatch import CreateTicket, DispatchDecision, Incomplete, Suppressed

        adapter = TypeAdapter(DispatchDecision)

        assert isinstance(adapter.validate_python({"kind": "suppressed", "reason": "child_input"}), Suppressed)
        assert isinstance(adapter.validate_python({"kind": "incomplete"}), Incomplete)
        created = adapter.validate_python({
            "kind": "create_ticket",
            "building": "Building A",
            "priority": "P1",
            "complaint": "Leak in building A",
            "date": "03/07/2024",
        })
        assert isinstance(created, CreateTicket)

    def test_unknown_kind_rejected(self):
        from models.dispatch import DispatchDecision

        with pytest.raises(ValidationError):
            TypeAdapter(DispatchDecision).validate_python({"kind": "escalate"})

    def test_transcript_request_defaults(self):
        from models.dispatch import ListenerMode, TranscriptRequest

        request = TranscriptRequest(transcript="Leak in building A")
        assert request.mode == ListenerMode.SILENT
        assert request.session_id is None

    @pytest.mark.parametrize("transcript", ["", "   "])
    def test_blank_transcript_rejected(self, transcript):
        from models.dispatch import TranscriptRequest

        with pytest.raises(ValidationError):
            TranscriptRequest(transcript=transcript)

    def test_dispatch_result_serializes_decision(self):
        from models.dispatch import DispatchResult, ListenerMode, Suppressed

        result = DispatchResult(
            transcript="monster in building B",
            mode=ListenerMode.SILENT,
            decision=Suppressed(reason="child_input"),
            assistant_reply="Hello there!",
            correlation_id="corr-1",
        )
        dumped = result.model_dump(mode="json")
        assert dumped["decision"] == {"kind": "suppressed", "reason": "child_input"}
        assert dumped["speech"] == []


class TestConversationModels:
    """Test chat transcript models."""

    def test_chat_message(self):
        from models.conversation import ChatMessage, MessageRole

        message = ChatMessage(
            session_id="s-1",
            message_id="m-1",
            role="assistant",
            text="We are here to support and assist you.",
            timestamp=datetime.now(timezone.utc),
        )
        assert message.role == MessageRole.ASSISTANT


class TestApiResponse:
    """Test ApiResponse model."""

    def test_response_with_data(self):
        from models.response import ApiResponse

        response = ApiResponse(message="ok", data=[{"id": "t-1"}], count=1)
        assert response.count == 1
        assert response.correlation_id is None
