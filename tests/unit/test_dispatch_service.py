"""
Per-utterance pipeline tests.

The assistant and speech gateways are mocked; technicians and tickets live in
an in-memory SQLite store so the writes can be asserted.

Run with: pytest tests/unit/test_dispatch_service.py -v
"""

import re
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

# Add src to path to simulate Lambda environment
SRC_PATH = Path(__file__).parent.parent.parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from models.conversation import MessageRole  # noqa: E402
from models.dispatch import (  # noqa: E402
    AssignmentStatus,
    CreateTicket,
    Incomplete,
    ListenerMode,
    Suppressed,
    TranscriptRequest,
)
from models.speech import SpokenReply  # noqa: E402
from models.technician import TechnicianStatus  # noqa: E402
from models.ticket import Priority  # noqa: E402
from services.notification_service import ChangeEvent, NotificationService  # noqa: E402


@pytest.fixture
def assistant():
    mock = MagicMock()
    mock.reply.return_value = "Thanks, that has been noted."
    return mock


@pytest.fixture
def speech():
    mock = MagicMock()
    mock.speak.side_effect = lambda text: SpokenReply(text=text, audio_content="SUQz")
    return mock


@pytest.fixture
def notifier():
    return NotificationService()


@pytest.fixture
def events(notifier):
    received = []
    for table in ("technicians", "tickets"):
        notifier.subscribe(table, lambda t, e, r: received.append((t, e)))
    return received


@pytest.fixture
def conversations():
    return MagicMock()


@pytest.fixture
def dispatcher(assistant, speech, notifier, conversations, technician_repo, ticket_repo):
    from services.dispatch_service import DispatchService
    from services.ticket_service import TicketService

    tickets = TicketService(technicians=technician_repo, tickets=ticket_repo, persist_unassigned=False)
    return DispatchService(
        assistant=assistant,
        tickets=tickets,
        notifier=notifier,
        speech=speech,
        conversations=conversations,
    )


def _silent(transcript):
    return TranscriptRequest(transcript=transcript, mode=ListenerMode.SILENT)


def _interactive(transcript, session_id="s-1"):
    return TranscriptRequest(transcript=transcript, mode=ListenerMode.INTERACTIVE, session_id=session_id)


class TestSilentListener:
    """Background listener: writes tickets, speaks nothing."""

    def test_leak_creates_p1_ticket_and_assigns(self, dispatcher, technician_repo, ticket_repo, events):
        tech = technician_repo.add("Alex Morgan")

        result = dispatcher.handle_transcript(_silent("There is a leak in building A"))

        assert isinstance(result.decision, CreateTicket)
        assert result.assignment.status == AssignmentStatus.ASSIGNED
        assert result.acknowledgment == (
            "Ticket created successfully with priority P1. Technician Alex Morgan has been assigned."
        )
        stored = ticket_repo.list_recent()
        assert len(stored) == 1
        assert stored[0].building == "Building A"
        assert stored[0].priority == Priority.P1
        assert stored[0].technician_id == tech.id
        assert re.fullmatch(r"\d{2}/\d{2}/\d{4}", stored[0].date)
        assert technician_repo.get(tech.id).status == TechnicianStatus.BUSY
        assert events == [("tickets", ChangeEvent.INSERT), ("technicians", ChangeEvent.UPDATE)]
        assert result.speech == []

    def test_child_input_writes_nothing(self, dispatcher, technician_repo, ticket_repo, events):
        technician_repo.add("Alex Morgan")

        result = dispatcher.handle_transcript(_silent("The monster broke my toy in building B"))

        assert isinstance(result.decision, Suppressed)
        assert result.assignment is None
        assert ticket_repo.list_recent() == []
        assert events == []

    def test_assistant_child_marker_suppresses(self, dispatcher, assistant, technician_repo, ticket_repo):
        from services.assistant_service import CHILD_INPUT_REPLY

        technician_repo.add("Alex Morgan")
        assistant.reply.return_value = CHILD_INPUT_REPLY

        result = dispatcher.handle_transcript(_silent("There is a leak in building A"))

        assert isinstance(result.decision, Suppressed)
        assert ticket_repo.list_recent() == []

    def test_incomplete_writes_nothing(self, dispatcher, technician_repo, ticket_repo):
        tech = technician_repo.add("Alex Morgan")

        result = dispatcher.handle_transcript(_silent("The lights are flickering"))

        assert isinstance(result.decision, Incomplete)
        assert result.acknowledgment is None
        assert ticket_repo.list_recent() == []
        assert technician_repo.get(tech.id).status == TechnicianStatus.AVAILABLE

    def test_no_technician_acknowledges_without_ticket(self, dispatcher, technician_repo, ticket_repo, events):
        from services.dispatch_service import NO_TECHNICIAN_MESSAGE

        technician_repo.add("Busy Bee", TechnicianStatus.BUSY)

        result = dispatcher.handle_transcript(_silent("AC not working in building C"))

        assert result.decision.priority == Priority.P2
        assert result.assignment.status == AssignmentStatus.NO_TECHNICIAN
        assert result.acknowledgment == NO_TECHNICIAN_MESSAGE
        assert ticket_repo.list_recent() == []
        assert events == []

    def test_wifi_assigns_and_flips_busy(self, dispatcher, technician_repo):
        tech = technician_repo.add("Priya Shah")

        result = dispatcher.handle_transcript(_silent("Wifi is down in building D"))

        assert result.decision.priority == Priority.P3
        assert result.assignment.technician.id == tech.id
        assert technician_repo.get(tech.id).status == TechnicianStatus.BUSY

    def test_assistant_failure_does_not_block_ticket(self, technician_repo, ticket_repo, speech, notifier):
        from services.assistant_service import FALLBACK_REPLY, AssistantService
        from services.dispatch_service import DispatchService
        from services.ticket_service import TicketService

        technician_repo.add("Alex Morgan")
        with patch("services.assistant_service.boto3") as mock_boto3:
            mock_boto3.client.return_value.invoke_model.side_effect = Exception("Bedrock unavailable")
            assistant = AssistantService()
        dispatcher = DispatchService(
            assistant=assistant,
            tickets=TicketService(technicians=technician_repo, tickets=ticket_repo, persist_unassigned=False),
            notifier=notifier,
            speech=speech,
        )

        result = dispatcher.handle_transcript(_silent("There is a leak in building A"))

        assert result.assistant_reply == FALLBACK_REPLY
        assert result.assignment.status == AssignmentStatus.ASSIGNED

    def test_pipeline_error_is_logged_not_raised(self, dispatcher):
        dispatcher.tickets = MagicMock()
        dispatcher.tickets.open_ticket.side_effect = RuntimeError("boom")

        result = dispatcher.handle_transcript(_silent("There is a leak in building A"))

        assert result.assignment is None
        assert result.acknowledgment is None

    def test_silent_mode_keeps_no_transcript(self, dispatcher, conversations):
        dispatcher.handle_transcript(
            TranscriptRequest(transcript="leak in building A", mode=ListenerMode.SILENT, session_id="s-1")
        )
        conversations.append.assert_not_called()


class TestInteractiveListener:
    """Chat listener: logs the conversation and speaks replies."""

    def test_speaks_reply_and_acknowledgment(self, dispatcher, technician_repo, speech):
        technician_repo.add("Alex Morgan")

        result = dispatcher.handle_transcript(_interactive("There is a leak in building A"))

        spoken = [s.text for s in result.speech]
        assert spoken == [result.assistant_reply, result.acknowledgment]
        assert all(s.audio_content == "SUQz" for s in result.speech)

    def test_logs_user_and_assistant_messages(self, dispatcher, conversations, technician_repo):
        technician_repo.add("Alex Morgan")

        result = dispatcher.handle_transcript(_interactive("There is a leak in building A"))

        logged = [(c.args[1], c.args[2]) for c in conversations.append.call_args_list]
        assert logged == [
            (MessageRole.USER, "There is a leak in building A"),
            (MessageRole.ASSISTANT, result.assistant_reply),
            (MessageRole.ASSISTANT, result.acknowledgment),
        ]

    def test_incomplete_speaks_reply_only(self, dispatcher, speech):
        result = dispatcher.handle_transcript(_interactive("Hello there"))

        assert [s.text for s in result.speech] == ["Thanks, that has been noted."]

    def test_pipeline_error_apologizes(self, dispatcher):
        from services.dispatch_service import PROCESSING_ERROR_MESSAGE

        dispatcher.tickets = MagicMock()
        dispatcher.tickets.open_ticket.side_effect = RuntimeError("boom")

        result = dispatcher.handle_transcript(_interactive("There is a leak in building A"))

        assert result.acknowledgment == PROCESSING_ERROR_MESSAGE
        assert result.speech[-1].text == PROCESSING_ERROR_MESSAGE

    def test_conversation_log_failure_is_tolerated(self, dispatcher, conversations):
        conversations.append.side_effect = Exception("DynamoDB throttled")

        result = dispatcher.handle_transcript(_interactive("Hello there"))

        assert result.assistant_reply == "Thanks, that has been noted."

    def test_device_voice_fallback(self, dispatcher, speech):
        speech.speak.side_effect = lambda text: SpokenReply(text=text, use_device_voice=True)

        result = dispatcher.handle_transcript(_interactive("Hello there"))

        assert result.speech[0].use_device_voice is True


class TestDashboardRefresh:
    """An attached dashboard refetches when the pipeline writes."""

    def test_new_ticket_reaches_dashboard(self, dispatcher, notifier, technician_repo, ticket_repo):
        from services.dashboard_service import DashboardService

        tech = technician_repo.add("Alex Morgan")
        dashboard = DashboardService(technicians=technician_repo, tickets=ticket_repo)
        dashboard.attach(notifier)

        dispatcher.handle_transcript(_silent("There is a leak in building A"))

        latest = dashboard.latest
        assert [row.building for row in latest.tickets] == ["Building A"]
        assert latest.tickets[0].technician_id == tech.id
        assert latest.technicians[0].status == TechnicianStatus.BUSY
        assert latest.status_counts["busy"] == 1

    def test_detached_dashboard_stays_stale(self, dispatcher, notifier, technician_repo, ticket_repo):
        from services.dashboard_service import DashboardService

        technician_repo.add("Alex Morgan")
        dashboard = DashboardService(technicians=technician_repo, tickets=ticket_repo)
        dashboard.attach(notifier)
        dashboard.detach()

        dispatcher.handle_transcript(_silent("There is a leak in building A"))

        assert dashboard.latest is None

    def test_default_notifier_is_shared(self, technician_repo, ticket_repo, assistant, speech):
        from services.dispatch_service import DispatchService
        from services.notification_service import get_notifier
        from services.ticket_service import TicketService

        dispatcher = DispatchService(
            assistant=assistant,
            tickets=TicketService(technicians=technician_repo, tickets=ticket_repo, persist_unassigned=False),
            speech=speech,
        )

        assert dispatcher.notifier is get_notifier()
