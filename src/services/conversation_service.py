"""Chat transcript for the interactive listener, stored in DynamoDB."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from models.conversation import ChatMessage, ConversationSession, MessageRole
from repositories.dynamodb_repo import DynamoDbRepository
from services.assistant_service import WELCOME_MESSAGE
from utils.error_handling import UnsupportedCapabilityError
from utils.logging_config import get_logger

logger = get_logger(__name__)

RESET_MESSAGE = f"Voice assistant reset. {WELCOME_MESSAGE}"
MESSAGE_TTL_DAYS = 7


class ConversationService:
    """Start, append to, read and reset chat sessions."""

    def __init__(self, repository: Optional[DynamoDbRepository] = None) -> None:
        self.repository = repository or DynamoDbRepository()

    def start_session(self, recognition_supported: bool = True) -> ConversationSession:
        """Open a session seeded with the welcome line."""
        if not recognition_supported:
            raise UnsupportedCapabilityError()
        session_id = str(uuid.uuid4())
        welcome = self.append(session_id, MessageRole.ASSISTANT, WELCOME_MESSAGE)
        logger.info("Conversation started", extra={"session_id": session_id})
        return ConversationSession(session_id=session_id, messages=[welcome])

    def append(self, session_id: str, role: MessageRole, text: str) -> ChatMessage:
        now = datetime.now(timezone.utc)
        message = ChatMessage(
            session_id=session_id,
            message_id=str(uuid.uuid4()),
            role=role,
            text=text,
            timestamp=now,
        )
        self.repository.put(
            {
                "session_id": session_id,
                # Sort key must be unique within a session.
                "timestamp": f"{now.isoformat()}#{message.message_id[:8]}",
                "message_id": message.message_id,
                "role": role.value,
                "text": text,
                "ttl": int((now + timedelta(days=MESSAGE_TTL_DAYS)).timestamp()),
            }
        )
        return message

    def history(self, session_id: str, limit: int = 50) -> List[ChatMessage]:
        """Messages oldest first."""
        items = self.repository.query_session(session_id, limit=limit)
        return [
            ChatMessage(
                session_id=item["session_id"],
                message_id=item["message_id"],
                role=MessageRole(item["role"]),
                text=item["text"],
                timestamp=datetime.fromisoformat(item["timestamp"].split("#", 1)[0]),
            )
            for item in items
        ]

    def reset(self, session_id: str) -> ConversationSession:
        """Drop the history and seed the reset line."""
        removed = self.repository.delete_session(session_id)
        logger.info(
            "Conversation reset", extra={"session_id": session_id, "removed": removed}
        )
        message = self.append(session_id, MessageRole.ASSISTANT, RESET_MESSAGE)
        return ConversationSession(session_id=session_id, messages=[message])
