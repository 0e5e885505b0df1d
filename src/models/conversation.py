"""Chat transcript models for the interactive listener."""

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """One line of the interactive chat transcript."""

    session_id: str
    message_id: str
    role: MessageRole
    text: str
    timestamp: datetime


class ConversationSession(BaseModel):
    """A chat session and its messages, oldest first."""

    session_id: str
    messages: List[ChatMessage] = Field(default_factory=list)
