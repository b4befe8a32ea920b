"""Conversation transcript models."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field

from .commit import ConversationContext


class MessageType(str, Enum):
    """Author of a transcript message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Message(BaseModel):
    """A single message in a Claude transcript."""

    type: MessageType
    content: str
    timestamp: Optional[datetime] = None
    uuid: str = ""
    parent_uuid: Optional[str] = None


class Conversation(BaseModel):
    """All messages recorded for one conversation context."""

    context_id: str
    messages: List[Message] = []

    @property
    def total_messages(self) -> int:
        return len(self.messages)

    def by_type(self, message_type: MessageType) -> List[Message]:
        """Return only the messages written by ``message_type``."""
        return [m for m in self.messages if m.type == message_type]


class ContextRecord(BaseModel):
    """A stored conversation context keyed by the commit it belongs to."""

    commit_sha: str
    context_id: str
    total_messages: int = Field(default=0, ge=0)
    is_new_session: bool = Field(
        default=True, validation_alias=AliasChoices("is_new_session", "new_session")
    )
    jsonl_data: Optional[str] = None

    def to_context(self) -> ConversationContext:
        return ConversationContext(
            context_id=self.context_id,
            total_messages=self.total_messages,
            is_new_session=self.is_new_session,
        )
