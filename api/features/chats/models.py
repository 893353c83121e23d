"""Models for the Chats feature.

Both stores return these records, so nothing store-specific reaches the service.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from api.features.chats.entities.chat import Chat as ChatEntity
from api.features.chats.entities.message import Message as MessageEntity


class MessageRecord(BaseModel):
    """Domain model for Message."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(description="Message identifier")
    question: str = Field(description="User question")
    answer: str = Field(description="Generated answer")
    chat_id: str = Field(description="Owning chat identifier")
    created_at: Optional[datetime] = Field(default=None, description="Creation timestamp")

    @classmethod
    def from_entity(cls, entity: MessageEntity) -> "MessageRecord":
        """Create model from database entity."""
        return cls(
            id=entity.id,
            question=entity.question,
            answer=entity.answer,
            chat_id=entity.chat_id,
            created_at=entity.created_at,
        )


class ChatRecord(BaseModel):
    """Domain model for Chat."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(description="Chat identifier")
    title: str = Field(description="Chat title")
    created_at: Optional[datetime] = Field(default=None, description="Creation timestamp")
    messages: List[MessageRecord] = Field(default_factory=list, description="Messages, oldest first")

    @classmethod
    def from_entity(
        cls, entity: ChatEntity, messages: Optional[List[MessageEntity]] = None
    ) -> "ChatRecord":
        """Create model from database entity.

        `messages` must be passed explicitly; lazy relationship loading is not
        available on async sessions.
        """
        return cls(
            id=entity.id,
            title=entity.title,
            created_at=entity.created_at,
            messages=[MessageRecord.from_entity(m) for m in messages or []],
        )
