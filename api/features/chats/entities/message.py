"""Message entity: one question/answer pair inside a chat."""
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from api.shared.entities.base import BaseEntity

if TYPE_CHECKING:
    from api.features.chats.entities.chat import Chat


class Message(BaseEntity):
    """Message entity, created with both question and answer populated."""

    question: Mapped[str] = mapped_column(Text, nullable=False)
    answer: Mapped[str] = mapped_column(Text, nullable=False)
    chat_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("chat.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Zero-based index within the chat
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    chat: Mapped["Chat"] = relationship(back_populates="messages")

    __table_args__ = (
        Index("ix_message_chat_position", "chat_id", "position"),
    )
