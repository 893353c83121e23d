"""Chat entity: a titled conversation owning its messages."""
from typing import TYPE_CHECKING, List

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from api.shared.entities.base import BaseEntity

if TYPE_CHECKING:
    from api.features.chats.entities.message import Message


class Chat(BaseEntity):
    """Chat entity; deleting it removes its messages."""

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    # Creation order; breaks ties between equal created_at values
    sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)

    messages: Mapped[List["Message"]] = relationship(
        back_populates="chat",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Message.position",
    )
