"""Chat repository using base repository pattern."""
from typing import List

from sqlalchemy import func, select

from api.features.chats.entities.chat import Chat
from api.shared.base import BaseRepository


class ChatRepository(BaseRepository[Chat]):
    """Repository for chat entities."""

    model = Chat

    async def list_newest_first(self) -> List[Chat]:
        stmt = select(Chat).order_by(
            Chat.created_at.desc(), Chat.sequence.desc(), Chat.id.desc()
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def next_sequence(self) -> int:
        result = await self.session.execute(select(func.max(Chat.sequence)))
        current = result.scalar()
        return 0 if current is None else current + 1
