"""Message repository using base repository pattern."""
from collections import defaultdict
from typing import Dict, List, Sequence

from sqlalchemy import select

from api.features.chats.entities.message import Message
from api.shared.base import BaseRepository


class MessageRepository(BaseRepository[Message]):
    """Repository for message entities with chat-scoped queries."""

    model = Message

    async def list_for_chat(self, chat_id: str) -> List[Message]:
        """Messages of one chat in creation order."""
        stmt = (
            select(Message)
            .where(Message.chat_id == chat_id)
            .order_by(Message.position.asc(), Message.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_chats(self, chat_ids: Sequence[str]) -> Dict[str, List[Message]]:
        """Messages of several chats, grouped by chat id, each in creation order."""
        grouped: Dict[str, List[Message]] = defaultdict(list)
        if not chat_ids:
            return grouped
        stmt = (
            select(Message)
            .where(Message.chat_id.in_(list(chat_ids)))
            .order_by(Message.position.asc(), Message.created_at.asc())
        )
        result = await self.session.execute(stmt)
        for message in result.scalars().all():
            grouped[message.chat_id].append(message)
        return grouped

    async def next_position(self, chat_id: str) -> int:
        return await self.count(chat_id=chat_id)

    async def delete_for_chat(self, chat_id: str) -> int:
        return await self.delete_by_field("chat_id", chat_id)
