"""Relational chat store on SQLAlchemy async sessions.

Every failure below the repository layer (engine, connection, schema, query)
comes out as `StoreUnavailable`; the caller decides where to go next.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from api.features.chats.entities.chat import Chat
from api.features.chats.entities.message import Message
from api.features.chats.exceptions import ChatNotFoundError
from api.features.chats.models import ChatRecord, MessageRecord
from api.features.chats.repositories.chat_repository import ChatRepository
from api.features.chats.repositories.message_repository import MessageRepository
from api.shared.entities.registry import BaseEntity
from api.shared.exceptions import StoreUnavailable
from infra.resources import DatabaseResource

logger = structlog.get_logger("copilot.chats.primary_store")


class SqlChatStore:
    """Primary store backed by the configured relational database."""

    name = "primary"

    def __init__(self, database: DatabaseResource):
        self._database = database

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            await self._database.init_schema(BaseEntity)
            session = self._database.get_session()
        except Exception as e:
            raise StoreUnavailable(self.name, str(e)) from e

        try:
            yield session
            await session.commit()
        except ChatNotFoundError:
            await session.rollback()
            raise
        except Exception as e:
            try:
                await session.rollback()
            except Exception:
                logger.warning("rollback_failed", exc_info=True)
            raise StoreUnavailable(self.name, str(e)) from e
        finally:
            await session.close()

    async def list_chats(self) -> List[ChatRecord]:
        async with self._session() as session:
            chats = await ChatRepository(session).list_newest_first()
            grouped = await MessageRepository(session).list_for_chats([c.id for c in chats])
            return [ChatRecord.from_entity(c, grouped.get(c.id, [])) for c in chats]

    async def create_chat(self, title: str) -> ChatRecord:
        async with self._session() as session:
            repository = ChatRepository(session)
            chat = await repository.create(
                Chat(title=title, sequence=await repository.next_sequence())
            )
            logger.info("chat_created", chat_id=chat.id, store=self.name)
            return ChatRecord.from_entity(chat, [])

    async def get_chat(self, chat_id: str) -> Optional[ChatRecord]:
        async with self._session() as session:
            chat = await ChatRepository(session).get_by_id(chat_id)
            if chat is None:
                return None
            messages = await MessageRepository(session).list_for_chat(chat_id)
            return ChatRecord.from_entity(chat, messages)

    async def chat_exists(self, chat_id: str) -> bool:
        async with self._session() as session:
            return await ChatRepository(session).exists(chat_id)

    async def update_chat_title(self, chat_id: str, title: str) -> ChatRecord:
        async with self._session() as session:
            repository = ChatRepository(session)
            chat = await repository.get_by_id(chat_id)
            if chat is None:
                raise ChatNotFoundError(chat_id)
            chat.title = title
            chat = await repository.update(chat)
            messages = await MessageRepository(session).list_for_chat(chat_id)
            return ChatRecord.from_entity(chat, messages)

    async def delete_chat(self, chat_id: str) -> None:
        async with self._session() as session:
            repository = ChatRepository(session)
            if not await repository.exists(chat_id):
                raise ChatNotFoundError(chat_id)
            removed = await MessageRepository(session).delete_for_chat(chat_id)
            await repository.delete(chat_id)
            logger.info("chat_deleted", chat_id=chat_id, messages=removed, store=self.name)

    async def list_messages(self, chat_id: str) -> List[MessageRecord]:
        async with self._session() as session:
            messages = await MessageRepository(session).list_for_chat(chat_id)
            return [MessageRecord.from_entity(m) for m in messages]

    async def create_message(self, chat_id: str, question: str, answer: str) -> MessageRecord:
        async with self._session() as session:
            if not await ChatRepository(session).exists(chat_id):
                raise ChatNotFoundError(chat_id)
            repository = MessageRepository(session)
            message = Message(
                chat_id=chat_id,
                question=question,
                answer=answer,
                position=await repository.next_position(chat_id),
            )
            message = await repository.create(message)
            return MessageRecord.from_entity(message)
