"""In-memory chat store used when the primary store cannot serve.

One instance lives for the whole process. All reads and writes go through a
single lock so concurrent requests cannot lose updates.
"""
import threading
from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

import structlog

from api.features.chats.exceptions import ChatNotFoundError
from api.features.chats.models import ChatRecord, MessageRecord

logger = structlog.get_logger("copilot.chats.fallback_store")

WELCOME_TITLE = "Welcome to DeFi Copilot"
WELCOME_QUESTION = "What can DeFi Copilot help me with?"
WELCOME_ANSWER = (
    "I can help you with DeFi strategies, token analysis, market trends, and more. "
    "Feel free to ask me anything about decentralized finance!"
)


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryChatStore:
    """Fallback store holding chats and messages in process memory."""

    name = "fallback"

    def __init__(self, seed: bool = True):
        self._lock = threading.Lock()
        self._chats: List[ChatRecord] = []
        # Insertion order is creation order
        self._messages: List[MessageRecord] = []
        if seed:
            self._seed()

    def _seed(self) -> None:
        chat = ChatRecord(id=_new_id(), title=WELCOME_TITLE, created_at=_utcnow())
        self._chats.append(chat)
        self._messages.append(
            MessageRecord(
                id=_new_id(),
                question=WELCOME_QUESTION,
                answer=WELCOME_ANSWER,
                chat_id=chat.id,
                created_at=_utcnow(),
            )
        )

    def _find_chat(self, chat_id: str) -> Optional[ChatRecord]:
        for chat in self._chats:
            if chat.id == chat_id:
                return chat
        return None

    def _messages_for(self, chat_id: str) -> List[MessageRecord]:
        return [m.model_copy() for m in self._messages if m.chat_id == chat_id]

    def _with_messages(self, chat: ChatRecord) -> ChatRecord:
        return chat.model_copy(update={"messages": self._messages_for(chat.id)})

    async def list_chats(self) -> List[ChatRecord]:
        with self._lock:
            return [self._with_messages(c) for c in reversed(self._chats)]

    async def create_chat(self, title: str) -> ChatRecord:
        with self._lock:
            chat = ChatRecord(id=_new_id(), title=title, created_at=_utcnow())
            self._chats.append(chat)
            logger.info("chat_created", chat_id=chat.id, store=self.name)
            return chat.model_copy()

    async def get_chat(self, chat_id: str) -> Optional[ChatRecord]:
        with self._lock:
            chat = self._find_chat(chat_id)
            return self._with_messages(chat) if chat else None

    async def chat_exists(self, chat_id: str) -> bool:
        with self._lock:
            return self._find_chat(chat_id) is not None

    async def update_chat_title(self, chat_id: str, title: str) -> ChatRecord:
        with self._lock:
            chat = self._find_chat(chat_id)
            if chat is None:
                raise ChatNotFoundError(chat_id)
            chat.title = title
            return self._with_messages(chat)

    async def delete_chat(self, chat_id: str) -> None:
        with self._lock:
            if self._find_chat(chat_id) is None:
                raise ChatNotFoundError(chat_id)
            self._chats = [c for c in self._chats if c.id != chat_id]
            before = len(self._messages)
            self._messages = [m for m in self._messages if m.chat_id != chat_id]
            logger.info(
                "chat_deleted",
                chat_id=chat_id,
                messages=before - len(self._messages),
                store=self.name,
            )

    async def list_messages(self, chat_id: str) -> List[MessageRecord]:
        with self._lock:
            return self._messages_for(chat_id)

    async def create_message(self, chat_id: str, question: str, answer: str) -> MessageRecord:
        with self._lock:
            if self._find_chat(chat_id) is None:
                raise ChatNotFoundError(chat_id)
            message = MessageRecord(
                id=_new_id(),
                question=question,
                answer=answer,
                chat_id=chat_id,
                created_at=_utcnow(),
            )
            self._messages.append(message)
            return message.model_copy()
