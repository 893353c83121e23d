"""Store interface shared by the primary (relational) and fallback (in-memory) stores.

The service depends only on this protocol:

- every method works on plain `ChatRecord` / `MessageRecord` models;
- a missing chat raises `ChatNotFoundError` on update/delete/create_message
  and yields `None` from `get_chat`;
- a store that cannot serve raises `StoreUnavailable` (the fallback store never does).
"""
from typing import List, Optional, Protocol

from api.features.chats.models import ChatRecord, MessageRecord


class ChatStore(Protocol):
    """Persistence protocol for chats and their messages."""

    name: str

    async def list_chats(self) -> List[ChatRecord]:
        """All chats newest first, each with its own messages."""
        ...

    async def create_chat(self, title: str) -> ChatRecord:
        ...

    async def get_chat(self, chat_id: str) -> Optional[ChatRecord]:
        """Chat with its messages, or None."""
        ...

    async def chat_exists(self, chat_id: str) -> bool:
        ...

    async def update_chat_title(self, chat_id: str, title: str) -> ChatRecord:
        ...

    async def delete_chat(self, chat_id: str) -> None:
        """Delete a chat and every message it owns."""
        ...

    async def list_messages(self, chat_id: str) -> List[MessageRecord]:
        """Messages oldest first; empty for an unknown chat."""
        ...

    async def create_message(self, chat_id: str, question: str, answer: str) -> MessageRecord:
        ...
