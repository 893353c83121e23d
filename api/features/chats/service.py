"""Conversation service: chats, messages and answer generation over two stores.

Every store call goes through `with_fallback`: the primary store is asked
first and, when it raises `StoreUnavailable` (or, for lookups by id, does not
hold the chat), the same operation runs against the fallback store. A chat and
its messages always stay in the one store that created the chat; the stores
are never merged.
"""
from typing import Awaitable, Callable, List, Optional, Tuple, TypeVar

import structlog

from api.features.chats.exceptions import ChatNotFoundError
from api.features.chats.models import ChatRecord, MessageRecord
from api.features.chats.stores.base import ChatStore
from api.features.chats.validators import ChatValidator, derive_title
from api.features.providers.base import ProviderMessage, ProviderResponse
from api.features.providers.registry import ProviderRegistry
from api.shared.exceptions import (
    PersistenceError,
    ProviderError,
    StoreUnavailable,
    ValidationError,
)

logger = structlog.get_logger("copilot.chats.service")

T = TypeVar("T")


class ConversationService:
    """Chat and message operations with primary-to-fallback store substitution."""

    def __init__(
        self,
        primary_store: ChatStore,
        fallback_store: ChatStore,
        providers: ProviderRegistry,
    ):
        self.primary = primary_store
        self.fallback = fallback_store
        self.providers = providers

    async def with_fallback(
        self,
        operation: str,
        primary_op: Callable[[], Awaitable[T]],
        fallback_op: Callable[[], Awaitable[T]],
        *,
        fallback_on_missing: bool = False,
    ) -> T:
        """Run `primary_op`; on store failure run `fallback_op` instead.

        With `fallback_on_missing`, a `ChatNotFoundError` from the primary
        store also moves on to the fallback store, whose own not-found
        result is final.
        """
        try:
            return await primary_op()
        except StoreUnavailable as e:
            logger.warning(
                "store_fallback",
                operation=operation,
                failed_store=self.primary.name,
                fallback_store=self.fallback.name,
                reason=e.message,
            )
        except ChatNotFoundError:
            if not fallback_on_missing:
                raise
        return await fallback_op()

    # ---- chats ----

    async def list_chats(self) -> List[ChatRecord]:
        return await self.with_fallback(
            "list_chats", self.primary.list_chats, self.fallback.list_chats
        )

    async def create_chat(self, title: Optional[str]) -> ChatRecord:
        title = ChatValidator.validate_title(title)
        return await self.with_fallback(
            "create_chat",
            lambda: self.primary.create_chat(title),
            lambda: self.fallback.create_chat(title),
        )

    async def get_chat(self, chat_id: str) -> ChatRecord:
        return await self.with_fallback(
            "get_chat",
            lambda: self._require_chat(self.primary, chat_id),
            lambda: self._require_chat(self.fallback, chat_id),
            fallback_on_missing=True,
        )

    async def rename_chat(self, chat_id: str, title: Optional[str]) -> ChatRecord:
        title = ChatValidator.validate_new_title(title)
        return await self.with_fallback(
            "rename_chat",
            lambda: self.primary.update_chat_title(chat_id, title),
            lambda: self.fallback.update_chat_title(chat_id, title),
            fallback_on_missing=True,
        )

    async def delete_chat(self, chat_id: str) -> bool:
        await self.with_fallback(
            "delete_chat",
            lambda: self.primary.delete_chat(chat_id),
            lambda: self.fallback.delete_chat(chat_id),
            fallback_on_missing=True,
        )
        return True

    # ---- messages ----

    async def list_messages(self, chat_id: str) -> List[MessageRecord]:
        return await self.with_fallback(
            "list_messages",
            lambda: self._held_messages(self.primary, chat_id),
            lambda: self.fallback.list_messages(chat_id),
            fallback_on_missing=True,
        )

    async def post_message(
        self,
        chat_id: str,
        question: Optional[str],
        provider_name: Optional[str] = None,
    ) -> MessageRecord:
        """Ask the provider and store the question/answer pair in the chat's store."""
        question = ChatValidator.validate_question(question)

        store, prior = await self.with_fallback(
            "resolve_chat",
            lambda: self._load_history(self.primary, chat_id),
            lambda: self._load_history(self.fallback, chat_id),
            fallback_on_missing=True,
        )

        history = build_history(prior, question)
        response = await self._generate(provider_name, history)
        answer = response.message.content

        store, message = await self._persist_message(store, chat_id, question, answer)

        if not prior:
            title = derive_title(question)
            try:
                await store.update_chat_title(chat_id, title)
            except Exception:
                logger.exception("title_update_failed", chat_id=chat_id, store=store.name)

        logger.info(
            "message_created",
            chat_id=chat_id,
            message_id=message.id,
            store=store.name,
            provider=response.model,
        )
        return message

    async def complete(
        self,
        messages: List[ProviderMessage],
        chat_id: Optional[str] = None,
        provider_name: Optional[str] = None,
    ) -> ProviderResponse:
        """One-off completion over a caller-supplied history.

        When `chat_id` names a known chat, the last user turn and the answer
        are also stored there; a storage problem does not fail the completion.
        """
        if not messages:
            raise ValidationError("Messages are required and must be an array")
        last_user = next((m for m in reversed(messages) if m.role == "user"), None)
        if last_user is None or not last_user.content:
            raise ValidationError("No user message found")

        response = await self._generate(provider_name, messages)

        if chat_id:
            try:
                store, _ = await self.with_fallback(
                    "resolve_chat",
                    lambda: self._load_history(self.primary, chat_id),
                    lambda: self._load_history(self.fallback, chat_id),
                    fallback_on_missing=True,
                )
                await self._persist_message(
                    store, chat_id, last_user.content, response.message.content
                )
            except ChatNotFoundError:
                logger.info("completion_chat_unknown", chat_id=chat_id)
            except (StoreUnavailable, PersistenceError) as e:
                logger.warning("completion_not_stored", chat_id=chat_id, reason=e.message)

        return response

    # ---- helpers ----

    @staticmethod
    async def _require_chat(store: ChatStore, chat_id: str) -> ChatRecord:
        chat = await store.get_chat(chat_id)
        if chat is None:
            raise ChatNotFoundError(chat_id)
        return chat

    @staticmethod
    async def _held_messages(store: ChatStore, chat_id: str) -> List[MessageRecord]:
        if not await store.chat_exists(chat_id):
            raise ChatNotFoundError(chat_id)
        return await store.list_messages(chat_id)

    async def _load_history(
        self, store: ChatStore, chat_id: str
    ) -> Tuple[ChatStore, List[MessageRecord]]:
        chat = await self._require_chat(store, chat_id)
        return store, chat.messages

    async def _generate(
        self, provider_name: Optional[str], history: List[ProviderMessage]
    ) -> ProviderResponse:
        provider = self.providers.get(provider_name)
        try:
            response = await provider.generate(history)
        except ProviderError:
            raise
        except Exception as e:
            logger.exception("provider_failed", provider=provider.name)
            raise ProviderError(provider.name, str(e) or type(e).__name__) from e

        if response is None or response.message is None or not response.message.content.strip():
            raise ProviderError(provider.name, "Invalid AI response format")
        return response

    async def _persist_message(
        self, store: ChatStore, chat_id: str, question: str, answer: str
    ) -> Tuple[ChatStore, MessageRecord]:
        if store is self.fallback:
            return store, await self.fallback.create_message(chat_id, question, answer)

        saved_in: ChatStore = self.primary

        async def _fallback_create() -> MessageRecord:
            nonlocal saved_in
            saved_in = self.fallback
            try:
                return await self.fallback.create_message(chat_id, question, answer)
            except ChatNotFoundError as e:
                # The chat lives in the primary store only; do not split it
                raise PersistenceError(
                    "Failed to save message: primary store unavailable",
                    {"chat_id": chat_id},
                ) from e

        message = await self.with_fallback(
            "create_message",
            lambda: self.primary.create_message(chat_id, question, answer),
            _fallback_create,
        )
        return saved_in, message


def build_history(prior: List[MessageRecord], question: str) -> List[ProviderMessage]:
    """Replay earlier pairs as user/assistant turns, then the new question."""
    history: List[ProviderMessage] = []
    for message in prior:
        history.append(ProviderMessage(role="user", content=message.question))
        history.append(ProviderMessage(role="assistant", content=message.answer))
    history.append(ProviderMessage(role="user", content=question))
    return history
