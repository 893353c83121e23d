"""Test doubles for answer providers and an unreachable primary store."""
from typing import List

from api.features.providers.base import (
    AssistantMessage,
    ProviderMessage,
    ProviderResponse,
)
from api.shared.exceptions import ProviderError, StoreUnavailable


class StubProvider:
    """Answers with a fixed text and records every history it was given."""

    def __init__(self, name: str = "gemini", answer: str = "stub answer"):
        self.name = name
        self.answer = answer
        self.calls: List[List[ProviderMessage]] = []

    async def generate(self, messages: List[ProviderMessage]) -> ProviderResponse:
        self.calls.append(list(messages))
        return ProviderResponse(
            id=f"{self.name}-response",
            model=f"{self.name}-test-model",
            message=AssistantMessage(content=self.answer),
            finish_reason="stop",
        )


class FailingProvider(StubProvider):
    async def generate(self, messages: List[ProviderMessage]) -> ProviderResponse:
        self.calls.append(list(messages))
        raise ProviderError(self.name, "upstream returned 503")


class BrokenStore:
    """Primary store double whose backend is always down."""

    name = "primary"

    def __init__(self):
        self.calls = 0

    async def _unavailable(self, *args, **kwargs):
        self.calls += 1
        raise StoreUnavailable(self.name, "connection refused")

    list_chats = _unavailable
    create_chat = _unavailable
    get_chat = _unavailable
    chat_exists = _unavailable
    update_chat_title = _unavailable
    delete_chat = _unavailable
    list_messages = _unavailable
    create_message = _unavailable


