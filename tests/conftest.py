"""Shared fixtures: temporary SQLite database, both stores, stub providers."""
from typing import Optional

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from api.features.chats.service import ConversationService
from api.features.chats.stores.memory import InMemoryChatStore
from api.features.chats.stores.primary import SqlChatStore
from api.features.providers.registry import ProviderRegistry
from core.settings import (
    AppSettings,
    DatabaseSettings,
    FallbackSettings,
    GeminiSettings,
    OpenRouterSettings,
    Settings,
)
from infra.resources import DatabaseResource
from tests.fakes import BrokenStore, FailingProvider, StubProvider


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{(tmp_path / 'test.db').as_posix()}"


@pytest.fixture
async def database(database_url):
    resource = DatabaseResource(database_url)
    await resource.init()
    yield resource
    await resource.shutdown()


@pytest.fixture
def primary_store(database) -> SqlChatStore:
    return SqlChatStore(database)


@pytest.fixture
def fallback_store() -> InMemoryChatStore:
    return InMemoryChatStore(seed=False)


@pytest.fixture
def broken_store() -> BrokenStore:
    return BrokenStore()


@pytest.fixture
def gemini() -> StubProvider:
    return StubProvider("gemini", answer="Impermanent loss is the value gap versus holding.")


@pytest.fixture
def deepseek() -> StubProvider:
    return StubProvider("deepseek", answer="DeepSeek says hello.")


@pytest.fixture
def registry(gemini, deepseek) -> ProviderRegistry:
    return ProviderRegistry([gemini, deepseek], default="gemini")


@pytest.fixture
def service(primary_store, fallback_store, registry) -> ConversationService:
    return ConversationService(primary_store, fallback_store, registry)


@pytest.fixture
def degraded_service(broken_store, fallback_store, registry) -> ConversationService:
    return ConversationService(broken_store, fallback_store, registry)


def make_settings(database_url: str, seed: bool = False) -> Settings:
    return Settings(
        APP=AppSettings(LOG_LEVEL="WARNING"),
        DATABASE=DatabaseSettings(DATABASE_URL=database_url),
        GEMINI=GeminiSettings(GEMINI_API_KEY=""),
        OPENROUTER=OpenRouterSettings(OPENROUTER_API_KEY=""),
        FALLBACK=FallbackSettings(FALLBACK_SEED_ENABLED=seed),
    )


def build_client(
    database_url: str,
    registry: ProviderRegistry,
    primary_store: Optional[object] = None,
) -> TestClient:
    from api.main import create_fastapi_app

    app = create_fastapi_app(make_settings(database_url))
    app.container.services.provider_registry.override(providers.Object(registry))
    if primary_store is not None:
        app.container.services.primary_store.override(providers.Object(primary_store))
    return TestClient(app)


@pytest.fixture
def client(database_url, registry):
    with build_client(database_url, registry) as test_client:
        yield test_client


@pytest.fixture
def degraded_client(database_url, registry, broken_store):
    with build_client(database_url, registry, primary_store=broken_store) as test_client:
        yield test_client


@pytest.fixture
def failing_client(database_url):
    registry = ProviderRegistry([FailingProvider("gemini")], default="gemini")
    with build_client(database_url, registry) as test_client:
        yield test_client
