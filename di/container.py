from __future__ import annotations

import structlog
from dependency_injector import containers, providers

from core.settings import SETTINGS
from infra.resources import DatabaseResource


logger = structlog.get_logger("copilot")


class InfrastructureContainer(containers.DeclarativeContainer):
    settings = providers.Object(SETTINGS)
    logger = providers.Object(logger)

    # Database (primary store backend)
    database = providers.Resource(
        DatabaseResource,
        database_url=settings.provided.DATABASE.DATABASE_URL,
        echo=settings.provided.DATABASE.DB_ECHO,
    )

    # In-memory fallback store, one per process
    fallback_store = providers.Singleton(
        "api.features.chats.stores.memory.InMemoryChatStore",
        seed=settings.provided.FALLBACK.FALLBACK_SEED_ENABLED,
    )


class ServiceContainer(containers.DeclarativeContainer):
    """Application services - depends on infrastructure."""

    infrastructure = providers.DependenciesContainer()

    primary_store = providers.Singleton(
        "api.features.chats.stores.primary.SqlChatStore",
        database=infrastructure.database,
    )

    provider_registry = providers.Singleton(
        "api.features.providers.registry.build_provider_registry",
        settings=infrastructure.settings,
    )

    conversation_service = providers.Factory(
        "api.features.chats.service.ConversationService",
        primary_store=primary_store,
        fallback_store=infrastructure.fallback_store,
        providers=provider_registry,
    )


class ControllerContainer(containers.DeclarativeContainer):
    """Controller-specific dependencies."""

    services = providers.DependenciesContainer()

    chat_controller = providers.Factory(
        "api.features.chats.controller.ChatController",
        conversation_service=services.conversation_service,
    )

    completion_controller = providers.Factory(
        "api.features.completions.controller.CompletionController",
        conversation_service=services.conversation_service,
        provider_registry=services.provider_registry,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Main application container composing all sub-containers."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "api.main",
            "api.features.chats.router",
            "api.features.completions.router",
        ]
    )

    infrastructure = providers.Container(InfrastructureContainer)
    services = providers.Container(ServiceContainer, infrastructure=infrastructure)
    controllers = providers.Container(ControllerContainer, services=services)
