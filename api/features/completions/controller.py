"""Controller for the Completions feature."""
from api.features.chats.service import ConversationService
from api.features.completions.dtos import (
    CompletionRequest,
    CompletionResponse,
    ProvidersResponse,
)
from api.features.providers.registry import ProviderRegistry


class CompletionController:
    """Stateless completions and provider discovery."""

    def __init__(
        self,
        conversation_service: ConversationService,
        provider_registry: ProviderRegistry,
    ):
        self.conversation_service = conversation_service
        self.provider_registry = provider_registry

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        response = await self.conversation_service.complete(
            request.messages or [],
            chat_id=request.chat_id,
            provider_name=request.model,
        )
        return CompletionResponse.model_validate(response.model_dump())

    def list_providers(self) -> ProvidersResponse:
        return ProvidersResponse(
            default=self.provider_registry.default,
            available=self.provider_registry.available(),
        )
