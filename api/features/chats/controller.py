"""Controller for the Chats feature."""
from typing import List

from api.features.chats.dtos import (
    ChatDTO,
    CreateChatRequest,
    MessageDTO,
    PostMessageRequest,
    RenameChatRequest,
)
from api.features.chats.service import ConversationService
from api.shared.dtos import SuccessResponse


class ChatController:
    """Controller handling chat CRUD and message operations."""

    def __init__(self, conversation_service: ConversationService):
        self.conversation_service = conversation_service

    async def list_chats(self) -> List[ChatDTO]:
        chats = await self.conversation_service.list_chats()
        return [ChatDTO.model_validate(c) for c in chats]

    async def create_chat(self, request: CreateChatRequest) -> ChatDTO:
        chat = await self.conversation_service.create_chat(request.title)
        return ChatDTO.model_validate(chat)

    async def get_chat(self, chat_id: str) -> ChatDTO:
        chat = await self.conversation_service.get_chat(chat_id)
        return ChatDTO.model_validate(chat)

    async def rename_chat(self, chat_id: str, request: RenameChatRequest) -> ChatDTO:
        chat = await self.conversation_service.rename_chat(chat_id, request.title)
        return ChatDTO.model_validate(chat)

    async def delete_chat(self, chat_id: str) -> SuccessResponse:
        await self.conversation_service.delete_chat(chat_id)
        return SuccessResponse(success=True)

    async def list_messages(self, chat_id: str) -> List[MessageDTO]:
        messages = await self.conversation_service.list_messages(chat_id)
        return [MessageDTO.model_validate(m) for m in messages]

    async def post_message(self, chat_id: str, request: PostMessageRequest) -> MessageDTO:
        message = await self.conversation_service.post_message(
            chat_id, request.question, provider_name=request.model
        )
        return MessageDTO.model_validate(message)
