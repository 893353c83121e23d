"""Router for the Chats feature."""
from typing import List

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from api.features.chats.controller import ChatController
from api.features.chats.dtos import (
    ChatDTO,
    CreateChatRequest,
    MessageDTO,
    PostMessageRequest,
    RenameChatRequest,
)
from api.shared.dtos import SuccessResponse
from di.container import ApplicationContainer as DependencyContainer

router = APIRouter()


@router.get("", response_model=List[ChatDTO])
@inject
async def list_chats(
    controller: ChatController = Depends(
        Provide[DependencyContainer.controllers.chat_controller]
    ),
):
    """List chats newest first, each with its messages."""
    return await controller.list_chats()


@router.post("", response_model=ChatDTO)
@inject
async def create_chat(
    request: CreateChatRequest,
    controller: ChatController = Depends(
        Provide[DependencyContainer.controllers.chat_controller]
    ),
):
    return await controller.create_chat(request)


@router.get("/{chat_id}", response_model=ChatDTO)
@inject
async def get_chat(
    chat_id: str,
    controller: ChatController = Depends(
        Provide[DependencyContainer.controllers.chat_controller]
    ),
):
    return await controller.get_chat(chat_id)


@router.patch("/{chat_id}", response_model=ChatDTO)
@inject
async def rename_chat(
    chat_id: str,
    request: RenameChatRequest,
    controller: ChatController = Depends(
        Provide[DependencyContainer.controllers.chat_controller]
    ),
):
    return await controller.rename_chat(chat_id, request)


@router.delete("/{chat_id}", response_model=SuccessResponse)
@inject
async def delete_chat(
    chat_id: str,
    controller: ChatController = Depends(
        Provide[DependencyContainer.controllers.chat_controller]
    ),
):
    """Delete a chat and all of its messages."""
    return await controller.delete_chat(chat_id)


@router.get("/{chat_id}/messages", response_model=List[MessageDTO])
@inject
async def list_messages(
    chat_id: str,
    controller: ChatController = Depends(
        Provide[DependencyContainer.controllers.chat_controller]
    ),
):
    """Messages of a chat in the order they were posted."""
    return await controller.list_messages(chat_id)


@router.post("/{chat_id}/messages", response_model=MessageDTO)
@inject
async def post_message(
    chat_id: str,
    request: PostMessageRequest,
    controller: ChatController = Depends(
        Provide[DependencyContainer.controllers.chat_controller]
    ),
):
    """Ask a question; the generated answer is stored with it."""
    return await controller.post_message(chat_id, request)
