"""DTOs for the Chats feature."""
from typing import List, Optional

from pydantic import Field

from api.shared.dtos import BaseDTO


class CreateChatRequest(BaseDTO):
    """Request to create a chat."""

    title: Optional[str] = Field(default=None, description="Chat title")


class RenameChatRequest(BaseDTO):
    """Request to rename a chat."""

    title: Optional[str] = Field(default=None, description="New chat title")


class PostMessageRequest(BaseDTO):
    """Ask a question in a chat."""

    question: Optional[str] = Field(default=None, description="User question")
    model: Optional[str] = Field(
        default=None, description="Answer provider: gemini or deepseek"
    )


class MessageDTO(BaseDTO):
    """Question/answer pair."""

    id: str = Field(description="Message identifier")
    question: str = Field(description="User question")
    answer: str = Field(description="Generated answer")
    chat_id: str = Field(description="Owning chat identifier")


class ChatDTO(BaseDTO):
    """Chat with its messages, oldest first."""

    id: str = Field(description="Chat identifier")
    title: str = Field(description="Chat title")
    messages: List[MessageDTO] = Field(default_factory=list, description="Messages")
