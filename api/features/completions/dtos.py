"""DTOs for the Completions feature."""
from typing import List, Optional

from pydantic import BaseModel, Field

from api.features.providers.base import ProviderMessage
from api.shared.dtos import BaseDTO


class CompletionRequest(BaseDTO):
    """Stateless completion over a caller-supplied history."""

    messages: Optional[List[ProviderMessage]] = Field(
        default=None, description="Conversation turns, oldest first"
    )
    chat_id: Optional[str] = Field(
        default=None, description="Chat to record the exchange in, if it exists"
    )
    model: Optional[str] = Field(default=None, description="Answer provider name")


class AssistantMessageDTO(BaseModel):
    role: str = Field(default="assistant")
    content: str = Field(description="Generated answer")


class CompletionResponse(BaseModel):
    """Provider response; field names follow the provider contract."""

    id: str = Field(description="Provider response identifier")
    model: str = Field(description="Model that produced the answer")
    message: AssistantMessageDTO = Field(description="Assistant reply")
    finish_reason: Optional[str] = Field(default=None, description="Provider finish reason")


class ProvidersResponse(BaseDTO):
    default: str = Field(description="Provider used when none is requested")
    available: List[str] = Field(description="Selectable provider names")
