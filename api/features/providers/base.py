"""Answer provider interface.

The conversation service never talks to a vendor SDK directly; it depends on
this protocol:

- every vendor has one `AnswerProvider` (Gemini, DeepSeek);
- `generate` takes the ordered user/assistant turns and returns one
  `ProviderResponse` with the assistant reply;
- failures (missing key, network, vendor error, empty reply) raise
  `ProviderError`. A provider never invents an answer.
"""
from typing import List, Literal, Optional, Protocol

from pydantic import BaseModel, Field

Role = Literal["user", "assistant"]


class ProviderMessage(BaseModel):
    role: Role = Field(description="Speaker of the turn")
    content: str = Field(description="Turn text")


class AssistantMessage(BaseModel):
    role: Literal["assistant"] = Field(default="assistant")
    content: str = Field(description="Generated answer")


class ProviderResponse(BaseModel):
    id: str = Field(description="Vendor response identifier")
    model: str = Field(description="Model that produced the answer")
    message: AssistantMessage = Field(description="Assistant reply")
    finish_reason: Optional[str] = Field(default=None, description="Vendor finish reason")


class AnswerProvider(Protocol):
    name: str

    async def generate(self, messages: List[ProviderMessage]) -> ProviderResponse:
        ...
