"""Gemini provider on the google-genai async client.

Assistant turns are sent with Gemini's "model" role; the reply's first
candidate becomes the answer.
"""
from typing import List, Optional
from uuid import uuid4

import httpx
import structlog
from google import genai
from google.genai import errors, types

from api.features.providers.base import (
    AssistantMessage,
    ProviderMessage,
    ProviderResponse,
)
from api.shared.exceptions import ProviderError

logger = structlog.get_logger("copilot.providers.gemini")


class GeminiProvider:
    """Answer provider backed by Google Gemini."""

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
        timeout: float = 60.0,
    ):
        self._api_key = api_key
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._client: Optional[genai.Client] = None

    def _get_client(self) -> genai.Client:
        if not self._api_key:
            raise ProviderError(self.name, "GEMINI_API_KEY is not configured")
        if self._client is None:
            self._client = genai.Client(
                api_key=self._api_key,
                # google-genai takes the timeout in milliseconds
                http_options=types.HttpOptions(timeout=int(self._timeout * 1000)),
            )
        return self._client

    @staticmethod
    def _to_contents(messages: List[ProviderMessage]) -> List[types.Content]:
        return [
            types.Content(
                role="model" if m.role == "assistant" else "user",
                parts=[types.Part(text=m.content)],
            )
            for m in messages
        ]

    async def generate(self, messages: List[ProviderMessage]) -> ProviderResponse:
        client = self._get_client()
        try:
            response = await client.aio.models.generate_content(
                model=self._model,
                contents=self._to_contents(messages),
                config=types.GenerateContentConfig(
                    temperature=self._temperature,
                    max_output_tokens=self._max_tokens,
                ),
            )
        except errors.APIError as e:
            logger.error("gemini_api_error", code=e.code, error=str(e))
            raise ProviderError(self.name, str(e), {"status": e.code}) from e
        except httpx.HTTPError as e:
            logger.error("gemini_network_error", error=str(e))
            raise ProviderError(self.name, f"network error: {e}") from e

        content = response.text
        if not content:
            raise ProviderError(self.name, "empty response")

        finish_reason = None
        if response.candidates:
            reason = response.candidates[0].finish_reason
            finish_reason = getattr(reason, "value", reason)

        return ProviderResponse(
            id=response.response_id or str(uuid4()),
            model=response.model_version or self._model,
            message=AssistantMessage(content=content),
            finish_reason=finish_reason,
        )
