"""DeepSeek provider, served through OpenRouter's OpenAI-compatible API."""
from typing import List, Optional

import structlog
from openai import APIConnectionError, APIStatusError, AsyncOpenAI, OpenAIError

from api.features.providers.base import (
    AssistantMessage,
    ProviderMessage,
    ProviderResponse,
)
from api.shared.exceptions import ProviderError

logger = structlog.get_logger("copilot.providers.deepseek")


class DeepSeekProvider:
    """Answer provider backed by DeepSeek on OpenRouter."""

    name = "deepseek"

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = "https://openrouter.ai/api/v1",
        app_url: str = "http://localhost:3000",
        app_title: str = "DeFi Copilot",
        temperature: float = 0.7,
        max_tokens: int = 1000,
        timeout: float = 60.0,
    ):
        self._api_key = api_key
        self._model = model
        self._base_url = base_url
        self._headers = {"HTTP-Referer": app_url, "X-Title": app_title}
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._client: Optional[AsyncOpenAI] = None

    def _get_client(self) -> AsyncOpenAI:
        if not self._api_key:
            raise ProviderError(self.name, "OPENROUTER_API_KEY is not configured")
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                default_headers=self._headers,
                timeout=self._timeout,
                max_retries=0,
            )
        return self._client

    async def generate(self, messages: List[ProviderMessage]) -> ProviderResponse:
        client = self._get_client()
        try:
            completion = await client.chat.completions.create(
                model=self._model,
                messages=[{"role": m.role, "content": m.content} for m in messages],
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except APIStatusError as e:
            logger.error("openrouter_status_error", status=e.status_code, error=str(e))
            raise ProviderError(self.name, str(e), {"status": e.status_code}) from e
        except APIConnectionError as e:
            logger.error("openrouter_connection_error", error=str(e))
            raise ProviderError(self.name, f"network error: {e}") from e
        except OpenAIError as e:
            raise ProviderError(self.name, str(e)) from e

        if not completion.choices:
            raise ProviderError(self.name, "response has no choices")
        choice = completion.choices[0]
        content = choice.message.content if choice.message else None
        if not content:
            raise ProviderError(self.name, "empty response")

        return ProviderResponse(
            id=completion.id,
            model=completion.model or self._model,
            message=AssistantMessage(content=content),
            finish_reason=choice.finish_reason,
        )
