"""Tests for answer providers and the provider registry."""

import httpx
import pytest
from openai import AsyncOpenAI

from api.features.providers.base import ProviderMessage
from api.features.providers.deepseek import DeepSeekProvider
from api.features.providers.gemini import GeminiProvider
from api.features.providers.registry import ProviderRegistry, build_provider_registry
from api.shared.exceptions import ProviderError
from core.settings import ProviderSettings, Settings
from tests.fakes import StubProvider

HISTORY = [
    ProviderMessage(role="user", content="What is staking?"),
    ProviderMessage(role="assistant", content="Locking tokens to secure a network."),
    ProviderMessage(role="user", content="And restaking?"),
]


def make_deepseek(handler) -> DeepSeekProvider:
    provider = DeepSeekProvider(
        api_key="sk-test",
        model="deepseek/deepseek-r1-zero:free",
        base_url="https://openrouter.test/api/v1",
        app_url="http://localhost:3000",
        app_title="DeFi Copilot",
    )
    provider._client = AsyncOpenAI(
        api_key="sk-test",
        base_url="https://openrouter.test/api/v1",
        max_retries=0,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    return provider


class TestProviderRegistry:
    """Tests for provider selection."""

    def test_default_when_name_missing(self):
        gemini, deepseek = StubProvider("gemini"), StubProvider("deepseek")
        registry = ProviderRegistry([gemini, deepseek], default="gemini")
        assert registry.get() is gemini
        assert registry.get("") is gemini

    def test_lookup_is_case_insensitive(self):
        deepseek = StubProvider("deepseek")
        registry = ProviderRegistry([StubProvider("gemini"), deepseek], default="gemini")
        assert registry.get("DeepSeek") is deepseek

    def test_unknown_name_uses_default(self):
        gemini = StubProvider("gemini")
        registry = ProviderRegistry([gemini, StubProvider("deepseek")], default="gemini")
        assert registry.get("claude") is gemini

    def test_unknown_default_rejected(self):
        with pytest.raises(KeyError):
            ProviderRegistry([StubProvider("gemini")], default="deepseek")

    def test_built_from_settings(self):
        settings = Settings(PROVIDERS=ProviderSettings(DEFAULT_PROVIDER="deepseek"))
        registry = build_provider_registry(settings)
        assert registry.available() == ["deepseek", "gemini"]
        assert registry.default == "deepseek"
        assert isinstance(registry.get(), DeepSeekProvider)


@pytest.mark.asyncio
class TestMissingApiKey:
    """Providers refuse to answer without credentials."""

    async def test_gemini(self):
        provider = GeminiProvider(api_key="", model="gemini-2.0-flash")
        with pytest.raises(ProviderError, match="GEMINI_API_KEY"):
            await provider.generate(HISTORY)

    async def test_deepseek(self):
        provider = DeepSeekProvider(
            api_key="",
            model="deepseek/deepseek-r1-zero:free",
            base_url="https://openrouter.ai/api/v1",
            app_url="http://localhost:3000",
            app_title="DeFi Copilot",
        )
        with pytest.raises(ProviderError, match="OPENROUTER_API_KEY"):
            await provider.generate(HISTORY)


class TestGeminiContents:
    def test_assistant_turns_use_model_role(self):
        contents = GeminiProvider._to_contents(HISTORY)
        assert [c.role for c in contents] == ["user", "model", "user"]
        assert contents[2].parts[0].text == "And restaking?"


@pytest.mark.asyncio
class TestDeepSeekProvider:
    """Tests for the OpenRouter-backed provider over a mocked transport."""

    async def test_answer_returned(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = request.read()
            return httpx.Response(
                200,
                json={
                    "id": "gen-123",
                    "object": "chat.completion",
                    "created": 1700000000,
                    "model": "deepseek/deepseek-r1-zero:free",
                    "choices": [
                        {
                            "index": 0,
                            "message": {"role": "assistant", "content": "Reusing staked ETH."},
                            "finish_reason": "stop",
                        }
                    ],
                },
            )

        response = await make_deepseek(handler).generate(HISTORY)
        assert seen["path"].endswith("/chat/completions")
        assert b"And restaking?" in seen["body"]
        assert response.id == "gen-123"
        assert response.message.role == "assistant"
        assert response.message.content == "Reusing staked ETH."
        assert response.finish_reason == "stop"

    async def test_upstream_error_is_provider_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, json={"error": {"message": "overloaded"}})

        with pytest.raises(ProviderError) as exc_info:
            await make_deepseek(handler).generate(HISTORY)
        assert exc_info.value.details["status"] == 503

    async def test_empty_choices_is_provider_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={
                    "id": "gen-empty",
                    "object": "chat.completion",
                    "created": 1700000000,
                    "model": "deepseek/deepseek-r1-zero:free",
                    "choices": [],
                },
            )

        with pytest.raises(ProviderError, match="no choices"):
            await make_deepseek(handler).generate(HISTORY)
