"""Provider registry: resolves a provider name to an `AnswerProvider`."""
from typing import Dict, Iterable, List, Optional

import structlog

from api.features.providers.base import AnswerProvider
from api.features.providers.deepseek import DeepSeekProvider
from api.features.providers.gemini import GeminiProvider
from core.settings import Settings

logger = structlog.get_logger("copilot.providers")


class ProviderRegistry:
    """Providers by name with a default for missing or unknown names."""

    def __init__(self, providers: Iterable[AnswerProvider], default: str):
        self._providers: Dict[str, AnswerProvider] = {p.name.lower(): p for p in providers}
        if default.lower() not in self._providers:
            raise KeyError(f"Unknown default provider: {default!r}")
        self.default = default.lower()

    def get(self, name: Optional[str] = None) -> AnswerProvider:
        """Provider for `name`, or the default provider when name is empty or unknown."""
        key = (name or self.default).lower()
        provider = self._providers.get(key)
        if provider is None:
            logger.warning("unknown_provider", requested=name, using=self.default)
            provider = self._providers[self.default]
        return provider

    def available(self) -> List[str]:
        return sorted(self._providers)


def build_provider_registry(settings: Settings) -> ProviderRegistry:
    common = dict(
        temperature=settings.PROVIDERS.TEMPERATURE,
        max_tokens=settings.PROVIDERS.MAX_TOKENS,
        timeout=settings.PROVIDERS.REQUEST_TIMEOUT,
    )
    return ProviderRegistry(
        [
            GeminiProvider(
                api_key=settings.GEMINI.GEMINI_API_KEY.get_secret_value(),
                model=settings.GEMINI.GEMINI_MODEL,
                **common,
            ),
            DeepSeekProvider(
                api_key=settings.OPENROUTER.OPENROUTER_API_KEY.get_secret_value(),
                model=settings.OPENROUTER.DEEPSEEK_MODEL,
                base_url=settings.OPENROUTER.OPENROUTER_BASE_URL,
                app_url=settings.APP.APP_URL,
                app_title=settings.APP.APP_TITLE,
                **common,
            ),
        ],
        default=settings.PROVIDERS.DEFAULT_PROVIDER,
    )
