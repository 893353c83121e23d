from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CustomSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


class AppSettings(CustomSettings):
    ENVIRONMENT: Literal["local", "dev", "prod"] = Field(default="local")
    LOG_LEVEL: str = Field(default="INFO")
    JSON_LOGS: bool = Field(default=False)
    APP_TITLE: str = Field(default="DeFi Copilot")
    APP_URL: str = Field(default="http://localhost:3000")


class DatabaseSettings(CustomSettings):
    """Primary (relational) store configuration.

    Env vars:
    - DB_ENGINE: SQLAlchemy async driver scheme used when DATABASE_URL is empty
    - SQLITE_PATH: database file for the default SQLite engine
    - DATABASE_URL: full async URL, overrides the two above
    - DB_ECHO
    """

    DB_ENGINE: str = Field(default="sqlite+aiosqlite")
    SQLITE_PATH: str = Field(default="data/copilot.db")
    DATABASE_URL: str = Field(default="")
    DB_ECHO: bool = Field(default=False)

    @model_validator(mode="before")
    def validate_database_url(cls, data: dict):
        if isinstance(data, dict) and not data.get("DATABASE_URL"):
            engine = data.get("DB_ENGINE", "sqlite+aiosqlite")
            path = Path(data.get("SQLITE_PATH", "data/copilot.db"))
            data["DATABASE_URL"] = f"{engine}:///{path.as_posix()}"
        return data


class GeminiSettings(CustomSettings):
    GEMINI_API_KEY: SecretStr = Field(default="")
    GEMINI_MODEL: str = Field(default="gemini-2.0-flash")


class OpenRouterSettings(CustomSettings):
    """DeepSeek is served through OpenRouter's OpenAI-compatible API.

    Env vars:
    - OPENROUTER_API_KEY
    - OPENROUTER_BASE_URL
    - DEEPSEEK_MODEL
    """

    OPENROUTER_API_KEY: SecretStr = Field(default="")
    OPENROUTER_BASE_URL: str = Field(default="https://openrouter.ai/api/v1")
    DEEPSEEK_MODEL: str = Field(default="deepseek/deepseek-r1-zero:free")


class ProviderSettings(CustomSettings):
    DEFAULT_PROVIDER: Literal["gemini", "deepseek"] = Field(default="gemini")
    TEMPERATURE: float = Field(default=0.7)
    MAX_TOKENS: int = Field(default=1000)
    REQUEST_TIMEOUT: float = Field(default=60.0)


class FallbackSettings(CustomSettings):
    FALLBACK_SEED_ENABLED: bool = Field(default=True)


class Settings(BaseModel):
    APP: AppSettings = Field(default_factory=AppSettings)
    DATABASE: DatabaseSettings = Field(default_factory=DatabaseSettings)
    GEMINI: GeminiSettings = Field(default_factory=GeminiSettings)
    OPENROUTER: OpenRouterSettings = Field(default_factory=OpenRouterSettings)
    PROVIDERS: ProviderSettings = Field(default_factory=ProviderSettings)
    FALLBACK: FallbackSettings = Field(default_factory=FallbackSettings)


@lru_cache
def get_settings() -> Settings:
    return Settings()


SETTINGS = get_settings()
