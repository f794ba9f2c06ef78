"""Application settings loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly typed application configuration."""

    list_store_url: str | None = Field(default=None, alias="UPSTASH_REDIS_REST_URL")
    list_store_token: str | None = Field(default=None, alias="UPSTASH_REDIS_REST_TOKEN")
    list_store_key: str = Field(default="messages:global", alias="MESSAGES_KEY")

    anthropic_api_key: str | None = Field(default=None, alias="ANTHROPIC_API_KEY")
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    google_api_key: str | None = Field(default=None, alias="GOOGLE_API_KEY")
    deepseek_api_key: str | None = Field(default=None, alias="DEEPSEEK_API_KEY")

    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: Literal["debug", "info", "warning", "error", "critical"] = Field(
        default="info", alias="LOG_LEVEL"
    )
    host: str = Field(default="127.0.0.1", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    http_timeout: float = Field(
        default=60.0, alias="HTTP_TIMEOUT", description="Seconds"
    )

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @property
    def list_store_configured(self) -> bool:
        """Both the list-store URL and its token are required to use it."""

        return bool(self.list_store_url and self.list_store_token)


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of settings."""

    return Settings()
