"""Frozen application settings loaded from environment variables."""

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {
        "env_file": ".env",
        "extra": "ignore",
        "frozen": True,
        "populate_by_name": True,
    }

    n8n_webhook_url: str = Field(
        "",
        validation_alias=AliasChoices("N8N_WEBHOOK_URL", "NEXT_PUBLIC_N8N_WEBHOOK_URL"),
    )
    mcp_proxy_base: str = ""
    api_base: str = Field(
        "http://localhost:8000",
        validation_alias=AliasChoices("NEXT_PUBLIC_API_BASE", "API_BASE"),
    )

    llm_provider: str = "google-gla"
    prompt_llm: str = "gemini-2.0-flash"
    prompt_count: int = 5

    image_timeout_seconds: float = 20.0
    image_max_retries: int = 2
    retry_base_delay_seconds: float = 1.0
    scrape_timeout_seconds: float = 30.0
    scrape_max_retries: int = 0

    log_level: str = "INFO"

    @field_validator("n8n_webhook_url", "mcp_proxy_base", "api_base")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()


@lru_cache
def get_settings() -> Settings:
    return Settings()
