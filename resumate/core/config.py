"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.

AI providers are all reached through their OpenAI-compatible endpoints,
so one client class serves Anthropic, Groq and DeepSeek alike.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


ProviderName = Literal["auto", "anthropic", "groq", "deepseek", "none"]

# Order in which "auto" picks a provider
PROVIDER_PRIORITY = ("anthropic", "groq", "deepseek")


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://127.0.0.1:27017"
    mongodb_db: str = "hacktopia"

    # AI provider selection
    ai_provider: ProviderName = "auto"

    # Anthropic (primary)
    anthropic_api_key: str = ""
    anthropic_base_url: str = "https://api.anthropic.com/v1/"
    anthropic_model: str = "claude-sonnet-4-20250514"

    # Groq (fallback)
    groq_api_key: str = ""
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_model: str = "llama-3.3-70b-versatile"

    # DeepSeek
    deepseek_api_key: str = ""
    deepseek_base_url: str = "https://api.deepseek.com/v1"
    deepseek_model: str = "deepseek-chat"

    # Request limits for every AI call
    ai_timeout_seconds: float = 30.0
    ai_max_tokens: int = 8192
    ai_temperature: float = 0.3

    # n8n resume parsing webhook
    n8n_resume_parse_webhook: str = ""
    n8n_timeout_seconds: float = 30.0

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # App
    debug: bool = False

    def provider_credentials(self, provider: str) -> tuple[str, str, str]:
        """Return (api_key, base_url, model) for a provider name."""
        return (
            getattr(self, f"{provider}_api_key"),
            getattr(self, f"{provider}_base_url"),
            getattr(self, f"{provider}_model"),
        )

    def resolved_provider(self) -> str:
        """
        Work out which provider to use.

        An explicit choice is honoured only when its key is set.
        "auto" takes the first provider in PROVIDER_PRIORITY with a key.
        """
        if self.ai_provider == "none":
            return "none"
        if self.ai_provider != "auto":
            api_key, _, _ = self.provider_credentials(self.ai_provider)
            return self.ai_provider if api_key else "none"
        for provider in PROVIDER_PRIORITY:
            api_key, _, _ = self.provider_credentials(provider)
            if api_key:
                return provider
        return "none"

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
