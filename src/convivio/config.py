"""
Convivio - Configuration and settings.

Settings are read from the environment (or a .env file) once and cached.
Pipeline components receive a Settings instance explicitly; only the CLI and
the web layer reach for the cached accessor.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

Provider = Literal["openai", "anthropic"]


class Settings(BaseSettings):
    """
    Application settings.

    Only the key for the selected provider is required at call time;
    a missing key surfaces as ConfigurationError before any prompt is built.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Completion provider
    llm_provider: Provider = "openai"
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None

    # Application
    convivio_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Wall-clock budgets (seconds)
    completion_timeout_seconds: float = 180.0  # full menu
    regeneration_timeout_seconds: float = 90.0  # single dish / wine / invite

    # Debug log of prompts and raw responses
    debug_log_max_entries: int = 50
    # CONVIVIO_LOG_PROMPTS=1 - also write each call to prompt_logs/ (dev only)
    convivio_log_prompts: bool = False

    # Inventory snapshot bounds
    inventory_max_lines: int = 60
    inventory_max_chars: int = 6000
    proposal_inventory_limit: int = 20

    default_cuisine: str = "Italiana"

    @property
    def is_development(self) -> bool:
        return self.convivio_env == "development"

    def credential(self, provider: Provider | None = None) -> str | None:
        """Return the API key for a provider (the configured one by default)."""
        provider = provider or self.llm_provider
        key = self.openai_api_key if provider == "openai" else self.anthropic_api_key
        return key or None

    @property
    def has_completion_credential(self) -> bool:
        return self.credential() is not None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: Settings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
