# brandswap/config.py
"""
Centralized configuration with validation.

Uses pydantic-settings to load and validate all environment variables at startup.
Collaborators receive the Settings object (or values from it) through their
constructors; nothing reads os.environ directly outside this module.
"""

import logging
from functools import lru_cache
from typing import ClassVar

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment: development, staging, production",
    )
    LOG_LEVEL: str = Field(default="INFO", description="Root log level")
    LOG_FORMAT: str = Field(
        default="json",
        description="Log output format: json (single-line, for hosted logs) or text",
    )
    CORS_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins",
    )

    # Record store
    RECORD_STORE_PROVIDER: str = Field(
        default="contentstack",
        description="Record store backend: contentstack, memory",
    )
    CONTENTSTACK_API_KEY: str = Field(default="", description="Contentstack stack API key")
    CONTENTSTACK_MANAGEMENT_TOKEN: str = Field(
        default="",
        description="Contentstack management token (read/write access to entries)",
    )
    CONTENTSTACK_BASE_URL: str = Field(
        default="https://api.contentstack.io/v3",
        description="Contentstack Management API base URL (region specific)",
    )
    CONTENTSTACK_TIMEOUT_SECONDS: float = Field(default=30.0, ge=1.0)
    MEMORY_STORE_SEED_PATH: str | None = Field(
        default=None,
        description="Optional JSON file used to seed the in-memory record store",
    )

    # Brand policy
    BRANDKIT_API_URL: str | None = Field(default=None, description="Brandkit service base URL")
    BRANDKIT_API_KEY: str | None = Field(default=None, description="Brandkit bearer token")
    BRANDKIT_ID: str | None = Field(default=None, description="Brandkit identifier")
    BRANDKIT_RULES_PATH: str = Field(
        default="brandkit.json",
        description="Local ruleset used when the Brandkit API is unreachable or unconfigured",
    )
    BRANDKIT_CACHE_TTL_SECONDS: int = Field(default=300, ge=0)
    BRANDKIT_TIMEOUT_SECONDS: float = Field(default=7.0, ge=0.5)

    # Contextual refinement
    REFINEMENT_PROVIDER: str = Field(
        default="gemini",
        description="Refinement provider: gemini, openai",
    )
    GEMINI_API_KEY: str | None = Field(default=None, description="Google Gemini API key")
    GEMINI_MODEL: str = Field(default="gemini-1.5-flash")
    OPENAI_API_KEY: str | None = Field(default=None, description="OpenAI API key")
    OPENAI_MODEL: str = Field(default="gpt-4o-mini")
    REFINEMENT_TEMPERATURE: float = Field(default=0.2, ge=0.0, le=2.0)
    REFINEMENT_MAX_CONCURRENCY: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Max concurrent refinement calls within one preview request",
    )

    DEPRECATED_GEMINI_MODELS: ClassVar[set[str]] = {"gemini-pro", "gemini-1.0-pro"}

    @field_validator("RECORD_STORE_PROVIDER", "REFINEMENT_PROVIDER", "LOG_FORMAT")
    @classmethod
    def normalize_choice(cls, v: str) -> str:
        return v.lower().strip()

    @field_validator("CONTENTSTACK_BASE_URL", "BRANDKIT_API_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.rstrip("/") or None

    @field_validator("GEMINI_MODEL")
    @classmethod
    def warn_deprecated_model(cls, v: str) -> str:
        """Log a warning if a retired Gemini model is configured."""
        if v in cls.DEPRECATED_GEMINI_MODELS:
            logging.getLogger(__name__).warning(
                f"Model '{v}' is deprecated or retired. Consider switching to gemini-1.5-flash."
            )
        return v

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings. Call at startup to validate config."""
    return Settings()
