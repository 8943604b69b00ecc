"""Application settings using pydantic-settings."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Application
    # ==========================================================================
    app_name: str = "SettleSmart"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # ==========================================================================
    # Completion service (OpenAI-compatible)
    # ==========================================================================
    openai_api_key: str = Field(default="")
    openai_base_url: str = "https://api.openai.com/v1"
    openai_chat_model: str = "gpt-4o-mini"
    openai_responses_model: str = "gpt-4.1-mini"

    # Which endpoint integration to use and how strict the output contract is
    completion_endpoint: Literal["chat", "responses"] = "chat"
    output_contract: Literal["json_schema", "json_object"] = "json_schema"

    # A checklist, not creative writing: keep sampling low
    completion_temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    completion_max_tokens: int = Field(default=2048, gt=0)
    completion_timeout_seconds: float = Field(default=60.0, gt=0.0)

    # ==========================================================================
    # API
    # ==========================================================================
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: list[str] = Field(default=["http://localhost:3000"])


@dataclass(frozen=True)
class CompletionConfig:
    """Immutable slice of settings injected into the completion client."""
    api_key: str
    base_url: str
    endpoint: Literal["chat", "responses"]
    chat_model: str
    responses_model: str
    temperature: float
    max_tokens: int
    timeout: float

    @classmethod
    def from_settings(cls, settings: Settings) -> "CompletionConfig":
        return cls(
            api_key=settings.openai_api_key.strip(),
            base_url=settings.openai_base_url,
            endpoint=settings.completion_endpoint,
            chat_model=settings.openai_chat_model,
            responses_model=settings.openai_responses_model,
            temperature=settings.completion_temperature,
            max_tokens=settings.completion_max_tokens,
            timeout=settings.completion_timeout_seconds,
        )

    @property
    def model(self) -> str:
        """Model name for the configured endpoint."""
        if self.endpoint == "responses":
            return self.responses_model
        return self.chat_model


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


@lru_cache
def get_completion_config() -> CompletionConfig:
    """Get the completion config, derived once from the cached settings."""
    return CompletionConfig.from_settings(get_settings())
