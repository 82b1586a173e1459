"""Configuration settings for the embedding provider."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmbeddingConfig(BaseSettings):
    """Embedding provider configuration settings.

    All settings have sensible defaults and can be overridden via
    environment variables with `EMBEDDING_` prefix or a .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="EMBEDDING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Provider settings
    provider: str = Field(
        default="openai",
        description="Embedding provider (openai, cohere, ollama, huggingface, etc.)",
    )
    model: str = Field(
        default="text-embedding-3-small",
        description="Embedding model name",
    )
    api_key: str | None = Field(
        default=None,
        description="API key for the embedding provider",
    )
    base_url: str | None = Field(
        default=None,
        description="Base URL for OpenAI-compatible embedding endpoints",
    )
    timeout: Annotated[float, Field(gt=0)] = Field(
        default=30.0,
        description="Timeout for a single embedding request in seconds",
    )

    # Output validation
    dimensions: Annotated[int, Field(gt=0)] | None = Field(
        default=None,
        description="Expected vector length (None = accept the provider's length)",
    )

    # Concurrency
    max_concurrency: Annotated[int, Field(gt=0)] = Field(
        default=8,
        description="Maximum embedding requests in flight at once",
    )


# Singleton instance for easy import
_embedding_config: EmbeddingConfig | None = None


def get_embedding_config() -> EmbeddingConfig:
    """Get the embedding configuration singleton."""
    global _embedding_config
    if _embedding_config is None:
        _embedding_config = EmbeddingConfig()
    return _embedding_config


def reset_embedding_config() -> None:
    """Reset the embedding configuration singleton (useful for testing)."""
    global _embedding_config
    _embedding_config = None
