"""Configuration settings for Resume Builder."""

from enum import Enum
from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class OutputFormat(str, Enum):
    """Format used to render the tailored document."""

    JSON = "json"
    MARKDOWN = "markdown"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Paths
    corpus_path: Path = Field(
        default=Path("./resume.yaml"),
        description="Path to the resume corpus file (YAML/JSON)",
    )
    output_dir: Path = Field(
        default=Path("./resumes"),
        description="Directory for rendered resumes",
    )
    embedding_store_path: Path | None = Field(
        default=None,
        description="Optional SQLite file for persisting embeddings across runs",
    )

    # Rendering
    output_format: OutputFormat = Field(
        default=OutputFormat.MARKDOWN,
        description="Renderer to use: 'json' or 'markdown'",
    )
    resume_template_path: Path | None = Field(
        default=None,
        description="Jinja2 template file for Markdown output (defaults to bundled)",
    )

    # Caller-side retry policy for the embedding provider
    embedding_retries: Annotated[int, Field(ge=0)] = Field(
        default=2,
        description="Retry attempts for failed embedding calls (0 disables retries)",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR",
    )

    @field_validator("output_format", mode="before")
    @classmethod
    def validate_output_format(cls, v: str | OutputFormat) -> OutputFormat:
        """Convert string format to OutputFormat enum."""
        if isinstance(v, OutputFormat):
            return v
        if isinstance(v, str):
            value = v.lower().strip()
            if value in {"md", "markdown"}:
                return OutputFormat.MARKDOWN
            if value == "json":
                return OutputFormat.JSON
            raise ValueError(f"Invalid output format: {v}. Must be 'json' or 'markdown'")
        raise ValueError(f"Invalid output format type: {type(v)}")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


# Singleton instance for easy import
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (useful for testing)."""
    global _settings
    _settings = None
