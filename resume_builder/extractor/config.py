"""Configuration settings for the Requirement Extractor."""

from __future__ import annotations

import json
import re
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DENYLIST: list[str] = [
    r"\bequal (?:employment )?opportunity\b",
    r"\bEEO\b",
    r"\baffirmative action\b",
    r"\bwithout regard to\b",
    r"\bprotected (?:veteran|class|characteristic)",
    r"\breasonable accommodations?\b",
    r"\bprivacy (?:notice|policy)\b",
    r"\bE-Verify\b",
    r"\bapply (?:now|today)\b",
    r"\bclick (?:here|apply)\b",
    r"\bbackground check\b",
]


class ExtractorConfig(BaseSettings):
    """Requirement extractor configuration settings.

    All settings have sensible defaults and can be overridden via
    environment variables with EXTRACTOR_ prefix or a .env file.

    Attributes:
        denylist_patterns: Regex patterns for boilerplate phrases to drop.
        min_words: Phrases shorter than this are length-penalized.
        max_words: Phrases longer than this are length-penalized.
        max_heading_words: Longest line still treated as a section heading.
        position_decay: Weight lost between the first and last phrase.
        weight_position: Blend weight of the position signal.
        weight_markers: Blend weight of the qualification/imperative signal.
        weight_length: Blend weight of the length signal.
        section_factor_*: Multipliers applied per posting section.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXTRACTOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        enable_decoding=False,
        extra="ignore",
    )

    # Boilerplate filtering
    denylist_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DENYLIST),
        description="Case-insensitive regex patterns for boilerplate phrases",
    )

    # Segmentation
    min_words: Annotated[int, Field(ge=1)] = Field(
        default=3,
        description="Minimum words before a phrase is length-penalized",
    )
    max_words: Annotated[int, Field(ge=1)] = Field(
        default=30,
        description="Maximum words before a phrase is length-penalized",
    )
    max_heading_words: Annotated[int, Field(ge=1)] = Field(
        default=6,
        description="Maximum words in a line treated as a section heading",
    )

    # Weighting signals (must sum to 1.0)
    position_decay: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.4,
        description="Position score lost from the first to the last phrase",
    )
    weight_position: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.40,
        description="Weight of the phrase position signal",
    )
    weight_markers: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.35,
        description="Weight of the qualification/imperative marker signal",
    )
    weight_length: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.25,
        description="Weight of the phrase length signal",
    )

    # Section multipliers
    section_factor_must_have: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=1.0,
        description="Multiplier for phrases under must-have headings",
    )
    section_factor_responsibilities: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.9,
        description="Multiplier for phrases under responsibilities headings",
    )
    section_factor_neutral: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.8,
        description="Multiplier for phrases outside any recognized section",
    )
    section_factor_preferred: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.6,
        description="Multiplier for phrases under nice-to-have headings",
    )

    @field_validator("denylist_patterns", mode="before")
    @classmethod
    def parse_denylist_patterns(cls, v: object) -> list[str]:
        """Parse EXTRACTOR_DENYLIST_PATTERNS from env-friendly formats.

        Supports:
        - JSON list: ["\\bEEO\\b", "apply now"]
        - Newline-separated entries (commas are legal inside regexes)
        """
        if v is None:
            return []

        if isinstance(v, list):
            return [str(item) for item in v if str(item).strip()]

        raw = str(v).strip()
        if not raw:
            return []

        if raw.startswith("["):
            try:
                parsed = json.loads(raw)
            except json.JSONDecodeError:
                parsed = None
            else:
                if isinstance(parsed, list):
                    return [str(item) for item in parsed if str(item).strip()]

        return [line.strip() for line in raw.splitlines() if line.strip()]

    @field_validator("denylist_patterns")
    @classmethod
    def validate_denylist_patterns(cls, v: list[str]) -> list[str]:
        """Ensure every pattern compiles."""
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid denylist pattern {pattern!r}: {e}") from e
        return v

    @model_validator(mode="after")
    def validate_weights_sum_to_one(self) -> ExtractorConfig:
        """Ensure weighting signal weights sum to 1.0 (within tolerance)."""
        weight_sum = self.weight_position + self.weight_markers + self.weight_length
        if abs(weight_sum - 1.0) > 1e-6:
            raise ValueError(
                "Weighting signal weights must sum to 1.0. "
                f"Got {weight_sum:.6f} "
                f"(position={self.weight_position}, markers={self.weight_markers}, "
                f"length={self.weight_length})."
            )
        if self.min_words > self.max_words:
            raise ValueError(
                f"min_words ({self.min_words}) must not exceed max_words ({self.max_words})"
            )
        return self


# Singleton instance for easy import
_extractor_config: ExtractorConfig | None = None


def get_extractor_config() -> ExtractorConfig:
    """Get the extractor configuration singleton."""
    global _extractor_config
    if _extractor_config is None:
        _extractor_config = ExtractorConfig()
    return _extractor_config


def reset_extractor_config() -> None:
    """Reset the extractor configuration singleton (useful for testing)."""
    global _extractor_config
    _extractor_config = None
