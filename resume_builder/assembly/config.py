"""Configuration settings for the Resume Assembler."""

from __future__ import annotations

import json
from typing import Annotated, Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from resume_builder.corpus.models import Category, parse_category


class CategoryBudget(BaseModel):
    """Capacity limits for one document section."""

    max_units: Annotated[int, Field(ge=0)] = Field(
        default=5, description="Maximum units selected for the category"
    )
    max_chars: Annotated[int, Field(ge=0)] = Field(
        default=1000, description="Maximum rendered characters for the category"
    )
    min_units: Annotated[int, Field(ge=0)] = Field(
        default=0, description="Units that must be selected when available"
    )

    @model_validator(mode="after")
    def validate_min_within_max(self) -> CategoryBudget:
        if self.min_units > self.max_units:
            raise ValueError(
                f"min_units ({self.min_units}) exceeds max_units ({self.max_units})"
            )
        return self


def _default_budgets() -> dict[Category, CategoryBudget]:
    return {
        Category.SUMMARY: CategoryBudget(max_units=1, max_chars=500, min_units=0),
        Category.SKILLS: CategoryBudget(max_units=8, max_chars=600, min_units=1),
        Category.EXPERIENCE: CategoryBudget(max_units=6, max_chars=1800, min_units=1),
        Category.EDUCATION: CategoryBudget(max_units=2, max_chars=400, min_units=0),
    }


def _parse_list(v: Any) -> Any:
    """Accept a JSON list or comma-separated text from the environment."""
    if not isinstance(v, str):
        return v
    raw = v.strip()
    if raw.startswith("["):
        return json.loads(raw)
    return [part.strip() for part in raw.split(",") if part.strip()]


class AssemblyConfig(BaseSettings):
    """Resume assembler configuration settings.

    All settings have sensible defaults and can be overridden via
    environment variables with ASSEMBLY_ prefix or a .env file.
    `ASSEMBLY_BUDGETS` takes a JSON object keyed by category, e.g.
    `{"skills": {"max_units": 4, "max_chars": 300, "min_units": 1}}`;
    categories not named keep their defaults.

    Attributes:
        category_order: Section order in the document.
        budgets: Per-category capacity limits.
        page_budget_chars: Rendered length limit for the whole document.
        unit_overhead_chars: Characters added per unit when rendered.
        chronological_categories: Sections ordered most recent first.
    """

    model_config = SettingsConfigDict(
        env_prefix="ASSEMBLY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        enable_decoding=False,
        extra="ignore",
    )

    category_order: list[Category] = Field(
        default_factory=lambda: [
            Category.SUMMARY,
            Category.SKILLS,
            Category.EXPERIENCE,
            Category.EDUCATION,
        ],
        description="Order of sections in the tailored document",
    )
    budgets: dict[Category, CategoryBudget] = Field(
        default_factory=_default_budgets,
        description="Per-category capacity limits",
    )
    page_budget_chars: Annotated[int, Field(gt=0)] = Field(
        default=3000,
        description="Maximum rendered characters for the whole document",
    )
    unit_overhead_chars: Annotated[int, Field(ge=0)] = Field(
        default=1,
        description="Rendered characters added per unit (line break)",
    )
    chronological_categories: list[Category] = Field(
        default_factory=lambda: [Category.EXPERIENCE, Category.EDUCATION],
        description="Categories ordered by date instead of relevance",
    )

    @field_validator("category_order", "chronological_categories", mode="before")
    @classmethod
    def parse_categories(cls, v: Any) -> Any:
        """Parse category lists, resolving aliases."""
        v = _parse_list(v)
        if isinstance(v, list):
            return [parse_category(item) for item in v]
        return v

    @field_validator("budgets", mode="before")
    @classmethod
    def parse_budgets(cls, v: Any) -> Any:
        """Merge configured budgets over the defaults."""
        if isinstance(v, str):
            v = json.loads(v) if v.strip() else {}
        if not isinstance(v, dict):
            return v
        merged: dict[Any, Any] = dict(_default_budgets())
        for key, value in v.items():
            merged[parse_category(key)] = value
        return merged

    @field_validator("category_order")
    @classmethod
    def validate_unique_order(cls, v: list[Category]) -> list[Category]:
        if len(set(v)) != len(v):
            raise ValueError("category_order must not repeat a category")
        if not v:
            raise ValueError("category_order must name at least one category")
        return v

    @model_validator(mode="after")
    def validate_budgets_coherent(self) -> AssemblyConfig:
        """Check category minimums can fit the page budget at all."""
        total_min_units = sum(
            self.budget_for(category).min_units for category in self.category_order
        )
        if total_min_units * (1 + self.unit_overhead_chars) > self.page_budget_chars:
            raise ValueError(
                f"Category minimums ({total_min_units} units) cannot fit "
                f"page_budget_chars ({self.page_budget_chars})"
            )
        return self

    def budget_for(self, category: Category) -> CategoryBudget:
        """Budget for a category, falling back to the default limits."""
        return self.budgets.get(category) or CategoryBudget()


# Singleton instance for easy import
_assembly_config: AssemblyConfig | None = None


def get_assembly_config() -> AssemblyConfig:
    """Get the assembly configuration singleton."""
    global _assembly_config
    if _assembly_config is None:
        _assembly_config = AssemblyConfig()
    return _assembly_config


def reset_assembly_config() -> None:
    """Reset the assembly configuration singleton (useful for testing)."""
    global _assembly_config
    _assembly_config = None
