"""Data models for the resume corpus."""

from __future__ import annotations

import logging
import re
from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)


class Category(str, Enum):
    """Closed set of resume content categories."""

    SUMMARY = "summary"
    SKILLS = "skills"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    UNKNOWN = "unknown"


_CATEGORY_ALIASES: dict[str, Category] = {
    "summary": Category.SUMMARY,
    "profile": Category.SUMMARY,
    "objective": Category.SUMMARY,
    "skill": Category.SKILLS,
    "skills": Category.SKILLS,
    "experience": Category.EXPERIENCE,
    "work": Category.EXPERIENCE,
    "work experience": Category.EXPERIENCE,
    "employment": Category.EXPERIENCE,
    "education": Category.EDUCATION,
    "edu": Category.EDUCATION,
    "unknown": Category.UNKNOWN,
}


def parse_category(value: str | Category) -> Category:
    """Map a source category value onto the closed `Category` set.

    Matching is case-insensitive; underscores and hyphens count as spaces.
    Unrecognized values become `Category.UNKNOWN` (never a known category).
    """
    if isinstance(value, Category):
        return value

    key = re.sub(r"[\s_\-]+", " ", str(value)).strip().lower()
    category = _CATEGORY_ALIASES.get(key)
    if category is None:
        logger.warning(f"Unrecognized category {value!r}, using 'unknown'")
        return Category.UNKNOWN
    return category


_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$")
_YEAR = re.compile(r"^(\d{4})$")
_PRESENT = {"present", "current", "now", "ongoing"}


def _parse_partial_date(value: Any) -> Any:
    """Accept YYYY and YYYY-MM in addition to full ISO dates."""
    if isinstance(value, int) and 1000 <= value <= 9999:
        return date(value, 1, 1)
    if not isinstance(value, str):
        return value

    raw = value.strip()
    match = _YEAR_MONTH.match(raw)
    if match:
        return date(int(match.group(1)), int(match.group(2)), 1)
    match = _YEAR.match(raw)
    if match:
        return date(int(match.group(1)), 1, 1)
    return raw


class DateRange(BaseModel):
    """Inclusive date range; `end=None` means the range is ongoing."""

    model_config = ConfigDict(frozen=True)

    start: date = Field(..., description="Start date")
    end: date | None = Field(default=None, description="End date (None = present)")

    @field_validator("start", mode="before")
    @classmethod
    def parse_start(cls, v: Any) -> Any:
        return _parse_partial_date(v)

    @field_validator("end", mode="before")
    @classmethod
    def parse_end(cls, v: Any) -> Any:
        if v is None:
            return None
        if isinstance(v, str) and v.strip().lower() in _PRESENT:
            return None
        return _parse_partial_date(v)

    @model_validator(mode="after")
    def validate_order(self) -> DateRange:
        if self.end is not None and self.end < self.start:
            raise ValueError(f"end ({self.end}) is before start ({self.start})")
        return self


class ContentUnit(BaseModel):
    """An atomic resume fragment (one bullet, one skill, one summary line)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique identifier within the corpus")
    category: Category = Field(..., description="Content category")
    text: str = Field(..., description="Fragment text")
    date_range: DateRange | None = Field(
        default=None, description="Associated date range (if applicable)"
    )
    tags: tuple[str, ...] = Field(default=(), description="Relevance tags")

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")


class ContentRecord(BaseModel):
    """One record of corpus source data, before it becomes a ContentUnit."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = Field(default=None, description="Optional explicit identifier")
    category: str = Field(..., description="Content category")
    text: str = Field(..., description="Fragment text")
    date_range: DateRange | None = Field(default=None, description="Date range")
    tags: list[str] = Field(default_factory=list, description="Relevance tags")

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, v: Any) -> Any:
        if v is None:
            return None
        value = str(v).strip()
        return value or None

    @field_validator("category", "text")
    @classmethod
    def require_non_blank(cls, v: str) -> str:
        value = " ".join(v.split())
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("date_range", mode="before")
    @classmethod
    def parse_date_range(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            if len(v) not in (1, 2):
                raise ValueError("date_range must be [start] or [start, end]")
            return {"start": v[0], "end": v[1] if len(v) == 2 else None}
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    def to_unit(self, position: int) -> ContentUnit:
        """Build the ContentUnit for this record at a 1-based position."""
        category = parse_category(self.category)
        unit_id = self.id or f"{category.value}-{position:03d}"
        return ContentUnit(
            id=unit_id,
            category=category,
            text=self.text,
            date_range=self.date_range,
            tags=tuple(self.tags),
        )


class Contact(BaseModel):
    """Candidate contact details shown in the document header."""

    name: str | None = Field(default=None, description="Candidate full name")
    email: str | None = Field(default=None, description="Contact email")
    phone: str | None = Field(default=None, description="Contact phone")
    website: str | None = Field(default=None, description="Personal website")
    linkedin: str | None = Field(default=None, description="LinkedIn profile URL")
    address: str | None = Field(default=None, description="Postal address")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        if v is None:
            return None
        value = v.strip()
        if not re.fullmatch(r"[^@\s]+@[^@\s]+\.[^@\s]+", value):
            raise ValueError(f"Invalid email address: {v}")
        return value

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        if v is None:
            return None
        value = v.strip()
        digits = re.sub(r"\D", "", value)
        if not re.fullmatch(r"\+?[\d\s().-]+", value) or not 7 <= len(digits) <= 15:
            raise ValueError(f"Invalid phone number: {v}")
        return value

    @field_validator("website", "linkedin")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        if v is None:
            return None
        value = v.strip()
        if not re.match(r"^https?://", value, re.IGNORECASE):
            raise ValueError(f"URL must start with http:// or https://: {v}")
        return value
