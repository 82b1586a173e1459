"""Data models for the Requirement Extractor."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

import numpy as np


class RequirementCategory(str, Enum):
    """What kind of need a requirement phrase expresses."""

    SKILL = "skill"
    RESPONSIBILITY = "responsibility"
    QUALIFICATION = "qualification"


class SectionKind(str, Enum):
    """Kind of job-posting section a phrase appeared under."""

    MUST_HAVE = "must_have"
    PREFERRED = "preferred"
    RESPONSIBILITIES = "responsibilities"
    NEUTRAL = "neutral"
    IGNORED = "ignored"


def normalize_phrase(text: str) -> str:
    """Case-insensitive, whitespace-normalized key used for deduplication."""
    return re.sub(r"\s+", " ", text).strip().casefold()


@dataclass(frozen=True)
class Phrase:
    """A candidate requirement phrase produced by segmentation."""

    text: str
    position: int
    section: SectionKind = SectionKind.NEUTRAL

    @property
    def word_count(self) -> int:
        return len(self.text.split())


@dataclass
class Requirement:
    """A weighted requirement extracted from a job posting."""

    text: str
    weight: float
    category: RequirementCategory
    position: int = 0
    embedding: np.ndarray | None = None

    def __post_init__(self) -> None:
        if not (0.0 <= self.weight <= 1.0):
            raise ValueError(f"weight must be between 0.0 and 1.0 (got {self.weight})")

    @property
    def key(self) -> str:
        return normalize_phrase(self.text)

    def to_dict(self) -> dict:
        """Serialize to a dictionary (without the embedding)."""
        return {
            "text": self.text,
            "weight": self.weight,
            "category": self.category.value,
            "position": self.position,
        }
