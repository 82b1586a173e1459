"""Data models for the Resume Assembler.

Contains Pydantic models for:
- SelectedUnit: A content unit chosen for the document, with its relevance
- DocumentSection: One category of the document, in display order
- TailoredDocument: The complete selected-and-ordered resume
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator

from resume_builder.corpus.models import Category, Contact, ContentUnit

SECTION_TITLES: dict[Category, str] = {
    Category.SUMMARY: "Summary",
    Category.SKILLS: "Skills",
    Category.EXPERIENCE: "Experience",
    Category.EDUCATION: "Education",
    Category.UNKNOWN: "Other",
}


class SelectedUnit(BaseModel):
    """A content unit placed in the document."""

    unit: ContentUnit = Field(..., description="Selected content unit")
    score: float = Field(..., description="Aggregate relevance score")

    @property
    def id(self) -> str:
        return self.unit.id

    def rendered_length(self, overhead: int) -> int:
        """Characters this unit occupies once rendered."""
        return len(self.unit.text) + overhead


class DocumentSection(BaseModel):
    """One category of the tailored document."""

    category: Category = Field(..., description="Section category")
    title: str = Field(default="", description="Display title for the section")
    units: list[SelectedUnit] = Field(
        default_factory=list, description="Selected units in display order"
    )

    @model_validator(mode="after")
    def default_title(self) -> DocumentSection:
        if not self.title:
            self.title = SECTION_TITLES.get(self.category, self.category.value.title())
        return self

    def rendered_length(self, overhead: int) -> int:
        return sum(unit.rendered_length(overhead) for unit in self.units)


class TailoredDocument(BaseModel):
    """Complete tailored resume ready for rendering.

    No unit appears twice across sections; this is checked on construction.
    """

    job_title: str | None = Field(default=None, description="Target job title")
    company: str | None = Field(default=None, description="Target company")
    generated_at: datetime = Field(..., description="Generation timestamp")
    contact: Contact | None = Field(default=None, description="Candidate contact")
    page_budget_chars: int = Field(..., gt=0, description="Rendered length limit")
    unit_overhead_chars: int = Field(
        default=1, ge=0, description="Rendered characters added per unit"
    )
    sections: list[DocumentSection] = Field(
        default_factory=list, description="Sections in display order"
    )

    @model_validator(mode="after")
    def validate_unique_units(self) -> TailoredDocument:
        seen: set[str] = set()
        for section in self.sections:
            for selected in section.units:
                if selected.id in seen:
                    raise ValueError(f"Unit {selected.id!r} appears more than once")
                seen.add(selected.id)
        return self

    @property
    def rendered_length(self) -> int:
        """Total rendered characters across all sections."""
        return sum(
            section.rendered_length(self.unit_overhead_chars)
            for section in self.sections
        )

    @property
    def unit_ids(self) -> list[str]:
        """Selected unit ids in document order."""
        return [selected.id for section in self.sections for selected in section.units]

    def section(self, category: Category) -> DocumentSection | None:
        """Return the section for a category, if present."""
        for section in self.sections:
            if section.category == category:
                return section
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TailoredDocument:
        """Deserialize from dictionary."""
        return cls.model_validate(data)
