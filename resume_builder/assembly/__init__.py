"""Assembly of tailored resume documents.

Public API:
    - ResumeAssembler: Select and order units under budget constraints
    - TailoredDocument: Selected-and-ordered resume content
    - AssemblyConfig: Configuration settings
"""

from resume_builder.assembly.config import (
    AssemblyConfig,
    CategoryBudget,
    get_assembly_config,
    reset_assembly_config,
)
from resume_builder.assembly.models import (
    DocumentSection,
    SelectedUnit,
    TailoredDocument,
)
from resume_builder.assembly.service import ResumeAssembler

__all__ = [
    "ResumeAssembler",
    "TailoredDocument",
    "DocumentSection",
    "SelectedUnit",
    "AssemblyConfig",
    "CategoryBudget",
    "get_assembly_config",
    "reset_assembly_config",
]
