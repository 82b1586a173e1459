"""Requirement extraction from job posting text.

Public API:
    - RequirementExtractor: Segment, filter, weight and embed requirements
    - Requirement: One weighted requirement phrase
    - HeuristicWeighting: Default weighting strategy
    - ExtractorConfig: Configuration settings
"""

from resume_builder.extractor.config import (
    ExtractorConfig,
    get_extractor_config,
    reset_extractor_config,
)
from resume_builder.extractor.models import (
    Phrase,
    Requirement,
    RequirementCategory,
    SectionKind,
    normalize_phrase,
)
from resume_builder.extractor.segmenter import segment
from resume_builder.extractor.service import RequirementExtractor
from resume_builder.extractor.weighting import HeuristicWeighting, WeightingStrategy

__all__ = [
    "RequirementExtractor",
    "Requirement",
    "RequirementCategory",
    "Phrase",
    "SectionKind",
    "HeuristicWeighting",
    "WeightingStrategy",
    "ExtractorConfig",
    "get_extractor_config",
    "reset_extractor_config",
    "normalize_phrase",
    "segment",
]
