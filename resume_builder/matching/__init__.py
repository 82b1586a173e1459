"""Semantic matching of resume content against job requirements.

Public API:
    - SemanticMatcher: Rank units per requirement and aggregate relevance
    - MatchResult: Mapping of unit id to aggregate relevance
    - MatchScore: One (unit, requirement) score
    - MatchingConfig: Configuration settings
"""

from resume_builder.matching.config import (
    MatchingConfig,
    get_matching_config,
    reset_matching_config,
)
from resume_builder.matching.models import MatchResult, MatchScore, RequirementRanking
from resume_builder.matching.service import SemanticMatcher
from resume_builder.matching.similarity import cosine_similarity, similarity_matrix

__all__ = [
    "SemanticMatcher",
    "MatchResult",
    "MatchScore",
    "RequirementRanking",
    "MatchingConfig",
    "get_matching_config",
    "reset_matching_config",
    "cosine_similarity",
    "similarity_matrix",
]
