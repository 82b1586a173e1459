"""Requirement weighting strategies.

A weighting strategy turns a segmented phrase into an importance score in
[0, 1]. The default `HeuristicWeighting` blends three deterministic signals:
position in the posting, qualification/imperative markers, and phrase
length. Any object with the same `weigh` signature can replace it.
"""

from __future__ import annotations

import re
from typing import Protocol

from resume_builder.extractor.config import ExtractorConfig, get_extractor_config
from resume_builder.extractor.models import Phrase, RequirementCategory, SectionKind

QUALIFICATION_MARKERS = re.compile(
    r"\b(must|required|requirements?|proficien\w*|experience (with|in)|"
    r"\d+\+?\s*(years?|yrs)|years? of|degree|bachelor'?s?|master'?s?|ph\.?d|"
    r"certifi\w*|knowledge of|familiar\w* with|expert\w*|strong|solid|deep|"
    r"ability to|understanding of|track record)\b",
    re.IGNORECASE,
)

IMPERATIVE_MARKERS = re.compile(
    r"^(design|build|develop|lead|own|drive|implement|maintain|write|"
    r"collaborate|work|create|manage|deliver|architect|mentor|ship|support|"
    r"improve|optimi[sz]e|deploy|define|partner|analy[sz]e|test|debug|operate|"
    r"scale|automate|monitor|review|research|contribute)\b",
    re.IGNORECASE,
)


class WeightingStrategy(Protocol):
    """Assigns an importance weight to a phrase."""

    def weigh(self, phrase: Phrase, total: int) -> float: ...


def marker_score(text: str) -> float:
    """1.0 for qualification markers, 0.75 for imperative phrasing, else 0."""
    if QUALIFICATION_MARKERS.search(text):
        return 1.0
    if IMPERATIVE_MARKERS.search(text):
        return 0.75
    return 0.0


def length_score(word_count: int, min_words: int, max_words: int) -> float:
    """1.0 inside [min_words, max_words], decaying proportionally outside."""
    if word_count <= 0:
        return 0.0
    if word_count < min_words:
        return word_count / min_words
    if word_count > max_words:
        return max_words / word_count
    return 1.0


def position_score(position: int, total: int, decay: float) -> float:
    """Linear decay from 1.0 (first phrase) to 1.0 - decay (last phrase)."""
    if total <= 1:
        return 1.0
    return 1.0 - decay * (position / (total - 1))


def classify_phrase(phrase: Phrase) -> RequirementCategory:
    """Infer a category hint for a phrase."""
    if QUALIFICATION_MARKERS.search(phrase.text):
        return RequirementCategory.QUALIFICATION
    if phrase.section == SectionKind.RESPONSIBILITIES or IMPERATIVE_MARKERS.search(
        phrase.text
    ):
        return RequirementCategory.RESPONSIBILITY
    if phrase.word_count <= 4:
        return RequirementCategory.SKILL
    if phrase.section in (SectionKind.MUST_HAVE, SectionKind.PREFERRED):
        return RequirementCategory.QUALIFICATION
    return RequirementCategory.RESPONSIBILITY


class HeuristicWeighting:
    """Blend of position, marker, and length signals scaled by section."""

    def __init__(self, config: ExtractorConfig | None = None) -> None:
        self.config = config or get_extractor_config()

    def section_factor(self, section: SectionKind) -> float:
        factors = {
            SectionKind.MUST_HAVE: self.config.section_factor_must_have,
            SectionKind.RESPONSIBILITIES: self.config.section_factor_responsibilities,
            SectionKind.PREFERRED: self.config.section_factor_preferred,
            SectionKind.NEUTRAL: self.config.section_factor_neutral,
        }
        return factors.get(section, 0.0)

    def weigh(self, phrase: Phrase, total: int) -> float:
        config = self.config
        blended = (
            config.weight_position
            * position_score(phrase.position, total, config.position_decay)
            + config.weight_markers * marker_score(phrase.text)
            + config.weight_length
            * length_score(phrase.word_count, config.min_words, config.max_words)
        )
        weight = blended * self.section_factor(phrase.section)
        return min(1.0, max(0.0, weight))
