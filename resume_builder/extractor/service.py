"""Requirement extraction service."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import replace

from resume_builder.embeddings.config import EmbeddingConfig, get_embedding_config
from resume_builder.embeddings.provider import EmbeddingProvider, coerce_vector
from resume_builder.errors import ExtractionError
from resume_builder.extractor.config import ExtractorConfig, get_extractor_config
from resume_builder.extractor.models import Phrase, Requirement
from resume_builder.extractor.segmenter import segment
from resume_builder.extractor.weighting import (
    HeuristicWeighting,
    WeightingStrategy,
    classify_phrase,
)
from resume_builder.utils.concurrency import gather_or_cancel

logger = logging.getLogger(__name__)


class RequirementExtractor:
    """Service for turning job-posting text into weighted requirements.

    Attributes:
        provider: Embedding provider used to embed each requirement.
        config: Extractor configuration settings.
        weighting: Strategy assigning importance weights to phrases.
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        config: ExtractorConfig | None = None,
        weighting: WeightingStrategy | None = None,
        embedding_config: EmbeddingConfig | None = None,
    ) -> None:
        self.provider = provider
        self.config = config or get_extractor_config()
        self.weighting = weighting or HeuristicWeighting(self.config)
        self.embedding_config = embedding_config or get_embedding_config()
        self._denylist = [
            re.compile(pattern, re.IGNORECASE)
            for pattern in self.config.denylist_patterns
        ]

    def is_boilerplate(self, text: str) -> bool:
        """Return True if the phrase matches any denylist pattern."""
        return any(pattern.search(text) for pattern in self._denylist)

    def weigh_phrases(self, raw_text: str) -> list[Requirement]:
        """Segment, filter, weight and deduplicate phrases (no embeddings).

        Raises:
            ExtractionError: If the text is empty or no phrase survives.
        """
        if not raw_text or not raw_text.strip():
            raise ExtractionError("Job posting text is empty")

        phrases = segment(raw_text, self.config.max_heading_words)
        kept = [phrase for phrase in phrases if not self.is_boilerplate(phrase.text)]
        dropped = len(phrases) - len(kept)
        if dropped:
            logger.debug(f"Dropped {dropped} boilerplate phrases")

        if not kept:
            raise ExtractionError(
                "No requirement phrases found in job posting after filtering"
            )

        kept = [replace(phrase, position=index) for index, phrase in enumerate(kept)]
        return self._merge_duplicates(kept)

    def _merge_duplicates(self, phrases: list[Phrase]) -> list[Requirement]:
        total = len(phrases)
        merged: dict[str, Requirement] = {}

        for phrase in phrases:
            requirement = Requirement(
                text=phrase.text,
                weight=self.weighting.weigh(phrase, total),
                category=classify_phrase(phrase),
                position=phrase.position,
            )
            existing = merged.get(requirement.key)
            if existing is None:
                merged[requirement.key] = requirement
            elif requirement.weight > existing.weight:
                # Keep the first position so ordering stays stable
                merged[requirement.key] = replace(
                    requirement, position=existing.position
                )

        return sorted(merged.values(), key=lambda r: r.position)

    async def extract(self, raw_text: str) -> list[Requirement]:
        """Extract embedded requirements from raw posting text.

        Args:
            raw_text: Job posting text, however it was obtained.

        Returns:
            Unique requirements (by normalized text) in posting order.

        Raises:
            ExtractionError: If the text is empty or yields no requirements.
            EmbeddingProviderError: If embedding a requirement fails.
        """
        requirements = self.weigh_phrases(raw_text)
        logger.info(f"Extracted {len(requirements)} requirements from job posting")

        semaphore = asyncio.Semaphore(self.embedding_config.max_concurrency)

        async def embed(requirement: Requirement) -> Requirement:
            async with semaphore:
                raw = await self.provider.embed(requirement.text)
            vector = coerce_vector(raw, self.embedding_config.dimensions)
            return replace(requirement, embedding=vector)

        return await gather_or_cancel(embed(r) for r in requirements)
