"""Semantic matching service."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from resume_builder.embeddings.provider import Vector
from resume_builder.errors import DimensionMismatchError
from resume_builder.matching.config import MatchingConfig, get_matching_config
from resume_builder.matching.models import MatchResult, MatchScore, RequirementRanking
from resume_builder.matching.similarity import similarity_matrix

if TYPE_CHECKING:
    from resume_builder.corpus.models import ContentUnit
    from resume_builder.corpus.store import CorpusHandle
    from resume_builder.extractor.models import Requirement

logger = logging.getLogger(__name__)


class SemanticMatcher:
    """Scores every (unit, requirement) pair and aggregates relevance per unit."""

    def __init__(self, config: MatchingConfig | None = None) -> None:
        self.config = config or get_matching_config()

    async def match(
        self, requirements: Sequence[Requirement], corpus: CorpusHandle
    ) -> MatchResult:
        """Embed the corpus (cached) and rank it against the requirements.

        Ranking itself is pure CPU work and runs on a worker thread.

        Raises:
            EmbeddingProviderError: If a unit embedding cannot be computed.
            DimensionMismatchError: If vector lengths are inconsistent.
        """
        embeddings = await corpus.embed_all()
        units = list(corpus.all_units())
        return await asyncio.to_thread(self.rank, requirements, units, embeddings)

    def rank(
        self,
        requirements: Sequence[Requirement],
        units: Sequence[ContentUnit],
        embeddings: Mapping[str, Vector],
    ) -> MatchResult:
        """Rank units per requirement and compute aggregate relevance.

        For each requirement, units are ordered by combined score
        (similarity x weight) descending with ties broken by unit id. A
        unit's aggregate is the sum of its combined scores over the
        requirements for which it is in the top-K.
        """
        self._check_dimensions(requirements, units, embeddings)

        aggregate: dict[str, float] = {unit.id: 0.0 for unit in units}
        rankings: list[RequirementRanking] = []
        top_k = self.config.top_k

        if not requirements:
            return MatchResult(aggregate, rankings, top_k)
        if not units:
            rankings = [RequirementRanking(r.text, r.weight) for r in requirements]
            return MatchResult(aggregate, rankings, top_k)

        unit_ids = [unit.id for unit in units]
        similarities = similarity_matrix(
            [r.embedding for r in requirements],
            [embeddings[unit_id] for unit_id in unit_ids],
        )

        for row, requirement in zip(similarities, requirements):
            combined = [float(similarity) * requirement.weight for similarity in row]
            order = sorted(
                range(len(unit_ids)), key=lambda j: (-combined[j], unit_ids[j])
            )
            scores = [
                MatchScore(
                    unit_id=unit_ids[j],
                    requirement=requirement.text,
                    similarity=float(row[j]),
                    combined=combined[j],
                    rank=rank,
                )
                for rank, j in enumerate(order, start=1)
            ]
            rankings.append(
                RequirementRanking(requirement.text, requirement.weight, scores)
            )
            for score in scores[:top_k]:
                aggregate[score.unit_id] += score.combined

        logger.debug(
            f"Ranked {len(unit_ids)} units against {len(requirements)} requirements"
        )
        return MatchResult(aggregate, rankings, top_k)

    def _check_dimensions(
        self,
        requirements: Sequence[Requirement],
        units: Sequence[ContentUnit],
        embeddings: Mapping[str, Vector],
    ) -> None:
        expected: int | None = None

        for requirement in requirements:
            if requirement.embedding is None:
                raise ValueError(f"Requirement {requirement.text!r} has no embedding")
            size = int(requirement.embedding.size)
            if expected is None:
                expected = size
            elif size != expected:
                raise DimensionMismatchError(
                    expected, size, f"requirement {requirement.text!r}"
                )

        for unit in units:
            vector = embeddings.get(unit.id)
            if vector is None:
                raise ValueError(f"Unit {unit.id!r} has no embedding")
            size = int(vector.size)
            if expected is None:
                expected = size
            elif size != expected:
                raise DimensionMismatchError(expected, size, f"unit {unit.id!r}")
