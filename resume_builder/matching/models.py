"""Data models for the Semantic Matcher."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class MatchScore:
    """Relation between one content unit and one requirement."""

    unit_id: str
    requirement: str
    similarity: float
    combined: float
    rank: int = 0

    def __post_init__(self) -> None:
        if not (-1.0 <= self.similarity <= 1.0):
            raise ValueError(
                f"similarity must be between -1.0 and 1.0 (got {self.similarity})"
            )


@dataclass
class RequirementRanking:
    """Units ranked for one requirement, best first."""

    requirement: str
    weight: float
    scores: list[MatchScore] = field(default_factory=list)

    def top(self, k: int) -> list[MatchScore]:
        return self.scores[:k]


class MatchResult(Mapping[str, float]):
    """Aggregate relevance per content unit id.

    Every unit that took part in matching has an entry; units that were in
    no requirement's top-K score 0.0. Per-requirement rankings are kept for
    inspection and reporting.
    """

    def __init__(
        self,
        aggregate: Mapping[str, float],
        rankings: list[RequirementRanking] | None = None,
        top_k: int = 0,
    ) -> None:
        self._aggregate = dict(aggregate)
        self.rankings = rankings or []
        self.top_k = top_k

    def __getitem__(self, unit_id: str) -> float:
        return self._aggregate[unit_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._aggregate)

    def __len__(self) -> int:
        return len(self._aggregate)

    def __repr__(self) -> str:
        return f"MatchResult({self._aggregate!r}, top_k={self.top_k})"

    def ranked(self) -> list[tuple[str, float]]:
        """Units by aggregate score descending, ties by id."""
        return sorted(self._aggregate.items(), key=lambda item: (-item[1], item[0]))

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return {
            "top_k": self.top_k,
            "aggregate": dict(self.ranked()),
            "rankings": [
                {
                    "requirement": ranking.requirement,
                    "weight": ranking.weight,
                    "top": [
                        {
                            "unit_id": score.unit_id,
                            "similarity": score.similarity,
                            "combined": score.combined,
                            "rank": score.rank,
                        }
                        for score in ranking.top(self.top_k)
                    ],
                }
                for ranking in self.rankings
            ],
        }
