"""Resume assembly service.

Selects the most relevant content units per category under capacity limits,
enforces the page budget and orders each section for display.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from resume_builder.assembly.config import (
    AssemblyConfig,
    CategoryBudget,
    get_assembly_config,
)
from resume_builder.assembly.models import (
    DocumentSection,
    SelectedUnit,
    TailoredDocument,
)
from resume_builder.corpus.models import Category, ContentUnit
from resume_builder.errors import BudgetInfeasibleError

if TYPE_CHECKING:
    from resume_builder.corpus.store import CorpusHandle

logger = logging.getLogger(__name__)


@dataclass
class _Candidate:
    unit: ContentUnit
    score: float
    length: int

    @property
    def id(self) -> str:
        return self.unit.id


@dataclass
class _CategorySelection:
    category: Category
    minimum: int
    chosen: list[_Candidate]


def _chronological_key(selected: SelectedUnit) -> tuple:
    """Most recent first; ongoing ranges count as the latest end; undated last."""
    date_range = selected.unit.date_range
    if date_range is None:
        return (1, 0, 0, selected.id)
    end = date_range.end or date.max
    return (0, -date_range.start.toordinal(), -end.toordinal(), selected.id)


class ResumeAssembler:
    """Builds a TailoredDocument from aggregate relevance scores."""

    def __init__(self, config: AssemblyConfig | None = None) -> None:
        self.config = config or get_assembly_config()

    def assemble(
        self,
        match_scores: Mapping[str, float],
        corpus: CorpusHandle,
        config: AssemblyConfig | None = None,
        *,
        job_title: str | None = None,
        company: str | None = None,
        generated_at: datetime | None = None,
    ) -> TailoredDocument:
        """Select and order content units for one job.

        Args:
            match_scores: Aggregate relevance per unit id. Units without an
                entry score 0.0.
            corpus: Loaded corpus providing the candidate units.
            config: Overrides the assembler's configuration for this call.
            job_title: Target job title.
            company: Target company.
            generated_at: Timestamp to stamp on the document.

        Returns:
            TailoredDocument within the page budget.

        Raises:
            BudgetInfeasibleError: If category minimums cannot be satisfied
                within the category or page budgets.
        """
        config = config or self.config
        overhead = config.unit_overhead_chars

        selections = [
            self._select_category(
                category, config.budget_for(category), match_scores, corpus, overhead
            )
            for category in config.category_order
        ]

        self._enforce_page_budget(selections, config.page_budget_chars)

        chronological = set(config.chronological_categories)
        sections: list[DocumentSection] = []
        for selection in selections:
            if not selection.chosen:
                continue
            units = [
                SelectedUnit(unit=candidate.unit, score=candidate.score)
                for candidate in selection.chosen
            ]
            if selection.category in chronological:
                units.sort(key=_chronological_key)
            sections.append(DocumentSection(category=selection.category, units=units))

        document = TailoredDocument(
            job_title=job_title,
            company=company,
            generated_at=generated_at or datetime.now(UTC),
            contact=corpus.contact,
            page_budget_chars=config.page_budget_chars,
            unit_overhead_chars=overhead,
            sections=sections,
        )

        logger.info(
            f"Assembled {len(document.unit_ids)} units in {len(sections)} sections "
            f"({document.rendered_length}/{config.page_budget_chars} chars)"
        )
        return document

    def _select_category(
        self,
        category: Category,
        budget: CategoryBudget,
        match_scores: Mapping[str, float],
        corpus: CorpusHandle,
        overhead: int,
    ) -> _CategorySelection:
        """Greedy selection by relevance within the category capacity.

        Units that do not fit the remaining characters are skipped so later,
        smaller units can still be taken. While the minimum is unmet, a unit
        is only accepted if the smallest remaining units can still complete
        the minimum after it.
        """
        candidates = [
            _Candidate(
                unit, float(match_scores.get(unit.id, 0.0)), len(unit.text) + overhead
            )
            for unit in corpus.all_units(category)
        ]
        candidates.sort(key=lambda c: (-c.score, c.id))

        minimum = min(budget.min_units, len(candidates))
        smallest = sorted(c.length for c in candidates)[:minimum]
        if minimum > budget.max_units or sum(smallest) > budget.max_chars:
            raise BudgetInfeasibleError(
                f"Category '{category.value}' needs {minimum} units but its budget "
                f"({budget.max_units} units, {budget.max_chars} chars) cannot hold them"
            )

        chosen: list[_Candidate] = []
        used = 0
        for index, candidate in enumerate(candidates):
            if len(chosen) >= budget.max_units:
                break
            total = used + candidate.length
            if total > budget.max_chars:
                continue

            still_needed = minimum - len(chosen) - 1
            if still_needed > 0:
                rest = sorted(c.length for c in candidates[index + 1 :])[:still_needed]
                if len(rest) < still_needed or total + sum(rest) > budget.max_chars:
                    continue

            chosen.append(candidate)
            used = total

        logger.debug(
            f"Selected {len(chosen)}/{len(candidates)} {category.value} units "
            f"({used}/{budget.max_chars} chars)"
        )
        return _CategorySelection(category, minimum, chosen)

    def _enforce_page_budget(
        self, selections: list[_CategorySelection], page_budget: int
    ) -> None:
        """Drop the least relevant removable units until the page budget fits."""
        total = sum(c.length for s in selections for c in s.chosen)

        while total > page_budget:
            removable = [
                (selection, candidate)
                for selection in selections
                if len(selection.chosen) > selection.minimum
                for candidate in selection.chosen
            ]
            if not removable:
                raise BudgetInfeasibleError(
                    f"Document needs {total} chars after trimming to category "
                    f"minimums, page budget is {page_budget}"
                )

            # Lowest score loses; among equal scores the unit ranked last
            removable.sort(key=lambda item: item[1].id, reverse=True)
            selection, candidate = min(removable, key=lambda item: item[1].score)

            selection.chosen.remove(candidate)
            total -= candidate.length
            logger.debug(f"Dropped {candidate.id} to fit page budget ({total} chars)")
