"""Main Tailoring Service.

Orchestrates the pipeline from job posting text and a loaded corpus to a
tailored document, and optionally renders it to disk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from resume_builder.assembly.service import ResumeAssembler
from resume_builder.errors import ResumeBuilderError
from resume_builder.extractor.service import RequirementExtractor
from resume_builder.matching.service import SemanticMatcher
from resume_builder.rendering.renderer import MarkdownRenderer

if TYPE_CHECKING:
    from resume_builder.assembly.models import TailoredDocument
    from resume_builder.corpus.store import CorpusHandle
    from resume_builder.embeddings.provider import EmbeddingProvider
    from resume_builder.errors import CorpusParseError
    from resume_builder.extractor.models import Requirement
    from resume_builder.matching.models import MatchResult
    from resume_builder.rendering.renderer import DocumentRenderer

logger = logging.getLogger(__name__)


@dataclass
class TailoringResult:
    """Result of a complete tailoring operation."""

    success: bool
    stage: str | None = None
    error: str | None = None

    # Intermediate artifacts
    requirements: list[Requirement] = field(default_factory=list)
    match_result: MatchResult | None = None
    document: TailoredDocument | None = None

    # File paths
    output_path: str | None = None

    # Corpus records skipped while loading
    corpus_errors: list[CorpusParseError] = field(default_factory=list)

    # Metadata
    completed_at: datetime = field(default_factory=datetime.now)


class TailoringService:
    """Main service for resume tailoring.

    Orchestrates the pipeline:
    1. Extract weighted requirements from the posting
    2. Match corpus units against the requirements
    3. Assemble the tailored document under budget
    4. Render the document (when an output directory is given)
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        extractor: RequirementExtractor | None = None,
        matcher: SemanticMatcher | None = None,
        assembler: ResumeAssembler | None = None,
        renderer: DocumentRenderer | None = None,
    ):
        """Initialize the tailoring service.

        Args:
            provider: Embedding provider used for requirement phrases.
            extractor: Optional RequirementExtractor.
            matcher: Optional SemanticMatcher.
            assembler: Optional ResumeAssembler.
            renderer: Optional renderer. Defaults to Markdown.
        """
        self.provider = provider
        self.extractor = extractor or RequirementExtractor(provider)
        self.matcher = matcher or SemanticMatcher()
        self.assembler = assembler or ResumeAssembler()
        self.renderer = renderer or MarkdownRenderer()

    async def tailor(
        self,
        raw_text: str,
        corpus: CorpusHandle,
        *,
        job_title: str | None = None,
        company: str | None = None,
        output_dir: Path | None = None,
        generated_at: datetime | None = None,
    ) -> TailoringResult:
        """Run the tailoring pipeline for one job posting.

        Args:
            raw_text: Job posting text.
            corpus: Loaded resume corpus.
            job_title: Target job title.
            company: Target company.
            output_dir: Where to render the document. Rendering is skipped
                when not given.
            generated_at: Timestamp to stamp on the document.

        Returns:
            TailoringResult with artifacts, or the failing stage and error.
        """
        result = TailoringResult(success=False, corpus_errors=list(corpus.errors))
        logger.info(
            f"Starting tailoring pipeline for {company or '-'} - {job_title or '-'}"
        )

        try:
            # Step 1: Extract requirements
            logger.info("Step 1: Extracting requirements...")
            result.stage = "extract"
            result.requirements = await self.extractor.extract(raw_text)

            # Step 2: Match corpus against requirements
            logger.info("Step 2: Matching corpus...")
            result.stage = "match"
            result.match_result = await self.matcher.match(result.requirements, corpus)

            # Step 3: Assemble document
            logger.info("Step 3: Assembling document...")
            result.stage = "assemble"
            result.document = self.assembler.assemble(
                result.match_result,
                corpus,
                job_title=job_title,
                company=company,
                generated_at=generated_at,
            )

        except ResumeBuilderError as e:
            logger.error(f"Tailoring pipeline failed at {e.stage}: {e.message}")
            result.stage = e.stage
            result.error = e.message
            result.completed_at = datetime.now()
            return result

        # Step 4: Render
        if output_dir is not None:
            logger.info("Step 4: Rendering document...")
            result.stage = "render"
            render_result = self.renderer.render(result.document, Path(output_dir))
            if not render_result.success:
                result.error = f"Failed to render resume: {render_result.error}"
                result.completed_at = datetime.now()
                return result
            result.output_path = render_result.file_path

        logger.info("Tailoring pipeline completed successfully")
        result.success = True
        result.stage = None
        result.completed_at = datetime.now()
        return result
