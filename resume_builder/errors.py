"""Error taxonomy for the tailoring pipeline.

Every error carries the name of the pipeline stage that raised it so that a
failed run can always report where it failed.
"""

from __future__ import annotations


class ResumeBuilderError(Exception):
    """Base class for all resume builder errors."""

    stage: str = "pipeline"

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class CorpusLoadError(ResumeBuilderError):
    """Raised when a corpus source cannot be read at all."""

    stage = "corpus"


class CorpusParseError(ResumeBuilderError):
    """A single malformed corpus record.

    These are collected during loading rather than raised, so valid
    records still load.
    """

    stage = "corpus"

    def __init__(self, position: int, reason: str):
        super().__init__(f"record {position}: {reason}")
        self.position = position
        self.reason = reason


class EmbeddingProviderError(ResumeBuilderError):
    """Raised when the embedding provider fails or returns malformed output."""

    stage = "embedding"


class ExtractionError(ResumeBuilderError):
    """Raised when no requirements can be extracted from a job posting."""

    stage = "extract"


class DimensionMismatchError(ResumeBuilderError):
    """Raised when embedding vectors have inconsistent lengths."""

    stage = "match"

    def __init__(self, expected: int, actual: int, source: str):
        super().__init__(
            f"Embedding dimension mismatch: expected {expected}, "
            f"got {actual} for {source}"
        )
        self.expected = expected
        self.actual = actual
        self.source = source


class BudgetInfeasibleError(ResumeBuilderError):
    """Raised when category minimums cannot fit within the configured budget."""

    stage = "assemble"
