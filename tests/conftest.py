"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio
import hashlib
import os

import pytest

from resume_builder.errors import EmbeddingProviderError

# Keep LiteLLM off the network at import time (use its bundled cost map).
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")


class CountingProvider:
    """Deterministic provider that records every call.

    Vectors are derived from a SHA-256 digest of the text, so equal text
    always embeds to the same vector.
    """

    model_name = "stub/counting"

    def __init__(self, dimensions: int = 8):
        self.dimensions = dimensions
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        await asyncio.sleep(0)
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return [(digest[i] + 1) / 256.0 for i in range(self.dimensions)]


class MappingProvider:
    """Provider returning fixed vectors per text, with a fallback vector."""

    model_name = "stub/mapping"

    def __init__(
        self,
        vectors: dict[str, list[float]],
        default: list[float] | None = None,
    ):
        self.vectors = vectors
        self.default = default
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        await asyncio.sleep(0)
        if text in self.vectors:
            return self.vectors[text]
        if self.default is None:
            raise EmbeddingProviderError(f"No vector for {text!r}")
        return self.default


class FailingProvider:
    """Provider that always fails."""

    model_name = "stub/failing"

    def __init__(self, message: str = "provider unavailable"):
        self.message = message
        self.calls = 0

    async def embed(self, text: str) -> list[float]:
        self.calls += 1
        raise EmbeddingProviderError(self.message)


class BlockingProvider:
    """Provider that waits until released, for cancellation tests."""

    model_name = "stub/blocking"

    def __init__(self, dimensions: int = 4):
        self.dimensions = dimensions
        self.release = asyncio.Event()
        self.started = asyncio.Event()
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        self.started.set()
        await self.release.wait()
        return [1.0] * self.dimensions


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset configuration singletons and logging between tests."""
    yield

    from resume_builder.assembly.config import reset_assembly_config
    from resume_builder.config.settings import reset_settings
    from resume_builder.embeddings.config import reset_embedding_config
    from resume_builder.extractor.config import reset_extractor_config
    from resume_builder.matching.config import reset_matching_config
    from resume_builder.utils.logging import reset_logging

    reset_assembly_config()
    reset_settings()
    reset_embedding_config()
    reset_extractor_config()
    reset_matching_config()
    reset_logging()


@pytest.fixture
def embedding_config():
    """Embedding config isolated from the environment and .env files."""
    from resume_builder.embeddings.config import EmbeddingConfig

    return EmbeddingConfig(_env_file=None, dimensions=None, max_concurrency=4)


@pytest.fixture
def counting_provider() -> CountingProvider:
    """Deterministic call-counting provider."""
    return CountingProvider()


@pytest.fixture
def mapping_provider():
    """Factory for providers with fixed vectors per text."""
    return MappingProvider


@pytest.fixture
def failing_provider() -> FailingProvider:
    """Provider that always raises EmbeddingProviderError."""
    return FailingProvider()


@pytest.fixture
def blocking_provider() -> BlockingProvider:
    """Provider that blocks until `release` is set."""
    return BlockingProvider()


@pytest.fixture
def sample_records() -> list[dict]:
    """A small, valid corpus."""
    return [
        {
            "id": "summary-1",
            "category": "summary",
            "text": "Backend engineer focused on reliable distributed systems.",
        },
        {"id": "skill-python", "category": "skills", "text": "Python"},
        {"id": "skill-rust", "category": "skills", "text": "Rust"},
        {"id": "skill-gardening", "category": "skills", "text": "Gardening"},
        {
            "id": "exp-acme",
            "category": "experience",
            "text": "Built a Rust ingestion service handling 2M events per day.",
            "date_range": {"start": "2021-03", "end": "present"},
        },
        {
            "id": "exp-globex",
            "category": "experience",
            "text": "Maintained Python data pipelines for reporting.",
            "date_range": {"start": "2018-01", "end": "2021-02"},
        },
        {
            "id": "edu-bsc",
            "category": "education",
            "text": "BSc Computer Science, State University",
            "date_range": ["2014", "2018"],
        },
    ]
