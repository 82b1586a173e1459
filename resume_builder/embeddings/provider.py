"""Embedding provider boundary.

The core only ever talks to an `EmbeddingProvider`: an object with an async
`embed(text)` method returning a fixed-length numeric vector. Calls are
treated as slow and fallible suspension points.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

import numpy as np
import numpy.typing as npt

from resume_builder.embeddings.config import EmbeddingConfig, get_embedding_config
from resume_builder.errors import EmbeddingProviderError

logger = logging.getLogger(__name__)

Vector = npt.NDArray[np.float64]

# LiteLLM loads `.env` into process environment by default (DEV mode).
os.environ.setdefault("LITELLM_MODE", "PRODUCTION")


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Anything that can turn text into a dense vector."""

    async def embed(self, text: str) -> Sequence[float] | Vector: ...


def provider_name(provider: object) -> str:
    """Return a stable identity for a provider (used as a cache namespace)."""
    name = getattr(provider, "model_name", None)
    if isinstance(name, str) and name:
        return name
    return type(provider).__name__


def coerce_vector(raw: Any, dimensions: int | None = None) -> Vector:
    """Validate provider output and return it as a read-only float64 vector.

    Raises:
        EmbeddingProviderError: If the output is not a flat, finite, non-empty
            numeric sequence, or does not have the expected length.
    """
    try:
        vector = np.array(raw, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise EmbeddingProviderError(
            f"Embedding provider returned non-numeric output: {type(raw).__name__}",
            e,
        ) from e

    if vector.ndim != 1 or vector.size == 0:
        raise EmbeddingProviderError(
            f"Embedding provider returned malformed vector with shape {vector.shape}"
        )
    if not np.all(np.isfinite(vector)):
        raise EmbeddingProviderError("Embedding provider returned non-finite values")
    if dimensions is not None and vector.size != dimensions:
        raise EmbeddingProviderError(
            f"Embedding provider returned {vector.size} dimensions, "
            f"expected {dimensions}"
        )

    vector.setflags(write=False)
    return vector


class LiteLLMEmbeddingProvider:
    """Embedding provider backed by LiteLLM's async embedding API."""

    def __init__(self, config: EmbeddingConfig | None = None) -> None:
        self.config = config or get_embedding_config()

    @property
    def model_name(self) -> str:
        """Return provider-qualified model name for LiteLLM routing."""
        if "/" in self.config.model:
            return self.config.model

        if self.config.base_url:
            return f"openai/{self.config.model}"

        if self.config.provider == "openai":
            return self.config.model

        return f"{self.config.provider}/{self.config.model}"

    async def embed(self, text: str) -> Vector:
        """Embed one piece of text.

        Raises:
            EmbeddingProviderError: If the call fails, times out, or the
                response does not contain a usable vector.
        """
        from litellm.exceptions import Timeout

        try:
            response = await self._call_embedding(text)
        except Timeout as e:
            raise EmbeddingProviderError(
                "Embedding request timed out. "
                f"Increase EMBEDDING_TIMEOUT (timeout={self.config.timeout}s).",
                e,
            ) from e
        except Exception as e:
            raise EmbeddingProviderError(f"Embedding request failed: {e}", e) from e

        return coerce_vector(self._parse_response(response), self.config.dimensions)

    async def _call_embedding(self, text: str):
        from litellm import aembedding

        kwargs: dict[str, Any] = {
            "model": self.model_name,
            "input": [text],
            "timeout": self.config.timeout,
        }

        if self.config.api_key:
            kwargs["api_key"] = self.config.api_key

        if self.config.base_url:
            kwargs["api_base"] = self.config.base_url

        return await aembedding(**kwargs)

    def _parse_response(self, response: Any) -> Any:
        data = getattr(response, "data", None)
        if data is None and isinstance(response, Mapping):
            data = response.get("data")
        if not data:
            raise EmbeddingProviderError("Embedding response contained no data")

        item = data[0]
        if isinstance(item, Mapping):
            embedding = item.get("embedding")
        else:
            embedding = getattr(item, "embedding", None)

        if embedding is None:
            raise EmbeddingProviderError("Embedding response item has no vector")
        return embedding


class RetryingEmbeddingProvider:
    """Caller-side retry wrapper with exponential backoff.

    The corpus store and extractor never retry on their own; a caller that
    wants retries wraps its provider in this class.
    """

    def __init__(
        self,
        inner: EmbeddingProvider,
        max_retries: int = 2,
        base_delay: float = 0.5,
        max_delay: float = 8.0,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.inner = inner
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay

    @property
    def model_name(self) -> str:
        return provider_name(self.inner)

    async def embed(self, text: str) -> Sequence[float] | Vector:
        last_error: EmbeddingProviderError | None = None
        for attempt in range(self.max_retries + 1):
            try:
                return await self.inner.embed(text)
            except EmbeddingProviderError as e:
                last_error = e
                if attempt >= self.max_retries:
                    raise
                delay = min(self.base_delay * (2**attempt), self.max_delay)
                logger.warning(
                    f"Embedding call failed (attempt {attempt + 1}), "
                    f"retrying in {delay:.1f}s: {e}"
                )
                await asyncio.sleep(delay)

        # Should not reach here, but satisfy type checker
        raise EmbeddingProviderError(f"Embedding call failed: {last_error}", last_error)
