"""Embedding provider boundary.

Public API:
    - EmbeddingProvider: Protocol every provider satisfies
    - LiteLLMEmbeddingProvider: Provider backed by LiteLLM
    - RetryingEmbeddingProvider: Caller-side retry wrapper
    - EmbeddingStore: Optional persistent vector store
    - EmbeddingConfig: Configuration settings
"""

from resume_builder.embeddings.config import (
    EmbeddingConfig,
    get_embedding_config,
    reset_embedding_config,
)
from resume_builder.embeddings.provider import (
    EmbeddingProvider,
    LiteLLMEmbeddingProvider,
    RetryingEmbeddingProvider,
    Vector,
    coerce_vector,
    provider_name,
)
from resume_builder.embeddings.store import EmbeddingStore

__all__ = [
    "EmbeddingProvider",
    "LiteLLMEmbeddingProvider",
    "RetryingEmbeddingProvider",
    "EmbeddingStore",
    "EmbeddingConfig",
    "Vector",
    "coerce_vector",
    "provider_name",
    "get_embedding_config",
    "reset_embedding_config",
]
