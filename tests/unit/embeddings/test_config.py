"""Tests for EmbeddingConfig."""

import pytest


class TestEmbeddingConfig:
    """Test embedding configuration."""

    def test_defaults(self, monkeypatch):
        """Defaults target OpenAI's small embedding model."""
        for var in ["EMBEDDING_PROVIDER", "EMBEDDING_MODEL", "EMBEDDING_DIMENSIONS"]:
            monkeypatch.delenv(var, raising=False)

        from resume_builder.embeddings.config import EmbeddingConfig

        config = EmbeddingConfig(_env_file=None)

        assert config.provider == "openai"
        assert config.model == "text-embedding-3-small"
        assert config.dimensions is None
        assert config.timeout == 30.0
        assert config.max_concurrency == 8

    def test_reads_env_overrides(self, monkeypatch):
        """EMBEDDING_* variables override defaults."""
        monkeypatch.setenv("EMBEDDING_PROVIDER", "ollama")
        monkeypatch.setenv("EMBEDDING_MODEL", "nomic-embed-text")
        monkeypatch.setenv("EMBEDDING_DIMENSIONS", "768")
        monkeypatch.setenv("EMBEDDING_MAX_CONCURRENCY", "2")

        from resume_builder.embeddings.config import EmbeddingConfig

        config = EmbeddingConfig(_env_file=None)

        assert config.provider == "ollama"
        assert config.model == "nomic-embed-text"
        assert config.dimensions == 768
        assert config.max_concurrency == 2

    @pytest.mark.parametrize(
        ("field", "value"),
        [("timeout", 0), ("dimensions", 0), ("max_concurrency", 0)],
    )
    def test_rejects_non_positive_values(self, field, value):
        """Timeouts, dimensions and concurrency must be positive."""
        from pydantic import ValidationError

        from resume_builder.embeddings.config import EmbeddingConfig

        with pytest.raises(ValidationError):
            EmbeddingConfig(_env_file=None, **{field: value})

    def test_singleton_reset(self):
        """reset_embedding_config drops the cached instance."""
        from resume_builder.embeddings.config import (
            get_embedding_config,
            reset_embedding_config,
        )

        first = get_embedding_config()
        assert get_embedding_config() is first

        reset_embedding_config()
        assert get_embedding_config() is not first
