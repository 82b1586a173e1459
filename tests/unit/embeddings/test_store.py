"""Tests for the persistent EmbeddingStore."""

import numpy as np
import pytest


class TestFingerprint:
    """Test store keys."""

    def test_fingerprint_is_deterministic(self):
        """Same model and text give the same key."""
        from resume_builder.embeddings.store import compute_fingerprint

        assert compute_fingerprint("m", "Rust") == compute_fingerprint("m", "Rust")
        assert len(compute_fingerprint("m", "Rust")) == 64

    def test_fingerprint_depends_on_model_and_text(self):
        """Changing either the model or the text changes the key."""
        from resume_builder.embeddings.store import compute_fingerprint

        key = compute_fingerprint("model-a", "Rust")

        assert compute_fingerprint("model-b", "Rust") != key
        assert compute_fingerprint("model-a", "Python") != key

    def test_fingerprint_separates_model_and_text(self):
        """Model/text boundaries cannot collide."""
        from resume_builder.embeddings.store import compute_fingerprint

        assert compute_fingerprint("ab", "c") != compute_fingerprint("a", "bc")


class TestVectorCodec:
    """Test vector byte encoding."""

    def test_decode_rejects_wrong_size(self):
        """A blob that does not match its dimension count is rejected."""
        from resume_builder.embeddings.store import decode_vector, encode_vector

        blob = encode_vector(np.array([1.0, 2.0, 3.0]))

        with pytest.raises(ValueError):
            decode_vector(blob, 4)


class TestEmbeddingStore:
    """Test the aiosqlite-backed store."""

    @pytest.mark.asyncio
    async def test_initialize_creates_database_file(self, tmp_path):
        """initialize should create the database and its parent directory."""
        from resume_builder.embeddings.store import EmbeddingStore

        db_path = tmp_path / "cache" / "embeddings.db"
        store = EmbeddingStore(db_path)
        await store.initialize()

        assert db_path.exists()
        await store.close()

    @pytest.mark.asyncio
    async def test_put_then_get_returns_vector(self, tmp_path):
        """A stored vector is returned unchanged and read-only."""
        from resume_builder.embeddings.store import EmbeddingStore

        store = EmbeddingStore(tmp_path / "embeddings.db")
        await store.initialize()

        await store.put("stub", "Rust", np.array([0.1, 0.2, 0.3]))
        vector = await store.get("stub", "Rust")

        assert vector is not None
        assert vector.tolist() == [0.1, 0.2, 0.3]
        assert not vector.flags.writeable
        await store.close()

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, tmp_path):
        """Unknown entries return None."""
        from resume_builder.embeddings.store import EmbeddingStore

        store = EmbeddingStore(tmp_path / "embeddings.db")
        await store.initialize()

        assert await store.get("stub", "Rust") is None
        assert await store.get("other-model", "Rust") is None
        await store.close()

    @pytest.mark.asyncio
    async def test_put_replaces_existing_entry(self, tmp_path):
        """Writing the same key twice keeps one row with the latest vector."""
        from resume_builder.embeddings.store import EmbeddingStore

        store = EmbeddingStore(tmp_path / "embeddings.db")
        await store.initialize()

        await store.put("stub", "Rust", np.array([1.0, 0.0]))
        await store.put("stub", "Rust", np.array([0.0, 1.0]))

        assert await store.count() == 1
        assert (await store.get("stub", "Rust")).tolist() == [0.0, 1.0]
        await store.close()

    @pytest.mark.asyncio
    async def test_count_by_model(self, tmp_path):
        """count can be filtered by model."""
        from resume_builder.embeddings.store import EmbeddingStore

        store = EmbeddingStore(tmp_path / "embeddings.db")
        await store.initialize()

        await store.put("model-a", "Rust", np.array([1.0]))
        await store.put("model-a", "Python", np.array([2.0]))
        await store.put("model-b", "Rust", np.array([3.0]))

        assert await store.count() == 3
        assert await store.count("model-a") == 2
        assert await store.count("model-b") == 1
        await store.close()

    @pytest.mark.asyncio
    async def test_vectors_survive_reopen(self, tmp_path):
        """Vectors persist across store instances."""
        from resume_builder.embeddings.store import EmbeddingStore

        db_path = tmp_path / "embeddings.db"
        first = EmbeddingStore(db_path)
        await first.initialize()
        await first.put("stub", "Rust", np.array([0.5, 0.5]))
        await first.close()

        second = EmbeddingStore(db_path)
        await second.initialize()

        assert (await second.get("stub", "Rust")).tolist() == [0.5, 0.5]
        await second.close()

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, tmp_path):
        """Initializing an existing database should not raise."""
        from resume_builder.embeddings.store import EmbeddingStore

        db_path = tmp_path / "embeddings.db"
        for _ in range(2):
            store = EmbeddingStore(db_path)
            await store.initialize()
            await store.close()
