"""Persistent embedding store.

This module provides an async SQLite store so that embeddings computed in
one run can be reused by later runs, keyed by a fingerprint of the model
identity and the embedded text.
"""

import hashlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

import aiosqlite
import numpy as np

from resume_builder.embeddings.provider import Vector

# SQL schema for the embeddings table
CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS embeddings (
    fingerprint TEXT PRIMARY KEY,
    model TEXT NOT NULL,
    dimensions INTEGER NOT NULL,
    vector BLOB NOT NULL,
    created_at TEXT NOT NULL
)
"""

CREATE_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS idx_embeddings_model ON embeddings(model);
"""


def compute_fingerprint(model: str, text: str) -> str:
    """Compute the storage key for an embedding.

    Args:
        model: Provider/model identity.
        text: The embedded text.

    Returns:
        A SHA-256 hash string.
    """
    source = f"{model}\0{text}"
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


def encode_vector(vector: Vector) -> bytes:
    """Serialize a vector as little-endian float64 bytes."""
    return np.asarray(vector, dtype="<f8").tobytes()


def decode_vector(blob: bytes, dimensions: int) -> Vector:
    """Deserialize a vector written by `encode_vector`."""
    vector = np.frombuffer(blob, dtype="<f8").astype(np.float64)
    if vector.size != dimensions:
        raise ValueError(
            f"Stored vector has {vector.size} values, expected {dimensions}"
        )
    vector.setflags(write=False)
    return vector


class EmbeddingStore:
    """Async SQLite store for embedding vectors.

    This class provides get/put operations using aiosqlite for async
    database access.
    """

    def __init__(self, db_path: Path | str):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._connection: aiosqlite.Connection | None = None

    @asynccontextmanager
    async def _get_connection(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Get a database connection.

        Yields:
            An aiosqlite connection.
        """
        if self._connection is None:
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row
        yield self._connection

    async def initialize(self) -> None:
        """Initialize the database, creating tables if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        async with self._get_connection() as conn:
            await conn.execute(CREATE_TABLE_SQL)
            await conn.executescript(CREATE_INDEX_SQL)
            await conn.commit()

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None

    async def get(self, model: str, text: str) -> Vector | None:
        """Look up a stored vector.

        Args:
            model: Provider/model identity.
            text: The embedded text.

        Returns:
            The stored vector, or None if absent.
        """
        fingerprint = compute_fingerprint(model, text)
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT dimensions, vector FROM embeddings WHERE fingerprint = ?",
                (fingerprint,),
            )
            row = await cursor.fetchone()

        if row is None:
            return None

        return decode_vector(row["vector"], row["dimensions"])

    async def put(self, model: str, text: str, vector: Vector) -> None:
        """Store (or replace) a vector.

        Args:
            model: Provider/model identity.
            text: The embedded text.
            vector: The embedding to store.
        """
        fingerprint = compute_fingerprint(model, text)
        async with self._get_connection() as conn:
            await conn.execute(
                """
                INSERT OR REPLACE INTO embeddings (
                    fingerprint, model, dimensions, vector, created_at
                ) VALUES (?, ?, ?, ?, ?)
                """,
                (
                    fingerprint,
                    model,
                    int(np.asarray(vector).size),
                    encode_vector(vector),
                    datetime.now().isoformat(),
                ),
            )
            await conn.commit()

    async def count(self, model: str | None = None) -> int:
        """Count stored vectors, optionally for one model."""
        async with self._get_connection() as conn:
            if model is None:
                cursor = await conn.execute("SELECT COUNT(*) FROM embeddings")
            else:
                cursor = await conn.execute(
                    "SELECT COUNT(*) FROM embeddings WHERE model = ?", (model,)
                )
            row = await cursor.fetchone()

        return int(row[0]) if row else 0
