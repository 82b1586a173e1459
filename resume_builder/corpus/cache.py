"""Per-corpus embedding cache.

One cache belongs to exactly one loaded corpus. Each unit id gets its own
asyncio lock, so concurrent requests for the same unit issue a single
provider call; the others wait and read the cached vector.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from resume_builder.embeddings.provider import Vector

logger = logging.getLogger(__name__)


class EmbeddingCache:
    """In-memory vector cache keyed by content unit id."""

    def __init__(self) -> None:
        self._vectors: dict[str, Vector] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self.misses = 0

    def __contains__(self, key: str) -> bool:
        return key in self._vectors

    def __len__(self) -> int:
        return len(self._vectors)

    def peek(self, key: str) -> Vector | None:
        """Return the cached vector without computing it."""
        return self._vectors.get(key)

    async def get_or_compute(
        self, key: str, compute: Callable[[], Awaitable[Vector]]
    ) -> Vector:
        """Return the cached vector for `key`, computing it at most once.

        If `compute` raises or the awaiting task is cancelled, nothing is
        cached for `key` and a later call may try again. Vectors cached
        earlier are never touched.
        """
        cached = self._vectors.get(key)
        if cached is not None:
            return cached

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            # Another task may have filled the slot while we waited
            cached = self._vectors.get(key)
            if cached is not None:
                return cached

            vector = await compute()
            self.misses += 1
            self._vectors[key] = vector
            logger.debug(f"Cached embedding for {key}")

        self._locks.pop(key, None)
        return vector
