"""Cosine similarity helpers.

Zero vectors are degenerate: they score 0.0 against everything instead of
dividing by zero.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from resume_builder.embeddings.provider import Vector


def cosine_similarity(
    a: Sequence[float] | Vector, b: Sequence[float] | Vector
) -> float:
    """Cosine similarity of two equal-length vectors, in [-1, 1]."""
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise ValueError(f"Vector shapes differ: {va.shape} vs {vb.shape}")

    norm = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if norm == 0.0:
        return 0.0
    return float(np.clip(np.dot(va, vb) / norm, -1.0, 1.0))


def normalize_rows(matrix: np.ndarray) -> np.ndarray:
    """Scale each row to unit length; all-zero rows stay zero."""
    norms = np.linalg.norm(matrix, axis=1, keepdims=True)
    safe = np.where(norms == 0.0, 1.0, norms)
    return matrix / safe


def similarity_matrix(rows: Sequence[Vector], columns: Sequence[Vector]) -> np.ndarray:
    """Pairwise cosine similarities, shape (len(rows), len(columns))."""
    left = normalize_rows(np.vstack(rows).astype(np.float64))
    right = normalize_rows(np.vstack(columns).astype(np.float64))
    return np.clip(left @ right.T, -1.0, 1.0)
