# src/core/similarity.py - v1
"""Cosine similarity helpers (numpy).

Used by the in-memory vector store; the pgvector backend computes the
same quantity in SQL as ``1 - (embedding <=> query)``.
"""

from __future__ import annotations

import numpy as np

_EPSILON = 1e-10


def cosine_similarity_to_query(
    matrix: np.ndarray, query: np.ndarray
) -> np.ndarray:
    """Cosine similarity of every row of ``matrix`` against ``query``.

    Args:
        matrix: 2D array of shape (n_rows, n_features).
        query: 1D array of shape (n_features,).

    Returns:
        1D array of shape (n_rows,) with values in [-1, 1].

    Raises:
        ValueError: On shape mismatch.
    """
    if matrix.ndim != 2:
        raise ValueError(f"Expected 2D matrix, got {matrix.ndim}D")
    if query.ndim != 1:
        raise ValueError(f"Expected 1D query, got {query.ndim}D")
    if matrix.shape[0] == 0:
        return np.empty((0,), dtype=np.float64)
    if matrix.shape[1] != query.shape[0]:
        raise ValueError(
            f"Dimension mismatch: rows have {matrix.shape[1]}, query has {query.shape[0]}"
        )

    row_norms = np.maximum(np.linalg.norm(matrix, axis=1), _EPSILON)
    query_norm = max(float(np.linalg.norm(query)), _EPSILON)
    return (matrix @ query) / (row_norms * query_norm)


def cosine_similarity(a: list[float], b: list[float]) -> float:
    """Cosine similarity of two vectors."""
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    return float(cosine_similarity_to_query(va.reshape(1, -1), vb)[0])
