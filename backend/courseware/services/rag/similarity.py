"""
Vector helpers for semantic retrieval.

Embeddings arrive from two untrusted places: the embedding provider (query
vectors) and the material store (chunk vectors written by ingestion).
coerce_vector() is the single gate both pass through before any similarity
is computed.
"""

import math
from collections.abc import Sequence

import numpy as np


def coerce_vector(value) -> np.ndarray:
    """
    Convert a raw embedding into a 1-D float array.

    Raises:
        ValueError: If the value is empty, not a flat sequence of real
                    numbers, or contains NaN/infinity.
    """
    if value is None or isinstance(value, (str, bytes, dict)):
        raise ValueError("Embedding must be a sequence of numbers")
    if not isinstance(value, (Sequence, np.ndarray)):
        raise ValueError(f"Embedding must be a sequence, got {type(value).__name__}")
    if any(isinstance(x, bool) for x in value):
        raise ValueError("Embedding contains boolean values")

    try:
        vector = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Embedding is not numeric: {e}") from e

    if vector.ndim != 1 or vector.size == 0:
        raise ValueError("Embedding must be a non-empty flat vector")
    if not np.all(np.isfinite(vector)):
        raise ValueError("Embedding contains non-finite values")
    return vector


def magnitude(vector: np.ndarray) -> float:
    return float(np.linalg.norm(vector))


def cosine_similarity(a, b) -> float:
    """
    Cosine similarity of two vectors, clamped to [-1, 1].

    Raises:
        ValueError: On dimension mismatch or a zero-magnitude vector,
                    where the similarity is undefined.
    """
    va = coerce_vector(a)
    vb = coerce_vector(b)
    if va.shape != vb.shape:
        raise ValueError(f"Dimension mismatch: {va.size} vs {vb.size}")

    norm_a = magnitude(va)
    norm_b = magnitude(vb)
    if norm_a == 0.0 or norm_b == 0.0:
        raise ValueError("Cosine similarity is undefined for zero-magnitude vectors")

    return clamp_similarity(float(np.dot(va, vb)) / (norm_a * norm_b))


def clamp_similarity(similarity: float) -> float:
    # Floating-point drift can push identical vectors to 1.0000000000000002
    if math.isnan(similarity):
        raise ValueError("Similarity is NaN")
    return max(-1.0, min(1.0, similarity))
