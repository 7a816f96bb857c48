"""
Cosine similarity for dense and sparse vectors.
"""
import math
from typing import Sequence

from ..models import SparseVector


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity between two dense vectors.

    Vectors of different length are compared as if the shorter one were
    padded with zeros. Returns 0 when either vector has zero norm.
    """
    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0

    shared = min(len(a), len(b))
    for i in range(shared):
        dot += a[i] * b[i]
        norm_a += a[i] * a[i]
        norm_b += b[i] * b[i]

    for value in a[shared:]:
        norm_a += value * value
    for value in b[shared:]:
        norm_b += value * value

    denom = math.sqrt(norm_a) * math.sqrt(norm_b)
    if denom == 0:
        return 0.0
    return dot / denom


def cosine_similarity_sparse(a: SparseVector, b: SparseVector) -> float:
    """Cosine similarity between two sparse vectors without densifying them."""
    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)

    lookup: dict[int, float] = {}
    norm_shorter = 0.0
    for idx, value in shorter:
        lookup[idx] = value
        norm_shorter += value * value

    dot = 0.0
    norm_longer = 0.0
    for idx, value in longer:
        norm_longer += value * value
        other = lookup.get(idx)
        if other is not None:
            dot += value * other

    denom = math.sqrt(norm_shorter) * math.sqrt(norm_longer)
    if denom == 0:
        return 0.0
    return dot / denom
