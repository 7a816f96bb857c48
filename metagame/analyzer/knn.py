"""
K-nearest-neighbor labeling over TF-IDF vectors.
"""
from typing import Optional

from ..models import KnnResult, LabeledPoint, SparseVector
from .similarity import cosine_similarity_sparse


def knn_classify(target: SparseVector, labeled: list[LabeledPoint], k: int) -> Optional[KnnResult]:
    """
    Classify a vector by majority vote of its k most similar labeled points.

    Ties in vote count go to the label with the higher average similarity.
    The returned confidence is the winning label's average similarity among
    the selected neighbors.

    Args:
        target: Vector to classify
        labeled: Training points
        k: Number of neighbors (capped at the number of labeled points)

    Returns:
        KnnResult, or None if there are no labeled points
    """
    if not labeled:
        return None

    effective_k = min(k, len(labeled))

    similarities = [
        (point.label, cosine_similarity_sparse(target, point.vector))
        for point in labeled
    ]
    similarities.sort(key=lambda x: x[1], reverse=True)
    neighbors = similarities[:effective_k]

    votes: dict[str, list] = {}
    for label, similarity in neighbors:
        tally = votes.setdefault(label, [0, 0.0])
        tally[0] += 1
        tally[1] += similarity

    best_label = ""
    best_count = 0
    best_avg = 0.0
    for label, (count, total_similarity) in votes.items():
        avg = total_similarity / count
        if count > best_count or (count == best_count and avg > best_avg):
            best_label = label
            best_count = count
            best_avg = avg

    return KnnResult(label=best_label, confidence=best_avg)
