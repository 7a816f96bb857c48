"""
Archetype classification of decklists.

Two passes:
1. Signature cards: an archetype matches when every one of its signature
   cards is present in the required number of copies.
2. KNN fallback: unmatched decklists are compared (TF-IDF + cosine) against
   the signature-matched ones. Strict-mode archetypes are left out of the
   training set so they can only ever come from an exact signature match.
"""
import logging
from typing import Optional

from ..models import (
    ArchetypeDefinition,
    CardEntry,
    ClassificationResult,
    DecklistInfo,
    LabeledPoint,
    TournamentData,
)
from ..settings import KNN_K, MIN_CONFIDENCE, UNKNOWN_ARCHETYPE
from ..utils.card_names import get_front_face
from .knn import knn_classify
from .tfidf import build_corpus, vectorize

logger = logging.getLogger(__name__)


def classify_by_signature_cards(
    mainboard: list[CardEntry],
    archetype_defs: list[ArchetypeDefinition],
) -> Optional[str]:
    """
    Match a mainboard against archetype signature cards.

    Copies are counted by front-face name, so "Front // Back" and "Front"
    count toward the same signature card. When several archetypes match, the
    one with the most signature cards wins; among equally sized matches the
    first declared wins.

    Returns:
        Archetype name, or None if nothing matches
    """
    quantities: dict[str, int] = {}
    for entry in mainboard:
        name = get_front_face(entry.card_name)
        quantities[name] = quantities.get(name, 0) + entry.quantity

    best_match = None
    best_size = 0
    for archetype in archetype_defs:
        matched = all(
            sig.is_satisfied(quantities.get(get_front_face(sig.name), 0))
            for sig in archetype.signature_cards
        )
        if matched and len(archetype.signature_cards) > best_size:
            best_match = archetype.name
            best_size = len(archetype.signature_cards)

    return best_match


def classify_all(
    decklists: dict[str, DecklistInfo],
    archetype_defs: list[ArchetypeDefinition],
    k: int = KNN_K,
    min_confidence: float = MIN_CONFIDENCE,
) -> list[ClassificationResult]:
    """
    Classify every decklist of a batch.

    Args:
        decklists: Decklists keyed by decklist ID
        archetype_defs: Archetype definitions in declaration order
        k: Neighbors consulted by the KNN fallback
        min_confidence: KNN results below this are reported as Unknown

    Returns:
        Exactly one ClassificationResult per decklist: signature matches
        first, then the fallback results, each in input order
    """
    results: list[ClassificationResult] = []
    classified: dict[str, str] = {}
    unclassified: list[str] = []

    for deck_id, decklist in decklists.items():
        archetype = classify_by_signature_cards(decklist.mainboard, archetype_defs)
        if archetype:
            classified[deck_id] = archetype
            results.append(ClassificationResult(deck_id, archetype, "signature", 1.0))
        else:
            unclassified.append(deck_id)

    logger.debug("Signature pass: %d matched, %d unmatched", len(classified), len(unclassified))

    if not unclassified:
        return results

    # Corpus covers the whole batch so the vocabulary does not depend on
    # which decklists happened to match a signature
    corpus = build_corpus([d.mainboard for d in decklists.values()])

    strict = {d.name for d in archetype_defs if d.strict_mode}
    labeled = [
        LabeledPoint(vector=vectorize(decklists[deck_id].mainboard, corpus), label=archetype)
        for deck_id, archetype in classified.items()
        if archetype not in strict
    ]

    fallback_count = 0
    for deck_id in unclassified:
        vector = vectorize(decklists[deck_id].mainboard, corpus)
        knn = knn_classify(vector, labeled, k)

        if knn and knn.confidence >= min_confidence:
            results.append(ClassificationResult(deck_id, knn.label, "knn", knn.confidence))
            fallback_count += 1
        else:
            confidence = knn.confidence if knn else 0.0
            results.append(ClassificationResult(deck_id, UNKNOWN_ARCHETYPE, "unknown", confidence))

    logger.debug(
        "KNN pass: %d labeled points, %d assigned, %d unknown",
        len(labeled), fallback_count, len(unclassified) - fallback_count,
    )
    return results


def classify_tournaments(
    tournaments: list[TournamentData],
    archetype_defs: list[ArchetypeDefinition],
    k: int = KNN_K,
    min_confidence: float = MIN_CONFIDENCE,
) -> dict[int, list[ClassificationResult]]:
    """Classify each tournament's decklists as its own batch, keyed by tournament ID."""
    return {
        t.meta.id: classify_all(t.decklists, archetype_defs, k=k, min_confidence=min_confidence)
        for t in tournaments
    }
