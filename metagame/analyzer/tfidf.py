"""
TF-IDF weighting of decklists.

A decklist is treated as a document and each card as a term:

    TF(card, deck) = copies of card / total cards in deck
    IDF(card)      = ln(N / number of decks containing card)

Cards played by every deck in the batch get an IDF of 0 and drop out of the
vectors, so basic lands and format staples do not dominate similarity.
"""
import math

from ..models import CardEntry, SparseVector, TfIdfCorpus


def build_corpus(decklists: list[list[CardEntry]]) -> TfIdfCorpus:
    """
    Build a TF-IDF corpus from a collection of decklists.

    Args:
        decklists: One card list per document (usually mainboards)

    Returns:
        Corpus with vocabulary in first-seen order and per-term IDF
    """
    vocabulary: dict[str, int] = {}
    document_frequency: dict[str, int] = {}

    for decklist in decklists:
        seen = set()
        for entry in decklist:
            card = entry.card_name
            if card not in vocabulary:
                vocabulary[card] = len(vocabulary)
            if card not in seen:
                seen.add(card)
                document_frequency[card] = document_frequency.get(card, 0) + 1

    n = len(decklists)
    idf = [0.0] * len(vocabulary)
    for card, idx in vocabulary.items():
        idf[idx] = math.log(n / document_frequency[card])

    return TfIdfCorpus(vocabulary=vocabulary, idf=idf, document_count=n)


def vectorize(decklist: list[CardEntry], corpus: TfIdfCorpus) -> SparseVector:
    """Convert a decklist into a sparse TF-IDF vector."""
    total_cards = sum(entry.quantity for entry in decklist)
    if total_cards == 0:
        return []

    vector: SparseVector = []
    for entry in decklist:
        idx = corpus.vocabulary.get(entry.card_name)
        if idx is None:
            continue

        weight = (entry.quantity / total_cards) * corpus.idf[idx]
        if weight > 0:
            vector.append((idx, weight))

    return vector


def to_dense(sparse: SparseVector, size: int) -> list[float]:
    """Expand a sparse vector to a dense list of the given size."""
    dense = [0.0] * size
    for idx, weight in sparse:
        dense[idx] = weight
    return dense
