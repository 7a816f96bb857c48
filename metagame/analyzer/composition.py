"""
Card composition analysis for an archetype.

For each card, what share of decklists play at least 1, 2, 3 or 4 copies.
Mainboard and sideboard are counted separately.
"""
from dataclasses import dataclass, field

from ..models import CardEntry, DecklistInfo

COPY_THRESHOLDS = (1, 2, 3, 4)


@dataclass
class CardCompositionRow:
    """Usage of a single card across decklists."""
    card_name: str
    thresholds: list[float]  # share of decks with >=1, >=2, >=3, >=4 copies
    average_quantity: float  # among decks that play the card
    count: int  # decks that play the card


@dataclass
class CardCompositionResult:
    mainboard: list[CardCompositionRow] = field(default_factory=list)
    sideboard: list[CardCompositionRow] = field(default_factory=list)
    deck_count: int = 0


def _collect_quantities(sections: list[list[CardEntry]]) -> dict[str, list[int]]:
    cards: dict[str, list[int]] = {}
    for section in sections:
        per_deck: dict[str, int] = {}
        for entry in section:
            per_deck[entry.card_name] = per_deck.get(entry.card_name, 0) + entry.quantity
        for name, qty in per_deck.items():
            cards.setdefault(name, []).append(qty)
    return cards


def _build_rows(cards: dict[str, list[int]], deck_count: int) -> list[CardCompositionRow]:
    rows = []
    for card_name, quantities in cards.items():
        rows.append(CardCompositionRow(
            card_name=card_name,
            thresholds=[
                sum(1 for q in quantities if q >= n) / deck_count
                for n in COPY_THRESHOLDS
            ],
            average_quantity=sum(quantities) / len(quantities),
            count=len(quantities),
        ))

    rows.sort(key=lambda r: (-r.thresholds[0], r.card_name))
    return rows


def compute_card_composition(decks: list[DecklistInfo]) -> CardCompositionResult:
    """
    Compute card composition stats for a set of decklists.

    Returns:
        Rows per zone sorted by play rate (then name); empty for no decks
    """
    deck_count = len(decks)
    if deck_count == 0:
        return CardCompositionResult()

    return CardCompositionResult(
        mainboard=_build_rows(_collect_quantities([d.mainboard for d in decks]), deck_count),
        sideboard=_build_rows(_collect_quantities([d.sideboard for d in decks]), deck_count),
        deck_count=deck_count,
    )
