"""
Nth Order Karsten Aggregation (NOKA).

Builds a consensus decklist from many decklists of the same archetype.

Order 1 (Karsten's sort-and-cut): every nth copy of a card is ranked on its
own by how many input decks play at least n copies. The top 60 (mainboard) or
15 (sideboard) copies form the aggregate list.

Orders 2 and 3 also reward cards that appear together with the rest of the
list, in pairs (order 2) and triples (order 3), weighted 1/2, 1/4 and 1/8 by
combination size. The lowest-scored copy is removed one at a time until the
list is down to size, so synergy is always measured against what survives.
"""
from collections import Counter
from itertools import combinations

from ..models import AggregatedDeck, CardEntry, DecklistInfo
from ..settings import MAINBOARD_SIZE, SIDEBOARD_SIZE

SINGLE_WEIGHT = 0.5
PAIR_WEIGHT = 0.25
TRIPLE_WEIGHT = 0.125


def aggregate_decks(decks: list[DecklistInfo], order: int = 1) -> AggregatedDeck:
    """
    Build the consensus deck for a set of same-archetype decklists.

    Args:
        decks: Input decklists
        order: 1, 2 or 3

    Returns:
        AggregatedDeck; empty for no input, the input lists unchanged for a
        single deck
    """
    if order not in (1, 2, 3):
        raise ValueError(f"NOKA order must be 1, 2 or 3, got {order}")

    if not decks:
        return AggregatedDeck()
    if len(decks) == 1:
        return AggregatedDeck(
            mainboard=list(decks[0].mainboard),
            sideboard=list(decks[0].sideboard),
            deck_count=1,
        )

    mainboard = aggregate_card_list([d.mainboard for d in decks], MAINBOARD_SIZE, order)
    sideboard = aggregate_card_list([d.sideboard for d in decks], SIDEBOARD_SIZE, order)
    return AggregatedDeck(mainboard=mainboard, sideboard=sideboard, deck_count=len(decks))


def aggregate_card_list(card_lists: list[list[CardEntry]], target_size: int, order: int = 1) -> list[CardEntry]:
    """Aggregate one zone (mainboard or sideboard) down to target_size cards."""
    if order == 1:
        return _first_order(card_lists, target_size)
    return _higher_order(card_lists, target_size, order)


def _instance_frequency(card_lists: list[list[CardEntry]]) -> dict[tuple[str, int], list[int]]:
    """(name, nth copy) -> [decks with at least n copies, sum of those decks' quantities]."""
    metacards: dict[tuple[str, int], list[int]] = {}
    for card_list in card_lists:
        for card in card_list:
            for instance in range(1, card.quantity + 1):
                stats = metacards.setdefault((card.card_name, instance), [0, 0])
                stats[0] += 1
                stats[1] += card.quantity
    return metacards


# --- 1st order: sort and cut ---

def _first_order(card_lists: list[list[CardEntry]], target_size: int) -> list[CardEntry]:
    metacards = _instance_frequency(card_lists)
    ranked = sorted(
        metacards.items(),
        key=lambda item: (-item[1][0], -item[1][1], item[0][0], item[0][1]),
    )

    quantities = Counter(name for (name, _instance), _stats in ranked[:target_size])
    return _collapse(quantities)


# --- 2nd/3rd order: iterative removal ---

def _combination_frequency(card_lists: list[list[CardEntry]], size: int) -> Counter:
    """How many decks contain each sorted tuple of `size` distinct card names."""
    frequency: Counter = Counter()
    for card_list in card_lists:
        names = sorted({c.card_name for c in card_list})
        frequency.update(combinations(names, size))
    return frequency


def _higher_order(card_lists: list[list[CardEntry]], target_size: int, order: int) -> list[CardEntry]:
    instance_freq = {key: stats[0] for key, stats in _instance_frequency(card_lists).items()}
    pair_freq = _combination_frequency(card_lists, 2) if order >= 2 else None
    triple_freq = _combination_frequency(card_lists, 3) if order >= 3 else None

    max_quantities: dict[str, int] = {}
    for card_list in card_lists:
        for card in card_list:
            if card.quantity > max_quantities.get(card.card_name, 0):
                max_quantities[card.card_name] = card.quantity

    # Arena of (name, instance) copies plus copies remaining per name
    pool = [(name, i) for name, qty in max_quantities.items() for i in range(1, qty + 1)]
    remaining = Counter(name for name, _ in pool)

    while len(pool) > target_size:
        present = sorted(remaining) if triple_freq is not None else list(remaining)

        min_score = float("inf")
        min_idx = 0
        for idx, (name, instance) in enumerate(pool):
            score = instance_freq.get((name, instance), 0) * SINGLE_WEIGHT
            if pair_freq is not None:
                score += _pair_score(name, present, pair_freq) * PAIR_WEIGHT
            if triple_freq is not None:
                score += _triple_score(name, present, triple_freq) * TRIPLE_WEIGHT

            if score < min_score:
                min_score = score
                min_idx = idx

        removed_name, _ = pool[min_idx]
        pool[min_idx] = pool[-1]
        pool.pop()
        remaining[removed_name] -= 1
        if remaining[removed_name] == 0:
            del remaining[removed_name]

    return _collapse(Counter(name for name, _ in pool))


def _pair_score(name: str, present: list[str], pair_freq: Counter) -> float:
    """Average pair frequency of `name` with every other present card."""
    total = 0
    count = 0
    for other in present:
        if other == name:
            continue
        key = (name, other) if name < other else (other, name)
        total += pair_freq.get(key, 0)
        count += 1
    return total / count if count else 0.0


def _triple_score(name: str, present_sorted: list[str], triple_freq: Counter) -> float:
    """Average triple frequency of `name` with every unordered pair of other present cards."""
    others = [n for n in present_sorted if n != name]
    total = 0
    count = 0
    for a, b in combinations(others, 2):
        # a < b already; slot name into sorted position
        if name < a:
            key = (name, a, b)
        elif name < b:
            key = (a, name, b)
        else:
            key = (a, b, name)
        total += triple_freq.get(key, 0)
        count += 1
    return total / count if count else 0.0


def _collapse(quantities: Counter) -> list[CardEntry]:
    entries = [CardEntry(card_name=name, quantity=qty) for name, qty in quantities.items()]
    entries.sort(key=lambda e: (-e.quantity, e.card_name))
    return entries
