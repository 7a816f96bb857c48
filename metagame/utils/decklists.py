"""
Collect decklists by archetype across tournaments.
"""
from dataclasses import dataclass
from typing import Optional

from ..models import DecklistInfo, TournamentData


@dataclass
class EnrichedDecklist:
    """A decklist with the player and tournament it came from."""
    decklist: DecklistInfo
    decklist_id: str
    player_name: str
    player_id: str
    player_rank: int
    tournament_name: str
    tournament_id: int


def collect_archetype_decklists(
    tournaments: list[TournamentData],
    player_archetypes: dict[str, str],
    archetype_name: str,
) -> list[EnrichedDecklist]:
    """Collect every decklist of the players assigned to an archetype."""
    result = []
    for tournament in tournaments:
        for player_id, player in tournament.players.items():
            if player_archetypes.get(player_id) != archetype_name:
                continue
            for deck_id in player.decklist_ids:
                deck = tournament.decklists.get(deck_id)
                if deck is None:
                    continue
                result.append(EnrichedDecklist(
                    decklist=deck,
                    decklist_id=deck_id,
                    player_name=player.name,
                    player_id=player_id,
                    player_rank=player.rank,
                    tournament_name=tournament.meta.name,
                    tournament_id=tournament.meta.id,
                ))
    return result


def collect_raw_decklists(
    tournaments: list[TournamentData],
    player_archetypes: dict[str, str],
    archetype_name: str,
) -> list[DecklistInfo]:
    """Same as collect_archetype_decklists, without the metadata."""
    return [e.decklist for e in collect_archetype_decklists(tournaments, player_archetypes, archetype_name)]


def find_best_decklist(enriched: list[EnrichedDecklist]) -> Optional[EnrichedDecklist]:
    """
    Decklist with the best standing (lowest rank).
    Ties are broken by tournament name, then player name.
    """
    if not enriched:
        return None
    return min(enriched, key=lambda e: (e.player_rank, e.tournament_name, e.player_name))
