"""
Win-rate splitting by card choice.

Splits an archetype's players by how many copies of a card they registered
(mainboard + sideboard) and computes a matchup row for each group against the
rest of the metagame.
"""
from dataclasses import dataclass, field
from typing import Optional

from ..models import MatchupCell, TournamentData
from ..settings import OTHER_ARCHETYPE
from ..utils.decklists import collect_archetype_decklists
from .matchups import MatrixOptions, build_matchup_matrix

SPLIT_MODES = ("binary", "per-copy")


@dataclass
class SplitRow:
    label: str
    cells: dict[str, MatchupCell] = field(default_factory=dict)
    overall_winrate: Optional[float] = None
    total_matches: int = 0
    player_count: int = 0


@dataclass
class SplitResult:
    card_name: str
    opponents: list[str]
    baseline_row: SplitRow
    group_rows: list[SplitRow]


def _count_card_copies(
    tournaments: list[TournamentData],
    player_archetypes: dict[str, str],
    archetype_name: str,
    card_name: str,
) -> dict[str, int]:
    """Copies of the card per player, taking the max over a player's decklists."""
    player_copies: dict[str, int] = {}
    for entry in collect_archetype_decklists(tournaments, player_archetypes, archetype_name):
        deck = entry.decklist
        copies = sum(c.quantity for c in deck.mainboard + deck.sideboard if c.card_name == card_name)
        player_copies[entry.player_id] = max(player_copies.get(entry.player_id, 0), copies)
    return player_copies


def _filter_archetype_players(
    player_archetypes: dict[str, str],
    archetype_name: str,
    included: set[str],
) -> dict[str, str]:
    """Drop the archetype's players that are not in `included`; keep everyone else."""
    return {
        player_id: archetype
        for player_id, archetype in player_archetypes.items()
        if archetype != archetype_name or player_id in included
    }


def _extract_row(
    tournaments: list[TournamentData],
    player_archetypes: dict[str, str],
    archetype_name: str,
    opponents: list[str],
    player_count: int,
    label: str,
) -> SplitRow:
    # Uncollapsed matrix so each opponent is visible; "Other" is summed by hand
    # from everything the baseline matrix did not name.
    report = build_matchup_matrix(tournaments, player_archetypes, MatrixOptions(exclude_mirrors=True))
    matrix = report.matrix
    row = SplitRow(label=label, player_count=player_count)

    if archetype_name not in matrix.archetypes:
        return row
    idx = matrix.archetypes.index(archetype_name)
    named = {o for o in opponents if o != OTHER_ARCHETYPE}

    for opponent in opponents:
        if opponent == OTHER_ARCHETYPE:
            other = MatchupCell()
            for j, name in enumerate(matrix.archetypes):
                if j == idx or name in named:
                    continue
                cell = matrix.cells[idx][j]
                other.wins += cell.wins
                other.losses += cell.losses
                other.draws += cell.draws
                other.intentional_draws += cell.intentional_draws
                other.total += cell.total
            if other.total > 0:
                other.winrate = other.wins / other.total
                row.cells[OTHER_ARCHETYPE] = other
        elif opponent in matrix.archetypes and opponent != archetype_name:
            row.cells[opponent] = matrix.cells[idx][matrix.archetypes.index(opponent)]

    stats = next((s for s in report.stats if s.name == archetype_name), None)
    if stats:
        row.total_matches = stats.total_matches
        row.overall_winrate = stats.overall_winrate if stats.total_matches > 0 else None
    return row


def split_by_card(
    tournaments: list[TournamentData],
    player_archetypes: dict[str, str],
    archetype_name: str,
    card_name: str,
    mode: str = "binary",
    threshold: int = 4,
    top_n: int = 0,
    min_metagame_share: float = 0.0,
) -> SplitResult:
    """
    Split an archetype's players by copies of a card.

    Args:
        mode: "binary" (threshold+ vs fewer) or "per-copy" (one group per copy count)
        threshold: Copy count separating the binary groups
        top_n, min_metagame_share: Other bucketing used to pick the opponent columns

    Returns:
        SplitResult with a baseline row (all players) and one row per group
    """
    if mode not in SPLIT_MODES:
        raise ValueError(f"Unknown split mode: {mode}")

    player_copies = _count_card_copies(tournaments, player_archetypes, archetype_name, card_name)

    base = build_matchup_matrix(
        tournaments, player_archetypes,
        MatrixOptions(exclude_mirrors=True, top_n=top_n, min_metagame_share=min_metagame_share),
    )
    opponents = [a for a in base.matrix.archetypes if a != archetype_name]

    baseline = _extract_row(
        tournaments, player_archetypes, archetype_name, opponents, len(player_copies), "All"
    )

    groups: list[tuple[str, set[str]]] = []
    if mode == "binary":
        above = {pid for pid, copies in player_copies.items() if copies >= threshold}
        below = set(player_copies) - above
        if above:
            groups.append((f"{threshold}+ copies", above))
        if below:
            groups.append((f"< {threshold} copies", below))
    else:
        for count in sorted(set(player_copies.values())):
            players = {pid for pid, copies in player_copies.items() if copies == count}
            groups.append(("1 copy" if count == 1 else f"{count} copies", players))

    group_rows = [
        _extract_row(
            tournaments,
            _filter_archetype_players(player_archetypes, archetype_name, players),
            archetype_name, opponents, len(players), label,
        )
        for label, players in groups
    ]

    return SplitResult(card_name=card_name, opponents=opponents, baseline_row=baseline, group_rows=group_rows)
