"""
Matchup analysis between archetypes.

Builds the archetype-vs-archetype win-rate matrix from real pairings. Small
archetypes can be folded into an "Other" bucket (top-N cut and/or minimum
metagame share). Players without a classified decklist stay in their own
"Unknown" bucket, even when an "Other" bucket exists.
"""
import logging
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from ..models import (
    ArchetypeStats,
    ClassificationResult,
    MatchResult,
    MatchupCell,
    MatchupMatrix,
    MatrixReport,
    TournamentData,
)
from ..settings import OTHER_ARCHETYPE, UNKNOWN_ARCHETYPE

logger = logging.getLogger(__name__)


@dataclass
class MatrixOptions:
    """Options for build_matchup_matrix."""
    exclude_mirrors: bool = True
    min_metagame_share: float = 0.0  # archetypes below this share go to Other
    top_n: int = 0  # 0 = no limit
    exclude_playoffs: bool = False


def build_player_archetype_map(
    tournament: TournamentData,
    results: list[ClassificationResult],
) -> dict[str, str]:
    """
    Map each player to an archetype via their decklists.

    A player with several decklists (multi-format events) takes the first
    one that was classified as something other than Unknown.
    """
    deck_archetype = {r.decklist_id: r.archetype for r in results}

    player_archetype: dict[str, str] = {}
    for player_id, player in tournament.players.items():
        archetype = UNKNOWN_ARCHETYPE
        for deck_id in player.decklist_ids:
            found = deck_archetype.get(deck_id)
            if found and found != UNKNOWN_ARCHETYPE:
                archetype = found
                break
        player_archetype[player_id] = archetype

    return player_archetype


def _iter_matches(tournaments: list[TournamentData], exclude_playoffs: bool = False):
    for tournament in tournaments:
        rounds = sorted(tournament.rounds.values(), key=lambda r: r.number)
        for round_info in rounds:
            if exclude_playoffs and round_info.is_playoff:
                continue
            yield from round_info.matches


def _match_outcome(match: MatchResult) -> Optional[str]:
    """Outcome from player 1's point of view: win, loss, draw, or None if inconsistent."""
    if match.winner_id is None:
        return "draw"
    if match.winner_id == match.player1_id:
        return "win"
    if match.winner_id == match.player2_id:
        return "loss"
    return None


def _collapse_archetypes(
    player_counts: Counter,
    total_players: int,
    top_n: int,
    min_metagame_share: float,
) -> tuple[list[str], set[str]]:
    """Split raw archetypes into kept names (by player count) and the Other set."""
    ranked = sorted(
        (name for name in player_counts if name not in (UNKNOWN_ARCHETYPE, OTHER_ARCHETYPE)),
        key=lambda name: (-player_counts[name], name),
    )
    # A raw "Other" label always resolves to the Other bucket
    other: set[str] = {OTHER_ARCHETYPE} if player_counts.get(OTHER_ARCHETYPE, 0) > 0 else set()

    if top_n > 0 and len(ranked) > top_n:
        other.update(ranked[top_n:])
        ranked = ranked[:top_n]

    if min_metagame_share > 0 and total_players > 0:
        kept = []
        for name in ranked:
            if player_counts[name] / total_players < min_metagame_share:
                other.add(name)
            else:
                kept.append(name)
        ranked = kept

    return ranked, other


def build_matchup_matrix(
    tournaments: list[TournamentData],
    player_archetypes: dict[str, str],
    options: Optional[MatrixOptions] = None,
) -> MatrixReport:
    """
    Build a matchup matrix and per-archetype stats.

    Args:
        tournaments: Tournaments whose rounds are counted
        player_archetypes: player ID -> raw archetype name
        options: Mirror/playoff exclusion and Other bucketing

    Returns:
        MatrixReport with the matrix (rows = archetype playing, columns =
        opponent) and one ArchetypeStats per display archetype
    """
    options = options or MatrixOptions()

    player_counts = Counter(player_archetypes.values())
    total_players = len(player_archetypes)

    named, other_set = _collapse_archetypes(
        player_counts, total_players, options.top_n, options.min_metagame_share
    )

    display = list(named)
    if other_set:
        display.append(OTHER_ARCHETYPE)
    if player_counts.get(UNKNOWN_ARCHETYPE, 0) > 0:
        display.append(UNKNOWN_ARCHETYPE)

    def resolve(raw: str) -> str:
        return OTHER_ARCHETYPE if raw in other_set else raw

    index = {name: i for i, name in enumerate(display)}
    n = len(display)
    cells = [[MatchupCell() for _ in range(n)] for _ in range(n)]

    display_players: Counter = Counter(resolve(raw) for raw in player_archetypes.values())
    wins: Counter = Counter()
    losses: Counter = Counter()
    draws: Counter = Counter()
    byes: Counter = Counter()
    intentional_draws: Counter = Counter()
    skipped = 0

    for match in _iter_matches(tournaments, options.exclude_playoffs):
        raw1 = player_archetypes.get(match.player1_id)
        if raw1 is None:
            skipped += 1
            continue

        if match.is_bye:
            byes[resolve(raw1)] += 1
            continue

        raw2 = player_archetypes.get(match.player2_id)
        if raw2 is None:
            skipped += 1
            continue

        arch1 = resolve(raw1)
        arch2 = resolve(raw2)
        if options.exclude_mirrors and arch1 == arch2:
            continue

        i = index[arch1]
        j = index[arch2]

        # Mirrors that survive the filter land in the diagonal cell from both sides
        if match.is_intentional_draw:
            cells[i][j].intentional_draws += 1
            cells[j][i].intentional_draws += 1
            intentional_draws[arch1] += 1
            intentional_draws[arch2] += 1
            continue

        outcome = _match_outcome(match)
        if outcome is None:
            skipped += 1
            continue

        if outcome == "win":
            cells[i][j].wins += 1
            cells[j][i].losses += 1
            wins[arch1] += 1
            losses[arch2] += 1
        elif outcome == "loss":
            cells[i][j].losses += 1
            cells[j][i].wins += 1
            wins[arch2] += 1
            losses[arch1] += 1
        else:
            cells[i][j].draws += 1
            cells[j][i].draws += 1
            draws[arch1] += 1
            draws[arch2] += 1

    if skipped:
        logger.debug("Skipped %d matches with unknown players or winners", skipped)

    for row in cells:
        for cell in row:
            cell.total = cell.wins + cell.losses + cell.draws
            cell.winrate = cell.wins / cell.total if cell.total > 0 else None

    stats = [
        _make_stats(name, display_players[name], total_players,
                    wins[name], losses[name], draws[name], byes[name], intentional_draws[name])
        for name in display
    ]

    return MatrixReport(matrix=MatchupMatrix(archetypes=display, cells=cells), stats=stats)


def _make_stats(name, player_count, total_players, wins, losses, draws, byes=0, intentional_draws=0) -> ArchetypeStats:
    total_matches = wins + losses + draws
    return ArchetypeStats(
        name=name,
        metagame_share=player_count / total_players if total_players > 0 else 0.0,
        overall_winrate=wins / total_matches if total_matches > 0 else 0.0,
        wins=wins,
        losses=losses,
        draws=draws,
        total_matches=total_matches,
        player_count=player_count,
        byes=byes,
        intentional_draws=intentional_draws,
    )


def compute_metagame_stats(
    tournaments: list[TournamentData],
    player_archetypes: dict[str, str],
) -> list[ArchetypeStats]:
    """
    Per-archetype stats over every match, mirrors included, without any
    Other bucketing. Sorted by player count descending.
    """
    player_counts = Counter(player_archetypes.values())
    total_players = len(player_archetypes)

    tallies: dict[str, Counter] = defaultdict(Counter)
    for match in _iter_matches(tournaments):
        arch1 = player_archetypes.get(match.player1_id)
        if arch1 is None:
            continue
        if match.is_bye:
            tallies[arch1]["byes"] += 1
            continue

        arch2 = player_archetypes.get(match.player2_id)
        if arch2 is None:
            continue
        if match.is_intentional_draw:
            tallies[arch1]["intentional_draws"] += 1
            tallies[arch2]["intentional_draws"] += 1
            continue

        outcome = _match_outcome(match)
        if outcome == "win":
            tallies[arch1]["wins"] += 1
            tallies[arch2]["losses"] += 1
        elif outcome == "loss":
            tallies[arch2]["wins"] += 1
            tallies[arch1]["losses"] += 1
        elif outcome == "draw":
            tallies[arch1]["draws"] += 1
            tallies[arch2]["draws"] += 1

    names = sorted(player_counts, key=lambda name: (-player_counts[name], name))
    return [
        _make_stats(
            name, player_counts[name], total_players,
            tallies[name]["wins"], tallies[name]["losses"], tallies[name]["draws"],
            tallies[name]["byes"], tallies[name]["intentional_draws"],
        )
        for name in names
    ]


def matrix_to_dataframe(matrix: MatchupMatrix, value: str = "winrate") -> pd.DataFrame:
    """
    Convert a matchup matrix to a DataFrame (rows = archetype, columns = opponent).

    Args:
        matrix: Matchup matrix
        value: MatchupCell attribute to tabulate (winrate, wins, losses, draws,
            intentional_draws, total)
    """
    if value not in MatchupCell.__dataclass_fields__:
        raise ValueError(f"Unknown matchup cell field: {value}")

    data = [[getattr(cell, value) for cell in row] for row in matrix.cells]
    return pd.DataFrame(data, index=matrix.archetypes, columns=matrix.archetypes)


def stats_to_dataframe(stats: list[ArchetypeStats]) -> pd.DataFrame:
    """Tabulate archetype stats, one row per archetype."""
    columns = list(ArchetypeStats.__dataclass_fields__)
    return pd.DataFrame([[getattr(s, c) for c in columns] for s in stats], columns=columns)
