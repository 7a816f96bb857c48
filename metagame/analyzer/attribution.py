"""
Attribution analysis: classifier output versus self-reported archetypes.
"""
from collections import Counter, defaultdict
from typing import Optional

from ..models import AttributionMatrix, ClassificationResult, TournamentData
from ..settings import NO_REPORT


def _reported_name(reported: Optional[str]) -> str:
    if reported is None or not reported.strip():
        return NO_REPORT
    return reported.strip()


def build_attribution_matrix(
    tournaments: list[TournamentData],
    results_by_tournament: dict[int, list[ClassificationResult]],
) -> Optional[AttributionMatrix]:
    """
    Count decklists by (classified archetype, reported archetype).

    Args:
        tournaments: Tournaments providing the decklists
        results_by_tournament: tournament ID -> classification results

    Returns:
        AttributionMatrix with both axes sorted by total count descending,
        or None if no decklist has a classification result
    """
    counts: dict[str, Counter] = defaultdict(Counter)
    row_totals: Counter = Counter()
    col_totals: Counter = Counter()

    for tournament in tournaments:
        for result in results_by_tournament.get(tournament.meta.id, []):
            decklist = tournament.decklists.get(result.decklist_id)
            if decklist is None:
                continue
            reported = _reported_name(decklist.reported_archetype)
            counts[result.archetype][reported] += 1
            row_totals[result.archetype] += 1
            col_totals[reported] += 1

    grand_total = sum(row_totals.values())
    if grand_total == 0:
        return None

    classified = sorted(row_totals, key=lambda name: (-row_totals[name], name))
    reported_names = sorted(col_totals, key=lambda name: (-col_totals[name], name))

    cells = [[counts[row][col] for col in reported_names] for row in classified]
    return AttributionMatrix(
        classified_archetypes=classified,
        reported_archetypes=reported_names,
        cells=cells,
        row_totals=[row_totals[name] for name in classified],
        col_totals=[col_totals[name] for name in reported_names],
        grand_total=grand_total,
        max_count=max(max(row) for row in cells),
    )


def agreement_rate(matrix: Optional[AttributionMatrix]) -> float:
    """Share of decklists whose classified archetype equals the reported one."""
    if matrix is None or matrix.grand_total == 0:
        return 0.0
    agreed = 0
    for i, classified in enumerate(matrix.classified_archetypes):
        if classified in matrix.reported_archetypes:
            agreed += matrix.cells[i][matrix.reported_archetypes.index(classified)]
    return agreed / matrix.grand_total
