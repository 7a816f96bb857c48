"""
Data models for tournament metagame analysis.
"""
from dataclasses import dataclass, field
from typing import Optional

INTENTIONAL_DRAW_RESULT = "0-0-3"

# Sparse TF-IDF vector: (vocabulary index, weight) pairs with weight > 0
SparseVector = list[tuple[int, float]]


@dataclass
class CardEntry:
    """A number of copies of one card within one zone of a decklist."""
    card_name: str
    quantity: int


@dataclass
class DecklistInfo:
    """Represents a complete decklist submitted by a player."""
    player_id: str
    mainboard: list[CardEntry] = field(default_factory=list)
    sideboard: list[CardEntry] = field(default_factory=list)
    companion: Optional[list[CardEntry]] = None
    reported_archetype: Optional[str] = None

    @property
    def mainboard_size(self) -> int:
        return sum(c.quantity for c in self.mainboard)

    @property
    def sideboard_size(self) -> int:
        return sum(c.quantity for c in self.sideboard)


@dataclass
class SignatureCard:
    """A card whose copy count identifies an archetype."""
    name: str
    min_copies: Optional[int] = None
    exact_copies: Optional[int] = None

    def is_satisfied(self, quantity: int) -> bool:
        if self.exact_copies is not None:
            return quantity == self.exact_copies
        min_copies = self.min_copies if self.min_copies is not None else 1
        return quantity >= min_copies


@dataclass
class ArchetypeDefinition:
    """Named archetype with the signature cards that identify it."""
    name: str
    signature_cards: list[SignatureCard] = field(default_factory=list)
    strict_mode: bool = False  # only assignable by signature match, never by KNN


@dataclass
class ArchetypeConfig:
    """Parsed archetype definition file."""
    format: Optional[str] = None
    date: Optional[str] = None
    archetypes: list[ArchetypeDefinition] = field(default_factory=list)


@dataclass
class ClassificationResult:
    """Archetype assigned to a single decklist."""
    decklist_id: str
    archetype: str
    method: str  # signature, knn, unknown
    confidence: float  # 1.0 for signature, KNN confidence otherwise


@dataclass
class TfIdfCorpus:
    """Vocabulary and IDF weights built from a batch of decklists."""
    vocabulary: dict[str, int] = field(default_factory=dict)
    idf: list[float] = field(default_factory=list)
    document_count: int = 0


@dataclass
class LabeledPoint:
    """Training vector for the KNN classifier."""
    vector: SparseVector
    label: str


@dataclass
class KnnResult:
    """Winning label and the average similarity of its neighbors."""
    label: str
    confidence: float


@dataclass
class AggregatedDeck:
    """Consensus decklist for an archetype."""
    mainboard: list[CardEntry] = field(default_factory=list)
    sideboard: list[CardEntry] = field(default_factory=list)
    deck_count: int = 0


@dataclass
class TournamentMeta:
    """Tournament header information."""
    id: int
    name: str
    date: str = ""
    formats: list[str] = field(default_factory=list)
    url: str = ""
    fetched_at: str = ""
    player_count: int = 0
    round_count: int = 0


@dataclass
class PlayerInfo:
    """A registered player and their final standing."""
    name: str
    username: str = ""
    rank: int = 0
    points: int = 0
    match_record: str = ""
    decklist_ids: list[str] = field(default_factory=list)
    reported_archetypes: list[str] = field(default_factory=list)


@dataclass
class MatchResult:
    """Result of a single pairing.

    A missing ``player2_id`` is a bye, a missing ``winner_id`` between two
    players is a draw, and a ``0-0-3`` result is an intentional draw.
    """
    player1_id: str
    player2_id: Optional[str]
    result: str
    winner_id: Optional[str] = None

    @property
    def is_bye(self) -> bool:
        return not self.player2_id

    @property
    def is_intentional_draw(self) -> bool:
        return self.result == INTENTIONAL_DRAW_RESULT


@dataclass
class RoundInfo:
    """A round of the tournament and its pairings."""
    name: str
    number: int
    is_playoff: bool = False
    matches: list[MatchResult] = field(default_factory=list)


@dataclass
class TournamentData:
    """Everything known about one tournament."""
    meta: TournamentMeta
    players: dict[str, PlayerInfo] = field(default_factory=dict)
    decklists: dict[str, DecklistInfo] = field(default_factory=dict)
    rounds: dict[str, RoundInfo] = field(default_factory=dict)


@dataclass
class MatchupCell:
    """Results of one archetype (row) against another (column)."""
    wins: int = 0
    losses: int = 0
    draws: int = 0
    intentional_draws: int = 0  # excluded from total and winrate
    total: int = 0
    winrate: Optional[float] = None  # None if no matches


@dataclass
class MatchupMatrix:
    """Square matchup grid ordered by metagame share."""
    archetypes: list[str] = field(default_factory=list)
    cells: list[list[MatchupCell]] = field(default_factory=list)

    def cell(self, row: str, col: str) -> Optional[MatchupCell]:
        if row not in self.archetypes or col not in self.archetypes:
            return None
        return self.cells[self.archetypes.index(row)][self.archetypes.index(col)]


@dataclass
class ArchetypeStats:
    """Statistics for a deck archetype."""
    name: str
    metagame_share: float = 0.0
    overall_winrate: float = 0.0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    total_matches: int = 0
    player_count: int = 0
    byes: int = 0  # excluded from total_matches and winrate
    intentional_draws: int = 0  # excluded from total_matches and winrate


@dataclass
class MatrixReport:
    """Matchup matrix together with the per-archetype rollup."""
    matrix: MatchupMatrix
    stats: list[ArchetypeStats]


@dataclass
class AttributionMatrix:
    """Confusion matrix of classified versus self-reported archetypes."""
    classified_archetypes: list[str]  # rows, sorted by count desc
    reported_archetypes: list[str]  # columns, sorted by count desc
    cells: list[list[int]]
    row_totals: list[int]
    col_totals: list[int]
    grand_total: int
    max_count: int
