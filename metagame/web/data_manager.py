"""
Data manager for caching and report building.
"""
import logging
import time
from pathlib import Path
from typing import Optional

from .. import settings
from ..analyzer.attribution import build_attribution_matrix
from ..analyzer.classifier import classify_tournaments
from ..analyzer.composition import CardCompositionResult, compute_card_composition
from ..analyzer.matchups import MatrixOptions, build_matchup_matrix, build_player_archetype_map
from ..analyzer.noka import aggregate_decks
from ..analyzer.splitter import SplitResult, split_by_card
from ..data.archetypes import load_archetype_config
from ..data.loader import load_tournaments
from ..models import (
    AggregatedDeck,
    ArchetypeConfig,
    AttributionMatrix,
    ClassificationResult,
    MatrixReport,
    TournamentData,
)
from ..utils.decklists import (
    EnrichedDecklist,
    collect_archetype_decklists,
    collect_raw_decklists,
    find_best_decklist,
)

logger = logging.getLogger(__name__)


class DataManager:
    """
    Loads tournaments and archetype definitions from disk and memoizes the
    classification, which every report depends on. Data is reloaded once
    the cache TTL expires.
    """
    _instance = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super(DataManager, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(
        self,
        tournaments_dir: Optional[Path] = None,
        archetypes_file: Optional[Path] = None,
        cache_ttl: int = settings.CACHE_TTL,
    ):
        if self._initialized:
            return

        self.tournaments_dir = Path(tournaments_dir or settings.TOURNAMENTS_DIR)
        self.archetypes_file = Path(archetypes_file or settings.ARCHETYPES_FILE)
        self._cache_ttl = cache_ttl
        self._last_loaded: float = 0
        self._tournaments: Optional[dict[int, TournamentData]] = None
        self._config: Optional[ArchetypeConfig] = None
        self._results: Optional[dict[int, list[ClassificationResult]]] = None
        self._player_archetypes: Optional[dict[str, str]] = None

        self._initialized = True

    @classmethod
    def reset(cls):
        """Drop the singleton (used when switching data directories)."""
        cls._instance = None

    def _ensure_loaded(self, force_refresh: bool = False):
        current_time = time.time()
        if (self._tournaments is None or force_refresh
                or current_time - self._last_loaded > self._cache_ttl):
            logger.info("Loading data from disk... (force: %s)", force_refresh)
            self._tournaments = load_tournaments(self.tournaments_dir)
            self._config = load_archetype_config(self.archetypes_file)
            self._results = None
            self._player_archetypes = None
            self._last_loaded = current_time

    def get_tournaments(self, force_refresh: bool = False) -> list[TournamentData]:
        self._ensure_loaded(force_refresh)
        return list(self._tournaments.values())

    def get_config(self) -> ArchetypeConfig:
        self._ensure_loaded()
        return self._config

    def get_classifications(self) -> dict[int, list[ClassificationResult]]:
        """Classification results per tournament ID."""
        self._ensure_loaded()
        if self._results is None:
            self._results = classify_tournaments(
                self.get_tournaments(),
                self._config.archetypes,
                k=settings.KNN_K,
                min_confidence=settings.MIN_CONFIDENCE,
            )
        return self._results

    def get_player_archetypes(self) -> dict[str, str]:
        """player ID -> archetype across all loaded tournaments."""
        results = self.get_classifications()
        if self._player_archetypes is None:
            mapping: dict[str, str] = {}
            for tournament in self.get_tournaments():
                mapping.update(build_player_archetype_map(tournament, results.get(tournament.meta.id, [])))
            self._player_archetypes = mapping
        return self._player_archetypes

    def matchup_report(self, options: Optional[MatrixOptions] = None) -> MatrixReport:
        return build_matchup_matrix(self.get_tournaments(), self.get_player_archetypes(), options)

    def aggregate(self, archetype: str, order: int = 1) -> AggregatedDeck:
        decks = collect_raw_decklists(self.get_tournaments(), self.get_player_archetypes(), archetype)
        return aggregate_decks(decks, order=order)

    def best_decklist(self, archetype: str) -> Optional[EnrichedDecklist]:
        """Best-placed decklist of an archetype, with its player and tournament."""
        enriched = collect_archetype_decklists(self.get_tournaments(), self.get_player_archetypes(), archetype)
        return find_best_decklist(enriched)

    def composition(self, archetype: str) -> CardCompositionResult:
        decks = collect_raw_decklists(self.get_tournaments(), self.get_player_archetypes(), archetype)
        return compute_card_composition(decks)

    def split(self, archetype: str, card_name: str, mode: str = "binary", threshold: int = 4,
              top_n: int = 0, min_metagame_share: float = 0.0) -> SplitResult:
        return split_by_card(
            self.get_tournaments(), self.get_player_archetypes(), archetype, card_name,
            mode=mode, threshold=threshold, top_n=top_n, min_metagame_share=min_metagame_share,
        )

    def attribution(self) -> Optional[AttributionMatrix]:
        return build_attribution_matrix(self.get_tournaments(), self.get_classifications())
