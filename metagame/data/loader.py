"""
Loading of scraped tournament data.

Each tournament is stored as ``<tournament id>.json`` in the scraper's
camelCase layout:

    {"meta": {...}, "players": {id: {...}}, "decklists": {id: {...}},
     "rounds": {id: {"name", "number", "isPlayoff", "matches": [...]}}}
"""
import json
import logging
import re
from pathlib import Path
from typing import Optional, Union

from ..exceptions import TournamentDataError
from ..models import (
    CardEntry,
    DecklistInfo,
    MatchResult,
    PlayerInfo,
    RoundInfo,
    TournamentData,
    TournamentMeta,
)

logger = logging.getLogger(__name__)

_FILE_ID = re.compile(r"^(\d+)$")


def _cards(raw: Optional[list]) -> list[CardEntry]:
    entries = []
    for card in raw or []:
        quantity = int(card.get("quantity", 0))
        if quantity <= 0:
            continue
        entries.append(CardEntry(card_name=card["cardName"], quantity=quantity))
    return entries


def _optional_id(value) -> Optional[str]:
    return None if value is None else str(value)


def _meta(raw: dict) -> TournamentMeta:
    formats = raw.get("formats")
    if formats is None:
        formats = [raw["format"]] if raw.get("format") else []
    return TournamentMeta(
        id=int(raw["id"]),
        name=raw.get("name", ""),
        date=raw.get("date", ""),
        formats=list(formats),
        url=raw.get("url", ""),
        fetched_at=raw.get("fetchedAt", ""),
        player_count=int(raw.get("playerCount", 0)),
        round_count=int(raw.get("roundCount", 0)),
    )


def _player(raw: dict) -> PlayerInfo:
    decklist_ids = raw.get("decklistIds")
    if decklist_ids is None:
        # Older files store a single decklist ID
        decklist_ids = [] if raw.get("decklistId") is None else [raw["decklistId"]]
    reported = raw.get("reportedArchetypes")
    if reported is None:
        reported = [raw["reportedArchetype"]] if raw.get("reportedArchetype") else []
    return PlayerInfo(
        name=raw.get("name", ""),
        username=raw.get("username", ""),
        rank=int(raw.get("rank", 0)),
        points=int(raw.get("points", 0)),
        match_record=raw.get("matchRecord", ""),
        decklist_ids=[str(d) for d in decklist_ids],
        reported_archetypes=list(reported),
    )


def _decklist(raw: dict) -> DecklistInfo:
    companion = raw.get("companion")
    if isinstance(companion, dict):
        companion = [companion]
    return DecklistInfo(
        player_id=str(raw.get("playerId", "")),
        mainboard=_cards(raw.get("mainboard")),
        sideboard=_cards(raw.get("sideboard")),
        companion=_cards(companion) if companion is not None else None,
        reported_archetype=raw.get("reportedArchetype"),
    )


def _round(raw: dict) -> RoundInfo:
    return RoundInfo(
        name=raw.get("name", ""),
        number=int(raw.get("number", 0)),
        is_playoff=bool(raw.get("isPlayoff", False)),
        matches=[
            MatchResult(
                player1_id=str(m["player1Id"]),
                player2_id=_optional_id(m.get("player2Id")),
                result=m.get("result", ""),
                winner_id=_optional_id(m.get("winnerId")),
            )
            for m in raw.get("matches", [])
        ],
    )


def tournament_from_dict(data: dict) -> TournamentData:
    """
    Convert a scraped tournament dictionary into TournamentData.

    Raises:
        TournamentDataError: If required fields are missing or malformed
    """
    try:
        return TournamentData(
            meta=_meta(data["meta"]),
            players={str(k): _player(v) for k, v in data.get("players", {}).items()},
            decklists={str(k): _decklist(v) for k, v in data.get("decklists", {}).items()},
            rounds={str(k): _round(v) for k, v in data.get("rounds", {}).items()},
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise TournamentDataError(f"Malformed tournament data: {e}") from e


def load_tournament(path: Union[str, Path]) -> TournamentData:
    """Load a single tournament JSON file."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise TournamentDataError("Tournament file not found", path=str(path)) from e
    except json.JSONDecodeError as e:
        raise TournamentDataError(f"Invalid JSON: {e}", path=str(path)) from e

    try:
        return tournament_from_dict(data)
    except TournamentDataError as e:
        e.details["path"] = str(path)
        raise


def load_tournaments(directory: Union[str, Path]) -> dict[int, TournamentData]:
    """
    Load every ``<id>.json`` file in a directory.

    Files that fail to load are logged and skipped so one broken scrape does
    not hide the rest of the data.

    Returns:
        Tournaments keyed by ID, in ascending ID order
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning("Tournament directory %s not found", directory)
        return {}

    tournaments: dict[int, TournamentData] = {}
    for path in sorted(directory.glob("*.json")):
        match = _FILE_ID.match(path.stem)
        if not match:
            continue
        try:
            tournaments[int(match.group(1))] = load_tournament(path)
        except TournamentDataError as e:
            logger.warning("Skipping %s: %s", path.name, e.message)

    logger.info("Loaded %d tournaments from %s", len(tournaments), directory)
    return dict(sorted(tournaments.items()))
