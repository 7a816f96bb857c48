"""
Card name normalization.

Decklists scraped from different sources disagree on quote characters and on
how double-faced cards are written ("Front // Back", "Front//Back"). Signature
matching and image lookups go through these helpers so both spellings resolve
to the same card.
"""
import re
from urllib.parse import quote

SPLIT_SEPARATOR = " // "
_SPLIT_PATTERN = re.compile(r"\s*//\s*")
_SINGLE_QUOTES = re.compile("[‘’‚]")
_DOUBLE_QUOTES = re.compile("[“”„]")

SCRYFALL_IMAGE_URL = "https://api.scryfall.com/cards/named?format=image&version={version}&exact={name}"
IMAGE_VERSIONS = ("normal", "small", "large", "art_crop", "border_crop")


def normalize_card_name(name: str) -> str:
    """
    Normalize a card name for consistent matching.

    - Trims whitespace
    - Curly quotes become straight quotes
    - Spacing around the // separator becomes exactly " // "
    """
    normalized = name.strip()
    normalized = _SINGLE_QUOTES.sub("'", normalized)
    normalized = _DOUBLE_QUOTES.sub('"', normalized)
    return _SPLIT_PATTERN.sub(SPLIT_SEPARATOR, normalized)


def get_front_face(name: str) -> str:
    """Return the front face of a double-faced or split card."""
    return normalize_card_name(name).split(SPLIT_SEPARATOR, 1)[0]


def scryfall_image_url(card_name: str, version: str = "normal") -> str:
    """Build a Scryfall image URL, using the front face for DFCs."""
    if version not in IMAGE_VERSIONS:
        raise ValueError(f"Unknown image version: {version}")
    return SCRYFALL_IMAGE_URL.format(version=version, name=quote(get_front_face(card_name), safe=""))
