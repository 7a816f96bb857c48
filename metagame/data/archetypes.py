"""
Archetype definition files (YAML).

    format: Standard
    date: 2026-02-01
    archetypes:
      - name: Mono Red
        signatureCards:
          - name: Lightning Bolt
            minCopies: 4
      - name: Lotus Combo
        strictMode: true
        signatureCards:
          - name: Lotus Field
            exactCopies: 4
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

import yaml

from ..exceptions import ArchetypeConfigError
from ..models import ArchetypeConfig, ArchetypeDefinition, SignatureCard

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    archetype_count: int = 0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _definition(raw: dict) -> ArchetypeDefinition:
    return ArchetypeDefinition(
        name=raw["name"],
        signature_cards=[
            SignatureCard(
                name=card["name"],
                min_copies=card.get("minCopies"),
                exact_copies=card.get("exactCopies"),
            )
            for card in raw.get("signatureCards") or []
        ],
        strict_mode=bool(raw.get("strictMode", False)),
    )


def parse_archetype_config(yaml_content: str) -> ArchetypeConfig:
    """Parse archetype YAML without validating it."""
    data = yaml.safe_load(yaml_content) or {}
    return ArchetypeConfig(
        format=data.get("format"),
        date=str(data["date"]) if data.get("date") is not None else None,
        archetypes=[_definition(a) for a in data.get("archetypes") or []],
    )


def parse_archetype_yaml(yaml_content: str) -> list[ArchetypeDefinition]:
    """Parse archetype YAML into definitions (empty if there are none)."""
    return parse_archetype_config(yaml_content).archetypes


def validate_archetype_yaml(yaml_content: str) -> ValidationResult:
    """
    Validate archetype YAML, collecting every error and warning.

    Errors make the file unusable; warnings flag suspicious but loadable
    content (missing header fields, duplicate names, cards without a copy
    constraint).
    """
    errors: list[str] = []
    warnings: list[str] = []

    try:
        data = yaml.safe_load(yaml_content)
    except yaml.YAMLError as e:
        return ValidationResult(ok=False, errors=[f"YAML syntax error: {e}"])

    if not isinstance(data, dict):
        return ValidationResult(ok=False, errors=["YAML must be an object"])

    if not data.get("format"):
        warnings.append('Missing "format" field')
    if not data.get("date"):
        warnings.append('Missing "date" field')

    archetypes = data.get("archetypes")
    if not isinstance(archetypes, list):
        return ValidationResult(ok=False, errors=['"archetypes" must be an array'], warnings=warnings)
    if not archetypes:
        return ValidationResult(ok=False, errors=['"archetypes" array is empty'], warnings=warnings)

    seen_names = set()
    for i, arch in enumerate(archetypes):
        prefix = f"archetypes[{i}]"
        if not isinstance(arch, dict):
            errors.append(f"{prefix}: must be an object")
            continue

        name = arch.get("name")
        if not name or not isinstance(name, str):
            errors.append(f'{prefix}: missing or invalid "name"')
        else:
            if name in seen_names:
                warnings.append(f'Duplicate archetype name: "{name}"')
            seen_names.add(name)

        if "strictMode" in arch and not isinstance(arch["strictMode"], bool):
            errors.append(f'{prefix} ({name or "?"}): "strictMode" must be a boolean')

        cards = arch.get("signatureCards")
        if not isinstance(cards, list):
            errors.append(f'{prefix} ({name or "?"}): "signatureCards" must be an array')
            continue

        for j, card in enumerate(cards):
            card_prefix = f"{prefix}.signatureCards[{j}]"
            if not isinstance(card, dict):
                errors.append(f"{card_prefix}: must be an object")
                continue

            card_name = card.get("name")
            if not card_name or not isinstance(card_name, str):
                errors.append(f'{card_prefix}: missing or invalid "name"')

            has_min = card.get("minCopies") is not None
            has_exact = card.get("exactCopies") is not None
            if has_min and has_exact:
                errors.append(f"{card_prefix} ({card_name or '?'}): only one of minCopies or exactCopies may be set")
            elif not has_min and not has_exact:
                warnings.append(
                    f"{card_prefix} ({card_name or '?'}): no minCopies or exactCopies (defaults to minCopies: 1)"
                )

            for key in ("minCopies", "exactCopies"):
                value = card.get(key)
                if value is not None and (not isinstance(value, int) or isinstance(value, bool) or value < 0):
                    errors.append(f'{card_prefix} ({card_name or "?"}): "{key}" must be a non-negative integer')

    return ValidationResult(ok=not errors, archetype_count=len(archetypes), errors=errors, warnings=warnings)


def load_archetype_config(path: Union[str, Path]) -> ArchetypeConfig:
    """
    Read, validate and parse an archetype definition file.

    Raises:
        ArchetypeConfigError: If the file is missing or fails validation
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ArchetypeConfigError(f"Archetype file not found: {path}") from e

    result = validate_archetype_yaml(content)
    for warning in result.warnings:
        logger.warning("%s: %s", path.name, warning)
    if not result.ok:
        raise ArchetypeConfigError(f"Invalid archetype file: {path}", errors=result.errors)

    config = parse_archetype_config(content)
    logger.info("Loaded %d archetype definitions from %s", len(config.archetypes), path)
    return config
