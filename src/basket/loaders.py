"""
JSON readers for the eligibility table and basket item lists.

Eligibility file: ``{"item": ["delivery", ...], ...}``
Items file:       ``["item", ...]``

Malformed content is a load-time ConfigurationError; nothing here knows
about solving.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from src.basket.catalog import EligibilityTable
from src.basket.errors import ConfigurationError

logger = logging.getLogger(__name__)


def _read_json(path: Path) -> object:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Cannot read {path}: {exc}") from exc


def parse_eligibility(raw: object, source: str = "<memory>") -> EligibilityTable:
    """Validate a decoded eligibility document and build the table."""
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{source}: eligibility must be a JSON object")

    for item, deliveries in raw.items():
        if not isinstance(deliveries, list):
            raise ConfigurationError(f"{source}: deliveries for {item!r} must be a list")
        for delivery in deliveries:
            if not isinstance(delivery, str):
                raise ConfigurationError(
                    f"{source}: delivery {delivery!r} for {item!r} must be a string"
                )
        if not deliveries:
            # Kept so the splitter can report EmptyEligibleSet for this item.
            logger.warning("%s: item %r has no eligible delivery types", source, item)

    return EligibilityTable.from_mapping(raw)


def load_eligibility(path: str | Path) -> EligibilityTable:
    """Read an eligibility table from a JSON file."""
    path = Path(path)
    table = parse_eligibility(_read_json(path), source=str(path))
    logger.debug("Loaded %d eligibility entries from %s", len(table), path)
    return table


def parse_basket(raw: object, source: str = "<memory>") -> list[str]:
    """Validate a decoded item list."""
    if not isinstance(raw, list):
        raise ConfigurationError(f"{source}: items must be a JSON array")
    for item in raw:
        if not isinstance(item, str):
            raise ConfigurationError(f"{source}: item {item!r} must be a string")
    return list(raw)


def load_basket(path: str | Path) -> list[str]:
    """Read a basket (ordered item list) from a JSON file."""
    path = Path(path)
    return parse_basket(_read_json(path), source=str(path))
