"""
Seed data loader: demo regions and listings from JSON.

Files
-----
  config/seed/regions.json     array of ``Region`` objects
  config/seed/properties.json  array of ``Property`` objects

Validation rules
----------------
- The top-level JSON value must be an array.
- Every record must validate against its Pydantic model.
- Duplicate ids within one file are rejected.

Any violation raises ``SeedDataError`` naming the file and record index.

Usage
-----
    from immo_analytics.data.seed_loader import load_properties, load_regions

    regions = load_regions(Path("config/seed/regions.json"))
    listings = load_properties(Path("config/seed/properties.json"))
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from immo_analytics.exceptions import SeedDataError
from immo_analytics.models.property import Property
from immo_analytics.models.region import Region

log = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)


def _read_records(path: Path) -> list[Any]:
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise SeedDataError(f"Seed file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise SeedDataError(f"Seed file {path} is not valid JSON: {exc}") from exc
    if not isinstance(raw, list):
        raise SeedDataError(
            f"Seed file {path} must contain a JSON array, got {type(raw).__name__}."
        )
    return raw


def _load_models(path: Path, model: type[_M], label: str) -> list[_M]:
    log.info("Loading %s seed data from %s", label, path)
    records = _read_records(path)

    items: list[_M] = []
    seen_ids: set[str] = set()
    for i, rec in enumerate(records):
        try:
            item = model.model_validate(rec)
        except ValidationError as exc:
            raise SeedDataError(
                f"Invalid {label} at index {i} in {path}: {exc}"
            ) from exc
        item_id = getattr(item, "id")
        if item_id in seen_ids:
            raise SeedDataError(f"Duplicate {label} id '{item_id}' at index {i} in {path}.")
        seen_ids.add(item_id)
        items.append(item)

    log.info("Loaded %d %s record(s).", len(items), label)
    return items


def load_regions(path: Path) -> list[Region]:
    """Load and validate regions. Raises ``SeedDataError`` on bad input."""
    return _load_models(path, Region, "region")


def load_properties(path: Path) -> list[Property]:
    """Load and validate listings. Raises ``SeedDataError`` on bad input."""
    return _load_models(path, Property, "property")
