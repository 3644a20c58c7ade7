"""
Tests for immo_analytics/data/seed_loader.py.

What we test
------------
Shipped seed files:
  - config/seed/regions.json and properties.json load and validate.
  - The Berlin region scores 6.865 with default weights.

Error handling (all raise SeedDataError):
  - Missing file, invalid JSON, non-array top level.
  - Record failing model validation (message names the index).
  - Duplicate ids.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from immo_analytics.data.seed_loader import load_properties, load_regions
from immo_analytics.exceptions import SeedDataError
from immo_analytics.scoring.investment_score import compute_investment_score
from immo_analytics.taxonomy.property_taxonomy import ListingType

_SEED_DIR = Path(__file__).resolve().parents[2] / "config" / "seed"


def _write(tmp_path: Path, payload) -> Path:
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestShippedSeedData:
    def test_regions_load(self):
        regions = load_regions(_SEED_DIR / "regions.json")
        ids = [r.id for r in regions]
        assert "berlin" in ids
        assert len(ids) == len(set(ids))

    def test_berlin_reference_score(self):
        berlin = next(r for r in load_regions(_SEED_DIR / "regions.json") if r.id == "berlin")
        assert compute_investment_score(berlin.market_data) == pytest.approx(6.865)
        assert berlin.forecast_trends()

    def test_properties_load(self):
        props = load_properties(_SEED_DIR / "properties.json")
        by_id = {p.id: p for p in props}
        assert by_id["1"].price == 1_200_000
        assert by_id["2"].type == ListingType.VACANT
        assert by_id["1"].operating_costs.total == pytest.approx(4500)


class TestSeedErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(SeedDataError, match="not found"):
            load_regions(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(SeedDataError, match="not valid JSON"):
            load_properties(path)

    def test_not_an_array(self, tmp_path):
        with pytest.raises(SeedDataError, match="JSON array"):
            load_properties(_write(tmp_path, {"id": "1"}))

    def test_invalid_record(self, tmp_path, make_property):
        good = make_property(id="a").model_dump(mode="json")
        bad = {**good, "id": "b", "price": -5}
        with pytest.raises(SeedDataError, match="index 1"):
            load_properties(_write(tmp_path, [good, bad]))

    def test_duplicate_ids(self, tmp_path, make_property):
        rec = make_property(id="dup").model_dump(mode="json")
        with pytest.raises(SeedDataError, match="Duplicate property id 'dup'"):
            load_properties(_write(tmp_path, [rec, rec]))
