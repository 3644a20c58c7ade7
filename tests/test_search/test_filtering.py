"""
Tests for immo_analytics/search/filtering.py.

What we test
------------
region_matches():
  - Empty filters match everything.
  - Population range, state list and investment-score floor.
  - risk_level ceiling against the region's vacancy band, banded the
    same way as listings.
  - max_crime_rate / min_social_index risk filters.

property_matches():
  - Price range, listing types, population range.
  - Vacancy duration floor; unknown duration never matches.
  - Risk filters on hotspot level, urgency and default risk;
    a listing without a risk profile fails any profile filter.

Lookup helpers:
  - find_region() substring match, case-insensitive; empty query -> None.
  - properties_in_region() by city and optional listing type.
  - pick_region_property() picks only renovation listings; None if none.
"""

from __future__ import annotations

import random

import pytest

from immo_analytics.models.filters import NumericRange, RiskFilters, SearchFilters
from immo_analytics.models.property import RiskProfile
from immo_analytics.models.region import MarketData
from immo_analytics.search.filtering import (
    filter_properties,
    filter_regions,
    find_region,
    pick_region_property,
    properties_in_region,
    property_matches,
    region_matches,
    region_vacancy_risk,
)
from immo_analytics.taxonomy.property_taxonomy import ListingType, RiskLevel


class TestRegionMatches:
    def test_empty_filters(self, berlin_region):
        assert region_matches(berlin_region, SearchFilters())

    def test_population(self, berlin_region):
        assert region_matches(berlin_region, SearchFilters(population=NumericRange(min=1_000_000)))
        assert not region_matches(berlin_region, SearchFilters(population=NumericRange(max=1_000_000)))

    def test_state(self, berlin_region):
        assert region_matches(berlin_region, SearchFilters(state=["Berlin", "Hamburg"]))
        assert not region_matches(berlin_region, SearchFilters(state=["Bayern"]))

    def test_score_floor(self, berlin_region):
        # Berlin scores 6.865
        assert region_matches(berlin_region, SearchFilters(min_investment_score=6.8))
        assert not region_matches(berlin_region, SearchFilters(min_investment_score=7.0))

    def test_risk_level(self, make_region):
        risky = make_region(
            market_data=MarketData(
                vacancy_rate=7.0, average_price=2600, price_growth=5.8, expected_roi=11.8,
            )
        )
        assert region_vacancy_risk(risky) == RiskLevel.MEDIUM
        assert not region_matches(risky, SearchFilters(risk_level="low"))
        assert region_matches(risky, SearchFilters(risk_level="medium"))
        assert region_matches(risky, SearchFilters(risk_level="high"))

    @pytest.mark.parametrize("rate", [4.0, 7.0, 12.0])
    def test_region_and_listing_share_bands(self, make_region, make_property, rate):
        region = make_region(
            market_data=MarketData(
                vacancy_rate=rate, average_price=2600, price_growth=5.8, expected_roi=11.8,
            )
        )
        listing = make_property(vacancy_rate=rate)
        for level in ("low", "medium", "high"):
            filters = SearchFilters(risk_level=level)
            assert region_matches(region, filters) == property_matches(listing, filters)

    def test_crime_and_social(self, berlin_region):
        assert not region_matches(
            berlin_region, SearchFilters(risk_filters=RiskFilters(max_crime_rate=10_000))
        )
        assert region_matches(
            berlin_region, SearchFilters(risk_filters=RiskFilters(min_social_index=7.5))
        )
        assert not region_matches(
            berlin_region, SearchFilters(risk_filters=RiskFilters(min_social_index=8.0))
        )

    def test_filter_regions(self, make_region):
        regions = [make_region(id="a", state="Bayern"), make_region(id="b", state="Berlin")]
        assert [r.id for r in filter_regions(regions, SearchFilters(state=["Bayern"]))] == ["a"]


class TestPropertyMatches:
    def test_empty_filters(self, make_property):
        assert property_matches(make_property(), SearchFilters())

    def test_price(self, make_property):
        prop = make_property(price=750_000)
        assert property_matches(prop, SearchFilters(price=NumericRange(min=750_000, max=750_000)))
        assert not property_matches(prop, SearchFilters(price=NumericRange(max=700_000)))

    def test_listing_type(self, make_property):
        prop = make_property(type=ListingType.FORECLOSURE)
        assert property_matches(prop, SearchFilters(property_type=["foreclosure"]))
        assert not property_matches(prop, SearchFilters(property_type=["vacant", "renovation"]))

    def test_population(self, make_property):
        prop = make_property(population=500_000)
        assert not property_matches(prop, SearchFilters(population=NumericRange(min=1_000_000)))

    def test_vacancy_duration(self, make_property):
        floor = SearchFilters(min_vacancy_duration=6)
        assert property_matches(make_property(vacancy_duration=12), floor)
        assert not property_matches(make_property(vacancy_duration=3), floor)
        assert not property_matches(make_property(vacancy_duration=None), floor)

    def test_risk_level(self, make_property):
        prop = make_property(vacancy_rate=12)
        assert not property_matches(prop, SearchFilters(risk_level="medium"))
        assert property_matches(prop, SearchFilters(risk_level="high"))

    def test_risk_profile_filters(self, make_property):
        prop = make_property(
            risk_profile=RiskProfile(
                social_hotspot_level=2, renovation_urgency=RiskLevel.HIGH, default_risk=5.2,
            )
        )
        assert property_matches(prop, SearchFilters(risk_filters=RiskFilters(social_hotspot=2)))
        assert not property_matches(prop, SearchFilters(risk_filters=RiskFilters(social_hotspot=1)))
        assert property_matches(prop, SearchFilters(risk_filters=RiskFilters(renovation_urgency="high")))
        assert not property_matches(prop, SearchFilters(risk_filters=RiskFilters(renovation_urgency="low")))
        assert not property_matches(prop, SearchFilters(risk_filters=RiskFilters(max_default_risk=5.0)))

    def test_missing_profile(self, make_property):
        prop = make_property(risk_profile=None)
        assert not property_matches(prop, SearchFilters(risk_filters=RiskFilters(max_default_risk=9)))
        # Region-only risk filters do not need a listing profile.
        assert property_matches(prop, SearchFilters(risk_filters=RiskFilters(max_crime_rate=1)))

    def test_filter_properties(self, make_property):
        props = [make_property(id="a", price=100_000), make_property(id="b", price=900_000)]
        kept = filter_properties(props, SearchFilters(price=NumericRange(max=500_000)))
        assert [p.id for p in kept] == ["a"]


class TestLookupHelpers:
    def test_find_region(self, make_region):
        regions = [make_region(id="munich", name="München"), make_region(id="berlin", name="Berlin")]
        assert find_region(regions, "berl").id == "berlin"
        assert find_region(regions, "MÜN").id == "munich"
        assert find_region(regions, "Paris") is None
        assert find_region(regions, "   ") is None

    def test_properties_in_region(self, berlin_region, make_property):
        props = [
            make_property(id="a", city="Berlin", type=ListingType.RENOVATION),
            make_property(id="b", city="Berlin", type=ListingType.VACANT),
            make_property(id="c", city="Hamburg"),
        ]
        assert [p.id for p in properties_in_region(berlin_region, props)] == ["a", "b"]
        assert [p.id for p in properties_in_region(berlin_region, props, ListingType.VACANT)] == ["b"]

    def test_pick_region_property(self, berlin_region, make_property):
        props = [
            make_property(id="a", city="Berlin", type=ListingType.VACANT),
            make_property(id="b", city="Berlin", type=ListingType.RENOVATION),
        ]
        assert pick_region_property(berlin_region, props, random.Random(1)).id == "b"

    def test_pick_none(self, berlin_region, make_property):
        props = [make_property(city="Hamburg")]
        assert pick_region_property(berlin_region, props, random.Random(1)) is None
