"""
Shared pytest fixtures for the immo-analytics test suite.

Provides:
  - ``in_memory_db``: A fresh in-memory SQLite connection with the schema
    applied. Created anew for each test that requests it.
  - ``make_property`` / ``make_portfolio_property``: factories with sensible
    defaults so tests only spell out the fields they care about.
  - Sample domain objects (the Berlin/Hamburg portfolio pair, a Berlin region).
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Any, Callable, Generator

import pytest

from immo_analytics.db.schema import apply_schema
from immo_analytics.models.property import (
    OperatingCosts,
    PortfolioProperty,
    Property,
    RiskProfile,
)
from immo_analytics.models.region import (
    LocalVacancy,
    MarketData,
    Region,
    RiskAssessment,
    TrendPoint,
)
from immo_analytics.taxonomy.property_taxonomy import (
    ListingType,
    PortfolioStatus,
    PropertyType,
    RiskLevel,
)

FIXED_TS = datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


# ── Database fixture ──────────────────────────────────────────────────────────

@pytest.fixture
def in_memory_db() -> Generator[sqlite3.Connection, None, None]:
    """Yield a fresh in-memory SQLite connection with the schema applied."""
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    apply_schema(conn)
    yield conn
    conn.close()


# ── Property factories ────────────────────────────────────────────────────────

def _property_kwargs(**overrides: Any) -> dict[str, Any]:
    base: dict[str, Any] = dict(
        id="p1",
        type=ListingType.RENOVATION,
        title="Test listing",
        location="Mitte",
        city="Berlin",
        postal_code="10115",
        property_type=PropertyType.RESIDENTIAL,
        price=750_000.0,
        roi=9.0,
        size=200.0,
        population=3_700_000,
        vacancy_rate=2.0,
        renovation_need=5.0,
        monthly_rent=3_000.0,
    )
    base.update(overrides)
    return base


@pytest.fixture
def make_property() -> Callable[..., Property]:
    """Factory for ``Property`` with overridable defaults."""

    def _make(**overrides: Any) -> Property:
        return Property(**_property_kwargs(**overrides))

    return _make


@pytest.fixture
def make_portfolio_property() -> Callable[..., PortfolioProperty]:
    """Factory for ``PortfolioProperty`` (status active, fixed ``added_at``)."""

    def _make(**overrides: Any) -> PortfolioProperty:
        overrides.setdefault("added_at", FIXED_TS)
        overrides.setdefault("status", PortfolioStatus.ACTIVE)
        return PortfolioProperty(**_property_kwargs(**overrides))

    return _make


@pytest.fixture
def berlin_townhouse(make_portfolio_property) -> PortfolioProperty:
    """Holding 1 of the reference scenario: 1.2 M EUR, roi 12.5, 10405."""
    return make_portfolio_property(
        id="1",
        title="Historic townhouse",
        location="Prenzlauer Berg",
        city="Berlin",
        postal_code="10405",
        property_type=PropertyType.RESIDENTIAL,
        price=1_200_000.0,
        roi=12.5,
        size=450.0,
        vacancy_rate=2.0,
        renovation_need=8.0,
        monthly_rent=8_500.0,
        operating_costs=OperatingCosts(
            maintenance=1200, management=800, insurance=400, tax=600, utilities=1500,
        ),
        risk_profile=RiskProfile(
            social_hotspot_level=1,
            renovation_urgency=RiskLevel.HIGH,
            default_risk=5.2,
        ),
    )


@pytest.fixture
def hamburg_office(make_portfolio_property) -> PortfolioProperty:
    """Holding 2 of the reference scenario: 2.8 M EUR, roi 15.2, 20457."""
    return make_portfolio_property(
        id="2",
        type=ListingType.VACANT,
        title="Modern office building",
        location="HafenCity",
        city="Hamburg",
        postal_code="20457",
        property_type=PropertyType.COMMERCIAL,
        price=2_800_000.0,
        roi=15.2,
        size=800.0,
        population=1_800_000,
        vacancy_rate=7.0,
        renovation_need=4.0,
        monthly_rent=18_000.0,
        operating_costs=OperatingCosts(
            maintenance=2200, management=1500, insurance=800, tax=1200, utilities=3500,
        ),
        risk_profile=RiskProfile(
            social_hotspot_level=1,
            renovation_urgency=RiskLevel.LOW,
            default_risk=3.5,
        ),
    )


@pytest.fixture
def reference_portfolio(berlin_townhouse, hamburg_office) -> list[PortfolioProperty]:
    return [berlin_townhouse, hamburg_office]


# ── Region fixtures ───────────────────────────────────────────────────────────

def _region_kwargs(**overrides: Any) -> dict[str, Any]:
    base: dict[str, Any] = dict(
        id="berlin",
        name="Berlin",
        state="Berlin",
        population=3_669_495,
        coordinates=(13.404954, 52.520008),
        market_data=MarketData(
            vacancy_rate=1.8,
            average_price=4500,
            price_growth=8.2,
            expected_roi=12.5,
            infrastructure_score=8.5,
        ),
        trends=[
            TrendPoint(date="2024-01", price=4210),
            TrendPoint(date="2024-04", price=4380),
            TrendPoint(date="2025-03", forecast=4870),
        ],
        risk_assessment=RiskAssessment(
            social_index=7.5,
            crime_rate=12_500,
            economic_stability=8.2,
            local_vacancy=LocalVacancy(radius_500m=2.4),
        ),
    )
    base.update(overrides)
    return base


@pytest.fixture
def make_region() -> Callable[..., Region]:
    """Factory for ``Region``; defaults to Berlin."""

    def _make(**overrides: Any) -> Region:
        return Region(**_region_kwargs(**overrides))

    return _make


@pytest.fixture
def berlin_region(make_region) -> Region:
    return make_region()
