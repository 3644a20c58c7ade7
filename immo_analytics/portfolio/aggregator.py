"""
Portfolio aggregation: turns a list of ``PortfolioProperty`` into a
``PortfolioAnalysisData`` snapshot.

Every computation is a pure function over the input sequence and can be
tested on its own. ``analyze_portfolio()`` composes them without caching;
use ``portfolio.cache.PortfolioAnalyzer`` for the memoised entry point.

Degenerate input
----------------
An empty portfolio yields zero totals, empty breakdowns, ``low`` vacancy
risk and ``neutral`` price outlook. No function divides by the portfolio
size without checking it first. Missing ``monthly_rent`` / ``operating_costs``
contribute 0.

Price segments (first matching band wins)
-----------------------------------------
    Low    : [0, 500 000)
    Medium : [500 000, 1 500 000)
    High   : [1 500 000, inf)

Synergies (economies of scale, saturating, annualised x12)
----------------------------------------------------------
    management_savings     = sum_i 50 * min(0.15 * i, 0.5)
    maintenance_efficiency = sum_i size_i * 2.5 * min(0.1 * i, 0.4)
    renting_optimization   = sum_i rent_i * (100 * min(0.2 * i, 0.6)) / 100

``i`` is the 0-based position in the input order, so reordering the same
holdings changes the result.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from immo_analytics.exceptions import UnclassifiablePriceError
from immo_analytics.models.analysis import (
    Diversification,
    GeographicShare,
    PortfolioAnalysisData,
    PortfolioRisk,
    PriceSegmentShare,
    PropertyTypeShare,
    Synergies,
)
from immo_analytics.models.property import Property
from immo_analytics.taxonomy.property_taxonomy import PriceOutlook, RiskLevel

# Vacancy thresholds (percent, strict greater-than)
HIGH_VACANCY_THRESHOLD = 10.0
MEDIUM_VACANCY_THRESHOLD = 5.0

# ROI thresholds for the price outlook (percent, strict)
POSITIVE_ROI_THRESHOLD = 10.0
NEGATIVE_ROI_THRESHOLD = 5.0

MONTHS_PER_YEAR = 12


@dataclass(frozen=True)
class PriceSegment:
    """Half-open price band ``[lower, upper)`` in EUR."""

    label: str
    lower: float
    upper: float

    def contains(self, price: float) -> bool:
        return self.lower <= price < self.upper


PRICE_SEGMENTS: tuple[PriceSegment, ...] = (
    PriceSegment("Low",    0.0,         500_000.0),
    PriceSegment("Medium", 500_000.0,   1_500_000.0),
    PriceSegment("High",   1_500_000.0, math.inf),
)


# ── Totals ────────────────────────────────────────────────────────────────────

def total_investment(properties: Sequence[Property]) -> float:
    """Sum of purchase prices; 0 for an empty portfolio."""
    return sum((p.price for p in properties), 0.0)


def average_roi(properties: Sequence[Property]) -> float:
    """Mean ROI in percent; 0 for an empty portfolio."""
    if not properties:
        return 0.0
    return sum(p.roi for p in properties) / len(properties)


def monthly_income(properties: Sequence[Property]) -> float:
    """Sum of monthly rents; missing rent counts as 0."""
    return sum((p.monthly_rent or 0.0 for p in properties), 0.0)


def annual_rent(properties: Sequence[Property]) -> float:
    """Expected yearly rent across the portfolio."""
    return monthly_income(properties) * MONTHS_PER_YEAR


def total_operating_costs(properties: Sequence[Property]) -> float:
    """Sum over all five cost categories of every property."""
    return sum(
        (p.operating_costs.total for p in properties if p.operating_costs is not None),
        0.0,
    )


# ── Diversification ──────────────────────────────────────────────────────────

def classify_price_segment(price: float) -> str:
    """Return the label of the first price band containing ``price``.

    Raises:
        UnclassifiablePriceError: If no band matches (e.g. NaN or a negative
            price). Dropping the property would break the percentage
            invariant, so this is fatal.
    """
    for segment in PRICE_SEGMENTS:
        if segment.contains(price):
            return segment.label
    raise UnclassifiablePriceError(f"Price {price!r} matches no price segment.")


def _count_by(
    properties: Sequence[Property],
    key: Callable[[Property], str],
) -> list[tuple[str, int, float]]:
    """Group by ``key`` in first-seen order; return ``(key, count, percentage)``."""
    counts: dict[str, int] = {}
    for p in properties:
        k = key(p)
        counts[k] = counts.get(k, 0) + 1

    n = len(properties)
    return [(k, c, c / n * 100.0) for k, c in counts.items()]


def geographic_breakdown(properties: Sequence[Property]) -> tuple[GeographicShare, ...]:
    """Holdings per postal code (exact string match)."""
    return tuple(
        GeographicShare(postal_code=k, count=c, percentage=pct)
        for k, c, pct in _count_by(properties, lambda p: p.postal_code)
    )


def property_type_breakdown(properties: Sequence[Property]) -> tuple[PropertyTypeShare, ...]:
    """Holdings per property type (residential / commercial / mixed)."""
    return tuple(
        PropertyTypeShare(type=k, count=c, percentage=pct)
        for k, c, pct in _count_by(properties, lambda p: str(p.property_type))
    )


def price_segment_breakdown(properties: Sequence[Property]) -> tuple[PriceSegmentShare, ...]:
    """Holdings per price band."""
    return tuple(
        PriceSegmentShare(segment=k, count=c, percentage=pct)
        for k, c, pct in _count_by(properties, lambda p: classify_price_segment(p.price))
    )


# ── Risk ──────────────────────────────────────────────────────────────────────

def vacancy_risk_level(vacancy_rate: float) -> RiskLevel:
    """Vacancy band of a single rate: > 10 high, > 5 medium, else low."""
    if vacancy_rate > HIGH_VACANCY_THRESHOLD:
        return RiskLevel.HIGH
    if vacancy_rate > MEDIUM_VACANCY_THRESHOLD:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def assess_vacancy_risk(properties: Sequence[Property]) -> RiskLevel:
    """Highest vacancy band reached by ANY property."""
    return vacancy_risk_level(max((p.vacancy_rate for p in properties), default=0.0))


def market_saturation(properties: Sequence[Property]) -> float:
    """Mean vacancy rate in percent; 0 for an empty portfolio."""
    if not properties:
        return 0.0
    return sum(p.vacancy_rate for p in properties) / len(properties)


def assess_price_outlook(properties: Sequence[Property]) -> PriceOutlook:
    """Majority view on ROI: positive if more than half have roi > 10,
    else negative if more than half have roi < 5, else neutral.
    """
    if not properties:
        return PriceOutlook.NEUTRAL
    half = len(properties) / 2
    if sum(1 for p in properties if p.roi > POSITIVE_ROI_THRESHOLD) > half:
        return PriceOutlook.POSITIVE
    if sum(1 for p in properties if p.roi < NEGATIVE_ROI_THRESHOLD) > half:
        return PriceOutlook.NEGATIVE
    return PriceOutlook.NEUTRAL


def assess_portfolio_risk(properties: Sequence[Property]) -> PortfolioRisk:
    return PortfolioRisk(
        vacancy_risk=assess_vacancy_risk(properties),
        market_saturation=market_saturation(properties),
        price_outlook=assess_price_outlook(properties),
    )


def assess_property_risk(prop: Property) -> PortfolioRisk:
    """Risk panel for a single selected property.

    Same thresholds as the portfolio view, applied to one holding.
    """
    return assess_portfolio_risk([prop])


# ── Synergies ────────────────────────────────────────────────────────────────

def management_savings(properties: Sequence[Property]) -> float:
    """Annual management savings; each extra unit saves 15 % of 50 EUR, capped at 50 %."""
    base_cost = 50.0
    monthly = sum(
        (base_cost * min(0.15 * i, 0.5) for i, _ in enumerate(properties)),
        0.0,
    )
    return monthly * MONTHS_PER_YEAR


def maintenance_efficiency(properties: Sequence[Property]) -> float:
    """Annual maintenance savings at 2.5 EUR/m², 10 % per extra unit, capped at 40 %."""
    cost_per_sqm = 2.5
    monthly = sum(
        (p.size * cost_per_sqm * min(0.1 * i, 0.4) for i, p in enumerate(properties)),
        0.0,
    )
    return monthly * MONTHS_PER_YEAR


def renting_optimization(properties: Sequence[Property]) -> float:
    """Annual letting savings as a share of rent, 20 % per extra unit, capped at 60 %."""
    base_cost = 100.0
    monthly = 0.0
    for i, p in enumerate(properties):
        savings = base_cost * min(0.2 * i, 0.6)
        monthly += (p.monthly_rent or 0.0) * (savings / 100.0)
    return monthly * MONTHS_PER_YEAR


def portfolio_synergies(properties: Sequence[Property]) -> Synergies:
    return Synergies(
        management_savings=management_savings(properties),
        maintenance_efficiency=maintenance_efficiency(properties),
        renting_optimization=renting_optimization(properties),
    )


def estimate_property_synergies(prop: Property) -> Synergies:
    """Synergy estimate for a single property (detail panel).

    Base amounts (1000 / 500 / 750 EUR) scaled by size, vacancy, renovation
    need and ROI.
    """
    vacancy_factor = 1.0 - prop.vacancy_rate / 100.0
    return Synergies(
        management_savings=1000.0 * (1.0 + prop.size / 500.0) * vacancy_factor,
        maintenance_efficiency=500.0 * (1.0 + prop.size / 1000.0) * (1.0 - prop.renovation_need / 10.0),
        renting_optimization=750.0 * (1.0 + prop.roi / 100.0) * vacancy_factor,
    )


# ── Composition ──────────────────────────────────────────────────────────────

def analyze_portfolio(properties: Sequence[Property]) -> PortfolioAnalysisData:
    """Compute the full analysis snapshot. Pure; no caching.

    Args:
        properties: Portfolio entries in display order.

    Returns:
        Immutable ``PortfolioAnalysisData``.
    """
    return PortfolioAnalysisData(
        total_investment=total_investment(properties),
        average_roi=average_roi(properties),
        monthly_income=monthly_income(properties),
        operating_costs=total_operating_costs(properties),
        diversification=Diversification(
            geographic=geographic_breakdown(properties),
            property_types=property_type_breakdown(properties),
            price_segments=price_segment_breakdown(properties),
        ),
        risk_assessment=assess_portfolio_risk(properties),
        synergies=portfolio_synergies(properties),
    )
