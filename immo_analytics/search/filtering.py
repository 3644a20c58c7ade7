"""
Search filter application for regions and listings.

A ``SearchFilters`` dimension that is left unset never excludes anything.
Dimensions that reference data a record does not carry (e.g. a vacancy
duration floor on a listing without ``vacancy_duration``) exclude the record:
an unknown value cannot be shown to satisfy the constraint.

Region dimensions:  population, state, min_investment_score, risk_level,
                    risk_filters.max_crime_rate, risk_filters.min_social_index
Listing dimensions: population, price, property_type, min_vacancy_duration,
                    risk_level, risk_filters.social_hotspot,
                    risk_filters.renovation_urgency, risk_filters.max_default_risk
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from typing import Optional

from immo_analytics.models.filters import SearchFilters
from immo_analytics.models.property import Property
from immo_analytics.models.region import Region
from immo_analytics.portfolio.aggregator import vacancy_risk_level
from immo_analytics.scoring.investment_score import (
    DEFAULT_WEIGHTS,
    ScoreWeights,
    compute_investment_score,
)
from immo_analytics.taxonomy.property_taxonomy import ListingType, RiskLevel

logger = logging.getLogger(__name__)

_RISK_ORDER: dict[RiskLevel, int] = {
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.HIGH: 2,
}


def _within_risk(actual: RiskLevel, accepted: Optional[RiskLevel]) -> bool:
    return accepted is None or _RISK_ORDER[actual] <= _RISK_ORDER[accepted]


def region_vacancy_risk(region: Region) -> RiskLevel:
    """Vacancy risk of a region using the portfolio thresholds."""
    return vacancy_risk_level(region.market_data.vacancy_rate)


def region_matches(
    region:  Region,
    filters: SearchFilters,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> bool:
    """Return ``True`` if ``region`` satisfies every set region dimension."""
    if not filters.population.contains(region.population):
        return False
    if filters.state and region.state not in filters.state:
        return False
    if filters.min_investment_score is not None:
        if compute_investment_score(region.market_data, weights) < filters.min_investment_score:
            return False
    if not _within_risk(region_vacancy_risk(region), filters.risk_level):
        return False

    rf = filters.risk_filters
    if rf is not None:
        risk = region.risk_assessment
        if rf.max_crime_rate is not None and risk.crime_rate > rf.max_crime_rate:
            return False
        if rf.min_social_index is not None and risk.social_index < rf.min_social_index:
            return False
    return True


def property_matches(prop: Property, filters: SearchFilters) -> bool:
    """Return ``True`` if ``prop`` satisfies every set listing dimension."""
    if not filters.price.contains(prop.price):
        return False
    if not filters.population.contains(prop.population):
        return False
    if filters.property_type and prop.type not in filters.property_type:
        return False
    if filters.min_vacancy_duration is not None:
        if prop.vacancy_duration is None or prop.vacancy_duration < filters.min_vacancy_duration:
            return False
    if not _within_risk(vacancy_risk_level(prop.vacancy_rate), filters.risk_level):
        return False

    rf = filters.risk_filters
    if rf is None:
        return True
    needs_profile = (
        rf.social_hotspot is not None
        or rf.renovation_urgency is not None
        or rf.max_default_risk is not None
    )
    if not needs_profile:
        return True
    profile = prop.risk_profile
    if profile is None:
        return False
    if rf.social_hotspot is not None and profile.social_hotspot_level > rf.social_hotspot:
        return False
    if rf.renovation_urgency is not None and profile.renovation_urgency != rf.renovation_urgency:
        return False
    if rf.max_default_risk is not None and profile.default_risk > rf.max_default_risk:
        return False
    return True


def filter_regions(
    regions: Sequence[Region],
    filters: SearchFilters,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> list[Region]:
    matched = [r for r in regions if region_matches(r, filters, weights)]
    logger.debug("Region filter kept %d of %d", len(matched), len(regions))
    return matched


def filter_properties(properties: Sequence[Property], filters: SearchFilters) -> list[Property]:
    matched = [p for p in properties if property_matches(p, filters)]
    logger.debug("Listing filter kept %d of %d", len(matched), len(properties))
    return matched


def find_region(regions: Sequence[Region], query: str) -> Optional[Region]:
    """First region whose name contains ``query`` (case-insensitive)."""
    needle = query.strip().lower()
    if not needle:
        return None
    return next((r for r in regions if needle in r.name.lower()), None)


def properties_in_region(
    region:       Region,
    properties:   Sequence[Property],
    listing_type: Optional[ListingType] = None,
) -> list[Property]:
    """Listings located in ``region`` (matched by city name)."""
    return [
        p for p in properties
        if p.city == region.name and (listing_type is None or p.type == listing_type)
    ]


def pick_region_property(
    region:     Region,
    properties: Sequence[Property],
    rng:        random.Random,
) -> Optional[Property]:
    """Random renovation listing in ``region`` for the map info window, or ``None``."""
    candidates = properties_in_region(region, properties, ListingType.RENOVATION)
    if not candidates:
        return None
    return rng.choice(candidates)
