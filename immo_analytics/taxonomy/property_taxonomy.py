"""
Property and portfolio taxonomy for the real-estate investment dashboard.

Orthogonal dimensions describe every listing and portfolio entry:
  - ``ListingType``     — the *why it is on the market*: renovation, vacant, foreclosure.
  - ``PropertyType``    — the *use*: residential, commercial, mixed.
  - ``PortfolioStatus`` — the *where in the user's workflow*: watchlist, active, archived.

Derived classifications produced by the analytics core:
  - ``RiskLevel``            — low / medium / high (vacancy risk, risk filters).
  - ``PriceOutlook``         — positive / neutral / negative.
  - ``ScoreTier``            — investment score colour band on the map.
  - ``RecommendationAction`` — sell / buy / hold / review.

Usage example::

    from immo_analytics.taxonomy.property_taxonomy import PropertyType, ScoreTier

    kind = PropertyType.COMMERCIAL
    tier = ScoreTier.HIGH

This module has NO imports from any other ``immo_analytics`` package.
"""

from enum import StrEnum


class ListingType(StrEnum):
    """Why a property is available for investment."""

    RENOVATION = "renovation"
    """Building in need of refurbishment; the main focus of the dashboard."""

    VACANT = "vacant"
    """Unoccupied building available for purchase or re-letting."""

    FORECLOSURE = "foreclosure"
    """Compulsory auction (Zwangsversteigerung)."""


class PropertyType(StrEnum):
    """Primary use of a property; drives the property-type breakdown."""

    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    MIXED = "mixed"


class PortfolioStatus(StrEnum):
    """Lifecycle state of a portfolio entry. Part of the analysis cache key."""

    WATCHLIST = "watchlist"
    ACTIVE = "active"
    ARCHIVED = "archived"


class RiskLevel(StrEnum):
    """Three-step risk scale used for vacancy risk and risk filters."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PriceOutlook(StrEnum):
    """Expected price development derived from portfolio ROI distribution."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class ScoreTier(StrEnum):
    """Investment score colour band.

    Boundaries are inclusive at the lower bound:
      - LOW    : score < 4
      - MEDIUM : 4 <= score < 7
      - HIGH   : score >= 7
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def color(self) -> str:
        """Hex colour used by map markers and the heatmap legend."""
        return _TIER_COLORS[self]


_TIER_COLORS: dict[ScoreTier, str] = {
    ScoreTier.LOW:    "#ef4444",   # red
    ScoreTier.MEDIUM: "#eab308",   # yellow
    ScoreTier.HIGH:   "#22c55e",   # green
}


class RecommendationAction(StrEnum):
    """Advisory signal emitted by the recommendation estimator."""

    SELL = "sell"
    BUY = "buy"
    HOLD = "hold"
    REVIEW = "review"


class RenovationStatus(StrEnum):
    """Regional renovation backlog classification."""

    NONE = "none"
    MINOR = "minor"
    MAJOR = "major"
    CRITICAL = "critical"


class VacancyTrend(StrEnum):
    """Direction of local vacancy within a 500 m radius."""

    INCREASING = "increasing"
    STABLE = "stable"
    DECREASING = "decreasing"


class DevelopmentZoneStatus(StrEnum):
    """State of a municipal development zone."""

    ACTIVE = "active"
    PLANNED = "planned"
    NONE = "none"


class PortfolioEventType(StrEnum):
    """Kind of portfolio change announced on the event bus."""

    ADD = "add"
    REMOVE = "remove"
    UPDATE = "update"
