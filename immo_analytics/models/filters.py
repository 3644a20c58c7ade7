"""
Search filter models — a closed record of every recognised filter dimension.

Unknown keys are rejected (``extra="forbid"``) so a misspelt dimension fails
loudly instead of being silently ignored. Every dimension is optional; an
empty ``SearchFilters()`` matches everything.

``FilterPreset`` wraps a filter set with a name and a last-used timestamp;
the most recent presets are persisted by ``preferences.store``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from immo_analytics.taxonomy.property_taxonomy import ListingType, RiskLevel


class NumericRange(BaseModel):
    """Inclusive ``[min, max]`` range; either bound may be omitted."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    min: Optional[float] = None
    max: Optional[float] = None

    @model_validator(mode="after")
    def validate_bounds(self) -> "NumericRange":
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"min ({self.min}) must be <= max ({self.max}).")
        return self

    def contains(self, value: float) -> bool:
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True


class RiskFilters(BaseModel):
    """Listing and region risk constraints."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    social_hotspot: Optional[int] = None
    """Maximum accepted social hotspot level (1–3)."""
    renovation_urgency: Optional[RiskLevel] = None
    """Exact renovation urgency to match."""
    max_default_risk: Optional[float] = None
    max_crime_rate: Optional[float] = None
    min_social_index: Optional[float] = None


class SearchFilters(BaseModel):
    """All filter dimensions offered by the search panel.

    Attributes:
        population: Region / listing population range.
        price: Listing price range in EUR.
        property_type: Accepted listing types; empty means all.
        min_investment_score: Region investment score floor.
        min_vacancy_duration: Listing vacancy duration floor (months).
        risk_level: Maximum accepted vacancy risk level of a region.
        state: Accepted federal states; empty means all.
        risk_filters: Optional finer-grained risk constraints.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    population: NumericRange = NumericRange()
    price: NumericRange = NumericRange()
    property_type: list[ListingType] = []
    min_investment_score: Optional[float] = None
    min_vacancy_duration: Optional[float] = None
    risk_level: Optional[RiskLevel] = None
    state: list[str] = []
    risk_filters: Optional[RiskFilters] = None

    def is_empty(self) -> bool:
        """``True`` when no dimension is constrained."""
        return self == SearchFilters()


class FilterPreset(BaseModel):
    """A named, timestamped filter set (recent searches)."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    filters: SearchFilters
    last_used: datetime
