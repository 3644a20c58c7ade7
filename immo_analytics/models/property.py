"""
Property models — investable listings and their portfolio counterparts.

``Property`` is read-only reference data supplied by the listing source.
``PortfolioProperty`` extends it with the user's portfolio state
(``added_at``, ``status``, ``notes``).

Both models are frozen. Portfolio mutations (status change, note) never
modify an entry in place; they produce a copy via ``model_copy(update=...)``
so that a previously published portfolio snapshot stays intact.

Units:
  - ``price``, ``monthly_rent`` and operating cost amounts are in EUR.
  - ``roi`` and ``vacancy_rate`` are percentages (``12.5`` means 12.5 %).
  - ``size`` is in square metres.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from immo_analytics.taxonomy.property_taxonomy import (
    ListingType,
    PortfolioStatus,
    PropertyType,
    RiskLevel,
)


class OperatingCosts(BaseModel):
    """Monthly operating costs split into five fixed categories (EUR)."""

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    maintenance: float = 0.0
    management: float = 0.0
    insurance: float = 0.0
    tax: float = 0.0
    utilities: float = 0.0

    @model_validator(mode="after")
    def validate_non_negative(self) -> "OperatingCosts":
        for name in ("maintenance", "management", "insurance", "tax", "utilities"):
            if getattr(self, name) < 0:
                raise ValueError(f"operating cost '{name}' must be non-negative.")
        return self

    @property
    def total(self) -> float:
        """Sum of all five categories."""
        return (
            self.maintenance
            + self.management
            + self.insurance
            + self.tax
            + self.utilities
        )


class RiskProfile(BaseModel):
    """Listing-level risk indicators.

    Attributes:
        social_hotspot_level: 1 (unremarkable) to 3 (known social hotspot).
        renovation_urgency: How soon renovation work is required.
        default_risk: Estimated default risk score (0–10).
        structural_issues: Free-text list of known defects.
        environmental_risks: Free-text list (flooding, contamination, ...).
    """

    model_config = ConfigDict(frozen=True)

    social_hotspot_level: int = 1
    renovation_urgency: RiskLevel = RiskLevel.LOW
    default_risk: float = 0.0
    structural_issues: list[str] = []
    environmental_risks: list[str] = []

    @field_validator("social_hotspot_level")
    @classmethod
    def validate_hotspot_level(cls, v: int) -> int:
        if v not in (1, 2, 3):
            raise ValueError(f"social_hotspot_level must be 1, 2 or 3, got {v}.")
        return v


class RenovationCosts(BaseModel):
    """Estimated renovation cost breakdown (EUR)."""

    model_config = ConfigDict(frozen=True)

    basic: float = 0.0
    energy: float = 0.0
    historical: float = 0.0
    total: float = 0.0


class EnergyEfficiency(BaseModel):
    """Energy certificate classes before and after renovation."""

    model_config = ConfigDict(frozen=True)

    current: str
    potential: str
    savings_potential: float = 0.0


class RenovationDetails(BaseModel):
    """Renovation plan for a listing."""

    model_config = ConfigDict(frozen=True)

    estimated_costs: RenovationCosts
    timeline: int
    """Expected duration in months."""
    required_permits: list[str] = []
    energy_efficiency: Optional[EnergyEfficiency] = None


class Property(BaseModel):
    """An individual real-estate asset available for investment.

    Attributes:
        id: Stable listing identifier; unique within a portfolio.
        type: Listing type (renovation / vacant / foreclosure).
        title: Display title.
        location: Neighbourhood or district label.
        city: City name; matched against ``Region.name``.
        postal_code: Grouping key for the geographic breakdown (exact match).
        property_type: Residential / commercial / mixed.
        price: Asking price in EUR; must be positive.
        roi: Expected return on investment in percent.
        size: Living / usable area in m².
        vacancy_rate: Vacancy rate of the surrounding market in percent.
        monthly_rent: Expected monthly rent, or ``None`` if unknown.
        operating_costs: Monthly operating costs, or ``None`` if unknown.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    id: str
    type: ListingType
    title: str = ""
    location: str = ""
    city: str
    district: Optional[str] = None
    postal_code: str
    property_type: PropertyType
    price: float
    roi: float
    size: float
    population: int = 0
    vacancy_rate: float = 0.0
    renovation_need: float = 0.0
    vacancy_duration: Optional[float] = None
    monthly_rent: Optional[float] = None
    operating_costs: Optional[OperatingCosts] = None
    construction_year: Optional[int] = None
    last_renovation: Optional[int] = None
    risk_profile: Optional[RiskProfile] = None
    renovation_details: Optional[RenovationDetails] = None
    description: str = ""
    image_url: Optional[str] = None
    price_per_sqm: Optional[float] = None

    @field_validator("price")
    @classmethod
    def validate_price_positive(cls, v: float) -> float:
        if not v > 0:
            raise ValueError(f"price must be positive, got {v}.")
        return v

    @field_validator("size")
    @classmethod
    def validate_size_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"size must be positive, got {v}.")
        return v

    @field_validator("monthly_rent")
    @classmethod
    def validate_rent_non_negative(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError(f"monthly_rent must be non-negative, got {v}.")
        return v


class PortfolioProperty(Property):
    """A ``Property`` held in the user's portfolio.

    Attributes:
        added_at: UTC timestamp when the entry was created.
        status: Watchlist / active / archived.
        notes: Optional free-text note. Not part of the analysis cache key.
    """

    added_at: datetime
    status: PortfolioStatus = PortfolioStatus.ACTIVE
    notes: Optional[str] = None

    @classmethod
    def from_property(
        cls,
        prop: Property,
        status: PortfolioStatus = PortfolioStatus.ACTIVE,
        added_at: Optional[datetime] = None,
    ) -> "PortfolioProperty":
        """Create a portfolio entry from a listing.

        Args:
            prop: The listing being added.
            status: Initial status; new entries default to ``active``.
            added_at: Creation timestamp; defaults to now (UTC).
        """
        return cls(
            **prop.model_dump(exclude={"added_at", "status", "notes"}),
            added_at=added_at or datetime.now(tz=timezone.utc),
            status=status,
        )
