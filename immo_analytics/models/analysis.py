"""
Analytics output models consumed by the presentation layer.

``PortfolioAnalysisData`` is a derived, immutable snapshot — it is never
mutated, always recomputed from a list of ``PortfolioProperty``. Breakdown
collections are stored as tuples so a cached instance can be shared safely
between callers.

Invariant: for a non-empty portfolio the ``percentage`` fields of each
breakdown sum to 100 (within float tolerance); for an empty portfolio every
breakdown is empty.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from immo_analytics.taxonomy.property_taxonomy import (
    PriceOutlook,
    RecommendationAction,
    RiskLevel,
    ScoreTier,
)


class GeographicShare(BaseModel):
    model_config = ConfigDict(frozen=True)

    postal_code: str
    count: int
    percentage: float


class PropertyTypeShare(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    count: int
    percentage: float


class PriceSegmentShare(BaseModel):
    model_config = ConfigDict(frozen=True)

    segment: str
    count: int
    percentage: float


class Diversification(BaseModel):
    """Percentage distribution of holdings across three dimensions."""

    model_config = ConfigDict(frozen=True)

    geographic: tuple[GeographicShare, ...] = ()
    property_types: tuple[PropertyTypeShare, ...] = ()
    price_segments: tuple[PriceSegmentShare, ...] = ()


class PortfolioRisk(BaseModel):
    """Risk classification for a portfolio (or a single property).

    Attributes:
        vacancy_risk: Highest vacancy band reached by any holding.
        market_saturation: Mean vacancy rate in percent.
        price_outlook: Majority view on ROI.
    """

    model_config = ConfigDict(frozen=True)

    vacancy_risk: RiskLevel = RiskLevel.LOW
    market_saturation: float = 0.0
    price_outlook: PriceOutlook = PriceOutlook.NEUTRAL


class Synergies(BaseModel):
    """Annualised savings from managing several properties jointly (EUR)."""

    model_config = ConfigDict(frozen=True)

    management_savings: float = 0.0
    maintenance_efficiency: float = 0.0
    renting_optimization: float = 0.0

    @property
    def total(self) -> float:
        return (
            self.management_savings
            + self.maintenance_efficiency
            + self.renting_optimization
        )


class PortfolioAnalysisData(BaseModel):
    """Complete portfolio analysis snapshot.

    Attributes:
        total_investment: Sum of purchase prices (EUR).
        average_roi: Mean ROI in percent.
        monthly_income: Sum of monthly rents (EUR).
        operating_costs: Sum of monthly operating costs (EUR).
    """

    model_config = ConfigDict(frozen=True)

    total_investment: float = 0.0
    average_roi: float = 0.0
    monthly_income: float = 0.0
    operating_costs: float = 0.0
    diversification: Diversification = Diversification()
    risk_assessment: PortfolioRisk = PortfolioRisk()
    synergies: Synergies = Synergies()


class Recommendation(BaseModel):
    """An advisory signal for one portfolio property."""

    model_config = ConfigDict(frozen=True)

    property_id: str
    action: RecommendationAction
    reason: str

    @field_validator("reason")
    @classmethod
    def validate_reason_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("reason must not be empty.")
        return v.strip()


class RegionScore(BaseModel):
    """Investment score of a region plus its colour tier."""

    model_config = ConfigDict(frozen=True)

    region_id: str
    region_name: str
    score: float
    tier: ScoreTier

    @property
    def color(self) -> str:
        return self.tier.color


class ValuePoint(BaseModel):
    """One year of the simulated value history chart."""

    model_config = ConfigDict(frozen=True)

    year: int
    value: float
