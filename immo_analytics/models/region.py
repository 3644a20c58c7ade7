"""
Region models — city-level market areas with statistics and risk data.

Regions are static reference data loaded once (see ``data/seed_loader.py``)
and never mutated at runtime. Every model here is frozen.

Structure::

    Region
      ├── MarketData            vacancy, price, growth, ROI, infrastructure score
      ├── TrendPoint[]          monthly price (history) or forecast points
      ├── QuarterlyTrend[]      quarterly price and transaction counts
      ├── InfrastructurePlan[]  planned projects and their expected impact
      ├── RiskAssessment        crime statistics, socioeconomics, local vacancy
      └── RenovationAnalysis    optional cost / subsidy / ROI estimate
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from immo_analytics.taxonomy.property_taxonomy import (
    DevelopmentZoneStatus,
    RenovationStatus,
    VacancyTrend,
)


class MarketData(BaseModel):
    """Aggregate market statistics for a region.

    Only ``average_price``, ``price_growth``, ``vacancy_rate`` and
    ``expected_roi`` feed the investment score; the rest is display data.

    Attributes:
        vacancy_rate: Vacancy in percent.
        average_price: Average price per m² in EUR.
        price_growth: Annual price growth in percent.
        expected_roi: Expected return in percent.
        infrastructure_score: 0–10 rating.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    vacancy_rate: float
    vacancy_rate_change: float = 0.0
    renovation_need: float = 0.0
    average_price: float
    price_growth: float
    investment_score: Optional[float] = None
    last_update: Optional[str] = None
    property_condition: Optional[float] = None
    renovation_status: RenovationStatus = RenovationStatus.NONE
    expected_roi: float
    price_per_sqm: Optional[float] = None
    city_average_price: Optional[float] = None
    supply_demand_ratio: Optional[float] = None
    population_growth: Optional[float] = None
    employment_rate: Optional[float] = None
    infrastructure_score: float = 0.0


class TrendPoint(BaseModel):
    """One monthly point of a price series.

    Historical points carry ``price``; forward-looking points carry
    ``forecast``. ``date`` is a ``YYYY-MM`` string.
    """

    model_config = ConfigDict(frozen=True)

    date: str
    price: Optional[float] = None
    forecast: Optional[float] = None

    @model_validator(mode="after")
    def validate_has_value(self) -> "TrendPoint":
        if self.price is None and self.forecast is None:
            raise ValueError(f"Trend point {self.date} needs a price or a forecast.")
        return self

    @property
    def is_forecast(self) -> bool:
        return self.price is None


class QuarterlyTrend(BaseModel):
    """Quarterly aggregate, e.g. ``quarter="2023Q1"``."""

    model_config = ConfigDict(frozen=True)

    quarter: str
    price: float
    transactions: int


class InfrastructurePlan(BaseModel):
    """A planned infrastructure project with a 0–10 impact rating."""

    model_config = ConfigDict(frozen=True)

    type: str
    description: str
    completion_date: str
    impact: float


class CrimeCategories(BaseModel):
    model_config = ConfigDict(frozen=True)

    property_damage: int = 0
    burglary: int = 0
    assault: int = 0
    other: int = 0


class CrimeStatistics(BaseModel):
    """Reported offences for one calendar year."""

    model_config = ConfigDict(frozen=True)

    year: int
    total: int
    categories: CrimeCategories = CrimeCategories()


class SocioeconomicData(BaseModel):
    model_config = ConfigDict(frozen=True)

    unemployment_rate: float
    average_income: float
    poverty_rate: float


class LocalVacancy(BaseModel):
    """Vacancy within a 500 m radius and its direction."""

    model_config = ConfigDict(frozen=True)

    radius_500m: float
    trend: VacancyTrend = VacancyTrend.STABLE


class DevelopmentZone(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: DevelopmentZoneStatus = DevelopmentZoneStatus.NONE
    project_count: int = 0
    total_investment: float = 0.0


class RiskAssessment(BaseModel):
    """Regional risk block used by the risk filters and region detail view.

    Attributes:
        social_index: 0–10, higher is better.
        crime_rate: Total offences in the latest year.
        economic_stability: 0–10, higher is better.
    """

    model_config = ConfigDict(frozen=True)

    social_index: float
    crime_rate: float
    economic_stability: float
    crime_statistics: list[CrimeStatistics] = []
    socioeconomic_data: Optional[SocioeconomicData] = None
    local_vacancy: Optional[LocalVacancy] = None
    development_zone: DevelopmentZone = DevelopmentZone()


class Subsidy(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    rate: float
    max_amount: float
    requirements: list[str] = []


class RenovationRoi(BaseModel):
    model_config = ConfigDict(frozen=True)

    baseline: float
    with_subsidies: float
    amortization_years: float


class RenovationAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    costs: dict[str, float] = {}
    subsidies: list[Subsidy] = []
    roi: Optional[RenovationRoi] = None


class Region(BaseModel):
    """A geographic market area (city level).

    Attributes:
        id: Stable slug, e.g. ``"berlin"``.
        name: Display name; equals ``Property.city`` for listings in the region.
        state: Federal state.
        coordinates: ``(longitude, latitude)`` pair.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    state: str
    population: int
    coordinates: tuple[float, float]
    market_data: MarketData
    trends: list[TrendPoint] = []
    quarterly_trends: list[QuarterlyTrend] = []
    infrastructure_plans: list[InfrastructurePlan] = []
    risk_assessment: RiskAssessment
    renovation_analysis: Optional[RenovationAnalysis] = None

    @property
    def longitude(self) -> float:
        return self.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.coordinates[1]

    def historical_trends(self) -> list[TrendPoint]:
        """Trend points that carry an observed price."""
        return [t for t in self.trends if not t.is_forecast]

    def forecast_trends(self) -> list[TrendPoint]:
        """Trend points that carry only a forecast."""
        return [t for t in self.trends if t.is_forecast]
