"""
Investment score: maps a region's market data to a 0–10 composite score
and a colour tier for the map view.

Score formula (weighted sum, nominal range 0–10)
-------------------------------------------------
    score = (
        price_score    * w_price     # cheaper is better
        + growth_score * w_growth    # faster price growth is better
        + vacancy_score* w_vacancy   # lower vacancy is better
        + roi_score    * w_roi       # higher expected return is better
    ) * 10

Normalisation (fixed assumed ranges, not adaptive)
--------------------------------------------------
    price_score   = 1 - average_price / 10000   # assumes max 10 000 EUR/m²
    growth_score  = price_growth / 10           # assumes max 10 % growth
    vacancy_score = 1 - vacancy_rate / 10       # assumes max 10 % vacancy
    roi_score     = expected_roi / 20           # assumes max 20 % ROI

The score is NOT clamped. Inputs outside the assumed ranges produce scores
below 0 or above 10; callers that need a bounded value must clamp themselves.

Tiering (lower bound inclusive)
-------------------------------
    score < 4       -> LOW    (red)
    4 <= score < 7  -> MEDIUM (yellow)
    score >= 7      -> HIGH   (green)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator

from immo_analytics.models.analysis import RegionScore
from immo_analytics.models.region import MarketData, Region
from immo_analytics.taxonomy.property_taxonomy import ScoreTier

# Normalisation ceilings
_MAX_PRICE_PER_SQM = 10_000.0
_MAX_PRICE_GROWTH = 10.0
_MAX_VACANCY_RATE = 10.0
_MAX_EXPECTED_ROI = 20.0

# Tier lower bounds
_MEDIUM_TIER_FLOOR = 4.0
_HIGH_TIER_FLOOR = 7.0


class ScoreWeights(BaseModel):
    """Relative importance of the four score components.

    Components must be non-negative and sum to 1.0.
    """

    model_config = ConfigDict(frozen=True)

    price: float = 0.35
    growth: float = 0.25
    vacancy: float = 0.20
    roi: float = 0.20

    @model_validator(mode="after")
    def validate_weights(self) -> "ScoreWeights":
        parts = (self.price, self.growth, self.vacancy, self.roi)
        if any(w < 0 for w in parts):
            raise ValueError(f"Score weights must be non-negative, got {parts}.")
        if abs(sum(parts) - 1.0) > 1e-6:
            raise ValueError(f"Score weights must sum to 1.0, got {sum(parts):.6f}.")
        return self


DEFAULT_WEIGHTS = ScoreWeights()


def compute_investment_score(
    market_data: MarketData,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> float:
    """Compute the unclamped investment score for one region's market data.

    Args:
        market_data: Regional market statistics.
        weights: Component weights (default 0.35 / 0.25 / 0.20 / 0.20).

    Returns:
        Weighted score scaled to the nominal 0–10 range.
    """
    price_score   = 1.0 - market_data.average_price / _MAX_PRICE_PER_SQM
    growth_score  = market_data.price_growth / _MAX_PRICE_GROWTH
    vacancy_score = 1.0 - market_data.vacancy_rate / _MAX_VACANCY_RATE
    roi_score     = market_data.expected_roi / _MAX_EXPECTED_ROI

    weighted = (
        price_score     * weights.price
        + growth_score  * weights.growth
        + vacancy_score * weights.vacancy
        + roi_score     * weights.roi
    )
    return weighted * 10.0


def score_tier(score: float) -> ScoreTier:
    """Classify a score into its colour tier (lower bound inclusive)."""
    if score < _MEDIUM_TIER_FLOOR:
        return ScoreTier.LOW
    if score < _HIGH_TIER_FLOOR:
        return ScoreTier.MEDIUM
    return ScoreTier.HIGH


def tier_color(score: float) -> str:
    """Hex colour for a score, e.g. ``"#eab308"`` for a medium score."""
    return score_tier(score).color


def score_region(region: Region, weights: ScoreWeights = DEFAULT_WEIGHTS) -> RegionScore:
    """Score one region and attach its tier."""
    score = compute_investment_score(region.market_data, weights)
    return RegionScore(
        region_id=region.id,
        region_name=region.name,
        score=score,
        tier=score_tier(score),
    )


def score_regions(
    regions: list[Region],
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> list[RegionScore]:
    """Score all regions, best first. Ties broken by region id ascending."""
    scored = [score_region(r, weights) for r in regions]
    return sorted(scored, key=lambda s: (-s.score, s.region_id))


def region_status_tier(value: float) -> ScoreTier:
    """Tier for a 0–10 detail metric (infrastructure score, social index, ...).

    Stricter than the map tiering: ``>= 8`` is high, ``>= 6`` is medium.
    """
    if value >= 8.0:
        return ScoreTier.HIGH
    if value >= 6.0:
        return ScoreTier.MEDIUM
    return ScoreTier.LOW
