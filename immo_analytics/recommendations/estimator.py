"""
Recommendation estimator: per-property buy/sell/hold/review advice.

This is demo-grade advisory logic, NOT a forecasting model. It draws two
random numbers per property to simulate a market-trend signal and the return
of an alternative investment. Results are non-deterministic unless the caller
passes a seeded ``random.Random``.

Rules (evaluated in order)
--------------------------
    1. HOLD   : default — stable yield and positive market development.
    2. SELL   : roi < 8                                  (cites market trend)
    3. SELL   : roi > 12 and portfolio outlook negative  (cites simulated price)
    4. BUY    : city in the hotspot set                  (appreciation potential)
    5. REVIEW : alternative return > roi + 2 — overrides 1–4.

Rules 2–4 are mutually exclusive (first match wins); rule 5 is checked for
every property regardless of the outcome of 1–4.

Random draws (fixed order per property)
---------------------------------------
    trend_pct   = (rng.random() - 0.5) * 10    # market trend, [-5 %, +5 %)
    alternative = rng.random() * 15            # alternative return, [0 %, 15 %)

The simulated future price is ``price * (1 + trend_pct / 100)``.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from immo_analytics.models.analysis import Recommendation, ValuePoint
from immo_analytics.models.property import Property
from immo_analytics.taxonomy.property_taxonomy import PriceOutlook, RecommendationAction
from immo_analytics.utils.money import format_eur

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EstimatorSettings:
    """Thresholds for the recommendation rules.

    Attributes:
        low_roi_threshold:   SELL below this ROI (percent).
        high_roi_threshold:  SELL above this ROI when the outlook is negative.
        review_margin:       REVIEW when the alternative beats roi by more than this.
        max_alternative_return: Upper bound of the simulated alternative return.
        max_trend_pct:       Half-width of the simulated market trend (percent).
        hotspot_cities:      Cities flagged for BUY.
    """

    low_roi_threshold:      float = 8.0
    high_roi_threshold:     float = 12.0
    review_margin:          float = 2.0
    max_alternative_return: float = 15.0
    max_trend_pct:          float = 5.0
    hotspot_cities:         frozenset[str] = field(
        default_factory=lambda: frozenset({"Essen", "Dortmund"})
    )


DEFAULT_SETTINGS = EstimatorSettings()

_HOLD_REASON = "Stable yield and positive market development expected."
_BUY_REASON = "Appreciation potential in up-and-coming districts."


def recommend_property(
    prop:     Property,
    outlook:  PriceOutlook,
    rng:      random.Random,
    settings: EstimatorSettings = DEFAULT_SETTINGS,
) -> Recommendation:
    """Produce one advisory signal for ``prop``.

    Args:
        prop:     The portfolio property.
        outlook:  Portfolio-level price outlook from the aggregator.
        rng:      Random source; pass ``random.Random(seed)`` for reproducibility.
        settings: Rule thresholds and hotspot cities.

    Returns:
        ``Recommendation`` with action and reason.
    """
    trend_pct = (rng.random() - 0.5) * 2.0 * settings.max_trend_pct
    future_price = prop.price * (1.0 + trend_pct / 100.0)

    action = RecommendationAction.HOLD
    reason = _HOLD_REASON

    if prop.roi < settings.low_roi_threshold:
        action = RecommendationAction.SELL
        reason = (
            "Low yield compared to the market average. "
            f"Market value trend: {trend_pct:.2f}%."
        )
    elif prop.roi > settings.high_roi_threshold and outlook == PriceOutlook.NEGATIVE:
        action = RecommendationAction.SELL
        reason = (
            "High yield, but negative price development expected. "
            f"Projected price: {format_eur(future_price)}."
        )
    elif prop.city in settings.hotspot_cities:
        action = RecommendationAction.BUY
        reason = _BUY_REASON

    alternative_return = rng.random() * settings.max_alternative_return
    if alternative_return > prop.roi + settings.review_margin:
        action = RecommendationAction.REVIEW
        reason = (
            "Alternative investment with higher return potential: "
            f"{alternative_return:.2f}%."
        )

    return Recommendation(property_id=prop.id, action=action, reason=reason)


def recommend_portfolio(
    properties: Sequence[Property],
    outlook:    PriceOutlook,
    rng:        random.Random,
    settings:   EstimatorSettings = DEFAULT_SETTINGS,
) -> list[Recommendation]:
    """Recommend every property in order, sharing one random stream."""
    recs = [recommend_property(p, outlook, rng, settings) for p in properties]
    logger.debug(
        "Generated %d recommendations (outlook=%s)", len(recs), outlook,
    )
    return recs


def simulate_value_history(
    prop:       Property,
    rng:        random.Random,
    start_year: int = 2019,
    end_year:   int = 2024,
) -> list[ValuePoint]:
    """Illustrative yearly value series for the performance chart.

    Starts at 70 % of the current price, grows 8 % (simple) per year and
    applies a ±5 % random factor per point. Placeholder data, not a model.
    """
    if end_year < start_year:
        raise ValueError(f"end_year ({end_year}) must be >= start_year ({start_year}).")

    base_value = prop.price * 0.7
    points: list[ValuePoint] = []
    for year in range(start_year, end_year + 1):
        growth_factor = 1.0 + (year - start_year) * 0.08
        random_factor = 0.95 + rng.random() * 0.1
        points.append(ValuePoint(year=year, value=base_value * growth_factor * random_factor))
    return points
