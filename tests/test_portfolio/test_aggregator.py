"""
Tests for immo_analytics/portfolio/aggregator.py.

What we test
------------
Reference scenario (Berlin townhouse + Hamburg office):
  - total_investment 4 000 000, average_roi 13.85.
  - Geographic / property-type shares 50 / 50 in input order.
  - Price segments Medium 50 % and High 50 %.
  - Vacancy risk medium, saturation 4.5, outlook positive.
  - Monthly income, operating costs and order-dependent synergies.

classify_price_segment():
  - Band boundaries at 500 000 and 1 500 000 (lower bound inclusive).
  - NaN raises UnclassifiablePriceError.

Risk helpers:
  - High vacancy wins over medium; vacancy_risk_level() band boundaries.
  - Outlook needs a strict majority.

Empty portfolio:
  - Zero totals, empty breakdowns, low risk, neutral outlook.

Single-property panels:
  - assess_property_risk() and estimate_property_synergies().
"""

from __future__ import annotations

import math

import pytest

from immo_analytics.exceptions import UnclassifiablePriceError
from immo_analytics.models.property import OperatingCosts
from immo_analytics.portfolio.aggregator import (
    analyze_portfolio,
    annual_rent,
    assess_price_outlook,
    assess_property_risk,
    assess_vacancy_risk,
    average_roi,
    classify_price_segment,
    estimate_property_synergies,
    geographic_breakdown,
    maintenance_efficiency,
    management_savings,
    market_saturation,
    monthly_income,
    price_segment_breakdown,
    property_type_breakdown,
    renting_optimization,
    total_investment,
    total_operating_costs,
    vacancy_risk_level,
)
from immo_analytics.taxonomy.property_taxonomy import PriceOutlook, RiskLevel


class TestReferenceScenario:
    def test_totals(self, reference_portfolio):
        assert total_investment(reference_portfolio) == pytest.approx(4_000_000)
        assert average_roi(reference_portfolio) == pytest.approx(13.85)
        assert monthly_income(reference_portfolio) == pytest.approx(26_500)
        assert annual_rent(reference_portfolio) == pytest.approx(318_000)
        assert total_operating_costs(reference_portfolio) == pytest.approx(13_700)

    def test_geographic(self, reference_portfolio):
        shares = geographic_breakdown(reference_portfolio)
        assert [(s.postal_code, s.count) for s in shares] == [("10405", 1), ("20457", 1)]
        assert [s.percentage for s in shares] == [pytest.approx(50.0), pytest.approx(50.0)]

    def test_property_types(self, reference_portfolio):
        shares = property_type_breakdown(reference_portfolio)
        assert [(s.type, s.percentage) for s in shares] == [
            ("residential", pytest.approx(50.0)),
            ("commercial", pytest.approx(50.0)),
        ]

    def test_price_segments(self, reference_portfolio):
        shares = price_segment_breakdown(reference_portfolio)
        assert [(s.segment, s.count) for s in shares] == [("Medium", 1), ("High", 1)]

    def test_risk(self, reference_portfolio):
        analysis = analyze_portfolio(reference_portfolio)
        risk = analysis.risk_assessment
        assert risk.vacancy_risk == RiskLevel.MEDIUM
        assert risk.market_saturation == pytest.approx(4.5)
        assert risk.price_outlook == PriceOutlook.POSITIVE

    def test_synergies(self, reference_portfolio):
        syn = analyze_portfolio(reference_portfolio).synergies
        # Only the second holding (index 1) contributes.
        assert syn.management_savings == pytest.approx(50 * 0.15 * 12)
        assert syn.maintenance_efficiency == pytest.approx(800 * 2.5 * 0.1 * 12)
        assert syn.renting_optimization == pytest.approx(18_000 * 0.2 * 12)
        assert syn.total == pytest.approx(90 + 2_400 + 43_200)

    def test_synergies_depend_on_order(self, reference_portfolio):
        forward = maintenance_efficiency(reference_portfolio)
        backward = maintenance_efficiency(list(reversed(reference_portfolio)))
        assert forward != pytest.approx(backward)

    def test_percentages_sum_to_100(self, reference_portfolio, make_portfolio_property):
        holdings = [
            *reference_portfolio,
            make_portfolio_property(id="3", postal_code="10405", price=300_000),
        ]
        div = analyze_portfolio(holdings).diversification
        for shares in (div.geographic, div.property_types, div.price_segments):
            assert sum(s.percentage for s in shares) == pytest.approx(100.0)


class TestSynergyCaps:
    def test_management_caps_at_half(self, make_portfolio_property):
        holdings = [make_portfolio_property(id=str(i)) for i in range(6)]
        # multipliers 0, .15, .30, .45, .5, .5
        assert management_savings(holdings) == pytest.approx(50 * 1.9 * 12)

    def test_renting_caps_and_missing_rent(self, make_portfolio_property):
        holdings = [
            make_portfolio_property(id="a", monthly_rent=1000),
            make_portfolio_property(id="b", monthly_rent=None),
            make_portfolio_property(id="c", monthly_rent=1000),
            make_portfolio_property(id="d", monthly_rent=1000),
            make_portfolio_property(id="e", monthly_rent=1000),
        ]
        # multipliers 0, .2, .4, .6, .6; b has no rent
        assert renting_optimization(holdings) == pytest.approx(1000 * 1.6 * 12)


class TestClassifyPriceSegment:
    @pytest.mark.parametrize(
        ("price", "segment"),
        [
            (0.0, "Low"),
            (499_999.99, "Low"),
            (500_000.0, "Medium"),
            (1_499_999.0, "Medium"),
            (1_500_000.0, "High"),
            (50_000_000.0, "High"),
        ],
    )
    def test_boundaries(self, price, segment):
        assert classify_price_segment(price) == segment

    def test_nan_is_fatal(self):
        with pytest.raises(UnclassifiablePriceError):
            classify_price_segment(math.nan)

    def test_negative_is_fatal(self):
        with pytest.raises(UnclassifiablePriceError):
            classify_price_segment(-1.0)


class TestRiskHelpers:
    def test_high_vacancy_wins(self, make_portfolio_property):
        holdings = [
            make_portfolio_property(id="a", vacancy_rate=6),
            make_portfolio_property(id="b", vacancy_rate=10.5),
        ]
        assert assess_vacancy_risk(holdings) == RiskLevel.HIGH

    def test_thresholds_are_strict(self, make_portfolio_property):
        assert assess_vacancy_risk([make_portfolio_property(vacancy_rate=10)]) == RiskLevel.MEDIUM
        assert assess_vacancy_risk([make_portfolio_property(vacancy_rate=5)]) == RiskLevel.LOW

    @pytest.mark.parametrize("rate, expected", [
        (0.0, RiskLevel.LOW),
        (5.0, RiskLevel.LOW),
        (5.01, RiskLevel.MEDIUM),
        (10.0, RiskLevel.MEDIUM),
        (10.01, RiskLevel.HIGH),
    ])
    def test_vacancy_risk_level(self, rate, expected):
        assert vacancy_risk_level(rate) == expected

    def test_outlook_needs_strict_majority(self, make_portfolio_property):
        half = [
            make_portfolio_property(id="a", roi=12),
            make_portfolio_property(id="b", roi=7),
        ]
        assert assess_price_outlook(half) == PriceOutlook.NEUTRAL

    def test_negative_outlook(self, make_portfolio_property):
        holdings = [
            make_portfolio_property(id="a", roi=3),
            make_portfolio_property(id="b", roi=4.9),
            make_portfolio_property(id="c", roi=12),
        ]
        assert assess_price_outlook(holdings) == PriceOutlook.NEGATIVE

    def test_saturation_is_mean_vacancy(self, make_portfolio_property):
        holdings = [
            make_portfolio_property(id="a", vacancy_rate=1),
            make_portfolio_property(id="b", vacancy_rate=4),
        ]
        assert market_saturation(holdings) == pytest.approx(2.5)


class TestEmptyPortfolio:
    def test_empty(self):
        analysis = analyze_portfolio([])
        assert analysis.total_investment == 0.0
        assert analysis.average_roi == 0.0
        assert analysis.monthly_income == 0.0
        assert analysis.operating_costs == 0.0
        assert analysis.diversification.geographic == ()
        assert analysis.diversification.property_types == ()
        assert analysis.diversification.price_segments == ()
        assert analysis.risk_assessment.vacancy_risk == RiskLevel.LOW
        assert analysis.risk_assessment.market_saturation == 0.0
        assert analysis.risk_assessment.price_outlook == PriceOutlook.NEUTRAL
        assert analysis.synergies.total == 0.0


class TestMissingFinancials:
    def test_missing_costs_and_rent_count_as_zero(self, make_portfolio_property):
        holdings = [
            make_portfolio_property(id="a", monthly_rent=None, operating_costs=None),
            make_portfolio_property(
                id="b", monthly_rent=1200, operating_costs=OperatingCosts(tax=100),
            ),
        ]
        assert monthly_income(holdings) == pytest.approx(1200)
        assert total_operating_costs(holdings) == pytest.approx(100)


class TestSinglePropertyPanels:
    def test_property_risk(self, hamburg_office):
        risk = assess_property_risk(hamburg_office)
        assert risk.vacancy_risk == RiskLevel.MEDIUM
        assert risk.market_saturation == pytest.approx(7.0)
        assert risk.price_outlook == PriceOutlook.POSITIVE

    def test_property_synergies(self, berlin_townhouse):
        syn = estimate_property_synergies(berlin_townhouse)
        assert syn.management_savings == pytest.approx(1000 * 1.9 * 0.98)
        assert syn.maintenance_efficiency == pytest.approx(500 * 1.45 * 0.2)
        assert syn.renting_optimization == pytest.approx(750 * 1.125 * 0.98)
