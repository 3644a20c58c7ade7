"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept model objects and return plain multi-line strings
suitable for ``typer.echo()``. Money and percentages use German separators
(see ``utils/money.py``).

No third-party dependencies (no ``rich``, no ``colorama``).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from immo_analytics.models.analysis import PortfolioAnalysisData, Recommendation, RegionScore
from immo_analytics.utils.money import format_eur, format_percent


# ── Region scores ─────────────────────────────────────────────────────────────


def format_region_scores(scores: Sequence[RegionScore]) -> str:
    """Format region investment scores, one row per region.

    Example::

        Rank  Region              Score  Tier    Colour
        -----------------------------------------------
           1  Leipzig              6.75  medium  #eab308
    """
    lines: list[str] = []
    lines.append("")
    lines.append("=== Regional Investment Scores ===")

    if not scores:
        lines.append("")
        lines.append("  (no regions loaded)")
        return "\n".join(lines)

    header = f"  {'Rank':>4}  {'Region':<18}  {'Score':>6}  {'Tier':<6}  {'Colour':<7}"
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for rank, s in enumerate(scores, start=1):
        lines.append(
            f"  {rank:>4}  {s.region_name[:18]:<18}  {s.score:>6.2f}  "
            f"{s.tier.value:<6}  {s.color:<7}"
        )
    return "\n".join(lines)


# ── Portfolio analysis ────────────────────────────────────────────────────────


def format_portfolio_analysis(analysis: PortfolioAnalysisData, holdings: int) -> str:
    """Format totals, diversification, risk and synergies as labelled blocks."""
    lines: list[str] = []
    lines.append("")
    lines.append("=== Portfolio Analysis ===")
    lines.append(f"  Holdings:          {holdings}")

    if holdings == 0:
        lines.append("")
        lines.append("  (portfolio is empty)")
        return "\n".join(lines)

    lines.append(f"  Total investment:  {format_eur(analysis.total_investment)}")
    lines.append(f"  Average ROI:       {format_percent(analysis.average_roi)}")
    lines.append(f"  Monthly income:    {format_eur(analysis.monthly_income)}")
    lines.append(f"  Operating costs:   {format_eur(analysis.operating_costs)}")

    div = analysis.diversification
    lines.append("")
    lines.append("  [GEOGRAPHIC]")
    for g in div.geographic:
        lines.append(f"    {g.postal_code:<10}  {g.count:>3}  {format_percent(g.percentage):>9}")
    lines.append("  [PROPERTY TYPE]")
    for t in div.property_types:
        lines.append(f"    {t.type:<10}  {t.count:>3}  {format_percent(t.percentage):>9}")
    lines.append("  [PRICE SEGMENT]")
    for seg in div.price_segments:
        lines.append(f"    {seg.segment:<10}  {seg.count:>3}  {format_percent(seg.percentage):>9}")

    risk = analysis.risk_assessment
    lines.append("")
    lines.append("  [RISK]")
    lines.append(f"    Vacancy risk:       {risk.vacancy_risk.value}")
    lines.append(f"    Market saturation:  {format_percent(risk.market_saturation)}")
    lines.append(f"    Price outlook:      {risk.price_outlook.value}")

    syn = analysis.synergies
    lines.append("")
    lines.append("  [SYNERGIES]")
    lines.append(f"    Management:   {format_eur(syn.management_savings)}")
    lines.append(f"    Maintenance:  {format_eur(syn.maintenance_efficiency)}")
    lines.append(f"    Renting:      {format_eur(syn.renting_optimization)}")
    lines.append(f"    Total:        {format_eur(syn.total)}")
    return "\n".join(lines)


# ── Recommendations ───────────────────────────────────────────────────────────


def format_recommendations(
    recommendations: Sequence[Recommendation],
    titles: Mapping[str, str] | None = None,
) -> str:
    """Format advisory signals, one row per property.

    Args:
        recommendations: Output of ``recommend_portfolio()``.
        titles:          Optional ``property_id -> title`` lookup for display.
    """
    lines: list[str] = []
    lines.append("")
    lines.append("=== Recommendations ===")

    if not recommendations:
        lines.append("")
        lines.append("  (no properties in portfolio)")
        return "\n".join(lines)

    titles = titles or {}
    header = f"  {'ID':<6}  {'Property':<32}  {'Action':<6}  Reason"
    lines.append(header)
    lines.append("  " + "-" * (len(header) + 40))
    for rec in recommendations:
        title = titles.get(rec.property_id, "")[:32]
        lines.append(
            f"  {rec.property_id:<6}  {title:<32}  {rec.action.value:<6}  {rec.reason}"
        )
    return "\n".join(lines)
