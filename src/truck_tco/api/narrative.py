"""Narrative generator — plain-English interpretation of a TCO comparison.

Turns a ``TCOResult`` into a text block with the ranking, the cost lines of
each fuel type, the CAPEX/OPEX split and strategic recommendations.
"""

from __future__ import annotations

from truck_tco.config.fuel import FUEL_LABELS
from truck_tco.finance.cashflow import capex_opex_split
from truck_tco.finance.comparison import compare_fuel_types
from truck_tco.models.results import CalculationMetadata, TCOResult

_RECOMMENDATIONS = {
    "diesel": "Proven technology, lowest initial investment, widest refuelling network.",
    "bev": "Lowest operating cost, subsidies available, zero tailpipe emissions.",
    "fcev": "Future-proof, fast refuelling, suited to medium range.",
    "h2ice": "Hydrogen without a fuel cell, lower initial cost than FCEV.",
}


def _eur(value: float) -> str:
    return f"€{value:,.2f}"


def generate_narrative(result: TCOResult, metadata: CalculationMetadata) -> str:
    """Generate a plain-English narrative for one calculation.

    Sections:
      1. Calculation summary
      2. Ranking
      3. Cost breakdown per fuel type
      4. CAPEX vs OPEX
      5. Recommendations
    """
    comparison = compare_fuel_types(result)
    years = metadata.depreciation_years
    sections: list[str] = []

    # ── 1. Summary ──
    sections.append("=" * 60)
    sections.append("CALCULATION SUMMARY")
    sections.append("=" * 60)
    sections.append(
        f"Vehicle type: {metadata.vehicle_type or 'n/a'}\n"
        f"Driving area: {metadata.driving_area or 'n/a'}\n"
        f"Distance: {metadata.km_per_year:,.0f} km/year over {years:g} years\n"
        f"Rate preset: {metadata.preset_year}"
    )

    # ── 2. Ranking ──
    sections.append("")
    sections.append("=" * 60)
    sections.append("RANKING (lowest total cost first)")
    sections.append("=" * 60)
    header = f"{'Fuel type':38s}  {'Total':>14s}  {'€/km':>6s}  {'CO2 (t)':>8s}"
    sections.append(header)
    sections.append("-" * len(header))
    for row in comparison.ranking:
        sections.append(
            f"{FUEL_LABELS[row.fuel_type]:38s}  {_eur(row.total_cost):>14s}  "
            f"{row.cost_per_km:>6.2f}  {row.co2_emissions / 1000:>8.1f}"
        )

    # ── 3. Breakdown ──
    sections.append("")
    sections.append("=" * 60)
    sections.append("COST BREAKDOWN")
    sections.append("=" * 60)
    for b in result.ordered():
        parts = b.breakdown
        sections.append(f"{FUEL_LABELS[b.fuel_type]}:")
        sections.append(f"  Purchase      {_eur(parts.purchase_cost):>14s}")
        sections.append(f"  Fuel          {_eur(parts.fuel_cost):>14s}")
        sections.append(f"  Maintenance   {_eur(parts.maintenance_cost):>14s}")
        sections.append(f"  Taxes & toll  {_eur(parts.taxes_cost):>14s}")
        sections.append(f"  Insurance     {_eur(parts.insurance_cost):>14s}")
        sections.append(f"  Interest      {_eur(parts.interest_cost):>14s}")
        if parts.subsidy_credit > 0:
            sections.append(f"  Subsidy      -{_eur(parts.subsidy_credit):>14s}")
        sections.append(f"  Total         {_eur(b.total_cost):>14s}")

    # ── 4. CAPEX vs OPEX ──
    sections.append("")
    sections.append("=" * 60)
    sections.append("CAPEX vs OPEX")
    sections.append("=" * 60)
    for b in result.ordered():
        split = capex_opex_split(b, years)
        sections.append(
            f"{FUEL_LABELS[b.fuel_type]:38s}  CAPEX {_eur(split.capex):>14s}  "
            f"OPEX/year {_eur(split.annual_opex):>12s}  "
            f"({split.capex_share_pct:.0f}% / {split.opex_share_pct:.0f}%)"
        )

    # ── 5. Recommendations ──
    sections.append("")
    sections.append("=" * 60)
    sections.append("RECOMMENDATIONS")
    sections.append("=" * 60)

    recs: list[str] = [
        f"{FUEL_LABELS[comparison.cheapest]} has the lowest total cost of ownership."
    ]
    if comparison.savings_vs_diesel is not None:
        pct = comparison.savings_vs_diesel_pct
        pct_str = f" ({pct:.1f}%)" if pct is not None else ""
        recs.append(
            f"Potential saving versus diesel: {_eur(comparison.savings_vs_diesel)}{pct_str}."
        )
    recs.append(f"{FUEL_LABELS[comparison.lowest_co2]} has the lowest CO2 footprint.")
    recs.append(_RECOMMENDATIONS[comparison.cheapest])

    for i, rec in enumerate(recs, 1):
        sections.append(f"  {i}. {rec}")

    return "\n".join(sections)
