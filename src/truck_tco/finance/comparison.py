"""Fuel-type comparison — ranking, cheapest option, savings versus diesel."""

from __future__ import annotations

from truck_tco.engine.tco import round_half_up
from truck_tco.models.results import ComparisonSummary, FuelRanking, TCOResult


def compare_fuel_types(result: TCOResult) -> ComparisonSummary:
    """Rank the four breakdowns by total cost.

    Ties keep the canonical fuel order (diesel, bev, fcev, h2ice), so the
    outcome never depends on dict ordering.
    """
    ordered = result.ordered()
    by_cost = sorted(ordered, key=lambda b: b.total_cost)
    cheapest = by_cost[0]
    lowest_co2 = min(ordered, key=lambda b: b.co2_emissions)

    ranking = [
        FuelRanking(
            rank=position,
            fuel_type=b.fuel_type,
            total_cost=b.total_cost,
            cost_per_km=b.cost_per_km,
            co2_emissions=b.co2_emissions,
            delta_vs_cheapest=round_half_up(b.total_cost - cheapest.total_cost),
        )
        for position, b in enumerate(by_cost, start=1)
    ]

    diesel = result["diesel"]
    if cheapest.fuel_type == "diesel":
        savings = None
        savings_pct = None
    else:
        savings = round_half_up(diesel.total_cost - cheapest.total_cost)
        savings_pct = (
            round_half_up(savings / diesel.total_cost * 100, 1)
            if diesel.total_cost > 0 else None
        )

    return ComparisonSummary(
        cheapest=cheapest.fuel_type,
        lowest_co2=lowest_co2.fuel_type,
        savings_vs_diesel=savings,
        savings_vs_diesel_pct=savings_pct,
        ranking=ranking,
    )
