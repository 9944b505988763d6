"""CAPEX / OPEX split and cumulative cash-flow projection.

  capex        = purchase − subsidy
  annual_opex  = (fuel + maintenance + taxes + insurance) / years
  cumulative_n = capex + annual_opex × n          for n = 0 … floor(years), then years

Interest is left out of both: it is a financing cost, not an operating one.
"""

from __future__ import annotations

import math

import numpy as np

from truck_tco.config.fuel import FUEL_TYPES
from truck_tco.engine.tco import round_half_up
from truck_tco.models.results import CapexOpexSplit, CashFlowPoint, CostBreakdown, TCOResult


def capex_opex_split(breakdown: CostBreakdown, depreciation_years: float) -> CapexOpexSplit:
    """Split one fuel type's lifetime cost into up-front and per-year parts."""
    if depreciation_years <= 0:
        raise ValueError("depreciation_years must be greater than 0")

    parts = breakdown.breakdown
    capex = parts.purchase_cost - parts.subsidy_credit
    annual_opex = parts.total_operating_cost / depreciation_years

    lifetime = capex + annual_opex * depreciation_years
    capex_share = capex / lifetime * 100 if lifetime > 0 else 0.0

    return CapexOpexSplit(
        fuel_type=breakdown.fuel_type,
        capex=round_half_up(capex),
        annual_opex=round_half_up(annual_opex),
        capex_share_pct=round_half_up(capex_share, 1),
        opex_share_pct=round_half_up(100 - capex_share, 1) if lifetime > 0 else 0.0,
    )


def cumulative_cash_flow(result: TCOResult, depreciation_years: float) -> list[CashFlowPoint]:
    """Year-by-year cumulative spend for every fuel type.

    Point 0 is the net purchase.  Whole years follow up to the horizon; a
    fractional horizon gets one more point at the horizon itself, so the last
    point always equals ``purchase − subsidy + total_operating_cost``.
    """
    if depreciation_years <= 0:
        raise ValueError("depreciation_years must be greater than 0")

    years = np.arange(int(math.floor(depreciation_years)) + 1, dtype=float)
    if years[-1] < depreciation_years:
        years = np.append(years, depreciation_years)

    # Elapsed share of the horizon; exactly 1.0 at the last point.
    elapsed = years / depreciation_years
    curves: dict[str, np.ndarray] = {}
    for fuel_type in FUEL_TYPES:
        parts = result[fuel_type].breakdown
        capex = parts.purchase_cost - parts.subsidy_credit
        curves[fuel_type] = capex + parts.total_operating_cost * elapsed

    return [
        CashFlowPoint(
            year=float(year),
            cumulative={f: round_half_up(float(curves[f][i])) for f in FUEL_TYPES},
        )
        for i, year in enumerate(years)
    ]
