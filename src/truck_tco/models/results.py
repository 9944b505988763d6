"""Result types — the contract between the engine, the API and the exports.

``TCOResult.payload()`` is the snapshot the web application persists
verbatim: camelCase keys, one entry per fuel type.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import ConfigDict, Field

from truck_tco.config.base import CamelModel
from truck_tco.config.fuel import FUEL_TYPES, FuelType


class CostComponents(CamelModel):
    """Itemised lifetime costs of one fuel type (€, rounded to cents).

    Relationships (hold to the cent; each total is re-rounded after summing):
      total_operating_cost = fuel + maintenance + taxes + insurance
      total_cost           = purchase + total_operating + interest − subsidy
    """

    model_config = ConfigDict(frozen=True)

    purchase_cost: float
    fuel_cost: float
    """Energy cost over the whole horizon."""
    maintenance_cost: float
    taxes_cost: float
    """Motor tax + truck toll over the whole horizon."""
    insurance_cost: float
    subsidy_credit: float
    """One-time credit, subtracted once."""
    interest_cost: float
    """Flat interest on the full purchase price, every year."""
    total_operating_cost: float


class CostBreakdown(CamelModel):
    """Lifetime cost summary for one fuel type."""

    model_config = ConfigDict(frozen=True)

    fuel_type: FuelType
    total_cost: float
    cost_per_km: float
    co2_emissions: int
    """Total kg CO2 over the horizon."""
    breakdown: CostComponents


class TCOResult(CamelModel):
    """The four breakdowns keyed by fuel type."""

    model_config = ConfigDict(frozen=True)

    results: dict[FuelType, CostBreakdown]

    def __getitem__(self, fuel_type: FuelType) -> CostBreakdown:
        return self.results[fuel_type]

    def ordered(self) -> list[CostBreakdown]:
        """Breakdowns in canonical fuel order."""
        return [self.results[f] for f in FUEL_TYPES]

    def payload(self) -> dict[str, Any]:
        """The persisted shape: ``{"diesel": {...}, "bev": {...}, ...}``."""
        return {
            fuel: breakdown.model_dump(mode="json", by_alias=True)
            for fuel, breakdown in self.results.items()
        }


class CalculationMetadata(CamelModel):
    """Informational echo assembled by the caller, never by the engine."""

    vehicle_type: str | None = None
    driving_area: str | None = None
    km_per_year: float
    depreciation_years: float
    preset_year: int
    calculated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# ═══════════════════════════════════════════════════════════════════════════
# Derived analyses
# ═══════════════════════════════════════════════════════════════════════════

class FuelRanking(CamelModel):
    """One row of the cost ranking, cheapest first."""

    rank: int
    fuel_type: FuelType
    total_cost: float
    cost_per_km: float
    co2_emissions: int
    delta_vs_cheapest: float
    """€ more than the cheapest fuel type (0 for the cheapest)."""


class ComparisonSummary(CamelModel):
    """Headline comparison of the four fuel types."""

    cheapest: FuelType
    lowest_co2: FuelType
    savings_vs_diesel: float | None
    """Diesel total − cheapest total; ``None`` when diesel is cheapest."""
    savings_vs_diesel_pct: float | None
    ranking: list[FuelRanking]


class CapexOpexSplit(CamelModel):
    """Up-front versus running cost of one fuel type."""

    fuel_type: FuelType
    capex: float
    """Purchase price net of the subsidy."""
    annual_opex: float
    """Fuel + maintenance + taxes + insurance, per year."""
    capex_share_pct: float
    opex_share_pct: float


class CashFlowPoint(CamelModel):
    """Cumulative spend per fuel type at one point in time (year 0 = purchase).

    The last point sits at the horizon, which may be a fractional year.
    """

    year: float
    cumulative: dict[FuelType, float]
