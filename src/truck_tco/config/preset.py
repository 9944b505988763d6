"""Rate preset — tax rates, energy prices and default cost ratios.

A preset is external configuration: the engine reads it, never changes it.
Exactly one preset is active at calculation time (see
``truck_tco.engine.presets``).  Field defaults reproduce the seeded 2026
Dutch preset.
"""

from datetime import datetime

from pydantic import Field

from truck_tco.config.base import CamelModel
from truck_tco.config.fuel import FuelType


class MaintenanceDefaults(CamelModel):
    """Default maintenance cost per km, one slot per fuel type.

    An unset slot (``None``) falls back to the engine-wide 0.15 €/km.
    """

    diesel: float | None = Field(default=None, ge=0, description="Diesel maintenance (€/km)")
    bev: float | None = Field(default=None, ge=0, description="BEV maintenance (€/km)")
    fcev: float | None = Field(default=None, ge=0, description="FCEV maintenance (€/km)")
    h2ice: float | None = Field(default=None, ge=0, description="H2ICE maintenance (€/km)")

    def get(self, fuel_type: FuelType) -> float | None:
        return getattr(self, fuel_type)


class SubsidyDefaults(CamelModel):
    """One-time purchase subsidies.  Diesel has no slot and never gets one."""

    bev: float | None = Field(default=None, ge=0, description="BEV subsidy (€, one-time)")
    fcev: float | None = Field(default=None, ge=0, description="FCEV subsidy (€, one-time)")
    h2ice: float | None = Field(default=None, ge=0, description="H2ICE subsidy (€, one-time)")

    def get(self, fuel_type: FuelType) -> float | None:
        return getattr(self, fuel_type, None)


class PresetDefaults(CamelModel):
    """Nested default values bundled with a preset."""

    maintenance_cost_per_km: MaintenanceDefaults = Field(default_factory=MaintenanceDefaults)
    insurance_percentage: float | None = Field(
        default=None, ge=0,
        description="Annual insurance as % of purchase price. "
                    "Unset = engine-wide 2.5%.",
    )
    subsidies: SubsidyDefaults = Field(default_factory=SubsidyDefaults)


def _seed_defaults() -> PresetDefaults:
    return PresetDefaults(
        maintenance_cost_per_km=MaintenanceDefaults(diesel=0.15, bev=0.10, fcev=0.12, h2ice=0.14),
        insurance_percentage=2.5,
        subsidies=SubsidyDefaults(bev=10_000, fcev=15_000, h2ice=5_000),
    )


class RatePreset(CamelModel):
    """One versioned bundle of rates, prices and consumption baselines."""

    name: str = Field(default="NL 2026", description="Human label for this preset")
    year: int = Field(default=2026, ge=2000, le=2100, description="Tariff year")
    is_active: bool = Field(default=False, description="Exactly one preset is active at a time")
    updated_at: datetime | None = Field(default=None, description="Last modification time")

    # --- Taxes & tolls (€/year) ---
    motor_tax_per_year: float = Field(default=345.0, ge=0, description="Motor vehicle tax (€/year)")
    truck_toll_diesel: float = Field(default=2820.80, ge=0, description="Truck toll for diesel (€/year)")
    truck_toll_bev: float = Field(
        default=537.60, ge=0,
        description="Truck toll for zero-emission trucks (€/year). "
                    "Shared by BEV, FCEV and H2ICE.",
    )

    # --- Energy prices ---
    diesel_price_per_liter: float = Field(default=1.85, ge=0, description="Diesel price (€/L)")
    electricity_price_per_kwh: float = Field(default=0.35, ge=0, description="Electricity price (€/kWh)")
    hydrogen_price_per_kg: float = Field(
        default=10.0, ge=0,
        description="Hydrogen price (€/kg), used by FCEV and H2ICE",
    )

    # --- Consumption baselines (per 100 km) ---
    diesel_consumption: float = Field(default=25.0, ge=0, description="Diesel (L/100km)")
    bev_consumption: float = Field(default=120.0, ge=0, description="BEV (kWh/100km)")
    fcev_consumption: float = Field(default=8.0, ge=0, description="FCEV (kg H2/100km)")
    h2ice_consumption: float = Field(default=10.0, ge=0, description="H2ICE (kg H2/100km)")

    # --- Financial ---
    interest_rate: float = Field(default=3.5, ge=0, le=100, description="Interest rate (% per year)")
    depreciation_years: float = Field(default=5, gt=0, le=30, description="Ownership horizon (years)")

    default_values: PresetDefaults = Field(default_factory=_seed_defaults)
