"""Fuel types and their fixed physical constants."""

from typing import Literal

FuelType = Literal["diesel", "bev", "fcev", "h2ice"]

FUEL_TYPES: tuple[FuelType, ...] = ("diesel", "bev", "fcev", "h2ice")
"""Canonical order — used for iteration, tie-breaks and exports."""

FUEL_LABELS: dict[FuelType, str] = {
    "diesel": "Diesel",
    "bev": "BEV (Battery Electric)",
    "fcev": "FCEV (Fuel Cell Electric)",
    "h2ice": "H2ICE (Hydrogen Internal Combustion)",
}

FUEL_UNITS: dict[FuelType, str] = {
    "diesel": "L",
    "bev": "kWh",
    "fcev": "kg",
    "h2ice": "kg",
}

# kg CO2 per unit of energy carrier.  BEV uses the EU grid mix; hydrogen is
# assumed green.
CO2_KG_PER_UNIT: dict[FuelType, float] = {
    "diesel": 2.6,
    "bev": 0.4,
    "fcev": 0.0,
    "h2ice": 0.0,
}
