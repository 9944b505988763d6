"""Calculation input — vehicle, usage and optional per-parameter overrides."""

import math
from typing import Any, Mapping

from pydantic import Field, ValidationError

from truck_tco.config.base import CamelModel
from truck_tco.config.fuel import FuelType
from truck_tco.errors import InvalidInputError, ResolutionError


class CalculationInput(CamelModel):
    """One user-supplied parameter set.

    Every override left at ``None`` falls back to the active preset (per
    fuel type where applicable).  ``consumption`` and ``truck_toll`` only
    feed the single-fuel live preview; the four-way comparison always uses
    the preset baselines.

    Build it through ``parse_calculation_input`` at any outer boundary: that
    is the validated entry point and raises ``InvalidInputError`` or
    ``ResolutionError``.  Constructing the model directly raises pydantic's
    ``ValidationError`` instead.
    """

    # --- Vehicle ---
    purchase_price: float = Field(gt=0, description="Vehicle purchase price (€)")
    gvw: float | None = Field(default=None, ge=0, description="Gross vehicle weight (kg), informational")
    payload: float | None = Field(default=None, ge=0, description="Payload (kg), informational")

    # --- Usage ---
    km_per_year: float = Field(gt=0, description="Annual distance (km)")
    fuel_type: FuelType = Field(
        default="diesel",
        description="Fuel type the user is considering — selects which row the "
                    "live preview overrides apply to.",
    )
    consumption: float | None = Field(
        default=None, ge=0,
        description="Consumption of the selected fuel per 100 km (preview only)",
    )

    # --- Taxes ---
    motor_tax: float | None = Field(default=None, ge=0, description="Motor tax (€/year)")
    truck_toll: float | None = Field(
        default=None, ge=0,
        description="Truck toll of the selected fuel (€/year, preview only)",
    )

    # --- Subsidy ---
    subsidy: float | None = Field(default=None, ge=0, description="One-time subsidy (€)")

    # --- Financial ---
    interest_rate: float | None = Field(default=None, ge=0, le=100, description="Interest (% per year)")
    depreciation_years: float | None = Field(default=None, gt=0, le=30, description="Ownership horizon (years)")

    # --- Extra ---
    maintenance_cost_per_km: float | None = Field(default=None, ge=0, description="Maintenance (€/km)")
    insurance_percentage: float | None = Field(
        default=None, ge=0, le=100,
        description="Annual insurance as % of purchase price",
    )


def parse_calculation_input(raw: Mapping[str, Any]) -> CalculationInput:
    """Validate a raw parameter mapping (camelCase or snake_case keys).

    Raises
    ------
    ResolutionError
        A numeric field could not be parsed, or parsed to NaN.
    InvalidInputError
        Any other constraint violation (missing or non-positive price,
        non-positive km/year, unknown fuel type, ...).
    """
    try:
        return CalculationInput.model_validate(dict(raw))
    except ValidationError as exc:
        errors = exc.errors()
        fields = ", ".join(".".join(str(p) for p in e["loc"]) for e in errors)
        if any(_is_nan_error(e) for e in errors):
            raise ResolutionError(f"non-numeric value for: {fields}") from exc
        raise InvalidInputError(f"invalid calculation input: {fields}") from exc


def _is_nan_error(error: dict[str, Any]) -> bool:
    if error["type"] in ("float_parsing", "float_type"):
        return True
    if error["type"] == "finite_number":
        try:
            return math.isnan(float(error.get("input")))
        except (TypeError, ValueError):
            return False
    return False
