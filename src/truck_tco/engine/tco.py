"""TCO engine — lifetime cost of one truck under four powertrains.

For each fuel type f over an ownership horizon of N years:

  total_km    = km/year × N
  fuel        = km/year / 100 × consumption_f × price_f × N
  maintenance = total_km × €/km_f
  taxes       = (motor tax + truck toll_f) × N
  insurance   = purchase × insurance% / 100 × N
  interest    = purchase × interest% / 100 × N        (flat, never amortised)
  operating   = fuel + maintenance + taxes + insurance
  total       = purchase + operating + interest − subsidy_f

Money is rounded half-up to cents, CO2 to whole kg.  Totals are summed from
the rounded lines so the breakdown always adds up to the cent.

Pure and stateless: no I/O, no shared state, safe to call concurrently.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Iterable

from truck_tco.config.fuel import CO2_KG_PER_UNIT, FUEL_TYPES, FuelType
from truck_tco.config.inputs import CalculationInput
from truck_tco.config.preset import RatePreset
from truck_tco.engine.presets import DEFAULT_INSURANCE_PERCENTAGE, fuel_baseline
from truck_tco.errors import InvalidInputError, ResolutionError
from truck_tco.models.results import CostBreakdown, CostComponents, TCOResult


@dataclass(frozen=True)
class ResolvedParameters:
    """Parameters shared by all four fuel types, defaults applied.

    ``maintenance_cost_per_km`` and ``subsidy`` stay ``None`` when the user
    gave no override; their defaults are per fuel type.
    """

    purchase_price: float
    km_per_year: float
    depreciation_years: float
    interest_rate: float
    motor_tax: float
    insurance_percentage: float
    maintenance_cost_per_km: float | None
    subsidy: float | None

    @property
    def total_km(self) -> float:
        return self.km_per_year * self.depreciation_years


def round_half_up(value: float, digits: int = 2) -> float:
    """Round half away from −∞ (``floor(x·10ⁿ + 0.5) / 10ⁿ``)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _first(*values: float | None) -> float | None:
    for value in values:
        if value is not None:
            return value
    return None


def _require_finite(name: str, value: object) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ResolutionError(f"{name} is not a number: {value!r}") from exc
    if math.isnan(number):
        raise ResolutionError(f"{name} resolved to NaN")
    if math.isinf(number):
        raise InvalidInputError(f"{name} must be finite, got {number}")
    return number


def resolve_parameters(inputs: CalculationInput, preset: RatePreset) -> ResolvedParameters:
    """Apply preset defaults to the user's overrides and validate the result.

    Raises
    ------
    ResolutionError
        Any resolved number is NaN or not a number.
    InvalidInputError
        Any resolved number is infinite, or purchase price, km/year or the
        horizon is not strictly positive.
    """
    params = ResolvedParameters(
        purchase_price=inputs.purchase_price,
        km_per_year=inputs.km_per_year,
        depreciation_years=_first(inputs.depreciation_years, preset.depreciation_years),
        interest_rate=_first(inputs.interest_rate, preset.interest_rate),
        motor_tax=_first(inputs.motor_tax, preset.motor_tax_per_year),
        insurance_percentage=_first(
            inputs.insurance_percentage,
            preset.default_values.insurance_percentage,
            DEFAULT_INSURANCE_PERCENTAGE,
        ),
        maintenance_cost_per_km=inputs.maintenance_cost_per_km,
        subsidy=inputs.subsidy,
    )

    for field in fields(params):
        value = getattr(params, field.name)
        if value is not None or field.name not in ("maintenance_cost_per_km", "subsidy"):
            _require_finite(field.name, value)

    for name in ("purchase_price", "km_per_year", "depreciation_years"):
        if getattr(params, name) <= 0:
            raise InvalidInputError(f"{name} must be greater than 0")

    return params


def compute_fuel_tco(
    inputs: CalculationInput,
    preset: RatePreset,
    fuel_type: FuelType,
    *,
    consumption: float | None = None,
    truck_toll: float | None = None,
    params: ResolvedParameters | None = None,
) -> CostBreakdown:
    """Compute the lifetime cost breakdown for one fuel type.

    ``consumption`` and ``truck_toll`` replace the preset baseline of this
    fuel only when given; ``compute_tco`` never passes them.  ``params``
    lets a caller resolve the shared parameters once for several fuels.
    """
    if params is None:
        params = resolve_parameters(inputs, preset)
    baseline = fuel_baseline(preset, fuel_type)

    consumption = _require_finite("consumption", _first(consumption, baseline.consumption))
    truck_toll = _require_finite("truck_toll", _first(truck_toll, baseline.truck_toll))
    maintenance_per_km = _require_finite(
        "maintenance_cost_per_km",
        _first(params.maintenance_cost_per_km, baseline.maintenance_cost_per_km),
    )
    subsidy = _require_finite("subsidy", _first(params.subsidy, baseline.subsidy))

    years = params.depreciation_years
    total_km = params.total_km

    # ── Purchase ───────────────────────────────────────────────────────
    # Enters at full price; there is no separate depreciation line.
    purchase_cost = params.purchase_price

    # ── Energy ─────────────────────────────────────────────────────────
    fuel_cost_per_year = (params.km_per_year / 100) * consumption * baseline.price_per_unit
    total_fuel_cost = fuel_cost_per_year * years

    # ── Maintenance ────────────────────────────────────────────────────
    total_maintenance_cost = total_km * maintenance_per_km

    # ── Motor tax + truck toll ─────────────────────────────────────────
    total_taxes_cost = (params.motor_tax + truck_toll) * years

    # ── Insurance ──────────────────────────────────────────────────────
    insurance_cost_per_year = purchase_cost * params.insurance_percentage / 100
    total_insurance_cost = insurance_cost_per_year * years

    # ── Interest ───────────────────────────────────────────────────────
    # Charged every year on the original purchase price.
    interest_cost_per_year = purchase_cost * params.interest_rate / 100
    total_interest_cost = interest_cost_per_year * years

    # ── Aggregate (from rounded lines) ─────────────────────────────────
    purchase_r = round_half_up(purchase_cost)
    fuel_r = round_half_up(total_fuel_cost)
    maintenance_r = round_half_up(total_maintenance_cost)
    taxes_r = round_half_up(total_taxes_cost)
    insurance_r = round_half_up(total_insurance_cost)
    interest_r = round_half_up(total_interest_cost)
    subsidy_r = round_half_up(subsidy)

    total_operating_cost = round_half_up(fuel_r + maintenance_r + taxes_r + insurance_r)
    total_cost = round_half_up(purchase_r + total_operating_cost + interest_r - subsidy_r)

    cost_per_km = total_cost / total_km

    # ── CO2 ────────────────────────────────────────────────────────────
    co2_emissions = total_km * consumption * CO2_KG_PER_UNIT[fuel_type] / 100

    return CostBreakdown(
        fuel_type=fuel_type,
        total_cost=total_cost,
        cost_per_km=round_half_up(cost_per_km),
        co2_emissions=int(round_half_up(co2_emissions, 0)),
        breakdown=CostComponents(
            purchase_cost=purchase_r,
            fuel_cost=fuel_r,
            maintenance_cost=maintenance_r,
            taxes_cost=taxes_r,
            insurance_cost=insurance_r,
            subsidy_credit=subsidy_r,
            interest_cost=interest_r,
            total_operating_cost=total_operating_cost,
        ),
    )


def aggregate_results(breakdowns: Iterable[CostBreakdown]) -> TCOResult:
    """Key breakdowns by fuel type.  Exactly one per fuel type is required."""
    collected: dict[FuelType, CostBreakdown] = {}
    for breakdown in breakdowns:
        if breakdown.fuel_type in collected:
            raise ValueError(f"Duplicate breakdown for '{breakdown.fuel_type}'")
        collected[breakdown.fuel_type] = breakdown

    missing = [f for f in FUEL_TYPES if f not in collected]
    if missing:
        raise ValueError(f"Missing breakdowns for: {', '.join(missing)}")

    return TCOResult(results={f: collected[f] for f in FUEL_TYPES})


def compute_tco(inputs: CalculationInput, preset: RatePreset) -> TCOResult:
    """Compute the authoritative four-way comparison.

    Every fuel type uses its preset consumption and toll; the user's single
    ``consumption`` / ``truck_toll`` overrides are ignored here.  Either all
    four breakdowns are returned or an error is raised.
    """
    params = resolve_parameters(inputs, preset)
    return aggregate_results(
        compute_fuel_tco(inputs, preset, fuel_type, params=params)
        for fuel_type in FUEL_TYPES
    )


def preview_selected_fuel(inputs: CalculationInput, preset: RatePreset) -> CostBreakdown:
    """Live preview for the user's chosen fuel type, overrides applied.

    Runs the same calculation path as ``compute_tco`` so the preview and the
    comparison can only differ by the two overrides.
    """
    return compute_fuel_tco(
        inputs,
        preset,
        inputs.fuel_type,
        consumption=inputs.consumption,
        truck_toll=inputs.truck_toll,
    )
