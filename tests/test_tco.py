"""Tests for engine/tco.py — the four-fuel TCO calculation.

Reference vehicle on the seeded 2026 preset:
  purchase 120,000 €, 50,000 km/year, 5 years → 250,000 km.

  diesel  fuel = 500 × 25 L × 1.85 € × 5        = 115,625
          taxes = (345 + 2,820.80) × 5           =  15,829
  bev     fuel = 500 × 120 kWh × 0.35 € × 5      = 105,000
          taxes = (345 + 537.60) × 5             =   4,413
  all     insurance = 120,000 × 2.5% × 5         =  15,000
          interest  = 120,000 × 3.5% × 5         =  21,000
"""

from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from truck_tco.config import (
    FUEL_TYPES,
    CalculationInput,
    MaintenanceDefaults,
    PresetDefaults,
    RatePreset,
    SubsidyDefaults,
)
from truck_tco.engine.tco import (
    aggregate_results,
    compute_fuel_tco,
    compute_tco,
    preview_selected_fuel,
    resolve_parameters,
    round_half_up,
)
from truck_tco.errors import InvalidInputError, ResolutionError


# ═══════════════════════════════════════════════════════════════════════════
# Reference scenario
# ═══════════════════════════════════════════════════════════════════════════

class TestReferenceScenario:
    """Seeded preset, 120k € truck, 50k km/year."""

    def test_four_entries(self, result):
        assert set(result.results) == set(FUEL_TYPES)
        for fuel_type, breakdown in result.results.items():
            assert breakdown.fuel_type == fuel_type

    def test_diesel_breakdown(self, result):
        d = result["diesel"]
        b = d.breakdown
        assert b.purchase_cost == 120_000
        assert b.fuel_cost == 115_625
        assert b.maintenance_cost == 37_500
        assert b.taxes_cost == 15_829
        assert b.insurance_cost == 15_000
        assert b.interest_cost == 21_000
        assert b.subsidy_credit == 0
        assert b.total_operating_cost == 183_954
        assert d.total_cost == 324_954
        assert d.cost_per_km == 1.30
        assert d.co2_emissions == 162_500

    def test_bev_breakdown(self, result):
        d = result["bev"]
        b = d.breakdown
        assert b.fuel_cost == 105_000
        assert b.maintenance_cost == 25_000
        assert b.taxes_cost == 4_413
        assert b.insurance_cost == 15_000
        assert b.interest_cost == 21_000
        assert b.subsidy_credit == 10_000
        assert b.total_operating_cost == 149_413
        assert d.total_cost == 280_413
        assert d.cost_per_km == 1.12
        assert d.co2_emissions == 120_000

    def test_fcev_breakdown(self, result):
        d = result["fcev"]
        assert d.breakdown.fuel_cost == 200_000          # 500 × 8 kg × 10 € × 5
        assert d.breakdown.maintenance_cost == 30_000    # 250,000 km × 0.12
        assert d.breakdown.subsidy_credit == 15_000
        assert d.total_cost == 375_413
        assert d.cost_per_km == 1.50

    def test_h2ice_breakdown(self, result):
        d = result["h2ice"]
        assert d.breakdown.fuel_cost == 250_000          # 500 × 10 kg × 10 € × 5
        assert d.breakdown.maintenance_cost == 35_000    # 250,000 km × 0.14
        assert d.breakdown.subsidy_credit == 5_000
        assert d.total_cost == 440_413
        assert d.cost_per_km == 1.76

    def test_hydrogen_is_zero_emission(self, result):
        assert result["fcev"].co2_emissions == 0
        assert result["h2ice"].co2_emissions == 0


# ═══════════════════════════════════════════════════════════════════════════
# Invariants
# ═══════════════════════════════════════════════════════════════════════════

class TestInvariants:
    """Relationships that hold for every breakdown."""

    @pytest.mark.parametrize("purchase_price,km_per_year", [
        (120_000, 50_000),
        (87_333.33, 41_234.5),
        (250_000, 133_333),
        (133_777.77, 77_777.7),
        (61_234.56, 12_345.67),
        (1, 1),
    ])
    def test_operating_and_total_add_up(self, preset, purchase_price, km_per_year):
        result = compute_tco(
            CalculationInput(purchase_price=purchase_price, km_per_year=km_per_year),
            preset,
        )
        for d in result.ordered():
            b = d.breakdown
            operating = b.fuel_cost + b.maintenance_cost + b.taxes_cost + b.insurance_cost
            assert b.total_operating_cost == round_half_up(operating)
            total = b.purchase_cost + b.total_operating_cost + b.interest_cost - b.subsidy_credit
            assert d.total_cost == round_half_up(total)

    def test_money_is_rounded_to_cents(self, preset):
        result = compute_tco(
            CalculationInput(purchase_price=99_999.999, km_per_year=33_333.333),
            preset,
        )
        for d in result.ordered():
            for value in d.breakdown.model_dump().values():
                assert value == pytest.approx(round(value, 2), abs=1e-9)
            assert isinstance(d.co2_emissions, int)

    def test_idempotent(self, inputs, preset):
        first = compute_tco(inputs, preset)
        second = compute_tco(inputs, preset)
        assert first.model_dump_json() == second.model_dump_json()

    @pytest.mark.parametrize("fuel_type", FUEL_TYPES)
    def test_more_km_costs_more(self, preset, fuel_type):
        low = compute_tco(CalculationInput(purchase_price=120_000, km_per_year=50_000), preset)
        high = compute_tco(CalculationInput(purchase_price=120_000, km_per_year=60_000), preset)
        assert high[fuel_type].breakdown.fuel_cost > low[fuel_type].breakdown.fuel_cost
        assert high[fuel_type].breakdown.maintenance_cost > low[fuel_type].breakdown.maintenance_cost
        assert high[fuel_type].total_cost > low[fuel_type].total_cost

    @pytest.mark.parametrize("motor_tax,years", [(345, 5), (0, 3), (1_200, 7.5)])
    def test_fcev_and_h2ice_share_the_bev_toll(self, preset, motor_tax, years):
        result = compute_tco(
            CalculationInput(
                purchase_price=150_000, km_per_year=80_000,
                motor_tax=motor_tax, depreciation_years=years,
            ),
            preset,
        )
        motor_part = motor_tax * years
        fcev_toll = result["fcev"].breakdown.taxes_cost - motor_part
        h2ice_toll = result["h2ice"].breakdown.taxes_cost - motor_part
        bev_toll = result["bev"].breakdown.taxes_cost - motor_part
        assert fcev_toll == pytest.approx(h2ice_toll)
        assert fcev_toll == pytest.approx(bev_toll)
        assert fcev_toll == pytest.approx(preset.truck_toll_bev * years)

    def test_interest_is_flat_on_purchase_price(self, preset):
        inputs = CalculationInput(purchase_price=200_000, km_per_year=50_000, depreciation_years=8)
        result = compute_tco(inputs, preset)
        # 200,000 × 3.5% every year, no declining balance
        assert result["diesel"].breakdown.interest_cost == 56_000


# ═══════════════════════════════════════════════════════════════════════════
# Overrides and defaults
# ═══════════════════════════════════════════════════════════════════════════

class TestOverrides:
    """User overrides fall back to the preset; None means 'not given'."""

    def test_maintenance_override_applies_to_all_fuels(self, preset):
        inputs = CalculationInput(purchase_price=120_000, km_per_year=50_000, maintenance_cost_per_km=0.2)
        result = compute_tco(inputs, preset)
        for d in result.ordered():
            assert d.breakdown.maintenance_cost == 50_000

    def test_subsidy_override_applies_to_all_fuels(self, preset):
        inputs = CalculationInput(purchase_price=120_000, km_per_year=50_000, subsidy=2_000)
        result = compute_tco(inputs, preset)
        for d in result.ordered():
            assert d.breakdown.subsidy_credit == 2_000

    def test_explicit_zero_is_honoured(self, preset):
        inputs = CalculationInput(
            purchase_price=120_000, km_per_year=50_000,
            interest_rate=0, subsidy=0, motor_tax=0,
        )
        result = compute_tco(inputs, preset)
        assert result["bev"].breakdown.interest_cost == 0
        assert result["bev"].breakdown.subsidy_credit == 0
        assert result["bev"].breakdown.taxes_cost == pytest.approx(537.60 * 5)

    def test_horizon_override(self, preset):
        inputs = CalculationInput(purchase_price=120_000, km_per_year=50_000, depreciation_years=7)
        d = compute_tco(inputs, preset)["diesel"]
        assert d.breakdown.fuel_cost == 161_875            # 23,125 × 7
        assert d.breakdown.maintenance_cost == 52_500      # 350,000 km × 0.15
        assert d.co2_emissions == 227_500

    def test_consumption_and_toll_do_not_leak_into_comparison(self, inputs, preset, result):
        overridden = inputs.model_copy(update={"consumption": 40.0, "truck_toll": 100.0})
        assert compute_tco(overridden, preset) == result

    def test_preset_insurance_percentage_used(self, inputs):
        preset = RatePreset(
            is_active=True,
            default_values=PresetDefaults(insurance_percentage=3.0),
        )
        result = compute_tco(inputs, preset)
        assert result["diesel"].breakdown.insurance_cost == 18_000

    def test_missing_defaults_fall_back(self, inputs):
        preset = RatePreset(
            is_active=True,
            default_values=PresetDefaults(
                maintenance_cost_per_km=MaintenanceDefaults(),
                subsidies=SubsidyDefaults(),
            ),
        )
        result = compute_tco(inputs, preset)
        for d in result.ordered():
            assert d.breakdown.maintenance_cost == 37_500   # 0.15 €/km fallback
            assert d.breakdown.subsidy_credit == 0
            assert d.breakdown.insurance_cost == 15_000     # 2.5% fallback

    def test_resolve_parameters(self, inputs, preset):
        params = resolve_parameters(inputs, preset)
        assert params.depreciation_years == 5
        assert params.interest_rate == 3.5
        assert params.motor_tax == 345
        assert params.insurance_percentage == 2.5
        assert params.maintenance_cost_per_km is None
        assert params.subsidy is None
        assert params.total_km == 250_000


# ═══════════════════════════════════════════════════════════════════════════
# Live preview
# ═══════════════════════════════════════════════════════════════════════════

class TestPreview:
    """Single-fuel preview runs the same path with two extra overrides."""

    def test_preview_without_overrides_matches_comparison(self, preset, result):
        inputs = CalculationInput(purchase_price=120_000, km_per_year=50_000, fuel_type="bev")
        assert preview_selected_fuel(inputs, preset) == result["bev"]

    def test_preview_applies_consumption_and_toll(self, preset):
        inputs = CalculationInput(
            purchase_price=120_000, km_per_year=50_000,
            fuel_type="diesel", consumption=30, truck_toll=1_000,
        )
        preview = preview_selected_fuel(inputs, preset)
        assert preview.fuel_type == "diesel"
        assert preview.breakdown.fuel_cost == 138_750      # 500 × 30 × 1.85 × 5
        assert preview.breakdown.taxes_cost == 6_725       # (345 + 1,000) × 5
        assert preview.co2_emissions == 195_000

    def test_compute_fuel_tco_overrides_only_that_fuel(self, inputs, preset):
        b = compute_fuel_tco(inputs, preset, "h2ice", truck_toll=0)
        assert b.breakdown.taxes_cost == 1_725             # motor tax only


# ═══════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════

class TestErrors:
    """Failures are raised before any result is assembled."""

    @pytest.mark.parametrize("field", ["purchase_price", "km_per_year"])
    @pytest.mark.parametrize("value", [0, -1])
    def test_non_positive_required_field(self, inputs, preset, field, value):
        setattr(inputs, field, value)
        with pytest.raises(InvalidInputError):
            compute_tco(inputs, preset)

    def test_nan_override_raises_resolution_error(self, inputs, preset):
        inputs.interest_rate = float("nan")
        with pytest.raises(ResolutionError):
            compute_tco(inputs, preset)

    def test_infinite_override_is_invalid(self, inputs, preset):
        inputs.motor_tax = math.inf
        with pytest.raises(InvalidInputError) as excinfo:
            compute_tco(inputs, preset)
        assert not isinstance(excinfo.value, ResolutionError)

    def test_non_numeric_override_raises_resolution_error(self, preset):
        inputs = CalculationInput.model_construct(
            purchase_price=120_000, km_per_year=50_000, subsidy="lots",
        )
        with pytest.raises(ResolutionError):
            compute_tco(inputs, preset)

    def test_nan_preview_consumption(self, inputs, preset):
        with pytest.raises(ResolutionError):
            compute_fuel_tco(inputs, preset, "diesel", consumption=float("nan"))

    def test_errors_are_value_errors(self, inputs, preset):
        inputs.km_per_year = 0
        with pytest.raises(ValueError):
            compute_tco(inputs, preset)


# ═══════════════════════════════════════════════════════════════════════════
# Aggregation & rounding
# ═══════════════════════════════════════════════════════════════════════════

class TestAggregation:

    def test_missing_fuel_rejected(self, result):
        with pytest.raises(ValueError, match="h2ice"):
            aggregate_results([result["diesel"], result["bev"], result["fcev"]])

    def test_duplicate_fuel_rejected(self, result):
        with pytest.raises(ValueError, match="Duplicate"):
            aggregate_results([*result.ordered(), result["bev"]])

    def test_order_of_breakdowns_is_irrelevant(self, result):
        shuffled = aggregate_results(reversed(result.ordered()))
        assert shuffled == result
        assert list(shuffled.results) == list(FUEL_TYPES)

    def test_breakdowns_are_frozen(self, result):
        with pytest.raises(ValidationError):
            result["diesel"].total_cost = 0


class TestRounding:

    def test_half_up(self):
        assert round_half_up(0.125) == 0.13
        assert round_half_up(2.5, 0) == 3.0
        assert round_half_up(1.299816) == 1.30

    def test_negative_half_rounds_towards_positive(self):
        assert round_half_up(-0.125) == -0.12
