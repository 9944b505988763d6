"""Tests for input and preset validation."""

from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from truck_tco.config import CalculationInput, RatePreset, parse_calculation_input
from truck_tco.config.base import to_camel
from truck_tco.errors import (
    InvalidInputError,
    MissingPresetError,
    NoActivePresetError,
    ResolutionError,
    TCOError,
)

VALID = {"purchasePrice": 120_000, "kmPerYear": 50_000}


# ═══════════════════════════════════════════════════════════════════════════
# CalculationInput
# ═══════════════════════════════════════════════════════════════════════════

class TestParseCalculationInput:

    def test_camel_case_keys(self):
        inputs = parse_calculation_input({**VALID, "maintenanceCostPerKm": 0.2, "fuelType": "bev"})
        assert inputs.purchase_price == 120_000
        assert inputs.maintenance_cost_per_km == 0.2
        assert inputs.fuel_type == "bev"

    def test_snake_case_keys(self):
        inputs = parse_calculation_input({"purchase_price": 90_000, "km_per_year": 40_000})
        assert inputs.purchase_price == 90_000
        assert inputs.km_per_year == 40_000

    def test_numeric_strings_are_coerced(self):
        inputs = parse_calculation_input({"purchasePrice": "120000", "kmPerYear": "50000"})
        assert inputs.purchase_price == 120_000

    def test_overrides_default_to_none(self):
        inputs = parse_calculation_input(VALID)
        assert inputs.fuel_type == "diesel"
        for name in ("consumption", "motor_tax", "truck_toll", "subsidy", "interest_rate",
                     "depreciation_years", "maintenance_cost_per_km", "insurance_percentage"):
            assert getattr(inputs, name) is None

    @pytest.mark.parametrize("raw", [
        {"kmPerYear": 50_000},
        {**VALID, "purchasePrice": 0},
        {**VALID, "purchasePrice": -5},
        {**VALID, "kmPerYear": 0},
        {**VALID, "depreciationYears": 0},
        {**VALID, "interestRate": 101},
        {**VALID, "subsidy": -1},
        {**VALID, "fuelType": "lpg"},
        {**VALID, "unknownField": 1},
    ])
    def test_invalid_input(self, raw):
        with pytest.raises(InvalidInputError) as excinfo:
            parse_calculation_input(raw)
        assert not isinstance(excinfo.value, ResolutionError)
        assert isinstance(excinfo.value.__cause__, ValidationError)

    @pytest.mark.parametrize("raw", [
        {**VALID, "purchasePrice": "abc"},
        {**VALID, "kmPerYear": math.nan},
        {**VALID, "interestRate": "three"},
    ])
    def test_unparseable_number_is_resolution_error(self, raw):
        with pytest.raises(ResolutionError):
            parse_calculation_input(raw)

    def test_infinity_is_invalid_not_unresolved(self):
        with pytest.raises(InvalidInputError) as excinfo:
            parse_calculation_input({**VALID, "motorTax": math.inf})
        assert not isinstance(excinfo.value, ResolutionError)

    def test_error_names_the_field(self):
        with pytest.raises(InvalidInputError, match="purchasePrice"):
            parse_calculation_input({**VALID, "purchasePrice": 0})


# ═══════════════════════════════════════════════════════════════════════════
# RatePreset
# ═══════════════════════════════════════════════════════════════════════════

class TestRatePreset:

    def test_seeded_values(self):
        p = RatePreset()
        assert p.year == 2026
        assert p.motor_tax_per_year == 345
        assert p.truck_toll_diesel == 2820.80
        assert p.truck_toll_bev == 537.60
        assert p.default_values.subsidies.get("diesel") is None
        assert p.default_values.subsidies.get("fcev") == 15_000
        assert p.default_values.maintenance_cost_per_km.get("bev") == 0.10

    def test_camel_case_document(self):
        p = RatePreset.model_validate({
            "name": "NL 2027",
            "year": 2027,
            "isActive": True,
            "motorTaxPerYear": 360,
            "h2iceConsumption": 11,
            "defaultValues": {
                "maintenanceCostPerKm": {"bev": 0.09},
                "insurancePercentage": 3,
                "subsidies": {"h2ice": 7_500},
            },
        })
        assert p.is_active
        assert p.motor_tax_per_year == 360
        assert p.h2ice_consumption == 11
        assert p.default_values.maintenance_cost_per_km.bev == 0.09
        assert p.default_values.maintenance_cost_per_km.diesel is None
        assert p.default_values.subsidies.h2ice == 7_500

    def test_unknown_top_level_key_rejected(self):
        with pytest.raises(ValidationError):
            RatePreset.model_validate({"lpgPricePerLiter": 1.1})

    def test_diesel_subsidy_rejected(self):
        with pytest.raises(ValidationError):
            RatePreset.model_validate({"defaultValues": {"subsidies": {"diesel": 1_000}}})

    def test_unknown_fuel_maintenance_rejected(self):
        with pytest.raises(ValidationError):
            RatePreset.model_validate({"defaultValues": {"maintenanceCostPerKm": {"lpg": 0.2}}})

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            RatePreset(diesel_price_per_liter=-1)

    def test_dump_uses_wire_names(self):
        dumped = RatePreset().model_dump(by_alias=True)
        assert "motorTaxPerYear" in dumped
        assert "h2iceConsumption" in dumped
        assert "maintenanceCostPerKm" in dumped["defaultValues"]


class TestAliases:

    @pytest.mark.parametrize("name,alias", [
        ("purchase_price", "purchasePrice"),
        ("h2ice_consumption", "h2iceConsumption"),
        ("co2_emissions", "co2Emissions"),
        ("fuel_type", "fuelType"),
        ("year", "year"),
    ])
    def test_to_camel(self, name, alias):
        assert to_camel(name) == alias


class TestErrorHierarchy:

    def test_input_errors_are_value_errors(self):
        assert issubclass(InvalidInputError, ValueError)
        assert issubclass(ResolutionError, InvalidInputError)

    def test_preset_errors_are_lookup_errors(self):
        assert issubclass(MissingPresetError, LookupError)
        assert issubclass(NoActivePresetError, MissingPresetError)

    def test_single_root(self):
        for exc in (InvalidInputError, ResolutionError, MissingPresetError, NoActivePresetError):
            assert issubclass(exc, TCOError)

    def test_calculation_input_raises_pydantic_directly(self):
        with pytest.raises(ValidationError):
            CalculationInput(purchase_price=0, km_per_year=1)

    def test_parse_is_the_domain_error_boundary(self):
        raw = {"purchase_price": 0, "km_per_year": 1}
        with pytest.raises(ValidationError):
            CalculationInput(**raw)
        with pytest.raises(InvalidInputError) as excinfo:
            parse_calculation_input(raw)
        assert not isinstance(excinfo.value, ValidationError)
        assert "parse_calculation_input" in CalculationInput.__doc__
