"""Configuration models — calculation inputs, rate presets, catalogues."""

from truck_tco.config.fuel import FUEL_TYPES, FuelType
from truck_tco.config.preset import (
    MaintenanceDefaults,
    PresetDefaults,
    RatePreset,
    SubsidyDefaults,
)
from truck_tco.config.inputs import CalculationInput, parse_calculation_input
from truck_tco.config.catalog import DRIVING_AREAS, DrivingArea, get_driving_area

__all__ = [
    "FUEL_TYPES",
    "FuelType",
    "MaintenanceDefaults",
    "PresetDefaults",
    "RatePreset",
    "SubsidyDefaults",
    "CalculationInput",
    "parse_calculation_input",
    "DRIVING_AREAS",
    "DrivingArea",
    "get_driving_area",
]
