"""Engine — preset resolution and the TCO calculation."""

from truck_tco.engine.presets import (
    FuelBaseline,
    PresetRegistry,
    default_preset,
    fuel_baseline,
    resolve_preset,
)
from truck_tco.engine.tco import (
    ResolvedParameters,
    aggregate_results,
    compute_fuel_tco,
    compute_tco,
    preview_selected_fuel,
    resolve_parameters,
    round_half_up,
)

__all__ = [
    "FuelBaseline",
    "PresetRegistry",
    "default_preset",
    "fuel_baseline",
    "resolve_preset",
    "ResolvedParameters",
    "aggregate_results",
    "compute_fuel_tco",
    "compute_tco",
    "preview_selected_fuel",
    "resolve_parameters",
    "round_half_up",
]
