"""Preset resolution — pick the active preset and per-fuel baselines.

The single-active invariant is enforced at write time by
``PresetRegistry``: adding an active preset, or activating one, clears the
flag on every other preset.  ``resolve_preset`` still refuses an ambiguous
list, since callers may hand it presets from any source.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from pydantic import TypeAdapter

from truck_tco.config.fuel import FuelType
from truck_tco.config.preset import RatePreset
from truck_tco.errors import MissingPresetError, NoActivePresetError

logger = logging.getLogger(__name__)

DEFAULT_MAINTENANCE_COST_PER_KM = 0.15
DEFAULT_INSURANCE_PERCENTAGE = 2.5


@dataclass(frozen=True)
class FuelBaseline:
    """Preset values that apply to one fuel type."""

    fuel_type: FuelType
    consumption: float
    """Energy carrier per 100 km (L, kWh or kg)."""
    price_per_unit: float
    truck_toll: float
    """€/year; FCEV and H2ICE share the BEV rate."""
    maintenance_cost_per_km: float
    subsidy: float


def default_preset() -> RatePreset:
    """The seeded 2026 preset, marked active."""
    return RatePreset(is_active=True)


def fuel_baseline(preset: RatePreset, fuel_type: FuelType) -> FuelBaseline:
    """Resolve consumption, price, toll and per-fuel defaults for one fuel."""
    if fuel_type == "diesel":
        consumption = preset.diesel_consumption
        price = preset.diesel_price_per_liter
        toll = preset.truck_toll_diesel
    elif fuel_type == "bev":
        consumption = preset.bev_consumption
        price = preset.electricity_price_per_kwh
        toll = preset.truck_toll_bev
    elif fuel_type == "fcev":
        consumption = preset.fcev_consumption
        price = preset.hydrogen_price_per_kg
        toll = preset.truck_toll_bev
    elif fuel_type == "h2ice":
        consumption = preset.h2ice_consumption
        price = preset.hydrogen_price_per_kg
        toll = preset.truck_toll_bev
    else:
        raise ValueError(f"Unknown fuel type '{fuel_type}'")

    defaults = preset.default_values
    maintenance = defaults.maintenance_cost_per_km.get(fuel_type)
    subsidy = defaults.subsidies.get(fuel_type)

    return FuelBaseline(
        fuel_type=fuel_type,
        consumption=consumption,
        price_per_unit=price,
        truck_toll=toll,
        maintenance_cost_per_km=(
            maintenance if maintenance is not None else DEFAULT_MAINTENANCE_COST_PER_KM
        ),
        subsidy=subsidy if subsidy is not None else 0.0,
    )


def resolve_preset(presets: Iterable[RatePreset], year: int | None = None) -> RatePreset:
    """Return the one preset to calculate with.

    Parameters
    ----------
    presets : iterable of RatePreset
        Candidate presets, from any source.
    year : int | None
        ``None`` asks for the active preset.  A year asks for that year's
        preset; if several share the year, the active one wins.

    Raises
    ------
    NoActivePresetError
        Zero or several active presets where exactly one is needed.
    MissingPresetError
        No preset exists for the requested year.
    """
    candidates = list(presets)

    if year is not None:
        candidates = [p for p in candidates if p.year == year]
        if not candidates:
            raise MissingPresetError(f"No rate preset for year {year}")
        if len(candidates) == 1:
            return candidates[0]

    active = [p for p in candidates if p.is_active]
    if not active:
        raise NoActivePresetError("No active calculation preset found")
    if len(active) > 1:
        names = ", ".join(f"{p.name} ({p.year})" for p in active)
        raise NoActivePresetError(f"More than one active preset: {names}")
    return active[0]


class PresetRegistry:
    """In-memory preset store for the application layer."""

    def __init__(self, presets: Iterable[RatePreset] = ()) -> None:
        self._presets: list[RatePreset] = []
        for preset in presets:
            self.add(preset)

    @classmethod
    def from_json(cls, path: str | Path) -> PresetRegistry:
        """Load a JSON list of presets.

        Unknown keys (including per-fuel keys that are not a fuel type)
        raise ``pydantic.ValidationError``.
        """
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        presets = TypeAdapter(list[RatePreset]).validate_python(raw)
        logger.info("Loaded %d rate preset(s) from %s", len(presets), path)
        return cls(presets)

    def add(self, preset: RatePreset) -> RatePreset:
        """Store a preset.  An active preset deactivates all others."""
        if any(p.year == preset.year and p.name == preset.name for p in self._presets):
            raise ValueError(f"Preset '{preset.name}' ({preset.year}) already exists")
        if preset.is_active:
            self._deactivate_all()
        self._presets.append(preset)
        return preset

    def activate(self, year: int, name: str | None = None) -> RatePreset:
        """Make the preset for ``year`` the only active one.

        ``name`` picks one preset when several share the year; without it
        the year must resolve on its own.
        """
        if name is None:
            target = resolve_preset(self._presets, year)
        else:
            matches = [p for p in self._presets if p.year == year and p.name == name]
            if not matches:
                raise MissingPresetError(f"No rate preset '{name}' for year {year}")
            target = matches[0]
        index = self._presets.index(target)
        self._deactivate_all()
        activated = target.model_copy(update={"is_active": True})
        self._presets[index] = activated
        logger.info("Activated rate preset %s (%d)", activated.name, activated.year)
        return activated

    def active(self) -> RatePreset:
        return resolve_preset(self._presets)

    def get(self, year: int) -> RatePreset:
        return resolve_preset(self._presets, year)

    def all(self) -> list[RatePreset]:
        return sorted(self._presets, key=lambda p: p.year)

    def _deactivate_all(self) -> None:
        self._presets = [
            p.model_copy(update={"is_active": False}) if p.is_active else p
            for p in self._presets
        ]
