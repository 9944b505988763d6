"""Shared test fixtures — the seeded 2026 preset and its reference vehicle."""

from __future__ import annotations

import pytest

from truck_tco.config import CalculationInput, RatePreset
from truck_tco.engine.presets import default_preset
from truck_tco.engine.tco import compute_tco
from truck_tco.models.results import TCOResult


@pytest.fixture
def preset() -> RatePreset:
    return default_preset()


@pytest.fixture
def inputs() -> CalculationInput:
    return CalculationInput(purchase_price=120_000, km_per_year=50_000)


@pytest.fixture
def result(inputs: CalculationInput, preset: RatePreset) -> TCOResult:
    return compute_tco(inputs, preset)
