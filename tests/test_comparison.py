"""Tests for finance/comparison.py — ranking and savings versus diesel."""

from __future__ import annotations

import pytest

from truck_tco.config import CalculationInput, RatePreset
from truck_tco.engine.tco import aggregate_results, compute_tco
from truck_tco.finance.comparison import compare_fuel_types


class TestReferenceComparison:
    """Seeded preset: BEV < diesel < FCEV < H2ICE."""

    def test_cheapest_and_ranking(self, result):
        summary = compare_fuel_types(result)
        assert summary.cheapest == "bev"
        assert [r.fuel_type for r in summary.ranking] == ["bev", "diesel", "fcev", "h2ice"]
        assert [r.rank for r in summary.ranking] == [1, 2, 3, 4]

    def test_deltas(self, result):
        deltas = {r.fuel_type: r.delta_vs_cheapest for r in compare_fuel_types(result).ranking}
        assert deltas == {"bev": 0, "diesel": 44_541, "fcev": 95_000, "h2ice": 160_000}

    def test_savings_vs_diesel(self, result):
        summary = compare_fuel_types(result)
        assert summary.savings_vs_diesel == 44_541
        assert summary.savings_vs_diesel_pct == pytest.approx(13.7)

    def test_lowest_co2_tie_keeps_canonical_order(self, result):
        # FCEV and H2ICE both emit 0 kg
        assert compare_fuel_types(result).lowest_co2 == "fcev"


class TestDieselCheapest:

    @pytest.fixture
    def summary(self, inputs):
        preset = RatePreset(
            is_active=True,
            electricity_price_per_kwh=1.50,
            hydrogen_price_per_kg=25.0,
        )
        return compare_fuel_types(compute_tco(inputs, preset))

    def test_no_savings_reported(self, summary):
        assert summary.cheapest == "diesel"
        assert summary.savings_vs_diesel is None
        assert summary.savings_vs_diesel_pct is None
        assert summary.ranking[0].delta_vs_cheapest == 0


class TestTies:

    def test_equal_totals_keep_canonical_order(self, preset, result):
        # Same breakdown relabelled for every fuel type: a four-way tie
        bev = result["bev"]
        tied = aggregate_results(
            bev.model_copy(update={"fuel_type": f}) for f in ("h2ice", "fcev", "bev", "diesel")
        )
        summary = compare_fuel_types(tied)
        assert summary.cheapest == "diesel"
        assert [r.fuel_type for r in summary.ranking] == ["diesel", "bev", "fcev", "h2ice"]
        assert summary.savings_vs_diesel is None

    def test_comparison_is_stable_across_runs(self, preset):
        inputs = CalculationInput(purchase_price=180_000, km_per_year=95_000)
        first = compare_fuel_types(compute_tco(inputs, preset))
        second = compare_fuel_types(compute_tco(inputs, preset))
        assert first == second
