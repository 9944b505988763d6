"""Tabular exports — pandas frames, CSV and Excel workbooks.

The Excel workbook has three sheets: Results, Parameters and Cash flow.
"""

from __future__ import annotations

import io

import pandas as pd

from truck_tco.config.fuel import FUEL_LABELS, FUEL_TYPES
from truck_tco.config.inputs import CalculationInput
from truck_tco.config.preset import RatePreset
from truck_tco.engine.presets import fuel_baseline
from truck_tco.engine.tco import resolve_parameters
from truck_tco.finance.cashflow import cumulative_cash_flow
from truck_tco.models.results import CalculationMetadata, TCOResult

BREAKDOWN_COLUMNS: list[tuple[str, str]] = [
    ("purchase_cost", "Purchase (€)"),
    ("fuel_cost", "Fuel (€)"),
    ("maintenance_cost", "Maintenance (€)"),
    ("taxes_cost", "Taxes & toll (€)"),
    ("insurance_cost", "Insurance (€)"),
    ("interest_cost", "Interest (€)"),
    ("subsidy_credit", "Subsidy (€)"),
    ("total_operating_cost", "Operating total (€)"),
]


def breakdown_frame(result: TCOResult) -> pd.DataFrame:
    """One row per fuel type, canonical order."""
    rows = []
    for b in result.ordered():
        row: dict[str, object] = {"Fuel type": FUEL_LABELS[b.fuel_type]}
        for attr, label in BREAKDOWN_COLUMNS:
            row[label] = getattr(b.breakdown, attr)
        row["Total cost (€)"] = b.total_cost
        row["Cost per km (€)"] = b.cost_per_km
        row["CO2 (kg)"] = b.co2_emissions
        rows.append(row)
    return pd.DataFrame(rows)


def parameters_frame(inputs: CalculationInput, preset: RatePreset) -> pd.DataFrame:
    """The resolved parameters the calculation actually used."""
    params = resolve_parameters(inputs, preset)
    rows: list[tuple[str, object]] = [
        ("Preset", f"{preset.name} ({preset.year})"),
        ("Purchase price (€)", params.purchase_price),
        ("Km per year", params.km_per_year),
        ("Ownership horizon (years)", params.depreciation_years),
        ("Interest rate (%)", params.interest_rate),
        ("Motor tax (€/year)", params.motor_tax),
        ("Insurance (% of price/year)", params.insurance_percentage),
    ]
    if inputs.gvw is not None:
        rows.append(("GVW (kg)", inputs.gvw))
    if inputs.payload is not None:
        rows.append(("Payload (kg)", inputs.payload))

    for fuel_type in FUEL_TYPES:
        base = fuel_baseline(preset, fuel_type)
        label = FUEL_LABELS[fuel_type]
        maintenance = (
            params.maintenance_cost_per_km
            if params.maintenance_cost_per_km is not None
            else base.maintenance_cost_per_km
        )
        subsidy = params.subsidy if params.subsidy is not None else base.subsidy
        rows += [
            (f"{label}: consumption per 100 km", base.consumption),
            (f"{label}: energy price (€/unit)", base.price_per_unit),
            (f"{label}: truck toll (€/year)", base.truck_toll),
            (f"{label}: maintenance (€/km)", maintenance),
            (f"{label}: subsidy (€)", subsidy),
        ]
    return pd.DataFrame(rows, columns=["Parameter", "Value"])


def cash_flow_frame(result: TCOResult, depreciation_years: float) -> pd.DataFrame:
    """Cumulative spend per year, one column per fuel type."""
    points = cumulative_cash_flow(result, depreciation_years)
    return pd.DataFrame(
        [{"Year": p.year, **{FUEL_LABELS[f]: p.cumulative[f] for f in FUEL_TYPES}} for p in points]
    )


def to_csv(result: TCOResult) -> str:
    """The results table as CSV text."""
    return breakdown_frame(result).to_csv(index=False)


def to_excel(
    result: TCOResult,
    inputs: CalculationInput,
    preset: RatePreset,
    metadata: CalculationMetadata | None = None,
) -> bytes:
    """Full workbook as ``.xlsx`` bytes."""
    params = resolve_parameters(inputs, preset)
    parameters = parameters_frame(inputs, preset)
    if metadata is not None:
        header = pd.DataFrame(
            [
                ("Vehicle type", metadata.vehicle_type or ""),
                ("Driving area", metadata.driving_area or ""),
                ("Calculated at", metadata.calculated_at.isoformat()),
            ],
            columns=["Parameter", "Value"],
        )
        parameters = pd.concat([header, parameters], ignore_index=True)

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        breakdown_frame(result).to_excel(writer, sheet_name="Results", index=False)
        parameters.to_excel(writer, sheet_name="Parameters", index=False)
        cash_flow_frame(result, params.depreciation_years).to_excel(
            writer, sheet_name="Cash flow", index=False,
        )
    return buffer.getvalue()
