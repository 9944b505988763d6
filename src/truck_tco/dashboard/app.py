"""Truck TCO Calculator — Streamlit dashboard.

Layout: sidebar inputs → main area with two tabs (Comparison | Cash flow).
The selected fuel type also gets a live preview that applies the user's
consumption and toll overrides.

Run with:
    streamlit run src/truck_tco/dashboard/app.py
"""

from __future__ import annotations

import os

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from truck_tco.config import (
    DRIVING_AREAS,
    FUEL_TYPES,
    RatePreset,
    parse_calculation_input,
)
from truck_tco.config.fuel import FUEL_LABELS, FUEL_UNITS
from truck_tco.engine.presets import PresetRegistry, default_preset, fuel_baseline
from truck_tco.engine.tco import compute_tco, preview_selected_fuel, resolve_parameters
from truck_tco.errors import InvalidInputError
from truck_tco.export.tables import breakdown_frame, cash_flow_frame, to_csv, to_excel
from truck_tco.finance.cashflow import capex_opex_split
from truck_tco.finance.comparison import compare_fuel_types
from truck_tco.models.results import CalculationMetadata

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(page_title="Truck TCO Calculator", page_icon="🚚", layout="wide")

_FUEL_COLORS = {
    "diesel": "#6366f1",
    "bev": "#22c55e",
    "fcev": "#06b6d4",
    "h2ice": "#a855f7",
}

_COST_LINES = [
    ("purchase_cost", "Purchase", "#3b82f6"),
    ("fuel_cost", "Fuel", "#f29100"),
    ("maintenance_cost", "Maintenance", "#10b981"),
    ("taxes_cost", "Taxes & toll", "#ef4444"),
    ("insurance_cost", "Insurance", "#8b5cf6"),
    ("interest_cost", "Interest", "#f59e0b"),
]


def _fmt_eur(val: float) -> str:
    """Format euros, thousands separated, no cents above €10k."""
    if abs(val) >= 10_000:
        return f"€{val:,.0f}"
    return f"€{val:,.2f}"


def _layout(fig: go.Figure, height: int = 360, **kwargs) -> None:
    fig.update_layout(
        height=height,
        margin=dict(l=20, r=20, t=30, b=20),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, x=0),
        **kwargs,
    )


@st.cache_resource
def _load_registry(path: str | None) -> PresetRegistry:
    return PresetRegistry.from_json(path) if path else PresetRegistry([default_preset()])


def _preset_label(preset: RatePreset) -> str:
    label = f"{preset.name} ({preset.year})"
    return f"{label} · active" if preset.is_active else label


# ---------------------------------------------------------------------------
# SIDEBAR — Inputs
# ---------------------------------------------------------------------------
registry = _load_registry(os.environ.get("TRUCK_TCO_PRESETS"))
presets = registry.all()

st.sidebar.header("Calculation Inputs")

if not presets:
    st.error("No rate presets configured. Set TRUCK_TCO_PRESETS to a preset JSON file.")
    st.stop()

# Presets are picked as objects, so two presets sharing a year never need
# the active flag to tell them apart.
default_index = next((i for i, p in enumerate(presets) if p.is_active), len(presets) - 1)

with st.sidebar.expander("Rate preset", expanded=False):
    preset = st.selectbox("Preset", presets, index=default_index, format_func=_preset_label)

with st.sidebar.expander("Vehicle & usage", expanded=True):
    vehicle_type = st.text_input("Vehicle type", "Trekker-oplegger")
    area_names = [a.name for a in DRIVING_AREAS]
    area_name = st.selectbox("Driving area", area_names, index=1)
    area = DRIVING_AREAS[area_names.index(area_name)]
    c1, c2 = st.columns(2)
    purchase_price = c1.number_input("Purchase price €", 1_000, 1_000_000, 120_000, 5_000)
    km_per_year = c2.number_input(
        "Km per year", 1_000, 500_000, int(area.default_km_per_year), 5_000,
        key=f"km_{area.name}",
    )
    c1, c2 = st.columns(2)
    gvw = c1.number_input("GVW kg", 0, 60_000, 40_000, 500)
    payload = c2.number_input("Payload kg", 0, 40_000, 25_000, 500)

with st.sidebar.expander("Financial", expanded=False):
    c1, c2 = st.columns(2)
    years_in = c1.number_input("Horizon years", 1.0, 30.0, float(preset.depreciation_years), 1.0)
    interest = c2.number_input("Interest %", 0.0, 25.0, float(preset.interest_rate), 0.1)
    c1, c2 = st.columns(2)
    motor_tax = c1.number_input("Motor tax €/yr", 0.0, 10_000.0, float(preset.motor_tax_per_year), 5.0)
    insurance = c2.number_input(
        "Insurance %", 0.0, 20.0,
        float(preset.default_values.insurance_percentage or 2.5), 0.1,
    )

with st.sidebar.expander("Overrides (optional)", expanded=False):
    st.caption("Leave at 0 to use the per-fuel preset default.")
    c1, c2 = st.columns(2)
    maintenance_in = c1.number_input("Maintenance €/km", 0.0, 5.0, 0.0, 0.01)
    subsidy_in = c2.number_input("Subsidy €", 0.0, 200_000.0, 0.0, 500.0)

with st.sidebar.expander("Live preview", expanded=True):
    fuel_type = st.selectbox("Fuel type", list(FUEL_TYPES), format_func=lambda f: FUEL_LABELS[f])
    base = fuel_baseline(preset, fuel_type)
    c1, c2 = st.columns(2)
    consumption_in = c1.number_input(
        f"{FUEL_UNITS[fuel_type]}/100km", 0.0, 500.0, float(base.consumption), 0.5,
        key=f"cons_{fuel_type}",
    )
    toll_in = c2.number_input(
        "Truck toll €/yr", 0.0, 20_000.0, float(base.truck_toll), 10.0,
        key=f"toll_{fuel_type}",
    )

try:
    inputs = parse_calculation_input(dict(
        purchase_price=purchase_price,
        km_per_year=km_per_year,
        gvw=gvw or None,
        payload=payload or None,
        fuel_type=fuel_type,
        consumption=consumption_in,
        truck_toll=toll_in,
        motor_tax=motor_tax,
        interest_rate=interest,
        depreciation_years=years_in,
        insurance_percentage=insurance,
        maintenance_cost_per_km=maintenance_in or None,
        subsidy=subsidy_in or None,
    ))
    result = compute_tco(inputs, preset)
    preview = preview_selected_fuel(inputs, preset)
except InvalidInputError as exc:
    st.error(f"Invalid input: {exc}")
    st.stop()

params = resolve_parameters(inputs, preset)
comparison = compare_fuel_types(result)
metadata = CalculationMetadata(
    vehicle_type=vehicle_type or None,
    driving_area=area.name,
    km_per_year=inputs.km_per_year,
    depreciation_years=params.depreciation_years,
    preset_year=preset.year,
)

# ---------------------------------------------------------------------------
# HEADLINE
# ---------------------------------------------------------------------------
st.title("Truck TCO Calculator")
st.caption(
    f"{preset.name} · {inputs.km_per_year:,.0f} km/year · "
    f"{params.depreciation_years:g} years · {params.total_km:,.0f} km total"
)

cheapest = result[comparison.cheapest]
h1, h2, h3, h4 = st.columns(4)
h1.metric("Lowest TCO", FUEL_LABELS[comparison.cheapest].split(" ")[0], _fmt_eur(cheapest.total_cost))
h2.metric("Cost per km", f"€{cheapest.cost_per_km:.2f}")
h3.metric(
    "Saving vs diesel",
    _fmt_eur(comparison.savings_vs_diesel) if comparison.savings_vs_diesel is not None else "—",
    f"{comparison.savings_vs_diesel_pct:.1f}%" if comparison.savings_vs_diesel_pct is not None else None,
)
h4.metric("Lowest CO2", FUEL_LABELS[comparison.lowest_co2].split(" ")[0],
          f"{result[comparison.lowest_co2].co2_emissions / 1000:,.1f} t")

comparison_tab, cashflow_tab = st.tabs(["Comparison", "Cash flow"])

# ═══════════════════════════════════════════════════════════════════════════
# ==================  COMPARISON TAB  =====================================
# ═══════════════════════════════════════════════════════════════════════════
with comparison_tab:
    st.header("Cost Breakdown")

    fig = go.Figure()
    labels = [FUEL_LABELS[b.fuel_type].split(" ")[0] for b in result.ordered()]
    for attr, name, color in _COST_LINES:
        fig.add_trace(go.Bar(
            x=labels,
            y=[getattr(b.breakdown, attr) for b in result.ordered()],
            name=name,
            marker_color=color,
        ))
    fig.add_trace(go.Bar(
        x=labels,
        y=[-b.breakdown.subsidy_credit for b in result.ordered()],
        name="Subsidy",
        marker_color="#22c55e",
    ))
    _layout(fig, barmode="relative", yaxis_title="€ over horizon")
    st.plotly_chart(fig, use_container_width=True)

    st.dataframe(breakdown_frame(result), use_container_width=True, hide_index=True)

    st.subheader("CAPEX vs OPEX")
    split_rows = []
    for b in result.ordered():
        split = capex_opex_split(b, params.depreciation_years)
        split_rows.append({
            "Fuel type": FUEL_LABELS[b.fuel_type],
            "CAPEX (€)": split.capex,
            "OPEX per year (€)": split.annual_opex,
            "Split": f"{split.capex_share_pct:.0f}% / {split.opex_share_pct:.0f}%",
        })
    st.dataframe(pd.DataFrame(split_rows), use_container_width=True, hide_index=True)

    st.subheader(f"Live preview — {FUEL_LABELS[fuel_type]}")
    authoritative = result[fuel_type]
    p1, p2, p3 = st.columns(3)
    p1.metric("Preview TCO", _fmt_eur(preview.total_cost),
              _fmt_eur(preview.total_cost - authoritative.total_cost), delta_color="inverse")
    p2.metric("Preview €/km", f"€{preview.cost_per_km:.2f}")
    p3.metric("Preview CO2", f"{preview.co2_emissions / 1000:,.1f} t")
    st.caption("The preview applies your consumption and toll for this fuel type only. "
               "The comparison above always uses the preset baselines.")

# ═══════════════════════════════════════════════════════════════════════════
# ==================  CASH FLOW TAB  ======================================
# ═══════════════════════════════════════════════════════════════════════════
with cashflow_tab:
    st.header("Cumulative Cash Flow")
    cf = cash_flow_frame(result, params.depreciation_years)

    fig_cf = go.Figure()
    for f in FUEL_TYPES:
        fig_cf.add_trace(go.Scatter(
            x=cf["Year"], y=cf[FUEL_LABELS[f]],
            mode="lines+markers",
            name=FUEL_LABELS[f].split(" ")[0],
            line=dict(color=_FUEL_COLORS[f], width=2),
        ))
    _layout(fig_cf, xaxis_title="Year", yaxis_title="Cumulative € (excl. interest)")
    st.plotly_chart(fig_cf, use_container_width=True)
    st.dataframe(cf, use_container_width=True, hide_index=True)

# ---------------------------------------------------------------------------
# Downloads
# ---------------------------------------------------------------------------
st.divider()
d1, d2 = st.columns(2)
with d1:
    st.download_button(
        "📥  Download results CSV",
        data=to_csv(result),
        file_name=f"tco-{preset.year}.csv",
        mime="text/csv",
        key="dl_csv",
    )
with d2:
    st.download_button(
        "📥  Download Excel workbook",
        data=to_excel(result, inputs, preset, metadata),
        file_name=f"tco-{preset.year}.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        key="dl_xlsx",
    )
