"""FastAPI server — HTTP surface for the truck TCO calculator.

Run with:
    uvicorn truck_tco.api.server:app --reload --port 8000

Or:
    python -m truck_tco.api.server

Endpoints:
    GET  /health               — liveness probe
    GET  /schema               — JSON Schema for the calculation input
    GET  /parameters           — input + preset fields with defaults/constraints
    GET  /presets              — all rate presets
    GET  /presets/active       — the active rate preset
    GET  /driving-areas        — usage profiles with default km/year
    POST /calculate            — four-way TCO comparison
    POST /calculate/preview    — live preview of the selected fuel type
    POST /calculate/narrative  — plain-English interpretation
    POST /calculate/export     — CSV or Excel download

Presets are read from the JSON file named by ``TRUCK_TCO_PRESETS``; without
it the seeded 2026 preset is used.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Any, Literal

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import Field

from truck_tco.api.context import build_parameter_manifest, get_input_schema
from truck_tco.api.narrative import generate_narrative
from truck_tco.config import DRIVING_AREAS, CalculationInput, RatePreset, get_driving_area
from truck_tco.config.base import CamelModel
from truck_tco.config.inputs import parse_calculation_input
from truck_tco.engine.presets import PresetRegistry, default_preset
from truck_tco.engine.tco import compute_tco, preview_selected_fuel, resolve_parameters
from truck_tco.errors import InvalidInputError, MissingPresetError
from truck_tco.export.tables import to_csv, to_excel
from truck_tco.finance.comparison import compare_fuel_types
from truck_tco.models.results import CalculationMetadata, ComparisonSummary, TCOResult

logger = logging.getLogger(__name__)

PRESETS_ENV_VAR = "TRUCK_TCO_PRESETS"


# ═══════════════════════════════════════════════════════════════════════════
# App setup
# ═══════════════════════════════════════════════════════════════════════════

app = FastAPI(
    title="Truck TCO Calculator API",
    version="1.0",
    description=(
        "Total cost of ownership of a truck under four powertrains — diesel, "
        "battery-electric, fuel-cell-electric and hydrogen-combustion — over "
        "the ownership horizon, with itemised purchase, energy, maintenance, "
        "tax, insurance, interest and subsidy lines."
    ),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_registry() -> PresetRegistry:
    """Preset store shared by all requests."""
    path = os.environ.get(PRESETS_ENV_VAR)
    if path:
        return PresetRegistry.from_json(path)
    logger.info("%s not set; using the seeded default preset", PRESETS_ENV_VAR)
    return PresetRegistry([default_preset()])


@app.exception_handler(InvalidInputError)
async def _invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=422,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


@app.exception_handler(MissingPresetError)
async def _missing_preset_handler(request: Request, exc: MissingPresetError) -> JSONResponse:
    logger.error("No usable rate preset for %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=503,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


# ═══════════════════════════════════════════════════════════════════════════
# Request / response models
# ═══════════════════════════════════════════════════════════════════════════

class CalculateRequest(CamelModel):
    """Request body for /calculate and friends."""
    parameters: dict[str, Any] = Field(
        default_factory=dict,
        description="CalculationInput fields (camelCase or snake_case). "
                    "Example: {'purchasePrice': 120000, 'kmPerYear': 50000}",
    )
    vehicle_type: str | None = Field(default=None, description="Echoed in the metadata")
    driving_area: str | None = Field(
        default=None,
        description="Echoed in the metadata; supplies kmPerYear when it is omitted",
    )
    year: int | None = Field(default=None, description="Preset year; omit for the active preset")


class CalculateResponse(CamelModel):
    """Response from /calculate."""
    results: dict[str, Any]
    metadata: CalculationMetadata
    comparison: ComparisonSummary


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════

def _build_input(req: CalculateRequest) -> CalculationInput:
    """Validate parameters, taking km/year from the driving area if omitted."""
    raw = dict(req.parameters)
    if req.driving_area and "kmPerYear" not in raw and "km_per_year" not in raw:
        try:
            area = get_driving_area(req.driving_area)
        except KeyError as exc:
            raise InvalidInputError(str(exc)) from exc
        raw["kmPerYear"] = area.default_km_per_year
    return parse_calculation_input(raw)


def _resolve(req: CalculateRequest, registry: PresetRegistry) -> tuple[CalculationInput, RatePreset]:
    inputs = _build_input(req)
    preset = registry.get(req.year) if req.year is not None else registry.active()
    return inputs, preset


def _calculate(
    req: CalculateRequest, registry: PresetRegistry,
) -> tuple[CalculationInput, RatePreset, TCOResult, CalculationMetadata]:
    inputs, preset = _resolve(req, registry)
    result = compute_tco(inputs, preset)
    params = resolve_parameters(inputs, preset)
    metadata = CalculationMetadata(
        vehicle_type=req.vehicle_type,
        driving_area=req.driving_area,
        km_per_year=inputs.km_per_year,
        depreciation_years=params.depreciation_years,
        preset_year=preset.year,
    )
    logger.info(
        "Calculated TCO for %s km/year over %s years with preset %d",
        inputs.km_per_year, params.depreciation_years, preset.year,
    )
    return inputs, preset, result, metadata


# ═══════════════════════════════════════════════════════════════════════════
# Endpoints
# ═══════════════════════════════════════════════════════════════════════════

@app.get("/health")
def health_check():
    """Health check for deployment platforms."""
    return {"status": "ok"}


@app.get("/")
def root():
    """API root — returns a welcome message and pointers."""
    return {
        "name": "Truck TCO Calculator API",
        "version": "1.0",
        "start_here": "GET /parameters",
        "docs": "GET /docs (interactive Swagger UI)",
    }


@app.get("/schema")
def get_schema():
    """JSON Schema for the calculation input."""
    return get_input_schema()


@app.get("/parameters")
def get_parameters():
    """Every input and preset field with type, default and constraints."""
    return build_parameter_manifest()


@app.get("/presets")
def list_presets(registry: PresetRegistry = Depends(get_registry)):
    """All rate presets, oldest year first."""
    return [p.model_dump(mode="json", by_alias=True) for p in registry.all()]


@app.get("/presets/active")
def get_active_preset(registry: PresetRegistry = Depends(get_registry)):
    """The preset calculations use when no year is requested."""
    return registry.active().model_dump(mode="json", by_alias=True)


@app.get("/driving-areas")
def list_driving_areas():
    """Usage profiles, shortest annual distance first."""
    return [a.model_dump(by_alias=True) for a in DRIVING_AREAS]


@app.post("/calculate", response_model=CalculateResponse)
def calculate(req: CalculateRequest, registry: PresetRegistry = Depends(get_registry)):
    """Compute the TCO of all four fuel types.

    Example minimal request:
    ```json
    {"parameters": {"purchasePrice": 120000, "kmPerYear": 50000}}
    ```
    """
    _, _, result, metadata = _calculate(req, registry)
    return CalculateResponse(
        results=result.payload(),
        metadata=metadata,
        comparison=compare_fuel_types(result),
    )


@app.post("/calculate/preview")
def calculate_preview(req: CalculateRequest, registry: PresetRegistry = Depends(get_registry)):
    """Live preview of the selected fuel type with the user's consumption and
    toll overrides applied.  Not part of the authoritative comparison."""
    inputs, preset = _resolve(req, registry)
    return preview_selected_fuel(inputs, preset).model_dump(mode="json", by_alias=True)


@app.post("/calculate/narrative")
def calculate_narrative(req: CalculateRequest, registry: PresetRegistry = Depends(get_registry)):
    """Run the comparison and return a plain-English interpretation."""
    _, _, result, metadata = _calculate(req, registry)
    comparison = compare_fuel_types(result)
    return {
        "narrative": generate_narrative(result, metadata),
        "headlineMetrics": {
            "cheapest": comparison.cheapest,
            "lowestCo2": comparison.lowest_co2,
            "savingsVsDiesel": comparison.savings_vs_diesel,
            "costPerKm": {b.fuel_type: b.cost_per_km for b in result.ordered()},
        },
    }


_EXPORT_MEDIA_TYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


@app.post("/calculate/export")
def calculate_export(
    req: CalculateRequest,
    format: Literal["csv", "xlsx"] = Query(default="xlsx", description="File format"),
    registry: PresetRegistry = Depends(get_registry),
):
    """Run the comparison and return it as a downloadable file."""
    inputs, preset, result, metadata = _calculate(req, registry)
    if format == "csv":
        content: bytes = to_csv(result).encode("utf-8")
    else:
        content = to_excel(result, inputs, preset, metadata)
    return Response(
        content=content,
        media_type=_EXPORT_MEDIA_TYPES[format],
        headers={"Content-Disposition": f'attachment; filename="tco-{preset.year}.{format}"'},
    )


# ═══════════════════════════════════════════════════════════════════════════
# CLI entry point
# ═══════════════════════════════════════════════════════════════════════════

def main():
    """Run the API server."""
    import uvicorn
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(
        "truck_tco.api.server:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", "8000")),
        reload=True,
    )


if __name__ == "__main__":
    main()
