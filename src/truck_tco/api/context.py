"""Self-describing parameter manifest for form builders and API clients.

``GET /parameters`` lists every calculation input and preset field with its
wire name, type, default and numeric constraints, so the wizard can be
generated from the models instead of duplicating them.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from truck_tco.config import CalculationInput, RatePreset


class ParameterInfo(BaseModel):
    """One configurable parameter, machine-readable."""
    name: str
    alias: str
    type: str
    required: bool
    default: Any
    description: str
    constraints: dict[str, Any] = Field(default_factory=dict)


class ParameterManifest(BaseModel):
    """Inputs the caller sends plus the preset fields they fall back to."""
    inputs: list[ParameterInfo]
    preset: list[ParameterInfo]


def _extract_params(model_cls: type[BaseModel]) -> list[ParameterInfo]:
    """Extract parameter info from a Pydantic model class."""
    params: list[ParameterInfo] = []
    for name, field_info in model_cls.model_fields.items():
        constraints: dict[str, Any] = {}
        for attr in ("ge", "gt", "le", "lt"):
            meta_val = _get_field_metadata(field_info, attr)
            if meta_val is not None:
                constraints[attr] = meta_val

        if field_info.is_required() or field_info.default_factory is not None:
            default_val = None
        else:
            default_val = field_info.default

        type_str = str(field_info.annotation) if field_info.annotation else "Any"
        type_str = type_str.replace("typing.", "").replace("<class '", "").replace("'>", "")

        params.append(ParameterInfo(
            name=name,
            alias=field_info.alias or name,
            type=type_str,
            required=field_info.is_required(),
            default=default_val,
            description=field_info.description or "",
            constraints=constraints,
        ))
    return params


def _get_field_metadata(field_info: Any, attr: str) -> Any:
    """Extract constraint metadata from Pydantic field info."""
    for m in getattr(field_info, "metadata", ()):
        if hasattr(m, attr):
            return getattr(m, attr)
    return None


def build_parameter_manifest() -> ParameterManifest:
    return ParameterManifest(
        inputs=_extract_params(CalculationInput),
        preset=_extract_params(RatePreset),
    )


def get_input_schema() -> dict:
    """Return the JSON Schema for CalculationInput (camelCase wire names)."""
    return CalculationInput.model_json_schema(by_alias=True)
