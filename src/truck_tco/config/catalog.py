"""Driving areas — the usage profiles offered by the wizard."""

from pydantic import Field

from truck_tco.config.base import CamelModel


class DrivingArea(CamelModel):
    """One usage profile; only ``default_km_per_year`` feeds the calculation."""

    name: str
    description: str = ""
    default_km_per_year: float = Field(gt=0, description="Typical annual distance (km)")


DRIVING_AREAS: tuple[DrivingArea, ...] = (
    DrivingArea(
        name="Regionaal",
        description="Distribution within one region, return to depot daily",
        default_km_per_year=40_000,
    ),
    DrivingArea(
        name="Nationaal",
        description="Trips across the Netherlands",
        default_km_per_year=60_000,
    ),
    DrivingArea(
        name="Nationaal+",
        description="National trips plus the border regions of BE and DE",
        default_km_per_year=80_000,
    ),
    DrivingArea(
        name="Internationaal",
        description="Long-haul European transport",
        default_km_per_year=120_000,
    ),
)


def get_driving_area(name: str) -> DrivingArea:
    """Look up a driving area by name (case-insensitive)."""
    for area in DRIVING_AREAS:
        if area.name.lower() == name.lower():
            return area
    raise KeyError(f"Unknown driving area '{name}'")
