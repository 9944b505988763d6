"""Result models — calculation output contracts."""

from truck_tco.models.results import (
    CalculationMetadata,
    CapexOpexSplit,
    CashFlowPoint,
    ComparisonSummary,
    CostBreakdown,
    CostComponents,
    FuelRanking,
    TCOResult,
)

__all__ = [
    "CalculationMetadata",
    "CapexOpexSplit",
    "CashFlowPoint",
    "ComparisonSummary",
    "CostBreakdown",
    "CostComponents",
    "FuelRanking",
    "TCOResult",
]
