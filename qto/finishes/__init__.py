"""
Finishes Takeoff Module
Calculates floor, ceiling and wall finish quantities.

Outputs:
- Floor and ceiling finish area per space
- Perimeter-based wall finish area per space, less openings
- Grid-based wall surface finish area, less openings, per side
"""

from .calculator import FinishCalculator, FinishesResult
from .deductions import OpeningDeduction, compute_opening_deduction, select_deductible_openings
from .takeoff import (
    apply_waste_and_rounding,
    compute_ceiling_finish_takeoff,
    compute_floor_finish_takeoff,
    compute_wall_finish_takeoff,
    compute_wall_surface_finish_takeoff,
    resolve_rounding,
    resolve_waste_percent,
)

__all__ = [
    "FinishCalculator",
    "FinishesResult",
    "OpeningDeduction",
    "compute_opening_deduction",
    "select_deductible_openings",
    "apply_waste_and_rounding",
    "compute_ceiling_finish_takeoff",
    "compute_floor_finish_takeoff",
    "compute_wall_finish_takeoff",
    "compute_wall_surface_finish_takeoff",
    "resolve_rounding",
    "resolve_waste_percent",
]
