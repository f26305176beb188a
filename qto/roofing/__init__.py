"""
Roofing Module
Roof plane geometry (plan area, slope factor, sloped area) and covering takeoff.
"""

from .calculator import RoofingCalculator, RoofingResult
from .geometry import compute_plan_area, compute_roof_plane_geometry, compute_slope_factor
from .takeoff import ROOFING_TRADE, compute_roof_cover_takeoff

__all__ = [
    "RoofingCalculator",
    "RoofingResult",
    "compute_plan_area",
    "compute_roof_plane_geometry",
    "compute_slope_factor",
    "ROOFING_TRADE",
    "compute_roof_cover_takeoff",
]
