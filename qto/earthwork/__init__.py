"""
Earthwork Module
Excavation and embankment volumes from stations or closed-form shapes.
"""

from .calculator import EarthworkCalculator, EarthworkResult
from .excavation import (
    ExcavationOutput,
    ExcavationSegment,
    ExcavationVolumeResult,
    calculate_average_area_method,
    calculate_embankment_volume,
    calculate_prismoidal_method,
    calculate_rectangular_excavation,
    calculate_trench_excavation,
    round_volume,
    slope_correction_factor,
)

__all__ = [
    "EarthworkCalculator",
    "EarthworkResult",
    "ExcavationOutput",
    "ExcavationSegment",
    "ExcavationVolumeResult",
    "calculate_average_area_method",
    "calculate_embankment_volume",
    "calculate_prismoidal_method",
    "calculate_rectangular_excavation",
    "calculate_trench_excavation",
    "round_volume",
    "slope_correction_factor",
]
