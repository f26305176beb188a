"""
Geometry Module
Grid resolution, space geometry and wall surface geometry.

Provides:
- GridIndex label lookups (built once per calc run)
- Grid-rectangle and polygon area/perimeter
- Wall surface length/height/area and pre-commit validation
"""

from .grid import GridIndex, as_grid_index, resolve_grid_offset, resolve_level_elevation
from .space import (
    compute_grid_rect_geometry,
    compute_polygon_geometry,
    compute_space_geometry,
    compute_opening_area,
)
from .wall_surface import (
    compute_grid_span_length,
    compute_level_height,
    get_sides_count,
    compute_wall_surface_geometry,
    validate_wall_surface,
    WallSurfaceValidation,
)

__all__ = [
    "GridIndex",
    "as_grid_index",
    "resolve_grid_offset",
    "resolve_level_elevation",
    "compute_grid_rect_geometry",
    "compute_polygon_geometry",
    "compute_space_geometry",
    "compute_opening_area",
    "compute_grid_span_length",
    "compute_level_height",
    "get_sides_count",
    "compute_wall_surface_geometry",
    "validate_wall_surface",
    "WallSurfaceValidation",
]
