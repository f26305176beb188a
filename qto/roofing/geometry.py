"""
Roof Plane Geometry

Plan area of a roof plane comes from its boundary exactly like a space
(grid rectangle or shoelace polygon). The slope factor converts plan area
to the true sloped area:

    ratio mode:   factor = sqrt(1 + (rise/run)^2)
    degrees mode: factor = 1 / cos(angle)
"""

import math
from typing import Optional, Union

from ..errors import InvalidDimension, UnknownBoundaryType
from ..geometry.grid import GridIndex
from ..geometry.space import GEOMETRY_PLACES, compute_grid_rect_geometry, compute_polygon_geometry
from ..models.project import (
    GridRectBoundary,
    GridSystem,
    PolygonBoundary,
    RoofPlane,
    RoofPlaneGeometry,
    RoofSlope,
    SlopeMode,
)
from ..models.takeoff import round_half_up
from ..trace import NULL_TRACE, TraceSink

SLOPE_FACTOR_PLACES = 4


def compute_slope_factor(slope: RoofSlope) -> float:
    """
    Sloped-to-plan area ratio.

    Raises:
        InvalidDimension: negative ratio, or an angle outside [0, 90) degrees
    """
    if slope.mode is SlopeMode.RATIO:
        if slope.value < 0:
            raise InvalidDimension("slope.value", slope.value, "rise/run ratio must be >= 0")
        return math.sqrt(1 + slope.value * slope.value)

    if not 0 <= slope.value < 90:
        raise InvalidDimension("slope.value", slope.value, "pitch must be in [0, 90) degrees")
    return 1 / math.cos(math.radians(slope.value))


def compute_plan_area(plane: RoofPlane, grid: Union[GridSystem, GridIndex],
                      trace: Optional[TraceSink] = None) -> float:
    boundary = plane.boundary
    if isinstance(boundary, GridRectBoundary):
        return compute_grid_rect_geometry(boundary, grid).area_m2
    if isinstance(boundary, PolygonBoundary):
        return compute_polygon_geometry(boundary, trace=trace).area_m2

    raise UnknownBoundaryType(getattr(boundary, "boundary_type", type(boundary).__name__))


def compute_roof_plane_geometry(
    plane: RoofPlane,
    grid: Union[GridSystem, GridIndex],
    trace: Optional[TraceSink] = None,
) -> RoofPlaneGeometry:
    """
    Plan area, slope factor and sloped area of one roof plane.

    Raises:
        GridLineNotFound, InvalidDimension, InvalidPolygon, UnknownBoundaryType
    """
    plan_area = compute_plan_area(plane, grid, trace=trace)
    factor = compute_slope_factor(plane.slope)
    slope_area = plan_area * factor

    (trace or NULL_TRACE).record("roof_plane_geometry", plane=plane.id, plan_area=plan_area,
                                 slope_factor=factor, slope_area=slope_area)

    return RoofPlaneGeometry(
        plan_area_m2=plan_area,
        slope_factor=round_half_up(factor, SLOPE_FACTOR_PLACES),
        slope_area_m2=round_half_up(slope_area, GEOMETRY_PLACES),
    )
