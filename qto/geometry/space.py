"""
Space Geometry Calculator

Area and perimeter of a 2D space, from either boundary variant:
- gridRect: two X labels and two Y labels resolved through the grid index
- polygon: shoelace area, perimeter summed over the implicitly closed ring

All results are rounded to 3 decimals.
"""

from typing import Optional, Sequence, Tuple, Union

import numpy as np

from ..errors import InvalidPolygon, UnknownBoundaryType
from ..models.project import (
    Axis,
    GridRectBoundary,
    GridSystem,
    PolygonBoundary,
    Space,
    SpaceGeometry,
)
from ..models.takeoff import round_half_up
from ..trace import NULL_TRACE, TraceSink
from .grid import GridIndex, as_grid_index

GEOMETRY_PLACES = 3


def compute_grid_rect_geometry(
    boundary: GridRectBoundary,
    grid: Union[GridSystem, GridIndex],
) -> SpaceGeometry:
    """
    Rectangle between two X grid lines and two Y grid lines.

    Args:
        boundary: Grid rectangle boundary
        grid: Grid system or prepared index

    Returns:
        SpaceGeometry with area = width * length, perimeter = 2 * (width + length)

    Raises:
        InvalidDimension: gridX or gridY is not exactly two labels
        GridLineNotFound: if any of the four labels is missing
    """
    index = as_grid_index(grid)
    x_start, x_end = index.span_offsets(Axis.X, boundary.grid_x, "boundary.gridX")
    y_start, y_end = index.span_offsets(Axis.Y, boundary.grid_y, "boundary.gridY")

    width = abs(x_end - x_start)
    length = abs(y_end - y_start)

    return SpaceGeometry(
        area_m2=round_half_up(width * length, GEOMETRY_PLACES),
        perimeter_m=round_half_up(2 * (width + length), GEOMETRY_PLACES),
    )


def compute_polygon_geometry(
    boundary: Union[PolygonBoundary, Sequence[Tuple[float, float]]],
    trace: Optional[TraceSink] = None,
) -> SpaceGeometry:
    """
    Shoelace area and ring perimeter of a polygon.

    Winding direction and starting point do not affect the result.

    Raises:
        InvalidPolygon: fewer than 3 points
    """
    points = boundary.points if isinstance(boundary, PolygonBoundary) else boundary
    if len(points) < 3:
        raise InvalidPolygon(len(points))

    pts = np.asarray(points, dtype=float)
    x, y = pts[:, 0], pts[:, 1]
    x_next, y_next = np.roll(x, -1), np.roll(y, -1)

    area = abs(float(np.sum(x * y_next - x_next * y))) / 2
    perimeter = float(np.sum(np.hypot(x_next - x, y_next - y)))

    (trace or NULL_TRACE).record("polygon_geometry", points=len(points), area=area, perimeter=perimeter)

    return SpaceGeometry(
        area_m2=round_half_up(area, GEOMETRY_PLACES),
        perimeter_m=round_half_up(perimeter, GEOMETRY_PLACES),
    )


def compute_space_geometry(
    space: Space,
    grid: Union[GridSystem, GridIndex],
    trace: Optional[TraceSink] = None,
) -> SpaceGeometry:
    """Dispatch on the boundary variant of a space."""
    boundary = space.boundary
    if isinstance(boundary, GridRectBoundary):
        return compute_grid_rect_geometry(boundary, grid)
    if isinstance(boundary, PolygonBoundary):
        return compute_polygon_geometry(boundary, trace=trace)

    raise UnknownBoundaryType(getattr(boundary, "boundary_type", type(boundary).__name__))


def compute_opening_area(width_m: float, height_m: float, qty: int = 1) -> float:
    """width * height * qty, rounded to 3 decimals."""
    return round_half_up(width_m * height_m * qty, GEOMETRY_PLACES)
