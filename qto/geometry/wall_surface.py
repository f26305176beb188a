"""
Wall Surface Geometry Calculator

Grid-based wall surface dimensions:
- Length from the span, measured on the cross axis (a wall on an X grid line
  spans gridY labels, and vice versa)
- Height from the difference between two level elevations
- Gross area, sides count (exterior 1, interior/both 2) and total area

validate_wall_surface is a non-throwing pre-commit check that collects
every problem with a (possibly partial) wall definition.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence, Union

from ..models.project import (
    Axis,
    GridSystem,
    Level,
    SurfaceType,
    WallGridLine,
    WallSurface,
    WallSurfaceGeometry,
)
from ..models.takeoff import round_half_up
from .grid import GridIndex, as_grid_index

GEOMETRY_PLACES = 3

SIDES_BY_SURFACE_TYPE = {
    SurfaceType.EXTERIOR: 1,
    SurfaceType.INTERIOR: 2,
    SurfaceType.BOTH: 2,
}


def compute_grid_span_length(grid_line: WallGridLine, grid: Union[GridSystem, GridIndex]) -> float:
    """Absolute distance between the two span labels on the cross axis."""
    index = as_grid_index(grid)
    start, end = index.span_offsets(grid_line.axis.cross, grid_line.span, "gridLine.span")
    return abs(end - start)


def compute_level_height(level_start: str, level_end: str,
                         levels: Union[Sequence[Level], GridIndex]) -> float:
    """Absolute elevation difference between two named levels."""
    index = levels if isinstance(levels, GridIndex) else GridIndex(GridSystem(), levels)
    return abs(index.elevation(level_end) - index.elevation(level_start))


def get_sides_count(surface_type: Union[SurfaceType, str]) -> int:
    return SIDES_BY_SURFACE_TYPE[SurfaceType(surface_type)]


def compute_wall_surface_geometry(
    wall: WallSurface,
    grid: Union[GridSystem, GridIndex],
    levels: Sequence[Level] = (),
) -> WallSurfaceGeometry:
    """
    Compute length, height, gross/total area and sides count of a wall surface.

    Args:
        wall: Wall surface definition
        grid: Grid system or prepared index (an index already carries levels)
        levels: Levels, when a raw grid system is passed

    Returns:
        WallSurfaceGeometry rounded to 3 decimals

    Raises:
        InvalidDimension: span is not exactly two labels
        GridLineNotFound: span label missing on the cross axis
        LevelNotFound: start or end level missing
    """
    index = as_grid_index(grid, levels)

    length = compute_grid_span_length(wall.grid_line, index)
    height = compute_level_height(wall.level_start, wall.level_end, index)
    gross_area = length * height
    sides = get_sides_count(wall.surface_type)

    return WallSurfaceGeometry(
        length_m=round_half_up(length, GEOMETRY_PLACES),
        height_m=round_half_up(height, GEOMETRY_PLACES),
        gross_area_m2=round_half_up(gross_area, GEOMETRY_PLACES),
        sides_count=sides,
        total_area_m2=round_half_up(gross_area * sides, GEOMETRY_PLACES),
    )


@dataclass
class WallSurfaceValidation:
    valid: bool
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors)}


def _as_partial(wall: Union[WallSurface, Mapping[str, Any]]) -> Dict[str, Any]:
    if isinstance(wall, WallSurface):
        return {
            "name": wall.name,
            "gridLine": {
                "axis": wall.grid_line.axis.value,
                "label": wall.grid_line.label,
                "span": list(wall.grid_line.span),
            },
            "levelStart": wall.level_start,
            "levelEnd": wall.level_end,
            "surfaceType": wall.surface_type.value,
        }
    if isinstance(wall, Mapping):
        return dict(wall)
    return {}


def _text(value: Any) -> str:
    """Form fields may arrive as numbers or junk; labels are compared as text."""
    return "" if value is None else str(value)


def validate_wall_surface(
    wall: Union[WallSurface, Mapping[str, Any]],
    grid: Union[GridSystem, GridIndex],
    levels: Sequence[Level] = (),
) -> WallSurfaceValidation:
    """
    Collect every problem with a wall surface definition without raising.

    Args:
        wall: WallSurface or partial camelCase document from an editor form
        grid: Grid system or prepared index
        levels: Levels, when a raw grid system is passed

    Returns:
        WallSurfaceValidation(valid, errors)
    """
    index = as_grid_index(grid, levels)
    partial = _as_partial(wall)
    errors: List[str] = []

    if not partial.get("name"):
        errors.append("Wall surface name is required")
    grid_line = partial.get("gridLine")
    if not grid_line or not isinstance(grid_line, Mapping):
        grid_line = None
        errors.append("Grid line definition is required")
    if not partial.get("levelStart"):
        errors.append("Start level is required")
    if not partial.get("levelEnd"):
        errors.append("End level is required")
    if not partial.get("surfaceType"):
        errors.append("Surface type is required")

    if grid_line is not None:
        axis = Axis.X if str(grid_line.get("axis")) == "X" else Axis.Y
        label = _text(grid_line.get("label"))
        span = grid_line.get("span")

        if not index.has_line(axis, label):
            errors.append(f"Grid line {label} not found in grid{axis.value}")

        if isinstance(span, (list, tuple)) and len(span) == 2:
            start, end = (_text(v) for v in span)
            if not index.has_line(axis.cross, start):
                errors.append(f"Span start {start} not found")
            if not index.has_line(axis.cross, end):
                errors.append(f"Span end {end} not found")
        else:
            errors.append("Grid span must have exactly 2 labels [start, end]")

    level_start = _text(partial.get("levelStart"))
    level_end = _text(partial.get("levelEnd"))
    if level_start and not index.has_level(level_start):
        errors.append(f"Start level {level_start} not found")
    if level_end and not index.has_level(level_end):
        errors.append(f"End level {level_end} not found")

    return WallSurfaceValidation(valid=not errors, errors=errors)
