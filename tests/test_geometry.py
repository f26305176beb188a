"""
Grid resolver and space geometry tests.
"""

import pytest

from qto.errors import GridLineNotFound, InvalidDimension, InvalidPolygon, LevelNotFound, UnknownBoundaryType
from qto.geometry.grid import GridIndex, as_grid_index, resolve_grid_offset, resolve_level_elevation
from qto.geometry.space import (
    compute_grid_rect_geometry,
    compute_opening_area,
    compute_polygon_geometry,
    compute_space_geometry,
)
from qto.models.project import Axis, GridLine, GridRectBoundary, GridSystem, PolygonBoundary, Space
from qto.trace import CollectingTraceSink


# ============================================================
# Grid resolver
# ============================================================

def test_resolve_grid_offset_finds_label(grid):
    """Offsets come straight from the axis array."""
    assert resolve_grid_offset(grid.grid_x, "B") == 5
    assert resolve_grid_offset(grid.grid_y, "3", axis="Y") == 12


def test_resolve_grid_offset_missing_label_lists_available(grid):
    """Missing label raises with the full list of available labels."""
    with pytest.raises(GridLineNotFound) as exc:
        resolve_grid_offset(grid.grid_x, "Z")
    assert exc.value.label == "Z"
    assert exc.value.available == ["A", "B", "C"]
    assert exc.value.axis == "X"


def test_index_offsets_reports_every_missing_label(index):
    """A multi-label lookup names all missing labels, not just the first."""
    with pytest.raises(GridLineNotFound) as exc:
        index.offsets(Axis.X, ["A", "Q", "R"])
    assert exc.value.labels == ["Q", "R"]


def test_index_first_duplicate_label_wins():
    """Duplicate labels resolve to the first occurrence."""
    grid = GridSystem(grid_x=[GridLine("A", 0), GridLine("A", 99)], grid_y=[])
    assert GridIndex(grid).offset(Axis.X, "A") == 0


def test_level_elevation_and_missing_level(levels):
    assert resolve_level_elevation(levels, "2F") == 3.0
    with pytest.raises(LevelNotFound) as exc:
        resolve_level_elevation(levels, "5F")
    assert exc.value.available == ["GF", "2F", "RF"]


def test_level_above(index):
    """Nearest higher level, None at the top."""
    assert index.level_above("GF").label == "2F"
    assert index.level_above("RF") is None


def test_as_grid_index_reuses_prepared_index(index, grid):
    assert as_grid_index(index) is index
    assert isinstance(as_grid_index(grid), GridIndex)


def test_index_records_grid_lookups(grid, levels):
    """Lookups report to the trace sink instead of printing."""
    trace = CollectingTraceSink()
    index = GridIndex(grid, levels, trace=trace)
    index.offsets(Axis.X, ["A", "B"])
    index.elevation("GF")
    assert trace.named("grid_lookup")[0].fields["offsets"] == [0, 5]
    assert trace.named("level_lookup")[0].fields["elevation"] == 0.0


# ============================================================
# Grid rectangle spaces
# ============================================================

def test_grid_rect_single_bay(grid):
    """A-B x 1-2 is 5 x 6: area 30, perimeter 22."""
    geom = compute_grid_rect_geometry(GridRectBoundary(("A", "B"), ("1", "2")), grid)
    assert geom.area_m2 == 30
    assert geom.perimeter_m == 22


def test_grid_rect_full_grid(grid):
    """A-C x 1-3 is 10 x 12: area 120, perimeter 44."""
    geom = compute_grid_rect_geometry(GridRectBoundary(("A", "C"), ("1", "3")), grid)
    assert geom.area_m2 == 120
    assert geom.perimeter_m == 44


def test_grid_rect_reversed_labels_same_result(grid):
    geom = compute_grid_rect_geometry(GridRectBoundary(("B", "A"), ("2", "1")), grid)
    assert geom.area_m2 == 30


def test_grid_rect_missing_label_raises(grid):
    with pytest.raises(GridLineNotFound):
        compute_grid_rect_geometry(GridRectBoundary(("A", "D"), ("1", "2")), grid)


@pytest.mark.parametrize("grid_x, grid_y, field", [
    (("A",), ("1", "2"), "boundary.gridX"),
    (("A", "B", "C"), ("1", "2"), "boundary.gridX"),
    (("A", "B"), (), "boundary.gridY"),
])
def test_grid_rect_needs_two_labels_per_axis(grid, grid_x, grid_y, field):
    with pytest.raises(InvalidDimension) as exc:
        compute_grid_rect_geometry(GridRectBoundary(grid_x, grid_y), grid)
    assert exc.value.field == field
    assert exc.value.value == list(grid_x if field.endswith("X") else grid_y)


def test_grid_rect_half_metre_bay_rounds_half_up():
    """3.5 x 2.875 = 10.0625 reports as 10.063, not the banker's 10.062."""
    bay = GridSystem(grid_x=[GridLine("P", 0), GridLine("Q", 3.5)],
                     grid_y=[GridLine("1", 0), GridLine("2", 2.875)])
    geom = compute_grid_rect_geometry(GridRectBoundary(("P", "Q"), ("1", "2")), bay)
    assert geom.area_m2 == 10.063
    assert geom.perimeter_m == 12.75


# ============================================================
# Polygon spaces
# ============================================================

def test_polygon_square():
    geom = compute_polygon_geometry([(0, 0), (4, 0), (4, 5), (0, 5)])
    assert geom.area_m2 == 20
    assert geom.perimeter_m == 18


def test_polygon_l_shape():
    geom = compute_polygon_geometry([(0, 0), (10, 0), (10, 5), (5, 5), (5, 10), (0, 10)])
    assert geom.area_m2 == 75
    assert geom.perimeter_m == 40


def test_polygon_triangle():
    geom = compute_polygon_geometry(PolygonBoundary(points=((0, 0), (6, 0), (3, 4))))
    assert geom.area_m2 == 12
    assert geom.perimeter_m == pytest.approx(16.0)


def test_polygon_winding_and_rotation_invariant():
    """Reversed winding and rotated start point give the same area."""
    points = [(0, 0), (10, 0), (10, 5), (5, 5), (5, 10), (0, 10)]
    reversed_pts = list(reversed(points))
    rotated = points[2:] + points[:2]
    base = compute_polygon_geometry(points)
    assert compute_polygon_geometry(reversed_pts) == base
    assert compute_polygon_geometry(rotated) == base


def test_polygon_area_rounds_half_up():
    geom = compute_polygon_geometry([(0, 0), (3.5, 0), (3.5, 2.875), (0, 2.875)])
    assert geom.area_m2 == 10.063


def test_polygon_two_points_raises():
    with pytest.raises(InvalidPolygon) as exc:
        compute_polygon_geometry([(0, 0), (1, 1)])
    assert exc.value.received == 2


def test_space_geometry_dispatch(grid):
    rect = Space("s1", "R", "GF", GridRectBoundary(("A", "B"), ("1", "2")))
    poly = Space("s2", "P", "GF", PolygonBoundary(((0, 0), (4, 0), (4, 5), (0, 5))))
    assert compute_space_geometry(rect, grid).area_m2 == 30
    assert compute_space_geometry(poly, grid).area_m2 == 20


def test_space_geometry_unknown_boundary(grid):
    space = Space("s3", "X", "GF", boundary="circle")
    with pytest.raises(UnknownBoundaryType):
        compute_space_geometry(space, grid)


# ============================================================
# Openings
# ============================================================

def test_opening_areas():
    assert compute_opening_area(0.9, 2.1, 1) == 1.89
    assert compute_opening_area(1.2, 1.5, 3) == 5.4
    assert compute_opening_area(1, 2, 0) == 0
    assert compute_opening_area(0.25, 0.25, 1) == 0.063
