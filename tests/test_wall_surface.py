"""
Wall surface geometry and validation tests.
"""

import pytest

from qto.errors import GridLineNotFound, InvalidDimension, LevelNotFound
from qto.geometry.wall_surface import (
    compute_grid_span_length,
    compute_level_height,
    compute_wall_surface_geometry,
    get_sides_count,
    validate_wall_surface,
)
from qto.models.project import Axis, SurfaceType, WallGridLine, WallSurface


def _wall(axis="Y", label="3", span=("A", "C"), start="GF", end="2F", surface="exterior"):
    return WallSurface(
        id="ws-1",
        name="North Wall",
        grid_line=WallGridLine(Axis(axis), label, span),
        level_start=start,
        level_end=end,
        surface_type=SurfaceType(surface),
    )


def test_span_measured_on_cross_axis(grid):
    """A wall on a Y line spans X labels and vice versa."""
    assert compute_grid_span_length(WallGridLine(Axis.Y, "3", ("A", "C")), grid) == 10
    assert compute_grid_span_length(WallGridLine(Axis.X, "A", ("1", "3")), grid) == 12


def test_span_label_on_wrong_axis_raises(grid):
    with pytest.raises(GridLineNotFound):
        compute_grid_span_length(WallGridLine(Axis.X, "A", ("A", "B")), grid)


@pytest.mark.parametrize("span", [("A",), ("A", "B", "C"), ()])
def test_span_needs_exactly_two_labels(grid, span):
    with pytest.raises(InvalidDimension) as exc:
        compute_grid_span_length(WallGridLine(Axis.Y, "3", span), grid)
    assert exc.value.field == "gridLine.span"


def test_level_height_is_absolute(levels):
    assert compute_level_height("GF", "2F", levels) == 3.0
    assert compute_level_height("RF", "GF", levels) == 6.0


def test_level_height_missing_level(levels):
    with pytest.raises(LevelNotFound):
        compute_level_height("GF", "9F", levels)


def test_sides_count_by_surface_type():
    assert get_sides_count(SurfaceType.EXTERIOR) == 1
    assert get_sides_count("interior") == 2
    assert get_sides_count("both") == 2


def test_exterior_wall_geometry(grid, levels):
    """10 m span x 3 m storey, one side."""
    geom = compute_wall_surface_geometry(_wall(), grid, levels)
    assert geom.length_m == 10
    assert geom.height_m == 3
    assert geom.gross_area_m2 == 30
    assert geom.sides_count == 1
    assert geom.total_area_m2 == 30


def test_interior_wall_doubles_total(index):
    geom = compute_wall_surface_geometry(_wall(surface="interior", end="RF"), index)
    assert geom.gross_area_m2 == 60
    assert geom.total_area_m2 == 120


# ============================================================
# Validation
# ============================================================

def test_validate_good_wall(index):
    result = validate_wall_surface(_wall(), index)
    assert result.valid
    assert result.errors == []


def test_validate_collects_all_errors(index):
    """Every problem is reported; nothing raises."""
    partial = {
        "name": "",
        "gridLine": {"axis": "X", "label": "Z", "span": ["1", "9"]},
        "levelStart": "GF",
        "levelEnd": "9F",
    }
    result = validate_wall_surface(partial, index)
    assert not result.valid
    assert result.errors == [
        "Wall surface name is required",
        "Surface type is required",
        "Grid line Z not found in gridX",
        "Span end 9 not found",
        "End level 9F not found",
    ]


def test_validate_span_must_have_two_labels(index):
    partial = {
        "name": "W",
        "gridLine": {"axis": "Y", "label": "1", "span": ["A"]},
        "levelStart": "GF",
        "levelEnd": "2F",
        "surfaceType": "interior",
    }
    result = validate_wall_surface(partial, index)
    assert result.errors == ["Grid span must have exactly 2 labels [start, end]"]


def test_validate_missing_grid_line(index):
    result = validate_wall_surface({"name": "W", "levelStart": "GF", "levelEnd": "2F",
                                    "surfaceType": "both"}, index)
    assert result.to_dict() == {"valid": False, "errors": ["Grid line definition is required"]}


_FORM = {"name": "W", "levelStart": "GF", "levelEnd": "2F", "surfaceType": "interior"}


@pytest.mark.parametrize("grid_line", ["A", ["Y", "1"], 3])
def test_validate_grid_line_not_a_mapping(index, grid_line):
    result = validate_wall_surface({**_FORM, "gridLine": grid_line}, index)
    assert result.errors == ["Grid line definition is required"]


@pytest.mark.parametrize("span", ["AC", None, ["A", "B", "C"], {"start": "A"}, 7])
def test_validate_malformed_span_is_reported(index, span):
    result = validate_wall_surface({**_FORM, "gridLine": {"axis": "Y", "label": "1", "span": span}}, index)
    assert not result.valid
    assert result.errors == ["Grid span must have exactly 2 labels [start, end]"]


def test_validate_numeric_labels_compared_as_text(index):
    result = validate_wall_surface({**_FORM, "gridLine": {"axis": "X", "label": "A", "span": [1, 3]}}, index)
    assert result.valid


def test_validate_non_mapping_form(index):
    result = validate_wall_surface(None, index)
    assert not result.valid
    assert "Wall surface name is required" in result.errors
