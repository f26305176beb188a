"""
Finish takeoff tests: floor, ceiling, perimeter walls and grid-based wall surfaces.
"""

import dataclasses

import pytest

from qto.errors import InvalidDimension, ReferenceNotFound
from qto.finishes.calculator import FinishCalculator
from qto.finishes.takeoff import (
    apply_waste_and_rounding,
    compute_ceiling_finish_takeoff,
    compute_floor_finish_takeoff,
    compute_wall_finish_takeoff,
    compute_wall_surface_finish_takeoff,
    resolve_rounding,
    resolve_waste_percent,
)
from qto.models.project import (
    AssignmentOverrides,
    Axis,
    FinishAssumptions,
    Opening,
    SpaceFinishAssignment,
    SurfaceType,
    WallGridLine,
    WallSide,
    WallSurface,
    WallSurfaceFinishAssignment,
    WallSurfaceGeometry,
)


def _assign(finish_type, waste=None, height=None):
    return SpaceFinishAssignment(
        id="a-1", space_id="sp-1", finish_type_id=finish_type.id,
        overrides=AssignmentOverrides(waste_percent=waste, height_m=height),
    )


@pytest.fixture
def north_wall():
    return WallSurface(
        id="ws-1",
        name="North Wall",
        grid_line=WallGridLine(Axis.Y, "3", ("A", "C")),
        level_start="GF",
        level_end="2F",
        surface_type=SurfaceType.EXTERIOR,
        computed=WallSurfaceGeometry(length_m=10, height_m=3, gross_area_m2=30,
                                     sides_count=1, total_area_m2=30),
    )


# ============================================================
# Waste and rounding policy
# ============================================================

def test_waste_precedence(floor_tile):
    """Override beats finish default, and a zero override still counts."""
    assert resolve_waste_percent(floor_tile) == 0.05
    assert resolve_waste_percent(floor_tile, 0.1) == 0.1
    assert resolve_waste_percent(floor_tile, 0.0) == 0.0


def test_negative_waste_rejected(floor_tile):
    with pytest.raises(InvalidDimension):
        resolve_waste_percent(floor_tile, -0.05)


def test_rounding_default_is_three(ceiling_board, floor_tile):
    assert resolve_rounding(ceiling_board) == 3
    assert resolve_rounding(floor_tile) == 2


def test_apply_waste_only_to_positive_quantity():
    assert apply_waste_and_rounding(10, 0.05, 3) == 10.5
    assert apply_waste_and_rounding(0, 0.05, 3) == 0
    assert apply_waste_and_rounding(10.12345, 0, 2) == 10.12


def test_rounding_is_half_up():
    assert apply_waste_and_rounding(0.125, 0, 2) == 0.13
    assert apply_waste_and_rounding(2.0625, 0, 3) == 2.063
    assert apply_waste_and_rounding(1.0, 0.0125, 3) == 1.013


def test_waste_monotonic(room, floor_tile):
    """More waste never yields less quantity."""
    quantities = [
        compute_floor_finish_takeoff(room, floor_tile, _assign(floor_tile, waste=w)).quantity
        for w in (0.0, 0.02, 0.05, 0.1, 0.25)
    ]
    assert quantities == sorted(quantities)


# ============================================================
# Floor and ceiling
# ============================================================

def test_floor_with_waste(room, floor_tile):
    line = compute_floor_finish_takeoff(room, floor_tile, _assign(floor_tile))
    assert line.quantity == 31.5
    assert line.unit == "m²"
    assert line.trade == "Finishes"
    assert line.resource_key == "floor-ft-tile"
    assert line.formula_text == (
        "Floor finish area = Space.area × (1 + waste)\n= 30.000 × 1.050 = 31.50 m²"
    )
    assert line.assumptions == ("Waste: 5.0%",)
    assert "dpwh:1018 (1)" in line.tags
    assert "category:floor" in line.tags


def test_floor_rounding_places(room, floor_tile):
    """Quantity and formula carry exactly the configured places."""
    tile = dataclasses.replace(floor_tile, assumptions=FinishAssumptions(waste_percent=0.033, rounding=1))
    line = compute_floor_finish_takeoff(room, tile, _assign(tile))
    assert line.quantity == 31.0
    assert line.formula_text.endswith("= 31.0 m²")


def test_ceiling_plain(room, ceiling_board):
    line = compute_ceiling_finish_takeoff(room, ceiling_board, _assign(ceiling_board))
    assert line.quantity == 30.0
    assert line.formula_text == "Ceiling finish area = Space.area\n= 30.000 m²"


def test_ceiling_rounds_half_up(room, ceiling_board):
    hall = dataclasses.replace(room, computed=dataclasses.replace(room.computed, area_m2=2.0625))
    line = compute_ceiling_finish_takeoff(hall, ceiling_board, _assign(ceiling_board))
    assert line.quantity == 2.063


def test_ceiling_open_to_below_is_zero(room, ceiling_board):
    """Open to below yields 0 and no waste is applied."""
    line = compute_ceiling_finish_takeoff(room, ceiling_board, _assign(ceiling_board, waste=0.1),
                                          is_open_to_below=True)
    assert line.quantity == 0
    assert line.assumption("openToBelow") is not None


def test_ceiling_open_to_below_from_space(room, ceiling_board):
    space = dataclasses.replace(room, open_to_below=True)
    assert compute_ceiling_finish_takeoff(space, ceiling_board, _assign(ceiling_board)).quantity == 0


# ============================================================
# Perimeter-based walls
# ============================================================

def test_wall_full_height_with_deduction(room, wall_paint):
    """22 m x 3 m less a 1.89 m² door; the 0.09 m² vent stays."""
    openings = [
        Opening("d1", "door", 1.89, space_id="sp-1"),
        Opening("v1", "vent", 0.09, space_id="sp-1"),
        Opening("w9", "window", 4.0, space_id="sp-9"),
    ]
    line = compute_wall_finish_takeoff(room, wall_paint, _assign(wall_paint), openings, storey_height_m=3.0)
    assert line.quantity == pytest.approx(64.11)
    assert line.inputs_snapshot["grossWallArea"] == 66
    assert line.inputs_snapshot["openingDeduction"] == 1.89
    assert line.assumption("height").text == "Storey height: 3m"
    assert line.assumption("openingsDeducted").text == "Openings deducted: 1 (1.890m²)"


def test_wall_fixed_height_rule(room, wainscot):
    line = compute_wall_finish_takeoff(room, wainscot, _assign(wainscot, height=2.4), [], storey_height_m=3.0)
    assert line.quantity == pytest.approx(26.4)
    assert line.assumption("height").text == "Fixed height: 1.2m"


def test_wall_height_override(room, wall_paint):
    line = compute_wall_finish_takeoff(room, wall_paint, _assign(wall_paint, height=2.4), [], storey_height_m=3.0)
    assert line.quantity == pytest.approx(52.8)
    assert line.assumption("height").text == "Override height: 2.4m"


def test_wall_storey_height_note(room, wall_paint):
    line = compute_wall_finish_takeoff(room, wall_paint, _assign(wall_paint), [], storey_height_m=3.0,
                                       storey_height_note="default, no level above")
    assert line.assumption("height").text == "Storey height: 3m (default, no level above)"


def test_wall_net_area_clamped_at_zero(room, wall_paint):
    """Deductions larger than the wall give 0, never negative, even with waste."""
    openings = [Opening("big", "door", 500.0, space_id="sp-1")]
    line = compute_wall_finish_takeoff(room, wall_paint, _assign(wall_paint, waste=0.1), openings,
                                       storey_height_m=3.0)
    assert line.quantity == 0
    assert line.inputs_snapshot["netWallArea"] == 0


def test_wall_takeoff_idempotent(room, wall_paint):
    """Same inputs, same quantity, formula and assumptions; only the id differs."""
    openings = [Opening("d1", "door", 1.89, space_id="sp-1")]
    first = compute_wall_finish_takeoff(room, wall_paint, _assign(wall_paint), openings, storey_height_m=3.0)
    second = compute_wall_finish_takeoff(room, wall_paint, _assign(wall_paint), openings, storey_height_m=3.0)
    assert first.quantity == second.quantity
    assert first.formula_text == second.formula_text
    assert first.assumptions == second.assumptions
    assert first.id != second.id


# ============================================================
# Grid-based wall surfaces
# ============================================================

def test_wall_surface_single_side(north_wall, wall_paint):
    openings = [Opening("w1", "window", 5.4, wall_surface_id="ws-1")]
    line = compute_wall_surface_finish_takeoff(north_wall, wall_paint, openings)
    assert line.quantity == pytest.approx(24.6)
    assert line.resource_key == "wallsurface-ft-paint"
    assert "level:GF" in line.tags
    assert line.assumption("location").text == "Wall: Y = 3, Span: A-C, Levels: GF-2F"
    assert line.assumption("sides").text == "Surface type: exterior (1 side)"


def test_wall_surface_side_override(north_wall, wall_paint):
    openings = [Opening("w1", "window", 5.4, wall_surface_id="ws-1")]
    line = compute_wall_surface_finish_takeoff(north_wall, wall_paint, openings, side=WallSide.BOTH,
                                               scope="topcoat")
    assert line.quantity == pytest.approx(49.2)
    assert "scope:topcoat" in line.tags


def test_wall_surface_requires_geometry(north_wall, wall_paint):
    wall = dataclasses.replace(north_wall, computed=None)
    with pytest.raises(InvalidDimension):
        compute_wall_surface_finish_takeoff(wall, wall_paint, [])


# ============================================================
# Run-level calculator
# ============================================================

def test_calculator_subtotals(index, room, floor_tile, wall_paint, ceiling_board, settings):
    calc = FinishCalculator(settings)
    result = calc.calculate(
        index,
        [room],
        [Opening("d1", "door", 1.89, space_id="sp-1")],
        [floor_tile, wall_paint, ceiling_board],
        [_assign(floor_tile), _assign(wall_paint), _assign(ceiling_board)],
    )
    assert len(result.takeoff_lines) == 3
    assert result.total_floor_area == 31.5
    assert result.total_wall_area == pytest.approx(64.11)
    assert result.total_ceiling_area == 30.0


def test_calculator_top_level_uses_default_height(index, room, wall_paint, settings):
    roof_room = dataclasses.replace(room, level_id="RF")
    result = FinishCalculator(settings).calculate(index, [roof_room], [], [wall_paint], [_assign(wall_paint)])
    line = result.takeoff_lines[0]
    assert line.inputs_snapshot["height_m"] == 3.0
    assert "default" in line.assumption("height").text


def test_calculator_missing_finish_type_raises(index, room, settings):
    assignment = SpaceFinishAssignment(id="a-x", space_id="sp-1", finish_type_id="nope")
    with pytest.raises(ReferenceNotFound) as exc:
        FinishCalculator(settings).calculate(index, [room], [], [], [assignment])
    assert exc.value.kind == "FinishType"


def test_calculator_missing_wall_surface_raises(index, wall_paint, settings):
    assignment = WallSurfaceFinishAssignment(id="w-x", wall_surface_id="ws-9", finish_type_id="ft-paint")
    with pytest.raises(ReferenceNotFound):
        FinishCalculator(settings).calculate(index, [], [], [wall_paint], wall_assignments=[assignment])
