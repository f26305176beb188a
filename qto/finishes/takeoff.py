"""
Finish Takeoff Calculations

One takeoff line per (space or wall surface, finish type) pairing:
- Floor: space area
- Ceiling: space area, or 0 when the space is open to below
- Wall (perimeter based): perimeter x height less deductible openings
- Wall surface (grid based): (gross area less openings) x sides

Shared policy:
- waste = assignment override, else finish type default, else 0
- quantity = base x (1 + waste), applied only to a positive base
- rounding = finish type rounding, else 3 places, applied last
"""

from typing import Optional, Sequence

from ..errors import InvalidDimension
from ..models.project import (
    FinishType,
    FixedHeight,
    Opening,
    Space,
    SpaceFinishAssignment,
    WallSide,
    WallSurface,
)
from ..models.takeoff import TakeoffLine, TakeoffLineBuilder, format_number, round_half_up
from .deductions import compute_opening_deduction

DEFAULT_ROUNDING = 3
FINISHES_TRADE = "Finishes"


def resolve_waste_percent(finish_type: FinishType, override: Optional[float] = None) -> float:
    """Waste fraction: override, then finish type default, then 0. Zero overrides count."""
    if override is not None:
        waste = override
    elif finish_type.assumptions is not None and finish_type.assumptions.waste_percent is not None:
        waste = finish_type.assumptions.waste_percent
    else:
        waste = 0.0

    if waste < 0:
        raise InvalidDimension("wastePercent", waste, "must be >= 0")
    return waste


def resolve_rounding(finish_type: FinishType) -> int:
    if finish_type.assumptions is not None and finish_type.assumptions.rounding is not None:
        return finish_type.assumptions.rounding
    return DEFAULT_ROUNDING


def round_quantity(qty: float, places: int) -> float:
    return round_half_up(qty, places)


def apply_waste_and_rounding(qty: float, waste_percent: float = 0.0,
                             rounding: int = DEFAULT_ROUNDING) -> float:
    """qty x (1 + waste) when both are positive, then round."""
    if waste_percent > 0 and qty > 0:
        qty = qty * (1 + waste_percent)
    return round_quantity(qty, rounding)


def _waste_text(waste: float) -> str:
    return f"Waste: {waste * 100:.1f}%"


def _space_geometry(space: Space):
    if space.computed is None:
        raise InvalidDimension("space.computed", None, f"geometry of space {space.id} not computed")
    return space.computed


def _space_builder(space: Space, finish_type: FinishType, kind: str) -> TakeoffLineBuilder:
    builder = TakeoffLineBuilder(
        source_element_id=space.id,
        trade=FINISHES_TRADE,
        resource_key=f"{kind}-{finish_type.id}",
        unit=finish_type.unit,
    )
    builder.tag(
        f"level:{space.level_id}",
        f"space:{space.id}",
        f"spaceName:{space.name}",
        f"category:{kind}",
        f"finish:{finish_type.finish_name}",
        f"dpwh:{finish_type.dpwh_item_number_raw}",
    )
    return builder


def compute_floor_finish_takeoff(
    space: Space,
    finish_type: FinishType,
    assignment: SpaceFinishAssignment,
) -> TakeoffLine:
    """Floor finish area = space area x (1 + waste)."""
    area = _space_geometry(space).area_m2
    waste = resolve_waste_percent(finish_type, assignment.overrides.waste_percent)
    places = resolve_rounding(finish_type)
    qty = apply_waste_and_rounding(area, waste, places)

    builder = _space_builder(space, finish_type, "floor")
    builder.inputs(area_m2=area, waste=waste)
    if waste > 0:
        builder.assume("waste", _waste_text(waste), waste)
        formula = (
            "Floor finish area = Space.area × (1 + waste)\n"
            f"= {area:.3f} × {1 + waste:.3f} = {qty:.{places}f} {finish_type.unit}"
        )
    else:
        formula = f"Floor finish area = Space.area\n= {qty:.{places}f} {finish_type.unit}"

    builder.tag(f"scope:{assignment.scope}")
    return builder.build(qty, formula)


def compute_ceiling_finish_takeoff(
    space: Space,
    finish_type: FinishType,
    assignment: SpaceFinishAssignment,
    is_open_to_below: Optional[bool] = None,
) -> TakeoffLine:
    """
    Ceiling finish area = space area x (1 + waste).

    A space open to below yields 0 and waste is not applied.
    """
    if is_open_to_below is None:
        is_open_to_below = space.open_to_below

    area = _space_geometry(space).area_m2
    waste = resolve_waste_percent(finish_type, assignment.overrides.waste_percent)
    places = resolve_rounding(finish_type)
    base = 0.0 if is_open_to_below else area
    qty = apply_waste_and_rounding(base, waste, places)

    builder = _space_builder(space, finish_type, "ceiling")
    builder.inputs(area_m2=area, waste=waste, isOpenToBelow=1 if is_open_to_below else 0)

    if is_open_to_below:
        builder.assume("openToBelow", "Open to below: 0 area", True)
        formula = f"Ceiling finish area = 0 (open to below)\n= {qty:.{places}f} {finish_type.unit}"
    elif waste > 0:
        formula = (
            "Ceiling finish area = Space.area × (1 + waste)\n"
            f"= {area:.3f} × {1 + waste:.3f} = {qty:.{places}f} {finish_type.unit}"
        )
    else:
        formula = f"Ceiling finish area = Space.area\n= {qty:.{places}f} {finish_type.unit}"

    if waste > 0:
        builder.assume("waste", _waste_text(waste), waste)

    builder.tag(f"scope:{assignment.scope}")
    return builder.build(qty, formula)


def compute_wall_finish_takeoff(
    space: Space,
    finish_type: FinishType,
    assignment: SpaceFinishAssignment,
    openings: Sequence[Opening],
    storey_height_m: float,
    storey_height_note: Optional[str] = None,
) -> TakeoffLine:
    """
    Perimeter-based wall finish with opening deductions.

    Height: fixed rule value, else assignment height override, else storey height.

    Args:
        space: Space with computed perimeter
        finish_type: Wall-like finish type
        assignment: Space assignment (overrides)
        openings: All project openings; only those on this space are considered
        storey_height_m: Level-to-level height of the space's storey
        storey_height_note: Extra text for the height assumption (e.g. default used)
    """
    perimeter = _space_geometry(space).perimeter_m
    rule = finish_type.wall_height_rule

    if isinstance(rule, FixedHeight):
        height = rule.value_m
        height_text = f"Fixed height: {format_number(height)}m"
    elif assignment.overrides.height_m is not None:
        height = assignment.overrides.height_m
        height_text = f"Override height: {format_number(height)}m"
    else:
        height = storey_height_m
        height_text = f"Storey height: {format_number(height)}m"
        if storey_height_note:
            height_text = f"{height_text} ({storey_height_note})"

    if height < 0:
        raise InvalidDimension("height_m", height, "must be >= 0")

    gross = perimeter * height
    deduction = compute_opening_deduction(openings, finish_type.deduction_rule, space_id=space.id)
    net = max(gross - deduction.total_area_m2, 0.0)

    waste = resolve_waste_percent(finish_type, assignment.overrides.waste_percent)
    places = resolve_rounding(finish_type)
    qty = apply_waste_and_rounding(net, waste, places)

    builder = _space_builder(space, finish_type, "wall")
    builder.inputs(
        perimeter_m=perimeter,
        height_m=height,
        grossWallArea=gross,
        openingDeduction=deduction.total_area_m2,
        netWallArea=net,
        waste=waste,
    )
    builder.assume("height", height_text, height)
    if deduction.applied:
        builder.assume("deductionRule", deduction.rule_text(), deduction.rule.min_opening_area_to_deduct_m2)
        builder.assume("openingsDeducted", deduction.summary_text(), deduction.total_area_m2)
    if waste > 0:
        builder.assume("waste", _waste_text(waste), waste)

    waste_expr = " × (1 + waste)" if waste > 0 else ""
    waste_value = f" × {1 + waste:.3f}" if waste > 0 else ""
    formula = (
        f"Wall finish = (Perimeter × Height) - Openings{waste_expr}\n"
        f"= ({perimeter:.3f} × {height:.3f}) - {deduction.total_area_m2:.3f}{waste_value}\n"
        f"= {net:.3f}{waste_value} = {qty:.{places}f} {finish_type.unit}"
    )

    builder.tag(f"scope:{assignment.scope}")
    return builder.build(qty, formula)


def compute_wall_surface_finish_takeoff(
    wall: WallSurface,
    finish_type: FinishType,
    openings: Sequence[Opening],
    side: Optional[WallSide] = None,
    waste_percent: Optional[float] = None,
    scope: Optional[str] = None,
) -> TakeoffLine:
    """
    Grid-based wall finish: (gross area - openings) x sides x (1 + waste).

    The net area per side is clamped at 0 before it is multiplied by sides.

    Args:
        wall: Wall surface with computed geometry
        finish_type: Wall-like finish type
        openings: All project openings; only those on this wall are considered
        side: single/both override of the surface type's sides count
        waste_percent: Assignment waste override (fraction)
        scope: Assignment scope tag
    """
    geometry = wall.computed
    if geometry is None:
        raise InvalidDimension("wallSurface.computed", None, f"geometry of wall {wall.id} not computed")

    sides = geometry.sides_count
    if side is WallSide.SINGLE:
        sides = 1
    elif side is WallSide.BOTH:
        sides = 2

    gross = geometry.gross_area_m2
    deduction = compute_opening_deduction(openings, finish_type.deduction_rule, wall_surface_id=wall.id)
    net_per_side = max(gross - deduction.total_area_m2, 0.0)
    total = net_per_side * sides

    waste = resolve_waste_percent(finish_type, waste_percent)
    places = resolve_rounding(finish_type)
    qty = apply_waste_and_rounding(total, waste, places)

    line = wall.grid_line
    builder = TakeoffLineBuilder(
        source_element_id=wall.id,
        trade=FINISHES_TRADE,
        resource_key=f"wallsurface-{finish_type.id}",
        unit=finish_type.unit,
    )
    builder.inputs(grossArea_m2=gross, openingArea_m2=deduction.total_area_m2,
                   sidesCount=sides, waste=waste)
    builder.assume(
        "location",
        f"Wall: {line.axis.value} = {line.label}, Span: {'-'.join(line.span)}, "
        f"Levels: {wall.level_start}-{wall.level_end}",
    )
    builder.assume("dimensions", f"Dimensions: {geometry.length_m:.2f}m × {geometry.height_m:.2f}m")
    builder.assume(
        "sides",
        f"Surface type: {wall.surface_type.value} ({sides} side{'s' if sides > 1 else ''})",
        sides,
    )
    if deduction.applied:
        builder.assume("deductionRule", deduction.rule_text(), deduction.rule.min_opening_area_to_deduct_m2)
        builder.assume("openingsDeducted", deduction.summary_text(), deduction.total_area_m2)
    if waste > 0:
        builder.assume("waste", _waste_text(waste), waste)

    waste_expr = " × (1 + waste)" if waste > 0 else ""
    waste_value = f" × {1 + waste:.3f}" if waste > 0 else ""
    formula = (
        f"Wall finish = (Gross Area - Openings) × Sides{waste_expr}\n"
        f"= ({gross:.3f} - {deduction.total_area_m2:.3f}) × {sides}{waste_value}\n"
        f"= {qty:.{places}f} {finish_type.unit}"
    )

    builder.tag(
        f"level:{wall.level_start}",
        f"wallSurface:{wall.id}",
        f"wallSurfaceName:{wall.name}",
        f"surfaceType:{wall.surface_type.value}",
        f"levelRange:{wall.level_start}-{wall.level_end}",
        f"finish:{finish_type.finish_name}",
        f"category:{finish_type.category.value}",
        f"dpwh:{finish_type.dpwh_item_number_raw}",
    )
    if scope:
        builder.tag(f"scope:{scope}")
    return builder.build(qty, formula)
