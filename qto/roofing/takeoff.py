"""
Roof Covering Takeoff

Covering quantity of one roof plane:

    qty = base area x (1 + lap + waste)

where the base area is the sloped area or the plan area, per the roof
type's area basis. Lap and waste are fractions added to each other.
"""

from ..errors import InvalidDimension
from ..models.project import AreaBasis, RoofPlane, RoofType
from ..models.takeoff import TakeoffLine, TakeoffLineBuilder, round_half_up

ROOFING_TRADE = "Roofing"
DEFAULT_ROOF_ROUNDING = 2


def _percent_text(label: str, fraction: float) -> str:
    return f"{label}: {fraction * 100:.1f}%"


def compute_roof_cover_takeoff(plane: RoofPlane, roof_type: RoofType,
                               places: int = DEFAULT_ROOF_ROUNDING) -> TakeoffLine:
    """
    Roof covering line for a plane with computed geometry.

    Raises:
        InvalidDimension: geometry not computed, or a negative lap/waste
    """
    geometry = plane.computed
    if geometry is None:
        raise InvalidDimension("roofPlane.computed", None, f"geometry of roof plane {plane.id} not computed")
    for name, value in (("lapAllowancePercent", roof_type.lap_allowance_percent),
                        ("wastePercent", roof_type.waste_percent)):
        if value < 0:
            raise InvalidDimension(name, value, "must be >= 0")

    basis = roof_type.area_basis
    base = geometry.slope_area_m2 if basis is AreaBasis.SLOPE_AREA else geometry.plan_area_m2
    factor = 1 + roof_type.lap_allowance_percent + roof_type.waste_percent
    qty = round_half_up(base * factor, places)

    builder = TakeoffLineBuilder(
        source_element_id=plane.id,
        trade=ROOFING_TRADE,
        resource_key=f"roof-{roof_type.id}",
        unit=roof_type.unit,
    )
    builder.inputs(
        planArea_m2=geometry.plan_area_m2,
        slopeFactor=geometry.slope_factor,
        slopeArea_m2=geometry.slope_area_m2,
        lapPercent=roof_type.lap_allowance_percent,
        wastePercent=roof_type.waste_percent,
    )
    builder.assume("areaBasis", f"Area basis: {basis.value}", basis.value)
    builder.assume("slope", f"Slope: {plane.slope.describe()}", plane.slope.value)
    builder.assume("lap", _percent_text("Lap allowance", roof_type.lap_allowance_percent),
                   roof_type.lap_allowance_percent)
    builder.assume("waste", _percent_text("Waste", roof_type.waste_percent), roof_type.waste_percent)
    if roof_type.accessories_bundled:
        builder.assume("accessories", "Accessories bundled (ridges, valleys, etc.)", True)
    if roof_type.fasteners_included:
        builder.assume("fasteners", "Fasteners included", True)
    if roof_type.notes:
        builder.assume("notes", roof_type.notes)

    builder.tag(
        f"level:{plane.level_id}",
        f"roofPlane:{plane.name}",
        f"roofType:{roof_type.name}",
        "category:roofing",
        f"dpwh:{roof_type.dpwh_item_number_raw}",
        *plane.tags,
    )

    formula = (
        f"{roof_type.name}: {basis.value} × (1 + lap + waste)\n"
        f"= {base:.3f} × {factor:.3f} = {qty:.{places}f} {roof_type.unit}"
    )
    return builder.build(qty, formula)
