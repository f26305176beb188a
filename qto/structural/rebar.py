"""
Reinforcing Steel Formulas

Deformed bar weights per Philippine practice:
- Unit weights (kg/m) by nominal diameter, 10 to 40 mm
- Grade by diameter: <= 12 mm Grade 40, <= 36 mm Grade 60, larger Grade 80
- DPWH item 902 (1) a1/a2/a3, or 902 (2) for epoxy-coated bars
- Lap length = multiplier x diameter (40 bar diameters by default)
"""

import math
from dataclasses import dataclass, field
from typing import Dict

from ..errors import InvalidDimension

REBAR_WEIGHT_TABLE: Dict[int, float] = {
    10: 0.617,
    12: 0.888,
    16: 1.578,
    20: 2.466,
    25: 3.853,
    28: 4.834,
    32: 6.313,
    36: 7.990,
    40: 9.864,
}

GRADE_SUFFIX = {40: "a1", 60: "a2", 80: "a3"}

DEFAULT_REBAR_WASTE = 0.03
DEFAULT_LAP_MULTIPLIER = 40
DEFAULT_HOOK_ALLOWANCE_M = 0.15


@dataclass
class RebarOutput:
    weight: float
    formula_text: str
    inputs: Dict[str, float] = field(default_factory=dict)


def rebar_grade(diameter: int) -> int:
    if diameter <= 12:
        return 40
    if diameter <= 36:
        return 60
    return 80


def dpwh_rebar_item(diameter: int, epoxy_coated: bool = False) -> str:
    prefix = "902 (2)" if epoxy_coated else "902 (1)"
    return f"{prefix} {GRADE_SUFFIX[rebar_grade(diameter)]}"


def weight_per_meter(diameter: int) -> float:
    weight = REBAR_WEIGHT_TABLE.get(diameter)
    if weight is None:
        supported = ", ".join(str(d) for d in REBAR_WEIGHT_TABLE)
        raise InvalidDimension("diameter", diameter, f"unknown rebar diameter, supported: {supported} mm")
    return weight


def lap_length(diameter: int, multiplier: float = DEFAULT_LAP_MULTIPLIER) -> float:
    """Lap length in meters."""
    return diameter * multiplier / 1000


def bar_count(span: float, spacing: float, include_end: bool = True) -> int:
    """Bars at a spacing across a span: floor(span / spacing) + 1."""
    if spacing <= 0:
        return 0
    count = math.floor(span / spacing)
    return count + 1 if include_end else count


def bar_weight(diameter: int, bar_length: float, count: int, lap: float = 0.0,
               waste: float = DEFAULT_REBAR_WASTE) -> RebarOutput:
    """
    Weight of straight bars including laps and waste.

    Args:
        diameter: Bar diameter (mm)
        bar_length: Length of one bar (m)
        count: Number of bars
        lap: Lap length added per bar (m)
        waste: Fraction

    Returns:
        RebarOutput with weight in kg
    """
    unit_weight = weight_per_meter(diameter)
    effective_length = bar_length + lap
    weight = effective_length * count * unit_weight * (1 + waste)

    lap_text = f" + {lap * 1000:.0f}mm lap" if lap else ""
    waste_text = f" × (1 + {waste * 100:.0f}% waste)" if waste > 0 else ""
    formula = (
        f"{count} bars × ({bar_length:.2f}m{lap_text}) × {unit_weight:.3f} kg/m"
        f"{waste_text} = {weight:.2f} kg"
    )
    return RebarOutput(
        weight=weight,
        formula_text=formula,
        inputs={
            "barDiameter": diameter,
            "barLength": bar_length,
            "barCount": count,
            "lapLength": lap,
            "waste": waste,
            "weightPerMeter": unit_weight,
        },
    )


def longitudinal_bars(diameter: int, count: int, length: float, waste: float = DEFAULT_REBAR_WASTE,
                      lap_multiplier: float = DEFAULT_LAP_MULTIPLIER) -> RebarOutput:
    """Beam or column main bars running the full member length with one lap each."""
    return bar_weight(diameter, length, count, lap_length(diameter, lap_multiplier), waste)


def lateral_ties(diameter: int, spacing: float, member_length: float, width: float, depth: float,
                 waste: float = DEFAULT_REBAR_WASTE,
                 hook_allowance_m: float = DEFAULT_HOOK_ALLOWANCE_M) -> RebarOutput:
    """Beam stirrups or column ties: one closed loop 2(W + D) + hooks per spacing."""
    count = bar_count(member_length, spacing)
    perimeter = 2 * (width + depth) + hook_allowance_m
    return bar_weight(diameter, perimeter, count, waste=waste)


def spaced_bars(diameter: int, spacing: float, bar_length: float, spread: float, span_count: int = 1,
                waste: float = DEFAULT_REBAR_WASTE,
                lap_multiplier: float = DEFAULT_LAP_MULTIPLIER) -> RebarOutput:
    """
    Slab or footing bars laid at a spacing.

    Args:
        bar_length: Length of each bar (m)
        spread: Width across which bars are spaced (m)
        span_count: Number of identical spans
    """
    count = bar_count(spread, spacing) * span_count
    return bar_weight(diameter, bar_length, count, lap_length(diameter, lap_multiplier), waste)
