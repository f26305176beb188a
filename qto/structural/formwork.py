"""
Formwork Contact Area Formulas
Dimensions in meters, areas in m².
"""

import math
from dataclasses import dataclass, field
from typing import Dict


@dataclass
class FormworkOutput:
    area: float
    formula_text: str
    inputs: Dict[str, float] = field(default_factory=dict)


def beam_formwork(width: float, height: float, length: float) -> FormworkOutput:
    """Two sides plus soffit; the top stays open."""
    sides = 2 * height * length
    bottom = width * length
    total = sides + bottom
    return FormworkOutput(
        area=total,
        formula_text=(
            f"(2 × {height:.2f}m × {length:.2f}m) + ({width:.2f}m × {length:.2f}m) = {total:.3f} m²"
        ),
        inputs={"width": width, "height": height, "length": length,
                "sidesArea": sides, "bottomArea": bottom},
    )


def slab_formwork(area: float) -> FormworkOutput:
    """Soffit forms only."""
    return FormworkOutput(
        area=area,
        formula_text=f"{area:.3f} m² (soffit formwork)",
        inputs={"slabArea": area},
    )


def rectangular_column_formwork(width: float, depth: float, height: float) -> FormworkOutput:
    perimeter = 2 * (width + depth)
    total = perimeter * height
    return FormworkOutput(
        area=total,
        formula_text=f"2 × ({width:.2f}m + {depth:.2f}m) × {height:.2f}m = {total:.3f} m²",
        inputs={"width": width, "depth": depth, "columnHeight": height, "perimeter": perimeter},
    )


def circular_column_formwork(diameter: float, height: float) -> FormworkOutput:
    circumference = math.pi * diameter
    total = circumference * height
    return FormworkOutput(
        area=total,
        formula_text=f"π × {diameter:.2f}m × {height:.2f}m = {total:.3f} m²",
        inputs={"diameter": diameter, "columnHeight": height, "circumference": circumference},
    )


def footing_formwork(length: float, width: float, depth: float) -> FormworkOutput:
    """Four sides of an isolated footing."""
    perimeter = 2 * (length + width)
    total = perimeter * depth
    return FormworkOutput(
        area=total,
        formula_text=f"2 × ({length:.2f}m + {width:.2f}m) × {depth:.2f}m = {total:.3f} m²",
        inputs={"length": length, "width": width, "depth": depth, "perimeter": perimeter},
    )
