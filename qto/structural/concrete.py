"""
Concrete Volume Formulas
All dimensions in meters, volumes in m³.

- Beam: W x H x L
- Slab: T x A
- Column: W x D x H (rectangular) or π(D/2)² x H (circular)
- Footing: L x W x D
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..errors import InvalidDimension
from ..models.takeoff import format_number as n


@dataclass
class ConcreteOutput:
    volume: float
    volume_with_waste: float
    formula_text: str
    inputs: Dict[str, float] = field(default_factory=dict)


def check_positive(**dims: Optional[float]) -> None:
    for name, value in dims.items():
        if value is None or value <= 0:
            raise InvalidDimension(name, value, "must be positive")


def check_waste(waste: float) -> None:
    if waste < 0 or waste > 1:
        raise InvalidDimension("waste", waste, "must be between 0 and 1")


def _output(volume: float, waste: float, expression: str, inputs: Dict[str, float]) -> ConcreteOutput:
    with_waste = volume * (1 + waste)
    formula = (
        f"{expression} = {volume:.3f} m³ "
        f"(+ {waste * 100:.0f}% waste = {with_waste:.3f} m³)"
    )
    return ConcreteOutput(volume=volume, volume_with_waste=with_waste,
                          formula_text=formula, inputs={**inputs, "waste": waste})


def beam_concrete(width: float, height: float, length: float, waste: float) -> ConcreteOutput:
    check_positive(width=width, height=height, length=length)
    check_waste(waste)
    return _output(
        width * height * length, waste,
        f"V = W × H × L = {n(width)} × {n(height)} × {n(length)}",
        {"width": width, "height": height, "length": length},
    )


def slab_concrete(thickness: float, area: float, waste: float) -> ConcreteOutput:
    check_positive(thickness=thickness, area=area)
    check_waste(waste)
    return _output(
        thickness * area, waste,
        f"V = T × A = {n(thickness)} × {area:.2f}",
        {"thickness": thickness, "area": area},
    )


def column_concrete(length: float, waste: float, shape: str = "rectangular",
                    width: Optional[float] = None, depth: Optional[float] = None,
                    diameter: Optional[float] = None) -> ConcreteOutput:
    """
    Column volume between levels.

    Args:
        length: Column height (m)
        waste: Fraction in [0, 1]
        shape: "rectangular" or "circular"
        width, depth: Rectangular section (m)
        diameter: Circular section (m)
    """
    check_positive(length=length)
    check_waste(waste)

    if shape == "circular":
        check_positive(diameter=diameter)
        radius = diameter / 2
        return _output(
            math.pi * radius * radius * length, waste,
            f"V = π × (D/2)² × L = π × ({n(diameter)}/2)² × {n(length)}",
            {"length": length, "diameter": diameter},
        )

    check_positive(width=width, depth=depth)
    return _output(
        width * depth * length, waste,
        f"V = W × D × L = {n(width)} × {n(depth)} × {n(length)}",
        {"length": length, "width": width, "depth": depth},
    )


def footing_concrete(length: float, width: float, depth: float, waste: float) -> ConcreteOutput:
    check_positive(length=length, width=width, depth=depth)
    check_waste(waste)
    return _output(
        length * width * depth, waste,
        f"V = L × W × D = {n(length)} × {n(width)} × {n(depth)}",
        {"length": length, "width": width, "depth": depth},
    )
