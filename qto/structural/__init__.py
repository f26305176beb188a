"""
Structural Module
Concrete, formwork and reinforcing steel quantities for element instances.
"""

from .concrete import (
    ConcreteOutput,
    beam_concrete,
    column_concrete,
    footing_concrete,
    slab_concrete,
)
from .formwork import (
    FormworkOutput,
    beam_formwork,
    circular_column_formwork,
    footing_formwork,
    rectangular_column_formwork,
    slab_formwork,
)
from .quantity_engine import QuantityEngine, StructuralResult, StructuralSummary
from .rebar import (
    REBAR_WEIGHT_TABLE,
    RebarOutput,
    bar_count,
    bar_weight,
    dpwh_rebar_item,
    lap_length,
    lateral_ties,
    longitudinal_bars,
    rebar_grade,
    spaced_bars,
    weight_per_meter,
)

__all__ = [
    "ConcreteOutput",
    "FormworkOutput",
    "QuantityEngine",
    "REBAR_WEIGHT_TABLE",
    "RebarOutput",
    "StructuralResult",
    "StructuralSummary",
    "bar_count",
    "bar_weight",
    "beam_concrete",
    "beam_formwork",
    "circular_column_formwork",
    "column_concrete",
    "dpwh_rebar_item",
    "footing_concrete",
    "footing_formwork",
    "lap_length",
    "lateral_ties",
    "longitudinal_bars",
    "rebar_grade",
    "rectangular_column_formwork",
    "slab_concrete",
    "slab_formwork",
    "spaced_bars",
    "weight_per_meter",
]
