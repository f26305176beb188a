"""
Opening Deductions

Selects the openings a finish deducts from its target surface and sums them.

An opening qualifies when:
- it belongs to the target (space id or wall surface id)
- its type is in the rule's include list (empty list = any type)
- its area is at least the rule's minimum area to deduct

Openings below the threshold (vents, small louvers) stay in the finish area.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..models.project import DeductionRule, Opening
from ..models.takeoff import format_number


@dataclass(frozen=True)
class OpeningDeduction:
    """Openings deducted from one surface under one rule."""
    total_area_m2: float
    openings: Tuple[Opening, ...] = ()
    rule: Optional[DeductionRule] = None

    @property
    def count(self) -> int:
        return len(self.openings)

    @property
    def applied(self) -> bool:
        return self.rule is not None and self.rule.enabled

    def rule_text(self) -> str:
        return (
            f"Deduction: min {format_number(self.rule.min_opening_area_to_deduct_m2)}m², "
            f"types: {', '.join(self.rule.include_types)}"
        )

    def summary_text(self) -> str:
        return f"Openings deducted: {self.count} ({self.total_area_m2:.3f}m²)"


def select_deductible_openings(
    openings: Sequence[Opening],
    rule: Optional[DeductionRule],
    space_id: Optional[str] = None,
    wall_surface_id: Optional[str] = None,
) -> List[Opening]:
    """
    Filter openings by target, type and minimum area.

    Args:
        openings: Every opening of the project
        rule: Finish type deduction rule (None or disabled selects nothing)
        space_id: Target space, for perimeter-based wall finishes
        wall_surface_id: Target wall surface, for grid-based wall finishes

    Returns:
        Qualifying openings in input order
    """
    if rule is None or not rule.enabled:
        return []

    selected = []
    for opening in openings:
        if wall_surface_id is not None:
            on_target = opening.wall_surface_id == wall_surface_id
        else:
            on_target = space_id is not None and opening.space_id == space_id
        if not on_target:
            continue
        if rule.include_types and opening.type not in rule.include_types:
            continue
        if opening.area_m2 < rule.min_opening_area_to_deduct_m2:
            continue
        selected.append(opening)

    return selected


def compute_opening_deduction(
    openings: Sequence[Opening],
    rule: Optional[DeductionRule],
    space_id: Optional[str] = None,
    wall_surface_id: Optional[str] = None,
) -> OpeningDeduction:
    """Sum of qualifying opening areas for one target surface."""
    selected = select_deductible_openings(openings, rule, space_id, wall_surface_id)
    return OpeningDeduction(
        total_area_m2=sum(o.area_m2 for o in selected),
        openings=tuple(selected),
        rule=rule,
    )
