"""
Takeoff Aggregation - Group takeoff lines for BOQ presentation.

Provides:
- Part / subcategory grouping in DPWH order
- Summarized view: lines merged per (pay item, template, level)
- Per-part quantity totals and run statistics

Read-only over already computed lines; nothing is recomputed.
"""

import dataclasses
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from ..models.takeoff import TakeoffLine, round_half_up
from .classification import classify_takeoff_line, sort_dpwh_parts
from .pay_items import normalize_pay_item_number

SUMMARIZED = "summarized"
DETAILED = "detailed"
VIEWS = (SUMMARIZED, DETAILED)

# Decimal places of a merged quantity; matches the default rounding of each trade
SUMMED_PLACES_BY_TRADE = {'Rebar': 2, 'Formwork': 2, 'Roofing': 2}
DEFAULT_SUMMED_PLACES = 3


@dataclass
class SubcategoryGroup:
    name: str
    lines: List[TakeoffLine] = field(default_factory=list)
    source_line_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subcategory": self.name,
            "itemCount": self.source_line_count,
            "lines": [line.to_dict() for line in self.lines],
        }


@dataclass
class PartGroup:
    part: str
    subcategories: List[SubcategoryGroup] = field(default_factory=list)

    @property
    def item_count(self) -> int:
        return sum(s.source_line_count for s in self.subcategories)

    @property
    def lines(self) -> List[TakeoffLine]:
        return [line for s in self.subcategories for line in s.lines]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "part": self.part,
            "itemCount": self.item_count,
            "subcategories": [s.to_dict() for s in self.subcategories],
        }


def summary_key(line: TakeoffLine) -> Tuple[str, str, str]:
    """(normalised pay item or '-', template or 'N/A', level or 'N/A')"""
    dpwh = normalize_pay_item_number(line.dpwh_item) or "-"
    template = line.tag_value("template") or "N/A"
    level = line.tag_value("level") or "N/A"
    return dpwh, template, level


def _summed_places(line: TakeoffLine) -> int:
    return SUMMED_PLACES_BY_TRADE.get(line.trade, DEFAULT_SUMMED_PLACES)


def summarize_lines(lines: Sequence[TakeoffLine]) -> List[TakeoffLine]:
    """
    Merge lines sharing a summary key, in first-seen order.

    The merged line copies the first line, sums quantities (rounded half up
    to the trade's places), takes the id grouped_<first id> and, when more
    than one line merged, the formula text "<N> instances".
    """
    grouped: Dict[Tuple[str, str, str], List[TakeoffLine]] = {}
    for line in lines:
        grouped.setdefault(summary_key(line), []).append(line)

    merged = []
    for members in grouped.values():
        first = members[0]
        merged.append(dataclasses.replace(
            first,
            id=f"grouped_{first.id}",
            quantity=round_half_up(sum(m.quantity for m in members), _summed_places(first)),
            formula_text=f"{len(members)} instances" if len(members) > 1 else first.formula_text,
        ))
    return merged


def group_takeoff_lines(lines: Sequence[TakeoffLine], view: str = SUMMARIZED) -> List[PartGroup]:
    """
    Group lines by DPWH Part (canonical order) then subcategory (alphabetical).

    Args:
        lines: Takeoff lines of one calc run
        view: "summarized" merges lines per summary key, "detailed" keeps them

    Returns:
        List of PartGroup
    """
    if view not in VIEWS:
        raise ValueError(f"Unknown view: {view} (expected one of {', '.join(VIEWS)})")

    by_part: Dict[str, Dict[str, List[TakeoffLine]]] = defaultdict(lambda: defaultdict(list))
    for line in lines:
        classification = classify_takeoff_line(line)
        by_part[classification.part][classification.subcategory].append(line)

    groups = []
    for part in sort_dpwh_parts(by_part):
        subcategories = by_part[part]
        group = PartGroup(part=part)
        for name in sorted(subcategories):
            members = subcategories[name]
            shown = summarize_lines(members) if view == SUMMARIZED else list(members)
            group.subcategories.append(SubcategoryGroup(name=name, lines=shown,
                                                        source_line_count=len(members)))
        groups.append(group)
    return groups


def aggregate_by_part(lines: Sequence[TakeoffLine]) -> Dict[str, Dict[str, float]]:
    """Quantity totals per Part and unit, parts in DPWH order."""
    totals: Dict[str, Dict[str, float]] = defaultdict(lambda: defaultdict(float))
    for line in lines:
        part = classify_takeoff_line(line).part
        totals[part][line.unit] += line.quantity

    return {
        part: {unit: round_half_up(qty, 3) for unit, qty in totals[part].items()}
        for part in sort_dpwh_parts(totals)
    }


def takeoff_stats(lines: Sequence[TakeoffLine]) -> Dict[str, Any]:
    """Line counts and quantity totals by trade."""
    by_trade: Dict[str, Dict[str, Any]] = defaultdict(lambda: {"lines": 0, "quantity": 0.0, "unit": ""})
    sources = set()
    for line in lines:
        entry = by_trade[line.trade]
        entry["lines"] += 1
        entry["quantity"] += line.quantity
        entry["unit"] = entry["unit"] or line.unit
        sources.add(line.source_element_id)

    return {
        "lineCount": len(lines),
        "sourceElementCount": len(sources),
        "untaggedCount": sum(1 for line in lines if not line.dpwh_item),
        "byTrade": {
            trade: {**data, "quantity": round_half_up(data["quantity"], 3)}
            for trade, data in sorted(by_trade.items())
        },
    }
