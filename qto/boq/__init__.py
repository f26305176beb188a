"""
BOQ Module
Pay item normalisation, DPWH Part classification and takeoff aggregation.
"""

from .aggregation import (
    DETAILED,
    SUMMARIZED,
    PartGroup,
    SubcategoryGroup,
    aggregate_by_part,
    group_takeoff_lines,
    summarize_lines,
    takeoff_stats,
)
from .classification import (
    DPWHClassification,
    classify_dpwh_item,
    classify_part_by_trade,
    classify_takeoff_line,
    dpwh_part_sort_key,
    sort_dpwh_parts,
)
from .pay_items import (
    PayItem,
    PayItemCatalog,
    base_item_number,
    is_valid_pay_item_format,
    normalize_pay_item_number,
    normalize_unit,
    pay_items_match,
    trade_from_pay_item,
)

__all__ = [
    "DETAILED",
    "SUMMARIZED",
    "DPWHClassification",
    "PartGroup",
    "PayItem",
    "PayItemCatalog",
    "SubcategoryGroup",
    "aggregate_by_part",
    "base_item_number",
    "classify_dpwh_item",
    "classify_part_by_trade",
    "classify_takeoff_line",
    "dpwh_part_sort_key",
    "group_takeoff_lines",
    "is_valid_pay_item_format",
    "normalize_pay_item_number",
    "normalize_unit",
    "pay_items_match",
    "sort_dpwh_parts",
    "summarize_lines",
    "takeoff_stats",
]
