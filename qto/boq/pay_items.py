"""
DPWH Pay Item Handling

Pay item numbers arrive with inconsistent spacing ("900 (1) c" vs "900 (1)c").
This module normalises them for matching and provides a read-only catalog
lookup loaded from CSV.

Features:
- Normalise pay item numbers and units
- Base item number and trade from the DPWH numbering system
- Format validation
- PayItemCatalog: item number -> description, unit, trade
"""

import csv
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from .. import RULES_DIR

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = RULES_DIR / "dpwh_pay_items.csv"

_WHITESPACE = re.compile(r"\s+")
_SPACE_BEFORE_SUFFIX = re.compile(r"\s+([a-z0-9])", re.IGNORECASE)
_BASE_NUMBER = re.compile(r"^(\d+)")
_PAY_ITEM_FORMAT = re.compile(r"^\d+\s*\(\d+\)([a-z]\d*)?$", re.IGNORECASE)

UNIT_ALIASES = {
    'cu.m': 'Cubic Meter',
    'cubic meter': 'Cubic Meter',
    'cubic meters': 'Cubic Meter',
    'm³': 'Cubic Meter',
    'sq.m': 'Square Meter',
    'square meter': 'Square Meter',
    'square meters': 'Square Meter',
    'm²': 'Square Meter',
    'lin.m': 'Linear Meter',
    'linear meter': 'Linear Meter',
    'linear meters': 'Linear Meter',
    'l.m': 'Linear Meter',
    'kg': 'Kilogram',
    'kilogram': 'Kilogram',
    'kilograms': 'Kilogram',
    'l.s.': 'Lump Sum',
    'lump sum': 'Lump Sum',
    'ls': 'Lump Sum',
    'each': 'Each',
    'ea': 'Each',
    'pc': 'Each',
    'pcs': 'Each',
    'piece': 'Each',
}

# (start, end exclusive, trade)
TRADE_RANGES = [
    (800, 820, 'Earthwork'),
    (900, 902, 'Concrete'),
    (902, 903, 'Rebar'),
    (903, 910, 'Formwork'),
    (1000, 1100, 'Finishes'),
    (1100, 1200, 'Roofing'),
    (1200, 1300, 'Plumbing'),
    (1300, 1400, 'Electrical'),
    (1500, 1600, 'Marine Works'),
]


def normalize_pay_item_number(pay_item: Optional[str]) -> str:
    """
    Normalise a pay item number for matching.

    "900 (1) c" -> "900 (1)C", "800 (3) a1" -> "800 (3)A1"
    """
    if not pay_item:
        return ""
    text = _WHITESPACE.sub(" ", pay_item.strip())
    text = _SPACE_BEFORE_SUFFIX.sub(r"\1", text)
    return text.upper()


def pay_items_match(first: Optional[str], second: Optional[str]) -> bool:
    return normalize_pay_item_number(first) == normalize_pay_item_number(second)


def normalize_unit(unit: Optional[str]) -> str:
    """Map unit spellings ("cu.m", "SQ.M", "pcs") to a canonical name."""
    if not unit:
        return ""
    return UNIT_ALIASES.get(unit.strip().lower(), unit.strip())


def base_item_number(pay_item: Optional[str]) -> str:
    """Leading digits of a pay item: "900 (1) c" -> "900"."""
    match = _BASE_NUMBER.match(pay_item or "")
    return match.group(1) if match else ""


def trade_from_pay_item(pay_item: Optional[str]) -> str:
    base = base_item_number(pay_item)
    if not base:
        return 'Other'
    number = int(base)
    for start, end, trade in TRADE_RANGES:
        if start <= number < end:
            return trade
    return 'Other'


def is_valid_pay_item_format(pay_item: Optional[str]) -> bool:
    """True for "900 (1)", "900 (1) c", "800 (3)a1"; False for "900" or free text."""
    return bool(_PAY_ITEM_FORMAT.match(normalize_pay_item_number(pay_item)))


# =============================================================================
# CATALOG
# =============================================================================

@dataclass(frozen=True)
class PayItem:
    """DPWH pay item catalog entry."""
    item_number: str
    description: str
    unit: str
    trade: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "itemNumber": self.item_number,
            "description": self.description,
            "unit": self.unit,
            "trade": self.trade,
        }


class PayItemCatalog:
    """
    Read-only pay item lookup keyed by normalised item number.

    Usage:
        catalog = PayItemCatalog.from_csv()
        item = catalog.get("900 (1) c")
    """

    def __init__(self, items: Optional[List[PayItem]] = None):
        self._items: Dict[str, PayItem] = {}
        for item in items or []:
            key = normalize_pay_item_number(item.item_number)
            if key and key not in self._items:
                self._items[key] = item

    @classmethod
    def from_csv(cls, path: Optional[Union[str, Path]] = None) -> "PayItemCatalog":
        """
        Load catalog from CSV with columns item_number, description, unit[, trade].

        A missing trade column falls back to the DPWH numbering system.
        """
        csv_path = Path(path) if path else DEFAULT_CATALOG_PATH
        items = []
        try:
            with open(csv_path, "r", newline="", encoding="utf-8") as f:
                for row in csv.DictReader(f):
                    number = (row.get("item_number") or "").strip()
                    if not number:
                        continue
                    items.append(PayItem(
                        item_number=number,
                        description=(row.get("description") or "").strip(),
                        unit=normalize_unit(row.get("unit")),
                        trade=(row.get("trade") or "").strip() or trade_from_pay_item(number),
                    ))
        except FileNotFoundError:
            logger.warning(f"Pay item catalog not found: {csv_path}")
            return cls()

        logger.info(f"Loaded {len(items)} pay items from {csv_path}")
        return cls(items)

    def get(self, item_number: Optional[str]) -> Optional[PayItem]:
        return self._items.get(normalize_pay_item_number(item_number))

    def __contains__(self, item_number: str) -> bool:
        return self.get(item_number) is not None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[PayItem]:
        return iter(self._items.values())

    def describe(self, item_number: Optional[str]) -> str:
        """Catalog description, or the raw number when unknown."""
        item = self.get(item_number)
        return item.description if item else (item_number or "")
