"""
DPWH Part and Subcategory Classification

Maps pay item numbers (and the trade/category of a takeoff line) to the
DPWH Part used for BOQ presentation:

- 800-899   PART C: EARTHWORK
- 900-999   PART D: REINFORCED CONCRETE / BUILDINGS
- 1000-1099 PART E: FINISHINGS AND OTHER CIVIL WORKS
- 1100-1499 PART F: ELECTRICAL
- 1500+     PART G: MECHANICAL
- otherwise PART A: GENERAL
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.takeoff import TakeoffLine
from .pay_items import base_item_number

PART_ORDER = ['PART A', 'PART C', 'PART D', 'PART E', 'PART F', 'PART G']

# (start, end exclusive, part, part name)
PART_RANGES = [
    (800, 900, 'PART C', 'EARTHWORK'),
    (900, 1000, 'PART D', 'REINFORCED CONCRETE / BUILDINGS'),
    (1000, 1100, 'PART E', 'FINISHINGS AND OTHER CIVIL WORKS'),
    (1100, 1500, 'PART F', 'ELECTRICAL'),
]

# Representative item number per trade, for lines without a pay item
# (roof coverings are DPWH Item 1013 and sit in Part E)
TRADE_ITEM_NUMBERS = {
    'Earthwork': 800,
    'Concrete': 900,
    'Rebar': 902,
    'Formwork': 903,
    'Finishes': 1000,
    'Roofing': 1013,
    'Plumbing': 1200,
    'Electrical': 1300,
    'Marine Works': 1500,
}

# Part E subcategories, first keyword match wins
FINISHES_SUBCATEGORIES: List[Tuple[Tuple[str, ...], str]] = [
    (('termite',), 'Termite Control'),
    (('plumbing', 'drainage', 'sewer', 'water', 'pipe'), 'Plumbing Works'),
    (('door', 'window'), 'Doors and Windows'),
    (('glass', 'glazing'), 'Glass and Glazing'),
    (('tile', 'tiling'), 'Tiling Works'),
    (('floor',), 'Flooring'),
    (('plaster',), 'Plastering Works'),
    (('ceiling',), 'Ceiling Works'),
    (('paint', 'coating', 'varnish'), 'Painting Works'),
    (('railing',), 'Railings'),
    (('masonry', 'chb', 'block'), 'Masonry Works'),
    (('roofing',), 'Roofing Works'),
    (('insulation',), 'Insulation'),
    (('waterproof',), 'Waterproofing'),
]

CONCRETE_SUBCATEGORIES: List[Tuple[Tuple[str, ...], str]] = [
    (('formwork',), 'Formwork'),
    (('reinforc', 'rebar'), 'Reinforcing Steel'),
    (('precast',), 'Precast Concrete'),
    (('concrete',), 'Concrete Works'),
]

ELECTRICAL_SUBCATEGORIES: List[Tuple[Tuple[str, ...], str]] = [
    (('electric', 'wiring', 'conduit'), 'Electrical Works'),
    (('steel', 'metal'), 'Metal Works'),
]


@dataclass(frozen=True)
class DPWHClassification:
    part: str
    part_name: str
    subcategory: str

    @property
    def part_id(self) -> str:
        """'PART D: REINFORCED ...' -> 'PART D'"""
        return self.part.split(':')[0]

    def to_dict(self) -> Dict[str, str]:
        return {
            "part": self.part,
            "partName": self.part_name,
            "subcategory": self.subcategory,
        }


def _item_prefix(item_number: str) -> int:
    base = base_item_number(item_number)
    return int(base) if base else 0


def _part_for(prefix: int) -> Tuple[str, str]:
    for start, end, part, name in PART_RANGES:
        if start <= prefix < end:
            return part, name
    if prefix >= 1500:
        return 'PART G', 'MECHANICAL'
    return 'PART A', 'GENERAL'


def _match_keywords(text: str, table: List[Tuple[Tuple[str, ...], str]]) -> Optional[str]:
    for keywords, subcategory in table:
        if any(k in text for k in keywords):
            return subcategory
    return None


def _earthwork_subcategory(text: str) -> Optional[str]:
    if 'clearing' in text or 'grubbing' in text:
        return 'Clearing and Grubbing'
    if 'removal' in text and 'tree' in text:
        return 'Removal of Trees'
    if 'removal' in text and 'structure' in text:
        return 'Removal of Structures'
    if 'excavat' in text:
        return 'Excavation'
    if 'embankment' in text or 'fill' in text:
        return 'Embankment'
    if 'site development' in text:
        return 'Site Development'
    return None


def _subcategory(prefix: int, category: Optional[str]) -> str:
    text = (category or '').lower()

    if 1000 <= prefix < 1100:
        if not category:
            return 'Other Finishes'
        return _match_keywords(text, FINISHES_SUBCATEGORIES) or category
    if 900 <= prefix < 1000:
        if not category:
            return 'Concrete Works'
        return _match_keywords(text, CONCRETE_SUBCATEGORIES) or category
    if 800 <= prefix < 900:
        if not category:
            return 'Earthwork'
        return _earthwork_subcategory(text) or category
    if 1100 <= prefix < 1500:
        if not category:
            return 'Metal & Electrical Works'
        return _match_keywords(text, ELECTRICAL_SUBCATEGORIES) or category
    if prefix >= 1500:
        return category or 'Marine & Other Works'
    return category or 'Other Works'


def classify_dpwh_item(item_number: Optional[str], category: Optional[str] = None) -> DPWHClassification:
    """
    Classify a pay item into its DPWH Part and subcategory.

    Args:
        item_number: Pay item number, e.g. "900 (1) c"; empty or "-" means unclassified
        category: Trade or finish category used for the subcategory keywords

    Returns:
        DPWHClassification with part "PART X: NAME"
    """
    if not item_number or not item_number.strip() or item_number.strip() == '-':
        return DPWHClassification(
            part='PART A: GENERAL',
            part_name='GENERAL',
            subcategory=category or 'Other Works',
        )

    prefix = _item_prefix(item_number)
    part, name = _part_for(prefix)
    return DPWHClassification(
        part=f"{part}: {name}",
        part_name=name,
        subcategory=_subcategory(prefix, category),
    )


def classify_part_by_trade(trade: Optional[str], category: Optional[str] = None) -> DPWHClassification:
    """Classification for a line without a pay item, from its trade."""
    prefix = TRADE_ITEM_NUMBERS.get(trade or '')
    if prefix is None:
        return classify_dpwh_item(None, category or trade)
    part, name = _part_for(prefix)
    return DPWHClassification(
        part=f"{part}: {name}",
        part_name=name,
        subcategory=_subcategory(prefix, category or trade),
    )


def classify_takeoff_line(line: TakeoffLine) -> DPWHClassification:
    """
    Classify a takeoff line by its dpwh tag, falling back to its trade.

    The subcategory keywords are matched against the finish name, the finish
    category, the earthwork kind or the trade, whichever the line carries first.
    """
    category = (
        line.tag_value('finish')
        or line.tag_value('category')
        or line.tag_value('kind')
        or line.trade
    )
    item = line.dpwh_item
    if item and item.strip() and item.strip() != '-':
        return classify_dpwh_item(item, category)
    return classify_part_by_trade(line.trade, category)


def dpwh_part_sort_key(part: str) -> Tuple[int, str]:
    """Canonical order A, C, D, E, F, G; unknown parts last."""
    part_id = part.split(':')[0].strip()
    try:
        return PART_ORDER.index(part_id), part
    except ValueError:
        return len(PART_ORDER), part


def sort_dpwh_parts(parts: Iterable[str]) -> List[str]:
    return sorted(parts, key=dpwh_part_sort_key)
