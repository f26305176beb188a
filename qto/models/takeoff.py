"""
Takeoff Line Records

The engine's output unit plus the builder every calculator uses to assemble it.

Provides:
- TakeoffLine: immutable quantity record with formula provenance
- Assumption: structured assumption entry (key, text, value)
- TakeoffLineBuilder: collects inputs, assumptions and tags, then builds once
- round_half_up: the one rounding rule for every reported quantity
"""

import uuid
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Tuple


def round_half_up(value: float, places: int) -> float:
    """
    Round half away from zero on the shortest decimal form of the value.

    round() works on the binary value, so 10.0625 -> 10.062 and 0.125 -> 0.12;
    quantities are reported the way an estimator rounds them by hand.
    """
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(repr(float(value))).quantize(exponent, rounding=ROUND_HALF_UP))


def format_number(value: float) -> str:
    """Literal input text for formulas and assumptions (3.0 -> '3', 0.45 -> '0.45')."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


@dataclass(frozen=True)
class Assumption:
    """One assumption behind a quantity, e.g. height basis or waste."""
    key: str
    text: str
    value: Any = None


@dataclass(frozen=True)
class TakeoffLine:
    """A single computed quantity tied to a source element."""
    id: str
    source_element_id: str
    trade: str
    resource_key: str
    quantity: float
    unit: str
    formula_text: str
    inputs_snapshot: Dict[str, float] = field(default_factory=dict)
    assumptions: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    assumption_records: Tuple[Assumption, ...] = ()

    def tag_value(self, prefix: str) -> Optional[str]:
        """Value of the first tag of the form ``prefix:value``."""
        marker = f"{prefix}:"
        for tag in self.tags:
            if tag.startswith(marker):
                return tag[len(marker):]
        return None

    @property
    def dpwh_item(self) -> Optional[str]:
        return self.tag_value("dpwh")

    def assumption(self, key: str) -> Optional[Assumption]:
        for record in self.assumption_records:
            if record.key == key:
                return record
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sourceElementId": self.source_element_id,
            "trade": self.trade,
            "resourceKey": self.resource_key,
            "quantity": self.quantity,
            "unit": self.unit,
            "formulaText": self.formula_text,
            "inputsSnapshot": dict(self.inputs_snapshot),
            "assumptions": list(self.assumptions),
            "tags": list(self.tags),
        }


class TakeoffLineBuilder:
    """
    Assembles a TakeoffLine at the end of a calculation.

    Calculators register inputs, assumptions and tags as they go and call
    build() once with the final quantity and formula. Only the id is random.
    """

    def __init__(self, source_element_id: str, trade: str, resource_key: str, unit: str):
        self.source_element_id = source_element_id
        self.trade = trade
        self.resource_key = resource_key
        self.unit = unit
        self._inputs: Dict[str, float] = {}
        self._assumptions: List[Assumption] = []
        self._tags: List[str] = []

    def input(self, name: str, value: float) -> "TakeoffLineBuilder":
        self._inputs[name] = value
        return self

    def inputs(self, **values: float) -> "TakeoffLineBuilder":
        self._inputs.update(values)
        return self

    def assume(self, key: str, text: str, value: Any = None) -> "TakeoffLineBuilder":
        self._assumptions.append(Assumption(key=key, text=text, value=value))
        return self

    def tag(self, *tags: str) -> "TakeoffLineBuilder":
        for tag in tags:
            if tag and tag not in self._tags:
                self._tags.append(tag)
        return self

    def build(self, quantity: float, formula_text: str) -> TakeoffLine:
        return TakeoffLine(
            id=str(uuid.uuid4()),
            source_element_id=self.source_element_id,
            trade=self.trade,
            resource_key=self.resource_key,
            quantity=quantity,
            unit=self.unit,
            formula_text=formula_text,
            inputs_snapshot=dict(self._inputs),
            assumptions=tuple(a.text for a in self._assumptions),
            tags=tuple(self._tags),
            assumption_records=tuple(self._assumptions),
        )
