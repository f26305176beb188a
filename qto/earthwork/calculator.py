"""
Earthwork Calculator
Turns station-sampled earthwork items into takeoff lines.

- Excavation items: average area or prismoidal method
- Embankment items: average area x compaction factor
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..models.project import EarthworkItem, EarthworkKind, VolumeMethod
from ..models.takeoff import TakeoffLine, TakeoffLineBuilder, format_number
from ..settings import EngineSettings
from ..trace import TraceSink
from .excavation import (
    ExcavationVolumeResult,
    calculate_average_area_method,
    calculate_embankment_volume,
    calculate_prismoidal_method,
    round_volume,
)

logger = logging.getLogger(__name__)

EARTHWORK_TRADE = "Earthwork"
VOLUME_UNIT = "m³"


@dataclass
class EarthworkResult:
    takeoff_lines: List[TakeoffLine] = field(default_factory=list)
    total_volume: float = 0.0


class EarthworkCalculator:
    """Volume takeoff for excavation and embankment items."""

    def __init__(self, settings: Optional[EngineSettings] = None, trace: Optional[TraceSink] = None):
        self.settings = settings or EngineSettings()
        self.trace = trace

    def volume(self, item: EarthworkItem) -> ExcavationVolumeResult:
        if item.kind is EarthworkKind.EMBANKMENT:
            return calculate_embankment_volume(item.stations, item.compaction_factor, trace=self.trace)
        if item.method is VolumeMethod.PRISMOIDAL:
            return calculate_prismoidal_method(item.stations, trace=self.trace)
        return calculate_average_area_method(item.stations, trace=self.trace)

    def calculate_item(self, item: EarthworkItem) -> TakeoffLine:
        result = self.volume(item)
        places = self.settings.places('earthwork')
        qty = round_volume(result.total_volume, places)
        dpwh_item = item.dpwh_item_number or self.settings.dpwh_items.get(item.kind.value, "")
        method = VolumeMethod.AVERAGE_AREA if item.kind is EarthworkKind.EMBANKMENT else item.method

        builder = TakeoffLineBuilder(
            source_element_id=item.id,
            trade=EARTHWORK_TRADE,
            resource_key=f"{item.kind.value}-{item.id}",
            unit=VOLUME_UNIT,
        )
        builder.inputs(
            stationCount=len(item.stations),
            totalLength_m=result.total_length,
            unadjustedVolume_m3=result.unadjusted_volume,
            compactionFactor=item.compaction_factor if item.kind is EarthworkKind.EMBANKMENT else 1.0,
        )
        builder.assume("method", f"Method: {result.method}", method.value)
        builder.assume("stations", f"Stations: {len(item.stations)} over {result.total_length:.3f}m",
                       len(item.stations))
        if item.kind is EarthworkKind.EMBANKMENT:
            builder.assume("compaction", f"Compaction factor: {format_number(item.compaction_factor)}",
                           item.compaction_factor)

        builder.tag(
            "type:earthwork",
            f"kind:{item.kind.value}",
            f"method:{method.value}",
            f"name:{item.name}",
            f"dpwh:{dpwh_item}",
        )
        return builder.build(qty, f"{result.formula_text}\n= {qty:.{places}f} {VOLUME_UNIT}")

    def calculate(self, items: Sequence[EarthworkItem]) -> EarthworkResult:
        result = EarthworkResult()
        for item in items:
            line = self.calculate_item(item)
            result.takeoff_lines.append(line)
            result.total_volume += line.quantity
            logger.debug(f"Earthwork {item.id} ({item.kind.value}): {line.quantity} {VOLUME_UNIT}")

        if items:
            logger.info(f"Earthwork: {len(result.takeoff_lines)} items, {result.total_volume:.3f} {VOLUME_UNIT}")
        return result
