"""
Roofing Calculator
Computes roof plane geometry and one covering line per plane.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..errors import ReferenceNotFound
from ..geometry.grid import GridIndex
from ..models.project import RoofPlane, RoofType
from ..models.takeoff import TakeoffLine
from ..settings import EngineSettings
from ..trace import TraceSink
from .geometry import compute_roof_plane_geometry
from .takeoff import compute_roof_cover_takeoff

logger = logging.getLogger(__name__)


@dataclass
class RoofingResult:
    takeoff_lines: List[TakeoffLine] = field(default_factory=list)
    roof_planes: List[RoofPlane] = field(default_factory=list)
    total_roof_area: float = 0.0


class RoofingCalculator:
    """Roof covering takeoff over the roof planes of a snapshot."""

    def __init__(self, settings: Optional[EngineSettings] = None, trace: Optional[TraceSink] = None):
        self.settings = settings or EngineSettings()
        self.trace = trace

    def calculate(self, index: GridIndex, planes: Sequence[RoofPlane],
                  roof_types: Sequence[RoofType]) -> RoofingResult:
        """
        Raises:
            ReferenceNotFound: a plane names a roof type that does not exist
        """
        types_by_id: Dict[str, RoofType] = {t.id: t for t in roof_types}
        places = self.settings.places('roofing')
        result = RoofingResult()

        for plane in planes:
            roof_type = types_by_id.get(plane.roof_type_id)
            if roof_type is None:
                raise ReferenceNotFound("RoofType", plane.roof_type_id, plane.id)

            plane = plane.with_geometry(compute_roof_plane_geometry(plane, index, trace=self.trace))
            line = compute_roof_cover_takeoff(plane, roof_type, places)

            result.roof_planes.append(plane)
            result.takeoff_lines.append(line)
            result.total_roof_area += plane.computed.slope_area_m2
            logger.debug(f"Roof plane {plane.id}: {line.quantity} {line.unit}")

        if planes:
            logger.info(f"Roofing: {len(planes)} planes, {result.total_roof_area:.3f} m² sloped area")
        return result
