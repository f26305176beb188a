"""
Calc Run

One synchronous pass over a project snapshot:

1. Build the grid/level index once
2. Recompute space, wall surface and opening geometry
3. Finish takeoff (spaces and wall surfaces)
4. Structural takeoff (concrete, formwork, rebar)
5. Earthwork takeoff (excavation, embankment)
6. Roofing takeoff (roof plane geometry and covering)

The first engine error propagates unchanged; no partial run is returned.
"""

import dataclasses
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .earthwork.calculator import EarthworkCalculator
from .finishes.calculator import FinishCalculator
from .geometry.grid import GridIndex
from .geometry.space import compute_opening_area, compute_space_geometry
from .geometry.wall_surface import compute_wall_surface_geometry
from .models.project import Opening, ProjectSnapshot
from .models.takeoff import TakeoffLine, round_half_up
from .roofing.calculator import RoofingCalculator
from .settings import EngineSettings
from .structural.quantity_engine import QuantityEngine
from .trace import NULL_TRACE, TraceSink

logger = logging.getLogger(__name__)


@dataclass
class CalcRun:
    """Output of one calc run."""
    run_id: str
    takeoff_lines: List[TakeoffLine] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)
    timestamp: str = ""
    project_name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "runId": self.run_id,
            "timestamp": self.timestamp,
            "projectName": self.project_name,
            "summary": dict(self.summary),
            "takeoffLines": [line.to_dict() for line in self.takeoff_lines],
        }


def _with_opening_area(opening: Opening) -> Opening:
    if opening.width_m is None or opening.height_m is None:
        return opening
    return dataclasses.replace(
        opening, area_m2=compute_opening_area(opening.width_m, opening.height_m, opening.qty)
    )


def prepare_snapshot(project: ProjectSnapshot, index: GridIndex,
                     trace: Optional[TraceSink] = None) -> ProjectSnapshot:
    """Copy of the snapshot with freshly computed geometry."""
    spaces = [s.with_geometry(compute_space_geometry(s, index, trace=trace)) for s in project.spaces]
    walls = [w.with_geometry(compute_wall_surface_geometry(w, index)) for w in project.wall_surfaces]
    openings = [_with_opening_area(o) for o in project.openings]
    return dataclasses.replace(project, spaces=spaces, wall_surfaces=walls, openings=openings)


def run_calculation(
    project: ProjectSnapshot,
    settings: Optional[EngineSettings] = None,
    trace: Optional[TraceSink] = None,
) -> CalcRun:
    """
    Run every calculator over a project snapshot.

    Args:
        project: Input snapshot (not modified)
        settings: Run policies; built-in defaults when omitted
        trace: Optional diagnostic sink

    Returns:
        CalcRun with all takeoff lines and the run summary

    Raises:
        TakeoffError subclasses from any calculator
    """
    settings = settings or EngineSettings()
    trace = trace or NULL_TRACE
    run_id = str(uuid.uuid4())

    logger.info(f"Calc run {run_id} started for project '{project.name}'")

    index = GridIndex(project.grid, project.levels, trace=trace)
    snapshot = prepare_snapshot(project, index, trace)

    finishes = FinishCalculator(settings).calculate(
        index,
        snapshot.spaces,
        snapshot.openings,
        snapshot.finish_types,
        snapshot.space_assignments,
        snapshot.wall_surfaces,
        snapshot.wall_assignments,
    )
    structural = QuantityEngine(settings).calculate(
        snapshot.element_instances, snapshot.element_templates, index
    )
    earthwork = EarthworkCalculator(settings, trace=trace).calculate(snapshot.earthwork_items)
    roofing = RoofingCalculator(settings, trace=trace).calculate(
        index, snapshot.roof_planes, snapshot.roof_types
    )

    lines = [
        *finishes.takeoff_lines,
        *structural.takeoff_lines,
        *earthwork.takeoff_lines,
        *roofing.takeoff_lines,
    ]

    summary = {
        **structural.summary.to_dict(),
        'totalEarthwork': round_half_up(earthwork.total_volume, 3),
        'totalFloorArea': round_half_up(finishes.total_floor_area, 3),
        'totalWallArea': round_half_up(finishes.total_wall_area, 3),
        'totalCeilingArea': round_half_up(finishes.total_ceiling_area, 3),
        'totalRoofArea': round_half_up(roofing.total_roof_area, 3),
        'takeoffLineCount': len(lines),
    }

    logger.info(f"Calc run {run_id} finished: {len(lines)} takeoff lines")

    return CalcRun(
        run_id=run_id,
        takeoff_lines=lines,
        summary=summary,
        timestamp=datetime.now().isoformat(),
        project_name=project.name,
    )
