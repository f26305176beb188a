"""
Finish Calculator Module
Generates finish takeoff lines for every space and wall surface assignment.

Calculations:
- Floor finish area = space area (x waste)
- Ceiling finish area = space area, 0 when open to below
- Wall/plaster/paint on a space = perimeter x storey height - openings
- Wall/plaster/paint on a wall surface = (gross area - openings) x sides

Storey height of a space = elevation of the next level above minus its own
elevation; the topmost level uses the configured default height.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..errors import InvalidDimension, ReferenceNotFound
from ..geometry.grid import GridIndex
from ..models.project import (
    FinishCategory,
    FinishType,
    Opening,
    Space,
    SpaceFinishAssignment,
    WallSurface,
    WallSurfaceFinishAssignment,
)
from ..models.takeoff import TakeoffLine, round_half_up
from ..settings import EngineSettings
from .takeoff import (
    compute_ceiling_finish_takeoff,
    compute_floor_finish_takeoff,
    compute_wall_finish_takeoff,
    compute_wall_surface_finish_takeoff,
)

logger = logging.getLogger(__name__)


@dataclass
class FinishesResult:
    """Finish takeoff lines with per-category area subtotals."""
    takeoff_lines: List[TakeoffLine] = field(default_factory=list)
    total_floor_area: float = 0.0
    total_wall_area: float = 0.0
    total_ceiling_area: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalFloorArea': round_half_up(self.total_floor_area, 3),
            'totalWallArea': round_half_up(self.total_wall_area, 3),
            'totalCeilingArea': round_half_up(self.total_ceiling_area, 3),
            'finishLineCount': len(self.takeoff_lines),
        }


class FinishCalculator:
    """
    Calculate finish quantities for spaces and wall surfaces.

    Expects spaces and wall surfaces with computed geometry; the calc run
    recomputes geometry before calling calculate().
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings()

    def storey_height(self, level_label: str, index: GridIndex) -> Tuple[float, Optional[str]]:
        """
        Height from a level to the next level above it.

        Returns:
            (height_m, note) where note is set when the default height was used

        Raises:
            LevelNotFound: the space's level is not defined
        """
        elevation = index.elevation(level_label)
        above = index.level_above(level_label)
        if above is None:
            return self.settings.default_storey_height_m, "default, no level above"
        return above.elevation - elevation, None

    def calculate(
        self,
        index: GridIndex,
        spaces: Sequence[Space],
        openings: Sequence[Opening],
        finish_types: Sequence[FinishType],
        space_assignments: Sequence[SpaceFinishAssignment] = (),
        wall_surfaces: Sequence[WallSurface] = (),
        wall_assignments: Sequence[WallSurfaceFinishAssignment] = (),
    ) -> FinishesResult:
        """
        Produce one takeoff line per assignment.

        Raises:
            ReferenceNotFound: assignment references a missing space, wall or finish type
        """
        spaces_by_id = {s.id: s for s in spaces}
        walls_by_id = {w.id: w for w in wall_surfaces}
        finishes_by_id = {f.id: f for f in finish_types}

        result = FinishesResult()

        for assignment in space_assignments:
            space = spaces_by_id.get(assignment.space_id)
            if space is None:
                raise ReferenceNotFound("Space", assignment.space_id, assignment.id)
            finish_type = finishes_by_id.get(assignment.finish_type_id)
            if finish_type is None:
                raise ReferenceNotFound("FinishType", assignment.finish_type_id, assignment.id)

            line = self._space_line(space, finish_type, assignment, openings, index, result)
            result.takeoff_lines.append(line)
            logger.debug(f"Space {space.id} {finish_type.category.value}: {line.quantity} {line.unit}")

        for assignment in wall_assignments:
            wall = walls_by_id.get(assignment.wall_surface_id)
            if wall is None:
                raise ReferenceNotFound("WallSurface", assignment.wall_surface_id, assignment.id)
            finish_type = finishes_by_id.get(assignment.finish_type_id)
            if finish_type is None:
                raise ReferenceNotFound("FinishType", assignment.finish_type_id, assignment.id)

            line = compute_wall_surface_finish_takeoff(
                wall,
                finish_type,
                openings,
                side=assignment.side,
                waste_percent=assignment.overrides.waste_percent,
                scope=assignment.scope,
            )
            result.takeoff_lines.append(line)
            result.total_wall_area += line.quantity
            logger.debug(f"Wall surface {wall.id} {finish_type.finish_name}: {line.quantity} {line.unit}")

        logger.info(
            f"Finishes: {len(result.takeoff_lines)} lines, floor {result.total_floor_area:.2f}, "
            f"wall {result.total_wall_area:.2f}, ceiling {result.total_ceiling_area:.2f}"
        )
        return result

    def _space_line(self, space: Space, finish_type: FinishType, assignment: SpaceFinishAssignment,
                    openings: Sequence[Opening], index: GridIndex,
                    result: FinishesResult) -> TakeoffLine:
        category = finish_type.category

        if category is FinishCategory.FLOOR:
            line = compute_floor_finish_takeoff(space, finish_type, assignment)
            result.total_floor_area += line.quantity
        elif category is FinishCategory.CEILING:
            line = compute_ceiling_finish_takeoff(space, finish_type, assignment)
            result.total_ceiling_area += line.quantity
        elif category.is_wall_like:
            height, note = self.storey_height(space.level_id, index)
            line = compute_wall_finish_takeoff(
                space, finish_type, assignment, openings,
                storey_height_m=height, storey_height_note=note,
            )
            result.total_wall_area += line.quantity
        else:
            raise InvalidDimension("category", category, f"unsupported for finish type {finish_type.id}")

        return line
