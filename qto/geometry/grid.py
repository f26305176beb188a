"""
Grid & Level Resolver

Resolves grid-line labels to offsets and level labels to elevations.
A GridIndex is built once per calc run and passed to every geometry
function, so lookups never rescan the label arrays.

Missing labels raise GridLineNotFound / LevelNotFound listing what is available.
"""

from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..errors import GridLineNotFound, InvalidDimension, LevelNotFound
from ..models.project import Axis, GridLine, GridSystem, Level
from ..trace import NULL_TRACE, TraceSink


def _first_wins(pairs) -> Dict[str, float]:
    index: Dict[str, float] = {}
    for label, value in pairs:
        index.setdefault(label, value)
    return index


class GridIndex:
    """Label -> offset/elevation maps for one grid system and level list."""

    def __init__(self, grid: GridSystem, levels: Sequence[Level] = (),
                 trace: Optional[TraceSink] = None):
        self.grid = grid
        self.levels = list(levels)
        self.trace = trace or NULL_TRACE
        self._lines = {
            Axis.X: _first_wins((g.label, g.offset) for g in grid.grid_x),
            Axis.Y: _first_wins((g.label, g.offset) for g in grid.grid_y),
        }
        self._levels = _first_wins((lv.label, lv.elevation) for lv in self.levels)

    def labels(self, axis: Union[Axis, str]) -> List[str]:
        return [g.label for g in self.grid.axis_lines(Axis(axis))]

    def level_labels(self) -> List[str]:
        return [lv.label for lv in self.levels]

    def has_line(self, axis: Union[Axis, str], label: str) -> bool:
        return label in self._lines[Axis(axis)]

    def has_level(self, label: str) -> bool:
        return label in self._levels

    def offset(self, axis: Union[Axis, str], label: str) -> float:
        """Offset of one grid label on the given axis."""
        return self.offsets(axis, [label])[0]

    def offsets(self, axis: Union[Axis, str], labels: Sequence[str]) -> List[float]:
        """
        Offsets of several labels on one axis.

        Raises:
            GridLineNotFound: naming every missing label of the request
        """
        axis = Axis(axis)
        lookup = self._lines[axis]
        missing = [label for label in labels if label not in lookup]
        if missing:
            raise GridLineNotFound(missing, self.labels(axis), axis.value)

        values = [lookup[label] for label in labels]
        self.trace.record("grid_lookup", axis=axis.value, labels=list(labels), offsets=values)
        return values

    def span_offsets(self, axis: Union[Axis, str], labels: Sequence[str], field: str) -> Tuple[float, float]:
        """
        Offsets of a [start, end] label pair.

        Raises:
            InvalidDimension: labels is not exactly two entries
            GridLineNotFound: either label is missing
        """
        if len(labels) != 2:
            raise InvalidDimension(field, list(labels), "expected exactly 2 grid labels [start, end]")
        start, end = self.offsets(axis, labels)
        return start, end

    def elevation(self, label: str) -> float:
        if label not in self._levels:
            raise LevelNotFound(label, self.level_labels())
        value = self._levels[label]
        self.trace.record("level_lookup", label=label, elevation=value)
        return value

    def level_above(self, label: str) -> Optional[Level]:
        """Nearest level strictly above the given one, or None for the top level."""
        elevation = self.elevation(label)
        above = [lv for lv in self.levels if lv.elevation > elevation]
        return min(above, key=lambda lv: lv.elevation) if above else None


def as_grid_index(grid: Union[GridSystem, GridIndex], levels: Sequence[Level] = (),
                  trace: Optional[TraceSink] = None) -> GridIndex:
    """Accept either a prepared index or a raw grid system."""
    if isinstance(grid, GridIndex):
        return grid
    return GridIndex(grid, levels, trace=trace)


def resolve_grid_offset(lines: Sequence[GridLine], label: str, axis: str = "X") -> float:
    """Offset of a label within one axis array."""
    for line in lines:
        if line.label == label:
            return line.offset
    raise GridLineNotFound([label], [g.label for g in lines], axis)


def resolve_level_elevation(levels: Sequence[Level], label: str) -> float:
    for level in levels:
        if level.label == label:
            return level.elevation
    raise LevelNotFound(label, [lv.label for lv in levels])
