"""
Excavation Volume Calculations

Earthwork volumes from cross-section stations or closed-form shapes:
- Average area method: V = sum((A1 + A2) / 2 x L)
- Prismoidal method: V = sum((L / 6) x (A1 + 4Am + A2)) over stride-2 triples
- Rectangular pit: V = L x W x D
- Trench with optional side slope (trapezoidal section)
- Embankment: average area volume x compaction factor
- Slope correction factor: 1 / cos(angle)

Every result carries a formula text with the literal inputs, for the audit trail.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..errors import InsufficientStations, InvalidDimension
from ..models.project import ExcavationStation
from ..models.takeoff import format_number, round_half_up
from ..trace import NULL_TRACE, TraceSink

AVERAGE_AREA_MIN_STATIONS = 2
PRISMOIDAL_MIN_STATIONS = 3


@dataclass
class ExcavationSegment:
    """Volume between two stations (or across a prismoidal triple)."""
    from_station: str
    to_station: str
    distance: float
    area1: float
    area2: float
    avg_area: float
    volume: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.from_station,
            "to": self.to_station,
            "distance": self.distance,
            "area1": self.area1,
            "area2": self.area2,
            "avgArea": self.avg_area,
            "volume": self.volume,
        }


@dataclass
class ExcavationVolumeResult:
    segments: List[ExcavationSegment]
    total_volume: float
    method: str
    formula_text: str
    unadjusted_volume: Optional[float] = None

    def __post_init__(self):
        if self.unadjusted_volume is None:
            self.unadjusted_volume = self.total_volume

    @property
    def total_length(self) -> float:
        return sum(s.distance for s in self.segments)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "segments": [s.to_dict() for s in self.segments],
            "totalVolume": self.total_volume,
            "unadjustedVolume": self.unadjusted_volume,
            "method": self.method,
            "formulaText": self.formula_text,
        }


@dataclass
class ExcavationOutput:
    volume: float
    volume_with_waste: float
    formula_text: str
    inputs: Dict[str, float] = field(default_factory=dict)


def _sorted_stations(stations: Sequence[ExcavationStation], method: str,
                     minimum: int) -> List[ExcavationStation]:
    if len(stations) < minimum:
        raise InsufficientStations(method, len(stations), minimum)
    for sta in stations:
        if sta.area < 0:
            raise InvalidDimension(f"station {sta.station} area", sta.area, "must be >= 0")
    return sorted(stations, key=lambda s: s.chainage)


def _average_area_segment(sta1: ExcavationStation, sta2: ExcavationStation) -> ExcavationSegment:
    distance = sta2.chainage - sta1.chainage
    avg_area = (sta1.area + sta2.area) / 2
    return ExcavationSegment(
        from_station=sta1.station,
        to_station=sta2.station,
        distance=distance,
        area1=sta1.area,
        area2=sta2.area,
        avg_area=avg_area,
        volume=avg_area * distance,
    )


def calculate_average_area_method(
    stations: Sequence[ExcavationStation],
    trace: Optional[TraceSink] = None,
) -> ExcavationVolumeResult:
    """
    Average end area volume over stations sorted by chainage.

    Raises:
        InsufficientStations: fewer than 2 stations
    """
    trace = trace or NULL_TRACE
    ordered = _sorted_stations(stations, "Average Area Method", AVERAGE_AREA_MIN_STATIONS)

    segments = []
    for sta1, sta2 in zip(ordered, ordered[1:]):
        segment = _average_area_segment(sta1, sta2)
        trace.record("excavation_segment", **segment.to_dict())
        segments.append(segment)

    total = sum(s.volume for s in segments)
    return ExcavationVolumeResult(
        segments=segments,
        total_volume=total,
        method="Average Area Method",
        formula_text=f"Average Area Method: V = Σ[(A₁ + A₂)/2 × L] = {total:.3f} m³",
    )


def calculate_prismoidal_method(
    stations: Sequence[ExcavationStation],
    trace: Optional[TraceSink] = None,
) -> ExcavationVolumeResult:
    """
    Prismoidal volume over overlapping station triples (stride 2).

    With an even number of stations the last two stations are not covered
    by a triple; that trailing pair is computed with the average area formula.
    For stations at 0/10/20/30 this gives one prismoid over 0-20 plus one
    average-area segment over 20-30.

    Raises:
        InsufficientStations: fewer than 3 stations
    """
    trace = trace or NULL_TRACE
    ordered = _sorted_stations(stations, "Prismoidal Method", PRISMOIDAL_MIN_STATIONS)

    segments = []
    for i in range(0, len(ordered) - 2, 2):
        sta1, mid, sta2 = ordered[i], ordered[i + 1], ordered[i + 2]
        distance = sta2.chainage - sta1.chainage
        volume = (distance / 6) * (sta1.area + 4 * mid.area + sta2.area)
        segment = ExcavationSegment(
            from_station=sta1.station,
            to_station=sta2.station,
            distance=distance,
            area1=sta1.area,
            area2=sta2.area,
            avg_area=volume / distance if distance else 0.0,
            volume=volume,
        )
        trace.record("excavation_segment", **segment.to_dict())
        segments.append(segment)

    if len(ordered) % 2 == 0:
        segment = _average_area_segment(ordered[-2], ordered[-1])
        trace.record("excavation_segment", trailing_pair=True, **segment.to_dict())
        segments.append(segment)

    total = sum(s.volume for s in segments)
    return ExcavationVolumeResult(
        segments=segments,
        total_volume=total,
        method="Prismoidal Method",
        formula_text=f"Prismoidal Method: V = Σ[(L/6) × (A₁ + 4Am + A₂)] = {total:.3f} m³",
    )


def _check_waste(waste: float) -> None:
    if waste < 0 or waste > 1:
        raise InvalidDimension("waste", waste, "must be between 0 and 1")


def _check_positive(**dims: float) -> None:
    for name, value in dims.items():
        if value <= 0:
            raise InvalidDimension(name, value, "must be positive")


def calculate_rectangular_excavation(length: float, width: float, depth: float,
                                     waste: float = 0.0) -> ExcavationOutput:
    """Pit or basement excavation: L x W x D, plus waste."""
    _check_positive(length=length, width=width, depth=depth)
    _check_waste(waste)

    volume = length * width * depth
    volume_with_waste = volume * (1 + waste)

    formula = (
        f"V = L × W × D = {format_number(length)} × {format_number(width)} × "
        f"{format_number(depth)} = {volume:.3f} m³"
    )
    if waste > 0:
        formula += f" (+ {waste * 100:.0f}% waste = {volume_with_waste:.3f} m³)"

    return ExcavationOutput(
        volume=volume,
        volume_with_waste=volume_with_waste,
        formula_text=formula,
        inputs={"length": length, "width": width, "depth": depth, "waste": waste},
    )


def calculate_trench_excavation(length: float, bottom_width: float, depth: float,
                                side_slope: float = 0.0, waste: float = 0.0) -> ExcavationOutput:
    """
    Trench excavation.

    Args:
        length: Trench length (m)
        bottom_width: Width at the trench bottom (m)
        depth: Trench depth (m)
        side_slope: Horizontal:vertical ratio of each side, 0 for vertical sides
        waste: Fraction in [0, 1]
    """
    _check_positive(length=length, bottomWidth=bottom_width, depth=depth)
    if side_slope < 0:
        raise InvalidDimension("sideSlope", side_slope, "must be non-negative")
    _check_waste(waste)

    L, Wb, D = format_number(length), format_number(bottom_width), format_number(depth)

    if side_slope == 0:
        volume = length * bottom_width * depth
        formula = f"V = L × W × D = {L} × {Wb} × {D} = {volume:.3f} m³"
    else:
        top_width = bottom_width + 2 * depth * side_slope
        avg_width = (top_width + bottom_width) / 2
        volume = length * avg_width * depth
        formula = (
            "V = L × [(Wb + Wt)/2] × D\n"
            f"Wt = Wb + 2×D×S = {Wb} + 2×{D}×{format_number(side_slope)} = {top_width:.2f} m\n"
            f"Avg Width = {avg_width:.2f} m\n"
            f"V = {L} × {avg_width:.2f} × {D} = {volume:.3f} m³"
        )

    volume_with_waste = volume * (1 + waste)
    if waste > 0:
        formula += f"\n(+ {waste * 100:.0f}% waste = {volume_with_waste:.3f} m³)"

    return ExcavationOutput(
        volume=volume,
        volume_with_waste=volume_with_waste,
        formula_text=formula,
        inputs={"length": length, "bottomWidth": bottom_width, "depth": depth,
                "sideSlope": side_slope, "waste": waste},
    )


def calculate_embankment_volume(
    stations: Sequence[ExcavationStation],
    compaction_factor: float = 1.0,
    trace: Optional[TraceSink] = None,
) -> ExcavationVolumeResult:
    """Average area fill volume scaled by a compaction factor."""
    if compaction_factor <= 0:
        raise InvalidDimension("compactionFactor", compaction_factor, "must be positive")

    result = calculate_average_area_method(stations, trace=trace)
    adjusted = result.total_volume * compaction_factor

    return ExcavationVolumeResult(
        segments=result.segments,
        total_volume=adjusted,
        method="Average Area Method with Compaction",
        formula_text=(
            f"{result.formula_text} × {format_number(compaction_factor)} (compaction) "
            f"= {adjusted:.3f} m³"
        ),
        unadjusted_volume=result.total_volume,
    )


def slope_correction_factor(slope_angle_degrees: float) -> float:
    """1 / cos(angle) for a terrain slope given in degrees, 0 <= angle < 90."""
    if slope_angle_degrees < 0 or slope_angle_degrees >= 90:
        raise InvalidDimension("slopeAngle", slope_angle_degrees, "must be in [0, 90) degrees")
    return 1 / math.cos(math.radians(slope_angle_degrees))


def round_volume(volume: float, decimals: int = 3) -> float:
    return round_half_up(volume, decimals)
