"""
Project Snapshot Entities

In-memory shapes of the project entities a calc run reads:
- Grid lines and levels (coordinate system)
- Spaces with tagged boundaries (grid rectangle or polygon)
- Wall surfaces placed on grid lines between levels
- Openings, finish types and finish assignments
- Structural element templates/instances
- Earthwork items sampled by excavation stations
- Roof types and sloped roof planes

Computed geometry on spaces and wall surfaces is derived data: the calc run
recomputes it from the boundary/grid inputs and never trusts stored values.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union


class Axis(Enum):
    """Grid axis a wall sits on."""
    X = "X"
    Y = "Y"

    @property
    def cross(self) -> "Axis":
        return Axis.Y if self is Axis.X else Axis.X


class SurfaceType(Enum):
    """Which faces of a wall surface receive finish."""
    EXTERIOR = "exterior"
    INTERIOR = "interior"
    BOTH = "both"


class FinishCategory(Enum):
    FLOOR = "floor"
    WALL = "wall"
    CEILING = "ceiling"
    PLASTER = "plaster"
    PAINT = "paint"

    @property
    def is_wall_like(self) -> bool:
        return self in (FinishCategory.WALL, FinishCategory.PLASTER, FinishCategory.PAINT)


class WallSide(Enum):
    """Per-assignment override of the sides count."""
    SINGLE = "single"
    BOTH = "both"


class ElementType(Enum):
    BEAM = "beam"
    COLUMN = "column"
    SLAB = "slab"
    FOUNDATION = "foundation"


class EarthworkKind(Enum):
    EXCAVATION = "excavation"
    EMBANKMENT = "embankment"


class VolumeMethod(Enum):
    AVERAGE_AREA = "averageArea"
    PRISMOIDAL = "prismoidal"


class SlopeMode(Enum):
    """How a roof slope value is expressed."""
    RATIO = "ratio"
    DEGREES = "degrees"


class AreaBasis(Enum):
    """Which roof area a covering quantity is measured on."""
    SLOPE_AREA = "slopeArea"
    PLAN_AREA = "planArea"


# =============================================================================
# COORDINATE SYSTEM
# =============================================================================

@dataclass(frozen=True)
class GridLine:
    """Named coordinate on one axis (meters from origin)."""
    label: str
    offset: float


@dataclass(frozen=True)
class Level:
    """Named vertical datum (meters from reference)."""
    label: str
    elevation: float


@dataclass
class GridSystem:
    """Grid lines for both axes."""
    grid_x: List[GridLine] = field(default_factory=list)
    grid_y: List[GridLine] = field(default_factory=list)

    def axis_lines(self, axis: Axis) -> List[GridLine]:
        return self.grid_x if axis is Axis.X else self.grid_y


# =============================================================================
# SPACES
# =============================================================================

@dataclass(frozen=True)
class GridRectBoundary:
    """Rectangle bounded by two X grid labels and two Y grid labels."""
    grid_x: Tuple[str, str]
    grid_y: Tuple[str, str]

    boundary_type: ClassVar[str] = "gridRect"


@dataclass(frozen=True)
class PolygonBoundary:
    """Closed ring of (x, y) points; the last point connects to the first."""
    points: Tuple[Tuple[float, float], ...]

    boundary_type: ClassVar[str] = "polygon"


Boundary = Union[GridRectBoundary, PolygonBoundary]


@dataclass(frozen=True)
class SpaceGeometry:
    area_m2: float
    perimeter_m: float


@dataclass
class Space:
    """A 2D room/area on a level."""
    id: str
    name: str
    level_id: str
    boundary: Boundary
    computed: Optional[SpaceGeometry] = None
    tags: List[str] = field(default_factory=list)
    open_to_below: bool = False

    def with_geometry(self, geometry: SpaceGeometry) -> "Space":
        return replace(self, computed=geometry)


# =============================================================================
# WALL SURFACES AND OPENINGS
# =============================================================================

@dataclass(frozen=True)
class WallGridLine:
    """Grid line a wall sits on, bounded by two cross-axis labels."""
    axis: Axis
    label: str
    span: Tuple[str, str]


@dataclass(frozen=True)
class WallSurfaceGeometry:
    length_m: float
    height_m: float
    gross_area_m2: float
    sides_count: int
    total_area_m2: float


@dataclass
class WallSurface:
    """Explicitly modeled vertical plane used for precise wall finishes."""
    id: str
    name: str
    grid_line: WallGridLine
    level_start: str
    level_end: str
    surface_type: SurfaceType
    facing: Optional[str] = None
    computed: Optional[WallSurfaceGeometry] = None
    tags: List[str] = field(default_factory=list)

    def with_geometry(self, geometry: WallSurfaceGeometry) -> "WallSurface":
        return replace(self, computed=geometry)


@dataclass
class Opening:
    """Door, window or other punched element."""
    id: str
    type: str
    area_m2: float
    wall_surface_id: Optional[str] = None
    space_id: Optional[str] = None
    level_id: Optional[str] = None
    width_m: Optional[float] = None
    height_m: Optional[float] = None
    qty: int = 1


# =============================================================================
# FINISH TYPES AND ASSIGNMENTS
# =============================================================================

@dataclass(frozen=True)
class FullHeight:
    """Finish runs the full storey height."""
    mode: ClassVar[str] = "fullHeight"


@dataclass(frozen=True)
class FixedHeight:
    """Finish runs to a fixed height (e.g. wainscot)."""
    value_m: float

    mode: ClassVar[str] = "fixed"


WallHeightRule = Union[FullHeight, FixedHeight]


@dataclass(frozen=True)
class DeductionRule:
    enabled: bool
    min_opening_area_to_deduct_m2: float = 0.0
    include_types: Tuple[str, ...] = ()


@dataclass(frozen=True)
class FinishAssumptions:
    waste_percent: Optional[float] = None
    rounding: Optional[int] = None


@dataclass
class FinishType:
    """Reusable finish specification."""
    id: str
    category: FinishCategory
    finish_name: str
    dpwh_item_number_raw: str
    unit: str
    wall_height_rule: Optional[WallHeightRule] = None
    deduction_rule: Optional[DeductionRule] = None
    assumptions: Optional[FinishAssumptions] = None


@dataclass(frozen=True)
class AssignmentOverrides:
    waste_percent: Optional[float] = None
    height_m: Optional[float] = None


@dataclass
class SpaceFinishAssignment:
    id: str
    space_id: str
    finish_type_id: str
    scope: str = "base"
    overrides: AssignmentOverrides = field(default_factory=AssignmentOverrides)


@dataclass
class WallSurfaceFinishAssignment:
    id: str
    wall_surface_id: str
    finish_type_id: str
    scope: str = "base"
    side: Optional[WallSide] = None
    overrides: AssignmentOverrides = field(default_factory=AssignmentOverrides)


# =============================================================================
# STRUCTURAL ELEMENTS
# =============================================================================

@dataclass(frozen=True)
class BarSpec:
    """Bar diameter (mm) with a count (beams/columns) or spacing in m (slabs/footings)."""
    diameter: int
    count: Optional[int] = None
    spacing: Optional[float] = None


@dataclass(frozen=True)
class RebarConfig:
    main_bars: Optional[BarSpec] = None
    stirrups: Optional[BarSpec] = None
    secondary_bars: Optional[BarSpec] = None
    dpwh_rebar_item: Optional[str] = None
    epoxy_coated: bool = False


@dataclass
class ElementTemplate:
    """Structural element archetype with dimensional properties (meters)."""
    id: str
    type: ElementType
    name: str
    properties: Dict[str, Any] = field(default_factory=dict)
    dpwh_item_number: Optional[str] = None
    rebar_config: Optional[RebarConfig] = None


@dataclass
class ElementInstance:
    """Placement of a template on a level; custom geometry overrides the template."""
    id: str
    template_id: str
    level_id: str
    end_level_id: Optional[str] = None
    grid_ref: Optional[List[str]] = None
    custom_geometry: Dict[str, Any] = field(default_factory=dict)
    tags: List[str] = field(default_factory=list)

    def dimension(self, template: ElementTemplate, name: str, default: Any = None) -> Any:
        """Instance value, then template value, then the default."""
        value = self.custom_geometry.get(name)
        if value is None:
            value = template.properties.get(name)
        return default if value is None else value


# =============================================================================
# EARTHWORK
# =============================================================================

@dataclass(frozen=True)
class ExcavationStation:
    """Cross-section sample along a linear alignment."""
    station: str
    chainage: float
    area: float
    notes: Optional[str] = None


@dataclass
class EarthworkItem:
    id: str
    name: str
    kind: EarthworkKind
    method: VolumeMethod = VolumeMethod.AVERAGE_AREA
    stations: List[ExcavationStation] = field(default_factory=list)
    compaction_factor: float = 1.0
    dpwh_item_number: Optional[str] = None


# =============================================================================
# ROOFING
# =============================================================================

@dataclass(frozen=True)
class RoofSlope:
    """Rise/run ratio (0.25 for 1:4) or pitch angle in degrees."""
    mode: SlopeMode = SlopeMode.RATIO
    value: float = 0.0

    def describe(self) -> str:
        if self.mode is SlopeMode.RATIO:
            return f"{self.value:g} rise/run"
        return f"{self.value:g}°"


@dataclass
class RoofType:
    """Roof covering template: pay item, area basis and allowances."""
    id: str
    name: str
    dpwh_item_number_raw: str
    unit: str = "m²"
    area_basis: AreaBasis = AreaBasis.SLOPE_AREA
    lap_allowance_percent: float = 0.0
    waste_percent: float = 0.0
    accessories_bundled: bool = False
    fasteners_included: bool = False
    notes: Optional[str] = None


@dataclass(frozen=True)
class RoofPlaneGeometry:
    plan_area_m2: float
    slope_factor: float
    slope_area_m2: float


@dataclass
class RoofPlane:
    """One roof plane drawn in plan, with its slope."""
    id: str
    name: str
    level_id: str
    boundary: Boundary
    roof_type_id: str
    slope: RoofSlope = field(default_factory=RoofSlope)
    computed: Optional[RoofPlaneGeometry] = None
    tags: List[str] = field(default_factory=list)

    def with_geometry(self, geometry: RoofPlaneGeometry) -> "RoofPlane":
        return replace(self, computed=geometry)


# =============================================================================
# SNAPSHOT
# =============================================================================

@dataclass
class ProjectSnapshot:
    """Immutable input of one calc run."""
    name: str = ""
    grid: GridSystem = field(default_factory=GridSystem)
    levels: List[Level] = field(default_factory=list)
    spaces: List[Space] = field(default_factory=list)
    wall_surfaces: List[WallSurface] = field(default_factory=list)
    openings: List[Opening] = field(default_factory=list)
    finish_types: List[FinishType] = field(default_factory=list)
    space_assignments: List[SpaceFinishAssignment] = field(default_factory=list)
    wall_assignments: List[WallSurfaceFinishAssignment] = field(default_factory=list)
    element_templates: List[ElementTemplate] = field(default_factory=list)
    element_instances: List[ElementInstance] = field(default_factory=list)
    earthwork_items: List[EarthworkItem] = field(default_factory=list)
    roof_types: List[RoofType] = field(default_factory=list)
    roof_planes: List[RoofPlane] = field(default_factory=list)
