"""
Project Models
In-memory snapshot entities and the takeoff line output record.
"""

from .project import (
    Axis,
    SurfaceType,
    FinishCategory,
    WallSide,
    ElementType,
    EarthworkKind,
    VolumeMethod,
    GridLine,
    Level,
    GridSystem,
    GridRectBoundary,
    PolygonBoundary,
    Boundary,
    SpaceGeometry,
    Space,
    WallGridLine,
    WallSurfaceGeometry,
    WallSurface,
    Opening,
    FullHeight,
    FixedHeight,
    WallHeightRule,
    DeductionRule,
    FinishAssumptions,
    FinishType,
    AssignmentOverrides,
    SpaceFinishAssignment,
    WallSurfaceFinishAssignment,
    BarSpec,
    RebarConfig,
    ElementTemplate,
    ElementInstance,
    ExcavationStation,
    EarthworkItem,
    SlopeMode,
    AreaBasis,
    RoofSlope,
    RoofType,
    RoofPlaneGeometry,
    RoofPlane,
    ProjectSnapshot,
)
from .takeoff import Assumption, TakeoffLine, TakeoffLineBuilder, format_number, round_half_up
from .loader import load_document, load_project, project_from_dict

__all__ = [
    "Axis",
    "SurfaceType",
    "FinishCategory",
    "WallSide",
    "ElementType",
    "EarthworkKind",
    "VolumeMethod",
    "GridLine",
    "Level",
    "GridSystem",
    "GridRectBoundary",
    "PolygonBoundary",
    "Boundary",
    "SpaceGeometry",
    "Space",
    "WallGridLine",
    "WallSurfaceGeometry",
    "WallSurface",
    "Opening",
    "FullHeight",
    "FixedHeight",
    "WallHeightRule",
    "DeductionRule",
    "FinishAssumptions",
    "FinishType",
    "AssignmentOverrides",
    "SpaceFinishAssignment",
    "WallSurfaceFinishAssignment",
    "BarSpec",
    "RebarConfig",
    "ElementTemplate",
    "ElementInstance",
    "ExcavationStation",
    "EarthworkItem",
    "SlopeMode",
    "AreaBasis",
    "RoofSlope",
    "RoofType",
    "RoofPlaneGeometry",
    "RoofPlane",
    "ProjectSnapshot",
    "Assumption",
    "TakeoffLine",
    "TakeoffLineBuilder",
    "format_number",
    "round_half_up",
    "load_document",
    "load_project",
    "project_from_dict",
]
