"""
Project Snapshot Loader

Reads a project snapshot document (YAML or JSON, camelCase keys as stored by
the persistence layer) into the dataclasses of models.project.

Computed blocks in the document are carried over as-is; the calc run
recomputes them before use.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..errors import InvalidDimension, UnknownBoundaryType
from .project import (
    AssignmentOverrides,
    AreaBasis,
    Axis,
    BarSpec,
    DeductionRule,
    EarthworkItem,
    EarthworkKind,
    ElementInstance,
    ElementTemplate,
    ElementType,
    ExcavationStation,
    FinishAssumptions,
    FinishCategory,
    FinishType,
    FixedHeight,
    FullHeight,
    GridLine,
    GridRectBoundary,
    GridSystem,
    Level,
    Opening,
    PolygonBoundary,
    ProjectSnapshot,
    RebarConfig,
    RoofPlane,
    RoofSlope,
    RoofType,
    SlopeMode,
    Space,
    SpaceFinishAssignment,
    SpaceGeometry,
    SurfaceType,
    VolumeMethod,
    WallGridLine,
    WallHeightRule,
    WallSide,
    WallSurface,
    WallSurfaceFinishAssignment,
    WallSurfaceGeometry,
)

logger = logging.getLogger(__name__)


def load_document(path: Union[str, Path]) -> Dict[str, Any]:
    """Raw snapshot document; yaml.safe_load reads JSON as well."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_project(path: Union[str, Path]) -> ProjectSnapshot:
    """
    Load a project snapshot from a YAML or JSON file.

    Args:
        path: Snapshot file path

    Returns:
        ProjectSnapshot
    """
    path = Path(path)
    project = project_from_dict(load_document(path))
    logger.info(
        f"Loaded snapshot '{project.name}' from {path}: {len(project.spaces)} spaces, "
        f"{len(project.wall_surfaces)} wall surfaces, {len(project.element_instances)} elements"
    )
    return project


def project_from_dict(data: Dict[str, Any]) -> ProjectSnapshot:
    """Build a ProjectSnapshot from a camelCase snapshot document."""
    grid_doc = data.get("grid") or {}
    grid = GridSystem(
        grid_x=[_grid_line(g) for g in grid_doc.get("gridX", data.get("gridX")) or []],
        grid_y=[_grid_line(g) for g in grid_doc.get("gridY", data.get("gridY")) or []],
    )

    return ProjectSnapshot(
        name=data.get("name", ""),
        grid=grid,
        levels=[Level(label=str(lv["label"]), elevation=float(lv["elevation"]))
                for lv in data.get("levels") or []],
        spaces=[_space(s) for s in data.get("spaces") or []],
        wall_surfaces=[_wall_surface(w) for w in data.get("wallSurfaces") or []],
        openings=[_opening(o) for o in data.get("openings") or []],
        finish_types=[_finish_type(f) for f in data.get("finishTypes") or []],
        space_assignments=[_space_assignment(a) for a in data.get("spaceFinishAssignments") or []],
        wall_assignments=[_wall_assignment(a) for a in data.get("wallSurfaceFinishAssignments") or []],
        element_templates=[_template(t) for t in data.get("elementTemplates") or []],
        element_instances=[_instance(i) for i in data.get("elementInstances") or []],
        earthwork_items=[_earthwork_item(e) for e in data.get("earthworkItems") or []],
        roof_types=[_roof_type(r) for r in data.get("roofTypes") or []],
        roof_planes=[_roof_plane(r) for r in data.get("roofPlanes") or []],
    )


def _enum(enum_cls, value: Any, field_name: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidDimension(field_name, value, f"expected one of: {allowed}") from None


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def _grid_line(doc: Dict[str, Any]) -> GridLine:
    return GridLine(label=str(doc["label"]), offset=float(doc["offset"]))


def _boundary(doc: Dict[str, Any]):
    boundary_type = doc.get("type")
    payload = doc.get("data") or {}

    if boundary_type == GridRectBoundary.boundary_type:
        gx = payload.get("gridX") or []
        gy = payload.get("gridY") or []
        return GridRectBoundary(grid_x=tuple(str(v) for v in gx), grid_y=tuple(str(v) for v in gy))
    if boundary_type == PolygonBoundary.boundary_type:
        points = tuple((float(p[0]), float(p[1])) for p in payload.get("points") or [])
        return PolygonBoundary(points=points)

    raise UnknownBoundaryType(boundary_type)


def _space(doc: Dict[str, Any]) -> Space:
    computed = doc.get("computed")
    metadata = doc.get("metadata") or {}
    open_to_below = doc.get("isOpenToBelow", metadata.get("isOpenToBelow", False))
    return Space(
        id=str(doc["id"]),
        name=doc.get("name", ""),
        level_id=str(doc["levelId"]),
        boundary=_boundary(doc["boundary"]),
        computed=SpaceGeometry(
            area_m2=float(computed.get("area_m2", 0.0)),
            perimeter_m=float(computed.get("perimeter_m", 0.0)),
        ) if computed else None,
        tags=list(doc.get("tags") or []),
        open_to_below=str(open_to_below).lower() == "true",
    )


def _wall_surface(doc: Dict[str, Any]) -> WallSurface:
    line = doc["gridLine"]
    computed = doc.get("computed")
    return WallSurface(
        id=str(doc["id"]),
        name=doc.get("name", ""),
        grid_line=WallGridLine(
            axis=_enum(Axis, line.get("axis"), "gridLine.axis"),
            label=str(line.get("label", "")),
            span=tuple(str(v) for v in line.get("span") or []),
        ),
        level_start=str(doc.get("levelStart", "")),
        level_end=str(doc.get("levelEnd", "")),
        surface_type=_enum(SurfaceType, doc.get("surfaceType"), "surfaceType"),
        facing=doc.get("facing"),
        computed=WallSurfaceGeometry(
            length_m=float(computed.get("length_m", 0.0)),
            height_m=float(computed.get("height_m", 0.0)),
            gross_area_m2=float(computed.get("grossArea_m2", 0.0)),
            sides_count=int(computed.get("sidesCount", 1)),
            total_area_m2=float(computed.get("totalArea_m2", 0.0)),
        ) if computed else None,
        tags=list(doc.get("tags") or []),
    )


def _opening(doc: Dict[str, Any]) -> Opening:
    computed = doc.get("computed") or {}
    return Opening(
        id=str(doc["id"]),
        type=doc.get("type", "other"),
        area_m2=float(computed.get("area_m2", 0.0)),
        wall_surface_id=doc.get("wallSurfaceId"),
        space_id=doc.get("spaceId"),
        level_id=doc.get("levelId"),
        width_m=_optional_float(doc.get("width_m")),
        height_m=_optional_float(doc.get("height_m")),
        qty=int(doc.get("qty", 1)),
    )


def _height_rule(doc: Optional[Dict[str, Any]]) -> Optional[WallHeightRule]:
    if not doc:
        return None
    mode = doc.get("mode")
    if mode == FixedHeight.mode:
        value = doc.get("value_m")
        if value is None:
            raise InvalidDimension("wallHeightRule.value_m", value, "required when mode is fixed")
        return FixedHeight(value_m=float(value))
    if mode == FullHeight.mode:
        return FullHeight()
    raise InvalidDimension("wallHeightRule.mode", mode, "expected fullHeight or fixed")


def _finish_type(doc: Dict[str, Any]) -> FinishType:
    deduction = doc.get("deductionRule")
    assumptions = doc.get("assumptions")
    return FinishType(
        id=str(doc["id"]),
        category=_enum(FinishCategory, doc.get("category"), "category"),
        finish_name=doc.get("finishName", ""),
        dpwh_item_number_raw=str(doc.get("dpwhItemNumberRaw", "")),
        unit=doc.get("unit", ""),
        wall_height_rule=_height_rule(doc.get("wallHeightRule")),
        deduction_rule=DeductionRule(
            enabled=bool(deduction.get("enabled", False)),
            min_opening_area_to_deduct_m2=float(deduction.get("minOpeningAreaToDeduct_m2", 0.0)),
            include_types=tuple(deduction.get("includeTypes") or []),
        ) if deduction else None,
        assumptions=FinishAssumptions(
            waste_percent=_optional_float(assumptions.get("wastePercent")),
            rounding=None if assumptions.get("rounding") is None else int(assumptions["rounding"]),
        ) if assumptions else None,
    )


def _overrides(doc: Optional[Dict[str, Any]]) -> AssignmentOverrides:
    doc = doc or {}
    return AssignmentOverrides(
        waste_percent=_optional_float(doc.get("wastePercent")),
        height_m=_optional_float(doc.get("height_m")),
    )


def _space_assignment(doc: Dict[str, Any]) -> SpaceFinishAssignment:
    return SpaceFinishAssignment(
        id=str(doc["id"]),
        space_id=str(doc["spaceId"]),
        finish_type_id=str(doc["finishTypeId"]),
        scope=doc.get("scope", "base"),
        overrides=_overrides(doc.get("overrides")),
    )


def _wall_assignment(doc: Dict[str, Any]) -> WallSurfaceFinishAssignment:
    side = doc.get("side")
    return WallSurfaceFinishAssignment(
        id=str(doc["id"]),
        wall_surface_id=str(doc["wallSurfaceId"]),
        finish_type_id=str(doc["finishTypeId"]),
        scope=doc.get("scope", "base"),
        side=_enum(WallSide, side, "side") if side else None,
        overrides=_overrides(doc.get("overrides")),
    )


def _bar_spec(doc: Optional[Dict[str, Any]]) -> Optional[BarSpec]:
    if not doc:
        return None
    return BarSpec(
        diameter=int(doc["diameter"]),
        count=None if doc.get("count") is None else int(doc["count"]),
        spacing=_optional_float(doc.get("spacing")),
    )


def _template(doc: Dict[str, Any]) -> ElementTemplate:
    rebar = doc.get("rebarConfig")
    return ElementTemplate(
        id=str(doc["id"]),
        type=_enum(ElementType, doc.get("type"), "type"),
        name=doc.get("name", ""),
        properties=dict(doc.get("properties") or {}),
        dpwh_item_number=doc.get("dpwhItemNumber"),
        rebar_config=RebarConfig(
            main_bars=_bar_spec(rebar.get("mainBars")),
            stirrups=_bar_spec(rebar.get("stirrups")),
            secondary_bars=_bar_spec(rebar.get("secondaryBars")),
            dpwh_rebar_item=rebar.get("dpwhRebarItem"),
            epoxy_coated=bool(rebar.get("epoxyCoated", False)),
        ) if rebar else None,
    )


def _instance(doc: Dict[str, Any]) -> ElementInstance:
    placement = doc.get("placement") or doc
    grid_ref = placement.get("gridRef")
    return ElementInstance(
        id=str(doc["id"]),
        template_id=str(doc["templateId"]),
        level_id=str(placement["levelId"]),
        end_level_id=placement.get("endLevelId"),
        grid_ref=[str(g) for g in grid_ref] if grid_ref else None,
        custom_geometry=dict(placement.get("customGeometry") or {}),
        tags=list(doc.get("tags") or []),
    )


def _stations(docs: List[Dict[str, Any]]) -> List[ExcavationStation]:
    return [
        ExcavationStation(
            station=str(s.get("station", "")),
            chainage=float(s["chainage"]),
            area=float(s["area"]),
            notes=s.get("notes"),
        )
        for s in docs
    ]


def _earthwork_item(doc: Dict[str, Any]) -> EarthworkItem:
    return EarthworkItem(
        id=str(doc["id"]),
        name=doc.get("name", ""),
        kind=_enum(EarthworkKind, doc.get("kind", "excavation"), "kind"),
        method=_enum(VolumeMethod, doc.get("method", "averageArea"), "method"),
        stations=_stations(doc.get("stations") or []),
        compaction_factor=float(doc.get("compactionFactor", 1.0)),
        dpwh_item_number=doc.get("dpwhItemNumber"),
    )


def _roof_type(doc: Dict[str, Any]) -> RoofType:
    assumptions = doc.get("assumptions") or {}
    return RoofType(
        id=str(doc["id"]),
        name=doc.get("name", ""),
        dpwh_item_number_raw=str(doc.get("dpwhItemNumberRaw", "")),
        unit=doc.get("unit", "m²"),
        area_basis=_enum(AreaBasis, doc.get("areaBasis", "slopeArea"), "areaBasis"),
        lap_allowance_percent=float(doc.get("lapAllowancePercent", 0.0)),
        waste_percent=float(doc.get("wastePercent", 0.0)),
        accessories_bundled=bool(assumptions.get("accessoriesBundled", False)),
        fasteners_included=bool(assumptions.get("fastenersIncluded", False)),
        notes=assumptions.get("notes"),
    )


def _roof_plane(doc: Dict[str, Any]) -> RoofPlane:
    slope = doc.get("slope") or {}
    return RoofPlane(
        id=str(doc["id"]),
        name=doc.get("name", ""),
        level_id=str(doc.get("levelId", "")),
        boundary=_boundary(doc["boundary"]),
        roof_type_id=str(doc["roofTypeId"]),
        slope=RoofSlope(
            mode=_enum(SlopeMode, slope.get("mode", "ratio"), "slope.mode"),
            value=float(slope.get("value", 0.0)),
        ),
        tags=list(doc.get("tags") or []),
    )
