"""
Shared test fixtures: the reference grid, levels, finish types and a small
project snapshot document.
"""

import pytest

from qto.geometry.grid import GridIndex
from qto.models.project import (
    DeductionRule,
    FinishAssumptions,
    FinishCategory,
    FinishType,
    FixedHeight,
    FullHeight,
    GridLine,
    GridRectBoundary,
    GridSystem,
    Level,
    Space,
    SpaceGeometry,
)
from qto.settings import EngineSettings


@pytest.fixture
def grid():
    """X offsets A:0 B:5 C:10, Y offsets 1:0 2:6 3:12."""
    return GridSystem(
        grid_x=[GridLine("A", 0), GridLine("B", 5), GridLine("C", 10)],
        grid_y=[GridLine("1", 0), GridLine("2", 6), GridLine("3", 12)],
    )


@pytest.fixture
def levels():
    return [Level("GF", 0.0), Level("2F", 3.0), Level("RF", 6.0)]


@pytest.fixture
def index(grid, levels):
    return GridIndex(grid, levels)


@pytest.fixture
def settings():
    return EngineSettings()


@pytest.fixture
def room(grid):
    """5 x 6 room on GF: area 30, perimeter 22."""
    return Space(
        id="sp-1",
        name="Office",
        level_id="GF",
        boundary=GridRectBoundary(grid_x=("A", "B"), grid_y=("1", "2")),
        computed=SpaceGeometry(area_m2=30.0, perimeter_m=22.0),
    )


@pytest.fixture
def floor_tile():
    return FinishType(
        id="ft-tile",
        category=FinishCategory.FLOOR,
        finish_name="Ceramic Tile",
        dpwh_item_number_raw="1018 (1)",
        unit="m²",
        assumptions=FinishAssumptions(waste_percent=0.05, rounding=2),
    )


@pytest.fixture
def ceiling_board():
    return FinishType(
        id="ft-ceiling",
        category=FinishCategory.CEILING,
        finish_name="Fiber Cement Board Ceiling",
        dpwh_item_number_raw="1046 (2) a1",
        unit="m²",
    )


@pytest.fixture
def wall_paint():
    return FinishType(
        id="ft-paint",
        category=FinishCategory.PAINT,
        finish_name="Latex Paint",
        dpwh_item_number_raw="1032 (1) a",
        unit="m²",
        wall_height_rule=FullHeight(),
        deduction_rule=DeductionRule(enabled=True, min_opening_area_to_deduct_m2=0.5,
                                     include_types=("door", "window")),
    )


@pytest.fixture
def wainscot():
    return FinishType(
        id="ft-wainscot",
        category=FinishCategory.WALL,
        finish_name="Wall Tile Wainscot",
        dpwh_item_number_raw="1018 (2)",
        unit="m²",
        wall_height_rule=FixedHeight(value_m=1.2),
    )


@pytest.fixture
def snapshot_doc():
    """camelCase snapshot document as stored by the persistence layer."""
    return {
        "name": "Two-Storey School Building",
        "grid": {
            "gridX": [{"label": "A", "offset": 0}, {"label": "B", "offset": 5},
                      {"label": "C", "offset": 10}],
            "gridY": [{"label": "1", "offset": 0}, {"label": "2", "offset": 6},
                      {"label": "3", "offset": 12}],
        },
        "levels": [
            {"label": "GF", "elevation": 0},
            {"label": "2F", "elevation": 3},
            {"label": "RF", "elevation": 6},
        ],
        "spaces": [
            {
                "id": "sp-1",
                "name": "Classroom 1",
                "levelId": "GF",
                "boundary": {"type": "gridRect", "data": {"gridX": ["A", "B"], "gridY": ["1", "2"]}},
            },
            {
                "id": "sp-2",
                "name": "Lobby",
                "levelId": "2F",
                "boundary": {"type": "polygon", "data": {"points": [[0, 0], [4, 0], [4, 5], [0, 5]]}},
                "metadata": {"isOpenToBelow": True},
            },
        ],
        "wallSurfaces": [
            {
                "id": "ws-1",
                "name": "North Wall",
                "gridLine": {"axis": "Y", "label": "3", "span": ["A", "C"]},
                "levelStart": "GF",
                "levelEnd": "2F",
                "surfaceType": "exterior",
            },
        ],
        "openings": [
            {"id": "op-1", "type": "door", "spaceId": "sp-1", "width_m": 0.9, "height_m": 2.1},
            {"id": "op-2", "type": "window", "wallSurfaceId": "ws-1", "width_m": 1.2,
             "height_m": 1.5, "qty": 3},
            {"id": "op-3", "type": "vent", "spaceId": "sp-1", "width_m": 0.3, "height_m": 0.3},
        ],
        "finishTypes": [
            {
                "id": "ft-tile",
                "category": "floor",
                "finishName": "Ceramic Tile",
                "dpwhItemNumberRaw": "1018 (1)",
                "unit": "m²",
                "assumptions": {"wastePercent": 0.05, "rounding": 2},
            },
            {
                "id": "ft-ceiling",
                "category": "ceiling",
                "finishName": "Fiber Cement Board Ceiling",
                "dpwhItemNumberRaw": "1046 (2) a1",
                "unit": "m²",
            },
            {
                "id": "ft-paint",
                "category": "paint",
                "finishName": "Latex Paint",
                "dpwhItemNumberRaw": "1032 (1) a",
                "unit": "m²",
                "wallHeightRule": {"mode": "fullHeight"},
                "deductionRule": {"enabled": True, "minOpeningAreaToDeduct_m2": 0.5,
                                  "includeTypes": ["door", "window"]},
            },
        ],
        "spaceFinishAssignments": [
            {"id": "sfa-1", "spaceId": "sp-1", "finishTypeId": "ft-tile"},
            {"id": "sfa-2", "spaceId": "sp-1", "finishTypeId": "ft-paint"},
            {"id": "sfa-3", "spaceId": "sp-2", "finishTypeId": "ft-ceiling"},
        ],
        "wallSurfaceFinishAssignments": [
            {"id": "wfa-1", "wallSurfaceId": "ws-1", "finishTypeId": "ft-paint"},
        ],
        "elementTemplates": [
            {
                "id": "tpl-b1",
                "type": "beam",
                "name": "B-1",
                "properties": {"width": 0.3, "height": 0.5},
                "rebarConfig": {
                    "mainBars": {"diameter": 16, "count": 4},
                    "stirrups": {"diameter": 10, "spacing": 0.15},
                },
            },
            {
                "id": "tpl-c1",
                "type": "column",
                "name": "C-1",
                "properties": {"width": 0.4, "depth": 0.4},
                "rebarConfig": {
                    "mainBars": {"diameter": 20, "count": 8},
                    "stirrups": {"diameter": 10, "spacing": 0.2},
                },
            },
            {
                "id": "tpl-s1",
                "type": "slab",
                "name": "S-1",
                "properties": {"thickness": 0.15},
            },
            {
                "id": "tpl-f1",
                "type": "foundation",
                "name": "F-1",
                "properties": {"length": 1.5, "width": 1.5, "depth": 0.5},
                "dpwhItemNumber": "900 (1) a",
            },
        ],
        "elementInstances": [
            {"id": "b-1", "templateId": "tpl-b1", "placement": {"levelId": "2F", "gridRef": ["A-C", "1"]}},
            {"id": "c-1", "templateId": "tpl-c1",
             "placement": {"levelId": "GF", "endLevelId": "2F", "gridRef": ["A", "1"]}},
            {"id": "s-1", "templateId": "tpl-s1", "placement": {"levelId": "2F", "gridRef": ["A-B", "1-2"]}},
            {"id": "f-1", "templateId": "tpl-f1", "placement": {"levelId": "GF"}},
        ],
        "earthworkItems": [
            {
                "id": "ew-1",
                "name": "Drainage Channel",
                "kind": "excavation",
                "method": "averageArea",
                "stations": [
                    {"station": "0+000", "chainage": 0, "area": 5},
                    {"station": "0+010", "chainage": 10, "area": 7},
                    {"station": "0+020", "chainage": 20, "area": 6},
                ],
            },
        ],
    }
