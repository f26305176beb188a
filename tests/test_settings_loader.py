"""
Settings and snapshot loader tests.
"""

import json

import pytest
import yaml

from qto.errors import InvalidDimension, UnknownBoundaryType
from qto.models.loader import load_project, project_from_dict
from qto.models.project import (
    Axis,
    ElementType,
    FixedHeight,
    FullHeight,
    GridRectBoundary,
    PolygonBoundary,
    SurfaceType,
    VolumeMethod,
)
from qto.settings import EngineSettings, load_settings


# ============================================================
# Settings
# ============================================================

def test_defaults():
    settings = EngineSettings()
    assert settings.places("concrete") == 3
    assert settings.places("rebar") == 2
    assert settings.places("unknown") == 3
    assert settings.waste_for("formwork") == 0.02
    assert settings.waste_for("unknown") == 0.0
    assert settings.dpwh_items["concrete"] == "900 (1) c"


def test_missing_settings_file_uses_defaults(tmp_path):
    settings = load_settings(tmp_path / "nope.yaml")
    assert settings.to_dict() == EngineSettings().to_dict()


def test_bundled_settings_match_defaults():
    assert load_settings().to_dict() == EngineSettings().to_dict()


def test_partial_file_merges_with_defaults(tmp_path):
    """Zero waste in the file is honoured; other keys keep their defaults."""
    path = tmp_path / "assumptions.yaml"
    path.write_text(yaml.safe_dump({
        "waste": {"concrete": 0},
        "rebar": {"lap_multiplier": 50},
    }), encoding="utf-8")

    settings = load_settings(path)
    assert settings.waste_for("concrete") == 0.0
    assert settings.waste_for("rebar") == 0.03
    assert settings.lap_multiplier == 50
    assert settings.hook_allowance_m == 0.15
    assert settings.default_storey_height_m == 3.0


def test_unreadable_yaml_uses_defaults(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("waste: [unclosed", encoding="utf-8")
    assert load_settings(path).to_dict() == EngineSettings().to_dict()


# ============================================================
# Snapshot loader
# ============================================================

def test_project_from_dict(snapshot_doc):
    project = project_from_dict(snapshot_doc)
    assert project.name == "Two-Storey School Building"
    assert [g.label for g in project.grid.grid_x] == ["A", "B", "C"]
    assert [lv.label for lv in project.levels] == ["GF", "2F", "RF"]
    assert len(project.spaces) == 2
    assert len(project.openings) == 3
    assert len(project.element_instances) == 4


def test_boundaries_are_tagged(snapshot_doc):
    first, second = project_from_dict(snapshot_doc).spaces
    assert isinstance(first.boundary, GridRectBoundary)
    assert first.boundary.grid_x == ("A", "B")
    assert isinstance(second.boundary, PolygonBoundary)
    assert len(second.boundary.points) == 4


def test_open_to_below_from_metadata(snapshot_doc):
    first, second = project_from_dict(snapshot_doc).spaces
    assert not first.open_to_below
    assert second.open_to_below


def test_wall_surface_and_enums(snapshot_doc):
    project = project_from_dict(snapshot_doc)
    wall = project.wall_surfaces[0]
    assert wall.grid_line.axis is Axis.Y
    assert wall.grid_line.span == ("A", "C")
    assert wall.surface_type is SurfaceType.EXTERIOR
    assert project.element_templates[0].type is ElementType.BEAM
    assert project.earthwork_items[0].method is VolumeMethod.AVERAGE_AREA


def test_height_rules(snapshot_doc):
    snapshot_doc["finishTypes"].append({
        "id": "ft-wainscot", "category": "wall", "finishName": "Wainscot",
        "wallHeightRule": {"mode": "fixed", "value_m": 1.2},
    })
    finishes = {f.id: f for f in project_from_dict(snapshot_doc).finish_types}
    assert isinstance(finishes["ft-paint"].wall_height_rule, FullHeight)
    assert finishes["ft-wainscot"].wall_height_rule == FixedHeight(value_m=1.2)
    assert finishes["ft-tile"].wall_height_rule is None


def test_fixed_height_requires_value(snapshot_doc):
    snapshot_doc["finishTypes"][0]["wallHeightRule"] = {"mode": "fixed"}
    with pytest.raises(InvalidDimension):
        project_from_dict(snapshot_doc)


def test_unknown_boundary_type(snapshot_doc):
    snapshot_doc["spaces"][0]["boundary"] = {"type": "circle", "data": {}}
    with pytest.raises(UnknownBoundaryType) as exc:
        project_from_dict(snapshot_doc)
    assert exc.value.boundary_type == "circle"


def test_invalid_enum_value(snapshot_doc):
    snapshot_doc["wallSurfaces"][0]["surfaceType"] = "sideways"
    with pytest.raises(InvalidDimension):
        project_from_dict(snapshot_doc)


def test_instance_placement(snapshot_doc):
    instances = {i.id: i for i in project_from_dict(snapshot_doc).element_instances}
    assert instances["b-1"].grid_ref == ["A-C", "1"]
    assert instances["c-1"].end_level_id == "2F"
    assert instances["f-1"].grid_ref is None


def test_load_project_yaml_and_json(snapshot_doc, tmp_path):
    yaml_path = tmp_path / "project.yaml"
    yaml_path.write_text(yaml.safe_dump(snapshot_doc, allow_unicode=True), encoding="utf-8")
    json_path = tmp_path / "project.json"
    json_path.write_text(json.dumps(snapshot_doc), encoding="utf-8")

    from_yaml = load_project(yaml_path)
    from_json = load_project(json_path)
    assert from_yaml == from_json
    assert from_yaml.finish_types[0].unit == "m²"
