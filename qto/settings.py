"""
Engine Settings

Run-level policies (rounding places, waste fractions, lap/hook allowances,
default pay items) loaded from rules/assumptions.yaml.

A missing file or missing keys fall back to the built-in defaults key by key.
Values present in the file are honoured even when zero.
"""

import copy
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from . import RULES_DIR

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = RULES_DIR / "assumptions.yaml"


def _default_config() -> Dict[str, Any]:
    """Return default configuration."""
    return {
        'rounding': {
            'concrete': 3,
            'rebar': 2,
            'formwork': 2,
            'finishes': 3,
            'earthwork': 3,
            'roofing': 2,
        },
        'waste': {
            'concrete': 0.05,
            'rebar': 0.03,
            'formwork': 0.02,
        },
        'rebar': {
            'lap_multiplier': 40,
            'hook_allowance_m': 0.15,
        },
        'storey': {
            'default_height_m': 3.0,
        },
        'dpwh_items': {
            'concrete': '900 (1) c',
            'formwork': '903 (1)',
            'excavation': '803 (1) a',
            'embankment': '804 (1) a',
        },
    }


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively overlay override onto base; None leaves the base value."""
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        elif value is not None:
            merged[key] = value
    return merged


@dataclass
class EngineSettings:
    """Policies applied across one calc run."""
    rounding: Dict[str, int] = field(default_factory=lambda: dict(_default_config()['rounding']))
    waste: Dict[str, float] = field(default_factory=lambda: dict(_default_config()['waste']))
    lap_multiplier: float = 40
    hook_allowance_m: float = 0.15
    default_storey_height_m: float = 3.0
    dpwh_items: Dict[str, str] = field(default_factory=lambda: dict(_default_config()['dpwh_items']))

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "EngineSettings":
        config = _merge(_default_config(), data or {})
        return cls(
            rounding={k: int(v) for k, v in config['rounding'].items()},
            waste={k: float(v) for k, v in config['waste'].items()},
            lap_multiplier=float(config['rebar']['lap_multiplier']),
            hook_allowance_m=float(config['rebar']['hook_allowance_m']),
            default_storey_height_m=float(config['storey']['default_height_m']),
            dpwh_items={k: str(v) for k, v in config['dpwh_items'].items()},
        )

    def places(self, quantity_kind: str) -> int:
        return self.rounding.get(quantity_kind, 3)

    def waste_for(self, quantity_kind: str) -> float:
        return self.waste.get(quantity_kind, 0.0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rounding': dict(self.rounding),
            'waste': dict(self.waste),
            'rebar': {
                'lap_multiplier': self.lap_multiplier,
                'hook_allowance_m': self.hook_allowance_m,
            },
            'storey': {'default_height_m': self.default_storey_height_m},
            'dpwh_items': dict(self.dpwh_items),
        }


def load_settings(path: Optional[Union[str, Path]] = None) -> EngineSettings:
    """
    Load settings from assumptions.yaml.

    Args:
        path: Settings file; defaults to rules/assumptions.yaml

    Returns:
        EngineSettings (built-in defaults when the file is missing or unreadable)
    """
    settings_path = Path(path) if path else DEFAULT_SETTINGS_PATH
    try:
        with open(settings_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning(f"Settings file not found: {settings_path}, using defaults")
        return EngineSettings()
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not read settings from {settings_path}: {e}, using defaults")
        return EngineSettings()

    logger.debug(f"Loaded settings from {settings_path}")
    return EngineSettings.from_dict(data)
