"""
DPWH Quantity Takeoff Engine
Deterministic quantity derivation for Philippine public-works estimates.
"""

__version__ = "1.0.0"
__author__ = "QTO Engine"

from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
RULES_DIR = PROJECT_ROOT / "rules"
