"""
Reporting Module
pandas tables for takeoff report renderers, plus CSV and Excel export.
"""

from .tables import (
    build_assumptions_df,
    build_boq_df,
    build_summary_df,
    build_takeoff_df,
    export_to_csv,
    export_to_excel,
)

__all__ = [
    "build_assumptions_df",
    "build_boq_df",
    "build_summary_df",
    "build_takeoff_df",
    "export_to_csv",
    "export_to_excel",
]
