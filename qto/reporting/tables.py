"""
Report Tables
Turns takeoff lines and run summaries into pandas DataFrames for report
renderers, and writes them out as CSV files or one Excel workbook.

Tables:
- Takeoff_Lines
- BOQ (Part / subcategory grouped)
- Assumptions
- Summary
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import pandas as pd

from ..boq.aggregation import SUMMARIZED, group_takeoff_lines
from ..boq.pay_items import PayItemCatalog
from ..models.takeoff import TakeoffLine, round_half_up

logger = logging.getLogger(__name__)

TAKEOFF_COLUMNS = [
    'Line ID', 'Source Element', 'Trade', 'Resource', 'DPWH Item',
    'Quantity', 'Unit', 'Formula', 'Level',
]

SUMMARY_ROWS = [
    ('totalConcrete', 'Total Concrete', 'm³'),
    ('totalRebar', 'Total Rebar', 'kg'),
    ('totalFormwork', 'Total Formwork', 'm²'),
    ('totalEarthwork', 'Total Earthwork', 'm³'),
    ('totalFloorArea', 'Total Floor Area', 'm²'),
    ('totalWallArea', 'Total Wall Area', 'm²'),
    ('totalCeilingArea', 'Total Ceiling Area', 'm²'),
    ('totalRoofArea', 'Total Roof Area', 'm²'),
    ('elementCount', 'Structural Elements', 'nos'),
    ('beamCount', 'Beams', 'nos'),
    ('columnCount', 'Columns', 'nos'),
    ('slabCount', 'Slabs', 'nos'),
    ('foundationCount', 'Foundations', 'nos'),
    ('takeoffLineCount', 'Takeoff Lines', 'nos'),
]


def build_takeoff_df(lines: Sequence[TakeoffLine]) -> pd.DataFrame:
    """One row per takeoff line."""
    if not lines:
        return pd.DataFrame(columns=TAKEOFF_COLUMNS)

    data = []
    for line in lines:
        data.append({
            'Line ID': line.id,
            'Source Element': line.source_element_id,
            'Trade': line.trade,
            'Resource': line.resource_key,
            'DPWH Item': line.dpwh_item or '-',
            'Quantity': line.quantity,
            'Unit': line.unit,
            'Formula': line.formula_text,
            'Level': line.tag_value('level') or '-',
        })
    return pd.DataFrame(data, columns=TAKEOFF_COLUMNS)


def _description(catalog: PayItemCatalog, line: TakeoffLine) -> str:
    item = catalog.get(line.dpwh_item)
    return item.description if item else ''


def build_boq_df(lines: Sequence[TakeoffLine], view: str = SUMMARIZED,
                 catalog: Optional[PayItemCatalog] = None) -> pd.DataFrame:
    """
    BOQ rows grouped by DPWH Part and subcategory.

    Args:
        lines: Takeoff lines of one run
        view: "summarized" or "detailed"
        catalog: Pay item catalog for descriptions (bundled catalog if omitted)

    Returns:
        DataFrame with Part, Subcategory, DPWH Item, Description, Quantity, Unit, Formula
    """
    if catalog is None:
        catalog = PayItemCatalog.from_csv()

    columns = [
        'Part', 'Subcategory', 'DPWH Item', 'Description', 'Resource', 'Level',
        'Quantity', 'Unit', 'Formula',
    ]
    data = []
    for group in group_takeoff_lines(lines, view):
        for sub in group.subcategories:
            for line in sub.lines:
                data.append({
                    'Part': group.part,
                    'Subcategory': sub.name,
                    'DPWH Item': line.dpwh_item or '-',
                    'Description': _description(catalog, line),
                    'Resource': line.resource_key,
                    'Level': line.tag_value('level') or 'N/A',
                    'Quantity': round_half_up(line.quantity, 3),
                    'Unit': line.unit,
                    'Formula': line.formula_text,
                })
    return pd.DataFrame(data, columns=columns)


def build_assumptions_df(lines: Sequence[TakeoffLine]) -> pd.DataFrame:
    """One row per assumption record."""
    columns = ['Line ID', 'Source Element', 'Trade', 'Key', 'Assumption']
    data = [
        {
            'Line ID': line.id,
            'Source Element': line.source_element_id,
            'Trade': line.trade,
            'Key': record.key,
            'Assumption': record.text,
        }
        for line in lines
        for record in line.assumption_records
    ]
    return pd.DataFrame(data, columns=columns)


def build_summary_df(summary: Dict[str, Any]) -> pd.DataFrame:
    """Build summary DataFrame from a run summary dict."""
    data = [
        {'Item': label, 'Value': summary.get(key, 0), 'Unit': unit}
        for key, label, unit in SUMMARY_ROWS
    ]
    return pd.DataFrame(data)


def export_to_csv(lines: Sequence[TakeoffLine], summary: Dict[str, Any], directory: Path,
                  view: str = SUMMARIZED, catalog: Optional[PayItemCatalog] = None) -> Dict[str, Path]:
    """
    Write the report tables as CSV files into a directory.

    Returns:
        Mapping of table name to written path
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    tables = {
        'takeoff_lines': build_takeoff_df(lines),
        'boq': build_boq_df(lines, view, catalog),
        'assumptions': build_assumptions_df(lines),
        'summary': build_summary_df(summary),
    }

    written = {}
    for name, df in tables.items():
        path = directory / f"{name}.csv"
        df.to_csv(path, index=False)
        written[name] = path

    logger.info(f"Exported {len(tables)} tables to {directory}")
    return written


def export_to_excel(
    lines: Sequence[TakeoffLine],
    summary: Dict[str, Any],
    filepath: Optional[Path] = None,
    view: str = SUMMARIZED,
    project_name: str = "",
    catalog: Optional[PayItemCatalog] = None,
) -> BytesIO:
    """
    Export the report tables to one workbook, one sheet per table.

    Args:
        lines: Takeoff lines of one run
        summary: Run summary dict
        filepath: Optional file path to save (if None, only the buffer is returned)
        view: BOQ view for the BOQ sheet
        project_name: Shown on the Summary sheet
        catalog: Pay item catalog for BOQ descriptions

    Returns:
        BytesIO buffer with the workbook
    """
    summary_df = build_summary_df(summary)
    if project_name:
        summary_df = pd.concat(
            [pd.DataFrame([{'Item': 'Project', 'Value': project_name, 'Unit': ''}]), summary_df],
            ignore_index=True,
        )

    sheets = {
        'Summary': summary_df,
        'BOQ': build_boq_df(lines, view, catalog),
        'Takeoff_Lines': build_takeoff_df(lines),
        'Assumptions': build_assumptions_df(lines),
    }

    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        for sheet_name, df in sheets.items():
            df.to_excel(writer, sheet_name=sheet_name, index=False)

        for worksheet in writer.sheets.values():
            for column in worksheet.columns:
                max_length = max((len(str(cell.value)) for cell in column if cell.value is not None),
                                 default=0)
                # formulas can run long; cap the width
                worksheet.column_dimensions[column[0].column_letter].width = min(max_length + 2, 60)

    buffer.seek(0)

    if filepath:
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'wb') as f:
            f.write(buffer.getvalue())
        buffer.seek(0)
        logger.info(f"Excel exported to: {filepath}")

    return buffer
