"""
DPWH Quantity Takeoff Engine - CLI Entry Point

Commands:
    run             - Run a calc run over a project snapshot
    validate-walls  - Validate every wall surface of a snapshot
    classify        - Classify a DPWH pay item into its Part
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .boq.aggregation import DETAILED, SUMMARIZED, aggregate_by_part, group_takeoff_lines
from .boq.classification import classify_dpwh_item
from .boq.pay_items import PayItemCatalog, is_valid_pay_item_format, normalize_pay_item_number
from .calc_run import run_calculation
from .errors import TakeoffError
from .geometry.grid import GridIndex
from .geometry.wall_surface import validate_wall_surface
from .models.loader import load_document, load_project, project_from_dict
from .reporting.tables import export_to_csv, export_to_excel
from .settings import load_settings
from .trace import LoggingTraceSink


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


def cmd_run(args):
    """Run one calc run and write lines + summary as JSON."""
    settings = load_settings(args.settings)
    project = load_project(args.snapshot)
    trace = LoggingTraceSink() if args.verbose else None

    try:
        run = run_calculation(project, settings, trace=trace)
    except TakeoffError as e:
        print(f"Calc run failed: {e}", file=sys.stderr)
        return 1

    payload = run.to_dict()
    payload["view"] = args.view
    payload["boq"] = [g.to_dict() for g in group_takeoff_lines(run.takeoff_lines, args.view)]

    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
        print(f"Takeoff written to {args.output}")
    else:
        print(text)

    if args.csv or args.excel:
        catalog = PayItemCatalog.from_csv(args.catalog)
        if args.csv:
            export_to_csv(run.takeoff_lines, run.summary, Path(args.csv), view=args.view, catalog=catalog)
        if args.excel:
            export_to_excel(run.takeoff_lines, run.summary, Path(args.excel), view=args.view,
                            project_name=run.project_name, catalog=catalog)

    print("\nTotals by DPWH Part:", file=sys.stderr)
    for part, totals in aggregate_by_part(run.takeoff_lines).items():
        amounts = ", ".join(f"{qty:,.3f} {unit}" for unit, qty in totals.items())
        print(f"  {part}: {amounts}", file=sys.stderr)
    print(f"Lines: {run.summary['takeoffLineCount']}", file=sys.stderr)
    return 0


def cmd_validate_walls(args):
    """Validate all wall surfaces, printing every error."""
    doc = load_document(args.snapshot)
    base = project_from_dict({k: doc[k] for k in ("grid", "gridX", "gridY", "levels") if k in doc})
    index = GridIndex(base.grid, base.levels)

    walls = doc.get("wallSurfaces") or []
    invalid = 0
    for wall in walls:
        result = validate_wall_surface(wall, index)
        name = (wall.get("name") or wall.get("id")) if isinstance(wall, dict) else None
        name = name or "<unnamed>"
        if result.valid:
            print(f"OK       {name}")
        else:
            invalid += 1
            print(f"INVALID  {name}")
            for error in result.errors:
                print(f"         - {error}")

    print(f"\n{len(walls) - invalid}/{len(walls)} wall surfaces valid")
    return 1 if invalid else 0


def cmd_classify(args):
    """Print the DPWH Part and subcategory of one pay item."""
    result = classify_dpwh_item(args.item, args.category)
    entry = PayItemCatalog.from_csv(args.catalog).get(args.item)
    print(f"Item:        {args.item}")
    print(f"Normalized:  {normalize_pay_item_number(args.item) or '-'}")
    print(f"Valid:       {'yes' if is_valid_pay_item_format(args.item) else 'no'}")
    print(f"Description: {entry.description if entry else '(not in catalog)'}")
    if entry:
        print(f"Unit:        {entry.unit}")
    print(f"Part:        {result.part}")
    print(f"Subcategory: {result.subcategory}")
    return 0


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="DPWH Quantity Takeoff Engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run a calc run, JSON to stdout
  python -m qto run project.yaml

  # Write lines and CSV tables
  python -m qto run project.yaml --output run.json --csv ./out

  # Excel workbook with Summary, BOQ, Takeoff_Lines and Assumptions sheets
  python -m qto run project.yaml --excel boq.xlsx --view detailed

  # Check wall surfaces before committing
  python -m qto validate-walls project.yaml

  # Classify a pay item
  python -m qto classify "1018 (1)" --category "Ceramic Tile"
        """
    )

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Run command
    run_parser = subparsers.add_parser('run', help='Run a calc run over a snapshot')
    run_parser.add_argument('snapshot', help='Project snapshot (YAML or JSON)')
    run_parser.add_argument('--settings', '-s',
                            help='Settings file (default: rules/assumptions.yaml)')
    run_parser.add_argument('--output', '-o',
                            help='Output JSON file (default: stdout)')
    run_parser.add_argument('--csv',
                            help='Also write CSV report tables to this directory')
    run_parser.add_argument('--excel',
                            help='Also write an Excel BOQ workbook to this file')
    run_parser.add_argument('--catalog',
                            help='Pay item catalog CSV (default: rules/dpwh_pay_items.csv)')
    run_parser.add_argument('--view', choices=[SUMMARIZED, DETAILED], default=SUMMARIZED,
                            help='BOQ view (default: summarized)')
    run_parser.add_argument('-v', '--verbose', action='store_true', default=argparse.SUPPRESS,
                            help='Enable verbose logging and trace events')
    run_parser.set_defaults(func=cmd_run)

    # Validate walls command
    walls_parser = subparsers.add_parser('validate-walls',
                                         help='Validate wall surfaces of a snapshot')
    walls_parser.add_argument('snapshot', help='Project snapshot (YAML or JSON)')
    walls_parser.set_defaults(func=cmd_validate_walls)

    # Classify command
    classify_parser = subparsers.add_parser('classify',
                                            help='Classify a DPWH pay item')
    classify_parser.add_argument('item', help='Pay item number, e.g. "900 (1) c"')
    classify_parser.add_argument('--category', '-c',
                                 help='Trade or category for the subcategory')
    classify_parser.add_argument('--catalog',
                                 help='Pay item catalog CSV (default: rules/dpwh_pay_items.csv)')
    classify_parser.set_defaults(func=cmd_classify)

    args = parser.parse_args()

    setup_logging(args.verbose)

    if args.command:
        return args.func(args)
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
