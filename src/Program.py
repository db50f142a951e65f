import sys
import json
import argparse

from loguru import logger

from calc.projection_calculator import MODES, REAL, run_projection
from model.validation import validate_inputs
from model.field_metadata import FIELD_METADATA, get_description
from render.renderers import RENDERER_REGISTRY, create_custom_renderer, parse_year_range
from spec_store import DEFAULT_BASE_PATH, list_existing_programs, load_inputs


HORIZONS = ('fixed', 'end-age')


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr so report output on stdout stays clean."""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>",
        level="DEBUG" if verbose else "WARNING",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Retirement balance projector',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  Projection  Print the year-by-year projection table (default)
  Summary     Print nest egg, peak portfolio and depletion figures
  Income      Print pension and Social Security income against expenses
  Balances    Print tax-deferred and taxable balances

Examples:
  python src/Program.py sample
  python src/Program.py sample --mode Summary
  python src/Program.py sample --dollars nominal --years 2030-2050
  python src/Program.py sample --horizon end-age
  python src/Program.py sample --columns withdrawal,total_portfolio
  python src/Program.py --list
        """
    )
    parser.add_argument('program_name', nargs='?', help='Name of the program (folder in input-parameters)')
    parser.add_argument('--mode', '-m',
                        choices=list(RENDERER_REGISTRY.keys()),
                        default='Projection',
                        help='Output mode (default: Projection)')
    parser.add_argument('--dollars', '-d',
                        choices=list(MODES),
                        default=REAL,
                        help="Show today's dollars (real, default) or future dollars (nominal)")
    parser.add_argument('--horizon',
                        choices=list(HORIZONS),
                        default='fixed',
                        help="Stop at the fixed last year (default) or when everyone reaches projectionEndAge")
    parser.add_argument('--start-year', type=int, help='First simulated year (default: current year)')
    parser.add_argument('--last-year', type=int, help='Last simulated year (default: 2100)')
    parser.add_argument('--years', '-y', help="Year range to display, e.g. '2030-2040', '2030-' or '-2040'")
    parser.add_argument('--list', '-l', action='store_true', help='List available programs and exit')
    parser.add_argument('--columns', help='Comma-separated row fields to show as a custom table (see --list-fields)')
    parser.add_argument('--list-fields', action='store_true', help='List the row fields available to --columns and exit')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.list:
        for name in list_existing_programs(DEFAULT_BASE_PATH):
            print(name)
        return

    if args.list_fields:
        for field, info in FIELD_METADATA.items():
            print(f"  {field:<18} {info.short_name:<20} {get_description(field)}")
        return

    columns = None
    if args.columns:
        columns = [c.strip() for c in args.columns.split(',') if c.strip()]
        unknown = [c for c in columns if c not in FIELD_METADATA]
        if unknown:
            parser.error(f"Unknown field(s): {', '.join(unknown)} (use --list-fields)")

    if not args.program_name:
        parser.error("program_name is required (or use --list to see available programs)")

    try:
        inputs = load_inputs(args.program_name, DEFAULT_BASE_PATH)
        validate_inputs(inputs)
    except (FileNotFoundError, json.JSONDecodeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    end_age = inputs.projection_end_age if args.horizon == 'end-age' else None
    result = run_projection(
        inputs,
        mode=args.dollars,
        start_year=args.start_year,
        last_year=args.last_year,
        end_age=end_age,
    )

    start_year = end_year = None
    if args.years:
        try:
            start_year, end_year = parse_year_range(args.years, result)
        except ValueError:
            parser.error(f"Invalid year range: {args.years}")

    if columns:
        renderer = create_custom_renderer('Custom View', columns, start_year, end_year)
    else:
        renderer = RENDERER_REGISTRY[args.mode](inputs, start_year, end_year)
    renderer.render(result)


if __name__ == "__main__":
    main()
