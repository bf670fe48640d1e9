#!/usr/bin/env python3
"""Timetable to iCalendar converter.

Reads weekly class sessions and reschedule exceptions exported from the
timetable API, materializes the upcoming weeks of classes and writes them
as an iCalendar (.ics) file or a JSON event list.
"""

import argparse
import os
import sys
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from timetable import TimetableAssembler, TimetableError, load_exceptions, load_sessions
from timetable.models import TimetableDiagnostics
from transformer import BaseTransformer, ICalTransformer, JSONTransformer

DEFAULT_TIMEZONE = "UTC"
TIMEZONE_ENV = "TIMETABLE_TZ"
FORMATS = {"ics": ".ics", "json": ".json"}


def parse_timezone(name: str) -> ZoneInfo:
    """Parse an IANA time zone name."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise argparse.ArgumentTypeError(f"Unknown time zone: '{name}'.")


def parse_reference(value: str) -> datetime:
    """Parse reference instant in YYYY-MM-DD or YYYY-MM-DD HH:MM format."""
    for fmt in ("%Y-%m-%d %H:%M", "%Y-%m-%d"):
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    raise argparse.ArgumentTypeError(
        f"Invalid reference format: '{value}'. Expected YYYY-MM-DD or 'YYYY-MM-DD HH:MM'."
    )


def non_negative_int(value: str) -> int:
    """Parse a week count."""
    try:
        weeks = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid number of weeks: '{value}'.")
    if weeks < 0:
        raise argparse.ArgumentTypeError("Number of weeks cannot be negative.")
    return weeks


def get_transformer(output_format: str, calendar_name: str) -> BaseTransformer:
    """Return the transformer for an output format."""
    if output_format == "json":
        return JSONTransformer()
    return ICalTransformer(calendar_name=calendar_name)


def report_diagnostics(diagnostics: TimetableDiagnostics) -> None:
    """Print skipped and unmatched records."""
    if diagnostics.has_failures:
        print(f"Warning: Skipped {diagnostics.skipped_count} invalid records:", file=sys.stderr)
        for error in diagnostics.errors:
            print(f"  - {error}", file=sys.stderr)
    
    if diagnostics.unmatched_exception_ids:
        ids = ", ".join(diagnostics.unmatched_exception_ids)
        print(f"Warning: Reschedules with no matching class: {ids}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert a weekly timetable with reschedules to calendar events.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 timetable2iCal.py --sessions classes.json --exceptions reschedules.json
  python3 timetable2iCal.py --sessions classes.json --weeks 8 --reference 2024-12-22 -o timetable.json
        """
    )
    
    parser.add_argument(
        "--sessions",
        required=True,
        help="JSON file with weekly class sessions"
    )
    
    parser.add_argument(
        "--exceptions",
        default=None,
        help="JSON file with reschedule exceptions (optional)"
    )
    
    parser.add_argument(
        "-w", "--weeks",
        type=non_negative_int,
        default=TimetableAssembler.DEFAULT_WINDOW,
        help=f"Number of weeks to expand (default: {TimetableAssembler.DEFAULT_WINDOW})"
    )
    
    parser.add_argument(
        "--reference",
        type=parse_reference,
        default=None,
        help="Reference date anchoring the current week "
             "(format: YYYY-MM-DD or 'YYYY-MM-DD HH:MM'). Default: now"
    )
    
    parser.add_argument(
        "--timezone",
        type=parse_timezone,
        default=None,
        help=f"IANA time zone of the timetable. Default: ${TIMEZONE_ENV} or {DEFAULT_TIMEZONE}"
    )
    
    parser.add_argument(
        "-f", "--format",
        choices=sorted(FORMATS),
        default=None,
        help="Output format. Default: inferred from the output file extension, else ics"
    )
    
    parser.add_argument(
        "-o", "--output",
        default="timetable.ics",
        help="Output file path (default: timetable.ics)"
    )
    
    parser.add_argument(
        "--name",
        default="Timetable",
        help="Calendar name shown by calendar applications (default: Timetable)"
    )
    
    return parser


def resolve_format(output_path: str, output_format: Optional[str]) -> tuple[str, str]:
    """Pick the output format and make sure the path carries its extension."""
    if output_format is None:
        output_format = "json" if output_path.lower().endswith(".json") else "ics"
    
    extension = FORMATS[output_format]
    if not output_path.lower().endswith(extension):
        output_path = f"{output_path}{extension}"
    
    return output_path, output_format


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for the converter."""
    args = build_parser().parse_args(argv)
    
    output_path, output_format = resolve_format(args.output, args.format)
    
    try:
        timezone = args.timezone or parse_timezone(os.getenv(TIMEZONE_ENV, DEFAULT_TIMEZONE))
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    
    reference = args.reference.replace(tzinfo=timezone) if args.reference else None
    
    try:
        sessions = load_sessions(args.sessions)
        exceptions = load_exceptions(args.exceptions) if args.exceptions else []
        
        print(f"Loaded {len(sessions)} sessions and {len(exceptions)} reschedules.")
        
        assembler = TimetableAssembler(window=args.weeks, timezone=timezone)
        result = assembler.assemble(sessions, exceptions, reference)
        
        report_diagnostics(result.diagnostics)
        
        if not result.occurrences:
            print("Warning: No occurrences produced. The output file will be empty.")
        
        transformer = get_transformer(output_format, args.name)
        transformer.transform(result)
        transformer.save(output_path)
        
        print(f"Timetable saved to: {output_path}")
        print(f"Occurrences: {len(result.occurrences)} over {args.weeks} weeks")
    
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(130)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except (ValueError, TimetableError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
