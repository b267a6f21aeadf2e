#!/usr/bin/env python3
"""
CLI for generating claim report PDFs.

Usage:
    python -m reporting.cli sample <type>
    python -m reporting.cli generate <type> <record_json>

Examples:
    # Generate a sample supplement report for testing
    python -m reporting.cli sample supplement

    # Generate a weather report from a JSON record
    python -m reporting.cli generate weather claims/weather.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .composer import ReportGenerationError
from .parsing import UnknownReportTypeError, record_from_dict
from .registry import get_composer, sample_record
from .schemas import ReportType
from utils.config import Config

logger = logging.getLogger(__name__)

REPORT_TYPES = [report_type.value for report_type in ReportType]


def cmd_sample(args, config: Config) -> int:
    """Generate a sample report for testing."""
    print(f"Generating sample {args.report_type} report...")

    record = sample_record(args.report_type)
    result = get_composer(args.report_type, config).generate(record, args.output_dir)

    print(f"Report generated: {result.path} ({result.page_count} page(s))")
    return 0


def cmd_generate(args, config: Config) -> int:
    """Generate a report from a JSON record file."""
    input_path = Path(args.record_file)

    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1

    print(f"Loading record from: {input_path}")

    try:
        with open(input_path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON: {e}", file=sys.stderr)
        return 1

    try:
        record = record_from_dict(args.report_type, data)
    except (TypeError, ValueError) as e:
        print(f"Error: Invalid record data: {e}", file=sys.stderr)
        return 1

    try:
        result = get_composer(args.report_type, config).generate(record, args.output_dir)
    except ReportGenerationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Report generated: {result.path} ({result.page_count} page(s))")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Claim Report Engine - supplement, justification, weather and policy PDFs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m reporting.cli sample supplement
    python -m reporting.cli generate decoder policy.json

Output:
    Reports are saved to REPORTS_DIR (default: reports/)
        """,
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory to write PDFs to (default: REPORTS_DIR)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Sample command
    sample_parser = subparsers.add_parser(
        "sample",
        help="Generate a sample report with mock data",
    )
    sample_parser.add_argument("report_type", choices=REPORT_TYPES)
    sample_parser.set_defaults(func=cmd_sample)

    # Generate command
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate a report from a JSON record file",
    )
    gen_parser.add_argument("report_type", choices=REPORT_TYPES)
    gen_parser.add_argument(
        "record_file",
        help="Path to JSON record file",
    )
    gen_parser.set_defaults(func=cmd_generate)

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    config = Config.load()
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    args = build_parser().parse_args(argv)
    try:
        return args.func(args, config)
    except (UnknownReportTypeError, ReportGenerationError) as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
