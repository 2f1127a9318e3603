"""
Calculate commissions for an operations CSV file.

Prints one commission per input line to stdout, in input order. Records
that fail validation are reported on stderr.

Usage:
    commission-calc INPUT [--config PATH] [--on-error abort|skip] [--log-level LEVEL]

Examples:
    # Default configuration, stop at the first bad record
    commission-calc input.csv

    # Custom rates, keep going past bad records
    commission-calc input.csv --config rates.yaml --on-error skip

Exit codes:
    0  every record produced a commission
    1  at least one record failed
    2  the input or configuration could not be loaded
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import yaml

from commission_config import ConfigValidationError, get_active_config
from commission_ingestion import CsvOperationAdapter
from commission_kernel.logging_config import configure_logging
from commission_services.calculator import CommissionCalculator, OnError

EXIT_OK = 0
EXIT_RECORD_FAILED = 1
EXIT_LOAD_FAILED = 2


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="commission-calc",
        description="Calculate deposit and withdrawal commissions for an operations CSV.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "input",
        type=Path,
        help="Header-less CSV: date,person_id,person_type,operation_type,amount,currency.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file (default: bundled default set).",
    )
    parser.add_argument(
        "--on-error",
        choices=[mode.value for mode in OnError],
        default=OnError.ABORT.value,
        help="Stop at the first bad record, or report it and continue (default: abort).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Structured log level written to stderr (default: WARNING).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(level=args.log_level, stream=sys.stderr)

    source_path = args.input.resolve()
    if not source_path.is_file():
        print(f"ERROR: File not found: {source_path}", file=sys.stderr)
        return EXIT_LOAD_FAILED

    try:
        settings = get_active_config(args.config)
    except (OSError, yaml.YAMLError, KeyError, ValueError, ConfigValidationError) as e:
        print(f"ERROR: Failed to load config: {e}", file=sys.stderr)
        return EXIT_LOAD_FAILED

    calculator = CommissionCalculator(settings)
    rows = CsvOperationAdapter().read(source_path)
    failed = False
    try:
        for outcome in calculator.run(rows, on_error=args.on_error, source=str(source_path)):
            if outcome.is_success:
                print(outcome.commission)
            else:
                failed = True
                print(f"ERROR: row {outcome.row_number}: {outcome.error_message}", file=sys.stderr)
    except (OSError, UnicodeDecodeError) as e:
        print(f"ERROR: Failed to read {source_path}: {e}", file=sys.stderr)
        return EXIT_LOAD_FAILED

    return EXIT_RECORD_FAILED if failed else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
