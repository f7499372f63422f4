"""Command-line parsing for the BiteDesk schedule runner."""

from __future__ import annotations

import argparse
from datetime import date
from pathlib import Path
from typing import List, Optional

from bitedesk.cases.dates import parse_day
from bitedesk.headless import HeadlessOptions, HeadlessResult, execute_headless


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments."""

    parser = argparse.ArgumentParser(description="BiteDesk vaccination schedule report")
    parser.add_argument(
        "--cases",
        dest="cases_path",
        required=True,
        help="JSON file with exported bite cases (array or {\"data\": [...]}).",
    )
    parser.add_argument(
        "--patients",
        dest="patients_path",
        help="JSON file with exported patient records.",
    )
    parser.add_argument(
        "--date",
        dest="today",
        help="Reference day in YYYY-MM-DD format (default: today in BITEDESK_TZ).",
    )
    parser.add_argument(
        "--center",
        default="ALL",
        help="Center name printed in the report header.",
    )
    parser.add_argument(
        "--out",
        dest="out_path",
        help="Path for the TXT report (default: Exports directory).",
    )
    parser.add_argument(
        "--json",
        dest="json_path",
        help="Also write the derived schedule as JSON to this path.",
    )
    parser.add_argument(
        "--log-dir",
        dest="log_dir",
        default="debug",
        help="Directory for structured headless logs (default: debug).",
    )
    parser.add_argument(
        "--log-file",
        dest="log_file",
        help="Optional explicit log file path.",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable debug logging of degraded records.",
    )
    return parser.parse_args(argv)


def create_headless_options(args: argparse.Namespace) -> HeadlessOptions:
    """Return ``HeadlessOptions`` derived from parsed ``args``."""

    today = _parse_date(args.today) if args.today else None
    return HeadlessOptions(
        cases_path=Path(args.cases_path).expanduser(),
        patients_path=Path(args.patients_path).expanduser() if args.patients_path else None,
        today=today,
        center=str(args.center or "ALL"),
        out_path=Path(args.out_path).expanduser() if args.out_path else None,
        json_path=Path(args.json_path).expanduser() if args.json_path else None,
        log_dir=Path(args.log_dir).expanduser(),
        log_file=Path(args.log_file).expanduser() if args.log_file else None,
        trace=bool(args.trace),
    )


def run_headless_from_args(args: argparse.Namespace) -> HeadlessResult:
    """Execute the headless run using ``args`` and return the result."""

    options = create_headless_options(args)
    return execute_headless(options)


def _parse_date(raw: str) -> date:
    try:
        return parse_day(raw)
    except ValueError as exc:
        raise ValueError("--date must be in YYYY-MM-DD format") from exc


__all__ = ["parse_arguments", "create_headless_options", "run_headless_from_args"]
