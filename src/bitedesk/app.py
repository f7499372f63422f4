"""Console entry point for BiteDesk."""

from __future__ import annotations

import sys
from typing import List, Optional

from bitedesk.cli import parse_arguments, run_headless_from_args
from bitedesk.headless import HeadlessResult


def _emit_headless_miss(exc: Exception) -> None:
    print(f"HEADLESS_MISS {exc.__class__.__name__}: {exc}", file=sys.stderr, flush=True)


def _print_headless_result(result: HeadlessResult) -> None:
    print(result.summary_line, flush=True)
    for warning in result.warnings:
        print(f"WARNING {warning}", flush=True)
    if result.txt_path is not None:
        print(f"TXT_PATH {result.txt_path}", flush=True)
    if result.json_path is not None:
        print(f"JSON_PATH {result.json_path}", flush=True)
    print(f"LOG_FILE {result.log_file}", flush=True)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the schedule report and return the process exit code."""

    raw_argv = list(argv if argv is not None else sys.argv[1:])
    args = parse_arguments(raw_argv)
    try:
        result = run_headless_from_args(args)
    except (ValueError, FileNotFoundError) as exc:
        _emit_headless_miss(exc)
        return 2
    _print_headless_result(result)
    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
