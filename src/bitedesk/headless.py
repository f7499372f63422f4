"""Headless schedule runner used by the CLI and scheduled jobs."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Optional

from bitedesk.cases.dates import format_mmddyyyy, resolve_today
from bitedesk.cases.loader import load_records
from bitedesk.engine.aggregate import (
    ScheduleSummary,
    aggregate_schedules,
    summarize_counts,
    summary_to_dict,
)
from bitedesk.fs.exports import exports_dir, safe_write_text, sanitize_filename
from bitedesk.logs.rotating import get_logger, log_path
from bitedesk.report.model import lines_from_summary, notes_from_summary
from bitedesk.report.txt_writer import write_report

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class HeadlessOptions:
    """Configuration for a headless schedule run."""

    cases_path: Path
    patients_path: Optional[Path] = None
    today: Optional[date] = None
    center: str = "ALL"
    out_path: Optional[Path] = None
    json_path: Optional[Path] = None
    log_dir: Path = field(default_factory=lambda: Path("debug"))
    log_file: Optional[Path] = None
    trace: bool = False


@dataclass(slots=True)
class HeadlessResult:
    """Outcome of a headless schedule run."""

    exit_code: int
    txt_path: Optional[Path]
    json_path: Optional[Path]
    counts: Dict[str, int]
    summary_line: str
    today_label: str
    log_file: Path
    warnings: List[str] = field(default_factory=list)
    summary: Optional[ScheduleSummary] = None


def execute_headless(options: HeadlessOptions) -> HeadlessResult:
    """Load the collections, aggregate once for a single reference day and write the report.

    Missing input files raise ``FileNotFoundError`` and malformed JSON raises
    ``ValueError``; both are left to the caller.
    """

    log_dir = options.log_dir.expanduser().resolve()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = (options.log_file or (log_dir / _default_log_name())).expanduser().resolve()

    base_logger = _configure_logging(log_file, trace=options.trace)
    LOGGER.info("Headless start: cases=%s patients=%s", options.cases_path, options.patients_path)
    if options.trace:
        base_logger.debug("Trace mode enabled for headless execution.")
    print(f"LOG_ROTATION_OK path={log_path()}", flush=True)

    cases = load_records(options.cases_path)
    patients = load_records(options.patients_path) if options.patients_path else []

    today = resolve_today(options.today)
    today_label = format_mmddyyyy(today)
    center = (options.center or "ALL").upper()

    summary = aggregate_schedules(cases, patients, today)
    counts = summarize_counts(summary)
    summary_line = _build_summary_line(counts, today_label, center)
    warnings: List[str] = []

    try:
        txt_path = write_report(
            lines=lines_from_summary(summary),
            counts=counts,
            today_mmddyyyy=today_label,
            center=center,
            out_path=options.out_path or _default_report_path(today, center),
            notes=notes_from_summary(summary),
        )
    except OSError:
        LOGGER.exception("Headless report write failed")
        warnings.append("Report could not be written; see logs for details")
        return HeadlessResult(
            exit_code=1,
            txt_path=None,
            json_path=None,
            counts=counts,
            summary_line=summary_line,
            today_label=today_label,
            log_file=log_file,
            warnings=warnings,
            summary=summary,
        )

    json_path: Optional[Path] = None
    if options.json_path is not None:
        payload = json.dumps(summary_to_dict(summary), indent=2, ensure_ascii=False)
        json_path = safe_write_text(options.json_path.expanduser(), payload)

    LOGGER.info("Headless run completed txt=%s %s", txt_path, summary_line)
    return HeadlessResult(
        exit_code=0,
        txt_path=txt_path,
        json_path=json_path,
        counts=counts,
        summary_line=summary_line,
        today_label=today_label,
        log_file=log_file,
        warnings=warnings,
        summary=summary,
    )


def _configure_logging(log_file: Path, *, trace: bool = False) -> logging.Logger:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    base_logger = get_logger()
    level = logging.DEBUG if trace else logging.INFO
    base_logger.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if not any(isinstance(handler, logging.StreamHandler) for handler in root_logger.handlers):
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(level)
        root_logger.addHandler(stream_handler)

    existing_paths = {
        getattr(handler, "baseFilename", None)
        for handler in base_logger.handlers
        if hasattr(handler, "baseFilename")
    }
    if str(log_file) not in existing_paths:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            "%Y-%m-%d %H:%M:%S",
        )
        file_handler.setFormatter(formatter)
        base_logger.addHandler(file_handler)

    return base_logger


def _build_summary_line(counts: Dict[str, int], today_label: str, center: str) -> str:
    return (
        f"Date:{today_label} Center:{center} Cases:{counts.get('cases', 0)} "
        f"DueToday:{counts.get('due_today', 0)} Missed:{counts.get('missed_total', 0)} "
        f"Scheduled:{counts.get('scheduled', 0)} Completed:{counts.get('completed', 0)}"
    )


def _default_log_name() -> str:
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"headless_{timestamp}.log"


def _default_report_path(today: date, center: str) -> Path:
    name = sanitize_filename(f"{today.isoformat()}_{center}_schedule.txt")
    return exports_dir() / name


__all__ = ["HeadlessOptions", "HeadlessResult", "execute_headless"]
