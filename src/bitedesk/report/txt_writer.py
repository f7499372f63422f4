"""TXT report writer for the daily vaccination schedule."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from bitedesk.cases.dates import reference_timezone
from bitedesk.cases.fields import DAY_LABELS
from bitedesk.fs.exports import safe_write_text

from .model import DoseLine

_DAY_ORDER = {label: index for index, label in enumerate(DAY_LABELS)}


def write_report(
    lines: List[DoseLine],
    counts: Mapping[str, int],
    today_mmddyyyy: str,
    center: str,
    out_path: Path,
    notes: Optional[Iterable[str]] = None,
) -> Path:
    """Write the daily schedule report to ``out_path`` and return the written path."""

    header = f"{today_mmddyyyy} · Center: {center.upper()} · Cases: {counts.get('cases', 0)}"
    counts_line = (
        "Due Today: {due} · Missed: {missed} · Scheduled: {scheduled} · Completed: {completed}"
    ).format(
        due=counts.get("due_today", 0),
        missed=counts.get("missed_total", 0),
        scheduled=counts.get("scheduled", 0),
        completed=counts.get("completed", 0),
    )

    out: List[str] = [header, counts_line, ""]

    due = [line for line in lines if line.kind == "DUE-TODAY"]
    out.append("Due Today —")
    if due:
        out.extend(_format_line(line) for line in _iter_sorted(due))
    else:
        out.append("Due Today: 0 (none scheduled)")

    missed = [line for line in lines if line.kind == "MISSED"]
    out.append("")
    out.append("Missed —")
    if missed:
        out.extend(_format_line(line) for line in _iter_sorted(missed))
    else:
        out.append("Missed: 0")

    seen: set[str] = set()
    note_lines: List[str] = []
    for note in notes or []:
        text = str(note).strip()
        if text and text not in seen:
            seen.add(text)
            note_lines.append(text)
    if note_lines:
        out.append("")
        out.extend(f"Notes — {text}" for text in note_lines)

    zone = reference_timezone()
    out.append("")
    generated_stamp = datetime.now(zone).strftime("%m/%d/%Y %H:%M")
    out.append(f"Generated: {generated_stamp} ({zone.key})")

    return safe_write_text(out_path, "\n".join(out))


def _iter_sorted(lines: Iterable[DoseLine]) -> List[DoseLine]:
    return sorted(lines, key=_line_sort_key)


def _line_sort_key(line: DoseLine) -> tuple:
    return (line.patient_name.casefold(), _DAY_ORDER.get(line.day_label, len(_DAY_ORDER)))


def _format_line(line: DoseLine) -> str:
    name = line.patient_name
    if line.synthetic:
        name = f"{name} (unlinked)"
    parts = [line.dose_code or line.day_label, name]
    if line.registration_number:
        parts.append(f"Reg {line.registration_number}")
    message = " — ".join(parts)
    if line.kind == "MISSED":
        message = f"{message} — {line.date_mmddyyyy}"
        if line.cause:
            message = f"{message} ({line.cause})"
    return message


__all__ = ["write_report"]
