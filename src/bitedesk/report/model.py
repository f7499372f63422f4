"""Report data structures for the daily schedule TXT output."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Literal, Optional

from bitedesk.cases.dates import format_mmddyyyy
from bitedesk.engine.aggregate import DueDose, ScheduleSummary
from bitedesk.engine.classify import is_lapsed

LineKind = Literal["DUE-TODAY", "MISSED"]
MissedCause = Literal["lapsed", "marked"]


@dataclass(slots=True)
class DoseLine:
    """Normalized representation of a single reported dose."""

    kind: LineKind
    patient_name: str
    registration_number: Optional[str]
    day_label: str
    dose_code: str
    date_mmddyyyy: str
    cause: Optional[MissedCause] = None
    synthetic: bool = False


def _line(kind: LineKind, due: DueDose, today: date) -> DoseLine:
    slot = due.slot
    cause: Optional[MissedCause] = None
    if kind == "MISSED":
        cause = "lapsed" if is_lapsed(slot.date, slot.raw_status, today) else "marked"
    return DoseLine(
        kind=kind,
        patient_name=due.identity.display_name,
        registration_number=due.registration_number or due.identity.registration_number,
        day_label=slot.day_label,
        dose_code=slot.dose_code,
        date_mmddyyyy=format_mmddyyyy(slot.date) if slot.date else "",
        cause=cause,
        synthetic=due.identity.synthetic,
    )


def lines_from_summary(summary: ScheduleSummary) -> List[DoseLine]:
    """Return due-today lines followed by missed lines for ``summary``."""

    lines = [_line("DUE-TODAY", due, summary.today) for due in summary.due_today]
    lines.extend(_line("MISSED", due, summary.today) for due in summary.missed)
    return lines


def notes_from_summary(summary: ScheduleSummary) -> List[str]:
    """Return report notes for cases the run could only partly read."""

    notes: List[str] = []
    undated = sum(1 for view in summary.views if not view.dated_slots())
    if undated:
        notes.append(f"{undated} case(s) without any scheduled dose")
    unlinked = sum(1 for view in summary.views if view.identity.synthetic)
    if unlinked:
        notes.append(f"{unlinked} case(s) not linked to a patient record")
    return notes


__all__ = ["DoseLine", "LineKind", "MissedCause", "lines_from_summary", "notes_from_summary"]
