"""Per-case schedule views built from normalized, classified slots."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Mapping, Optional, Tuple

from zoneinfo import ZoneInfo

from bitedesk.cases.fields import first_text, text_field
from bitedesk.engine.classify import DoseStatus, classify_dose
from bitedesk.engine.identity import REGISTRATION_FIELDS, ResolvedIdentity, resolve_identity
from bitedesk.engine.normalize import normalize_case


@dataclass(frozen=True, slots=True)
class DoseSlot:
    """A classified dose checkpoint."""

    day_label: str
    offset: int
    date: Optional[date]
    raw_status: Optional[str]
    status: DoseStatus

    @property
    def dose_code(self) -> str:
        return dose_code(self.day_label)


@dataclass(frozen=True, slots=True)
class ScheduleView:
    """One case's five dose slots and the identity they belong to."""

    case_id: Optional[str]
    registration_number: Optional[str]
    slots: Tuple[DoseSlot, ...]
    identity: ResolvedIdentity

    @property
    def fully_completed(self) -> bool:
        return all(slot.status is DoseStatus.COMPLETED for slot in self.slots)

    def dated_slots(self) -> Tuple[DoseSlot, ...]:
        return tuple(slot for slot in self.slots if slot.date is not None)

    def slot(self, day_label: str) -> Optional[DoseSlot]:
        for candidate in self.slots:
            if candidate.day_label == day_label:
                return candidate
        return None


class CaseStatus(str, Enum):
    TODAY = "Today"
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    MISSED = "Missed"
    PENDING = "Pending"


def dose_code(day_label: str) -> str:
    """Return the short code for ``day_label`` (``"Day 14"`` -> ``"D14"``)."""

    prefix, _, number = day_label.partition(" ")
    if prefix != "Day" or not number.isdigit():
        return ""
    return f"D{number}"


def build_schedule_view(
    case: Mapping[str, object],
    patients: Optional[Iterable[Mapping[str, object]]],
    today: date,
    tz: Optional[ZoneInfo] = None,
) -> ScheduleView:
    """Normalize, classify and resolve one case against the reference ``today``."""

    slots = tuple(
        DoseSlot(
            day_label=raw.day_label,
            offset=raw.offset,
            date=raw.date,
            raw_status=raw.raw_status,
            status=classify_dose(raw.date, raw.raw_status, today),
        )
        for raw in normalize_case(case, tz)
    )
    return ScheduleView(
        case_id=text_field(case, "_id"),
        registration_number=first_text(case, REGISTRATION_FIELDS),
        slots=slots,
        identity=resolve_identity(case, patients),
    )


def case_status(view: ScheduleView) -> CaseStatus:
    """Summarize a case for list views.

    Only dated slots count. Any dose due today wins, then any upcoming dose,
    then an all-completed course; what remains has a missed dose. A case with
    no dated slots is pending.
    """

    dated = view.dated_slots()
    if not dated:
        return CaseStatus.PENDING
    if any(slot.status is DoseStatus.TODAY for slot in dated):
        return CaseStatus.TODAY
    if any(slot.status is DoseStatus.SCHEDULED for slot in dated):
        return CaseStatus.SCHEDULED
    if all(slot.status is DoseStatus.COMPLETED for slot in dated):
        return CaseStatus.COMPLETED
    return CaseStatus.MISSED


__all__ = [
    "CaseStatus",
    "DoseSlot",
    "ScheduleView",
    "build_schedule_view",
    "case_status",
    "dose_code",
]
