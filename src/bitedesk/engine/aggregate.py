"""Cross-case aggregation for the scheduler list, dashboard tile and patient table."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from bitedesk.cases.dates import reference_timezone
from bitedesk.engine.classify import DoseStatus
from bitedesk.engine.identity import ResolvedIdentity
from bitedesk.engine.schedule import DoseSlot, ScheduleView, build_schedule_view

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DueDose:
    """A dose slot paired with the case and identity it belongs to."""

    case_id: Optional[str]
    registration_number: Optional[str]
    slot: DoseSlot
    identity: ResolvedIdentity


@dataclass(frozen=True, slots=True)
class ScheduleSummary:
    """Result of one aggregation run."""

    today: date
    views: Tuple[ScheduleView, ...] = ()
    due_today: Tuple[DueDose, ...] = ()
    missed: Tuple[DueDose, ...] = ()
    last_touched_dose: Dict[str, str] = field(default_factory=dict)

    @property
    def missed_count(self) -> int:
        return len(self.missed)


def last_touched_dose(view: ScheduleView) -> Optional[str]:
    """Return the label of the latest slot that carries a date, Day 28 first."""

    for slot in reversed(view.slots):
        if slot.date is not None:
            return slot.day_label
    return None


def _pair(view: ScheduleView, slot: DoseSlot) -> DueDose:
    return DueDose(
        case_id=view.case_id,
        registration_number=view.registration_number,
        slot=slot,
        identity=view.identity,
    )


def aggregate_schedules(
    cases: Optional[Iterable[Mapping[str, object]]],
    patients: Optional[Iterable[Mapping[str, object]]],
    today: date,
) -> ScheduleSummary:
    """Build every case view and collect due, missed and last-dose lookups.

    Fully completed cases still produce a view and a last-dose entry but never
    contribute due or missed doses. Slots without a date never aggregate.
    Output order follows the input case order, then Day 0..Day 28.
    """

    zone = reference_timezone()
    patient_list = [patient for patient in (patients or ()) if isinstance(patient, Mapping)]

    views: List[ScheduleView] = []
    due_today: List[DueDose] = []
    missed: List[DueDose] = []
    last_touched: Dict[str, str] = {}

    for case in cases or ():
        if not isinstance(case, Mapping):
            logger.debug("Skipping non-object case entry %r", case)
            continue
        view = build_schedule_view(case, patient_list, today, zone)
        views.append(view)

        label = last_touched_dose(view)
        if label is not None:
            last_touched[view.identity.key] = label

        if view.fully_completed:
            continue
        for slot in view.dated_slots():
            if slot.status is DoseStatus.TODAY:
                due_today.append(_pair(view, slot))
            elif slot.status is DoseStatus.MISSED:
                missed.append(_pair(view, slot))

    logger.debug(
        "Aggregated %d cases for %s: due_today=%d missed=%d",
        len(views),
        today.isoformat(),
        len(due_today),
        len(missed),
    )
    return ScheduleSummary(
        today=today,
        views=tuple(views),
        due_today=tuple(due_today),
        missed=tuple(missed),
        last_touched_dose=last_touched,
    )


def summarize_counts(summary: ScheduleSummary) -> Dict[str, int]:
    """Return dashboard counts for ``summary``."""

    counts = {status.value: 0 for status in DoseStatus}
    for view in summary.views:
        for slot in view.dated_slots():
            counts[slot.status.value] += 1
    counts["cases"] = len(summary.views)
    counts["due_today"] = len(summary.due_today)
    counts["missed_total"] = summary.missed_count
    return counts


def _slot_payload(slot: DoseSlot) -> Dict[str, object]:
    return {
        "day": slot.day_label,
        "date": slot.date.isoformat() if slot.date else None,
        "rawStatus": slot.raw_status,
        "status": slot.status.value,
    }


def _due_payload(due: DueDose) -> Dict[str, object]:
    payload = _slot_payload(due.slot)
    payload.update(
        {
            "caseId": due.case_id,
            "registrationNumber": due.registration_number,
            "patientKey": due.identity.key,
            "patientName": due.identity.display_name,
        }
    )
    return payload


def summary_to_dict(summary: ScheduleSummary) -> Dict[str, object]:
    """Return ``summary`` as JSON-ready plain data."""

    return {
        "today": summary.today.isoformat(),
        "dueToday": [_due_payload(due) for due in summary.due_today],
        "missedCount": summary.missed_count,
        "lastTouchedDoseByPatient": dict(summary.last_touched_dose),
        "cases": [
            {
                "caseId": view.case_id,
                "registrationNumber": view.registration_number,
                "patientKey": view.identity.key,
                "patientName": view.identity.display_name,
                "matchedBy": view.identity.matched_by,
                "slots": [_slot_payload(slot) for slot in view.slots],
            }
            for view in summary.views
        ],
    }


__all__ = [
    "DueDose",
    "ScheduleSummary",
    "aggregate_schedules",
    "last_touched_dose",
    "summarize_counts",
    "summary_to_dict",
]
