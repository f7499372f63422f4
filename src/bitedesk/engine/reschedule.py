"""Preview how moving one dose shifts the rest of a course."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Tuple

from bitedesk.cases.dates import format_mmddyyyy
from bitedesk.cases.fields import DAY_LABELS, DAY_OFFSETS
from bitedesk.engine.schedule import ScheduleView


@dataclass(frozen=True, slots=True)
class CascadePreview:
    errors: Tuple[str, ...]
    affected: Tuple[Tuple[str, date], ...]

    @property
    def ok(self) -> bool:
        return not self.errors


def project_schedule(day0: date) -> Tuple[Tuple[str, date], ...]:
    """Return the canonical course dates counted from ``day0``."""

    return tuple((label, day0 + timedelta(days=offset)) for label, offset in zip(DAY_LABELS, DAY_OFFSETS))


def preview_cascade(view: ScheduleView, day_label: str, new_date: date, today: date) -> CascadePreview:
    """Validate moving ``day_label`` to ``new_date`` and list the shifted doses.

    The moved dose and every later dose keep their canonical spacing from
    ``new_date``; earlier doses are untouched and not listed.
    """

    if day_label not in DAY_LABELS:
        return CascadePreview(errors=(f"Unknown dose day: {day_label}.",), affected=())

    index = DAY_LABELS.index(day_label)
    errors: List[str] = []
    if new_date < today:
        errors.append("Date cannot be in the past.")
    if index > 0:
        previous = view.slot(DAY_LABELS[index - 1])
        if previous is not None and previous.date is not None and new_date < previous.date:
            errors.append(
                f"{day_label} cannot be earlier than {previous.day_label} "
                f"({format_mmddyyyy(previous.date)})."
            )
    if errors:
        return CascadePreview(errors=tuple(errors), affected=())

    base_offset = DAY_OFFSETS[index]
    affected = tuple(
        (label, new_date + timedelta(days=offset - base_offset))
        for label, offset in zip(DAY_LABELS[index:], DAY_OFFSETS[index:])
    )
    return CascadePreview(errors=(), affected=affected)


__all__ = ["CascadePreview", "preview_cascade", "project_schedule"]
