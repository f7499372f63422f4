"""Reconcile array-based and per-field dose schedules into five canonical slots."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Mapping, Optional, Sequence, Tuple

from zoneinfo import ZoneInfo

from bitedesk.cases.dates import coerce_date, reference_timezone
from bitedesk.cases.fields import (
    DAY_LABELS,
    DAY_OFFSETS,
    date_field_aliases,
    first_present,
    status_field,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RawSlot:
    """One canonical dose checkpoint before classification."""

    day_label: str
    offset: int
    date: Optional[date]
    raw_status: Optional[str]


def _schedule_array(case: Mapping[str, object]) -> Optional[Sequence[object]]:
    entries = case.get("scheduleDates")
    if isinstance(entries, (list, tuple)) and entries:
        return entries
    if entries not in (None, [], ()):
        logger.debug("Ignoring non-list scheduleDates on case %s", case.get("_id"))
    return None


def _raw_status(case: Mapping[str, object], offset: int) -> Optional[str]:
    value = case.get(status_field(offset))
    if value is None:
        return None
    if not isinstance(value, str):
        logger.debug("Ignoring non-text %s on case %s", status_field(offset), case.get("_id"))
        return None
    return value


def normalize_case(case: Mapping[str, object], tz: Optional[ZoneInfo] = None) -> Tuple[RawSlot, ...]:
    """Return the five ``RawSlot`` entries for ``case`` in Day 0..Day 28 order.

    ``scheduleDates[i]`` supplies the date for slot ``i`` when the array is a
    non-empty list, and a slot the array leaves empty stays undated. Only
    cases without the array read the per-day ``dNDate`` fields. Statuses
    always come from ``dNStatus``. Nothing here raises: absent or unreadable
    values become ``None``.
    """

    zone = tz or reference_timezone()
    array = _schedule_array(case)

    slots: List[RawSlot] = []
    for index, (label, offset) in enumerate(zip(DAY_LABELS, DAY_OFFSETS)):
        slot_date: Optional[date] = None
        if array is not None:
            if index < len(array):
                slot_date = coerce_date(array[index], zone)
        else:
            slot_date = coerce_date(first_present(case, date_field_aliases(offset)), zone)
        slots.append(
            RawSlot(
                day_label=label,
                offset=offset,
                date=slot_date,
                raw_status=_raw_status(case, offset),
            )
        )
    return tuple(slots)


def has_assigned_schedule(case: Mapping[str, object], tz: Optional[ZoneInfo] = None) -> bool:
    """Return ``True`` when either schedule shape carries at least one readable date."""

    return any(slot.date is not None for slot in normalize_case(case, tz))


__all__ = ["RawSlot", "has_assigned_schedule", "normalize_case"]
