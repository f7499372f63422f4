"""Dose status classification against a fixed reference day."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional


class DoseStatus(str, Enum):
    SCHEDULED = "scheduled"
    TODAY = "today"
    COMPLETED = "completed"
    MISSED = "missed"


def normalize_status(raw_status: object) -> Optional[str]:
    """Return ``raw_status`` trimmed and lowercased, or ``None`` when blank."""

    if not isinstance(raw_status, str):
        return None
    normalized = raw_status.strip().lower()
    return normalized or None


def classify_dose(slot_date: Optional[date], raw_status: object, today: date) -> DoseStatus:
    """Return the canonical status for one dose slot.

    A stored ``completed`` or ``missed`` status is final. Otherwise the slot
    date decides: no date is ``scheduled``, the reference day is ``today``,
    later days are ``scheduled`` and earlier days are ``missed``.
    """

    status = normalize_status(raw_status)
    if status == DoseStatus.COMPLETED.value:
        return DoseStatus.COMPLETED
    if status == DoseStatus.MISSED.value:
        return DoseStatus.MISSED

    if slot_date is None:
        return DoseStatus.SCHEDULED
    if slot_date == today:
        return DoseStatus.TODAY
    if slot_date > today:
        return DoseStatus.SCHEDULED
    return DoseStatus.MISSED


def is_lapsed(slot_date: Optional[date], raw_status: object, today: date) -> bool:
    """Return ``True`` when a slot is missed only because its date has passed."""

    if normalize_status(raw_status) == DoseStatus.MISSED.value:
        return False
    return classify_dose(slot_date, raw_status, today) is DoseStatus.MISSED


__all__ = ["DoseStatus", "classify_dose", "is_lapsed", "normalize_status"]
