"""Field names and tolerant accessors for stored bite-case and patient documents."""

from __future__ import annotations

from typing import Mapping, Optional, Tuple

DAY_LABELS: Tuple[str, ...] = ("Day 0", "Day 3", "Day 7", "Day 14", "Day 28")
DAY_OFFSETS: Tuple[int, ...] = (0, 3, 7, 14, 28)
SLOT_COUNT = len(DAY_LABELS)

UNKNOWN_PATIENT = "Unknown Patient"
NAME_FIELDS: Tuple[str, ...] = ("firstName", "middleName", "lastName")


def date_field_aliases(offset: int) -> Tuple[str, ...]:
    """Return per-day date keys for ``offset``, newest naming first."""

    return (f"d{offset}Date", f"day{offset}Date", f"day{offset}_date")


def status_field(offset: int) -> str:
    return f"d{offset}Status"


def text_field(record: Mapping[str, object], key: str) -> Optional[str]:
    """Return ``record[key]`` as stripped text, or ``None`` when blank or absent."""

    value = record.get(key)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Mapping):
        # ObjectId references arrive as {"$oid": "..."} in exported documents.
        value = value.get("$oid")
        if value is None:
            return None
    text = str(value).strip()
    return text or None


def first_present(record: Mapping[str, object], keys: Tuple[str, ...]) -> object:
    """Return the first value among ``keys`` that is neither ``None`` nor ``""``.

    Falsy values such as ``0`` (epoch milliseconds) count as present.
    """

    for key in keys:
        value = record.get(key)
        if value is None or value == "":
            continue
        return value
    return None


def first_text(record: Mapping[str, object], keys: Tuple[str, ...]) -> Optional[str]:
    """Return the first non-blank ``text_field`` among ``keys``."""

    for key in keys:
        text = text_field(record, key)
        if text is not None:
            return text
    return None


def joined_name(record: Mapping[str, object]) -> Optional[str]:
    """Return first/middle/last name parts joined by single spaces."""

    parts = [text_field(record, key) for key in NAME_FIELDS]
    joined = " ".join(" ".join(part.split()) for part in parts if part)
    return joined or None


__all__ = [
    "DAY_LABELS",
    "DAY_OFFSETS",
    "NAME_FIELDS",
    "SLOT_COUNT",
    "UNKNOWN_PATIENT",
    "date_field_aliases",
    "first_present",
    "first_text",
    "joined_name",
    "status_field",
    "text_field",
]
