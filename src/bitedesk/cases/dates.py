"""Helpers for coercing stored schedule dates and resolving the reference day."""

from __future__ import annotations

import logging
import os
from datetime import date, datetime, timezone
from typing import Mapping, Optional

from dateutil import parser as date_parser
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_TZ_NAME = "Asia/Manila"
_PARSE_DEFAULT = datetime(2000, 1, 1)


def reference_timezone() -> ZoneInfo:
    """Return the clinic reference zone from ``BITEDESK_TZ`` (default Asia/Manila)."""

    name = (os.environ.get("BITEDESK_TZ") or "").strip() or DEFAULT_TZ_NAME
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown BITEDESK_TZ %r; using %s", name, DEFAULT_TZ_NAME)
        return ZoneInfo(DEFAULT_TZ_NAME)


def coerce_date(raw: object, tz: Optional[ZoneInfo] = None) -> date | None:
    """Return the calendar day stored in ``raw`` or ``None``.

    Accepts ``date``/``datetime`` objects, ISO and free-form strings, epoch
    milliseconds and BSON extended JSON (``{"$date": ...}`` or
    ``{"$numberLong": ...}``). Aware timestamps are shifted into ``tz`` (the
    reference zone by default) before the day is taken; naive values keep
    their own day. Anything unreadable yields ``None``.
    """

    if raw is None or raw == "" or isinstance(raw, bool):
        return None
    if isinstance(raw, datetime):
        if raw.tzinfo is None:
            return raw.date()
        return _day_in_zone(raw, tz)
    if isinstance(raw, date):
        return raw
    if isinstance(raw, (int, float)):
        return _from_epoch_millis(raw, tz)
    if isinstance(raw, Mapping):
        if "$date" in raw:
            return coerce_date(raw["$date"], tz)
        if "$numberLong" in raw:
            try:
                millis = int(str(raw["$numberLong"]))
            except ValueError:
                return None
            return _from_epoch_millis(millis, tz)
        return None
    if isinstance(raw, str):
        return _from_text(raw, tz)
    return None


def _from_epoch_millis(millis: float, tz: Optional[ZoneInfo]) -> date | None:
    try:
        stamp = datetime.fromtimestamp(millis / 1000.0, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    return _day_in_zone(stamp, tz)


def _day_in_zone(stamp: datetime, tz: Optional[ZoneInfo]) -> date | None:
    try:
        return stamp.astimezone(tz or reference_timezone()).date()
    except (OverflowError, OSError, ValueError):
        logger.debug("Timestamp %r out of range for the reference zone", stamp)
        return None


def _from_text(text: str, tz: Optional[ZoneInfo]) -> date | None:
    value = text.strip()
    if not value:
        return None
    try:
        parsed = date_parser.isoparse(value)
    except (ValueError, OverflowError):
        try:
            parsed = date_parser.parse(value, default=_PARSE_DEFAULT)
        except (ValueError, OverflowError):
            logger.debug("Unparseable schedule date %r", value)
            return None
    return coerce_date(parsed, tz)


def format_mmddyyyy(value: date) -> str:
    """Return ``value`` formatted as ``MM/DD/YYYY``."""

    return f"{value.month:02d}/{value.day:02d}/{value.year:04d}"


def parse_day(raw: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string, raising ``ValueError`` otherwise."""

    return datetime.strptime(raw.strip(), "%Y-%m-%d").date()


def dev_override_date() -> date | None:
    """Return a developer-specified reference day via BITEDESK_DEV_DATE (YYYY-MM-DD)."""

    value = os.environ.get("BITEDESK_DEV_DATE")
    if not value:
        return None
    try:
        return parse_day(value)
    except ValueError:
        return None


def resolve_today(explicit: Optional[date] = None) -> date:
    """Resolve the reference day for one run.

    An explicit value wins, then ``BITEDESK_DEV_DATE``, then the current day in
    the reference zone. Callers resolve this once and pass it down.
    """

    if explicit is not None:
        return explicit
    override = dev_override_date()
    if override is not None:
        return override
    return datetime.now(tz=reference_timezone()).date()


__all__ = [
    "DEFAULT_TZ_NAME",
    "coerce_date",
    "dev_override_date",
    "format_mmddyyyy",
    "parse_day",
    "reference_timezone",
    "resolve_today",
]
