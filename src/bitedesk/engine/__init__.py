"""Dose-schedule derivation for bite-case records."""

from __future__ import annotations

__all__ = [
    "aggregate",
    "classify",
    "identity",
    "normalize",
    "reschedule",
    "schedule",
]
