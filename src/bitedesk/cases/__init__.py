"""Readers for stored bite-case and patient documents."""

from __future__ import annotations

__all__ = ["dates", "fields", "loader"]
