"""Helpers for locating the BiteDesk home directory and writing report exports."""

from __future__ import annotations

import errno
import logging
import os
import re
from pathlib import Path
from typing import Final

_LOGGER = logging.getLogger(__name__)

_DEFAULT_HOME: Final[Path] = Path.home() / ".bitedesk"
_SAFE_CHAR_RE: Final[re.Pattern[str]] = re.compile(r"[^a-zA-Z0-9._\- ]+")
_SPACE_RE: Final[re.Pattern[str]] = re.compile(r"\s+")
_DOUBLE_DOT_RE: Final[re.Pattern[str]] = re.compile(r"\.{2,}")

_MAX_FILENAME_LEN: Final[int] = 120


def app_home() -> Path:
    """Return ``BITEDESK_HOME`` (default ``~/.bitedesk``), creating it if needed."""
    configured = os.environ.get("BITEDESK_HOME")
    home = Path(configured).expanduser() if configured else _DEFAULT_HOME
    home.mkdir(parents=True, exist_ok=True)
    return home


def exports_dir() -> Path:
    """Return the default Exports directory, creating it if needed."""
    path = app_home() / "Exports"
    path.mkdir(parents=True, exist_ok=True)
    return path


def sanitize_filename(base: str) -> str:
    """Sanitize ``base`` so it is safe for filesystem use."""
    base = (base or "").strip()
    name, ext = os.path.splitext(base)
    if not name:
        name = "BiteDesk"
    if ext and not ext.startswith("."):
        ext = f".{ext}"

    sanitized_name = _SAFE_CHAR_RE.sub("_", name)
    sanitized_name = _SPACE_RE.sub(" ", sanitized_name)
    sanitized_name = _DOUBLE_DOT_RE.sub(".", sanitized_name)
    sanitized_name = sanitized_name.strip(" .") or "BiteDesk"

    sanitized_ext = _SAFE_CHAR_RE.sub("", ext)
    sanitized_ext = _DOUBLE_DOT_RE.sub(".", sanitized_ext)

    candidate = f"{sanitized_name}{sanitized_ext}"
    if len(candidate) <= _MAX_FILENAME_LEN:
        return candidate

    trim_len = max(0, _MAX_FILENAME_LEN - len(sanitized_ext))
    trimmed_name = sanitized_name[:trim_len].rstrip(" .") or "BiteDesk"
    return f"{trimmed_name}{sanitized_ext}"


def safe_write_text(path: Path, text: str) -> Path:
    """Persist ``text`` to ``path``, falling back to Exports when access is denied."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path
    except OSError as exc:
        if exc.errno not in (errno.EPERM, errno.EACCES):
            raise
        fallback_path = exports_dir() / path.name
        _LOGGER.warning(
            "safe_write_text fallback (errno=%s) original=%s fallback=%s",
            exc.errno,
            path,
            fallback_path,
        )
        fallback_path.write_text(text, encoding="utf-8")
        return fallback_path


__all__ = ["app_home", "exports_dir", "sanitize_filename", "safe_write_text"]
