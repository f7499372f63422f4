"""Load exported bite-case and patient collections from JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Mapping

logger = logging.getLogger(__name__)


def unwrap_records(payload: object) -> List[Dict[str, object]]:
    """Return the record list from a bare array or a ``{"data": [...]}`` envelope."""

    if isinstance(payload, Mapping):
        payload = payload.get("data")
    if not isinstance(payload, list):
        return []

    records: List[Dict[str, object]] = []
    dropped = 0
    for item in payload:
        if isinstance(item, Mapping):
            records.append(dict(item))
        else:
            dropped += 1
    if dropped:
        logger.debug("Dropped %d non-object entries from collection", dropped)
    return records


def load_records(path: str | Path) -> List[Dict[str, object]]:
    """Read ``path`` and return its records.

    Raises ``FileNotFoundError`` for a missing file and ``ValueError`` when the
    file is not valid JSON.
    """

    resolved = Path(path).expanduser().resolve()
    if not resolved.exists():
        raise FileNotFoundError(f"Collection file not found: {resolved}")

    with resolved.open("r", encoding="utf-8") as handle:
        try:
            payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Malformed JSON in {resolved.name}: {exc}") from exc

    records = unwrap_records(payload)
    logger.info("Loaded %d records from %s", len(records), resolved)
    return records


__all__ = ["load_records", "unwrap_records"]
