"""JsonStore — triage history as a single append-only JSON file.

Data format: a JSON array of LogRecord dicts, newest entries appended. The
file is plain text so it can be committed next to the triage documents and
diffed in review.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from triagelog_store.base import BaseStore, in_range
from triagelog_store.models import LogRecord

logger = logging.getLogger(__name__)

DEFAULT_JSON_PATH = "triagelog_history.json"


class JsonStore(BaseStore):
    """Stores triage history as an append-only JSON array.

    Each save() appends one LogRecord. list_logs() reads the full array and
    filters in memory — suitable for years of weekly logs. A missing file
    reads as an empty history; an unreadable one is never overwritten.
    """

    def __init__(self, path: str = DEFAULT_JSON_PATH):
        self._path = Path(path)

    def save(self, record: LogRecord) -> bool:
        try:
            existing = self._read_records()
        except (json.JSONDecodeError, OSError, ValueError) as e:
            logger.warning("JsonStore.save() skipped %s: cannot read %s (%s)", record.date, self._path, e)
            return False
        if any(r.get("date") == record.date for r in existing):
            logger.info("Triage log for %s already stored; keeping the existing record.", record.date)
            return False
        existing.append(record.to_dict())
        self._path.write_text(json.dumps(existing, indent=2), encoding="utf-8")
        return True

    def list_logs(self, since: str | None = None, until: str | None = None) -> list[LogRecord]:
        try:
            raw = self._read_records()
        except (json.JSONDecodeError, OSError, ValueError) as e:
            logger.warning("JsonStore.list_logs() failed: %s", e)
            return []
        records = [LogRecord.from_dict(r) for r in raw]
        records = [r for r in records if in_range(r.date, since, until)]
        return sorted(records, key=lambda r: r.date)

    def _read_records(self) -> list[dict]:
        """Read the current JSON array from the file, or [] if it does not exist yet."""
        if not self._path.exists():
            return []
        data = json.loads(self._path.read_text(encoding="utf-8")) or []
        if not isinstance(data, list):
            raise ValueError(f"expected a JSON array in {self._path}, found {type(data).__name__}")
        return data
