"""No-op store — the default when no store is configured.

Parsing and validation work without any persistence. Using a NoOpStore
rather than None lets the CLI always call store.save() without conditional
checks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from triagelog_store.base import BaseStore

if TYPE_CHECKING:
    from triagelog_store.models import LogRecord


class NoOpStore(BaseStore):
    """Silently discards all records — zero configuration required."""

    def save(self, record: LogRecord) -> bool:
        return False

    def list_logs(self, since: str | None = None, until: str | None = None) -> list[LogRecord]:
        return []
