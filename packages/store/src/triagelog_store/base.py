"""Abstract store interface.

Any storage backend (JSON file, SQLite, Postgres, S3) implements this
interface. The CLI depends on BaseStore — not on a concrete backend —
so backends are swappable without touching CLI code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from triagelog_store.models import LogRecord


class BaseStore(ABC):
    """Append-only persistence layer for parsed triage logs.

    A triage log is published once and never edited, so a store keeps the
    first record it sees for a given date and refuses later ones.
    """

    @abstractmethod
    def save(self, record: LogRecord) -> bool:
        """Persist a record. Returns False if a log for that date already exists."""

    @abstractmethod
    def list_logs(self, since: str | None = None, until: str | None = None) -> list[LogRecord]:
        """Return stored logs ordered by date, optionally bounded (inclusive, ISO dates).

        Returns an empty list if no logs exist — never raises.
        """

    def close(self) -> None:
        """Release any resources held by the store (connections, file handles).

        Optional — subclasses that need cleanup should override this.
        Default is a no-op so callers can always call close() safely.
        """


def in_range(date: str, since: str | None, until: str | None) -> bool:
    if since is not None and date < since:
        return False
    if until is not None and date > until:
        return False
    return True
