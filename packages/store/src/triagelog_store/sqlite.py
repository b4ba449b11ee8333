"""SQLiteStore — local file-based store for triage history.

Schema:
  logs  — one row per triage log, keyed by date. Entries and nags are kept
          as JSON columns to keep queries simple and avoid JOINs in read paths.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import asdict

from triagelog_store.base import BaseStore
from triagelog_store.models import LogRecord, entry_from_dict

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = ".triagelog.db"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS logs (
    id               INTEGER PRIMARY KEY AUTOINCREMENT,
    date             TEXT NOT NULL UNIQUE,
    author           TEXT,
    start_rev        TEXT,
    end_rev          TEXT,
    comparison_link  TEXT,
    regressions      INTEGER DEFAULT 0,
    improvements     INTEGER DEFAULT 0,
    mixed            INTEGER DEFAULT 0,
    entries_json     TEXT DEFAULT '[]',
    nags_json        TEXT DEFAULT '[]',
    overview         TEXT DEFAULT '',
    source_path      TEXT,
    parsed_at        TEXT
);
CREATE INDEX IF NOT EXISTS idx_logs_author ON logs (author);
"""


class SQLiteStore(BaseStore):
    """Stores triage history in a local SQLite database file.

    The database file path defaults to `.triagelog.db` in the current working
    directory. Configure via .triagelog.yml: `store_path: /path/to/triage.db`.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self._conn = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def save(self, record: LogRecord) -> bool:
        cursor = self._conn.execute(
            """
            INSERT OR IGNORE INTO logs
              (date, author, start_rev, end_rev, comparison_link,
               regressions, improvements, mixed, entries_json, nags_json,
               overview, source_path, parsed_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.date,
                record.author,
                record.start_rev,
                record.end_rev,
                record.comparison_link,
                record.regressions,
                record.improvements,
                record.mixed,
                json.dumps([asdict(e) for e in record.entries]),
                json.dumps(record.nags),
                record.overview,
                record.source_path,
                record.parsed_at,
            ),
        )
        self._conn.commit()
        if cursor.rowcount == 0:
            logger.info("Triage log for %s already stored; keeping the existing record.", record.date)
            return False
        return True

    def list_logs(self, since: str | None = None, until: str | None = None) -> list[LogRecord]:
        clauses = []
        params: list[str] = []
        if since is not None:
            clauses.append("date >= ?")
            params.append(since)
        if until is not None:
            clauses.append("date <= ?")
            params.append(until)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._conn.execute(f"SELECT * FROM logs {where} ORDER BY date", params).fetchall()
        return [self._row_to_record(r) for r in rows]

    def close(self) -> None:
        self._conn.close()

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> LogRecord:
        return LogRecord(
            date=row["date"],
            author=row["author"] or "",
            start_rev=row["start_rev"] or "",
            end_rev=row["end_rev"] or "",
            comparison_link=row["comparison_link"] or "",
            regressions=row["regressions"],
            improvements=row["improvements"],
            mixed=row["mixed"],
            entries=[entry_from_dict(e) for e in json.loads(row["entries_json"] or "[]")],
            nags=json.loads(row["nags_json"] or "[]"),
            overview=row["overview"] or "",
            source_path=row["source_path"] or "",
            parsed_at=row["parsed_at"] or "",
        )
