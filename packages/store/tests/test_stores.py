"""Tests for triagelog-store implementations."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from triagelog_store.base import in_range
from triagelog_store.jsonfile import JsonStore
from triagelog_store.models import EntryRecord, LogRecord, NoteRecord
from triagelog_store.noop import NoOpStore
from triagelog_store.sqlite import SQLiteStore


def _make_record(date="2021-01-05", author="simulacrum", regressions=0, improvements=1, mixed=0):
    return LogRecord(
        date=date,
        author=author,
        start_rev="a" * 40,
        end_rev="b" * 40,
        comparison_link=f"https://perf.example/?start={'a' * 40}&end={'b' * 40}",
        regressions=regressions,
        improvements=improvements,
        mixed=mixed,
        entries=[
            EntryRecord(
                issue_ref=80539,
                category="Improvement",
                title="Remove manual advance_by",
                issue_url="https://issues.example/compiler/issues/80539",
                notes=[
                    NoteRecord(
                        text="up to -2.4% on `full` builds of `foo-check`",
                        percent=-2.4,
                        build="full",
                        benchmark="foo-check",
                        comparison_url="https://perf.example/compare.html?start=1&end=2&stat=instructions:u",
                    )
                ],
            ),
        ],
        nags=["#80245 needs a bisection"],
        overview="A quiet week over the holidays.\n0 of them in rollups",
        source_path="logs/2021-01-05.md",
        parsed_at=datetime.now(timezone.utc).isoformat(),
    )


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class TestLogRecord:
    def test_stated_and_tallied(self):
        record = _make_record(regressions=1, improvements=2, mixed=0)
        assert record.stated == (1, 2, 0)
        assert record.tallied == (0, 1, 0)

    def test_to_dict_from_dict_roundtrip(self):
        record = _make_record()
        restored = LogRecord.from_dict(json.loads(json.dumps(record.to_dict())))
        assert restored == record

    def test_from_dict_tolerates_missing_keys(self):
        restored = LogRecord.from_dict({"date": "2021-01-05"})
        assert restored.author == ""
        assert restored.entries == []
        assert restored.stated == (0, 0, 0)


def test_in_range_is_inclusive():
    assert in_range("2021-01-05", "2021-01-05", "2021-01-05")
    assert not in_range("2021-01-04", "2021-01-05", None)
    assert not in_range("2021-01-06", None, "2021-01-05")
    assert in_range("2021-01-06", None, None)


# ---------------------------------------------------------------------------
# NoOpStore
# ---------------------------------------------------------------------------


class TestNoOpStore:
    def test_save_returns_false(self):
        store = NoOpStore()
        assert store.save(_make_record()) is False

    def test_list_logs_returns_empty(self):
        store = NoOpStore()
        store.save(_make_record())
        assert store.list_logs() == []

    def test_close_is_safe(self):
        NoOpStore().close()


# ---------------------------------------------------------------------------
# SQLiteStore
# ---------------------------------------------------------------------------


class TestSQLiteStore:
    def test_save_and_list(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        assert store.save(_make_record()) is True

        results = store.list_logs()
        assert len(results) == 1
        assert results[0].date == "2021-01-05"
        assert results[0].author == "simulacrum"
        assert results[0].stated == (0, 1, 0)
        store.close()

    def test_entries_roundtrip(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        record = _make_record()
        store.save(record)

        restored = store.list_logs()[0]
        assert restored.entries == record.entries
        assert restored.nags == record.nags
        assert restored.entries[0].notes[0].percent == -2.4
        assert restored.entries[0].notes[0].comparison_url.startswith("https://perf.example/compare.html")
        assert restored.overview == record.overview
        store.close()

    def test_duplicate_date_refused(self, tmp_path, caplog):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        store.save(_make_record(author="first"))

        with caplog.at_level(logging.INFO, logger="triagelog_store.sqlite"):
            assert store.save(_make_record(author="second")) is False

        results = store.list_logs()
        assert len(results) == 1
        assert results[0].author == "first"
        assert "already stored" in caplog.text
        store.close()

    def test_list_ordered_by_date(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        for d in ("2021-01-12", "2020-12-29", "2021-01-05"):
            store.save(_make_record(date=d))

        assert [r.date for r in store.list_logs()] == ["2020-12-29", "2021-01-05", "2021-01-12"]
        store.close()

    def test_since_until_filters(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        for d in ("2020-12-29", "2021-01-05", "2021-01-12"):
            store.save(_make_record(date=d))

        assert [r.date for r in store.list_logs(since="2021-01-05")] == ["2021-01-05", "2021-01-12"]
        assert [r.date for r in store.list_logs(until="2021-01-05")] == ["2020-12-29", "2021-01-05"]
        assert [r.date for r in store.list_logs(since="2021-01-01", until="2021-01-10")] == ["2021-01-05"]
        store.close()

    def test_empty_store_returns_empty_list(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        assert store.list_logs() == []
        store.close()

    def test_persists_across_connections(self, tmp_path):
        """Data written by one SQLiteStore instance must be readable by another."""
        db_path = str(tmp_path / "test.db")
        store_a = SQLiteStore(db_path=db_path)
        store_a.save(_make_record())
        store_a.close()

        store_b = SQLiteStore(db_path=db_path)
        assert len(store_b.list_logs()) == 1
        assert store_b.save(_make_record()) is False
        store_b.close()


# ---------------------------------------------------------------------------
# JsonStore
# ---------------------------------------------------------------------------


class TestJsonStore:
    def test_save_creates_file(self, tmp_path):
        path = tmp_path / "history.json"
        store = JsonStore(str(path))
        assert store.save(_make_record()) is True

        content = json.loads(path.read_text())
        assert len(content) == 1
        assert content[0]["date"] == "2021-01-05"

    def test_save_appends_to_existing_records(self, tmp_path):
        store = JsonStore(str(tmp_path / "history.json"))
        store.save(_make_record(date="2021-01-05"))
        store.save(_make_record(date="2021-01-12"))

        assert [r.date for r in store.list_logs()] == ["2021-01-05", "2021-01-12"]

    def test_duplicate_date_refused(self, tmp_path):
        store = JsonStore(str(tmp_path / "history.json"))
        store.save(_make_record(author="first"))

        assert store.save(_make_record(author="second")) is False
        results = store.list_logs()
        assert len(results) == 1
        assert results[0].author == "first"

    def test_record_roundtrip(self, tmp_path):
        store = JsonStore(str(tmp_path / "history.json"))
        record = _make_record()
        store.save(record)

        restored = store.list_logs()[0]
        assert restored == record
        assert restored.overview == "A quiet week over the holidays.\n0 of them in rollups"
        assert restored.entries[0].notes[0].comparison_url is not None

    def test_missing_file_reads_empty(self, tmp_path):
        assert JsonStore(str(tmp_path / "nope.json")).list_logs() == []

    def test_since_until_filters(self, tmp_path):
        store = JsonStore(str(tmp_path / "history.json"))
        for d in ("2021-01-12", "2020-12-29", "2021-01-05"):
            store.save(_make_record(date=d))

        assert [r.date for r in store.list_logs()] == ["2020-12-29", "2021-01-05", "2021-01-12"]
        assert [r.date for r in store.list_logs(since="2021-01-01", until="2021-01-10")] == ["2021-01-05"]

    def test_corrupt_file_not_overwritten(self, tmp_path, caplog):
        path = tmp_path / "history.json"
        path.write_text("{not json")
        store = JsonStore(str(path))

        assert store.save(_make_record()) is False
        assert path.read_text() == "{not json"
        assert "cannot read" in caplog.text

    def test_list_logs_returns_empty_on_corrupt_file(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text('{"date": "2021-01-05"}')
        assert JsonStore(str(path)).list_logs() == []
