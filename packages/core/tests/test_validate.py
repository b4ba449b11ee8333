"""Tests for triage log validation."""

import logging
from dataclasses import replace
from pathlib import Path

from triagelog_core.models import Category, SummaryCounts
from triagelog_core.parser import parse_file
from triagelog_core.validate import (
    COUNT_MISMATCH,
    DUPLICATE_ENTRY,
    REVISION_LINK_MISMATCH,
    check_counts,
    validate,
)

DATA = Path(__file__).parent / "data"


class TestCountMismatch:
    def test_consistent_log_has_no_issues(self):
        log = parse_file(DATA / "2021-01-05.md")
        assert validate(log) == []

    def test_2020_12_03_mismatch_is_a_warning(self):
        log = parse_file(DATA / "2020-12-03.md")
        issues = validate(log)
        assert [i.kind for i in issues] == [COUNT_MISMATCH]
        assert issues[0].details == {"stated": (2, 2, 2), "tallied": (2, 1, 1)}

    def test_message_names_each_differing_category(self):
        log = parse_file(DATA / "2020-12-03.md")
        issue = check_counts(log)
        assert "Improvements: stated 2, listed 1" in issue.message
        assert "Mixed: stated 2, listed 1" in issue.message
        assert "Regressions" not in issue.message

    def test_validation_does_not_modify_log(self):
        log = parse_file(DATA / "2020-12-03.md")
        before = replace(log)
        validate(log)
        assert log == before
        assert log.summary_counts == SummaryCounts(2, 2, 2)

    def test_logs_warning(self, caplog):
        log = parse_file(DATA / "2020-12-03.md")
        with caplog.at_level(logging.WARNING, logger="triagelog_core.validate"):
            validate(log)
        assert "CountMismatch" in caplog.text
        assert "2020-12-03" in caplog.text


class TestRevisionLink:
    def test_link_not_referencing_hashes(self):
        log = parse_file(DATA / "2021-01-05.md")
        bad = replace(log, comparison_link="https://perf.example/?start=deadbeef&end=cafebabe")
        kinds = [i.kind for i in validate(bad)]
        assert REVISION_LINK_MISMATCH in kinds


class TestDuplicates:
    def test_same_issue_twice_in_category(self):
        log = parse_file(DATA / "2021-01-05.md")
        improvement = log.entries_for(Category.IMPROVEMENT)[0]
        dup = replace(
            log,
            entries=log.entries + (improvement,),
            summary_counts=SummaryCounts(0, 3, 2),
        )
        issues = validate(dup)
        assert [i.kind for i in issues] == [DUPLICATE_ENTRY]
        assert "#80539" in issues[0].message
