"""Consistency checks for parsed triage logs.

The published corpus contains logs whose stated summary counts disagree with
the entries they list. Neither side is treated as authoritative: a mismatch is
reported as a warning and the log is left exactly as parsed.
"""

from __future__ import annotations

import logging
from collections import Counter

from triagelog_core.links import link_references
from triagelog_core.models import Category, TriageLog, ValidationIssue

logger = logging.getLogger(__name__)

COUNT_MISMATCH = "CountMismatch"
REVISION_LINK_MISMATCH = "RevisionLinkMismatch"
DUPLICATE_ENTRY = "DuplicateEntry"


def check_counts(log: TriageLog) -> ValidationIssue | None:
    stated = log.summary_counts
    tallied = log.tally()
    if stated == tallied:
        return None

    diffs = []
    for category in Category:
        s, t = stated.get(category), tallied.get(category)
        if s != t:
            diffs.append(f"{category.section_title}: stated {s}, listed {t}")
    return ValidationIssue(
        kind=COUNT_MISMATCH,
        message="Summary counts disagree with entries (" + "; ".join(diffs) + ")",
        details={"stated": stated.as_tuple(), "tallied": tallied.as_tuple()},
    )


def check_revision_link(log: TriageLog) -> ValidationIssue | None:
    rev = log.revision_range
    if link_references(log.comparison_link, rev.start, rev.end):
        return None
    return ValidationIssue(
        kind=REVISION_LINK_MISMATCH,
        message=f"Revision-range link does not reference {rev.start[:7]}..{rev.end[:7]}",
        details={"link": log.comparison_link},
    )


def check_duplicates(log: TriageLog) -> list[ValidationIssue]:
    seen = Counter((e.category, e.issue_ref) for e in log.entries)
    return [
        ValidationIssue(
            kind=DUPLICATE_ENTRY,
            message=f"#{ref} listed {count} times under {category.section_title}",
            details={"issue_ref": ref, "category": category.value},
        )
        for (category, ref), count in seen.items()
        if count > 1
    ]


def validate(log: TriageLog) -> list[ValidationIssue]:
    """Run every check and return the findings in a stable order.

    Never raises and never modifies the log. Each finding is also logged at
    WARNING level.
    """
    issues: list[ValidationIssue] = []
    for issue in (check_counts(log), check_revision_link(log)):
        if issue is not None:
            issues.append(issue)
    issues.extend(check_duplicates(log))

    for issue in issues:
        logger.warning("%s triage log: %s: %s", log.date.isoformat(), issue.kind, issue.message)
    return issues
