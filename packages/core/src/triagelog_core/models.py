"""Triage log data model.

A TriageLog is built once by the parser and never mutated afterwards: every
container is a tuple and every dataclass is frozen, so two parses of the same
document compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class Category(Enum):
    """Net effect of a single change on benchmark instruction counts."""

    REGRESSION = "Regression"
    IMPROVEMENT = "Improvement"
    MIXED = "Mixed"

    @property
    def section_title(self) -> str:
        """Heading used for this category in a triage document."""
        return "Mixed" if self is Category.MIXED else f"{self.value}s"


@dataclass(frozen=True)
class RevisionRange:
    start: str
    end: str


@dataclass(frozen=True)
class SummaryCounts:
    regressions: int = 0
    improvements: int = 0
    mixed: int = 0

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.regressions, self.improvements, self.mixed)

    def get(self, category: Category) -> int:
        if category is Category.REGRESSION:
            return self.regressions
        if category is Category.IMPROVEMENT:
            return self.improvements
        return self.mixed


@dataclass(frozen=True)
class MagnitudeNote:
    """One bulleted observation under an entry.

    ``percent`` is the first percentage in the text, sign included when the
    author wrote one. ``build`` and ``benchmark`` come from the usual
    "on `full` builds of `foo-check`" phrasing.
    """

    text: str
    percent: float | None = None
    build: str | None = None
    benchmark: str | None = None
    comparison_url: str | None = None


@dataclass(frozen=True)
class TriageEntry:
    issue_ref: int
    category: Category
    magnitude_notes: tuple[MagnitudeNote, ...] = ()
    narrative: str = ""
    title: str = ""
    issue_url: str = ""


@dataclass(frozen=True)
class TriageLog:
    date: date
    author: str
    revision_range: RevisionRange
    comparison_link: str
    summary_counts: SummaryCounts
    entries: tuple[TriageEntry, ...] = ()
    nags: tuple[str, ...] = ()
    overview: str = ""

    def entries_for(self, category: Category) -> tuple[TriageEntry, ...]:
        return tuple(e for e in self.entries if e.category is category)

    def tally(self) -> SummaryCounts:
        """Counts recomputed from the listed entries."""
        return SummaryCounts(
            regressions=len(self.entries_for(Category.REGRESSION)),
            improvements=len(self.entries_for(Category.IMPROVEMENT)),
            mixed=len(self.entries_for(Category.MIXED)),
        )


@dataclass(frozen=True)
class ValidationIssue:
    """A non-fatal data-quality finding about a parsed log."""

    kind: str  # "CountMismatch" | "RevisionLinkMismatch" | "DuplicateEntry"
    message: str
    details: dict = field(default_factory=dict, compare=False, hash=False)
