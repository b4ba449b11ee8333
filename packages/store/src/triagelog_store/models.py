"""Triage log history data models.

Decoupled from triagelog_core so the store layer can be used independently
and triagelog_core has no knowledge of persistence concerns.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field


@dataclass
class NoteRecord:
    """A single magnitude observation under an entry."""

    text: str
    percent: float | None = None
    build: str | None = None
    benchmark: str | None = None
    comparison_url: str | None = None


@dataclass
class EntryRecord:
    """One regression/improvement/mixed entry of a stored log."""

    issue_ref: int
    category: str  # "Regression" | "Improvement" | "Mixed"
    title: str = ""
    issue_url: str = ""
    narrative: str = ""
    notes: list[NoteRecord] = field(default_factory=list)


@dataclass
class LogRecord:
    """A parsed triage log persisted to the store.

    Created by the CLI layer from a TriageLog. The CLI maps
    TriageLog → LogRecord before calling store.save().
    """

    date: str  # ISO-8601 date, the record key
    author: str
    start_rev: str
    end_rev: str
    comparison_link: str
    regressions: int
    improvements: int
    mixed: int
    entries: list[EntryRecord] = field(default_factory=list)
    nags: list[str] = field(default_factory=list)
    overview: str = ""
    source_path: str = ""
    parsed_at: str = ""  # ISO-8601 UTC timestamp

    @property
    def tallied(self) -> tuple[int, int, int]:
        """Counts recomputed from the stored entries."""
        by_category = [e.category for e in self.entries]
        return (
            by_category.count("Regression"),
            by_category.count("Improvement"),
            by_category.count("Mixed"),
        )

    @property
    def stated(self) -> tuple[int, int, int]:
        return (self.regressions, self.improvements, self.mixed)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> LogRecord:
        return cls(
            date=d.get("date", ""),
            author=d.get("author", ""),
            start_rev=d.get("start_rev", ""),
            end_rev=d.get("end_rev", ""),
            comparison_link=d.get("comparison_link", ""),
            regressions=d.get("regressions", 0),
            improvements=d.get("improvements", 0),
            mixed=d.get("mixed", 0),
            entries=[entry_from_dict(e) for e in d.get("entries", [])],
            nags=list(d.get("nags", [])),
            overview=d.get("overview", ""),
            source_path=d.get("source_path", ""),
            parsed_at=d.get("parsed_at", ""),
        )


def entry_from_dict(d: dict) -> EntryRecord:
    return EntryRecord(
        issue_ref=d.get("issue_ref", 0),
        category=d.get("category", ""),
        title=d.get("title", ""),
        issue_url=d.get("issue_url", ""),
        narrative=d.get("narrative", ""),
        notes=[
            NoteRecord(
                text=n.get("text", ""),
                percent=n.get("percent"),
                build=n.get("build"),
                benchmark=n.get("benchmark"),
                comparison_url=n.get("comparison_url"),
            )
            for n in d.get("notes", [])
        ],
    )
