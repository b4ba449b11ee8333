"""Triage document parser.

Turns the Markdown text of one weekly triage log into a TriageLog.

Document shape (heading styles vary across the corpus, both forms accepted):

    # 2021-01-05 Triage Log          (or a bare "2021-01-05 Triage Log")

    Triage done by **@handle**.
    Revision range: [<start>..<end>](<url>)

    0 Regressions, 2 Improvements, 2 Mixed

    #### Improvements

    Title of the change [#80539](<issue url>)
    - Moderate improvement in [instruction counts](<url>) (up to -2.4% on `full` builds of `foo-check`)

    #### Nags requiring follow up

    - free text

Parsing is a pure function of the text. Failures raise a ParseError subclass
carrying the 1-based line number where that is meaningful.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from triagelog_core.errors import MalformedHeader, MalformedSummaryLine, UnrecognizedSection
from triagelog_core.models import (
    Category,
    MagnitudeNote,
    RevisionRange,
    SummaryCounts,
    TriageEntry,
    TriageLog,
)

logger = logging.getLogger(__name__)

HASH_LENGTH = 40

_DATE_RE = re.compile(r"^\s*#*\s*(\d{4}-\d{2}-\d{2})\b")
_AUTHOR_RE = re.compile(r"^\s*Triage done by\s+(.+?)\s*\.?\s*$", re.IGNORECASE)
_REVISION_RE = re.compile(r"Revision range:\s*\[([^\]\s]+?)\.\.([^\]\s]+?)\]\(([^)\s]+)\)", re.IGNORECASE)
_HASH_RE = re.compile(rf"^[0-9a-fA-F]{{{HASH_LENGTH}}}$")
_SUMMARY_RE = re.compile(
    r"^\s*(\d+)\s+Regressions?\s*,\s*(\d+)\s+Improvements?\s*,\s*(\d+)\s+Mixed\b",
    re.IGNORECASE,
)
# A line shaped like the summary line but whose counts are not integers.
_SUMMARY_HINT_RE = re.compile(r"^\s*\S+\s+Regressions?\s*,.*\bImprovements?\b.*\bMixed\b", re.IGNORECASE)
_HEADING_RE = re.compile(r"^ {0,3}#{1,6}\s+(.*?)\s*#*\s*$")
_BULLET_RE = re.compile(r"^(\s*)[-*+](?:\s+|$)(.*)$")
_ISSUE_LINK_RE = re.compile(r"\[#(\d+)\]\(([^)\s]+)\)")

_PERCENT_RE = re.compile(r"([+\-\u2212]?\d+(?:\.\d+)?)\s*%")
_BUILD_RE = re.compile(r"\bon\s+`([^`]+)`\s+builds?\b", re.IGNORECASE)
_BENCHMARK_RE = re.compile(r"\bbuilds?\s+of\s+`([^`]+)`", re.IGNORECASE)
_COMPARE_URL_RE = re.compile(r"\((https?://[^)\s]*compare\.html\?[^)\s]*)\)")

_NAGS = "nags"

_SECTIONS: dict[str, Category | str] = {
    "regression": Category.REGRESSION,
    "regressions": Category.REGRESSION,
    "improvement": Category.IMPROVEMENT,
    "improvements": Category.IMPROVEMENT,
    "mixed": Category.MIXED,
    "nags requiring follow up": _NAGS,
}


@dataclass
class _PendingEntry:
    issue_ref: int
    issue_url: str
    title: str
    category: Category
    notes: list[str] = field(default_factory=list)
    narrative: list[str] = field(default_factory=list)

    def build(self) -> TriageEntry:
        return TriageEntry(
            issue_ref=self.issue_ref,
            category=self.category,
            magnitude_notes=tuple(parse_magnitude_note(n) for n in self.notes),
            narrative="\n".join(self.narrative),
            title=self.title,
            issue_url=self.issue_url,
        )


def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip())


def _section_for(title: str) -> Category | str | None:
    key = _collapse(title.rstrip(":").replace("-", " ")).lower()
    return _SECTIONS.get(key)


def parse_magnitude_note(text: str) -> MagnitudeNote:
    """Extract the percentage, build label and benchmark from one observation."""
    percent = None
    m = _PERCENT_RE.search(text)
    if m:
        percent = float(m.group(1).replace("\u2212", "-"))
    build = _BUILD_RE.search(text)
    benchmark = _BENCHMARK_RE.search(text)
    compare = _COMPARE_URL_RE.search(text)
    return MagnitudeNote(
        text=text,
        percent=percent,
        build=build.group(1) if build else None,
        benchmark=benchmark.group(1) if benchmark else None,
        comparison_url=compare.group(1) if compare else None,
    )


def _clean_author(raw: str) -> str:
    author = raw.replace("*", "").strip()
    if author.startswith("@"):
        author = author[1:]
    return author.strip()


def _parse_header(lines: list[str], summary_index: int | None):
    """Locate the date, author and revision lines in the header area.

    Returns (date, author, revision_range, link, overview_lines).
    """
    end = summary_index if summary_index is not None else len(lines)
    log_date: date | None = None
    author: str | None = None
    revision: tuple[str, str, str] | None = None
    overview: list[str] = []

    for i, line in enumerate(lines[:end]):
        lineno = i + 1
        if not line.strip():
            continue

        if log_date is None:
            m = _DATE_RE.match(line)
            if m:
                try:
                    log_date = date.fromisoformat(m.group(1))
                except ValueError:
                    raise MalformedHeader(f"Invalid date {m.group(1)!r} in title", lineno)
                continue

        if author is None:
            m = _AUTHOR_RE.match(line)
            if m:
                author = _clean_author(m.group(1))
                if not author:
                    raise MalformedHeader("Author attribution line names nobody", lineno)
                continue

        if revision is None:
            m = _REVISION_RE.search(line)
            if m:
                start, end_hash, link = m.groups()
                for h in (start, end_hash):
                    if not _HASH_RE.match(h):
                        raise MalformedHeader(
                            f"Revision {h!r} is not a {HASH_LENGTH}-character hex commit hash", lineno
                        )
                revision = (start, end_hash, link)
                continue

        heading = _HEADING_RE.match(line)
        overview.append(heading.group(1) if heading else line.strip())

    if log_date is None:
        raise MalformedHeader("No date header found")
    if author is None:
        raise MalformedHeader("No 'Triage done by' attribution line found")
    if revision is None:
        raise MalformedHeader("No 'Revision range' link found")

    start, end_hash, link = revision
    return log_date, author, RevisionRange(start=start, end=end_hash), link, overview


def _find_summary(lines: list[str]) -> tuple[int, SummaryCounts] | None:
    for i, line in enumerate(lines):
        m = _SUMMARY_RE.match(line)
        if m:
            regressions, improvements, mixed = (int(g) for g in m.groups())
            return i, SummaryCounts(regressions, improvements, mixed)
    return None


def _raise_missing_summary(lines: list[str]) -> None:
    for i, line in enumerate(lines):
        if _SUMMARY_HINT_RE.match(line):
            raise MalformedSummaryLine(f"Summary counts are not integers: {line.strip()!r}", i + 1)
    raise MalformedSummaryLine("No 'N Regressions, M Improvements, K Mixed' summary line found")


def entry_link(text: str) -> re.Match | None:
    """Return the issue link that makes ``text`` an entry header, if any.

    A header either starts with the issue link or ends with it
    ("Title of the change [#80539](url)").
    """
    m = _ISSUE_LINK_RE.match(text)
    if m:
        return m
    last = None
    for last in _ISSUE_LINK_RE.finditer(text):
        pass
    if last is not None and not text[last.end() :].strip(" .:"):
        return last
    return None


def parse(text: str) -> TriageLog:
    """Parse one triage document.

    Raises:
        MalformedHeader: no parseable date, author or revision-range line.
        MalformedSummaryLine: summary counts line absent or non-numeric.
        UnrecognizedSection: a section heading outside the known set.
    """
    lines = text.lstrip("\ufeff").splitlines()

    # Header problems are reported before summary problems: a document
    # missing both is a header failure.
    summary = _find_summary(lines)
    log_date, author, revision, comparison, overview = _parse_header(lines, summary[0] if summary else None)
    if summary is None:
        _raise_missing_summary(lines)
    summary_index, counts = summary

    entries: list[TriageEntry] = []
    nags: list[str] = []
    section: Category | str | None = None
    pending: _PendingEntry | None = None
    in_note = False  # last non-blank line was a note or a continuation of one
    in_nag = False

    def flush() -> None:
        nonlocal pending
        if pending is not None:
            entries.append(pending.build())
            pending = None

    for i in range(summary_index + 1, len(lines)):
        lineno = i + 1
        line = lines[i].rstrip()

        if not line.strip():
            in_note = False
            in_nag = False
            continue

        heading = _HEADING_RE.match(line)
        if heading:
            flush()
            title = heading.group(1)
            section = _section_for(title)
            if section is None:
                raise UnrecognizedSection(f"Unrecognized section {title!r}", lineno)
            in_note = in_nag = False
            continue

        if section is None:
            overview.append(line.strip())
            continue

        indent = _indent(line)
        bullet = _BULLET_RE.match(line)

        if section == _NAGS:
            if bullet and indent == 0:
                nags.append(_collapse(bullet.group(2)))
                in_nag = True
            elif nags and (in_nag or indent > 0):
                extra = bullet.group(2) if bullet else line
                nags[-1] = _collapse(f"{nags[-1]} {extra}")
                in_nag = True
            else:
                nags.append(_collapse(line))
                in_nag = True
            continue

        if indent == 0:
            header_text = bullet.group(2) if bullet else line
            issue = _ISSUE_LINK_RE.match(header_text) if bullet else entry_link(header_text)
            if issue:
                flush()
                pending = _PendingEntry(
                    issue_ref=int(issue.group(1)),
                    issue_url=issue.group(2),
                    title=_collapse(header_text[: issue.start()] + " " + header_text[issue.end() :]),
                    category=section,
                )
                in_note = False
                continue

        if pending is None:
            logger.debug("Ignoring line %d outside any entry: %s", lineno, line.strip())
            continue

        if bullet:
            pending.notes.append(_collapse(bullet.group(2)))
            in_note = True
        elif in_note and pending.notes:
            pending.notes[-1] = _collapse(f"{pending.notes[-1]} {line}")
        else:
            pending.narrative.append(line.strip())

    flush()

    return TriageLog(
        date=log_date,
        author=author,
        revision_range=revision,
        comparison_link=comparison,
        summary_counts=counts,
        entries=tuple(entries),
        nags=tuple(nags),
        overview="\n".join(overview),
    )


def parse_file(path: str | Path) -> TriageLog:
    """Read a document as UTF-8 and parse it."""
    return parse(Path(path).read_text(encoding="utf-8"))
