"""Canonical Markdown rendering of a parsed triage log.

The output is not byte-identical to the source document. It is the shape the
parser reads back into an equal TriageLog: parse(render(log)) == log.
"""

from __future__ import annotations

from itertools import groupby

from triagelog_core.models import Category, MagnitudeNote, TriageEntry, TriageLog
from triagelog_core.parser import entry_link

NAGS_TITLE = "Nags requiring follow up"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def render_summary_line(log: TriageLog) -> str:
    counts = log.summary_counts
    return (
        f"{_plural(counts.regressions, 'Regression')}, "
        f"{_plural(counts.improvements, 'Improvement')}, "
        f"{counts.mixed} Mixed"
    )


def _render_note(note: MagnitudeNote) -> str:
    # A top-level bullet that opens with an issue link reads back as a new entry.
    link = entry_link(note.text)
    if link is not None and link.start() == 0:
        return f"  - {note.text}"
    return f"- {note.text}"


def _render_entry(entry: TriageEntry) -> list[str]:
    header = f"[#{entry.issue_ref}]({entry.issue_url})"
    if entry.title:
        header += f" {entry.title}"
    lines = [header]
    lines.extend(_render_note(n) for n in entry.magnitude_notes)
    if entry.narrative:
        lines.append("")
        for line in entry.narrative.splitlines():
            # Lines that would read back as an entry header or a heading are indented.
            lines.append(f"    {line}" if entry_link(line) or line.startswith("#") else line)
    return lines


def _sections(log: TriageLog) -> list[tuple[Category, list[TriageEntry]]]:
    """Entries grouped under section headings.

    Logs listed in the usual Regressions/Improvements/Mixed order get all three
    headings. Anything else keeps its original section order so the entry
    sequence survives a re-parse.
    """
    canonical = tuple(e for c in Category for e in log.entries_for(c))
    if canonical == log.entries:
        return [(c, list(log.entries_for(c))) for c in Category]
    return [(c, list(group)) for c, group in groupby(log.entries, key=lambda e: e.category)]


def render(log: TriageLog) -> str:
    """Render a TriageLog as canonical Markdown."""
    rev = log.revision_range
    lines = [
        f"# {log.date.isoformat()} Triage Log",
        "",
        f"Triage done by **@{log.author}**.",
        f"Revision range: [{rev.start}..{rev.end}]({log.comparison_link})",
        "",
        render_summary_line(log),
    ]

    if log.overview:
        lines.append("")
        # Prose that starts with "#" would read back as a section heading.
        lines.extend(f"    {line}" if line.startswith("#") else line for line in log.overview.splitlines())

    for category, entries in _sections(log):
        lines.extend(["", f"#### {category.section_title}"])
        for entry in entries:
            lines.append("")
            lines.extend(_render_entry(entry))

    lines.extend(["", f"#### {NAGS_TITLE}"])
    if log.nags:
        lines.append("")
        lines.extend(f"- {nag}" for nag in log.nags)

    return "\n".join(lines) + "\n"
