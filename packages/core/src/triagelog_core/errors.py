"""Parse failures.

Every failure is recoverable at the batch level: the batch driver catches
ParseError, records the reason against the document and moves on.
"""

from __future__ import annotations


class ParseError(Exception):
    """Base class for a triage document that could not be parsed."""

    def __init__(self, message: str, line_number: int | None = None):
        self.message = message
        self.line_number = line_number
        location = f" (line {line_number})" if line_number is not None else ""
        super().__init__(f"{message}{location}")


class MalformedHeader(ParseError):
    """No parseable date, author or revision-range line."""


class MalformedSummaryLine(ParseError):
    """Summary-counts line absent or its counts are not integers."""


class UnrecognizedSection(ParseError):
    """A section heading outside the known set."""
