"""Fault-tolerant batch parsing.

Each document is parsed on its own. A failure is captured in that document's
outcome and the batch moves on; nothing is dropped or corrected silently.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from triagelog_core.errors import ParseError
from triagelog_core.models import TriageLog, ValidationIssue
from triagelog_core.parser import parse_file
from triagelog_core.validate import validate as validate_log

logger = logging.getLogger(__name__)


@dataclass
class DocumentOutcome:
    """Result of parsing one document: either a log or an error, never both."""

    path: Path
    log: TriageLog | None = None
    error: Exception | None = None
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.log is not None

    @property
    def reason(self) -> str:
        if self.error is None:
            return ""
        return f"{type(self.error).__name__}: {self.error}"


def discover_documents(paths: Iterable[str | Path], pattern: str = "*.md") -> list[Path]:
    """Expand directories into the documents they contain.

    Directories are searched recursively for ``pattern``; explicit file paths
    are kept whatever their name. Missing paths are kept too so the batch can
    report them as failures.
    """
    found: set[Path] = set()
    for p in paths:
        path = Path(p)
        if path.is_dir():
            found.update(f for f in path.rglob(pattern) if f.is_file())
        else:
            found.add(path)
    return sorted(found)


def parse_document(path: Path, validate: bool = True) -> DocumentOutcome:
    try:
        log = parse_file(path)
    except (ParseError, OSError, UnicodeDecodeError) as e:
        logger.warning("Could not parse %s: %s: %s", path, type(e).__name__, e)
        return DocumentOutcome(path=path, error=e)

    logger.info("Parsed %s (%s, %d entries)", path, log.date.isoformat(), len(log.entries))
    issues = validate_log(log) if validate else []
    return DocumentOutcome(path=path, log=log, issues=issues)


def parse_documents(
    paths: Iterable[str | Path],
    max_workers: int = 1,
    validate: bool = True,
) -> list[DocumentOutcome]:
    """Parse every document and return one outcome per path, in input order."""
    docs = [Path(p) for p in paths]
    if max_workers <= 1 or len(docs) <= 1:
        return [parse_document(d, validate) for d in docs]

    # Documents share no state; executor.map keeps input order.
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(lambda d: parse_document(d, validate), docs))
