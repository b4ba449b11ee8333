"""parse command — batch-parse triage documents and store the results."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from triagelog_core.batch import DocumentOutcome, discover_documents, parse_documents
from triagelog_core.models import TriageLog
from triagelog_store.models import EntryRecord, LogRecord, NoteRecord

console = Console()


def _log_to_record(log: TriageLog, source_path: str = "") -> LogRecord:
    """Map a TriageLog returned by the parser to a LogRecord for the store.

    The CLI layer owns this mapping — triagelog_core has no store knowledge
    and triagelog_store has no core knowledge. The CLI bridges the two.
    """
    counts = log.summary_counts
    return LogRecord(
        date=log.date.isoformat(),
        author=log.author,
        start_rev=log.revision_range.start,
        end_rev=log.revision_range.end,
        comparison_link=log.comparison_link,
        regressions=counts.regressions,
        improvements=counts.improvements,
        mixed=counts.mixed,
        entries=[
            EntryRecord(
                issue_ref=e.issue_ref,
                category=e.category.value,
                title=e.title,
                issue_url=e.issue_url,
                narrative=e.narrative,
                notes=[
                    NoteRecord(
                        text=n.text,
                        percent=n.percent,
                        build=n.build,
                        benchmark=n.benchmark,
                        comparison_url=n.comparison_url,
                    )
                    for n in e.magnitude_notes
                ],
            )
            for e in log.entries
        ],
        nags=list(log.nags),
        overview=log.overview,
        source_path=source_path,
        parsed_at=datetime.now(timezone.utc).isoformat(),
    )


def _fmt_counts(counts: tuple[int, int, int]) -> str:
    return "/".join(str(c) for c in counts)


def print_outcomes(outcomes: list[DocumentOutcome], title: str) -> None:
    """Print one table row per document, then every failure and warning in full."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Document")
    table.add_column("Status", width=8)
    table.add_column("Date", width=10)
    table.add_column("Stated R/I/M", justify="right")
    table.add_column("Listed R/I/M", justify="right")
    table.add_column("Warnings", justify="right")

    for o in outcomes:
        if o.ok:
            status = "[green]ok[/green]" if not o.issues else "[yellow]warn[/yellow]"
            table.add_row(
                escape(o.path.name),
                status,
                o.log.date.isoformat(),
                _fmt_counts(o.log.summary_counts.as_tuple()),
                _fmt_counts(o.log.tally().as_tuple()),
                str(len(o.issues)),
            )
        else:
            table.add_row(escape(o.path.name), "[red]failed[/red]", "", "", "", "")
    console.print(table)

    for o in outcomes:
        if not o.ok:
            console.print(f"[red]✗[/red] {escape(str(o.path))}: {escape(o.reason)}", soft_wrap=True)
        for issue in o.issues:
            console.print(
                f"[yellow]![/yellow] {escape(str(o.path))}: {issue.kind}: {escape(issue.message)}",
                soft_wrap=True,
            )


@click.command("parse")
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option("--workers", type=int, default=None, help="Parallel parse workers. Overrides config file.")
@click.option(
    "--json-out",
    "json_out",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write one normalized record per parsed document to this JSON file.",
)
@click.option("--no-store", is_flag=True, help="Do not persist parsed logs to the configured store.")
@click.pass_context
def parse_cmd(ctx, paths: tuple[Path, ...], workers: int | None, json_out: Path | None, no_store: bool):
    """Parse triage documents (files or directories).

    Every document is reported individually: a document that fails to parse
    is listed with its reason and the rest of the batch still runs.
    """
    config = (ctx.obj or {}).get("config", {})
    docs = discover_documents(paths, pattern=config.get("docs_pattern", "*.md"))
    if not docs:
        console.print("[yellow]No triage documents found.[/yellow]")
        return

    max_workers = workers if workers is not None else config.get("max_workers", 1)
    outcomes = parse_documents(docs, max_workers=max_workers)
    print_outcomes(outcomes, title="Triage documents")

    records = [_log_to_record(o.log, str(o.path)) for o in outcomes if o.ok]

    stored = 0
    store = (ctx.obj or {}).get("store")
    if store is not None and not no_store:
        stored = sum(1 for r in records if store.save(r))

    if json_out is not None:
        json_out.write_text(json.dumps([r.to_dict() for r in records], indent=2), encoding="utf-8")
        console.print(f"[green]Wrote {len(records)} record(s) to {escape(str(json_out))}[/green]")

    failed = len(outcomes) - len(records)
    console.print(
        f"\n[bold]{len(records)}[/bold] of {len(outcomes)} document(s) parsed"
        + (f", [red]{failed} failed[/red]" if failed else "")
        + f", {stored} stored."
    )
