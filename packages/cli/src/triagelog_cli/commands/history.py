"""history command — display stored triage logs."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()


@click.command("history")
@click.option("--since", default=None, help="Earliest log date to show (YYYY-MM-DD).")
@click.option("--until", default=None, help="Latest log date to show (YYYY-MM-DD).")
@click.option(
    "--limit",
    default=20,
    show_default=True,
    type=click.IntRange(min=1),
    help="Maximum number of logs to show.",
)
@click.pass_context
def history_cmd(ctx, since: str | None, until: str | None, limit: int):
    """Show stored triage logs, most recent first.

    Reads from the configured store (SQLite or JSON). Run `triagelog init` to
    set up a store if you haven't already.
    """
    from triagelog_store.noop import NoOpStore

    store = ctx.obj.get("store") if ctx.obj else None
    if store is None or isinstance(store, NoOpStore):
        raise click.UsageError(
            "No store configured. Add 'store: sqlite' or 'store: json' to .triagelog.yml, "
            "or run `triagelog init` to set one up."
        )

    records = store.list_logs(since=since, until=until)
    if not records:
        console.print("[yellow]No triage logs found.[/yellow]")
        return

    # Show most recent first, capped at --limit.
    records = list(reversed(records))[:limit]

    table = Table(title="Triage History", show_header=True, header_style="bold cyan")
    table.add_column("Date", style="bold", width=10)
    table.add_column("Triager", max_width=20)
    table.add_column("Range", width=17)
    table.add_column("R", justify="right", width=3)
    table.add_column("I", justify="right", width=3)
    table.add_column("M", justify="right", width=3)
    table.add_column("Entries", justify="right", width=7)

    for r in records:
        # Flag logs whose stated counts disagree with the entries they list.
        entries = str(len(r.entries))
        if r.tallied != r.stated:
            entries = f"[yellow]{entries}*[/yellow]"
        table.add_row(
            r.date,
            escape(r.author),
            f"{r.start_rev[:7]}..{r.end_rev[:7]}",
            str(r.regressions),
            str(r.improvements),
            str(r.mixed),
            entries,
        )

    console.print(table)
