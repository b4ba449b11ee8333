"""stats command — aggregate patterns across triage history."""

from __future__ import annotations

from collections import Counter

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()


@click.command("stats")
@click.option("--top", default=10, show_default=True, help="Number of top entries to show per table.")
@click.pass_context
def stats_cmd(ctx, top: int):
    """Show aggregated statistics across stored triage logs.

    Reports stated and listed totals per category, who triaged most often,
    which benchmarks are cited most, and how many logs have summary counts
    that disagree with their entries.
    """
    from triagelog_store.noop import NoOpStore

    store = ctx.obj.get("store") if ctx.obj else None
    if store is None or isinstance(store, NoOpStore):
        raise click.UsageError(
            "No store configured. Add 'store: sqlite' or 'store: json' to .triagelog.yml, "
            "or run `triagelog init` to set one up."
        )

    records = store.list_logs()
    if not records:
        console.print("[yellow]No triage logs found.[/yellow]")
        return

    stated = [sum(r.stated[i] for r in records) for i in range(3)]
    listed = [sum(r.tallied[i] for r in records) for i in range(3)]
    mismatched = sum(1 for r in records if r.stated != r.tallied)
    author_counter: Counter[str] = Counter(r.author for r in records)
    benchmark_counter: Counter[str] = Counter()

    for record in records:
        for entry in record.entries:
            for note in entry.notes:
                if note.benchmark:
                    benchmark_counter[note.benchmark] += 1

    # --- Summary ---
    console.print(f"\n[bold]Triage stats ({records[0].date} to {records[-1].date})[/bold]")
    console.print(f"  Total logs:      {len(records)}")
    console.print(f"  Count mismatches: {mismatched}")
    console.print(f"  Total nags:      {sum(len(r.nags) for r in records)}")

    # --- Category breakdown ---
    cat_table = Table(title="Category Breakdown", show_header=True)
    cat_table.add_column("Category", style="bold")
    cat_table.add_column("Stated", justify="right")
    cat_table.add_column("Listed", justify="right")
    _cat_style = {"Regressions": "red", "Improvements": "green", "Mixed": "yellow"}
    for i, name in enumerate(("Regressions", "Improvements", "Mixed")):
        style = _cat_style[name]
        cat_table.add_row(f"[{style}]{name}[/{style}]", str(stated[i]), str(listed[i]))
    console.print(cat_table)

    # --- Triagers ---
    author_table = Table(title=f"Top {top} Triagers", show_header=True)
    author_table.add_column("Triager")
    author_table.add_column("Logs", justify="right")
    for author, count in author_counter.most_common(top):
        author_table.add_row(escape(author), str(count))
    console.print(author_table)

    # --- Most cited benchmarks ---
    if benchmark_counter:
        bench_table = Table(title=f"Top {top} Most Cited Benchmarks", show_header=True)
        bench_table.add_column("Benchmark")
        bench_table.add_column("Notes", justify="right")
        for benchmark, count in benchmark_counter.most_common(top):
            bench_table.add_row(escape(benchmark), str(count))
        console.print(bench_table)
