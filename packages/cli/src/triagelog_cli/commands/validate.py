"""validate command — parse and check documents, failing the run on problems."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from triagelog_cli.commands.parse import print_outcomes
from triagelog_core.batch import discover_documents, parse_documents

console = Console()


@click.command("validate")
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option("--strict", is_flag=True, help="Also fail when any document raises a warning.")
@click.pass_context
def validate_cmd(ctx, paths: tuple[Path, ...], strict: bool):
    """Check triage documents for parse failures and count mismatches.

    Exits with status 1 when a document cannot be parsed, or with --strict
    when any warning (e.g. CountMismatch) was raised. Suitable for CI.
    """
    config = (ctx.obj or {}).get("config", {})
    docs = discover_documents(paths, pattern=config.get("docs_pattern", "*.md"))
    if not docs:
        raise click.UsageError("No triage documents found.")

    outcomes = parse_documents(docs, max_workers=config.get("max_workers", 1))
    print_outcomes(outcomes, title="Validation")

    failed = sum(1 for o in outcomes if not o.ok)
    warned = sum(1 for o in outcomes if o.issues)
    console.print(f"\n{len(outcomes)} document(s): {failed} failed, {warned} with warnings.")

    if failed or (strict and warned):
        ctx.exit(1)
