"""init command — interactive setup of .triagelog.yml."""

from __future__ import annotations

from pathlib import Path

import click
import yaml
from rich.console import Console

console = Console()


@click.command("init")
@click.pass_context
def init_cmd(ctx):
    """Set up triagelog for a directory of triage documents.

    Writes the store backend, its path and the document glob to the
    configuration file, keeping any keys already there.
    """
    config_path = (ctx.obj or {}).get("config_path", ".triagelog.yml")
    console.print("\n[bold cyan]triagelog init[/bold cyan] — setup wizard\n")

    # --- Choose store backend ---
    console.print("Triage history store:")
    console.print("  [bold]none[/bold]    — no persistence (default)")
    console.print("  [bold]sqlite[/bold]  — local SQLite file")
    console.print("  [bold]json[/bold]    — a JSON file you can commit next to the logs")
    store_type = click.prompt(
        "Store backend",
        type=click.Choice(["none", "sqlite", "json"]),
        default="none",
    )

    config: dict = {"store": "noop" if store_type == "none" else store_type}

    if store_type == "sqlite":
        db_path = click.prompt("SQLite database path", default=".triagelog.db")
        if db_path != ".triagelog.db":
            config["store_path"] = db_path
        console.print(f"[green]SQLite store configured at {db_path}[/green]")
    elif store_type == "json":
        json_path = click.prompt("JSON history path", default="triagelog_history.json")
        if json_path != "triagelog_history.json":
            config["store_path"] = json_path
        console.print(f"[green]JSON store configured at {json_path}[/green]")

    config["docs_pattern"] = click.prompt("Glob for triage documents", default="*.md")

    _write_config(Path(config_path), config)
    console.print(f"[green]Created {config_path}[/green]")

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Parse your logs with: [bold]triagelog parse <dir>[/bold]")


def _write_config(path: Path, config: dict) -> None:
    """Write or update the config file, preserving any existing keys."""
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))
