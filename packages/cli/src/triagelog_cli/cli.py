"""CLI entry point for triagelog.

Commands:
  parse     — parse triage documents, report each one and store the results
  validate  — parse and check documents; non-zero exit on failures
  render    — print the canonical Markdown form of one document
  history   — display stored triage logs
  stats     — aggregate categories, triagers and benchmarks across history
  init      — interactive setup of .triagelog.yml
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler

from triagelog_cli.commands.history import history_cmd
from triagelog_cli.commands.init import init_cmd
from triagelog_cli.commands.parse import parse_cmd
from triagelog_cli.commands.render import render_cmd
from triagelog_cli.commands.stats import stats_cmd
from triagelog_cli.commands.validate import validate_cmd

console = Console()

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _build_store(config: dict):
    """Instantiate the configured store from .triagelog.yml settings.

    Store selection hierarchy:
      store: sqlite → SQLiteStore (store_path or .triagelog.db)
      store: json   → JsonStore   (store_path or triagelog_history.json)
      (default)     → NoOpStore   (no persistence)

    This factory lives in cli.py so neither triagelog_core nor triagelog_store
    know about the CLI config format.
    """
    from triagelog_store.noop import NoOpStore

    store_type = config.get("store", "noop")
    store_path = config.get("store_path")

    if store_type == "sqlite":
        from triagelog_store.sqlite import DEFAULT_DB_PATH, SQLiteStore

        return SQLiteStore(db_path=store_path or DEFAULT_DB_PATH)

    if store_type == "json":
        from triagelog_store.jsonfile import DEFAULT_JSON_PATH, JsonStore

        return JsonStore(path=store_path or DEFAULT_JSON_PATH)

    if store_type not in ("noop", None):
        console.print(f"[yellow]Unknown store {store_type!r}. Falling back to no store.[/yellow]")
    return NoOpStore()


def _configure_logging(level: str) -> None:
    if level not in _LOG_LEVELS:
        raise click.UsageError(f"Invalid log level {level!r}. Choose one of: {', '.join(_LOG_LEVELS)}.")
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("triagelog"),
    prog_name="triagelog",
)
@click.option(
    "--config",
    "config_path",
    default=".triagelog.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="TRIAGELOG_CONFIG",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    help="Logging level. Overrides config file and TRIAGELOG_LOG_LEVEL.",
)
@click.pass_context
def main(ctx: click.Context, config_path: str, log_level: str | None):
    """Parse, validate and summarise weekly performance triage logs."""
    from triagelog_core.config import load_config

    ctx.ensure_object(dict)

    try:
        config = load_config(config_path, cli_overrides={"log_level": log_level})
    except (ValueError, yaml.YAMLError) as e:
        raise click.UsageError(f"Invalid configuration in {config_path}: {e}")
    _configure_logging(str(config.get("log_level", "WARNING")).upper())

    store = _build_store(config)
    ctx.obj["store"] = store
    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path
    ctx.call_on_close(store.close)


main.add_command(parse_cmd)
main.add_command(validate_cmd)
main.add_command(render_cmd)
main.add_command(history_cmd)
main.add_command(stats_cmd)
main.add_command(init_cmd)
