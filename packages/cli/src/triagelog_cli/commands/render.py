"""render command — print the canonical Markdown form of one document."""

from __future__ import annotations

from pathlib import Path

import click

from triagelog_core.errors import ParseError
from triagelog_core.parser import parse_file
from triagelog_core.render import render


@click.command("render")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def render_cmd(path: Path):
    """Re-render a triage document in canonical form.

    Parsing the output again yields the same log as parsing the original.
    """
    try:
        log = parse_file(path)
    except ParseError as e:
        raise click.ClickException(f"{path}: {type(e).__name__}: {e}")
    click.echo(render(log), nl=False)
