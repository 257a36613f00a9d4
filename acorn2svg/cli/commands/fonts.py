"""Fonts command - list the fonts an Acorn file uses."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from acorn2svg.config import Config
from acorn2svg.converter import Acorn2SVGConverter
from acorn2svg.exceptions import Acorn2SVGError
from acorn2svg.store import SQLiteStore

console = Console()


@click.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def fonts(ctx: click.Context, input_file: Path) -> None:
    """List fonts used by text layers and their SVG properties.

    INPUT_FILE: The .acorn file to inspect.
    """
    config = ctx.obj.get("config", Config.load())
    converter = Acorn2SVGConverter(config=config)

    try:
        with SQLiteStore(input_file) as store:
            cache = converter.collect_fonts(store)
    except (Acorn2SVGError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if not len(cache):
        console.print("[yellow]No fonts found[/yellow]")
        return

    table = Table(title=f"Fonts in {input_file.name}")
    table.add_column("Name", style="cyan")
    table.add_column("Family")
    table.add_column("Style")
    table.add_column("Weight")
    table.add_column("Stretch")
    table.add_column("font-family", style="green")

    for name, font, attrs in cache.items():
        table.add_row(
            name,
            font.family,
            attrs.style or "normal",
            attrs.weight,
            attrs.stretch or "normal",
            attrs.family,
        )

    console.print(table)
