"""Convert command - convert a single Acorn file."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from acorn2svg.config import Config
from acorn2svg.converter import Acorn2SVGConverter

# The SVG itself may go to stdout
console = Console(stderr=True)


@click.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output_file", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option("-p", "--precision", type=click.IntRange(1, 10), default=None, help="Decimal places for coordinates")
@click.option("--embed-images", is_flag=True, help="Embed raster layers as data URIs")
@click.option(
    "--image-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for raster layer PNGs (default: <output>_images)",
)
@click.option("--no-prune", is_flag=True, help="Keep redundant single-child groups")
@click.option("--no-font-faces", is_flag=True, help="Do not emit <font-face> definitions")
@click.option("--layer-ids", is_flag=True, help="Give layer groups ids from their names")
@click.pass_context
def convert(
    ctx: click.Context,
    input_file: Path,
    output_file: Optional[Path],
    precision: Optional[int],
    embed_images: bool,
    image_dir: Optional[Path],
    no_prune: bool,
    no_font_faces: bool,
    layer_ids: bool,
) -> None:
    """Convert an Acorn image to SVG.

    INPUT_FILE: The .acorn file to convert.
    OUTPUT_FILE: Destination SVG (default: stdout, with images embedded).
    """
    config = ctx.obj.get("config", Config.load())
    log_level = ctx.obj.get("log_level", "WARNING")

    config = config.merged(
        precision=precision,
        embed_images=True if embed_images else None,
        image_dir=image_dir,
        prune_groups=False if no_prune else None,
        font_faces=False if no_font_faces else None,
        layer_ids=True if layer_ids else None,
    )

    converter = Acorn2SVGConverter(config=config, log_level=log_level)
    result = converter.convert_file(input_file, output_file)

    if not result.success:
        for error in result.errors:
            console.print(f"[red]Error:[/red] {error}")
        raise SystemExit(1)

    if output_file is None:
        click.echo(result.svg, nl=False)
        return

    console.print(f"[green]Converted:[/green] {input_file} -> {output_file}")
    console.print(
        f"  layers: {result.layer_count}, images: {result.image_count}, "
        f"shadows: {result.shadow_count}, fonts: {result.font_count}"
    )
    if result.warnings:
        console.print(f"  [yellow]Warnings:[/yellow] {len(result.warnings)}")
