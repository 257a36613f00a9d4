"""Entry point of the ``acorn2svg`` command."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from acorn2svg import __version__
from acorn2svg.cli.commands import batch, convert, fonts, tree
from acorn2svg.config import LOG_LEVELS, Config
from acorn2svg.exceptions import ConfigError
from acorn2svg.log import setup_logging

console = Console(stderr=True)


@click.group()
@click.version_option(__version__, prog_name="acorn2svg")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (default: from config, else WARNING)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML configuration file",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, config_path: Path | None) -> None:
    """Convert Acorn images to SVG."""
    ctx.ensure_object(dict)
    try:
        config = Config.load(config_path)
    except ConfigError as e:
        console.print(f"[red]Config error:[/red] {e}")
        raise SystemExit(1)

    level = (log_level or config.log_level).upper()
    setup_logging(level)
    ctx.obj["config"] = config
    ctx.obj["log_level"] = level


cli.add_command(convert)
cli.add_command(batch)
cli.add_command(tree)
cli.add_command(fonts)


if __name__ == "__main__":
    cli()
