"""Batch command - convert multiple Acorn files."""

from __future__ import annotations

import concurrent.futures
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.progress import Progress

from acorn2svg.config import Config
from acorn2svg.converter import Acorn2SVGConverter, ConversionResult

console = Console()


@click.command()
@click.argument("inputs", nargs=-1, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output-dir", "-o", type=click.Path(file_okay=False, path_type=Path), required=True, help="Output directory")
@click.option("--batch-file", type=click.Path(exists=True, path_type=Path), help="File containing list of inputs")
@click.option("-p", "--precision", type=click.IntRange(1, 10), default=None, help="Decimal places for coordinates")
@click.option("--suffix", default="", help="Output filename suffix")
@click.option("-j", "--jobs", type=click.IntRange(1, None), default=4, help="Parallel jobs")
@click.option("--continue-on-error", is_flag=True, help="Continue processing on errors")
@click.pass_context
def batch(
    ctx: click.Context,
    inputs: tuple[Path, ...],
    output_dir: Path,
    batch_file: Optional[Path],
    precision: Optional[int],
    suffix: str,
    jobs: int,
    continue_on_error: bool,
) -> None:
    """Convert multiple Acorn files to SVG.

    INPUTS: Paths to .acorn files (supports glob patterns via shell).
    """
    config = ctx.obj.get("config", Config.load()).merged(precision=precision)
    log_level = ctx.obj.get("log_level", "WARNING")

    all_inputs: list[Path] = list(inputs)

    if batch_file:
        with open(batch_file) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#"):
                    all_inputs.append(Path(line))

    if not all_inputs:
        console.print("[red]Error:[/red] No input files specified")
        raise SystemExit(1)

    output_dir.mkdir(parents=True, exist_ok=True)

    # One converter; every file gets its own generation context
    converter = Acorn2SVGConverter(config=config, log_level=log_level)

    results: list[ConversionResult] = []
    success_count = 0
    error_count = 0

    def process_file(input_path: Path) -> ConversionResult:
        output_path = output_dir / f"{input_path.stem}{suffix}.svg"
        return converter.convert_file(input_path, output_path)

    with Progress(console=console) as progress:
        task = progress.add_task("[green]Converting...", total=len(all_inputs))

        with concurrent.futures.ThreadPoolExecutor(max_workers=jobs) as executor:
            future_to_path = {executor.submit(process_file, p): p for p in all_inputs}

            for future in concurrent.futures.as_completed(future_to_path):
                input_path = future_to_path[future]
                try:
                    result = future.result()
                except Exception as e:
                    result = ConversionResult(success=False, input_path=input_path, errors=[f"Unexpected error: {e}"])
                finally:
                    progress.advance(task)
                results.append(result)
                if result.success:
                    success_count += 1
                    continue
                error_count += 1
                if not continue_on_error:
                    console.print(f"[red]Error in {input_path}:[/red] {'; '.join(result.errors)}")
                    for pending in future_to_path:
                        pending.cancel()
                    raise SystemExit(1)

    warning_count = sum(len(r.warnings) for r in results)

    console.print()
    console.print("[bold]Batch complete:[/bold]")
    console.print(f"  [green]Success:[/green] {success_count}")
    console.print(f"  [red]Failed:[/red] {error_count}")
    if warning_count:
        console.print(f"  [yellow]Warnings:[/yellow] {warning_count}")
    console.print(f"  [blue]Output:[/blue] {output_dir}")

    for result in results:
        if not result.success:
            console.print(f"  [red]{result.input_path}:[/red] {'; '.join(result.errors)}")
