"""Tree command - show the layer hierarchy of an Acorn file."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.tree import Tree

from acorn2svg.exceptions import Acorn2SVGError
from acorn2svg.layers import build_layer_tree, format_tree
from acorn2svg.model import LayerNode
from acorn2svg.store import SQLiteStore

console = Console()


def _label(layer: LayerNode) -> str:
    label = f"[bold]{layer.name or '?'}[/bold] [dim]{layer.uti}[/dim]"
    if not layer.visible:
        label += " [yellow](hidden)[/yellow]"
    return label


def _add_children(branch: Tree, layer: LayerNode) -> None:
    for child in layer.children:
        _add_children(branch.add(_label(child)), child)


@click.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--plain", is_flag=True, help="Print indented text instead of a tree")
def tree(input_file: Path, plain: bool) -> None:
    """Show the layer hierarchy of an Acorn image.

    INPUT_FILE: The .acorn file to inspect.
    """
    try:
        with SQLiteStore(input_file) as store:
            size = store.document_size()
            root = build_layer_tree(store.layers())
    except (Acorn2SVGError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if plain:
        click.echo(format_tree(root))
        return

    branch = Tree(f"[bold]{input_file.name}[/bold] ({size.width:g} x {size.height:g})")
    _add_children(branch, root)
    console.print(branch)
