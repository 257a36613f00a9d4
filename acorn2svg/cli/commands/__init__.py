"""CLI commands for acorn2svg."""

from acorn2svg.cli.commands.convert import convert
from acorn2svg.cli.commands.batch import batch
from acorn2svg.cli.commands.tree import tree
from acorn2svg.cli.commands.fonts import fonts

__all__ = ["convert", "batch", "tree", "fonts"]
