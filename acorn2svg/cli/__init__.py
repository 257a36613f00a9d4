"""Command-line interface for acorn2svg."""
