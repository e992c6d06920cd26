"""Command-line interface for strokegraph.

This module provides the CLI using Typer with rich output for
readable reports of segments, loops and curve measurements.
"""

from strokegraph.cli.app import cli, main

__all__ = ["cli", "main"]
