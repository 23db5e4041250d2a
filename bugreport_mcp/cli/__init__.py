"""Command-line entry points."""

from bugreport_mcp.cli.main import cli, main

__all__ = ["cli", "main"]
