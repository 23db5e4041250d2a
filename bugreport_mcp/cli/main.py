"""
AOSP Bugreport MCP CLI.

Run `bugreport-mcp serve` from the agent host to start the stdio server.
stdout belongs to the protocol; everything human-readable goes to stderr.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from bugreport_mcp import __version__
from bugreport_mcp.server.registry import TOOLSETS, build_registry
from bugreport_mcp.server.stdio import StdioServer
from bugreport_mcp.validation.config import ConfigError, ServerConfig, load_config

# Diagnostics only - never stdout
err_console = Console(stderr=True)

logger = logging.getLogger("bugreport_mcp")


def configure_logging(level: str) -> None:
    """Send all package logging to stderr through rich."""
    handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)


def _load(config_path: Optional[Path]) -> ServerConfig:
    try:
        return load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e))


toolset_option = click.option(
    "--toolset",
    "-t",
    "toolsets",
    multiple=True,
    type=click.Choice(TOOLSETS),
    help="Toolset to expose (repeatable). Defaults to all.",
)
config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML config file. Environment variables override it.",
)


@click.group()
@click.version_option(__version__, "--version", "-v", prog_name="bugreport-mcp")
def cli() -> None:
    """
    AOSP Bugreport MCP - GitHub and adb tools over stdio.

    \b
    Examples:
        bugreport-mcp serve                    # All tools
        bugreport-mcp serve -t adb             # adb tools only
        bugreport-mcp tools                    # Show what would be served
    """


@cli.command()
@toolset_option
@config_option
@click.option(
    "--log-level",
    default="info",
    show_default=True,
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    help="Diagnostic log level (stderr).",
)
def serve(toolsets: Tuple[str, ...], config_path: Optional[Path], log_level: str) -> None:
    """Run the MCP server on stdin/stdout until stdin closes."""
    configure_logging(log_level)
    logger.info("Starting server v%s...", __version__)

    config = _load(config_path)
    if not config.has_token:
        logger.warning("GITHUB_TOKEN is not set; GitHub tools will fail until it is configured")

    registry = build_registry(config, toolsets or TOOLSETS)
    server = StdioServer(registry, version=__version__)

    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(130)


@cli.command()
@toolset_option
@config_option
def tools(toolsets: Tuple[str, ...], config_path: Optional[Path]) -> None:
    """List the tools the server would expose."""
    config = _load(config_path)
    registry = build_registry(config, toolsets or TOOLSETS)

    console = Console()
    table = Table(title=f"Tools ({len(registry)})")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for schema in registry.schemas():
        table.add_row(schema["name"], schema["description"])
    console.print(table)
    console.print(f"[dim]Default repository: {config.default_owner}/{config.default_repo}[/dim]")


def main() -> None:
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
