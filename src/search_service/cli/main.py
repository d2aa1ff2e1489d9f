"""
Main CLI application for the search service.

Provides a command-line interface for:
- Running browsing actions against one page session
- Showing the effective configuration
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.panel import Panel

from search_service import __version__
from search_service.config import get_default_config_path, load_config, Settings
from search_service.core.exceptions import ConfigurationError
from search_service.utils.logging import setup_logging, get_logger

app = typer.Typer(
    name="search-service",
    help="Search service - browse, read and summarize web pages",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
logger = get_logger(__name__)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]Search Service[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file (defaults to ./config.yaml when present)",
        exists=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging",
    ),
) -> None:
    """
    Search service - browse web pages with one-line actions.

    Use 'search-service --help' for command list.
    """
    try:
        settings = load_config(config_file or get_default_config_path())
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)

    if verbose:
        settings.logging.level = "DEBUG"
    setup_logging(settings.logging)

    ctx.obj = settings


@app.command()
def browse(
    ctx: typer.Context,
    actions: list[str] = typer.Argument(
        ...,
        help="Actions to run in order, e.g. 'open https://example.com' 'text'",
    ),
    headless: bool = typer.Option(
        True,
        "--headless/--no-headless",
        help="Run browser in headless mode",
    ),
) -> None:
    """
    Run browsing actions against one page session.

    Example:
        search-service browse "open https://example.com" "summarize pricing"
    """
    settings: Settings = ctx.obj
    settings.browser.headless = headless

    try:
        asyncio.run(_browse_async(settings, actions))
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        logger.exception("Browse failed")
        raise typer.Exit(1)


async def _browse_async(settings: Settings, actions: list[str]) -> None:
    """Run each action line through one tool and print the results."""
    from search_service.plugin import SearchServicePlugin

    async with SearchServicePlugin(settings) as plugin:
        tool = await plugin.tool_for("cli")

        for line in actions:
            with console.status(f"[cyan]{line}"):
                result = await tool.run(line)

            failed = result.startswith("Error:")
            console.print(Panel(
                result,
                title=line,
                title_align="left",
                border_style="red" if failed else "blue",
            ))


@app.command()
def config(ctx: typer.Context) -> None:
    """
    Show the effective configuration as YAML.

    Defaults, the config file and SEARCH_SERVICE__* environment
    variables are merged in that order.
    """
    settings: Settings = ctx.obj
    config_dict = settings.model_dump(mode="json")

    console.print(Panel(
        "[bold]Current Configuration[/bold]",
        border_style="blue",
    ))
    console.print(yaml.safe_dump(config_dict, default_flow_style=False, sort_keys=False))


if __name__ == "__main__":
    app()
