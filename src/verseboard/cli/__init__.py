"""
verseboard CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging

import typer
from rich.console import Console

from verseboard import __version__
from verseboard.cli import init_cmd, report, select_cmd, serve
from verseboard.core.config.env import load_layered_env
from verseboard.utils.project import get_project_dir

# Help panel names for command grouping
PANEL_REPORT = "Report Progress"
PANEL_SETUP = "Set Up"

app = typer.Typer(
    name="verseboard",
    help="Translation progress for Bible translation projects",
    no_args_is_help=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"verseboard version {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    verseboard - audio and text progress per chapter of a source edition.

    Quick Start:
        1. verseboard init                # Create the fact store
        2. verseboard select proj-1       # Remember a project
        3. verseboard progress            # Show progress

    Common Workflows:
        verseboard editions               # List editions
        verseboard activity --limit 5     # Recently changed audio
        verseboard serve                  # Serve the REST API
    """
    # Precedence: OS env > project .env > user .env
    load_layered_env(project_dir=get_project_dir())

    if debug:
        logging.basicConfig(level=logging.DEBUG)

    # Store debug flag in context for subcommands
    ctx.obj = {"debug": debug}


# =============================================================================
# Report Progress
# =============================================================================

app.command(name="progress", rich_help_panel=PANEL_REPORT)(report.progress)
app.command(name="activity", rich_help_panel=PANEL_REPORT)(report.activity)
app.command(name="editions", rich_help_panel=PANEL_REPORT)(report.editions)

# =============================================================================
# Set Up
# =============================================================================

app.command(name="init", rich_help_panel=PANEL_SETUP)(init_cmd.main)
app.command(name="select", rich_help_panel=PANEL_SETUP)(select_cmd.main)
app.command(name="serve", rich_help_panel=PANEL_SETUP)(serve.main)


@app.command(rich_help_panel=PANEL_SETUP)
def version() -> None:
    """Show verseboard version and exit."""
    console.print(f"verseboard version {__version__}")
    raise typer.Exit(0)


__all__ = ["app"]
