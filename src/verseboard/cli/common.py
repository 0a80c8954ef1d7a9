"""
Shared helpers for verseboard CLI commands.

Resolves the project directory, its configuration and the persisted
project selection.
"""

from pathlib import Path

import typer
from rich.console import Console

from verseboard.core.config import VerseboardConfig, load_config
from verseboard.core.services.selection import SELECTION_FILE_NAME, JsonSelectionStore
from verseboard.utils.project import get_project_dir

console = Console()
err_console = Console(stderr=True)

STATE_DIR_NAME = ".verseboard"


def load_project_config() -> tuple[Path, VerseboardConfig]:
    """
    Load configuration for the current project.

    Returns:
        Tuple of (project_dir, config)
    """
    project_dir = get_project_dir()
    return project_dir, load_config(project_dir)


def get_selection_store(project_dir: Path) -> JsonSelectionStore:
    return JsonSelectionStore(project_dir / STATE_DIR_NAME / SELECTION_FILE_NAME)


def resolve_project_id(project_dir: Path, project_id: str | None) -> str:
    """
    Use the given project id, or fall back to the selected project.

    Raises:
        typer.Exit: If neither is available
    """
    if project_id:
        return project_id

    selected = get_selection_store(project_dir).load()
    if selected is None:
        err_console.print(
            "[red]Error:[/red] No project selected. "
            "Pass a PROJECT_ID or run 'verseboard select PROJECT_ID'."
        )
        raise typer.Exit(1)
    return selected


def is_debug(ctx: typer.Context) -> bool:
    return bool(ctx.obj.get("debug", False)) if ctx.obj else False
