"""
verseboard CLI - Select command.

Remember which project commands report on when no PROJECT_ID is given.
"""

import asyncio

import typer

from verseboard.cli.common import console, err_console, get_selection_store, load_project_config
from verseboard.core.services.dashboard import DashboardService, ProjectNotFoundError
from verseboard.core.services.selection import SelectionContext
from verseboard.core.store.queries import FactStoreError


def main(
    project_id: str | None = typer.Argument(
        None,
        help="Project to select",
    ),
    clear: bool = typer.Option(
        False,
        "--clear",
        help="Forget the selected project",
    ),
) -> None:
    """
    Select a project, or show the current selection.

    Examples:
        verseboard select proj-1     # Select a project
        verseboard select            # Show the selected project
        verseboard select --clear    # Forget the selection
    """
    project_dir, config = load_project_config()
    selection = SelectionContext.load(get_selection_store(project_dir))

    if clear:
        selection.select_project(None)
        console.print("[green]✓[/green] Selection cleared")
        return

    if project_id is None:
        if selection.project_id is None:
            console.print("[dim]No project selected[/dim]")
        else:
            console.print(f"Selected project: [cyan]{selection.project_id}[/cyan]")
        return

    service = DashboardService.from_config(config)
    try:
        project = asyncio.run(service.project(project_id))
    except ProjectNotFoundError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except FactStoreError as e:
        err_console.print(f"[red]Error:[/red] Could not read the fact store: {e}")
        raise typer.Exit(1)

    selection.select_project(project.id)
    console.print(f"[green]✓[/green] Selected project [cyan]{project.id}[/cyan] ({project.name})")
    if not project.has_target_language:
        console.print("[yellow]Warning:[/yellow] project has no target language; text progress is 0")
