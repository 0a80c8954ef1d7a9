"""
verseboard CLI - Progress, activity and edition reports.

Reads from the fact store through the dashboard service and prints
Rich tables, or JSON with --json.
"""

import asyncio
import json
import logging
from typing import NoReturn

import typer
from rich.table import Table

from verseboard.cli.common import (
    console,
    err_console,
    is_debug,
    load_project_config,
    resolve_project_id,
)
from verseboard.core.progress.models import ProgressAxis
from verseboard.core.progress.resolver import StructuralFetchError
from verseboard.core.services.dashboard import DashboardService, DashboardSession
from verseboard.core.services.selection import SelectionContext
from verseboard.core.store.queries import FactStoreError

logger = logging.getLogger(__name__)


def _axis_row(label: str, axis: ProgressAxis) -> tuple[str, str, str]:
    # Rounded for display only
    return label, f"{axis.covered}/{axis.total}", f"{round(axis.percentage)}%"


def _fail(ctx: typer.Context, message: str, exc: Exception) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {message}: {exc}")
    if is_debug(ctx):
        logger.exception("Command failed")
    raise typer.Exit(1)


def progress(
    ctx: typer.Context,
    project_id: str | None = typer.Argument(
        None,
        help="Project to report on (defaults to the selected project)",
    ),
    edition: str | None = typer.Option(
        None,
        "--edition",
        "-e",
        help="Edition to measure against (defaults to the first by name)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output progress as JSON",
    ),
) -> None:
    """
    Show audio and text progress for a project.

    Examples:
        verseboard progress proj-1
        verseboard progress --edition kjv
        verseboard progress --json
    """
    project_dir, config = load_project_config()
    project_id = resolve_project_id(project_dir, project_id)

    service = DashboardService.from_config(config)
    session = DashboardSession(service, SelectionContext(project_id=project_id, edition_id=edition))

    try:
        snapshot = asyncio.run(session.refresh_progress())
    except StructuralFetchError as e:
        _fail(ctx, "Progress unavailable", e)
    except FactStoreError as e:
        _fail(ctx, "Could not read the fact store", e)

    if snapshot is None:
        raise typer.Exit(1)
    edition_id = session.selection.edition_id

    if json_output:
        output = {
            "project_id": project_id,
            "edition_id": edition_id,
            "snapshot": snapshot.model_dump(mode="json", by_alias=True),
        }
        print(json.dumps(output, indent=2))
        return

    if edition_id is None:
        console.print("[yellow]No editions in the fact store; nothing to measure.[/yellow]")

    table = Table(title=f"Progress for {project_id} ({edition_id or 'no edition'})")
    table.add_column("Axis", style="cyan")
    table.add_column("Chapters", justify="right")
    table.add_column("Complete", justify="right", style="green")
    table.add_row(*_axis_row("Audio", snapshot.audio_progress))
    table.add_row(*_axis_row("Text", snapshot.text_progress))
    console.print(table)


def activity(
    ctx: typer.Context,
    project_id: str | None = typer.Argument(
        None,
        help="Project to report on (defaults to the selected project)",
    ),
    limit: int | None = typer.Option(
        None,
        "--limit",
        "-n",
        min=1,
        max=100,
        help="Maximum number of entries (defaults to dashboard.activity_limit)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output the feed as JSON",
    ),
) -> None:
    """
    Show recently changed audio files of a project, newest first.

    Examples:
        verseboard activity proj-1
        verseboard activity --limit 5 --json
    """
    project_dir, config = load_project_config()
    project_id = resolve_project_id(project_dir, project_id)

    service = DashboardService.from_config(config)
    feed = asyncio.run(service.recent_activity(project_id, limit))

    if json_output:
        print(json.dumps([entry.model_dump(mode="json") for entry in feed], indent=2))
        return

    if not feed:
        console.print(f"[dim]No recent activity for {project_id}[/dim]")
        return

    table = Table(title=f"Recent activity for {project_id}")
    table.add_column("When", style="dim")
    table.add_column("Reference", style="cyan")
    table.add_column("Status")
    for entry in feed:
        table.add_row(
            entry.timestamp.strftime("%Y-%m-%d %H:%M"),
            entry.reference,
            entry.status,
        )
    console.print(table)


def editions(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output editions as JSON",
    ),
) -> None:
    """
    List the editions progress can be measured against.

    The first edition listed is the default for `verseboard progress`.
    """
    _, config = load_project_config()
    service = DashboardService.from_config(config)

    try:
        items = asyncio.run(service.editions())
    except FactStoreError as e:
        _fail(ctx, "Could not read the fact store", e)

    if json_output:
        print(json.dumps([item.model_dump(mode="json") for item in items], indent=2))
        return

    if not items:
        console.print("[dim]No editions found[/dim]")
        return

    table = Table(title="Editions")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Books", justify="right")
    for item in items:
        table.add_row(item.id, item.name, str(item.book_count))
    console.print(table)
