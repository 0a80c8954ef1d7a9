"""
verseboard CLI - Init command.

Create the fact store schema for a project.
"""

import logging
import sqlite3
from pathlib import Path

import typer

from verseboard.cli.common import console, err_console, load_project_config
from verseboard.core.store.connection import init_db
from verseboard.core.store.schema import SCHEMA_VERSION

logger = logging.getLogger(__name__)


def main(
    db: Path | None = typer.Option(
        None,
        "--db",
        help="Path of the fact store (defaults to store.db_path from config)",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Delete an existing store and recreate it empty",
    ),
) -> None:
    """
    Initialize the fact store.

    Creates the SQLite database and its schema. An existing store is left
    untouched unless --force is given.

    Examples:
        verseboard init
        verseboard init --db data/store.db
        verseboard init --force
    """
    project_dir, config = load_project_config()
    db_path = db if db is not None else config.store.db_path
    if not db_path.is_absolute():
        db_path = project_dir / db_path

    existed = db_path.exists()
    if existed and force:
        console.print(f"[yellow]Recreating fact store at {db_path}[/yellow]")

    try:
        conn = init_db(db_path, force_recreate=force, timeout=config.store.timeout_seconds)
        conn.close()
    except (sqlite3.Error, OSError) as e:
        err_console.print(f"[red]Error:[/red] Could not initialize {db_path}: {e}")
        raise typer.Exit(1)

    if existed and not force:
        console.print(f"[dim]Fact store already exists at {db_path}[/dim]")
    else:
        logger.debug("Created schema version %d at %s", SCHEMA_VERSION, db_path)
        console.print(f"[green]✓[/green] Fact store ready at {db_path}")
