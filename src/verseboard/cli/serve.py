"""
verseboard CLI - Serve command.

Run the verseboard REST API with uvicorn.
"""

import logging

import typer

from verseboard.cli.common import console, err_console, is_debug, load_project_config

logger = logging.getLogger(__name__)


def main(
    ctx: typer.Context,
    port: int | None = typer.Option(
        None,
        "--port",
        "-p",
        help="Port to run the server on (defaults to server.port)",
    ),
    host: str | None = typer.Option(
        None,
        "--host",
        help="Interface to bind (defaults to server.host)",
    ),
) -> None:
    """
    Serve progress and activity over HTTP.

    Examples:
        verseboard serve                  # Serve on the configured port
        verseboard serve --port 3000      # Serve on port 3000
    """
    debug = is_debug(ctx)
    project_dir, config = load_project_config()

    try:
        import uvicorn

        from verseboard.core.api.app import app as fastapi_app
    except ImportError as e:
        err_console.print(
            "[red]Error:[/red] Server dependencies not installed. "
            f"Missing module: {e.name}"
        )
        raise typer.Exit(1)

    # Routes read the configuration from app state
    fastapi_app.state.config = config

    bind_host = host or config.server.host
    bind_port = port or config.server.port
    url = f"http://{bind_host}:{bind_port}"

    if debug:
        console.print(f"[dim]Project root: {project_dir}[/dim]")
        console.print(f"[dim]Fact store: {config.store.db_path}[/dim]")

    console.print("[bold cyan]Starting verseboard server...[/bold cyan]")
    console.print(f"[dim]API: {url}/api/editions[/dim]")
    console.print(f"[dim]Docs: {url}/docs[/dim]")
    console.print("\n[dim]Press Ctrl+C to stop[/dim]\n")

    try:
        uvicorn.run(
            fastapi_app,
            host=bind_host,
            port=bind_port,
            log_level="info" if debug else "warning",
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped[/yellow]")
