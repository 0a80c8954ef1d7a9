"""
Request dependencies for the verseboard API.

The server command stores the loaded configuration on `app.state.config`;
without it (e.g. `uvicorn verseboard.core.api.app:app`) configuration is
loaded from the working directory. One DashboardService is kept per store
path so its caches live as long as the process.
"""

from pathlib import Path

from fastapi import Request

from verseboard.core.config import VerseboardConfig, load_config
from verseboard.core.services.dashboard import DashboardService

_services: dict[Path, DashboardService] = {}


def get_config(request: Request) -> VerseboardConfig:
    config = getattr(request.app.state, "config", None)
    if config is None:
        config = load_config()
    return config


def get_service(request: Request) -> DashboardService:
    """
    Get the DashboardService for the configured fact store.

    Returns:
        Shared DashboardService instance for the store path
    """
    config = get_config(request)
    db_path = config.store.db_path
    service = _services.get(db_path)
    if service is None:
        service = DashboardService.from_config(config)
        _services[db_path] = service
    return service


def reset_services() -> None:
    """Forget all shared services and their caches."""
    _services.clear()
