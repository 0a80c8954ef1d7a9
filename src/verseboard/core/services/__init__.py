"""
Service layer for verseboard.

Services are the orchestration between the progress core and the
interfaces (CLI, API). They own caching and selection state; the core
modules stay free of both.
"""

from verseboard.core.services.dashboard import (
    DashboardService,
    DashboardServiceError,
    DashboardSession,
    ProjectNotFoundError,
)
from verseboard.core.services.selection import (
    JsonSelectionStore,
    MemorySelectionStore,
    SelectionContext,
    SelectionStore,
)

__all__ = [
    "DashboardService",
    "DashboardServiceError",
    "DashboardSession",
    "JsonSelectionStore",
    "MemorySelectionStore",
    "ProjectNotFoundError",
    "SelectionContext",
    "SelectionStore",
]
