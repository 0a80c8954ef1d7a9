"""
Project and edition API routes.

- GET /api/projects/{project_id} - Project metadata
- GET /api/editions - Editions available for progress
"""

from fastapi import APIRouter, Depends

from verseboard.core.api.dependencies import get_service
from verseboard.core.services.dashboard import DashboardService
from verseboard.core.store.models import EditionSummary, ProjectSummary

router = APIRouter()


@router.get("/projects/{project_id}", response_model=ProjectSummary)
async def get_project(
    project_id: str,
    service: DashboardService = Depends(get_service),
) -> ProjectSummary:
    """
    Get project metadata with source and target language names.

    Raises:
        ProjectNotFoundError: Mapped to 404
    """
    return await service.project(project_id)


@router.get("/editions", response_model=list[EditionSummary])
async def list_editions(
    service: DashboardService = Depends(get_service),
) -> list[EditionSummary]:
    """List editions ordered by name."""
    return await service.editions()
