"""
Progress API routes.

- GET /api/projects/{project_id}/progress - Audio and text progress
- GET /api/projects/{project_id}/activity - Recent activity feed
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from verseboard.core.api.dependencies import get_service
from verseboard.core.progress.models import ActivityEntry, ProgressSnapshot
from verseboard.core.progress.resolver import StructuralFetchError
from verseboard.core.services.dashboard import DashboardService
from verseboard.core.store.queries import FactStoreError

router = APIRouter()


class ProgressResponse(BaseModel):
    """Progress snapshot together with the key it was computed for."""

    project_id: str = Field(..., description="Project identifier")
    edition_id: str | None = Field(
        default=None, description="Edition measured against (None if no edition exists)"
    )
    snapshot: ProgressSnapshot = Field(..., description="Audio and text progress")


@router.get("/projects/{project_id}/progress", response_model=ProgressResponse)
async def get_progress(
    project_id: str,
    edition_id: str | None = Query(
        default=None, description="Edition to measure against (defaults to first by name)"
    ),
    service: DashboardService = Depends(get_service),
) -> ProgressResponse:
    """
    Get audio and text progress for a project.

    When `edition_id` is omitted the first edition by name is used. If the
    store holds no editions the snapshot is all zero.

    Raises:
        StructuralFetchError: Mapped to 503 so the caller can retry. Also
            raised when the editions cannot be read to pick the default.

    Example response:
        {
          "project_id": "proj-1",
          "edition_id": "kjv",
          "snapshot": {
            "audioProgress": {"covered": 2, "total": 3, "percentage": 66.67},
            "textProgress": {"covered": 1, "total": 3, "percentage": 33.33}
          }
        }
    """
    if not edition_id:
        try:
            edition_id = await service.default_edition_id()
        except FactStoreError as e:
            raise StructuralFetchError(e.query, project_id, None) from e

    snapshot = await service.progress(project_id, edition_id)
    return ProgressResponse(project_id=project_id, edition_id=edition_id, snapshot=snapshot)


@router.get("/projects/{project_id}/activity", response_model=list[ActivityEntry])
async def get_activity(
    project_id: str,
    limit: int | None = Query(default=None, ge=1, le=100, description="Maximum entries"),
    service: DashboardService = Depends(get_service),
) -> list[ActivityEntry]:
    """
    Get the most recently changed audio assets of a project.

    A store failure yields an empty list rather than an error.
    """
    return await service.recent_activity(project_id, limit)
