"""
Pydantic models for rows read from the fact store.

These are plain data carriers handed from the query layer to the progress
core and the API:
- EditionSummary: An edition offered in the edition selector
- LanguageRef: Id and display name of a language entity
- ProjectSummary: Project metadata with resolved language names
- AudioAssetRecord: Raw audio segment row feeding the activity ranker
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class EditionSummary(BaseModel):
    """An edition of the source text.

    Example:
        >>> edition = EditionSummary(id="kjv", name="King James Version", book_count=66)
    """

    id: str = Field(..., description="Edition identifier")
    name: str = Field(..., description="Display name")
    book_count: int = Field(default=0, ge=0, description="Number of books in the edition")

    model_config = ConfigDict(
        populate_by_name=True,
    )


class LanguageRef(BaseModel):
    """Reference to a language entity."""

    id: str = Field(..., description="Language entity identifier")
    name: str = Field(..., description="Display name")


class ProjectSummary(BaseModel):
    """Project metadata for the dashboard header.

    The target language decides which text versions count toward text
    progress. A project without one simply has no text progress.

    Example:
        >>> project = ProjectSummary(
        ...     id="proj-1",
        ...     name="Swahili Audio Bible",
        ...     target_language=LanguageRef(id="swa", name="Swahili"),
        ... )
    """

    id: str = Field(..., description="Project identifier")
    name: str = Field(..., description="Project name")
    description: str = Field(default="", description="Project description")
    source_language: LanguageRef | None = Field(default=None, description="Source language")
    target_language: LanguageRef | None = Field(default=None, description="Target language")
    created_at: datetime | None = Field(default=None, description="Creation timestamp")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")

    model_config = ConfigDict(
        populate_by_name=True,
    )

    @property
    def has_target_language(self) -> bool:
        """Check if the project has a configured target language."""
        return self.target_language is not None


class AudioAssetRecord(BaseModel):
    """A recently touched audio segment, as stored.

    Timestamps are kept as they come from the store (usually ISO strings)
    so that a malformed value reaches the activity ranker instead of
    failing validation for the whole batch.

    Example:
        >>> record = AudioAssetRecord(
        ...     id="seg-1",
        ...     remote_path="audio/gen/GEN_001.mp3",
        ...     check_status="approved",
        ...     updated_at="2024-03-01T10:00:00+00:00",
        ... )
    """

    id: str = Field(..., description="Audio segment identifier")
    remote_path: str | None = Field(default=None, description="Storage path of the file")
    check_status: str | None = Field(default=None, description="Review/check status")
    upload_status: str | None = Field(default=None, description="Upload status")
    created_at: datetime | str | None = Field(default=None, description="Raw creation time")
    updated_at: datetime | str | None = Field(default=None, description="Raw last update time")
    chapter_id: str | None = Field(
        default=None, description="Chapter of the start verse, when known"
    )

    model_config = ConfigDict(
        populate_by_name=True,
    )
