"""
Configuration data models for verseboard.

These models define the structure of .verseboard.json and
~/.config/verseboard/config.json files, with validation and type safety
via Pydantic.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator


class StoreConfig(BaseModel):
    """
    Location of the fact store.

    Relative paths are resolved against the project directory by the loader.
    """
    db_path: Path = Field(
        default=Path(".verseboard") / "verseboard.db",
        description="Path to the SQLite fact store"
    )
    timeout_seconds: float = Field(
        default=5.0,
        gt=0.0,
        description="Seconds to wait on a locked database before failing"
    )


class DashboardConfig(BaseModel):
    """
    Progress and activity feed settings.

    Staleness windows decide how long a computed snapshot or feed is
    reused before the fact store is queried again.
    """
    activity_limit: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum number of entries in the activity feed"
    )
    activity_window: int = Field(
        default=10,
        ge=1,
        le=500,
        description="Number of recently updated audio assets fetched for ranking"
    )
    progress_ttl_seconds: float = Field(
        default=300.0,
        ge=0.0,
        description="How long a progress snapshot stays fresh (0 disables caching)"
    )
    activity_ttl_seconds: float = Field(
        default=120.0,
        ge=0.0,
        description="How long an activity feed stays fresh (0 disables caching)"
    )

    @model_validator(mode="after")
    def window_covers_limit(self) -> "DashboardConfig":
        """Fetch at least as many assets as the feed can show."""
        if self.activity_window < self.activity_limit:
            self.activity_window = self.activity_limit
        return self


class ServerConfig(BaseModel):
    """
    API server settings used by `verseboard serve`.
    """
    host: str = Field(
        default="127.0.0.1",
        description="Interface to bind"
    )
    port: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Port to listen on"
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="Origins allowed to call the API from a browser"
    )


class VerseboardConfig(BaseModel):
    """
    Top-level verseboard configuration.

    Combines all configuration sections. Loaded from multiple sources
    with precedence: env vars > project config > user config > defaults.

    Example:
        >>> config = VerseboardConfig()
        >>> config.dashboard.activity_limit
        10
    """
    store: StoreConfig = Field(default_factory=StoreConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    model_config = ConfigDict(
        extra="ignore",
    )
