"""
FastAPI application for verseboard.

Serves progress snapshots, activity feeds and edition lists from the fact
store as JSON.

API Endpoints:
- GET /api/projects/{id}/progress - Audio and text progress
- GET /api/projects/{id}/activity - Recent activity feed
- GET /api/projects/{id} - Project metadata
- GET /api/editions - Available editions

Usage:
    # Run the server
    uvicorn verseboard.core.api.app:app --reload

    # Or from the CLI
    verseboard serve
"""

from verseboard.core.api.app import app

__all__ = ["app"]
