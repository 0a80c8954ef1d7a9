"""
FastAPI application setup for verseboard.

Creates the FastAPI app instance, registers routes and maps domain
exceptions to the standard error envelope.
"""

import logging
import traceback
from enum import Enum

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from verseboard import __version__
from verseboard.core.api.routes import progress, projects
from verseboard.core.config.models import ServerConfig
from verseboard.core.progress.resolver import StructuralFetchError
from verseboard.core.services.dashboard import ProjectNotFoundError
from verseboard.core.store.queries import FactStoreError

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standard error codes for API responses."""

    # Client errors (4xx)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INVALID_REQUEST = "INVALID_REQUEST"

    # Server errors (5xx)
    STRUCTURAL_FETCH_ERROR = "STRUCTURAL_FETCH_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error_code: ErrorCode
    message: str
    detail: str | None = None
    request_id: str | None = None


def _error_response(
    request: Request,
    http_status: int,
    error_code: ErrorCode,
    message: str,
    detail: str | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        detail=detail,
        request_id=str(id(request)),
    )
    return JSONResponse(status_code=http_status, content=body.model_dump(mode="json"))


app = FastAPI(
    title="verseboard API",
    description="Translation progress and recent activity for Bible translation projects",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ServerConfig().cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(progress.router, prefix="/api", tags=["progress"])
app.include_router(projects.router, prefix="/api", tags=["projects"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint - API health check."""
    return {"status": "ok", "message": "verseboard API"}


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


# Exception handlers for consistent error responses
@app.exception_handler(StructuralFetchError)
async def structural_fetch_handler(request: Request, exc: StructuralFetchError) -> JSONResponse:
    """
    Handle a failed edition structure fetch.

    Progress cannot be computed without the edition's chapters, so this is
    reported as a temporary failure the caller may retry.
    """
    logger.error(
        "Structural fetch failed on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        extra={"request_id": id(request)},
    )
    return _error_response(
        request,
        status.HTTP_503_SERVICE_UNAVAILABLE,
        ErrorCode.STRUCTURAL_FETCH_ERROR,
        "Progress is temporarily unavailable",
        str(exc),
    )


@app.exception_handler(ProjectNotFoundError)
async def project_not_found_handler(request: Request, exc: ProjectNotFoundError) -> JSONResponse:
    logger.info("HTTP 404 on %s %s: %s", request.method, request.url.path, exc)
    return _error_response(request, status.HTTP_404_NOT_FOUND, ErrorCode.NOT_FOUND, str(exc))


@app.exception_handler(FactStoreError)
async def fact_store_handler(request: Request, exc: FactStoreError) -> JSONResponse:
    logger.error(
        "Fact store query failed on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        extra={"request_id": id(request)},
    )
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode.DATABASE_ERROR,
        "Database operation failed",
        f"query '{exc.query}' failed",
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Handle FastAPI HTTPException with the standard error response format.

    Logs errors for debugging without exposing stack traces to clients.
    """
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        error_code = ErrorCode.NOT_FOUND
    elif exc.status_code < 500:
        error_code = ErrorCode.INVALID_REQUEST
    else:
        error_code = ErrorCode.INTERNAL_ERROR

    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "HTTP %d on %s %s: %s",
        exc.status_code,
        request.method,
        request.url.path,
        exc.detail,
        extra={"request_id": id(request)},
    )

    detail_msg = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _error_response(request, exc.status_code, error_code, detail_msg, detail_msg)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle validation errors from query and path parameters.

    Returns a clean JSON response without exposing internal implementation details.
    """
    logger.warning(
        "Validation error on %s %s: %s",
        request.method,
        request.url.path,
        exc.errors(),
        extra={"request_id": id(request)},
    )

    # Extract first error for user-friendly message
    first_error = exc.errors()[0] if exc.errors() else {}
    field = " -> ".join(str(loc) for loc in first_error.get("loc", []))
    error_msg = first_error.get("msg", "Invalid input")

    return _error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        ErrorCode.VALIDATION_ERROR,
        "Request validation failed",
        f"{field}: {error_msg}" if field else error_msg,
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle all uncaught exceptions.

    Logs the full exception with traceback, but returns a clean error
    response to the client.
    """
    logger.error(
        "Unhandled exception on %s %s: %s\n%s",
        request.method,
        request.url.path,
        str(exc),
        traceback.format_exc(),
        extra={"request_id": id(request)},
    )
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode.INTERNAL_ERROR,
        "An internal server error occurred",
        str(exc),
    )
