"""FastAPI application entry point.

Configures the application with logging, exception handling, metrics,
and health checks.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from forum_search import __version__
from forum_search.api.dependencies import get_container
from forum_search.api.forum import router as forum_router
from forum_search.api.routes import router as search_router
from forum_search.config import get_settings
from forum_search.container import ServiceContainer
from forum_search.exceptions import ErrorCode, ForumSearchError
from forum_search.logging_config import get_logger, setup_logging
from forum_search.observability import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Builds the service container unless one was injected, bootstraps the
    vector collections, and closes owned clients on shutdown.
    """
    # Startup
    settings = get_settings()
    setup_logging(level=settings.log_level)
    logger.info(
        "Starting forum search",
        extra={
            "version": __version__,
            "environment": settings.environment.value,
        },
    )

    owned = getattr(app.state, "container", None) is None
    if owned:
        app.state.container = ServiceContainer.from_settings(settings)

    container: ServiceContainer = app.state.container
    outcome = await container.bootstrapper.init_collections()
    if not outcome.succeeded:
        logger.error(
            "Vector collections could not be initialized; search will fall back",
            extra={"error": outcome.error},
        )

    yield

    # Shutdown
    logger.info("Shutting down forum search")
    if owned:
        await container.close()
        app.state.container = None


def create_app(container: ServiceContainer | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        container: Pre-built services. When omitted, the lifespan builds
            them from settings.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Forum Search",
        description="Semantic search over forum posts, comments and categories",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.container = container

    app.add_middleware(MetricsMiddleware)

    # Register exception handlers
    app.add_exception_handler(ForumSearchError, forum_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Register routes
    app.include_router(search_router)
    app.include_router(forum_router)
    app.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/ready", readiness_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/live", liveness_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/metrics", metrics_endpoint, methods=["GET"], include_in_schema=False)

    return app


async def forum_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle ForumSearchError exceptions.

    Converts exceptions to structured JSON responses.
    """
    if not isinstance(exc, ForumSearchError):
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": ErrorCode.INTERNAL_ERROR.value,
                    "message": str(exc),
                    "details": {},
                }
            },
        )

    status_code = _get_status_code(exc.code)
    log = logger.error if status_code >= 500 else logger.info
    log(
        f"Request failed: {exc.message}",
        extra={
            "error_code": exc.code.value,
            "path": request.url.path,
            "details": exc.details,
        },
    )

    return JSONResponse(
        status_code=status_code,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Report malformed request parameters with the structured error body."""
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    error = ForumSearchError(
        "Invalid request parameters",
        ErrorCode.VALIDATION_ERROR,
        {
            "errors": [
                {
                    "loc": [str(part) for part in err.get("loc", ())],
                    "msg": err.get("msg", ""),
                }
                for err in errors
            ]
        },
    )
    return await forum_exception_handler(request, error)


def _get_status_code(code: ErrorCode) -> int:
    """Map error code to HTTP status code."""
    if code is ErrorCode.VALIDATION_ERROR:
        return 400

    if code in (ErrorCode.ENTITY_NOT_FOUND, ErrorCode.COLLECTION_NOT_FOUND):
        return 404

    if code is ErrorCode.COLLECTION_EXISTS:
        return 409

    return 500


async def health_check() -> dict[str, Any]:
    """Basic health check endpoint.

    Returns:
        Health status with version and timestamp.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe.

    Checks the relational store and, when an embedding provider is
    configured, the vector store.

    Returns:
        Readiness status with component checks; 503 when any check fails.
    """
    container = get_container(request)
    checks: dict[str, str] = {}

    if container.database is not None:
        checks["database"] = "ok" if await container.database.ping() else "unavailable"

    if container.embedding_service.is_configured:
        checks["vector_store"] = "ok" if await container.vector_store.ping() else "unavailable"
    else:
        checks["vector_store"] = "skipped"

    ready = all(v in ("ok", "skipped") for v in checks.values())

    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ready" if ready else "not_ready",
            "checks": checks,
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )


async def liveness_check() -> dict[str, str]:
    """Liveness probe.

    Returns:
        Liveness status.
    """
    return {"status": "alive"}


async def metrics_endpoint() -> Response:
    """Expose Prometheus metrics."""
    return Response(content=get_metrics(), media_type=get_metrics_content_type())


# Create the application instance
app = create_app()
