"""Prometheus metrics for forum search.

Provides metrics instrumentation for:
- HTTP request latency and counts
- Search requests by mode (vector, keyword, fallback)
- Embedding requests and mock fallbacks
- Index operations by document type and outcome
- Vector store operation latency
"""

import time
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from forum_search.logging_config import get_logger

logger = get_logger(__name__)

# HTTP Request Metrics
HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status_code"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

HTTP_REQUEST_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

# Search Metrics
SEARCH_REQUEST_DURATION = Histogram(
    "search_request_duration_seconds",
    "Search duration in seconds",
    ["mode"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 15.0],
)

SEARCH_REQUEST_TOTAL = Counter(
    "search_requests_total",
    "Total search requests",
    ["mode"],  # vector, keyword (unconfigured), fallback (vector path failed)
)

SEARCH_RESULTS_RETURNED = Histogram(
    "search_results_returned",
    "Number of results returned per search",
    buckets=[0, 1, 2, 5, 10, 20, 50, 100],
)

# Embedding Metrics
EMBEDDING_REQUEST_DURATION = Histogram(
    "embedding_request_duration_seconds",
    "Embedding request duration in seconds",
    ["provider", "status"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)

EMBEDDING_REQUEST_TOTAL = Counter(
    "embedding_requests_total",
    "Total embedding requests",
    ["provider", "status"],
)

EMBEDDING_FALLBACK_TOTAL = Counter(
    "embedding_fallbacks_total",
    "Provider failures answered with mock embeddings",
    ["model"],
)

# Indexing Metrics
INDEX_OPERATIONS_TOTAL = Counter(
    "index_operations_total",
    "Index and delete operations against the vector store",
    ["operation", "document_type", "status"],
)

# Vector Store Metrics
VECTORSTORE_OPERATION_DURATION = Histogram(
    "vectorstore_operation_duration_seconds",
    "Vector store operation duration",
    ["operation", "status"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0],
)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP request metrics."""

    def __init__(self, app: ASGIApp) -> None:
        """Initialize the middleware."""
        super().__init__(app)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process request and collect metrics."""
        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.perf_counter()

        response = await call_next(request)

        duration = time.perf_counter() - start_time

        endpoint = self._normalize_endpoint(request.url.path)

        HTTP_REQUEST_DURATION.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).observe(duration)

        HTTP_REQUEST_TOTAL.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()

        return response

    def _normalize_endpoint(self, path: str) -> str:
        """Normalize endpoint path to reduce cardinality."""
        if path.startswith("/health"):
            return "/health"
        # Collapse entity ids: /api/posts/<id>/comments -> /api/posts
        if path.startswith("/api/"):
            parts = path.split("/")
            if len(parts) >= 3:
                return f"/api/{parts[2]}"
        return path


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST


def track_search_request(
    mode: str,
    duration: float,
    results_returned: int,
) -> None:
    """Track search request metrics.

    Args:
        mode: ``vector``, ``keyword`` or ``fallback``.
        duration: Search duration in seconds.
        results_returned: Number of results returned.
    """
    SEARCH_REQUEST_DURATION.labels(mode=mode).observe(duration)
    SEARCH_REQUEST_TOTAL.labels(mode=mode).inc()
    SEARCH_RESULTS_RETURNED.observe(results_returned)


def track_embedding_request(
    provider: str,
    duration: float,
    success: bool = True,
) -> None:
    """Track embedding request metrics.

    Args:
        provider: Embedding provider label.
        duration: Request duration in seconds.
        success: Whether the request succeeded.
    """
    status = "success" if success else "error"

    EMBEDDING_REQUEST_DURATION.labels(provider=provider, status=status).observe(duration)
    EMBEDDING_REQUEST_TOTAL.labels(provider=provider, status=status).inc()


def track_embedding_fallback(model: str) -> None:
    """Count a provider failure answered by the mock generator."""
    EMBEDDING_FALLBACK_TOTAL.labels(model=model).inc()


def track_index_operation(
    operation: str,
    document_type: str,
    status: str,
) -> None:
    """Track an index or delete outcome.

    Args:
        operation: ``index`` or ``delete``.
        document_type: ``post``, ``comment`` or ``category``.
        status: Outcome status value.
    """
    INDEX_OPERATIONS_TOTAL.labels(
        operation=operation,
        document_type=document_type,
        status=status,
    ).inc()


@contextmanager
def track_vectorstore_operation(operation: str) -> Iterator[None]:
    """Time a vector store call, labelling it by success or error."""
    start_time = time.perf_counter()
    status = "success"
    try:
        yield
    except Exception:
        status = "error"
        raise
    finally:
        VECTORSTORE_OPERATION_DURATION.labels(
            operation=operation,
            status=status,
        ).observe(time.perf_counter() - start_time)
