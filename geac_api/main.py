import hmac
import logging
import re
from typing import Any

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from geac_api.api.routes.categories import router as categories_router
from geac_api.api.routes.health import router as health_router
from geac_api.api.routes.locations import router as locations_router
from geac_api.api.routes.requirements import router as requirements_router
from geac_api.core.config import AppEnvironment, settings
from geac_api.core.db import reset_async_engine
from geac_api.core.errors import GeacError, get_status_code
from geac_api.core.observability import (
    REQUEST_ID_HEADER,
    ObservabilityMiddleware,
    configure_structured_logging,
    extract_request_context,
    get_request_id,
    metrics_endpoint,
)

# Configure structured logging before creating logger
if settings.observability_structured_logs:
    configure_structured_logging(settings.app_log_level)

logger = logging.getLogger(__name__)

_SENSITIVE_PATTERNS = [
    r"[/\\][\w/\\.-]+\.py",  # File paths
    r"SELECT.*FROM",  # SQL queries
    r"INSERT INTO.*VALUES",
    r"UPDATE.*SET",
    r"DELETE FROM",
    r"table\s*[:=]\s*\w+",  # Table references
]


def _sanitize_error_details(details: dict[str, Any]) -> dict[str, Any]:
    """
    Redact file paths, SQL and table names from error details in production.

    Args:
        details: Original error details dictionary

    Returns:
        Sanitized details dictionary (unchanged outside production)
    """
    if settings.app_env != AppEnvironment.PROD:
        return details

    sanitized: dict[str, Any] = {}
    for key, value in details.items():
        if isinstance(value, str):
            if any(re.search(p, value, re.IGNORECASE) for p in _SENSITIVE_PATTERNS):
                sanitized[key] = "[REDACTED]"
            else:
                sanitized[key] = value
        elif isinstance(value, dict):
            sanitized[key] = _sanitize_error_details(value)
        elif isinstance(value, list):
            sanitized[key] = [
                _sanitize_error_details(item) if isinstance(item, dict) else item for item in value
            ]
        else:
            sanitized[key] = value

    return sanitized


def _error_body(error: str, message: Any, details: dict[str, Any] | None = None) -> dict:
    return {"error": error, "message": message, "details": details or {}}


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Sets up:
    - Observability middleware (request IDs, metrics, request logs)
    - CORS middleware
    - Exception handlers for domain errors
    - API routers
    - Metrics endpoint for Prometheus scraping
    """
    app = FastAPI(
        title="GEAC Catalog API",
        description="Read-only catalog of event categories, locations and requirements",
        version="0.1.0",
    )

    @app.on_event("shutdown")
    async def shutdown_db() -> None:
        """Release pooled database connections."""
        await reset_async_engine()

    # ============================================================================
    # Middleware
    # ============================================================================

    if settings.observability_enabled:
        app.add_middleware(ObservabilityMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # ============================================================================
    # Exception Handlers
    # ============================================================================

    @app.exception_handler(GeacError)
    async def geac_error_handler(request: Request, exc: GeacError) -> JSONResponse:
        """Map domain exceptions to their HTTP status and the error envelope."""
        status_code = get_status_code(exc)

        context = {
            "details": exc.details,
            "path": request.url.path,
            **extract_request_context(request),
        }
        if status_code >= 500:
            logger.error(f"{exc.__class__.__name__}: {exc.message}", extra=context)
        else:
            logger.warning(f"{exc.__class__.__name__}: {exc.message}", extra=context)

        return JSONResponse(
            status_code=status_code,
            content=_error_body(
                exc.__class__.__name__, exc.message, _sanitize_error_details(exc.details)
            ),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        """Give HTTP exceptions the same envelope as domain errors."""
        if exc.status_code >= 500:
            logger.error(
                f"HTTP {exc.status_code}: {exc.detail}",
                extra={"path": request.url.path, **extract_request_context(request)},
            )

        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body("HTTPException", exc.detail),
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Catch-all handler for unexpected exceptions, including storage faults.

        Logs the full exception and returns a generic 500 error to the client
        without exposing internal implementation details.
        """
        logger.error(
            f"Unhandled exception: {exc}",
            exc_info=True,
            extra={"path": request.url.path, **extract_request_context(request)},
        )

        # Runs outside ObservabilityMiddleware, so the header is set here.
        request_id = getattr(request.state, "request_id", None) or get_request_id()
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("InternalServerError", "An unexpected error occurred"),
            headers={REQUEST_ID_HEADER: request_id} if request_id else None,
        )

    # ============================================================================
    # Router Registration
    # ============================================================================

    prefix = settings.api_prefix
    app.include_router(health_router, prefix=prefix)
    app.include_router(categories_router, prefix=prefix)
    app.include_router(locations_router, prefix=prefix)
    app.include_router(requirements_router, prefix=prefix)

    # ============================================================================
    # Metrics Endpoint (Prometheus) - Token Protected
    # ============================================================================

    async def protected_metrics(request: Request) -> Response:
        """Prometheus metrics; requires the X-Metrics-Token header."""
        expected_token = settings.metrics_token
        if not expected_token:
            logger.error("Metrics endpoint accessed but METRICS_TOKEN not configured")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Metrics token not configured. Set METRICS_TOKEN environment variable.",
            )

        metrics_token = request.headers.get("X-Metrics-Token")
        if not hmac.compare_digest(metrics_token or "", expected_token):
            logger.warning(
                "Unauthorized metrics access attempt",
                extra={"security_event": True, "event_type": "METRICS_ACCESS_DENIED"},
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid metrics token",
            )

        return metrics_endpoint()

    if settings.observability_enabled:
        app.add_route("/metrics", protected_metrics)

    return app


app = create_app()
