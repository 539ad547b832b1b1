"""
Compliance Checker Service - Main Application
=============================================

FastAPI application for regulation applicability and compliance scoring.

Version: 0.1.0
"""

import uuid
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.config import settings
from shared.database.postgres import PostgresClient
from shared.database.redis import RedisClient
from shared.errors import NotFoundError, StorageError
from shared.logging import bind_context, clear_context, get_logger, setup_logging
from shared.models.common import HealthResponse

from services.compliance_checker import __version__
from services.compliance_checker.routes import businesses, compliance, regulations

SERVICE_NAME = "compliance-checker"

# Setup logging
setup_logging(
    log_level=settings.log_level.value,
    json_logs=settings.is_production,
    service_name=SERVICE_NAME,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan manager."""
    logger.info(
        "compliance_checker_starting",
        environment=settings.environment.value,
        port=settings.port,
        cache_enabled=RedisClient.is_enabled(),
    )

    # Startup
    PostgresClient.get_engine()
    if RedisClient.is_enabled():
        RedisClient.get_client()

    yield

    # Shutdown
    logger.info("compliance_checker_shutting_down")
    await PostgresClient.close()
    await RedisClient.close()


# Create FastAPI application
app = FastAPI(
    title="Bizcomply Compliance Checker",
    description="Regulation applicability and compliance scoring for small businesses",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next: Any) -> Any:
    """Bind a request id to every log line emitted while serving a request."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    bind_context(request_id=request_id, path=request.url.path)
    try:
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response
    finally:
        clear_context()


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """
    Service health check.

    Returns health status of the service and its dependencies. A disabled
    cache does not degrade the service.
    """
    components: dict[str, dict[str, Any]] = {
        "postgres": await PostgresClient.health_check(),
        "redis": await RedisClient.health_check(),
    }

    all_healthy = all(
        c.get("status") in ("healthy", "disabled") for c in components.values()
    )

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        service=SERVICE_NAME,
        version=__version__,
        components=components,
    )


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "Bizcomply Compliance Checker",
        "version": __version__,
        "docs": "/docs",
    }


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(
    compliance.router,
    prefix="/api/v1/compliance",
    tags=["Compliance"],
)

app.include_router(
    businesses.router,
    prefix="/api/v1/businesses",
    tags=["Businesses"],
)

app.include_router(
    regulations.router,
    prefix="/api/v1/regulations",
    tags=["Regulations"],
)


# ============================================================================
# Error Handlers
# ============================================================================


def _error_body(error: str, status_code: int) -> dict[str, Any]:
    return {"success": False, "error": error, "status_code": status_code}


def first_validation_message(exc: RequestValidationError) -> str:
    """Render the first validation error as ``field: message``."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = list(first.get("loc", ()))
    if loc and loc[0] in ("body", "query", "path", "header"):
        loc = loc[1:]
    location = [str(part) for part in loc]
    message = first.get("msg", "Invalid value")
    return f"{'.'.join(location)}: {message}" if location else message


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Reject invalid input with 400 and the first validation message."""
    message = first_validation_message(exc)
    logger.info("request_validation_failed", error=message, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(message, status.HTTP_400_BAD_REQUEST),
    )


@app.exception_handler(NotFoundError)
async def not_found_exception_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Handle missing businesses and regulations."""
    logger.info(
        "resource_not_found",
        resource=exc.resource,
        identifier=str(exc.identifier),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=_error_body(str(exc), status.HTTP_404_NOT_FOUND),
    )


@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Handle relational store failures."""
    logger.error(
        "storage_error",
        operation=exc.operation,
        error=str(exc.cause) if exc.cause else None,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=_error_body("Storage unavailable", status.HTTP_503_SERVICE_UNAVAILABLE),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.detail, exc.status_code),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR),
    )


# ============================================================================
# Run with Uvicorn
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.compliance_checker.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.value.lower(),
    )
