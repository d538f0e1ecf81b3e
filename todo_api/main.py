"""
FastAPI application entry point for the Todo API.

This module provides the FastAPI application with:
- Todo CRUD endpoints
- Health and readiness endpoints
- Request logging with correlation IDs
- Prometheus metrics
- CORS for the frontend origin
- Static frontend serving in production
- MongoDB client lifecycle management
"""

import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator, Dict, Optional

import structlog
import uvicorn
from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from shared.logging import bind_context, clear_context, configure_logging
from todo_api.config import Settings, get_settings
from todo_api.database import connect_to_mongo, get_todo_collection, ping
from todo_api.dependencies import get_mongo_client
from todo_api.errors import TodoValidationError
from todo_api.repositories.todo_repo import TodoRepository
from todo_api.routers import todos

logger = structlog.get_logger(__name__)

# ============================================================================
# Prometheus Metrics
# ============================================================================

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"]
)

http_requests_in_progress = Gauge(
    "http_requests_in_progress",
    "HTTP requests currently in progress",
    ["method"]
)

# ============================================================================
# Lifespan Management
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager for startup and shutdown events.

    Startup loads the env file (outside production), connects to MongoDB
    and builds the todo repository. Any failure is fatal.
    """
    settings: Settings = app.state.settings

    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.env
    )

    try:
        settings.require_env_file()

        app.state.mongo_client = await connect_to_mongo(settings)
        app.state.todo_repository = TodoRepository(
            get_todo_collection(app.state.mongo_client, settings)
        )
    except Exception as e:
        logger.error("application_startup_failed", error=str(e), exc_info=True)
        raise

    logger.info("application_started", port=settings.port)

    try:
        yield
    finally:
        logger.info("application_shutting_down")
        await app.state.mongo_client.close()
        logger.info("application_shutdown_complete")


# ============================================================================
# Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging, metrics and correlation IDs."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())

        method = request.method
        path = request.url.path

        clear_context()
        bind_context(correlation_id=correlation_id)

        http_requests_in_progress.labels(method=method).inc()
        start_time = time.time()

        logger.info("request_started", method=method, path=path)

        try:
            response = await call_next(request)
            duration = time.time() - start_time

            endpoint = self._route_template(request, path)
            http_requests_total.labels(
                method=method,
                endpoint=endpoint,
                status=response.status_code
            ).inc()
            http_request_duration_seconds.labels(
                method=method,
                endpoint=endpoint
            ).observe(duration)

            logger.info(
                "request_completed",
                method=method,
                path=path,
                status_code=response.status_code,
                duration=f"{duration:.3f}s"
            )

            response.headers["X-Correlation-ID"] = correlation_id
            return response

        except Exception as e:
            duration = time.time() - start_time
            logger.error(
                "request_failed",
                method=method,
                path=path,
                error=str(e),
                duration=f"{duration:.3f}s",
                exc_info=True
            )
            raise

        finally:
            http_requests_in_progress.labels(method=method).dec()
            clear_context()

    @staticmethod
    def _route_template(request: Request, path: str) -> str:
        """Matched route path (e.g. /api/todos/{id}), falling back to the raw path."""
        route = request.scope.get("route")
        return getattr(route, "path", path)


# ============================================================================
# Exception Handlers
# ============================================================================


async def todo_validation_exception_handler(request: Request, exc: TodoValidationError):
    """Handle client-side validation failures."""
    logger.warning(
        "todo_validation_error",
        path=request.url.path,
        error=exc.message
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": exc.message}
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors."""
    logger.warning(
        "validation_error",
        path=request.url.path,
        errors=exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(exc.errors())}
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        path=request.url.path,
        status_code=exc.status_code,
        detail=exc.detail
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def storage_exception_handler(request: Request, exc: PyMongoError):
    """Handle MongoDB failures inside the middleware stack so CORS and logging still apply."""
    logger.error(
        "storage_error",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions, including storage failures."""
    logger.error(
        "unexpected_exception",
        path=request.url.path,
        error=str(exc),
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


# ============================================================================
# Application Factory
# ============================================================================


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings (defaults to the cached settings)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.log_format == "json",
        app_name=settings.app_name,
        environment=settings.env,
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Todo list API backed by MongoDB.",
        lifespan=lifespan,
    )
    app.state.settings = settings

    logger.info("configuring_cors", origins=settings.cors_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(TodoValidationError, todo_validation_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(PyMongoError, storage_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    @app.get("/health", tags=["Health"], response_class=JSONResponse)
    async def health_check() -> Dict[str, Any]:
        """Liveness probe; does not check dependencies."""
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.env
        }

    @app.get("/ready", tags=["Health"], response_class=JSONResponse)
    async def readiness_check(
        client: Optional[AsyncMongoClient] = Depends(get_mongo_client)
    ) -> JSONResponse:
        """
        Readiness probe.

        Pings MongoDB and reports 503 when it is unreachable.
        """
        database_ok = client is not None and await ping(client)

        checks = {"database": "healthy" if database_ok else "unhealthy"}
        return JSONResponse(
            status_code=status.HTTP_200_OK if database_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "ready" if database_ok else "not_ready",
                "service": settings.app_name,
                "version": settings.app_version,
                "checks": checks
            }
        )

    @app.get("/metrics", tags=["Monitoring"], response_class=PlainTextResponse)
    async def metrics() -> Response:
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(todos.router)

    # Mounted last so API routes take precedence over the frontend.
    if settings.is_production:
        if Path(settings.static_dir).is_dir():
            logger.info("serving_static_frontend", directory=settings.static_dir)
            app.mount(
                "/",
                StaticFiles(directory=settings.static_dir, html=True),
                name="frontend"
            )
        else:
            logger.warning("static_frontend_missing", directory=settings.static_dir)

    return app


app = create_app()


if __name__ == "__main__":
    settings = get_settings()

    logger.info(
        "starting_uvicorn_server",
        host=settings.host,
        port=settings.port
    )

    uvicorn.run(
        "todo_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
