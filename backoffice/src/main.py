"""
FastAPI application entry point for the back-office services.

This module provides the application factory with:
- Health and readiness endpoints
- Request logging with correlation IDs
- Prometheus metrics
- Error kind to HTTP status translation
- Backing store lifecycle (PostgreSQL pool or in-memory store)
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

import structlog
import uvicorn
from fastapi import FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, CollectorRegistry
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from backoffice.src.config import Settings, get_settings
from backoffice.src.errors import ErrorKind, ServiceError
from backoffice.src.repositories import (
    CallStatusRepository,
    MarketingAreaRepository,
    MarketingBranchRepository,
    MarketingSubAreaRepository,
    MarketingUserProfileRepository,
    MemoryStore,
    PostgresStore,
    Store,
    WeeklyScheduleRepository,
)
from backoffice.src.routers import call_statuses, hierarchy, profiles, schedules
from backoffice.src.services import (
    CallStatusService,
    MarketingHierarchyService,
    MarketingUserProfileService,
    WeeklyScheduleService,
)
from shared.logging import bind_context, configure_logging, unbind_context
from shared.metrics import HttpMetrics, RepositoryMetrics, get_metrics_handler
from shared.models import HealthStatus, ServiceInfo

logger = structlog.get_logger(__name__)

HTTP_UNPROCESSABLE = 422

STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: HTTP_UNPROCESSABLE,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.REPOSITORY: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


# ============================================================================
# Application State
# ============================================================================

class AppState:
    """Application state container for shared resources."""

    def __init__(self, store: Store, repository_metrics: Optional[RepositoryMetrics] = None):
        self.store = store

        self.call_status_repo = CallStatusRepository(store, repository_metrics)
        self.area_repo = MarketingAreaRepository(store, repository_metrics)
        self.sub_area_repo = MarketingSubAreaRepository(store, repository_metrics)
        self.branch_repo = MarketingBranchRepository(store, repository_metrics)
        self.profile_repo = MarketingUserProfileRepository(store, repository_metrics)
        self.schedule_repo = WeeklyScheduleRepository(store, repository_metrics)

        self.call_status_service = CallStatusService(self.call_status_repo)
        self.hierarchy_service = MarketingHierarchyService(
            self.area_repo, self.sub_area_repo, self.branch_repo
        )
        self.profile_service = MarketingUserProfileService(self.profile_repo)
        self.schedule_service = WeeklyScheduleService(self.schedule_repo, self.branch_repo)

    def install(self, app: FastAPI) -> None:
        """Expose the store and services on ``app.state``."""
        app.state.store = self.store
        app.state.call_status_service = self.call_status_service
        app.state.hierarchy_service = self.hierarchy_service
        app.state.profile_service = self.profile_service
        app.state.schedule_service = self.schedule_service


async def open_store(settings: Settings) -> Store:
    """Create the backing store selected by ``store_backend``."""
    if settings.store_backend == "memory":
        logger.info("using_memory_store")
        return MemoryStore()

    store = await PostgresStore.connect(settings)
    if settings.database_create_schema:
        await store.create_schema()
    return store


# ============================================================================
# Request Logging and Metrics Middleware
# ============================================================================

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging, correlation IDs and HTTP metrics."""

    def __init__(self, app, http_metrics: Optional[HttpMetrics] = None):
        super().__init__(app)
        self.http_metrics = http_metrics

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        method = request.method
        path = request.url.path

        bind_context(correlation_id=correlation_id)
        start_time = time.perf_counter()
        logger.debug("request_started", method=method, path=path)

        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time

            # label by route template to keep ids out of the metric labels
            route = request.scope.get("route")
            endpoint = getattr(route, "path", path)
            if self.http_metrics is not None:
                self.http_metrics.requests.labels(
                    method=method,
                    endpoint=endpoint,
                    status=response.status_code
                ).inc()
                self.http_metrics.duration.labels(method=method, endpoint=endpoint).observe(duration)

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
            logger.error(
                "request_failed",
                method=method,
                path=path,
                error=str(e),
                duration=f"{time.perf_counter() - start_time:.3f}s",
                exc_info=True
            )
            raise

        finally:
            unbind_context("correlation_id")


# ============================================================================
# Exception Handlers
# ============================================================================

async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Translate service errors to HTTP responses by error kind."""
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)

    if status_code >= 500:
        logger.error("service_error", path=request.url.path, kind=exc.kind.value, error=exc.message)
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.kind.value, "message": "Internal server error"}
        )

    logger.warning("service_error", path=request.url.path, kind=exc.kind.value, error=exc.message)
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle path, query and body parsing errors raised by FastAPI."""
    logger.warning("validation_error", path=request.url.path, errors=exc.errors())
    return JSONResponse(
        status_code=HTTP_UNPROCESSABLE,
        content={
            "error": ErrorKind.VALIDATION.value,
            "message": "Invalid request",
            "detail": jsonable_encoder(exc.errors())
        }
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning(
        "http_exception",
        path=request.url.path,
        status_code=exc.status_code,
        detail=exc.detail
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error("unexpected_exception", path=request.url.path, error=str(exc), exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


# ============================================================================
# Application Factory
# ============================================================================

def create_app(
    settings: Optional[Settings] = None,
    store: Optional[Store] = None,
    registry: Optional[CollectorRegistry] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings (defaults to the cached settings)
        store: Backing store to use instead of the configured one; the
            caller keeps ownership and closes it
        registry: Prometheus registry (defaults to the global registry)

    Returns:
        Configured application
    """
    settings = settings or get_settings()
    registry = registry or REGISTRY

    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.log_format == "json",
        service_name=settings.app_name,
        environment=settings.environment
    )

    repository_metrics = RepositoryMetrics(registry) if settings.metrics_enabled else None
    http_metrics = HttpMetrics(registry) if settings.metrics_enabled else None

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info(
            "application_starting",
            app_name=settings.app_name,
            version=settings.app_version,
            environment=settings.environment,
            store_backend=settings.store_backend if store is None else type(store).__name__
        )

        owned = store is None
        try:
            active = store if store is not None else await open_store(settings)
        except Exception as e:
            logger.error("application_startup_failed", error=str(e), exc_info=True)
            raise

        AppState(active, repository_metrics).install(app)
        logger.info("application_started", app_name=settings.app_name)

        try:
            yield
        finally:
            logger.info("application_shutting_down")
            if owned:
                try:
                    await active.close()
                except Exception as e:
                    logger.error("application_shutdown_failed", error=str(e), exc_info=True)
            logger.info("application_shutdown_complete")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="CRUD services for call statuses and the marketing back office.",
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.settings = settings

    app.add_middleware(RequestLoggingMiddleware, http_metrics=http_metrics)

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # ========================================================================
    # Health and Readiness Endpoints
    # ========================================================================

    @app.get("/health", tags=["Health"])
    async def health_check() -> Dict[str, Any]:
        """Liveness check; does not touch the store."""
        return ServiceInfo(
            service_name=settings.app_name,
            version=settings.app_version,
            environment=settings.environment,
            status=HealthStatus.HEALTHY
        ).model_dump()

    @app.get("/ready", tags=["Health"])
    async def readiness_check(request: Request) -> JSONResponse:
        """Readiness check; verifies the backing store answers."""
        healthy = await request.app.state.store.ping()
        info = ServiceInfo(
            service_name=settings.app_name,
            version=settings.app_version,
            environment=settings.environment,
            status=HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY,
            dependencies={"store": HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY}
        )
        return JSONResponse(
            status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
            content=info.model_dump()
        )

    if settings.metrics_enabled:
        render_metrics = get_metrics_handler(registry)

        @app.get(settings.metrics_endpoint, tags=["Monitoring"])
        async def metrics() -> Response:
            """Prometheus metrics endpoint."""
            return Response(content=render_metrics(), media_type=CONTENT_TYPE_LATEST)

    # ========================================================================
    # API Router Registration
    # ========================================================================

    app.include_router(call_statuses.router, prefix=settings.api_prefix)
    app.include_router(hierarchy.router, prefix=settings.api_prefix)
    app.include_router(profiles.router, prefix=settings.api_prefix)
    app.include_router(schedules.router, prefix=settings.api_prefix)

    return app


if __name__ == "__main__":
    settings = get_settings()
    logger.info("starting_uvicorn_server", host=settings.host, port=settings.port, reload=settings.debug)

    uvicorn.run(
        "backoffice.src.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
