"""
Main application entrypoint for the admin panel service.

This FastAPI app exposes user and profile management under /api/v1 plus the
operational endpoints:
  - /health: shallow liveness probe to confirm the process is running
  - /ready: readiness probe to ensure the store and config load
  - /metrics: Prometheus exposition endpoint for scraping

Structure:
  admin_panel/
    api/v1/     routers, request/response schemas, dependencies
    core/       config, logging, errors, store, access rules, metrics
    models/     domain entities
    services/   business rules over the store

Business rules live in services; route handlers only translate HTTP to
service calls and apply the permission gates.
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from admin_panel.api.v1.routes import api_router
from admin_panel.core.config import ApplicationSettings, get_application_settings
from admin_panel.core.errors import AdminPanelError
from admin_panel.core.logging import get_logger, setup_logging
from admin_panel.core.metrics import create_metrics
from admin_panel.core.store import EntityStore, InMemoryEntityStore
from admin_panel.services.auth import AuthService
from admin_panel.services.profiles import ProfileService
from admin_panel.services.seed import seed_store
from admin_panel.services.users import UserService

# Initialize logging on module load
setup_logging()
logger = get_logger(__name__)


def create_app(
    store: Optional[EntityStore] = None,
    settings: Optional[ApplicationSettings] = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Parameters
    ----------
    store : EntityStore, optional
        Store shared by every service of this app. A fresh in-memory store is
        created (and seeded when enabled) if omitted.
    settings : ApplicationSettings, optional
        Overrides the environment-derived settings.

    Returns
    -------
    FastAPI
        Configured FastAPI app with metadata and routes registered.
    """
    settings = settings or get_application_settings()

    app = FastAPI(
        title="Admin Panel",
        version=settings.version,
        docs_url="/docs",
        openapi_url="/openapi.json",
        description="User and profile management with email-only login and permission-gated actions.",
    )

    if store is None:
        store = InMemoryEntityStore()
        if settings.seed_data:
            seed_store(store)

    metrics = create_metrics()
    app.state.settings = settings
    app.state.metrics = metrics
    app.state.store = store
    app.state.auth_service = AuthService(store)
    app.state.profile_service = ProfileService(store)
    app.state.user_service = UserService(store, reject_inactive_delete=settings.reject_inactive_delete)

    if settings.allow_origin:
        logger.warning("Setting allow origin to %s", settings.allow_origin)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[settings.allow_origin],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(AdminPanelError)
    async def domain_error_handler(_request: Request, exc: AdminPanelError) -> JSONResponse:
        metrics.errors.labels(kind=exc.kind).inc()
        logger.info("Request rejected (%s): %s", exc.kind, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = dict()
        for error in exc.errors():
            if "loc" not in error or "msg" not in error:
                continue
            key = error["loc"][-1]
            errors[key] = error["msg"]
        metrics.errors.labels(kind="validation").inc()
        logger.info("Request validation error %s", errors)
        return JSONResponse(status_code=400, content=jsonable_encoder(errors))

    @app.get("/health", tags=["ops"])  # Shallow liveness
    def health() -> dict[str, str]:
        """Return basic liveness signal."""
        return {"status": "ok"}

    @app.get("/ready", tags=["ops"])  # Deeper readiness
    def ready() -> dict[str, str]:
        """Return readiness based on settings loading and the store answering reads."""
        try:
            _ = get_application_settings()
            store.all_profiles()
            metrics.readiness.set(1)
            return {"status": "ready"}
        except Exception as e:
            logger.error(f"Readiness check failed: {e}", exc_info=True)
            metrics.readiness.set(0)
            return {"status": "not_ready", "error": str(type(e).__name__)}

    @app.get("/metrics", tags=["ops"])  # Prometheus exposition
    def metrics_endpoint() -> Response:
        """Expose Prometheus metrics for scraping."""
        data = generate_latest(metrics.registry)
        return Response(content=data, media_type=CONTENT_TYPE_LATEST)

    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()
