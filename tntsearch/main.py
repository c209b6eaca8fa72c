"""Main FastAPI application module."""

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette import status

from tntsearch.api.v1.router import router as v1_router
from tntsearch.api.v1.torrents import router as torrents_router
from tntsearch.core.config import Settings, settings
from tntsearch.core.events import create_lifespan
from tntsearch.middleware.correlation import CorrelationMiddleware
from tntsearch.middleware.errors import (
    ErrorHandlingMiddleware,
    register_exception_handlers,
)
from tntsearch.middleware.metrics import MetricsMiddleware


def create_app(app_settings: Settings = settings, bootstrap: bool = True) -> FastAPI:
    """Build the application.

    Args:
        app_settings: Settings to build the application with
        bootstrap: Run the startup/shutdown lifespan (schema creation and
            catalog seeding); tests that wire their own database disable it

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=app_settings.app_name,
        description="Search engine for the TNTVillage release dump",
        version=app_settings.version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        default_response_class=JSONResponse,
        lifespan=create_lifespan(app_settings) if bootstrap else None,
    )

    # Add middleware in order (inside -> out):
    # 1. CORS (outermost)
    # 2. Correlation (adds request ID)
    # 3. Metrics (tracks all requests)
    # 4. Error handling (innermost - handles all errors)
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(CorrelationMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=app_settings.cors_allow_credentials,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=600,
    )
    register_exception_handlers(app)

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose Prometheus metrics."""
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/", include_in_schema=False)
    async def root_redirect() -> Response:
        """Redirect root path to docs."""
        return RedirectResponse(
            url="/docs", status_code=status.HTTP_307_TEMPORARY_REDIRECT
        )

    app.include_router(torrents_router, prefix=app_settings.api_prefix)
    app.include_router(v1_router, prefix=app_settings.api_prefix)
    return app


app = create_app()
