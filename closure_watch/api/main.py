"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from closure_watch.api.errors import register_error_handlers
from closure_watch.api.middleware import RequestIDMiddleware, MetricsMiddleware
from closure_watch.api.v1 import connection, scan
from closure_watch.infrastructure.database.session import init_db
from closure_watch.infrastructure.observability.logging import setup_logging
from closure_watch.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        lifespan=lifespan,
        title="Closure Watch",
        description="Flags dormant negative-balance accounts before involuntary closure",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_error_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(scan.router, prefix="/v1", tags=["scans"])
    app.include_router(connection.router, prefix="/v1", tags=["connection"])

    return app


app = create_app()
