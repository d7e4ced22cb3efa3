"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from treasury_pooling.api.middleware import RequestIDMiddleware, MetricsMiddleware
from treasury_pooling.api.v1 import liquidity, reference, snapshots
from treasury_pooling.infrastructure.database.session import init_db
from treasury_pooling.infrastructure.observability.logging import setup_logging
from treasury_pooling.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Treasury Pooling Simulator",
        description="Liquidity aggregation and RTC cash-pooling simulation service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(liquidity.router, prefix="/v1", tags=["liquidity"])
    app.include_router(reference.router, prefix="/v1", tags=["reference"])
    app.include_router(snapshots.router, prefix="/v1", tags=["snapshots"])

    return app


app = create_app()
