"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from billing_engine.api.middleware import RequestIDMiddleware, MetricsMiddleware
from billing_engine.api.v1 import invoices, schedules
from billing_engine.infrastructure.keyed_store import InMemoryKeyedStore, KeyedStore
from billing_engine.infrastructure.observability.logging import setup_logging
from billing_engine.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app(keyed_store: KeyedStore | None = None) -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="CRM Billing Engine",
        description="Invoice pricing and payment/recurring schedule generation",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # One store per app so test clients never share idempotency state
    app.state.keyed_store = keyed_store or InMemoryKeyedStore(ttl_seconds=settings.idempotency_ttl_seconds)

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
    app.include_router(invoices.router, prefix="/v1", tags=["invoices"])
    app.include_router(schedules.router, prefix="/v1", tags=["schedules"])

    return app


app = create_app()
