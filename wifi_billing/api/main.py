"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from wifi_billing.api.middleware import RequestIDMiddleware, MetricsMiddleware
from wifi_billing.api.v1 import customers, history, invoice, reconciliation
from wifi_billing.domain.toggle import ProcessingMarkers
from wifi_billing.infrastructure.observability.logging import setup_logging
from wifi_billing.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="WiFi Billing Service",
        description="Subscriber registry, monthly payment reconciliation and invoices",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Shared across requests for the lifetime of the process
    app.state.processing_markers = ProcessingMarkers()

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(reconciliation.router, prefix="/v1", tags=["reconciliation"])
    app.include_router(customers.router, prefix="/v1", tags=["customers"])
    app.include_router(history.router, prefix="/v1", tags=["payments"])
    app.include_router(invoice.router, prefix="/v1", tags=["invoices"])

    return app


app = create_app()
