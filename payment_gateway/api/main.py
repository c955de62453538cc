"""FastAPI application factory"""

import logging

import uvicorn
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from payment_gateway.api.errors import register_error_handlers
from payment_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from payment_gateway.api.routes import admin, payment
from payment_gateway.config import Settings, settings as default_settings
from payment_gateway.domain.credentials import CredentialStore
from payment_gateway.domain.ledger import AccountLedger
from payment_gateway.domain.pipeline import PaymentPipeline
from payment_gateway.domain.ports import SnapshotStore
from payment_gateway.infrastructure.observability.logging import setup_logging
from payment_gateway.infrastructure.stores import build_store


def create_app(settings: Settings | None = None, store: SnapshotStore | None = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Credentials and accounts are loaded here; an unreadable store raises
    StoreError and the process must not start.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level)

    store = store or build_store(settings)
    credentials = CredentialStore.load(store)
    ledger = AccountLedger.load(store)

    app = FastAPI(
        title="Single Payment Gateway",
        description="Validates, authorizes and settles single debit payments",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.credentials = credentials
    app.state.ledger = ledger
    app.state.pipeline = PaymentPipeline(ledger, credentials, txn_timezone=settings.txn_timezone)

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
    app.include_router(payment.router, tags=["payments"])
    app.include_router(admin.router, prefix="/admin", tags=["admin"])

    logging.info(
        "Payment gateway ready",
        extra={
            "store_backend": settings.store_backend,
            "accounts": len(ledger.accounts()),
            "users": len(credentials.usernames()),
        },
    )
    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn"""
    uvicorn.run(
        "payment_gateway.api.main:create_app",
        factory=True,
        host=default_settings.host,
        port=default_settings.port,
        log_config=None,
    )
