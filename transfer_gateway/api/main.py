"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from transfer_gateway.api.errors import handle_transfer_error
from transfer_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from transfer_gateway.api.v1 import transfers
from transfer_gateway.domain.exceptions import TransferError
from transfer_gateway.infrastructure.observability.logging import setup_logging
from transfer_gateway.config import settings


def create_app(log_level: str | None = None) -> FastAPI:
    """Create and configure FastAPI application"""
    setup_logging(log_level or settings.log_level)

    app = FastAPI(
        title="Transfer Gateway",
        description="Atomic funds transfers between ledger accounts",
        version="0.1.0",
    )

    # Last added runs first: request id must be set before metrics and handlers read it
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(TransferError, handle_transfer_error)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(transfers.router, prefix="/v1", tags=["transfers"])

    return app


app = create_app()
