"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from ops_console.api.middleware import RequestIDMiddleware, MetricsMiddleware
from ops_console.api.v1 import balance, payroll, rosters, transactions
from ops_console.infrastructure.observability.logging import setup_logging
from ops_console.config import settings

setup_logging(settings.log_level)

ROUTERS = (
    (balance.router, "balance"),
    (transactions.router, "transactions"),
    (payroll.router, "payroll"),
    (rosters.router, "rosters"),
)


def create_app() -> FastAPI:
    """Build the console API; calculators stay in the domain package"""
    app = FastAPI(
        title="Operations Console",
        description="Payroll, bank balance and roster rules over the operations store",
        version="0.1.0",
    )

    # Last added runs first, so every metric sees a request id
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "service": settings.service_name,
            "store_backend": settings.store_backend,
        }

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for router, tag in ROUTERS:
        app.include_router(router, prefix="/v1", tags=[tag])

    return app


app = create_app()
