"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finance_tracker.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finance_tracker.api.v1 import dashboard, debts, financial_health, insights
from finance_tracker.infrastructure.observability.logging import setup_logging
from finance_tracker.config import settings

setup_logging(settings.log_level, settings.service_name)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Finance Tracker",
        description="Financial health scoring, debt payoff planning and spending insights",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added = first executed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(financial_health.router, prefix="/v1", tags=["financial-health"])
    app.include_router(dashboard.router, prefix="/v1", tags=["dashboard"])
    app.include_router(debts.router, prefix="/v1", tags=["debts"])
    app.include_router(insights.router, prefix="/v1", tags=["insights"])

    return app


app = create_app()
