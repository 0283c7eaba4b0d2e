from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from webapp.api.users import router as users_router
from webapp.config import get_settings
from webapp.db.mongo import DocumentStore
from webapp.models.schemas import HealthResponse
from webapp.observability import RequestMetricsMiddleware, configure_logging
from webapp.observability.metrics import MetricsSink

_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _connect_backends(app: FastAPI) -> None:
    settings = get_settings()
    log = structlog.get_logger("startup")

    if app.state.metrics_sink is None:
        try:
            app.state.metrics_sink = MetricsSink.connect(
                host=settings.influx_host,
                port=settings.influx_port,
                username=settings.influx_user,
                password=settings.influx_password,
                database=settings.influx_database,
                precision=settings.influx_precision,
            )
        except Exception:
            log.exception("metrics_sink_unavailable", host=settings.influx_host, port=settings.influx_port)
            raise

    if app.state.document_store is None:
        try:
            app.state.document_store = DocumentStore.connect(
                settings.mongo_uri,
                settings.mongo_database,
                timeout_s=settings.mongo_connect_timeout_s,
            )
        except Exception:
            log.exception("document_store_unavailable", database=settings.mongo_database)
            raise

    log.info("ready", host=settings.host, port=settings.port)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging(get_settings().log_level)
    # Either backend being unreachable aborts startup before any request is served.
    _connect_backends(app)
    try:
        yield
    finally:
        if app.state.document_store is not None:
            app.state.document_store.close()
        if app.state.metrics_sink is not None:
            app.state.metrics_sink.close()


def create_app(
    document_store: DocumentStore | None = None,
    metrics_sink: MetricsSink | None = None,
) -> FastAPI:
    """Build the application.

    Handles passed in are used as-is; missing ones are connected from settings
    when the app starts.
    """

    app = FastAPI(title="Users Webapp", version="0.1.0", lifespan=lifespan)
    app.state.document_store = document_store
    app.state.metrics_sink = metrics_sink
    app.add_middleware(RequestMetricsMiddleware)
    app.include_router(users_router)

    @app.api_route("/health", methods=_ALL_METHODS, response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="up")

    return app


app = create_app()
