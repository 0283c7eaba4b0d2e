"""Observability helpers: structlog logging, request metrics middleware and the InfluxDB sink."""

from webapp.observability.logging import configure_logging
from webapp.observability.metrics import MetricsSink
from webapp.observability.middleware import RequestMetricsMiddleware

__all__ = ["MetricsSink", "RequestMetricsMiddleware", "configure_logging"]
