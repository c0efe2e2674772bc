"""
Prometheus instrumentation.
"""
import structlog
from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from app.core.config import settings

logger = structlog.get_logger(__name__)

EXCLUDED_HANDLERS = ["/health", "/health/ready", "/health/live", "/docs", "/redoc", "/openapi.json"]


def setup_metrics(app: FastAPI) -> None:
    """Instrument the app and expose metrics at ``settings.METRICS_PATH``."""
    if not settings.METRICS_ENABLED:
        return

    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=[settings.METRICS_PATH, *EXCLUDED_HANDLERS],
        inprogress_name="http_requests_inprogress",
        inprogress_labels=True,
    )
    instrumentator.instrument(app).expose(app, endpoint=settings.METRICS_PATH)
    logger.info("prometheus_metrics_enabled", path=settings.METRICS_PATH)
