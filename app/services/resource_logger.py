"""Structured log events for resource operations."""
from typing import Any, Optional

import structlog

logger = structlog.get_logger("app.resources")


def log_defaults_application(resource: str, applied: dict[str, Any], operation: str) -> None:
    logger.info(
        "resource_defaults_applied",
        resource=resource,
        operation=operation,
        fields=sorted(applied),
    )


def log_resource_success(
    resource: str,
    operation: str,
    resource_id: Optional[int] = None,
    **context: Any,
) -> None:
    logger.info(
        f"resource_{operation}",
        resource=resource,
        resource_id=resource_id,
        **context,
    )


def log_resource_error(resource: str, operation: str, error: str, **context: Any) -> None:
    logger.warning(
        "resource_operation_failed",
        resource=resource,
        operation=operation,
        error=error,
        **context,
    )


def log_query_notifications(resource: str, notifications: list) -> None:
    """Log advisory notifications produced while building a list query."""
    if not notifications:
        return
    logger.info(
        "resource_query_adjusted",
        resource=resource,
        notifications=[n.message for n in notifications],
    )
