"""Single ``field:value`` filter over a resource's declared filters."""
import operator
from typing import Any, Optional

from sqlalchemy import Boolean, Integer, Numeric, Select

from app.schemas.envelope import AppliedFilter, AvailableFilter, FiltersMeta, Notification
from app.services.metadata import humanize

OPERATORS = {
    "=": operator.eq,
    "!=": operator.ne,
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
    "like": lambda column, value: column.ilike(f"%{value}%"),
}

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


def _coerce(column, value: str) -> Any:
    """Convert a query-string value to the column's python type."""
    if isinstance(column.type, Boolean):
        lowered = value.lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
        raise ValueError(value)
    if isinstance(column.type, Integer):
        return int(value)
    if isinstance(column.type, Numeric):
        return float(value)
    return value


def apply_filter(
    stmt: Select,
    resource,
    raw_filter: Optional[str],
    notifications: list[Notification],
) -> tuple[Select, Optional[AppliedFilter]]:
    """
    Apply the ``filter`` query parameter.

    Invalid filters are ignored with a warning notification.

    Returns:
        The statement and the applied filter, if any
    """
    if raw_filter is None or not raw_filter.strip():
        return stmt, None

    if ":" not in raw_filter:
        notifications.append(Notification(
            message=f"Filter format '{raw_filter}' not recognized, filter ignored"
        ))
        return stmt, None

    if not resource.filters:
        notifications.append(Notification(message="Filtering is not supported for this resource"))
        return stmt, None

    field, _, value = raw_filter.partition(":")
    field, value = field.strip(), value.strip()

    config = resource.filters.get(field)
    if config is None:
        notifications.append(Notification(message=f"Invalid filter field: {field}"))
        return stmt, None

    if not value or value.lower() == "all":
        return stmt, None

    allowed = config.get("values")
    if allowed and value not in [str(v) for v in allowed]:
        notifications.append(Notification(
            message=f"Invalid filter value '{value}' for field '{field}'"
        ))
        return stmt, None

    column = getattr(resource.model, config.get("column", field))
    compare = OPERATORS.get(config.get("operator", "="), operator.eq)
    try:
        typed_value = _coerce(column, value)
    except ValueError:
        notifications.append(Notification(
            message=f"Invalid filter value '{value}' for field '{field}'"
        ))
        return stmt, None

    return stmt.where(compare(column, typed_value)), AppliedFilter(field=field, value=value)


def build_filters_meta(resource, applied: Optional[AppliedFilter]) -> Optional[FiltersMeta]:
    """Filters block for the envelope; None when the resource declares no filters."""
    if not resource.filters:
        return None
    available = [
        AvailableFilter(
            field=field,
            label=config.get("label") or humanize(field),
            values=list(config.get("values", [])),
        )
        for field, config in resource.filters.items()
    ]
    return FiltersMeta(applied=applied, available=available)
