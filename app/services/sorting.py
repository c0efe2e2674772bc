"""Ordering of list queries."""
from typing import Optional

from sqlalchemy import Select

from app.schemas.envelope import Notification, SortMeta

DEFAULT_SORT_COLUMN = "id"
SORT_DIRECTIONS = ("asc", "desc")


def sortable_columns(resource) -> list[str]:
    """Columns a client may sort on: sortable index columns plus created_at and id."""
    table_columns = resource.model.__table__.columns
    if resource.columns:
        candidates = [c["field"] for c in resource.columns if c["sortable"]] + ["created_at"]
    else:
        candidates = ["created_at", "updated_at"]
    candidates.insert(0, DEFAULT_SORT_COLUMN)
    return [name for name in dict.fromkeys(candidates) if name in table_columns]


def resolve_direction(raw_direction: Optional[str], notifications: list[Notification]) -> str:
    direction = (raw_direction or "asc").strip().lower()
    if direction not in SORT_DIRECTIONS:
        notifications.append(Notification(
            message=f"Sort direction '{raw_direction}' not recognized, using 'asc'"
        ))
        direction = "asc"
    return direction


def apply_sort(
    stmt: Select,
    resource,
    raw_column: Optional[str],
    raw_direction: Optional[str],
    notifications: list[Notification],
) -> tuple[Select, Optional[SortMeta]]:
    """
    Order ``stmt`` by the requested column and direction.

    Without a ``sort`` parameter rows come back by id ascending and no sort
    metadata is reported. A bad ``dir`` is still reported in that case.
    """
    model = resource.model
    if raw_column is None or not raw_column.strip():
        resolve_direction(raw_direction, notifications)
        return stmt.order_by(model.id.asc()), None

    column = raw_column.strip()
    if column not in sortable_columns(resource):
        notifications.append(Notification(
            message=f"Sort column '{column}' not found, using default '{DEFAULT_SORT_COLUMN}'"
        ))
        column = DEFAULT_SORT_COLUMN

    direction = resolve_direction(raw_direction, notifications)

    attribute = getattr(model, column)
    order = attribute.desc() if direction == "desc" else attribute.asc()
    stmt = stmt.order_by(order)
    if column != DEFAULT_SORT_COLUMN:
        # Stable pages when the sort column has ties
        stmt = stmt.order_by(model.id.asc())

    return stmt, SortMeta(column=column, dir=direction)
