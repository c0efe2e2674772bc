"""Free-text search over a resource's searchable columns."""
from typing import Optional

from sqlalchemy import Select, String, Text, cast, or_

from app.core.config import settings
from app.schemas.envelope import Notification

# Name fragments that mark a text column as searchable when no index column
# opts in explicitly
SEARCH_NAME_HINTS = (
    "name", "title", "description", "email", "username", "content",
    "notes", "brand", "sku", "model", "category",
)


def searchable_fields(resource) -> list[str]:
    """Index columns flagged for search, else text columns with a telling name."""
    table_columns = resource.model.__table__.columns
    if resource.columns:
        flagged = [c["field"] for c in resource.columns if c["search"] and c["field"] in table_columns]
        if flagged:
            return flagged

    hidden = set(getattr(resource.model, "hidden_fields", ()))
    return [
        column.name
        for column in table_columns
        if isinstance(column.type, (String, Text))
        and column.name not in hidden
        and "password" not in column.name
        and any(hint in column.name for hint in SEARCH_NAME_HINTS)
    ]


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def apply_search(
    stmt: Select,
    resource,
    raw_term: Optional[str],
    notifications: list[Notification],
) -> tuple[Select, Optional[str]]:
    """
    Restrict ``stmt`` to rows matching the search term in any searchable field.

    Returns:
        The statement and the applied term (None when no search was applied)
    """
    if raw_term is None:
        return stmt, None

    term = raw_term.strip()
    if not term:
        return stmt, None

    if len(term) < settings.MIN_SEARCH_LENGTH:
        notifications.append(Notification(
            message=f"Search term too short (minimum {settings.MIN_SEARCH_LENGTH} characters), search ignored"
        ))
        return stmt, None

    fields = searchable_fields(resource)
    if not fields:
        notifications.append(Notification(message="Search is not supported for this resource."))
        return stmt, None

    pattern = f"%{_escape_like(term)}%"
    conditions = []
    for field in fields:
        column = getattr(resource.model, field)
        if not isinstance(column.type, (String, Text)):
            column = cast(column, String)
        conditions.append(column.ilike(pattern, escape="\\"))

    return stmt.where(or_(*conditions)), term
