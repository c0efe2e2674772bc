"""
Envelope builders for JSON responses.
"""
from typing import Any, Optional, Sequence

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.schemas.envelope import FiltersMeta, Notification, PaginationMeta, SortMeta

DEFAULT_COLUMNS = [
    {
        "field": "id",
        "label": "ID",
        "sortable": True,
        "clickable": True,
        "search": False,
        "format": "text",
        "align": "left",
    }
]


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    return jsonable_encoder(value)


def success_response(
    data: Any = None,
    message: str = "Request processed successfully",
    status_code: int = status.HTTP_200_OK,
    pagination: Optional[PaginationMeta] = None,
    search: Optional[str] = None,
    sort: Optional[SortMeta] = None,
    filters: Optional[FiltersMeta] = None,
    schema: Optional[list[dict]] = None,
    columns: Optional[list[dict]] = None,
    notifications: Optional[Sequence[Notification]] = None,
) -> JSONResponse:
    """Build a success envelope. Empty notifications serialize as null."""
    content = {
        "success": True,
        "message": message,
        "data": _dump(data),
        "pagination": _dump(pagination),
        "search": search,
        "sort": _dump(sort),
        "filters": _dump(filters),
        "schema": _dump(schema),
        "columns": _dump(columns or DEFAULT_COLUMNS),
        "notifications": [_dump(n) for n in notifications] if notifications else None,
    }
    return JSONResponse(status_code=status_code, content=content)


def error_response(
    code: str,
    message: str,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    details: Any = None,
    validation_errors: Optional[dict[str, list[str]]] = None,
) -> JSONResponse:
    """Build an error envelope. Error envelopes never carry notifications."""
    error = {
        "code": code,
        "message": message,
        "details": _dump(details),
    }
    if validation_errors is not None:
        error["validation_errors"] = validation_errors

    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "error": error},
    )
