"""Page/size resolution and paginated execution of list queries."""
import math
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlencode

from fastapi import Request
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.schemas.envelope import Notification, PaginationMeta

PAGINATION_PARAMS = ("page", "per_page")


@dataclass
class Page:
    items: list[Any]
    meta: PaginationMeta


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def resolve_page(raw_page: Optional[str], notifications: list[Notification]) -> int:
    if raw_page is None:
        return 1
    page = _parse_int(raw_page)
    if page is None or page < 1:
        notifications.append(Notification(message="Invalid page number, using page 1"))
        return 1
    return page


def resolve_per_page(raw_per_page: Optional[str], notifications: list[Notification]) -> int:
    default = settings.DEFAULT_PAGE_SIZE
    if raw_per_page is None:
        return default

    per_page = _parse_int(raw_per_page)
    if per_page is None:
        notifications.append(Notification(
            message=f"Page size must be a positive integer. Using default value of {default}."
        ))
        return default
    if per_page > settings.MAX_PAGE_SIZE:
        notifications.append(Notification(
            message=f"Page size exceeds maximum of {settings.MAX_PAGE_SIZE}, "
                    f"using maximum {settings.MAX_PAGE_SIZE}."
        ))
        return settings.MAX_PAGE_SIZE
    if per_page < settings.MIN_PAGE_SIZE:
        notifications.append(Notification(
            message=f"Page size below minimum of {settings.MIN_PAGE_SIZE}, "
                    f"using minimum {settings.MIN_PAGE_SIZE}."
        ))
        return settings.MIN_PAGE_SIZE
    return per_page


def build_pagination_meta(
    request: Request,
    total: int,
    page: int,
    per_page: int,
    last_page: int,
) -> PaginationMeta:
    remaining = [
        (key, value)
        for key, value in request.query_params.multi_items()
        if key not in PAGINATION_PARAMS
    ]
    return PaginationMeta(
        total_items=total,
        current_page=page,
        items_per_page=per_page,
        total_pages=last_page,
        url_path=str(request.url.replace(query="")),
        url_query=urlencode(remaining) if remaining else None,
        next_page=str(page + 1) if page < last_page else None,
        prev_page=str(page - 1) if page > 1 else None,
    )


async def paginate(
    db: AsyncSession,
    stmt: Select,
    request: Request,
    notifications: list[Notification],
) -> Page:
    """
    Run ``stmt`` for the requested page.

    A page past the end is clamped to the last page. When the query has no
    rows the result is an empty first page.
    """
    params = request.query_params
    page = resolve_page(params.get("page"), notifications)
    per_page = resolve_per_page(params.get("per_page"), notifications)

    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = (await db.execute(count_stmt)).scalar_one()
    last_page = max(1, math.ceil(total / per_page))

    if page > last_page:
        if total > 0:
            notifications.append(Notification(
                message=f"Requested page {page} exceeds available pages. Showing page {last_page}."
            ))
        page = last_page

    result = await db.execute(stmt.offset((page - 1) * per_page).limit(per_page))
    items = list(result.scalars().all())

    return Page(items=items, meta=build_pagination_meta(request, total, page, per_page, last_page))
