"""Response envelope parts shared by every endpoint."""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Notification(BaseModel):
    """Advisory message attached to a successful response."""
    type: str = "warning"
    message: str


class PaginationMeta(BaseModel):
    """Pagination block, serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_items: int
    current_page: int
    items_per_page: int
    total_pages: int
    url_path: str
    url_query: Optional[str] = None
    next_page: Optional[str] = None
    prev_page: Optional[str] = None


class SortMeta(BaseModel):
    column: str
    dir: str


class AppliedFilter(BaseModel):
    field: str
    value: Any


class AvailableFilter(BaseModel):
    field: str
    label: str
    values: list[Any] = []


class FiltersMeta(BaseModel):
    applied: Optional[AppliedFilter] = None
    available: list[AvailableFilter] = []
