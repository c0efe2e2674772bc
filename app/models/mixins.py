"""Resource behaviour shared by models exposed through the API."""
from decimal import Decimal
from typing import Any, ClassVar, Optional

from sqlalchemy import Boolean, Integer, Numeric

from app.services.resource_logger import log_defaults_application


def is_empty_value(value: Any) -> bool:
    return value is None or value == "" or value == []


class ResourceMixin:
    """
    Metadata and hooks read by the generic resource controller.

    Subclasses override the class attributes to describe how the resource is
    listed (``index_columns``), edited (``api_schema``) and filtered
    (``api_filters``), plus the defaults used when a payload leaves a field
    empty.
    """

    index_columns: ClassVar[Optional[list[dict]]] = None
    api_schema: ClassVar[Optional[list[dict]]] = None
    api_filters: ClassVar[Optional[dict[str, dict]]] = None
    database_defaults: ClassVar[dict[str, Any]] = {}
    hidden_fields: ClassVar[tuple[str, ...]] = ()
    soft_deletes: ClassVar[bool] = False

    @classmethod
    def cast_default(cls, field: str, value: Any) -> Any:
        """Cast a default to the python type of its column."""
        column = cls.__table__.columns.get(field)
        if column is None or value is None:
            return value
        if isinstance(column.type, Boolean):
            return bool(value)
        if isinstance(column.type, Integer):
            return int(value)
        if isinstance(column.type, Numeric):
            return Decimal(str(value)) if column.type.asdecimal else float(value)
        return value

    @classmethod
    def apply_database_defaults(cls, data: dict, is_update: bool = False) -> dict:
        """
        Fill empty values with the model's defaults.

        On create, missing fields and fields sent as null, "" or [] get their
        default. On update only fields present in the payload are touched.
        """
        applied = {}
        for field, default in cls.database_defaults.items():
            if field in data:
                if not is_empty_value(data[field]):
                    continue
            elif is_update:
                continue
            data[field] = cls.cast_default(field, default)
            applied[field] = data[field]

        if applied:
            log_defaults_application(
                cls.__name__,
                applied,
                operation="update" if is_update else "create",
            )
        return data

    @classmethod
    def prepare_data(cls, data: dict, is_update: bool = False) -> dict:
        """Hook for resource specific payload adjustments before persisting."""
        return data
