"""
Schema and column metadata for resources.

Models describe their form fields and list columns declaratively. This
module validates those declarations, fills in presentation defaults, and
generates a fallback description from the table when a model declares
nothing.
"""
from numbers import Number
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, Date, DateTime, Float, Integer, Numeric, String, Text, Time

from app.core.responses import DEFAULT_COLUMNS

ALLOWED_FIELD_TYPES = frozenset({
    "string", "text", "email", "password", "url", "tel",
    "number", "integer", "decimal", "float", "percentage",
    "boolean", "checkbox",
    "date", "datetime", "time",
    "select", "radio", "multiselect",
    "file", "image",
    "array", "object", "json",
    "textarea", "tags",
})

ALLOWED_FIELD_KEYS = frozenset({
    "field", "type", "label", "placeholder", "help", "required", "readonly",
    "default", "min", "max", "step", "minlength", "maxlength", "maxLength",
    "pattern", "options", "multiple", "accept", "properties", "unique",
    "minItems", "maxItems", "prefix", "suffix", "order", "attributes",
})

COLUMN_KEYS = ("field", "label", "sortable", "clickable", "search", "format", "align")

COLUMN_FORMATS = frozenset({"text", "currency", "number", "boolean", "date", "datetime"})

SYSTEM_FIELDS = frozenset({"id", "created_at", "updated_at", "deleted_at"})

# Columns shown by the generated index, after id
LIST_FIELD_HINTS = ("number", "name", "title", "username", "email", "sku", "status")


def humanize(field: str) -> str:
    return field.replace("_", " ").strip().title()


def default_align(fmt: str) -> str:
    if fmt in ("currency", "number"):
        return "right"
    if fmt == "boolean":
        return "center"
    return "left"


def normalize_columns(columns: list[dict]) -> list[dict]:
    """
    Fill presentation defaults for declared index columns.

    Raises:
        ValueError: On a column without a field, an unknown format, or a
            field declared twice
    """
    normalized = []
    seen = set()
    for column in columns:
        field = column.get("field")
        if not field or not isinstance(field, str):
            raise ValueError(f"Index column is missing a field name: {column!r}")
        if field in seen:
            raise ValueError(f"Index column '{field}' is declared more than once")
        seen.add(field)

        fmt = column.get("format", "text")
        if fmt not in COLUMN_FORMATS:
            raise ValueError(f"Index column '{field}' has unknown format '{fmt}'")

        normalized.append({
            "field": field,
            "label": column.get("label") or humanize(field),
            "sortable": bool(column.get("sortable", False)),
            "clickable": bool(column.get("clickable", False)),
            "search": bool(column.get("search", False)),
            "format": fmt,
            "align": column.get("align") or default_align(fmt),
        })
    return normalized


def _validate_field(group: str, field: dict) -> dict:
    name = field.get("field")
    if not name or not isinstance(name, str):
        raise ValueError(f"Schema group '{group}' has a field without a name")

    unknown = set(field) - ALLOWED_FIELD_KEYS
    if unknown:
        raise ValueError(f"Schema field '{name}' has unknown keys: {sorted(unknown)}")

    field_type = field.get("type", "string")
    if field_type not in ALLOWED_FIELD_TYPES:
        raise ValueError(f"Schema field '{name}' has unknown type '{field_type}'")

    for key in ("min", "max"):
        value = field.get(key)
        if value is not None and (isinstance(value, bool) or not isinstance(value, Number)):
            raise ValueError(f"Schema field '{name}' must use a numeric '{key}'")

    if "required" in field and not isinstance(field["required"], bool):
        raise ValueError(f"Schema field '{name}' must use a boolean 'required'")

    return {
        **field,
        "field": name,
        "type": field_type,
        "label": field.get("label") or humanize(name),
    }


def normalize_schema(groups: list[dict]) -> list[dict]:
    """
    Validate a grouped form schema and fill field defaults.

    Raises:
        ValueError: On malformed groups, unknown types or keys, non numeric
            bounds, or a field declared twice
    """
    normalized = []
    seen = set()
    for group in groups:
        title = group.get("group")
        fields = group.get("fields")
        if not title or not isinstance(fields, list):
            raise ValueError(f"Schema group must have a name and a list of fields: {group!r}")

        group_fields = []
        for field in fields:
            checked = _validate_field(title, field)
            if checked["field"] in seen:
                raise ValueError(f"Schema field '{checked['field']}' is declared more than once")
            seen.add(checked["field"])
            group_fields.append(checked)

        normalized.append({"group": title, "fields": group_fields})
    return normalized


def _name_tokens(name: str) -> set[str]:
    return set(name.lower().split("_"))


def detect_field_type(column) -> str:
    """Pick a form field type from a table column's type and name."""
    column_type = column.type
    if isinstance(column_type, Boolean):
        return "checkbox"
    if isinstance(column_type, DateTime):
        return "datetime"
    if isinstance(column_type, Date):
        return "date"
    if isinstance(column_type, Time):
        return "time"
    if isinstance(column_type, JSON):
        return "json"

    tokens = _name_tokens(column.name)
    if "email" in tokens:
        return "email"
    if "password" in tokens:
        return "password"
    if tokens & {"phone", "mobile", "whatsapp", "tel"}:
        return "tel"
    if tokens & {"price", "cost", "amount"}:
        return "decimal"
    if tokens & {"percent", "percentage", "rate"}:
        return "percentage"
    if tokens & {"weight", "height", "width", "length"}:
        return "decimal"
    if tokens & {"quantity", "count", "number"} and isinstance(column_type, (Integer, Numeric)):
        return "number"
    if tokens & {"description", "content", "notes"}:
        return "textarea"
    if tokens & {"image", "photo", "avatar"}:
        return "file"

    if isinstance(column_type, Integer):
        return "number"
    if isinstance(column_type, (Numeric, Float)):
        return "decimal"
    if isinstance(column_type, Text):
        return "textarea"
    return "string"


def _field_properties(column, field_type: str) -> dict[str, Any]:
    tokens = _name_tokens(column.name)
    props: dict[str, Any] = {}

    if field_type in ("decimal", "percentage"):
        props.update(step=0.01, min=0)
    if tokens & {"price", "cost", "amount"}:
        props["prefix"] = "₹"
    if field_type == "percentage":
        props.update(max=100, suffix="%")
    if "weight" in tokens:
        props["suffix"] = "kg"
    elif tokens & {"height", "width", "length"}:
        props["suffix"] = "cm"
    if field_type == "number":
        props.update(step=1, min=0)
    if field_type == "tel":
        props["pattern"] = "^[0-9]{10,15}$"
    if field_type in ("string", "email", "tel", "password") and isinstance(column.type, String):
        if column.type.length:
            props["maxLength"] = column.type.length
    if column.unique:
        props["unique"] = True
    return props


def _is_required(column) -> bool:
    return (
        not column.nullable
        and column.default is None
        and column.server_default is None
    )


def generate_schema(model) -> list[dict]:
    """Build a single-group form schema from the model's table."""
    skipped = SYSTEM_FIELDS | set(getattr(model, "hidden_fields", ()))
    fields = []
    for column in model.__table__.columns:
        if column.name in skipped:
            continue
        field_type = detect_field_type(column)
        label = humanize(column.name)
        field = {
            "field": column.name,
            "type": field_type,
            "label": label,
            "required": _is_required(column),
        }
        if field_type not in ("checkbox", "json", "date", "datetime", "time", "file"):
            field["placeholder"] = f"Enter {label.lower()}"
        field.update(_field_properties(column, field_type))
        fields.append(field)

    return [{"group": "General", "fields": fields}]


def generate_columns(model) -> list[dict]:
    """Build index columns from the model's table: id, name-like fields, created_at."""
    table_columns = model.__table__.columns
    columns = [dict(column) for column in DEFAULT_COLUMNS]
    for hint in LIST_FIELD_HINTS:
        if hint in table_columns:
            columns.append({"field": hint, "sortable": True, "search": True})
    if "created_at" in table_columns:
        columns.append({"field": "created_at", "label": "Created", "sortable": True, "format": "datetime"})
    return normalize_columns(columns)


def columns_for(resource) -> list[dict]:
    """Declared columns, or the default id column."""
    if resource.columns:
        return resource.columns
    return [dict(column) for column in DEFAULT_COLUMNS]


def index_columns_for(resource) -> list[dict]:
    """Columns served by the /columns endpoint: declared, or generated."""
    return resource.columns or generate_columns(resource.model)


def form_schema_for(resource) -> list[dict]:
    """Schema served by the /schema endpoint: declared, or generated."""
    return resource.schema or generate_schema(resource.model)


def list_schema_for(resource) -> Optional[list[dict]]:
    """Schema embedded in list envelopes: only what the model declares."""
    return resource.schema
