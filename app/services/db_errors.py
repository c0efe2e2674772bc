"""
Translation of database integrity errors into API errors.

Driver messages differ between PostgreSQL (asyncpg) and SQLite, so each
pattern below knows both spellings.
"""
import re
from typing import Optional

from sqlalchemy.exc import IntegrityError

from app.core.errors import ApiError, ConflictError, ValidationFailedError

UNIQUE_PATTERNS = (
    # SQLite: UNIQUE constraint failed: products.sku
    re.compile(r"UNIQUE constraint failed: (?:\w+\.)?(?P<field>\w+)", re.IGNORECASE),
    # PostgreSQL: Key (sku)=(ABC) already exists.
    re.compile(r"Key \((?P<field>[\w, ]+)\)=\((?P<value>.*?)\) already exists", re.IGNORECASE),
    re.compile(r"duplicate key value violates unique constraint \"(?P<constraint>\w+)\"", re.IGNORECASE),
)

NOT_NULL_PATTERNS = (
    re.compile(r"NOT NULL constraint failed: (?:\w+\.)?(?P<field>\w+)", re.IGNORECASE),
    re.compile(r"null value in column \"(?P<field>\w+)\"", re.IGNORECASE),
)

FOREIGN_KEY_PATTERNS = (
    re.compile(r"FOREIGN KEY constraint failed", re.IGNORECASE),
    re.compile(r"violates foreign key constraint \"(?P<constraint>\w+)\"", re.IGNORECASE),
)


def _match(patterns, message: str) -> Optional[re.Match]:
    for pattern in patterns:
        match = pattern.search(message)
        if match:
            return match
    return None


def parse_integrity_error(exc: IntegrityError) -> ApiError:
    """
    Map an IntegrityError to a client-facing API error.

    Unique violations become 409 CONFLICT. NOT NULL and foreign key
    violations become 422 VALIDATION_ERROR naming the field when known.
    """
    message = str(exc.orig) if exc.orig is not None else str(exc)

    match = _match(UNIQUE_PATTERNS, message)
    if match:
        groups = match.groupdict()
        field = groups.get("field") or groups.get("constraint")
        details = {"type": "unique", "field": field}
        if groups.get("value") is not None:
            details["value"] = groups["value"]
        return ConflictError(
            message=f"A resource with this {field} already exists",
            details=details,
        )

    match = _match(NOT_NULL_PATTERNS, message)
    if match:
        field = match.group("field")
        return ValidationFailedError(
            details={"type": "not_null", "field": field},
            validation_errors={field: ["This field is required"]},
        )

    match = _match(FOREIGN_KEY_PATTERNS, message)
    if match:
        return ValidationFailedError(
            message="Referenced resource does not exist",
            details={"type": "foreign_key", "constraint": match.groupdict().get("constraint")},
        )

    return ValidationFailedError(
        message="The data violates a database constraint",
        details={"type": "integrity"},
    )
