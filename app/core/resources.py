"""
Resource registry.

Models opt into the generic CRUD API with the ``api_resource`` class
decorator. Registration happens when the model module is imported, and the
application builds one router per registered resource at startup.
"""
import re
from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel

from app.services.metadata import normalize_columns, normalize_schema


def pluralize(word: str) -> str:
    if re.search(r"[^aeiou]y$", word):
        return word[:-1] + "ies"
    if re.search(r"(s|x|z|ch|sh)$", word):
        return word + "es"
    return word + "s"


def resource_uri_for(class_name: str) -> str:
    """Derive a kebab-case plural uri from a model class name."""
    kebab = re.sub(r"(?<!^)(?=[A-Z])", "-", class_name).lower()
    head, _, last = kebab.rpartition("-")
    plural = pluralize(last)
    return f"{head}-{plural}" if head else plural


@dataclass
class ResourceConfig:
    """Everything the generic controller needs to serve one model."""
    model: type
    uri: str
    create_schema: type[BaseModel]
    update_schema: type[BaseModel]
    response_schema: type[BaseModel]
    prefix: str = "api"
    version: str = "v1"
    columns: Optional[list[dict]] = None
    schema: Optional[list[dict]] = None
    filters: dict[str, dict] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.model.__name__

    @property
    def path(self) -> str:
        return f"/{self.prefix}/{self.version}/{self.uri}"

    @property
    def soft_deletes(self) -> bool:
        return bool(getattr(self.model, "soft_deletes", False))

    def serialize(self, instance) -> dict:
        return self.response_schema.model_validate(instance).model_dump(mode="json")


class ResourceRegistry:
    """Registered resources keyed by their mount path."""

    def __init__(self):
        self._resources: dict[str, ResourceConfig] = {}

    def register(self, config: ResourceConfig) -> ResourceConfig:
        existing = self._resources.get(config.path)
        if existing is not None and existing.model is not config.model:
            raise ValueError(
                f"Resource path {config.path} is already registered by {existing.name}"
            )
        self._resources[config.path] = config
        return config

    def get(self, uri: str, prefix: str = "api", version: str = "v1") -> Optional[ResourceConfig]:
        return self._resources.get(f"/{prefix}/{version}/{uri}")

    def all(self) -> list[ResourceConfig]:
        return list(self._resources.values())

    def __len__(self) -> int:
        return len(self._resources)

    def __contains__(self, path: str) -> bool:
        return path in self._resources


registry = ResourceRegistry()


def api_resource(
    *,
    create_schema: type[BaseModel],
    update_schema: type[BaseModel],
    response_schema: type[BaseModel],
    uri: Optional[str] = None,
    prefix: str = "api",
    version: str = "v1",
    target: Optional[ResourceRegistry] = None,
):
    """
    Class decorator exposing a model as a REST resource.

    Declared columns and schema are validated here, so a malformed
    declaration fails at import time instead of on the first request.

    Args:
        create_schema: Pydantic model validating POST bodies
        update_schema: Pydantic model validating PUT/PATCH bodies
        response_schema: Pydantic model serializing rows
        uri: Path segment; derived from the class name when omitted
        prefix: Leading path segment
        version: API version segment
        target: Registry to record into, defaults to the global one
    """

    def decorator(model: type) -> type:
        config = ResourceConfig(
            model=model,
            uri=uri or resource_uri_for(model.__name__),
            prefix=prefix,
            version=version,
            create_schema=create_schema,
            update_schema=update_schema,
            response_schema=response_schema,
            columns=normalize_columns(model.index_columns) if getattr(model, "index_columns", None) else None,
            schema=normalize_schema(model.api_schema) if getattr(model, "api_schema", None) else None,
            filters=dict(getattr(model, "api_filters", None) or {}),
        )
        (target or registry).register(config)
        model.__resource__ = config
        return model

    return decorator
