"""
Generic CRUD endpoints generated for every registered resource.
"""
from fastapi import APIRouter, Depends, FastAPI, Request, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.core.database import get_db, utcnow
from app.core.errors import BadRequestError, NotFoundError
from app.core.resources import ResourceConfig, ResourceRegistry, registry
from app.core.responses import success_response
from app.models import User
from app.schemas.envelope import Notification
from app.services.db_errors import parse_integrity_error
from app.services.filtering import apply_filter, build_filters_meta
from app.services.metadata import columns_for, form_schema_for, index_columns_for, list_schema_for
from app.services.pagination import paginate
from app.services.resource_logger import (
    log_query_notifications, log_resource_error, log_resource_success
)
from app.services.search import apply_search
from app.services.sorting import apply_sort


def parse_resource_id(raw_id: str) -> int:
    if not raw_id.isdigit():
        raise BadRequestError("Invalid resource identifier", details={"id": raw_id})
    return int(raw_id)


def base_query(resource: ResourceConfig):
    stmt = select(resource.model)
    if resource.soft_deletes:
        stmt = stmt.where(resource.model.deleted_at.is_(None))
    return stmt


async def get_instance_or_404(db: AsyncSession, resource: ResourceConfig, raw_id: str):
    resource_id = parse_resource_id(raw_id)
    result = await db.execute(base_query(resource).where(resource.model.id == resource_id))
    instance = result.scalar_one_or_none()
    if instance is None:
        raise NotFoundError(details={"resource": resource.uri, "id": resource_id})
    return instance


def stamp_audit_fields(resource: ResourceConfig, data: dict, user: User, creating: bool) -> None:
    """Record who created or last changed a row on models that track it."""
    columns = resource.model.__table__.columns
    if creating and "created_by" in columns:
        data.setdefault("created_by", user.username)
    if "updated_by" in columns:
        data["updated_by"] = user.username


async def commit_or_raise(db: AsyncSession, resource: ResourceConfig, operation: str) -> None:
    """Commit, turning integrity violations into CONFLICT / VALIDATION_ERROR responses."""
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        error = parse_integrity_error(exc)
        log_resource_error(resource.name, operation, error.message, code=error.code)
        raise error from exc


def build_resource_router(resource: ResourceConfig) -> APIRouter:
    """Create the CRUD router for one resource."""
    model = resource.model
    router = APIRouter(dependencies=[Depends(get_current_user)])

    @router.get("", summary=f"List {resource.uri}")
    async def index(request: Request, db: AsyncSession = Depends(get_db)):
        """List rows with search, filter, sort and pagination applied in that order."""
        params = request.query_params
        notifications: list[Notification] = []

        stmt = base_query(resource)
        stmt, search = apply_search(stmt, resource, params.get("search"), notifications)
        stmt, applied_filter = apply_filter(stmt, resource, params.get("filter"), notifications)
        stmt, sort = apply_sort(stmt, resource, params.get("sort"), params.get("dir"), notifications)
        page = await paginate(db, stmt, request, notifications)

        log_query_notifications(resource.name, notifications)

        return success_response(
            data=[resource.serialize(item) for item in page.items],
            message="Resources retrieved successfully",
            pagination=page.meta,
            search=search,
            sort=sort,
            filters=build_filters_meta(resource, applied_filter),
            schema=list_schema_for(resource),
            columns=columns_for(resource),
            notifications=notifications,
        )

    @router.post("", status_code=status.HTTP_201_CREATED, summary=f"Create {resource.uri}")
    async def store(
        payload: resource.create_schema,
        db: AsyncSession = Depends(get_db),
        user: User = Depends(get_current_user),
    ):
        data = payload.model_dump(exclude_unset=True)
        data = model.apply_database_defaults(data, is_update=False)
        data = model.prepare_data(data, is_update=False)
        stamp_audit_fields(resource, data, user, creating=True)

        instance = model(**data)
        db.add(instance)
        await commit_or_raise(db, resource, "create")
        await db.refresh(instance)

        log_resource_success(resource.name, "created", instance.id, user_id=user.id)

        return success_response(
            data=resource.serialize(instance),
            message="Resource created successfully",
            status_code=status.HTTP_201_CREATED,
            columns=columns_for(resource),
        )

    @router.get("/schema", summary=f"Form schema for {resource.uri}")
    async def schema():
        return success_response(
            data=form_schema_for(resource),
            message="Schema retrieved successfully",
            columns=columns_for(resource),
        )

    @router.get("/columns", summary=f"Index columns for {resource.uri}")
    async def columns():
        index_columns = index_columns_for(resource)
        return success_response(
            data=index_columns,
            message="Columns retrieved successfully",
            columns=index_columns,
        )

    @router.get("/{resource_id}", summary=f"Show {resource.uri}")
    async def show(resource_id: str, db: AsyncSession = Depends(get_db)):
        instance = await get_instance_or_404(db, resource, resource_id)
        return success_response(
            data=resource.serialize(instance),
            message="Resource retrieved successfully",
            columns=columns_for(resource),
        )

    async def update(
        resource_id: str,
        payload: resource.update_schema,
        db: AsyncSession = Depends(get_db),
        user: User = Depends(get_current_user),
    ):
        """Partial update; only fields present in the body change."""
        instance = await get_instance_or_404(db, resource, resource_id)

        data = payload.model_dump(exclude_unset=True)
        data = model.apply_database_defaults(data, is_update=True)
        data = model.prepare_data(data, is_update=True)
        stamp_audit_fields(resource, data, user, creating=False)

        for field, value in data.items():
            setattr(instance, field, value)

        await commit_or_raise(db, resource, "update")
        await db.refresh(instance)

        log_resource_success(resource.name, "updated", instance.id, user_id=user.id, fields=sorted(data))

        return success_response(
            data=resource.serialize(instance),
            message="Resource updated successfully",
            columns=columns_for(resource),
        )

    router.add_api_route(
        "/{resource_id}",
        update,
        methods=["PUT", "PATCH"],
        summary=f"Update {resource.uri}",
    )

    @router.delete("/{resource_id}", summary=f"Delete {resource.uri}")
    async def destroy(
        resource_id: str,
        db: AsyncSession = Depends(get_db),
        user: User = Depends(get_current_user),
    ):
        instance = await get_instance_or_404(db, resource, resource_id)

        if resource.soft_deletes:
            instance.deleted_at = utcnow()
        else:
            await db.delete(instance)
        await commit_or_raise(db, resource, "delete")

        log_resource_success(
            resource.name, "deleted", instance.id,
            user_id=user.id, soft=resource.soft_deletes,
        )

        return success_response(
            data=None,
            message="Resource deleted successfully",
            columns=columns_for(resource),
        )

    return router


def register_resource_routes(app: FastAPI, resources: ResourceRegistry = registry) -> None:
    """Mount a CRUD router for every registered resource."""
    for resource in resources.all():
        app.include_router(
            build_resource_router(resource),
            prefix=resource.path,
            tags=[resource.name],
        )
