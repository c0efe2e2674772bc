"""Pydantic schemas for API validation."""
from app.schemas.user import (
    UserCreate, UserUpdate, UserResponse, UserRole
)
from app.schemas.product import (
    ProductCreate, ProductUpdate, ProductResponse, ProductType, PublicationStatus
)
from app.schemas.estimate import (
    EstimateCreate, EstimateUpdate, EstimateResponse, EstimateItem,
    EstimateStatus, EstimateType, SalesChannel
)
from app.schemas.auth import (
    LoginRequest, RegisterRequest, RefreshRequest, TokenResponse, AuthStatus
)
from app.schemas.envelope import (
    Notification, PaginationMeta, SortMeta, FiltersMeta, AppliedFilter, AvailableFilter
)

__all__ = [
    "UserCreate", "UserUpdate", "UserResponse", "UserRole",
    "ProductCreate", "ProductUpdate", "ProductResponse", "ProductType", "PublicationStatus",
    "EstimateCreate", "EstimateUpdate", "EstimateResponse", "EstimateItem",
    "EstimateStatus", "EstimateType", "SalesChannel",
    "LoginRequest", "RegisterRequest", "RefreshRequest", "TokenResponse", "AuthStatus",
    "Notification", "PaginationMeta", "SortMeta", "FiltersMeta", "AppliedFilter", "AvailableFilter",
]
