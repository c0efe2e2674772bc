"""User schemas."""
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator


class UserRole(str, Enum):
    """User roles."""
    ADMIN = "admin"
    USER = "user"


class UserBase(BaseModel):
    """Base user schema."""
    model_config = ConfigDict(use_enum_values=True)

    whatsapp: Optional[str] = Field(None, max_length=20)
    active: Optional[bool] = None
    role: Optional[UserRole] = None


class UserCreate(UserBase):
    """Schema for creating a user. A user created without a password is inactive."""
    name: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: Optional[str] = Field(None, min_length=8, max_length=72)


class UserUpdate(UserBase):
    """Schema for updating a user."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    username: Optional[str] = Field(None, min_length=3, max_length=50)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, max_length=72)

    @field_validator("name", "username", "email")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("This field cannot be null")
        return v

    @field_validator("password")
    @classmethod
    def password_length(cls, v: Optional[str]) -> Optional[str]:
        # Empty means "keep the current password"
        if v and len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v


class UserResponse(UserBase):
    """Schema for user response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    username: str
    email: str
    active: bool
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
