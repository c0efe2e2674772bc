"""Authentication schemas."""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator, ValidationInfo

from app.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Login with a username or an email address."""
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=72)


class RegisterRequest(BaseModel):
    """Self-service registration."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=50)
    whatsapp: Optional[str] = Field(None, max_length=20)
    password: str = Field(..., min_length=8, max_length=72)
    password_confirmation: str

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        if "password" in info.data and v != info.data["password"]:
            raise ValueError("Password confirmation does not match")
        return v


class RefreshRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str = Field(..., alias="refreshToken", min_length=1)


class TokenResponse(BaseModel):
    """Token pair issued on login, registration and refresh."""
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    user: UserResponse


class AuthStatus(BaseModel):
    authenticated: bool
    user: Optional[UserResponse] = None
