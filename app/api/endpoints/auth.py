"""Authentication endpoints."""
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Request, status
from email_validator import EmailNotValidError, validate_email
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_optional_user
from app.core.config import settings
from app.core.database import get_db, utcnow
from app.core.errors import AccessDeniedError, RateLimitedError, UnauthorizedError
from app.core.redis import RedisClient, get_redis
from app.core.responses import success_response
from app.core.security import get_password_hash, verify_password
from app.models import User
from app.models.token import REFRESH_ABILITY
from app.schemas.auth import AuthStatus, LoginRequest, RefreshRequest, RegisterRequest, TokenResponse
from app.schemas.user import UserResponse, UserRole
from app.services.db_errors import parse_integrity_error
from app.services.tokens import find_token, issue_token_pair, revoke_token, revoke_user_tokens

router = APIRouter()
logger = structlog.get_logger(__name__)


def _login_column(identifier: str):
    """Match emails against the email column and anything else against username."""
    try:
        validate_email(identifier, check_deliverability=False)
    except EmailNotValidError:
        return User.username
    return User.email


def _token_payload(tokens: dict, user: User) -> TokenResponse:
    return TokenResponse(**tokens, user=UserResponse.model_validate(user))


@router.post("/login")
async def login(
    payload: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    redis: RedisClient = Depends(get_redis),
):
    """Exchange a username (or email) and password for a token pair."""
    client_host = request.client.host if request.client else "unknown"
    throttle_key = f"login_attempts:{client_host}:{payload.username.lower()}"
    attempts = await redis.hit(throttle_key, window_seconds=60)
    if attempts > settings.LOGIN_RATE_LIMIT:
        logger.warning("login_throttled", username=payload.username, client_host=client_host)
        raise RateLimitedError("Too many login attempts. Please try again later.")

    result = await db.execute(select(User).where(_login_column(payload.username) == payload.username))
    user: Optional[User] = result.scalar_one_or_none()

    if user is None or not verify_password(payload.password, user.password):
        logger.warning("login_failed", username=payload.username, client_host=client_host)
        raise UnauthorizedError("Invalid credentials")

    if not user.active:
        logger.warning("login_inactive_user", user_id=user.id)
        raise AccessDeniedError("Account is inactive")

    await redis.delete(throttle_key)
    user.last_login_at = utcnow()
    tokens = await issue_token_pair(db, user)
    await db.commit()

    logger.info("login_succeeded", user_id=user.id)
    return success_response(data=_token_payload(tokens, user), message="Login successful")


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Create an active user account and sign it in."""
    user = User(
        name=payload.name,
        email=payload.email,
        username=payload.username,
        whatsapp=payload.whatsapp,
        password=get_password_hash(payload.password),
        active=True,
        role=UserRole.USER.value,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        raise parse_integrity_error(exc) from exc

    tokens = await issue_token_pair(db, user)
    await db.commit()

    logger.info("user_registered", user_id=user.id, username=user.username)
    return success_response(
        data=_token_payload(tokens, user),
        message="Registration successful",
        status_code=status.HTTP_201_CREATED,
    )


@router.post("/refresh")
async def refresh(payload: RefreshRequest, db: AsyncSession = Depends(get_db)):
    """Rotate a refresh token into a new token pair."""
    token = await find_token(db, payload.refresh_token)
    if token is None or REFRESH_ABILITY not in (token.abilities or []):
        raise UnauthorizedError("Invalid or expired refresh token")

    user = await db.get(User, token.user_id)
    if user is None:
        raise UnauthorizedError("Invalid or expired refresh token")
    if not user.active:
        raise AccessDeniedError("Account is inactive")

    await revoke_token(db, token)
    tokens = await issue_token_pair(db, user)
    await db.commit()

    logger.info("token_refreshed", user_id=user.id)
    return success_response(data=_token_payload(tokens, user), message="Token refreshed successfully")


@router.post("/logout")
async def logout(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Revoke every token of the current user."""
    await revoke_user_tokens(db, user.id)
    await db.commit()

    logger.info("logout", user_id=user.id)
    return success_response(message="Logged out successfully")


@router.get("/status")
async def auth_status(user: Optional[User] = Depends(get_optional_user)):
    """Report whether the request carries a valid access token."""
    data = AuthStatus(
        authenticated=user is not None and user.active,
        user=UserResponse.model_validate(user) if user is not None and user.active else None,
    )
    return success_response(data=data, message="Authentication status retrieved")
