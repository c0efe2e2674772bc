"""Shared endpoint dependencies."""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db, utcnow
from app.core.errors import AccessDeniedError, UnauthorizedError
from app.models import PersonalAccessToken, User
from app.models.token import ACCESS_ABILITY
from app.services.tokens import find_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """The user behind a valid access token, or None."""
    if credentials is None:
        return None

    token: Optional[PersonalAccessToken] = await find_token(db, credentials.credentials)
    if token is None or not token.can(ACCESS_ABILITY):
        return None

    token.last_used_at = utcnow()
    return await db.get(User, token.user_id)


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """Require an authenticated, active user."""
    if user is None:
        raise UnauthorizedError()
    if not user.active:
        raise AccessDeniedError("Account is inactive")
    return user
