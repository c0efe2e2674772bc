"""Issuing, resolving and revoking personal access tokens."""
from datetime import timedelta
from typing import Optional

import structlog
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import utcnow
from app.core.security import generate_token_secret, hash_token, split_token, token_matches
from app.models import PersonalAccessToken, User
from app.models.token import ACCESS_ABILITY, REFRESH_ABILITY

logger = structlog.get_logger(__name__)


async def issue_token(
    db: AsyncSession,
    user: User,
    name: str,
    abilities: list[str],
    expires_in: timedelta,
) -> str:
    """Persist a new token and return its plaintext form."""
    secret = generate_token_secret()
    token = PersonalAccessToken(
        user_id=user.id,
        name=name,
        token=hash_token(secret),
        abilities=abilities,
        expires_at=utcnow() + expires_in,
    )
    db.add(token)
    await db.flush()
    return f"{token.id}|{secret}"


async def issue_token_pair(db: AsyncSession, user: User) -> dict:
    """Issue an access token and a refresh token for ``user``."""
    access_ttl = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = await issue_token(db, user, "access_token", [ACCESS_ABILITY], access_ttl)
    refresh_token = await issue_token(
        db, user, "refresh_token", [REFRESH_ABILITY],
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )
    logger.info("tokens_issued", user_id=user.id)
    return {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "token_type": "Bearer",
        "expires_in": int(access_ttl.total_seconds()),
    }


async def find_token(db: AsyncSession, raw_token: str) -> Optional[PersonalAccessToken]:
    """Resolve a plaintext token; None when unknown, mismatched or expired."""
    parts = split_token(raw_token)
    if parts is None:
        return None
    token_id, secret = parts

    token = await db.get(PersonalAccessToken, token_id)
    if token is None or not token_matches(secret, token.token):
        return None
    if token.is_expired():
        logger.info("token_expired", token_id=token.id, user_id=token.user_id)
        return None
    return token


async def revoke_token(db: AsyncSession, token: PersonalAccessToken) -> None:
    await db.delete(token)
    await db.flush()


async def revoke_user_tokens(db: AsyncSession, user_id: int) -> None:
    await db.execute(delete(PersonalAccessToken).where(PersonalAccessToken.user_id == user_id))
    logger.info("tokens_revoked", user_id=user_id)
