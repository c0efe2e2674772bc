"""
Password hashing and personal access token helpers.

Tokens are handed out as ``"<token id>|<secret>"``. Only the SHA-256 digest
of the secret is persisted, so a leaked database does not leak usable
tokens.
"""
import hashlib
import hmac
import secrets
from typing import Optional

import bcrypt

from app.core.config import settings

TOKEN_SECRET_BYTES = 20

# bcrypt only uses the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def get_password_hash(password: str) -> str:
    """Hash a plaintext password with bcrypt."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def generate_token_secret() -> str:
    return secrets.token_hex(TOKEN_SECRET_BYTES)


def hash_token(secret: str) -> str:
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


def token_matches(secret: str, token_hash: str) -> bool:
    return hmac.compare_digest(hash_token(secret), token_hash)


def split_token(raw_token: str) -> Optional[tuple[int, str]]:
    """
    Split a plaintext token into its id and secret.

    Returns:
        ``(token_id, secret)`` or None when the token is malformed
    """
    token_id, sep, secret = raw_token.partition("|")
    if not sep or not secret or not token_id.isdigit():
        return None
    return int(token_id), secret
