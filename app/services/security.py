"""Password hashing and bearer token handling.

Passwords are hashed with passlib (argon2). Bearer tokens are HS256 JWTs
signed with the configured secret and carrying the user id in the userId
and sub claims.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from app.config import get_settings
from app.logging_config import get_logger

logger = get_logger(__name__)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")
ALGORITHM = "HS256"


class TokenError(Exception):
    """Raised when a bearer token is malformed, expired or badly signed."""
    pass


def hash_password(password: str) -> str:
    """Hash a plaintext password for storage."""
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored hash.

    Hashes passlib does not recognise (e.g. placeholder values written for
    legacy accounts) never verify.
    """
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        logger.warning("Stored password hash has an unrecognised format")
        return False


def create_access_token(user_id: str, ttl_minutes: Optional[int] = None) -> str:
    """Issue a signed bearer token for a user.

    Args:
        user_id: Identifier stored in the token
        ttl_minutes: Lifetime override; defaults to settings.jwt_expires_minutes

    Returns:
        Encoded JWT
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    expires = now + timedelta(minutes=ttl_minutes or settings.jwt_expires_minutes)
    payload: Dict[str, Any] = {
        "userId": user_id,
        "sub": user_id,
        "iat": int(now.timestamp()),
        "exp": int(expires.timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Verify a bearer token and return its claims.

    Raises:
        TokenError: If the token is invalid, expired or lacks a user id
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise TokenError("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise TokenError("Invalid token") from e

    if not payload.get("userId"):
        raise TokenError("Token has no user id")
    return payload
