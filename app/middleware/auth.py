"""Bearer token authentication for FastAPI routes.

Routes that modify surveys depend on require_user, which reads the
Authorization header, verifies the token and exposes the caller's user id.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Header, HTTPException, Request

from app.services.security import TokenError, decode_access_token
from app.logging_config import get_logger

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity of the caller behind a verified bearer token."""
    id: str


def require_user(
    request: Request,
    authorization: Optional[str] = Header(default=None),
) -> AuthenticatedUser:
    """FastAPI dependency that authenticates the request.

    Raises:
        HTTPException(401): If the header is missing, is not a Bearer
            header, or carries an invalid or expired token

    Usage:
        @router.post("/")
        def create(user: AuthenticatedUser = Depends(require_user)):
            ...
    """
    client_ip = request.client.host if request.client else "unknown"

    if not authorization or not authorization.startswith(BEARER_PREFIX):
        logger.info(f"Missing or malformed Authorization header from IP: {client_ip}")
        raise HTTPException(
            status_code=401,
            detail="Authorization header missing or invalid",
        )

    token = authorization[len(BEARER_PREFIX):].strip()

    try:
        payload = decode_access_token(token)
    except TokenError as e:
        logger.warning(
            f"Rejected bearer token from IP: {client_ip}: {e}",
            extra={"client_ip": client_ip},
        )
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return AuthenticatedUser(id=str(payload["userId"]))
