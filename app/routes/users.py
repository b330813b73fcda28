"""User account endpoints: registration, login, profile and activity stats."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.models.database import get_db
from app.models.user import User
from app.schemas.user import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserOut,
    UserStatsOut,
)
from app.services.security import create_access_token
from app.services.users import UserService
from app.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/users")

INVALID_CREDENTIALS = "Invalid username/email or password"


@router.post(
    "/register",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    status_code=201,
)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> AuthResponse:
    """Create an account and return a bearer token for it.

    Raises:
        HTTPException(409): If the username or email is already registered
    """
    service = UserService(db)

    if service.find_by_username(payload.username):
        raise HTTPException(status_code=409, detail="Username already exists")
    if service.find_by_email(str(payload.email)):
        raise HTTPException(status_code=409, detail="Email already exists")

    user = service.create(payload)
    return AuthResponse(
        token=create_access_token(user.id),
        user=UserOut.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse, response_model_exclude_none=True)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> AuthResponse:
    """Exchange username-or-email and password for a bearer token."""
    user = UserService(db).authenticate(payload.username_or_email, payload.password)
    if user is None:
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)

    logger.info("User logged in", extra={"user_id": user.id})
    return AuthResponse(
        token=create_access_token(user.id),
        user=UserOut.model_validate(user),
    )


@router.get("/{user_id}", response_model=UserOut, response_model_exclude_none=True)
def get_user(user_id: str, db: Session = Depends(get_db)) -> User:
    user = UserService(db).get(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/{user_id}/stats", response_model=UserStatsOut)
def get_user_stats(user_id: str, db: Session = Depends(get_db)) -> UserStatsOut:
    """Surveys created and answered by a user."""
    return UserStatsOut.model_validate(UserService(db).get_stats(user_id))
