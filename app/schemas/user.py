"""Pydantic schemas for user accounts and authentication."""

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from app.schemas.survey import CamelModel


class RegisterRequest(CamelModel):
    """Payload for POST /api/users/register."""
    username: str = Field(..., min_length=3, description="Username must be at least 3 characters")
    email: EmailStr
    password: str = Field(..., min_length=6, description="Password must be at least 6 characters")
    name: Optional[str] = None


class LoginRequest(CamelModel):
    """Payload for POST /api/users/login."""
    username_or_email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserOut(CamelModel):
    id: str
    username: str
    email: Optional[str] = None
    name: Optional[str] = None
    created_at: datetime


class AuthResponse(CamelModel):
    token: str
    user: UserOut


class SurveyCreatedSummary(CamelModel):
    id: str
    title: str
    created_at: datetime
    total_responses: int


class SurveyAnsweredSummary(CamelModel):
    survey_id: str
    survey_title: str
    responded_at: datetime


class UserStatsOut(CamelModel):
    user_id: str
    total_surveys_created: int
    total_responses_submitted: int
    surveys_created: List[SurveyCreatedSummary]
    surveys_answered: List[SurveyAnsweredSummary]
