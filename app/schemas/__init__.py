"""Pydantic schemas for request validation and response serialization."""

from app.schemas.survey import (
    QuestionType,
    QuestionCreate,
    SurveyCreate,
    SurveyUpdate,
    AnswerSubmit,
    ResponseSubmit,
    QuestionOut,
    SurveyOut,
    AnswerOut,
    ResponseOut,
    QuestionStatOut,
    SurveyStatsOut,
)
from app.schemas.user import (
    RegisterRequest,
    LoginRequest,
    UserOut,
    AuthResponse,
    UserStatsOut,
)

__all__ = [
    "QuestionType",
    "QuestionCreate",
    "SurveyCreate",
    "SurveyUpdate",
    "AnswerSubmit",
    "ResponseSubmit",
    "QuestionOut",
    "SurveyOut",
    "AnswerOut",
    "ResponseOut",
    "QuestionStatOut",
    "SurveyStatsOut",
    "RegisterRequest",
    "LoginRequest",
    "UserOut",
    "AuthResponse",
    "UserStatsOut",
]
