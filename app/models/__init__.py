"""Database models and session management.

This package contains all SQLAlchemy ORM models and database utilities.
"""

from app.models.database import Base, engine, SessionLocal, get_db, create_tables
from app.models.user import User
from app.models.survey import Survey, Question, QUESTION_TYPES
from app.models.response import SurveyResponse, Answer

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "get_db",
    "create_tables",
    "User",
    "Survey",
    "Question",
    "QUESTION_TYPES",
    "SurveyResponse",
    "Answer",
]
