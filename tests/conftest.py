"""Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import os
from typing import Any, Generator, List, Optional

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set required environment variables for tests BEFORE importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test_jwt_secret_for_testing_only")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")

from app.models import Answer, Base, Question, Survey, SurveyResponse, User
from app.models.database import get_db
from app.services.security import hash_password


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine with SQLite in-memory database.

    Yields:
        Engine: SQLAlchemy engine for testing

    Note:
        StaticPool keeps a single connection so the in-memory database is
        shared with the TestClient worker threads.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Enable foreign key support for SQLite
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session.

    Yields:
        Session: SQLAlchemy session for testing
    """
    TestSessionLocal = sessionmaker(
        bind=db_engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )

    session = TestSessionLocal()

    yield session

    session.rollback()
    session.close()


@pytest.fixture
def client(db_session):
    """TestClient whose requests use the test database session."""
    from fastapi.testclient import TestClient

    from app.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Factory creating a persisted user with a hashed password."""

    def _make_user(
        username: str = "alice",
        email: str = "alice@surveys.io",
        password: str = "secret123",
        name: Optional[str] = None,
    ) -> User:
        user = User(
            username=username,
            email=email,
            password=hash_password(password),
            name=name,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture
def make_survey(db_session):
    """Factory creating a survey from (type, text) question tuples.

    Questions get order_index equal to their position unless an explicit
    third tuple element is given.
    """

    def _make_survey(
        questions: List[tuple],
        title: str = "Customer Feedback",
        user_id: Optional[str] = None,
        is_published: bool = True,
    ) -> Survey:
        survey = Survey(title=title, user_id=user_id, is_published=is_published)
        for index, entry in enumerate(questions):
            question_type, text = entry[0], entry[1]
            order_index = entry[2] if len(entry) > 2 else index
            survey.questions.append(
                Question(type=question_type, question=text, order_index=order_index)
            )
        db_session.add(survey)
        db_session.commit()
        return survey

    return _make_survey


@pytest.fixture
def make_response(db_session):
    """Factory storing one response with answers keyed by question."""

    def _make_response(
        survey: Survey,
        answers: dict,
        user_id: Optional[str] = None,
        respondent_name: str = "Respondent",
    ) -> SurveyResponse:
        response = SurveyResponse(
            survey_id=survey.id,
            user_id=user_id,
            respondent_name=respondent_name,
        )
        for question, value in answers.items():
            response.answers.append(Answer(question_id=question.id, answer=value))
        db_session.add(response)
        db_session.commit()
        return response

    return _make_response


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_token():
    """Bearer token factory for an existing user id."""
    from app.services.security import create_access_token

    def _token(user_id: Any) -> dict:
        return auth_header(create_access_token(str(user_id)))

    return _token
