"""User account operations and per-user activity statistics."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from app.models.response import SurveyResponse
from app.models.survey import Survey
from app.models.user import User
from app.schemas.user import RegisterRequest
from app.services.security import hash_password, verify_password
from app.services.surveys import is_valid_id
from app.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class SurveyCreated:
    id: str
    title: str
    created_at: datetime
    total_responses: int


@dataclass
class SurveyAnswered:
    survey_id: str
    survey_title: str
    responded_at: datetime


@dataclass
class UserStats:
    """Activity summary for one user.

    Attributes:
        user_id: User identifier
        total_surveys_created: Surveys owned by the user
        total_responses_submitted: Responses submitted while logged in
        surveys_created: Owned surveys with their response counts, newest first
        surveys_answered: Surveys the user responded to, most recent first
    """
    user_id: str
    total_surveys_created: int
    total_responses_submitted: int
    surveys_created: List[SurveyCreated] = field(default_factory=list)
    surveys_answered: List[SurveyAnswered] = field(default_factory=list)


class UserService:
    """Registration, lookup, authentication and stats for user accounts."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[User]:
        if not is_valid_id(user_id):
            return None
        return self.db.get(User, str(user_id))

    def find_by_username(self, username: str) -> Optional[User]:
        return self.db.execute(
            select(User).where(User.username == username)
        ).scalar_one_or_none()

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.execute(
            select(User).where(User.email == email)
        ).scalar_one_or_none()

    def find_by_username_or_email(self, username_or_email: str) -> Optional[User]:
        return self.db.execute(
            select(User)
            .where(or_(User.username == username_or_email, User.email == username_or_email))
            .limit(1)
        ).scalar_one_or_none()

    def create(self, data: RegisterRequest) -> User:
        """Create an account, storing only the password hash.

        Raises:
            IntegrityError: If the username or email is already taken
        """
        user = User(
            username=data.username,
            email=str(data.email),
            password=hash_password(data.password),
            name=data.name or None,
        )
        try:
            self.db.add(user)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Registered user", extra={"user_id": user.id})
        return user

    def authenticate(self, username_or_email: str, password: str) -> Optional[User]:
        """Return the user if the credentials match, otherwise None."""
        user = self.find_by_username_or_email(username_or_email)
        if user is None or not verify_password(password, user.password):
            logger.info("Failed login attempt")
            return None
        return user

    def get_stats(self, user_id: str) -> UserStats:
        """Summarize the surveys a user created and the surveys they answered.

        Unknown users get an all-zero summary.
        """
        user_id = str(user_id)

        created_rows = self.db.execute(
            select(
                Survey.id,
                Survey.title,
                Survey.created_at,
                func.count(func.distinct(SurveyResponse.id)).label("total_responses"),
            )
            .outerjoin(SurveyResponse, SurveyResponse.survey_id == Survey.id)
            .where(Survey.user_id == user_id)
            .group_by(Survey.id, Survey.title, Survey.created_at)
            .order_by(Survey.created_at.desc())
        ).all()

        answered_rows = self.db.execute(
            select(
                SurveyResponse.survey_id,
                Survey.title.label("survey_title"),
                func.min(SurveyResponse.submitted_at).label("responded_at"),
            )
            .join(Survey, SurveyResponse.survey_id == Survey.id)
            .where(SurveyResponse.user_id == user_id)
            .group_by(SurveyResponse.survey_id, Survey.title)
            .order_by(func.min(SurveyResponse.submitted_at).desc())
        ).all()

        total_responses_submitted = self.db.execute(
            select(func.count())
            .select_from(SurveyResponse)
            .where(SurveyResponse.user_id == user_id)
        ).scalar_one()

        return UserStats(
            user_id=user_id,
            total_surveys_created=len(created_rows),
            total_responses_submitted=int(total_responses_submitted),
            surveys_created=[
                SurveyCreated(
                    id=row.id,
                    title=row.title,
                    created_at=row.created_at,
                    total_responses=int(row.total_responses),
                )
                for row in created_rows
            ],
            surveys_answered=[
                SurveyAnswered(
                    survey_id=row.survey_id,
                    survey_title=row.survey_title,
                    responded_at=row.responded_at,
                )
                for row in answered_rows
            ],
        )
