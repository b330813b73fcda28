"""SurveyResponse and Answer models.

A SurveyResponse is one respondent's submission against a survey. Each
Answer holds the value given for one question within that submission.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    String,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.database import Base, new_uuid


class SurveyResponse(Base):
    """One respondent's submission.

    Responses are deleted together with their survey (CASCADE). The owning
    user is nulled out if the account is removed.

    Attributes:
        id: Primary key (UUID string)
        survey_id: Survey being answered
        user_id: Submitting user, if logged in
        respondent_name: Name supplied with the submission
        respondent_email: Email supplied with the submission
        respondent_age: Age supplied with the submission
        submitted_at: Submission timestamp
        answers: Answers contained in this submission
    """

    __tablename__ = "survey_responses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    survey_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("surveys.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    respondent_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    respondent_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    respondent_age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    survey: Mapped["Survey"] = relationship("Survey", back_populates="responses")

    answers: Mapped[list["Answer"]] = relationship(
        "Answer",
        back_populates="response",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return (
            f"<SurveyResponse(id={self.id}, "
            f"survey_id={self.survey_id}, "
            f"answers={len(self.answers)})>"
        )


class Answer(Base):
    """The value given for one question within one response.

    The value is stored as JSON and is semantically a string, a list of
    strings, or a number.
    """

    __tablename__ = "answers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    response_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("survey_responses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    question_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    answer: Mapped[Any] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    response: Mapped["SurveyResponse"] = relationship(
        "SurveyResponse",
        back_populates="answers",
    )
    question: Mapped["Question"] = relationship("Question")

    def __repr__(self) -> str:
        return (
            f"<Answer(id={self.id}, response_id={self.response_id}, "
            f"question_id={self.question_id})>"
        )
