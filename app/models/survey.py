"""Survey and Question models.

A survey owns an ordered list of questions. Editing a survey's questions
replaces the whole set, so questions are never updated in place.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.database import Base, new_uuid

QUESTION_TYPES = ("text", "multiple-choice", "single-choice", "rating", "yes-no")


class Survey(Base):
    """A named collection of ordered questions.

    Attributes:
        id: Primary key (UUID string)
        title: Survey title
        description: Optional long description
        user_id: Owning user (NULL for anonymous or orphaned surveys)
        author_id: Free-form author reference supplied by the client
        author_name: Free-form author display name
        is_published: Whether the survey appears in the public listing
        questions: Questions ordered by order_index
    """

    __tablename__ = "surveys"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    user_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Owning user"
    )
    author_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    author_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    is_published: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Listed publicly when true"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    owner: Mapped[Optional["User"]] = relationship("User", back_populates="surveys")

    questions: Mapped[list["Question"]] = relationship(
        "Question",
        back_populates="survey",
        cascade="all, delete-orphan",
        order_by="Question.order_index",
        passive_deletes=True,
    )

    responses: Mapped[list["SurveyResponse"]] = relationship(
        "SurveyResponse",
        back_populates="survey",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_surveys_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Survey(id={self.id}, title={self.title!r}, "
            f"published={self.is_published})>"
        )


class Question(Base):
    """A single typed question within a survey.

    Attributes:
        id: Primary key (UUID string)
        survey_id: Parent survey
        type: One of QUESTION_TYPES
        question: Display text
        required: Whether respondents must answer it
        options: Choice labels for choice questions (JSON list)
        min_rating: Lower bound for rating questions
        max_rating: Upper bound for rating questions
        order_index: Position within the survey
    """

    __tablename__ = "questions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    survey_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("surveys.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    options: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    min_rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    max_rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    order_index: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Presentation order within the survey"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    survey: Mapped["Survey"] = relationship("Survey", back_populates="questions")

    __table_args__ = (
        CheckConstraint(
            "type IN ('text', 'multiple-choice', 'single-choice', 'rating', 'yes-no')",
            name="ck_questions_type",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Question(id={self.id}, survey_id={self.survey_id}, "
            f"type={self.type}, order_index={self.order_index})>"
        )
