"""Survey persistence operations.

Creating or updating a survey writes the survey row and its questions in a
single transaction. Question order is the order of the submitted list.
"""

import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.models.survey import Question, Survey
from app.schemas.survey import QuestionCreate, SurveyCreate, SurveyUpdate
from app.logging_config import get_logger

logger = get_logger(__name__)


def is_valid_id(value: str) -> bool:
    """Whether value is a well-formed UUID (all primary keys are UUIDs)."""
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def build_questions(questions: List[QuestionCreate]) -> List[Question]:
    """Turn submitted questions into ORM rows, indexed by list position."""
    return [
        Question(
            type=q.type.value,
            question=q.question,
            required=q.required,
            options=list(q.options) if q.options else None,
            min_rating=q.min_rating or None,
            max_rating=q.max_rating or None,
            order_index=index,
        )
        for index, q in enumerate(questions)
    ]


class SurveyService:
    """CRUD operations for surveys and their questions."""

    def __init__(self, db: Session):
        self.db = db

    def list_published(self) -> List[Survey]:
        """All published surveys, newest first, questions preloaded."""
        stmt = (
            select(Survey)
            .options(selectinload(Survey.questions))
            .where(Survey.is_published.is_(True))
            .order_by(Survey.created_at.desc())
        )
        return list(self.db.execute(stmt).scalars())

    def get(self, survey_id: str) -> Optional[Survey]:
        """Fetch a survey with its questions, or None if it does not exist."""
        if not is_valid_id(survey_id):
            return None
        stmt = (
            select(Survey)
            .options(selectinload(Survey.questions))
            .where(Survey.id == str(survey_id))
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def create(self, data: SurveyCreate, user_id: Optional[str] = None) -> Survey:
        """Create a survey and its questions.

        Args:
            data: Validated survey payload
            user_id: Owner of the survey (the authenticated caller)

        Returns:
            The persisted survey
        """
        survey = Survey(
            title=data.title,
            description=data.description or None,
            user_id=user_id,
            author_id=data.author_id or None,
            author_name=data.author_name or None,
            is_published=data.is_published,
        )
        survey.questions = build_questions(data.questions)

        try:
            self.db.add(survey)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Created survey with {len(survey.questions)} questions",
            extra={"survey_id": survey.id, "user_id": user_id},
        )
        return self.get(survey.id)

    def update(self, survey_id: str, changes: SurveyUpdate) -> Optional[Survey]:
        """Apply a partial update.

        Fields left out of the payload are untouched. A supplied question list
        replaces every existing question.

        Returns:
            The updated survey, or None if it does not exist
        """
        survey = self.get(survey_id)
        if survey is None:
            return None

        fields = changes.model_fields_set
        if "title" in fields and changes.title is not None:
            survey.title = changes.title
        if "description" in fields:
            survey.description = changes.description or None
        if "is_published" in fields and changes.is_published is not None:
            survey.is_published = changes.is_published

        try:
            if "questions" in fields and changes.questions is not None:
                # Flush the deletes first so the replacement rows never coexist
                survey.questions.clear()
                self.db.flush()
                survey.questions.extend(build_questions(changes.questions))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Updated survey", extra={"survey_id": survey_id})
        self.db.refresh(survey)
        return survey

    def delete(self, survey_id: str) -> bool:
        """Delete a survey (questions, responses and answers cascade).

        Returns:
            True if a survey was deleted, False if it did not exist
        """
        survey = self.get(survey_id)
        if survey is None:
            return False

        try:
            self.db.delete(survey)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Deleted survey", extra={"survey_id": survey_id})
        return True
