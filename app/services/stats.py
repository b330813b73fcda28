"""Survey statistics orchestration.

Builds the per-survey report served by GET /api/surveys/{id}/stats: the
number of response records plus one QuestionStat per question, in question
order.
"""

from dataclasses import dataclass, field
from typing import Any, List, Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.response import Answer, SurveyResponse
from app.models.survey import Question
from app.services.aggregator import QuestionRecord, QuestionStat, aggregate_question
from app.services.answer_normalizer import normalize_answers
from app.services.responses import ResponseService
from app.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class SurveyStats:
    """Statistics report for one survey.

    Attributes:
        survey_id: Survey identifier
        total_responses: Number of response records (not answers)
        question_stats: One entry per question, by ascending order_index
    """
    survey_id: str
    total_responses: int
    question_stats: List[QuestionStat] = field(default_factory=list)


class StatsRepository(Protocol):
    """Read-only storage operations the stats service depends on."""

    def count_responses(self, survey_id: str) -> int:
        ...

    def list_questions(self, survey_id: str) -> Sequence[QuestionRecord]:
        ...

    def list_answers_for_question(self, question_id: str, survey_id: str) -> List[Any]:
        ...


class SqlStatsRepository:
    """StatsRepository backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def count_responses(self, survey_id: str) -> int:
        return ResponseService(self.db).count_for_survey(survey_id)

    def list_questions(self, survey_id: str) -> List[QuestionRecord]:
        stmt = (
            select(Question.id, Question.type, Question.question, Question.order_index)
            .where(Question.survey_id == survey_id)
            .order_by(Question.order_index)
        )
        return [
            QuestionRecord(id=row.id, type=row.type, text=row.question, order_index=row.order_index)
            for row in self.db.execute(stmt)
        ]

    def list_answers_for_question(self, question_id: str, survey_id: str) -> List[Any]:
        """Raw answer values for a question, restricted to the survey's responses.

        The join through survey_responses keeps answers whose response
        belongs to another survey out of the result even if they reference
        this question id.
        """
        stmt = (
            select(Answer.answer)
            .join(SurveyResponse, Answer.response_id == SurveyResponse.id)
            .where(
                Answer.question_id == question_id,
                SurveyResponse.survey_id == survey_id,
            )
        )
        return list(self.db.execute(stmt).scalars())


class StatsService:
    """Computes SurveyStats from a StatsRepository.

    Every call reads fresh data; nothing is cached between calls.
    """

    def __init__(self, repository: StatsRepository):
        self.repository = repository

    @classmethod
    def for_session(cls, db: Session) -> "StatsService":
        """Build a service reading from the given database session."""
        return cls(SqlStatsRepository(db))

    def get_survey_stats(self, survey_id: str) -> SurveyStats:
        """Compute the statistics report for a survey.

        A survey without questions (including one that does not exist)
        produces an empty question_stats list rather than an error.

        Args:
            survey_id: Survey identifier

        Returns:
            SurveyStats with question_stats ordered by order_index

        Raises:
            SQLAlchemyError: If any storage read fails. No partial report is
                returned.
        """
        try:
            total_responses = self.repository.count_responses(survey_id)
            questions = sorted(
                self.repository.list_questions(survey_id),
                key=lambda question: question.order_index,
            )

            question_stats = []
            for question in questions:
                raw_answers = self.repository.list_answers_for_question(question.id, survey_id)
                question_stats.append(
                    aggregate_question(question, normalize_answers(raw_answers))
                )
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to compute stats for survey {survey_id}: {e}",
                extra={"survey_id": survey_id},
            )
            raise

        logger.debug(
            f"Computed stats for {len(question_stats)} questions",
            extra={"survey_id": survey_id},
        )
        return SurveyStats(
            survey_id=survey_id,
            total_responses=total_responses,
            question_stats=question_stats,
        )
