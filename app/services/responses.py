"""Survey response submission and retrieval."""

from typing import List

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.models.response import Answer, SurveyResponse
from app.schemas.survey import ResponseSubmit
from app.services.surveys import is_valid_id
from app.logging_config import get_logger

logger = get_logger(__name__)


def _answer_order(answer: Answer) -> int:
    return answer.question.order_index if answer.question is not None else 0


class ResponseService:
    """Creates and lists respondent submissions."""

    def __init__(self, db: Session):
        self.db = db

    def list_for_survey(self, survey_id: str) -> List[SurveyResponse]:
        """All responses to a survey, newest first.

        Each response's answers are sorted by their question's order_index.
        """
        if not is_valid_id(survey_id):
            return []
        stmt = (
            select(SurveyResponse)
            .options(selectinload(SurveyResponse.answers).selectinload(Answer.question))
            .where(SurveyResponse.survey_id == str(survey_id))
            .order_by(SurveyResponse.submitted_at.desc())
        )
        responses = list(self.db.execute(stmt).scalars())
        for response in responses:
            response.answers.sort(key=_answer_order)
        return responses

    def submit(self, data: ResponseSubmit) -> SurveyResponse:
        """Store a response and all of its answers in one transaction.

        Raises:
            IntegrityError: If the survey or a referenced question does not
                exist
        """
        response = SurveyResponse(
            survey_id=str(data.survey_id),
            user_id=str(data.user_id) if data.user_id else None,
            respondent_name=data.respondent_name,
            respondent_email=data.respondent_email or None,
            respondent_age=data.respondent_age,
        )
        response.answers = [
            Answer(question_id=str(a.question_id), answer=a.answer)
            for a in data.answers
        ]

        try:
            self.db.add(response)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Recorded response with {len(response.answers)} answers",
            extra={"survey_id": response.survey_id},
        )
        self.db.refresh(response)
        response.answers.sort(key=_answer_order)
        return response

    def count_for_survey(self, survey_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(SurveyResponse)
            .where(SurveyResponse.survey_id == str(survey_id))
        )
        return int(self.db.execute(stmt).scalar_one())
