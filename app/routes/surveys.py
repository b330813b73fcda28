"""Survey endpoints: CRUD, response submission and statistics.

Reads are public. Creating, updating and deleting a survey require a bearer
token, and only the owner may modify an owned survey.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from app.middleware.auth import AuthenticatedUser, require_user
from app.models.database import get_db
from app.models.survey import Survey
from app.schemas.survey import (
    ResponseOut,
    ResponseSubmit,
    SurveyCreate,
    SurveyOut,
    SurveyStatsOut,
    SurveyUpdate,
)
from app.services.responses import ResponseService
from app.services.stats import StatsService
from app.services.surveys import SurveyService
from app.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/surveys")


def _get_owned_survey(
    service: SurveyService,
    survey_id: str,
    user: AuthenticatedUser,
    action: str,
) -> Survey:
    """Load a survey the caller is allowed to change.

    Raises:
        HTTPException(404): If the survey does not exist
        HTTPException(403): If someone else owns it
    """
    survey = service.get(survey_id)
    if survey is None:
        raise HTTPException(status_code=404, detail="Survey not found")

    if survey.user_id and survey.user_id != user.id:
        logger.warning(
            f"User attempted to {action} a survey they do not own",
            extra={"survey_id": survey_id, "user_id": user.id},
        )
        raise HTTPException(
            status_code=403,
            detail=f"You do not have permission to {action} this survey",
        )
    return survey


@router.get("", response_model=List[SurveyOut], response_model_exclude_none=True)
def list_surveys(db: Session = Depends(get_db)) -> List[Survey]:
    """List published surveys, newest first."""
    return SurveyService(db).list_published()


@router.post(
    "",
    response_model=SurveyOut,
    response_model_exclude_none=True,
    status_code=201,
)
def create_survey(
    payload: SurveyCreate,
    user: AuthenticatedUser = Depends(require_user),
    db: Session = Depends(get_db),
) -> Survey:
    """Create a survey owned by the authenticated user."""
    return SurveyService(db).create(payload, user_id=user.id)


@router.post(
    "/responses",
    response_model=ResponseOut,
    response_model_exclude_none=True,
    status_code=201,
)
def submit_response(payload: ResponseSubmit, db: Session = Depends(get_db)):
    """Record one respondent's answers to a survey."""
    return ResponseService(db).submit(payload)


@router.get("/{survey_id}", response_model=SurveyOut, response_model_exclude_none=True)
def get_survey(survey_id: str, db: Session = Depends(get_db)) -> Survey:
    survey = SurveyService(db).get(survey_id)
    if survey is None:
        raise HTTPException(status_code=404, detail="Survey not found")
    return survey


@router.put("/{survey_id}", response_model=SurveyOut, response_model_exclude_none=True)
def update_survey(
    survey_id: str,
    payload: SurveyUpdate,
    user: AuthenticatedUser = Depends(require_user),
    db: Session = Depends(get_db),
) -> Survey:
    """Update a survey. Supplying questions replaces all of them."""
    service = SurveyService(db)
    _get_owned_survey(service, survey_id, user, "modify")

    survey = service.update(survey_id, payload)
    if survey is None:
        raise HTTPException(status_code=404, detail="Survey not found")
    return survey


@router.delete("/{survey_id}", status_code=204)
def delete_survey(
    survey_id: str,
    user: AuthenticatedUser = Depends(require_user),
    db: Session = Depends(get_db),
) -> Response:
    service = SurveyService(db)
    _get_owned_survey(service, survey_id, user, "delete")

    if not service.delete(survey_id):
        raise HTTPException(status_code=404, detail="Survey not found")
    return Response(status_code=204)


@router.get(
    "/{survey_id}/responses",
    response_model=List[ResponseOut],
    response_model_exclude_none=True,
)
def list_responses(survey_id: str, db: Session = Depends(get_db)):
    """All responses to a survey, newest first."""
    return ResponseService(db).list_for_survey(survey_id)


@router.get(
    "/{survey_id}/stats",
    response_model=SurveyStatsOut,
    response_model_exclude_none=True,
)
def get_survey_stats(survey_id: str, db: Session = Depends(get_db)) -> SurveyStatsOut:
    """Per-question statistics for a survey.

    Unknown surveys are not an error: they report zero responses and no
    question stats.
    """
    stats = StatsService.for_session(db).get_survey_stats(survey_id)
    return SurveyStatsOut.model_validate(stats)
