"""Pydantic schemas for surveys, responses and statistics.

Wire payloads use camelCase (surveyId, minRating, ...). Request schemas also
accept the snake_case field names.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from app.services.answer_normalizer import normalize_answer, try_parse_json


class QuestionType(str, Enum):
    """Valid question types."""
    TEXT = "text"
    MULTIPLE_CHOICE = "multiple-choice"
    SINGLE_CHOICE = "single-choice"
    RATING = "rating"
    YES_NO = "yes-no"


class CamelModel(BaseModel):
    """Base schema serializing to camelCase and readable from ORM objects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Request schemas

class QuestionCreate(CamelModel):
    """A question as submitted when creating or replacing a survey's questions."""
    type: QuestionType
    question: str = Field(..., min_length=1, description="Question text")
    required: bool = False
    options: Optional[List[str]] = None
    min_rating: Optional[int] = None
    max_rating: Optional[int] = None

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Question text is required")
        return v


class SurveyCreate(CamelModel):
    """Payload for POST /api/surveys."""
    title: str = Field(..., min_length=1, description="Survey title")
    description: Optional[str] = None
    questions: List[QuestionCreate] = Field(..., min_length=1)
    is_published: bool = True
    author_id: Optional[str] = None
    author_name: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required")
        return v


class SurveyUpdate(CamelModel):
    """Payload for PUT /api/surveys/{id}. Only supplied fields change.

    Supplying questions replaces the survey's whole question set.
    """
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    is_published: Optional[bool] = None
    questions: Optional[List[QuestionCreate]] = None


class AnswerSubmit(CamelModel):
    """One answer inside a response submission."""
    question_id: UUID
    answer: Union[str, List[str], int, float]


class ResponseSubmit(CamelModel):
    """Payload for POST /api/surveys/responses."""
    survey_id: UUID
    answers: List[AnswerSubmit] = Field(..., min_length=1)
    user_id: Optional[UUID] = None
    respondent_name: str = Field(..., min_length=1)
    respondent_email: Optional[Union[EmailStr, Literal[""]]] = None
    respondent_age: Optional[int] = Field(None, ge=1, le=150)


# Response schemas

class QuestionOut(CamelModel):
    id: str
    type: str
    question: str
    required: bool = False
    options: Optional[List[str]] = None
    min_rating: Optional[int] = None
    max_rating: Optional[int] = None

    @field_validator("options", mode="before")
    @classmethod
    def parse_options(cls, v: Any) -> Any:
        """Accept options stored as a JSON string as well as a list."""
        if isinstance(v, str):
            parsed, value = try_parse_json(v)
            return value if parsed and isinstance(value, list) else [v]
        return v or None

    @field_validator("min_rating", "max_rating", mode="before")
    @classmethod
    def zero_bound_is_unset(cls, v: Any) -> Any:
        return v or None


class SurveyOut(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    questions: List[QuestionOut] = []
    created_at: datetime
    updated_at: datetime
    user_id: Optional[str] = None
    author_id: Optional[str] = None
    author_name: Optional[str] = None
    is_published: bool


class AnswerOut(CamelModel):
    question_id: str
    answer: Any

    @field_validator("answer", mode="before")
    @classmethod
    def normalize(cls, v: Any) -> Any:
        return normalize_answer(v)


class ResponseOut(CamelModel):
    id: str
    survey_id: str
    answers: List[AnswerOut] = []
    submitted_at: datetime
    respondent_name: Optional[str] = None
    respondent_email: Optional[str] = None
    respondent_age: Optional[int] = None

    @field_validator("respondent_name", "respondent_email", mode="before")
    @classmethod
    def empty_is_unset(cls, v: Any) -> Any:
        return v or None


class QuestionStatOut(CamelModel):
    question_id: str
    question: str
    type: str
    responses: Dict[str, int]
    average_rating: Optional[float] = None


class SurveyStatsOut(CamelModel):
    survey_id: str
    total_responses: int
    question_stats: List[QuestionStatOut]
