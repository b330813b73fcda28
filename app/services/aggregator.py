"""Per-question aggregation of normalized answers.

Each question type gets its own summary:

- rating: frequency of each numeric value plus the arithmetic mean
- single-choice, multiple-choice, yes-no: frequency of each option label
- text: nothing (free text is not bucketed)
"""

import json
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple

from app.schemas.survey import QuestionType
from app.services.answer_normalizer import AnswerValue
from app.logging_config import get_logger

logger = get_logger(__name__)

CHOICE_TYPES = frozenset({
    QuestionType.SINGLE_CHOICE.value,
    QuestionType.MULTIPLE_CHOICE.value,
    QuestionType.YES_NO.value,
})

# Decimal text a rating may be written as: optional sign, digits with an
# optional fraction and exponent. No digit separators.
_DECIMAL_RE = re.compile(r"[+-]?(?:Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)")
_RADIX_RE = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")


@dataclass(frozen=True)
class QuestionRecord:
    """The slice of a question the aggregator needs.

    Attributes:
        id: Question identifier
        type: Declared question type
        text: Display text
        order_index: Position within the survey
    """
    id: str
    type: str
    text: str
    order_index: int = 0


@dataclass
class QuestionStat:
    """Aggregated summary of every answer to one question.

    Attributes:
        question_id: Question identifier
        question: Question display text
        type: Question type
        responses: Answer label -> number of occurrences
        average_rating: Mean rating, only set for rating questions with answers
    """
    question_id: str
    question: str
    type: str
    responses: Dict[str, int] = field(default_factory=dict)
    average_rating: Optional[float] = None


def answer_label(value: Any) -> str:
    """Canonical string form of an answer value, used as a frequency key.

    Integral floats drop their fractional part so that 4, 4.0 and "4" all
    land under "4". Booleans render as JSON literals.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def parse_number_text(text: str) -> Optional[float]:
    """Read rating text the way JavaScript's Number() coerces a string.

    Blank text is 0. Hex, octal and binary literals are accepted. Anything
    else must be plain decimal notation.

    Example:
        >>> parse_number_text(" 3.5 ")
        3.5
        >>> parse_number_text("")
        0.0
        >>> parse_number_text("1_000") is None
        True
    """
    candidate = text.strip()
    if not candidate:
        return 0.0
    if _RADIX_RE.fullmatch(candidate):
        try:
            return float(int(candidate, 0))
        except OverflowError:
            return math.inf
    if _DECIMAL_RE.fullmatch(candidate):
        return float(candidate.replace("Infinity", "inf"))
    return None


def to_rating(value: AnswerValue) -> Optional[float]:
    """Convert an answer to a finite number, or None if it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        number = parse_number_text(value)
        if number is None:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def _increment(counts: Dict[str, int], value: Any) -> None:
    key = answer_label(value)
    counts[key] = counts.get(key, 0) + 1


def aggregate_rating(answers: Sequence[AnswerValue]) -> Tuple[Dict[str, int], float]:
    """Frequency of each numeric rating and their mean.

    Values that are not finite numbers are dropped. The mean of no
    surviving values is 0.

    Returns:
        (counts, average)
    """
    ratings = [r for r in (to_rating(a) for a in answers) if r is not None]
    counts: Dict[str, int] = {}
    for rating in ratings:
        _increment(counts, rating)
    average = sum(ratings) / len(ratings) if ratings else 0
    return counts, average


def aggregate_choices(answers: Sequence[AnswerValue]) -> Dict[str, int]:
    """Frequency of each option label.

    Lists contribute every non-blank element, so multi-select semantics apply
    whatever the declared type. Blank scalars (None, "") are skipped.
    """
    counts: Dict[str, int] = {}
    for answer in answers:
        if isinstance(answer, list):
            for option in answer:
                if not _is_blank(option):
                    _increment(counts, option)
        elif not _is_blank(answer):
            _increment(counts, answer)
    return counts


def aggregate_question(
    question: QuestionRecord,
    answers: Sequence[AnswerValue],
) -> QuestionStat:
    """Summarize all normalized answers collected for one question.

    Args:
        question: Question being summarized
        answers: Normalized answers from every response (may be empty)

    Returns:
        QuestionStat for the question. average_rating is only populated for
        rating questions that received at least one answer.
    """
    stat = QuestionStat(
        question_id=question.id,
        question=question.text,
        type=question.type,
    )

    if not answers:
        return stat

    question_type = getattr(question.type, "value", question.type)
    if question_type == QuestionType.RATING:
        stat.responses, stat.average_rating = aggregate_rating(answers)
    elif question_type in CHOICE_TYPES:
        stat.responses = aggregate_choices(answers)
    elif question_type != QuestionType.TEXT:
        logger.warning(
            f"Unknown question type {question.type!r} for question {question.id}; "
            f"answers not aggregated"
        )

    return stat
