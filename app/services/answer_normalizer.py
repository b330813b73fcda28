"""Normalization of stored answer values.

Answers are persisted as JSON, but older rows (and some drivers) hand them
back as JSON-encoded text. Everything that reads answers goes through
normalize_answer so the rest of the code only ever sees a scalar string, a
number, or a list.
"""

import json
from typing import Any, List, Tuple, Union

# Shape of an answer once normalized. None only appears for stored JSON null.
AnswerValue = Union[str, int, float, List[Any], None]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def try_parse_json(raw: str) -> Tuple[bool, Any]:
    """Attempt to decode raw as strict JSON.

    NaN, Infinity and -Infinity are rejected like any other non-JSON text.

    Args:
        raw: Text that may or may not contain JSON

    Returns:
        (True, decoded) on success, (False, None) when raw is not valid JSON
    """
    try:
        return True, json.loads(raw, parse_constant=_reject_constant)
    except ValueError:
        return False, None


def normalize_answer(raw: Any) -> AnswerValue:
    """Coerce a stored answer into its intended in-memory shape.

    Text is decoded as JSON when possible and otherwise kept verbatim.
    Already structured values (lists, numbers) pass through unchanged.

    Example:
        >>> normalize_answer('["x", "y"]')
        ['x', 'y']
        >>> normalize_answer("plain")
        'plain'
        >>> normalize_answer(4)
        4
    """
    if isinstance(raw, str):
        parsed, value = try_parse_json(raw)
        return value if parsed else raw
    return raw


def normalize_answers(raw_values) -> List[AnswerValue]:
    """Normalize every value in an iterable of stored answers."""
    return [normalize_answer(raw) for raw in raw_values]
