import re
from numbers import Integral, Real

from src.config import config
from src.core.errors import InvalidScoreError

# ASCII digits only: str.isdigit also accepts superscripts that int() rejects
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def validate_score(
    value,
    min_score: int = config.RATING_MIN_SCORE,
    max_score: int = config.RATING_MAX_SCORE,
) -> int:
    """
    Validate a rating score and normalise it to ``int``.

    Accepts ints, integral floats (4.0) and integral strings ("4", as sent in
    a URL path). Everything else, including booleans, raises InvalidScoreError.

    Args:
        value: Raw score from the caller
        min_score: Lowest accepted score (inclusive)
        max_score: Highest accepted score (inclusive)

    Returns:
        int: The validated score

    Raises:
        InvalidScoreError: If the score is non-numeric, fractional or out of range
    """
    details = {"score": repr(value), "min": min_score, "max": max_score}

    if value is None or isinstance(value, bool):
        raise InvalidScoreError(details=details)

    if isinstance(value, str):
        match = INTEGER_PATTERN.fullmatch(value.strip())
        if match is None:
            raise InvalidScoreError(details=details)
        score = int(match.group())
    elif isinstance(value, Integral):
        score = int(value)
    elif isinstance(value, Real):
        if value != value or not float(value).is_integer():
            raise InvalidScoreError(details=details)
        score = int(value)
    else:
        raise InvalidScoreError(details=details)

    if score < min_score or score > max_score:
        raise InvalidScoreError(
            f"Score must be an integer between {min_score} and {max_score}",
            details=details,
        )

    return score
