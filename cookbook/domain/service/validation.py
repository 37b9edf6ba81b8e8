"""Comment input validation.

Pure checks run before any store call, so a rejected write never leaves
partial state behind.
"""

from cookbook.domain.error import ValidationError
from cookbook.domain.value import ValidationIssue

MAX_TEXT_LENGTH = 1000
MIN_RATING = 1
MAX_RATING = 5


def validate_comment(
    text: str | None,
    rating: object = None,
    *,
    max_length: int = MAX_TEXT_LENGTH,
    min_rating: int = MIN_RATING,
    max_rating: int = MAX_RATING,
) -> list[ValidationIssue]:
    """Check comment text and an optional rating.

    Every violation is collected; nothing short-circuits.

    Args:
        text: Comment text as typed (trimmed before measuring)
        rating: Star rating, or None for an unrated comment
        max_length: Longest allowed trimmed text
        min_rating: Lowest allowed rating
        max_rating: Highest allowed rating

    Returns:
        The issues found, empty when the input is valid
    """
    issues: list[ValidationIssue] = []

    trimmed = (text or "").strip()
    if not trimmed:
        issues.append(ValidationIssue.EMPTY_TEXT)
    elif len(trimmed) > max_length:
        issues.append(ValidationIssue.TEXT_TOO_LONG)

    if rating is not None and not is_valid_rating(rating, min_rating, max_rating):
        issues.append(ValidationIssue.RATING_OUT_OF_RANGE)

    return issues


def is_valid_rating(
    rating: object, min_rating: int = MIN_RATING, max_rating: int = MAX_RATING
) -> bool:
    # bool is an int subclass; True is not a star rating
    if isinstance(rating, bool) or not isinstance(rating, int):
        return False
    return min_rating <= rating <= max_rating


def ensure_valid_comment(
    text: str | None,
    rating: object = None,
    *,
    max_length: int = MAX_TEXT_LENGTH,
    min_rating: int = MIN_RATING,
    max_rating: int = MAX_RATING,
) -> None:
    """Raise ValidationError listing every issue, if any."""
    issues = validate_comment(
        text,
        rating,
        max_length=max_length,
        min_rating=min_rating,
        max_rating=max_rating,
    )
    if issues:
        raise ValidationError(issues)
