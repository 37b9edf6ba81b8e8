"""Domain value objects for cookbook comments and ratings.

Value objects are immutable and defined by their values, not identity.
"""

from enum import Enum

from pydantic import Field, field_validator

from cookbook.domain.value.common import ValueObject

RATING_VALUES = (1, 2, 3, 4, 5)


class ValidationIssue(str, Enum):
    """A single problem found while validating comment input."""

    EMPTY_TEXT = "empty_text"
    TEXT_TOO_LONG = "text_too_long"
    RATING_OUT_OF_RANGE = "rating_out_of_range"


class AuthorDisplay(ValueObject):
    """Author details captured when a comment is written.

    Denormalized for rendering; later profile edits are not propagated.
    """

    email: str = Field(max_length=255)
    display_name: str | None = Field(default=None, max_length=255)
    photo_url: str | None = None


class RatingAggregate(ValueObject):
    """Qualifying-rating summary for a single recipe."""

    avg_rating: float = 0.0
    review_count: int = Field(default=0, ge=0)
    histogram: dict[int, int] = Field(
        default_factory=lambda: {value: 0 for value in RATING_VALUES}
    )

    @field_validator("histogram")
    @classmethod
    def validate_histogram_keys(cls, v: dict[int, int]) -> dict[int, int]:
        """Every star value is present, nothing else is."""
        if set(v) != set(RATING_VALUES):
            raise ValueError("Histogram must have exactly the keys 1-5")
        return v


class CommentStats(ValueObject):
    """Comment counts for a recipe alongside its rating aggregate."""

    total_comments: int = Field(ge=0)  # top-level only
    total_replies: int = Field(ge=0)
    rating: RatingAggregate
