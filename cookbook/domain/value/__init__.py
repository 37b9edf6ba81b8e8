"""Domain value objects for cookbook."""

from cookbook.domain.value.identifiers import CommentId, RecipeId, UserId
from cookbook.domain.value.types import (
    RATING_VALUES,
    AuthorDisplay,
    CommentStats,
    RatingAggregate,
    ValidationIssue,
)

__all__ = [
    # Identifiers
    "UserId",
    "RecipeId",
    "CommentId",
    # Types
    "RATING_VALUES",
    "AuthorDisplay",
    "CommentStats",
    "RatingAggregate",
    "ValidationIssue",
]
