"""Repository interfaces."""

from cookbook.domain.repository.comment import CommentRepository
from cookbook.domain.repository.recipe import RecipeOwnershipLookup, RecipeRatingWriter

__all__ = [
    "CommentRepository",
    "RecipeOwnershipLookup",
    "RecipeRatingWriter",
]
