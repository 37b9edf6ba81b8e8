"""PostgreSQL repository implementations."""

from cookbook.persistence.repository.comment import PostgresCommentRepository
from cookbook.persistence.repository.recipe import PostgresRecipeRepository

__all__ = [
    "PostgresCommentRepository",
    "PostgresRecipeRepository",
]
