"""In-memory repository implementations for testing."""

from .comment import InMemoryCommentRepository
from .recipe import InMemoryRecipeRepository

__all__ = [
    "InMemoryCommentRepository",
    "InMemoryRecipeRepository",
]
