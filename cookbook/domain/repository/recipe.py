"""Recipe collaborator interfaces.

Recipes are owned by another part of the application. Comments only need
to know who owns a recipe and where to put the denormalized rating.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager, nullcontext

from cookbook.domain.value import RecipeId, UserId


class RecipeOwnershipLookup(ABC):
    """Resolves the owner of a recipe."""

    @abstractmethod
    async def find_owner_id(self, recipe_id: RecipeId) -> UserId:
        """Return the owner's user ID.

        Raises:
            NotFoundError: If the recipe does not exist
        """
        pass


class RecipeRatingWriter(ABC):
    """Persists the denormalized rating fields on a recipe record."""

    @abstractmethod
    async def write_rating(
        self, recipe_id: RecipeId, avg_rating: float, review_count: int
    ) -> None:
        """Overwrite ``avg_rating`` and ``review_count`` on the recipe.

        Raises:
            RatingWriteError: If the write fails
        """
        pass

    def isolated(self) -> AbstractAsyncContextManager[None]:
        """Scope for a rating sync whose failure must not undo earlier writes.

        Stores that share a transaction with the comment mutation roll back
        only the work done inside the scope. The default does nothing.
        """
        return nullcontext()
