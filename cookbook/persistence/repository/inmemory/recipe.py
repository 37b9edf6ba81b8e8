"""In-memory recipe collaborator for testing."""

from cookbook.domain.error import NotFoundError, RatingWriteError
from cookbook.domain.repository.recipe import RecipeOwnershipLookup, RecipeRatingWriter
from cookbook.domain.value import RatingAggregate, RecipeId, UserId


class InMemoryRecipeRepository(RecipeOwnershipLookup, RecipeRatingWriter):
    """Keeps recipe owners and their written ratings in dicts."""

    def __init__(self) -> None:
        self._owners: dict[RecipeId, UserId] = {}
        self._ratings: dict[RecipeId, RatingAggregate] = {}

    def add_recipe(self, recipe_id: RecipeId, owner_id: UserId) -> None:
        """Register a recipe with zeroed rating fields."""
        self._owners[recipe_id] = owner_id
        self._ratings[recipe_id] = RatingAggregate()

    def get_rating(self, recipe_id: RecipeId) -> tuple[float, int]:
        """Return the ``(avg_rating, review_count)`` last written."""
        rating = self._ratings[recipe_id]
        return rating.avg_rating, rating.review_count

    async def find_owner_id(self, recipe_id: RecipeId) -> UserId:
        """Return the recipe owner."""
        owner_id = self._owners.get(recipe_id)
        if owner_id is None:
            raise NotFoundError("Recipe", str(recipe_id))
        return owner_id

    async def write_rating(
        self, recipe_id: RecipeId, avg_rating: float, review_count: int
    ) -> None:
        """Overwrite the recipe's rating fields."""
        if recipe_id not in self._owners:
            raise RatingWriteError(recipe_id, "unknown recipe")
        self._ratings[recipe_id] = RatingAggregate(
            avg_rating=avg_rating, review_count=review_count
        )
