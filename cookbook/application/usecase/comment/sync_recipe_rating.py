"""Sync recipe rating use case."""

from uuid import UUID

from pydantic import BaseModel

from cookbook.application.usecase.base import BaseUseCase
from cookbook.domain.service import CommentService
from cookbook.domain.value import RecipeId

from .common import RatingSummary, to_rating_summary


class SyncRecipeRatingRequest(BaseModel):
    """Sync recipe rating request."""

    recipe_id: str  # UUID string


class SyncRecipeRatingResponse(BaseModel):
    """Sync recipe rating response."""

    recipe_id: str
    rating: RatingSummary


class SyncRecipeRatingUseCase(
    BaseUseCase[SyncRecipeRatingRequest, SyncRecipeRatingResponse],
):
    """Use case for reconciling a recipe's stored rating with its comments."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize sync recipe rating use case.

        Args:
            comment_service: Comment domain service
        """
        self.comment_service = comment_service

    async def execute(
        self, request: SyncRecipeRatingRequest
    ) -> SyncRecipeRatingResponse:
        """Execute sync recipe rating flow.

        Raises:
            NotFoundError: If the recipe doesn't exist
            StoreUnavailableError: If the comments could not be read
            RatingWriteError: If the recipe record could not be updated
        """
        result = await self.comment_service.sync_rating(
            RecipeId(UUID(request.recipe_id))
        )
        return SyncRecipeRatingResponse(
            recipe_id=request.recipe_id, rating=to_rating_summary(result)
        )
