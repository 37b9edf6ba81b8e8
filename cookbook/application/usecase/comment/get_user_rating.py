"""Get user rating use case."""

from uuid import UUID

from pydantic import BaseModel

from cookbook.domain.service import CommentService
from cookbook.domain.value import RecipeId, UserId

from .common import CommentItem, to_comment_item


class GetUserRatingRequest(BaseModel):
    """Get user rating request."""

    recipe_id: str  # UUID string
    user_id: str  # UUID string


class GetUserRatingResponse(BaseModel):
    """Get user rating response."""

    has_rated: bool
    rating: int | None = None
    comment: CommentItem | None = None


class GetUserRatingUseCase:
    """Use case for looking up the current user's rated review."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: GetUserRatingRequest) -> GetUserRatingResponse:
        """Execute get user rating flow.

        Args:
            request: Get user rating request

        Returns:
            The user's rated review, if any
        """
        comment = await self.comment_service.get_user_rating(
            UserId(UUID(request.user_id)), RecipeId(UUID(request.recipe_id))
        )
        if comment is None:
            return GetUserRatingResponse(has_rated=False)

        return GetUserRatingResponse(
            has_rated=True,
            rating=comment.rating,
            comment=to_comment_item(comment),
        )
