"""Get comment stats use case."""

from uuid import UUID

from pydantic import BaseModel

from cookbook.domain.service import CommentService
from cookbook.domain.value import RecipeId

from .common import RatingSummary, to_rating_summary


class GetCommentStatsRequest(BaseModel):
    """Get comment stats request."""

    recipe_id: str  # UUID string


class GetCommentStatsResponse(BaseModel):
    """Get comment stats response."""

    total_comments: int
    total_replies: int
    rating: RatingSummary


class GetCommentStatsUseCase:
    """Use case for review and reply counts of a recipe."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(
        self, request: GetCommentStatsRequest
    ) -> GetCommentStatsResponse:
        stats = await self.comment_service.get_stats(RecipeId(UUID(request.recipe_id)))
        return GetCommentStatsResponse(
            total_comments=stats.total_comments,
            total_replies=stats.total_replies,
            rating=to_rating_summary(stats.rating),
        )
