"""Get comments use case."""

from uuid import UUID

from pydantic import BaseModel

from cookbook.domain.service import CommentService, aggregate, assemble_threads
from cookbook.domain.value import RecipeId

from .common import RatingSummary, ThreadItem, to_rating_summary, to_thread_item


class GetCommentsRequest(BaseModel):
    """Get comments request."""

    recipe_id: str  # UUID string


class GetCommentsResponse(BaseModel):
    """Get comments response."""

    threads: list[ThreadItem]
    rating: RatingSummary


class GetCommentsUseCase:
    """Use case for reading a recipe's comment threads."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize get comments use case.

        Args:
            comment_service: Comment domain service
        """
        self.comment_service = comment_service

    async def execute(self, request: GetCommentsRequest) -> GetCommentsResponse:
        """Execute get comments flow.

        Threads and the rating summary come from the same read, so they
        always agree with each other.

        Args:
            request: Get comments request

        Returns:
            Threads (newest review first) with the rating summary

        Raises:
            NotFoundError: If the recipe doesn't exist
        """
        recipe_id = RecipeId(UUID(request.recipe_id))
        owner_id = await self.comment_service.ownership_lookup.find_owner_id(
            recipe_id
        )
        comments = await self.comment_service.get_comments(recipe_id)

        return GetCommentsResponse(
            threads=[to_thread_item(t) for t in assemble_threads(comments)],
            rating=to_rating_summary(aggregate(comments, owner_id)),
        )
