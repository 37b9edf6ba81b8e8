"""Create comment use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from cookbook.application.usecase.base import BaseUseCase
from cookbook.domain.error import StaleRatingError
from cookbook.domain.service import CommentService
from cookbook.domain.value import AuthorDisplay, RecipeId, UserId

from .common import CommentItem, to_comment_item


class CreateCommentRequest(BaseModel):
    """Create comment request."""

    recipe_id: str  # UUID string
    author_id: str  # User ID from the resolved identity
    author_email: str
    author_name: str | None = None
    author_photo_url: str | None = None
    text: str
    rating: int | None = None


class CreateCommentResponse(BaseModel):
    """Create comment response."""

    comment: CommentItem
    rating_stale: bool = False


class CreateCommentUseCase(
    BaseUseCase[CreateCommentRequest, CreateCommentResponse],
):
    """Use case for posting a review (top-level comment) on a recipe."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize create comment use case.

        Args:
            comment_service: Comment domain service
        """
        self.comment_service = comment_service

    async def execute(self, request: CreateCommentRequest) -> CreateCommentResponse:
        """Execute create comment flow.

        Steps:
        1. Validate text and rating, check rating policy
        2. Store the comment
        3. Resync the recipe rating if the comment carries a qualifying rating

        A failed rating sync does not undo the comment; the response is
        flagged ``rating_stale`` instead.

        Args:
            request: Create comment request

        Returns:
            Created comment

        Raises:
            ValidationError: If text or rating is invalid
            PolicyError: If the rating is not allowed
            NotFoundError: If the recipe does not exist
        """
        author = AuthorDisplay(
            email=request.author_email,
            display_name=request.author_name,
            photo_url=request.author_photo_url,
        )
        try:
            comment = await self.comment_service.create_comment(
                recipe_id=RecipeId(UUID(request.recipe_id)),
                author_id=UserId(UUID(request.author_id)),
                author=author,
                text=request.text,
                rating=request.rating,
            )
        except StaleRatingError as e:
            logfire.warn(
                "Comment created with stale recipe rating",
                recipe_id=request.recipe_id,
            )
            return CreateCommentResponse(
                comment=to_comment_item(e.result), rating_stale=True
            )

        return CreateCommentResponse(comment=to_comment_item(comment))
