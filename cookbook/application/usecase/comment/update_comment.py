"""Update comment use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from cookbook.application.usecase.base import BaseUseCase
from cookbook.domain.error import StaleRatingError
from cookbook.domain.model import CommentPatch
from cookbook.domain.service import CommentService
from cookbook.domain.value import CommentId, RecipeId, UserId

from .common import CommentItem, to_comment_item


class UpdateCommentRequest(BaseModel):
    """Update comment request.

    Only the fields that were explicitly set are applied. Sending
    ``rating: null`` removes the rating; omitting it leaves it alone.
    """

    comment_id: str  # UUID string
    user_id: str  # Current user, must be the author
    recipe_id: str | None = None  # If set, the comment must be on this recipe
    text: str | None = None
    rating: int | None = None


class UpdateCommentResponse(BaseModel):
    """Update comment response."""

    comment: CommentItem
    rating_stale: bool = False


class UpdateCommentUseCase(
    BaseUseCase[UpdateCommentRequest, UpdateCommentResponse],
):
    """Use case for editing a comment's text or rating."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize update comment use case.

        Args:
            comment_service: Comment domain service
        """
        self.comment_service = comment_service

    async def execute(self, request: UpdateCommentRequest) -> UpdateCommentResponse:
        """Execute update comment flow.

        Args:
            request: Update comment request

        Returns:
            Updated comment

        Raises:
            NotFoundError: If the comment doesn't exist or is on another recipe
            NotAuthorizedError: If the user is not the author
            ValidationError: If the new text or rating is invalid
            PolicyError: If the rating change is not allowed
        """
        fields = request.model_fields_set & {"text", "rating"}
        patch = CommentPatch(**{name: getattr(request, name) for name in fields})

        try:
            comment = await self.comment_service.update_comment(
                comment_id=CommentId(UUID(request.comment_id)),
                user_id=UserId(UUID(request.user_id)),
                patch=patch,
                recipe_id=(
                    RecipeId(UUID(request.recipe_id)) if request.recipe_id else None
                ),
            )
        except StaleRatingError as e:
            logfire.warn(
                "Comment updated with stale recipe rating",
                comment_id=request.comment_id,
            )
            return UpdateCommentResponse(
                comment=to_comment_item(e.result), rating_stale=True
            )

        return UpdateCommentResponse(comment=to_comment_item(comment))
