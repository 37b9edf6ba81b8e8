"""Delete comment use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from cookbook.application.usecase.base import BaseUseCase
from cookbook.domain.error import PartialCascadeFailureError, StaleRatingError
from cookbook.domain.service import CommentService
from cookbook.domain.value import CommentId, RecipeId, UserId


class DeleteCommentRequest(BaseModel):
    """Delete comment request."""

    comment_id: str  # UUID string
    user_id: str  # Current user, must be the author
    recipe_id: str | None = None  # If set, the comment must be on this recipe


class DeleteCommentResponse(BaseModel):
    """Delete comment response.

    ``complete`` is False when the cascade stopped part way; the ids in
    ``deleted_ids`` are gone for good and ``remaining_ids`` are still
    stored. Repeating the delete finishes the thread.
    """

    deleted_ids: list[str]
    remaining_ids: list[str] = []
    complete: bool = True
    rating_stale: bool = False


class DeleteCommentUseCase(
    BaseUseCase[DeleteCommentRequest, DeleteCommentResponse],
):
    """Use case for deleting a comment along with its replies."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize delete comment use case.

        Args:
            comment_service: Comment domain service
        """
        self.comment_service = comment_service

    async def execute(self, request: DeleteCommentRequest) -> DeleteCommentResponse:
        """Execute delete comment flow.

        A partial cascade is reported in the response rather than raised,
        so the deletes that did happen are committed with the request.

        Args:
            request: Delete comment request

        Returns:
            IDs of every removed comment, replies first

        Raises:
            NotFoundError: If the comment doesn't exist or is on another recipe
            NotAuthorizedError: If the user is not the author
        """
        try:
            deleted = await self.comment_service.delete_comment(
                comment_id=CommentId(UUID(request.comment_id)),
                user_id=UserId(UUID(request.user_id)),
                recipe_id=(
                    RecipeId(UUID(request.recipe_id)) if request.recipe_id else None
                ),
            )
        except StaleRatingError as e:
            logfire.warn(
                "Comment deleted with stale recipe rating",
                comment_id=request.comment_id,
            )
            return DeleteCommentResponse(
                deleted_ids=[str(i) for i in e.result or []], rating_stale=True
            )
        except PartialCascadeFailureError as e:
            logfire.error(
                "Comment thread only partially deleted",
                comment_id=request.comment_id,
                deleted=len(e.deleted),
                remaining=len(e.remaining),
            )
            return DeleteCommentResponse(
                deleted_ids=[str(i) for i in e.deleted],
                remaining_ids=[str(i) for i in e.remaining],
                complete=False,
            )

        return DeleteCommentResponse(deleted_ids=[str(i) for i in deleted])
