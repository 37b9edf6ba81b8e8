"""Add reply use case."""

from uuid import UUID

from pydantic import BaseModel

from cookbook.application.usecase.base import BaseUseCase
from cookbook.domain.service import CommentService
from cookbook.domain.value import AuthorDisplay, CommentId, RecipeId, UserId

from .common import CommentItem, to_comment_item


class AddReplyRequest(BaseModel):
    """Add reply request."""

    recipe_id: str  # UUID string
    parent_id: str  # UUID string of the review being answered
    author_id: str
    author_email: str
    author_name: str | None = None
    author_photo_url: str | None = None
    text: str


class AddReplyResponse(BaseModel):
    """Add reply response."""

    comment: CommentItem


class AddReplyUseCase(
    BaseUseCase[AddReplyRequest, AddReplyResponse],
):
    """Use case for replying to a review."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize add reply use case.

        Args:
            comment_service: Comment domain service
        """
        self.comment_service = comment_service

    async def execute(self, request: AddReplyRequest) -> AddReplyResponse:
        """Execute add reply flow.

        Args:
            request: Add reply request

        Returns:
            Created reply

        Raises:
            ValidationError: If the text is invalid
            NotFoundError: If the review does not exist on this recipe
            NestedReplyError: If the target is itself a reply
        """
        reply = await self.comment_service.add_reply(
            recipe_id=RecipeId(UUID(request.recipe_id)),
            parent_id=CommentId(UUID(request.parent_id)),
            author_id=UserId(UUID(request.author_id)),
            author=AuthorDisplay(
                email=request.author_email,
                display_name=request.author_name,
                photo_url=request.author_photo_url,
            ),
            text=request.text,
        )
        return AddReplyResponse(comment=to_comment_item(reply))
