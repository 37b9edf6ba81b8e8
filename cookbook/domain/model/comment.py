"""Comment entity.

A comment is either a review (top-level, may carry a star rating) or a
reply to a review. Replies are one level deep: a reply's parent is always
a top-level comment.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from cookbook.domain.model.common import DomainModel
from cookbook.domain.value import AuthorDisplay, CommentId, RecipeId, UserId


class Comment(DomainModel):
    """Comment entity.

    Only ``text`` and ``rating`` change after creation. ``created_at`` is
    assigned by the store and is the sole ordering key.
    """

    id: CommentId
    recipe_id: RecipeId
    author_id: UserId
    author: AuthorDisplay
    text: str = Field(min_length=1)
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    parent_id: Optional[CommentId] = None
    is_owner_reply: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None

    @property
    def is_rated_review(self) -> bool:
        """Top-level comment carrying a rating (owner or not)."""
        return self.parent_id is None and self.rating is not None


class NewComment(DomainModel):
    """Comment data supplied by a writer, before the store assigns id and time."""

    recipe_id: RecipeId
    author_id: UserId
    author: AuthorDisplay
    text: str = Field(min_length=1)
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    parent_id: Optional[CommentId] = None
    is_owner_reply: bool = False


class CommentPatch(DomainModel):
    """Partial update of a comment.

    Fields left out are untouched. ``rating`` explicitly set to None clears
    the rating; use ``rating_changed`` to tell the two apart.
    """

    text: Optional[str] = None
    rating: Optional[int] = None

    @property
    def rating_changed(self) -> bool:
        return "rating" in self.model_fields_set

    @property
    def text_changed(self) -> bool:
        return "text" in self.model_fields_set and self.text is not None


class CommentThread(DomainModel):
    """A top-level comment with its replies, oldest reply first."""

    comment: Comment
    replies: list[Comment] = Field(default_factory=list)
