"""Response items shared by the comment use cases."""

from datetime import datetime

from pydantic import BaseModel

from cookbook.domain.model import Comment, CommentThread
from cookbook.domain.value import RatingAggregate


class CommentItem(BaseModel):
    """Comment as returned to clients."""

    comment_id: str
    recipe_id: str
    author_id: str
    author_email: str
    author_name: str | None
    author_photo_url: str | None
    text: str
    rating: int | None
    parent_id: str | None
    is_owner_reply: bool
    created_at: datetime
    updated_at: datetime | None


class ThreadItem(BaseModel):
    """A review with its replies."""

    comment: CommentItem
    replies: list[CommentItem]


class RatingSummary(BaseModel):
    """Aggregate rating of a recipe."""

    avg_rating: float
    review_count: int
    histogram: dict[int, int]


def to_comment_item(comment: Comment) -> CommentItem:
    return CommentItem(
        comment_id=str(comment.id),
        recipe_id=str(comment.recipe_id),
        author_id=str(comment.author_id),
        author_email=comment.author.email,
        author_name=comment.author.display_name,
        author_photo_url=comment.author.photo_url,
        text=comment.text,
        rating=comment.rating,
        parent_id=str(comment.parent_id) if comment.parent_id else None,
        is_owner_reply=comment.is_owner_reply,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
    )


def to_thread_item(thread: CommentThread) -> ThreadItem:
    return ThreadItem(
        comment=to_comment_item(thread.comment),
        replies=[to_comment_item(reply) for reply in thread.replies],
    )


def to_rating_summary(rating: RatingAggregate) -> RatingSummary:
    return RatingSummary(
        avg_rating=rating.avg_rating,
        review_count=rating.review_count,
        histogram=dict(rating.histogram),
    )
