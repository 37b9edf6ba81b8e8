"""Rating aggregation and recipe rating sync."""

from typing import Iterable

import logfire

from cookbook.domain.error import RatingWriteError, StoreUnavailableError
from cookbook.domain.model.comment import Comment
from cookbook.domain.repository import CommentRepository, RecipeRatingWriter
from cookbook.domain.value import (
    RATING_VALUES,
    CommentStats,
    RatingAggregate,
    RecipeId,
    UserId,
)

from .base import Service


def qualifies(comment: Comment, owner_id: UserId) -> bool:
    """Whether a comment's rating counts toward the recipe aggregate."""
    return (
        comment.parent_id is None
        and comment.rating is not None
        and comment.author_id != owner_id
    )


def aggregate(comments: Iterable[Comment], owner_id: UserId) -> RatingAggregate:
    """Compute average, count and histogram over qualifying ratings.

    Replies, unrated comments and the owner's own comments are ignored.
    The average is not rounded.

    Args:
        comments: All comments for one recipe
        owner_id: The recipe owner

    Returns:
        The aggregate, with ``avg_rating`` 0 when nothing qualifies
    """
    histogram = {value: 0 for value in RATING_VALUES}
    total = 0

    for comment in comments:
        if not qualifies(comment, owner_id):
            continue
        histogram[comment.rating] += 1
        total += comment.rating

    review_count = sum(histogram.values())
    return RatingAggregate(
        avg_rating=total / review_count if review_count else 0.0,
        review_count=review_count,
        histogram=histogram,
    )


def comment_stats(comments: list[Comment], owner_id: UserId) -> CommentStats:
    """Review and reply counts plus the rating aggregate."""
    replies = sum(1 for c in comments if c.parent_id is not None)
    return CommentStats(
        total_comments=len(comments) - replies,
        total_replies=replies,
        rating=aggregate(comments, owner_id),
    )


class RatingService(Service):
    """Recomputes and persists the denormalized recipe rating."""

    def __init__(
        self,
        comment_repository: CommentRepository,
        rating_writer: RecipeRatingWriter,
    ) -> None:
        """Initialize rating service.

        Args:
            comment_repository: Comment repository
            rating_writer: Writer for the recipe's rating fields
        """
        self.comment_repository = comment_repository
        self.rating_writer = rating_writer

    async def sync_recipe_rating(
        self, recipe_id: RecipeId, owner_id: UserId
    ) -> RatingAggregate:
        """Recompute the recipe rating from every comment and write it back.

        Reads the full comment set rather than applying a delta, so any
        drift is corrected by the next successful sync. The read and the
        write are not atomic: a concurrent sync may finish later with an
        older view.

        Args:
            recipe_id: Recipe ID
            owner_id: Recipe owner, whose ratings are excluded

        Returns:
            The aggregate that was written

        Raises:
            StoreUnavailableError: If the comments could not be read
            RatingWriteError: If the recipe record could not be updated
        """
        with logfire.span(
            "rating_service.sync_recipe_rating",
            recipe_id=str(recipe_id),
            owner_id=str(owner_id),
        ):
            # Both legs share one isolated scope so a failed read or write
            # never aborts the comment mutation that triggered the sync
            async with self.rating_writer.isolated():
                try:
                    comments = await self.comment_repository.find_by_recipe(
                        recipe_id
                    )
                except StoreUnavailableError:
                    logfire.error(
                        "Rating sync could not read comments",
                        recipe_id=str(recipe_id),
                    )
                    raise

                result = aggregate(comments, owner_id)

                try:
                    await self.rating_writer.write_rating(
                        recipe_id, result.avg_rating, result.review_count
                    )
                except RatingWriteError:
                    logfire.error(
                        "Rating sync could not write recipe rating",
                        recipe_id=str(recipe_id),
                        avg_rating=result.avg_rating,
                        review_count=result.review_count,
                    )
                    raise

            logfire.info(
                "Recipe rating synced",
                recipe_id=str(recipe_id),
                avg_rating=result.avg_rating,
                review_count=result.review_count,
            )
            return result
