"""Comment domain service."""

from collections import deque

import logfire

from cookbook.config import CommentSettings
from cookbook.domain.error import (
    NestedReplyError,
    NotAuthorizedError,
    NotFoundError,
    PartialCascadeFailureError,
    RatingWriteError,
    ReplyCannotRateError,
    StaleRatingError,
    StoreUnavailableError,
)
from cookbook.domain.model.comment import (
    Comment,
    CommentPatch,
    CommentThread,
    NewComment,
)
from cookbook.domain.repository import CommentRepository, RecipeOwnershipLookup
from cookbook.domain.value import (
    AuthorDisplay,
    CommentId,
    CommentStats,
    RatingAggregate,
    RecipeId,
    UserId,
)

from .base import Service
from .feed import CommentFeed, FeedOutbox, OnChange, Subscription
from .policy import check_rating_policy
from .rating_service import RatingService, aggregate, comment_stats, qualifies
from .thread_assembler import assemble_threads
from .validation import ensure_valid_comment


class CommentService(Service):
    """Domain service for reviews, replies and their effect on recipe ratings."""

    def __init__(
        self,
        comment_repository: CommentRepository,
        ownership_lookup: RecipeOwnershipLookup,
        rating_service: RatingService,
        feed: CommentFeed,
        settings: CommentSettings,
        outbox: FeedOutbox | None = None,
    ) -> None:
        """Initialize comment service.

        Args:
            comment_repository: Comment repository
            ownership_lookup: Resolves recipe owners
            rating_service: Recomputes recipe ratings
            feed: Change feed that subscribers watch
            settings: Comment rules
            outbox: Collects changed recipes for the feed. Defaults to
                publishing straight away, which suits stores without
                transactions.
        """
        self.comment_repository = comment_repository
        self.ownership_lookup = ownership_lookup
        self.rating_service = rating_service
        self.feed = feed
        self.settings = settings
        self.outbox = outbox or FeedOutbox(
            feed, comment_repository.find_by_recipe, immediate=True
        )

    def _validate(self, text: str | None, rating: object = None) -> None:
        ensure_valid_comment(
            text,
            rating,
            max_length=self.settings.max_text_length,
            min_rating=self.settings.min_rating,
            max_rating=self.settings.max_rating,
        )

    def _with_default_photo(self, author: AuthorDisplay) -> AuthorDisplay:
        if author.photo_url:
            return author
        return author.model_copy(update={"photo_url": self.settings.default_photo_url})

    async def _require_comment(
        self, comment_id: CommentId, recipe_id: RecipeId | None = None
    ) -> Comment:
        comment = await self.comment_repository.find_by_id(comment_id)
        if comment is None:
            logfire.warn("Comment not found", comment_id=str(comment_id))
            raise NotFoundError("Comment", str(comment_id))
        if recipe_id is not None and comment.recipe_id != recipe_id:
            logfire.warn(
                "Comment does not belong to recipe",
                comment_id=str(comment_id),
                comment_recipe_id=str(comment.recipe_id),
                target_recipe_id=str(recipe_id),
            )
            raise NotFoundError("Comment", f"{comment_id} on recipe {recipe_id}")
        return comment

    async def _refresh_rating(
        self, recipe_id: RecipeId, owner_id: UserId, result: object
    ) -> None:
        """Sync the recipe rating after a committed mutation.

        Raises:
            StaleRatingError: The mutation stands but the rating was not refreshed
        """
        try:
            await self.rating_service.sync_recipe_rating(recipe_id, owner_id)
        except (StoreUnavailableError, RatingWriteError) as e:
            logfire.warn(
                "Recipe rating may be stale",
                recipe_id=str(recipe_id),
                error=str(e),
            )
            raise StaleRatingError(recipe_id, result) from e

    async def create_comment(
        self,
        recipe_id: RecipeId,
        author_id: UserId,
        author: AuthorDisplay,
        text: str,
        rating: int | None = None,
    ) -> Comment:
        """Create a top-level comment (a review), optionally rated.

        Args:
            recipe_id: Recipe ID
            author_id: Author user ID
            author: Author display details
            text: Comment text
            rating: Star rating, None for an unrated comment

        Returns:
            Created comment

        Raises:
            ValidationError: If text or rating is invalid
            OwnerCannotRateError: If the recipe owner attached a rating
            DuplicateRatingError: If the author already rated the recipe
            NotFoundError: If the recipe does not exist
            StaleRatingError: If the comment was saved but the rating sync failed
        """
        with logfire.span(
            "comment_service.create_comment",
            recipe_id=str(recipe_id),
            author_id=str(author_id),
            rating=rating,
        ):
            self._validate(text, rating)

            owner_id = await self.ownership_lookup.find_owner_id(recipe_id)
            existing: list[Comment] = []
            if rating is not None and author_id != owner_id:
                previous = await self.comment_repository.find_rated_by_author(
                    author_id, recipe_id
                )
                existing = [previous] if previous else []

            check_rating_policy(
                existing,
                recipe_id,
                author_id,
                owner_id,
                has_rating=rating is not None,
                is_new_top_level_rating=rating is not None,
            )

            comment = await self.comment_repository.create(
                NewComment(
                    recipe_id=recipe_id,
                    author_id=author_id,
                    author=self._with_default_photo(author),
                    text=text.strip(),
                    rating=rating,
                    parent_id=None,
                    is_owner_reply=author_id == owner_id,
                )
            )
            logfire.info(
                "Comment created",
                comment_id=str(comment.id),
                recipe_id=str(recipe_id),
                rated=comment.rating is not None,
            )

            try:
                if qualifies(comment, owner_id):
                    await self._refresh_rating(recipe_id, owner_id, comment)
            finally:
                await self.outbox.record(recipe_id)
            return comment

    async def add_reply(
        self,
        recipe_id: RecipeId,
        parent_id: CommentId,
        author_id: UserId,
        author: AuthorDisplay,
        text: str,
    ) -> Comment:
        """Reply to a top-level comment.

        Replies never carry a rating and never trigger a rating sync.

        Args:
            recipe_id: Recipe ID
            parent_id: The top-level comment being replied to
            author_id: Author user ID
            author: Author display details
            text: Reply text

        Returns:
            Created reply

        Raises:
            ValidationError: If text is invalid
            NotFoundError: If the parent is missing or on another recipe
            NestedReplyError: If the parent is itself a reply
        """
        with logfire.span(
            "comment_service.add_reply",
            recipe_id=str(recipe_id),
            parent_id=str(parent_id),
            author_id=str(author_id),
        ):
            self._validate(text)

            parent = await self._require_comment(parent_id)
            if parent.recipe_id != recipe_id:
                logfire.error(
                    "Parent comment does not belong to recipe",
                    parent_id=str(parent_id),
                    parent_recipe_id=str(parent.recipe_id),
                    target_recipe_id=str(recipe_id),
                )
                raise NotFoundError("Comment", f"{parent_id} on recipe {recipe_id}")
            if parent.is_reply:
                raise NestedReplyError(parent_id)

            owner_id = await self.ownership_lookup.find_owner_id(recipe_id)
            reply = await self.comment_repository.create(
                NewComment(
                    recipe_id=recipe_id,
                    author_id=author_id,
                    author=self._with_default_photo(author),
                    text=text.strip(),
                    rating=None,
                    parent_id=parent.id,
                    is_owner_reply=author_id == owner_id,
                )
            )
            logfire.info(
                "Reply created",
                comment_id=str(reply.id),
                parent_id=str(parent_id),
                is_owner_reply=reply.is_owner_reply,
            )

            await self.outbox.record(recipe_id)
            return reply

    async def update_comment(
        self,
        comment_id: CommentId,
        user_id: UserId,
        patch: CommentPatch,
        *,
        recipe_id: RecipeId | None = None,
    ) -> Comment:
        """Change the text and/or rating of the user's own comment.

        Changing the rating on the author's existing rated review is
        allowed; rating a previously unrated review is subject to the
        one-rating rule.

        Args:
            comment_id: Comment ID
            user_id: Current user, must be the author
            patch: Fields to change
            recipe_id: If given, the recipe the comment must belong to

        Returns:
            Updated comment

        Raises:
            NotFoundError: If the comment does not exist or is on another recipe
            NotAuthorizedError: If the user is not the author
            ValidationError: If the new text or rating is invalid
            ReplyCannotRateError: If a rating is attached to a reply
            OwnerCannotRateError: If the recipe owner attached a rating
            DuplicateRatingError: If another rated review by the user exists
            StaleRatingError: If the update was saved but the rating sync failed
        """
        with logfire.span(
            "comment_service.update_comment",
            comment_id=str(comment_id),
            user_id=str(user_id),
            text_changed=patch.text_changed,
            rating_changed=patch.rating_changed,
        ):
            comment = await self._require_comment(comment_id, recipe_id)
            if comment.author_id != user_id:
                logfire.warn(
                    "Unauthorized comment update attempt",
                    comment_id=str(comment_id),
                    user_id=str(user_id),
                )
                raise NotAuthorizedError("comment", str(comment_id), str(user_id))

            new_text = patch.text if patch.text_changed else comment.text
            self._validate(new_text, patch.rating if patch.rating_changed else None)

            changes: dict = {}
            if patch.text_changed:
                changes["text"] = new_text.strip()

            owner_id: UserId | None = None
            if patch.rating_changed:
                has_rating = patch.rating is not None
                if has_rating and comment.is_reply:
                    raise ReplyCannotRateError(comment_id)

                owner_id = await self.ownership_lookup.find_owner_id(
                    comment.recipe_id
                )
                existing: list[Comment] = []
                if has_rating and comment.rating is None:
                    previous = await self.comment_repository.find_rated_by_author(
                        user_id, comment.recipe_id
                    )
                    if previous is not None and previous.id != comment.id:
                        existing = [previous]

                check_rating_policy(
                    existing,
                    comment.recipe_id,
                    user_id,
                    owner_id,
                    has_rating=has_rating,
                    is_new_top_level_rating=has_rating and comment.rating is None,
                )
                changes["rating"] = patch.rating

            if not changes:
                return comment

            updated = await self.comment_repository.update(
                comment_id, CommentPatch(**changes)
            )
            logfire.info(
                "Comment updated",
                comment_id=str(comment_id),
                recipe_id=str(comment.recipe_id),
                text_length=len(updated.text),
                rating=updated.rating,
            )

            rating_moved = (
                owner_id is not None
                and updated.rating != comment.rating
                and not comment.is_reply
                and comment.author_id != owner_id
            )
            try:
                if rating_moved:
                    await self._refresh_rating(comment.recipe_id, owner_id, updated)
            finally:
                await self.outbox.record(comment.recipe_id)
            return updated

    async def delete_comment(
        self,
        comment_id: CommentId,
        user_id: UserId,
        *,
        recipe_id: RecipeId | None = None,
    ) -> list[CommentId]:
        """Delete the user's own comment together with all its replies.

        Args:
            comment_id: Comment ID
            user_id: Current user, must be the author
            recipe_id: If given, the recipe the comment must belong to

        Returns:
            IDs removed by this call, replies first

        Raises:
            NotFoundError: If the comment does not exist or is on another recipe
            NotAuthorizedError: If the user is not the author
            PartialCascadeFailureError: If only part of the thread was removed
            StaleRatingError: If the thread is gone but the rating sync failed
        """
        with logfire.span(
            "comment_service.delete_comment",
            comment_id=str(comment_id),
            user_id=str(user_id),
        ):
            comment = await self._require_comment(comment_id, recipe_id)
            if comment.author_id != user_id:
                logfire.warn(
                    "Unauthorized comment delete attempt",
                    comment_id=str(comment_id),
                    user_id=str(user_id),
                )
                raise NotAuthorizedError("comment", str(comment_id), str(user_id))

            owner_id: UserId | None = None
            if comment.is_rated_review:
                owner_id = await self.ownership_lookup.find_owner_id(
                    comment.recipe_id
                )

            try:
                deleted = await self.delete_with_replies(comment_id)
                if owner_id is not None and qualifies(comment, owner_id):
                    await self._refresh_rating(comment.recipe_id, owner_id, deleted)
            finally:
                await self.outbox.record(comment.recipe_id)
            return deleted

    async def delete_with_replies(self, comment_id: CommentId) -> list[CommentId]:
        """Delete a comment and every comment beneath it.

        Walks the reply tree with an explicit queue, then deletes deepest
        first so a parent is only removed once its replies are gone. Ids
        that no longer exist are skipped, which makes a retry after a
        partial failure safe. Ratings are not synced here.

        Args:
            comment_id: Root of the thread to delete

        Returns:
            IDs removed by this call, root last

        Raises:
            StoreUnavailableError: If nothing was deleted before the failure
            PartialCascadeFailureError: If the failure came after some deletes
        """
        with logfire.span(
            "comment_service.delete_with_replies", comment_id=str(comment_id)
        ):
            # Breadth-first: every comment is listed after its parent
            order: list[CommentId] = []
            seen: set[CommentId] = set()
            pending: deque[CommentId] = deque([comment_id])
            while pending:
                current = pending.popleft()
                if current in seen:
                    continue
                seen.add(current)
                order.append(current)
                replies = await self.comment_repository.find_replies(current)
                pending.extend(reply.id for reply in replies)

            targets = list(reversed(order))
            deleted: list[CommentId] = []
            for index, target in enumerate(targets):
                try:
                    await self.comment_repository.delete(target)
                except NotFoundError:
                    logfire.info(
                        "Comment already deleted, skipping", comment_id=str(target)
                    )
                    continue
                except StoreUnavailableError as e:
                    if not deleted:
                        raise
                    logfire.error(
                        "Cascade delete interrupted",
                        comment_id=str(comment_id),
                        deleted=len(deleted),
                        remaining=len(targets) - index,
                        error=str(e),
                    )
                    raise PartialCascadeFailureError(
                        comment_id, deleted, targets[index:]
                    ) from e
                deleted.append(target)

            logfire.info(
                "Comment thread deleted",
                comment_id=str(comment_id),
                deleted=len(deleted),
            )
            return deleted

    async def get_comment_by_id(self, comment_id: CommentId) -> Comment | None:
        """Get a comment by ID."""
        with logfire.span(
            "comment_service.get_comment_by_id", comment_id=str(comment_id)
        ):
            return await self.comment_repository.find_by_id(comment_id)

    async def get_comments(self, recipe_id: RecipeId) -> list[Comment]:
        """Get all comments for a recipe, newest first."""
        with logfire.span("comment_service.get_comments", recipe_id=str(recipe_id)):
            comments = await self.comment_repository.find_by_recipe(recipe_id)
            logfire.info(
                "Comments retrieved for recipe",
                recipe_id=str(recipe_id),
                count=len(comments),
            )
            return comments

    async def get_threads(self, recipe_id: RecipeId) -> list[CommentThread]:
        """Get reviews with their replies attached, newest review first."""
        return assemble_threads(await self.get_comments(recipe_id))

    async def get_aggregate(self, recipe_id: RecipeId) -> RatingAggregate:
        """Compute the rating aggregate without writing it anywhere."""
        owner_id = await self.ownership_lookup.find_owner_id(recipe_id)
        return aggregate(await self.get_comments(recipe_id), owner_id)

    async def get_stats(self, recipe_id: RecipeId) -> CommentStats:
        """Review and reply counts with the rating aggregate."""
        owner_id = await self.ownership_lookup.find_owner_id(recipe_id)
        return comment_stats(await self.get_comments(recipe_id), owner_id)

    async def get_user_rating(
        self, user_id: UserId, recipe_id: RecipeId
    ) -> Comment | None:
        """The user's rated review on a recipe, if any."""
        with logfire.span(
            "comment_service.get_user_rating",
            user_id=str(user_id),
            recipe_id=str(recipe_id),
        ):
            return await self.comment_repository.find_rated_by_author(
                user_id, recipe_id
            )

    async def has_user_rated(self, user_id: UserId, recipe_id: RecipeId) -> bool:
        return await self.get_user_rating(user_id, recipe_id) is not None

    async def sync_rating(self, recipe_id: RecipeId) -> RatingAggregate:
        """Recompute and persist the recipe rating from the current comments.

        Safe to run at any time; used to reconcile a stale aggregate.
        """
        owner_id = await self.ownership_lookup.find_owner_id(recipe_id)
        return await self.rating_service.sync_recipe_rating(recipe_id, owner_id)

    async def subscribe(self, recipe_id: RecipeId, on_change: OnChange) -> Subscription:
        """Watch a recipe's comments.

        The current list is delivered first, then a fresh list after
        every change.
        """
        return await self.feed.subscribe(
            recipe_id,
            on_change,
            load=lambda: self.comment_repository.find_by_recipe(recipe_id),
        )
