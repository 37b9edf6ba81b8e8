"""In-memory comment repository for testing."""

from datetime import datetime, timezone
from itertools import count
from typing import Optional
from uuid import uuid4

from cookbook.domain.error import NotFoundError
from cookbook.domain.model.comment import Comment, CommentPatch, NewComment
from cookbook.domain.repository.comment import CommentRepository
from cookbook.domain.value import CommentId, RecipeId, UserId


class InMemoryCommentRepository(CommentRepository):
    """In-memory implementation of CommentRepository for testing."""

    def __init__(self) -> None:
        self._comments: dict[CommentId, Comment] = {}
        # Insertion order breaks created_at ties
        self._sequence: dict[CommentId, int] = {}
        self._counter = count()

    def _order_key(self, comment: Comment) -> tuple[datetime, int]:
        return (comment.created_at, self._sequence[comment.id])

    async def create(self, draft: NewComment) -> Comment:
        """Store a new comment, assigning id and creation time."""
        rating = None if draft.is_owner_reply or draft.parent_id else draft.rating
        comment = Comment(
            id=CommentId(uuid4()),
            created_at=datetime.now(timezone.utc),
            updated_at=None,
            **draft.model_dump(exclude={"rating", "author"}),
            author=draft.author,
            rating=rating,
        )
        self._comments[comment.id] = comment
        self._sequence[comment.id] = next(self._counter)
        return comment

    async def save(self, comment: Comment) -> Comment:
        """Store a fully formed comment as-is (test seeding)."""
        self._comments[comment.id] = comment
        self._sequence.setdefault(comment.id, next(self._counter))
        return comment

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        return self._comments.get(comment_id)

    async def find_by_recipe(self, recipe_id: RecipeId) -> list[Comment]:
        """Find all comments for a recipe, newest first."""
        comments = [c for c in self._comments.values() if c.recipe_id == recipe_id]
        comments.sort(key=self._order_key, reverse=True)
        return comments

    async def find_replies(self, parent_id: CommentId) -> list[Comment]:
        """Find direct replies, oldest first."""
        comments = [c for c in self._comments.values() if c.parent_id == parent_id]
        comments.sort(key=self._order_key)
        return comments

    async def find_rated_by_author(
        self, author_id: UserId, recipe_id: RecipeId
    ) -> Optional[Comment]:
        """Find the author's rated review on a recipe."""
        return next(
            (
                c
                for c in self._comments.values()
                if c.recipe_id == recipe_id
                and c.author_id == author_id
                and c.is_rated_review
            ),
            None,
        )

    async def update(self, comment_id: CommentId, patch: CommentPatch) -> Comment:
        """Apply text and/or rating changes."""
        comment = self._comments.get(comment_id)
        if comment is None:
            raise NotFoundError("Comment", str(comment_id))

        # Create updated comment (since comments are immutable)
        changes = patch.model_dump(include=patch.model_fields_set & {"text", "rating"})
        updated = comment.model_copy(
            update={**changes, "updated_at": datetime.now(timezone.utc)}
        )
        self._comments[comment_id] = updated
        return updated

    async def delete(self, comment_id: CommentId) -> None:
        """Delete a single comment."""
        if comment_id not in self._comments:
            raise NotFoundError("Comment", str(comment_id))
        del self._comments[comment_id]
        del self._sequence[comment_id]
