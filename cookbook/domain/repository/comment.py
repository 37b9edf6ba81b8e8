"""Comment repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from cookbook.domain.model.comment import Comment, CommentPatch, NewComment
from cookbook.domain.value import CommentId, RecipeId, UserId


class CommentRepository(ABC):
    """Repository for Comment entity.

    Defines the contract for comment persistence operations.
    Implementations live in the persistence layer and raise
    ``StoreUnavailableError`` when the backend fails.
    """

    @abstractmethod
    async def create(self, draft: NewComment) -> Comment:
        """Persist a new comment as a single record.

        The store assigns ``id`` and ``created_at``. The rating is dropped
        for owner-authored comments and for replies.

        Args:
            draft: The comment to create

        Returns:
            The stored comment
        """
        pass

    @abstractmethod
    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID.

        Args:
            comment_id: The comment's unique identifier

        Returns:
            The comment if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_recipe(self, recipe_id: RecipeId) -> List[Comment]:
        """Find all comments (reviews and replies) for a recipe, newest first.

        Args:
            recipe_id: The recipe ID

        Returns:
            List of comments ordered by creation time, descending
        """
        pass

    @abstractmethod
    async def find_replies(self, parent_id: CommentId) -> List[Comment]:
        """Find direct replies of a comment, oldest first.

        Args:
            parent_id: The parent comment ID

        Returns:
            List of replies ordered by creation time, ascending
        """
        pass

    @abstractmethod
    async def find_rated_by_author(
        self, author_id: UserId, recipe_id: RecipeId
    ) -> Optional[Comment]:
        """Find the author's rated top-level comment on a recipe.

        Args:
            author_id: The author's user ID
            recipe_id: The recipe ID

        Returns:
            The rated review if one exists, None otherwise
        """
        pass

    @abstractmethod
    async def update(self, comment_id: CommentId, patch: CommentPatch) -> Comment:
        """Apply a text and/or rating change.

        Args:
            comment_id: The comment ID
            patch: Fields to change

        Returns:
            The updated comment

        Raises:
            NotFoundError: If the comment does not exist
        """
        pass

    @abstractmethod
    async def delete(self, comment_id: CommentId) -> None:
        """Delete exactly one comment. Replies are left untouched.

        Args:
            comment_id: The comment ID to delete

        Raises:
            NotFoundError: If the comment does not exist
        """
        pass
