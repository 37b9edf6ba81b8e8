"""PostgreSQL implementation of Comment repository."""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import asc, desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cookbook.domain.error import NotFoundError
from cookbook.domain.model import Comment, CommentPatch, NewComment
from cookbook.domain.repository import CommentRepository
from cookbook.domain.value import CommentId, RecipeId, UserId
from cookbook.persistence.mappers import new_comment_to_dict, row_to_comment
from cookbook.persistence.repository.errors import store_errors
from cookbook.persistence.tables import comments_table


class PostgresCommentRepository(CommentRepository):
    """PostgreSQL implementation of CommentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def create(self, draft: NewComment) -> Comment:
        """Insert a new comment and return it as stored."""
        values = new_comment_to_dict(draft)
        if draft.is_owner_reply or draft.parent_id is not None:
            values["rating"] = None

        stmt = (
            comments_table.insert()
            .values(
                id=CommentId(uuid4()),
                # Set here rather than by NOW(): NOW() is fixed per transaction
                created_at=datetime.now(timezone.utc),
                **values,
            )
            .returning(comments_table)
        )
        with store_errors("create"):
            result = await self.session.execute(stmt)
            row = result.fetchone()
            await self.session.flush()
        return row_to_comment(row._asdict())

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        stmt = select(comments_table).where(comments_table.c.id == comment_id)
        with store_errors("find_by_id"):
            result = await self.session.execute(stmt)
            row = result.fetchone()
        return row_to_comment(row._asdict()) if row else None

    async def find_by_recipe(self, recipe_id: RecipeId) -> List[Comment]:
        """Find all comments for a recipe, newest first."""
        stmt = (
            select(comments_table)
            .where(comments_table.c.recipe_id == recipe_id)
            .order_by(desc(comments_table.c.created_at), desc(comments_table.c.id))
        )
        with store_errors("find_by_recipe"):
            result = await self.session.execute(stmt)
            rows = result.fetchall()
        return [row_to_comment(row._asdict()) for row in rows]

    async def find_replies(self, parent_id: CommentId) -> List[Comment]:
        """Find direct replies, oldest first."""
        stmt = (
            select(comments_table)
            .where(comments_table.c.parent_id == parent_id)
            .order_by(asc(comments_table.c.created_at), asc(comments_table.c.id))
        )
        with store_errors("find_replies"):
            result = await self.session.execute(stmt)
            rows = result.fetchall()
        return [row_to_comment(row._asdict()) for row in rows]

    async def find_rated_by_author(
        self, author_id: UserId, recipe_id: RecipeId
    ) -> Optional[Comment]:
        """Find the author's rated review on a recipe."""
        stmt = (
            select(comments_table)
            .where(comments_table.c.recipe_id == recipe_id)
            .where(comments_table.c.author_id == author_id)
            .where(comments_table.c.parent_id.is_(None))
            .where(comments_table.c.rating.is_not(None))
            .order_by(asc(comments_table.c.created_at))
            .limit(1)
        )
        with store_errors("find_rated_by_author"):
            result = await self.session.execute(stmt)
            row = result.fetchone()
        return row_to_comment(row._asdict()) if row else None

    async def update(self, comment_id: CommentId, patch: CommentPatch) -> Comment:
        """Apply text and/or rating changes."""
        values = patch.model_dump(include=patch.model_fields_set & {"text", "rating"})
        stmt = (
            update(comments_table)
            .where(comments_table.c.id == comment_id)
            .values(**values, updated_at=datetime.now(timezone.utc))
            .returning(comments_table)
        )
        with store_errors("update"):
            result = await self.session.execute(stmt)
            row = result.fetchone()
            await self.session.flush()

        if row is None:
            raise NotFoundError("Comment", str(comment_id))
        return row_to_comment(row._asdict())

    async def delete(self, comment_id: CommentId) -> None:
        """Delete a single comment (hard delete).

        Runs in a savepoint: a failed delete in the middle of a cascade
        leaves the deletes before it in place.
        """
        stmt = (
            comments_table.delete()
            .where(comments_table.c.id == comment_id)
            .returning(comments_table.c.id)
        )
        with store_errors("delete"):
            async with self.session.begin_nested():
                result = await self.session.execute(stmt)
                deleted = result.fetchone()

        if deleted is None:
            raise NotFoundError("Comment", str(comment_id))
