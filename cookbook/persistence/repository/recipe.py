"""PostgreSQL implementation of the recipe collaborator interfaces."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import logfire
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cookbook.domain.error import NotFoundError, RatingWriteError
from cookbook.domain.repository import RecipeOwnershipLookup, RecipeRatingWriter
from cookbook.domain.value import RecipeId, UserId
from cookbook.persistence.repository.errors import store_errors
from cookbook.persistence.tables import recipes_table


class PostgresRecipeRepository(RecipeOwnershipLookup, RecipeRatingWriter):
    """Reads recipe owners and writes the denormalized rating columns."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_owner_id(self, recipe_id: RecipeId) -> UserId:
        """Return the recipe owner."""
        stmt = select(recipes_table.c.owner_id).where(recipes_table.c.id == recipe_id)
        with store_errors("find_owner_id"):
            result = await self.session.execute(stmt)
            owner_id = result.scalar()

        if owner_id is None:
            raise NotFoundError("Recipe", str(recipe_id))
        return UserId(owner_id)

    @asynccontextmanager
    async def isolated(self) -> AsyncIterator[None]:
        """Run the block in a savepoint of the request transaction.

        A failed statement inside rolls back to the savepoint, which keeps
        the comment changes made earlier in the transaction committable.
        """
        with store_errors("rating_sync_savepoint"):
            async with self.session.begin_nested():
                yield

    async def write_rating(
        self, recipe_id: RecipeId, avg_rating: float, review_count: int
    ) -> None:
        """Overwrite the recipe's rating columns.

        Runs in a savepoint so a failure here leaves the comment changes
        of the surrounding transaction intact.
        """
        stmt = (
            update(recipes_table)
            .where(recipes_table.c.id == recipe_id)
            .values(avg_rating=avg_rating, review_count=review_count)
        )
        try:
            async with self.session.begin_nested():
                result = await self.session.execute(stmt)
        except (SQLAlchemyError, OSError) as e:
            logfire.error(
                "Recipe rating write failed", recipe_id=str(recipe_id), error=str(e)
            )
            raise RatingWriteError(recipe_id, str(e)) from e

        if result.rowcount == 0:
            raise RatingWriteError(recipe_id, "recipe not found")
