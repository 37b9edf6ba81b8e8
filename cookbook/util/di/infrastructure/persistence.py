"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from cookbook.config import Settings
from cookbook.domain.model import Comment
from cookbook.domain.repository import (
    CommentRepository,
    RecipeOwnershipLookup,
    RecipeRatingWriter,
)
from cookbook.domain.service import CommentFeed, FeedOutbox
from cookbook.domain.value import RecipeId
from cookbook.persistence.database import (
    create_engine,
    create_session_factory,
    unit_of_work,
)
from cookbook.persistence.repository import (
    PostgresCommentRepository,
    PostgresRecipeRepository,
)
from cookbook.util.di.base import ProviderBase
from cookbook.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide database engine, disposed when the container closes."""
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    def get_feed_outbox(
        self,
        feed: CommentFeed,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> FeedOutbox:
        """Provide the request's feed outbox.

        Snapshots are read in a fresh session once the request has
        committed, so they only ever show committed comments.
        """

        async def load(recipe_id: RecipeId) -> list[Comment]:
            async with session_factory() as session:
                return await PostgresCommentRepository(session).find_by_recipe(
                    recipe_id
                )

        return FeedOutbox(feed, load)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        outbox: FeedOutbox,
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        The session is committed at the end of the request if no exception
        occurred, then the recorded feed changes are published. On an
        exception it is rolled back and the feed changes are dropped.
        """
        async with unit_of_work(session_factory, outbox) as session:
            yield session

    @provide(scope=Scope.REQUEST)
    def get_comment_repository(self, session: AsyncSession) -> CommentRepository:
        """Provide Comment repository."""
        return PostgresCommentRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_recipe_repository(self, session: AsyncSession) -> PostgresRecipeRepository:
        """Provide Recipe repository."""
        return PostgresRecipeRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_ownership_lookup(
        self, recipes: PostgresRecipeRepository
    ) -> RecipeOwnershipLookup:
        """Provide recipe owner lookup."""
        return recipes

    @provide(scope=Scope.REQUEST)
    def get_rating_writer(self, recipes: PostgresRecipeRepository) -> RecipeRatingWriter:
        """Provide recipe rating writer."""
        return recipes
