"""Domain layer DI providers."""

from dishka import Scope, provide

from cookbook.config import CommentSettings
from cookbook.domain.repository import (
    CommentRepository,
    RecipeOwnershipLookup,
    RecipeRatingWriter,
)
from cookbook.domain.service import (
    CommentFeed,
    CommentService,
    FeedOutbox,
    RatingService,
)
from cookbook.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_rating_service(
        self,
        comment_repository: CommentRepository,
        rating_writer: RecipeRatingWriter,
    ) -> RatingService:
        """Provide rating sync domain service."""
        return RatingService(
            comment_repository=comment_repository, rating_writer=rating_writer
        )

    @provide
    def get_comment_service(
        self,
        comment_repository: CommentRepository,
        ownership_lookup: RecipeOwnershipLookup,
        rating_service: RatingService,
        feed: CommentFeed,
        settings: CommentSettings,
        outbox: FeedOutbox,
    ) -> CommentService:
        """Provide comment domain service."""
        return CommentService(
            comment_repository=comment_repository,
            ownership_lookup=ownership_lookup,
            rating_service=rating_service,
            feed=feed,
            settings=settings,
            outbox=outbox,
        )
