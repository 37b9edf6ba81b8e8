"""Application layer DI providers."""

from dishka import Scope, provide

from cookbook.application.usecase.comment import (
    AddReplyUseCase,
    CreateCommentUseCase,
    DeleteCommentUseCase,
    GetCommentStatsUseCase,
    GetCommentsUseCase,
    GetUserRatingUseCase,
    SyncRecipeRatingUseCase,
    UpdateCommentUseCase,
)
from cookbook.domain.service import CommentService
from cookbook.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Write use cases
    @provide(scope=Scope.REQUEST)
    def get_create_comment_use_case(
        self, comment_service: CommentService
    ) -> CreateCommentUseCase:
        """Provide create comment use case."""
        return CreateCommentUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_add_reply_use_case(self, comment_service: CommentService) -> AddReplyUseCase:
        """Provide add reply use case."""
        return AddReplyUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_update_comment_use_case(
        self, comment_service: CommentService
    ) -> UpdateCommentUseCase:
        """Provide update comment use case."""
        return UpdateCommentUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_delete_comment_use_case(
        self, comment_service: CommentService
    ) -> DeleteCommentUseCase:
        """Provide delete comment use case."""
        return DeleteCommentUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_sync_recipe_rating_use_case(
        self, comment_service: CommentService
    ) -> SyncRecipeRatingUseCase:
        """Provide sync recipe rating use case."""
        return SyncRecipeRatingUseCase(comment_service=comment_service)

    # Read use cases
    @provide(scope=Scope.REQUEST)
    def get_get_comments_use_case(
        self, comment_service: CommentService
    ) -> GetCommentsUseCase:
        """Provide get comments use case."""
        return GetCommentsUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_get_comment_stats_use_case(
        self, comment_service: CommentService
    ) -> GetCommentStatsUseCase:
        """Provide get comment stats use case."""
        return GetCommentStatsUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_get_user_rating_use_case(
        self, comment_service: CommentService
    ) -> GetUserRatingUseCase:
        """Provide get user rating use case."""
        return GetUserRatingUseCase(comment_service=comment_service)
