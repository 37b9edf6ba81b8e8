"""Comment use cases."""

from .add_reply import AddReplyRequest, AddReplyResponse, AddReplyUseCase
from .common import CommentItem, RatingSummary, ThreadItem, to_comment_item
from .create_comment import (
    CreateCommentRequest,
    CreateCommentResponse,
    CreateCommentUseCase,
)
from .delete_comment import (
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
)
from .get_comment_stats import (
    GetCommentStatsRequest,
    GetCommentStatsResponse,
    GetCommentStatsUseCase,
)
from .get_comments import GetCommentsRequest, GetCommentsResponse, GetCommentsUseCase
from .get_user_rating import (
    GetUserRatingRequest,
    GetUserRatingResponse,
    GetUserRatingUseCase,
)
from .sync_recipe_rating import (
    SyncRecipeRatingRequest,
    SyncRecipeRatingResponse,
    SyncRecipeRatingUseCase,
)
from .update_comment import (
    UpdateCommentRequest,
    UpdateCommentResponse,
    UpdateCommentUseCase,
)

__all__ = [
    "AddReplyRequest",
    "AddReplyResponse",
    "AddReplyUseCase",
    "CommentItem",
    "CreateCommentRequest",
    "CreateCommentResponse",
    "CreateCommentUseCase",
    "DeleteCommentRequest",
    "DeleteCommentResponse",
    "DeleteCommentUseCase",
    "GetCommentStatsRequest",
    "GetCommentStatsResponse",
    "GetCommentStatsUseCase",
    "GetCommentsRequest",
    "GetCommentsResponse",
    "GetCommentsUseCase",
    "GetUserRatingRequest",
    "GetUserRatingResponse",
    "GetUserRatingUseCase",
    "RatingSummary",
    "SyncRecipeRatingRequest",
    "SyncRecipeRatingResponse",
    "SyncRecipeRatingUseCase",
    "ThreadItem",
    "UpdateCommentRequest",
    "UpdateCommentResponse",
    "UpdateCommentUseCase",
    "to_comment_item",
]
