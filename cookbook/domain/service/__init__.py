"""Domain services."""

from .base import Service
from .comment_service import CommentService
from .feed import CommentFeed, FeedOutbox, Subscription
from .policy import check_rating_policy, find_existing_rating
from .rating_service import RatingService, aggregate, comment_stats, qualifies
from .thread_assembler import assemble_threads, replies_of, top_level
from .validation import ensure_valid_comment, validate_comment

__all__ = [
    "Service",
    "CommentService",
    "CommentFeed",
    "FeedOutbox",
    "Subscription",
    "RatingService",
    "aggregate",
    "comment_stats",
    "qualifies",
    "check_rating_policy",
    "find_existing_rating",
    "assemble_threads",
    "replies_of",
    "top_level",
    "ensure_valid_comment",
    "validate_comment",
]
