"""Domain models."""

from cookbook.domain.model.comment import (
    Comment,
    CommentPatch,
    CommentThread,
    NewComment,
)
from cookbook.domain.model.common import DomainModel

__all__ = [
    "DomainModel",
    "Comment",
    "CommentPatch",
    "CommentThread",
    "NewComment",
]
