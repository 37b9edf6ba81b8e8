"""Group a flat comment list into review threads.

Pure functions over an in-memory list; the store's ordering is preserved.
"""

from collections import defaultdict
from typing import Iterable

from cookbook.domain.model.comment import Comment, CommentThread
from cookbook.domain.value import CommentId


def top_level(comments: Iterable[Comment]) -> list[Comment]:
    """Comments without a parent, in the order given."""
    return [c for c in comments if c.parent_id is None]


def replies_of(comments: Iterable[Comment], parent_id: CommentId) -> list[Comment]:
    """Direct replies of ``parent_id``, in the order given."""
    return [c for c in comments if c.parent_id == parent_id]


def assemble_threads(comments: list[Comment]) -> list[CommentThread]:
    """Attach replies to their top-level comment.

    Replies are listed oldest first regardless of the input order, so a
    newest-first list from the store still reads top to bottom. Replies
    whose parent is not in ``comments`` are left out.

    Args:
        comments: Flat list of reviews and replies for one recipe

    Returns:
        One thread per top-level comment, in input order
    """
    replies: dict[CommentId, list[Comment]] = defaultdict(list)
    for comment in comments:
        if comment.parent_id is not None:
            replies[comment.parent_id].append(comment)

    return [
        CommentThread(
            comment=comment,
            replies=sorted(replies.get(comment.id, []), key=lambda r: r.created_at),
        )
        for comment in top_level(comments)
    ]
