"""Mappers between database rows and domain models.

Rows come back from SQLAlchemy Core as dicts; domain models are
immutable pydantic objects.
"""

from typing import Any, Dict
from uuid import UUID

from cookbook.domain.model import Comment, NewComment
from cookbook.domain.value import AuthorDisplay, CommentId, RecipeId, UserId


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_comment(row: Dict[str, Any]) -> Comment:
    """Convert database row to Comment domain model.

    Args:
        row: Database row as dict

    Returns:
        Comment domain model
    """
    return Comment(
        id=CommentId(_uuid(row["id"])),
        recipe_id=RecipeId(_uuid(row["recipe_id"])),
        author_id=UserId(_uuid(row["author_id"])),
        author=AuthorDisplay(
            email=row["author_email"],
            display_name=row.get("author_name"),
            photo_url=row.get("author_photo_url"),
        ),
        text=row["text"],
        rating=row.get("rating"),
        parent_id=CommentId(_uuid(row["parent_id"])) if row.get("parent_id") else None,
        is_owner_reply=row["is_owner_reply"],
        created_at=row["created_at"],
        updated_at=row.get("updated_at"),
    )


def new_comment_to_dict(draft: NewComment) -> Dict[str, Any]:
    """Convert a comment draft to an insert dict.

    Args:
        draft: Comment data from the writer

    Returns:
        Dict suitable for database insertion (id and created_at excluded)
    """
    return {
        "recipe_id": draft.recipe_id,
        "parent_id": draft.parent_id,
        "author_id": draft.author_id,
        "author_email": draft.author.email,
        "author_name": draft.author.display_name,
        "author_photo_url": draft.author.photo_url,
        "text": draft.text,
        "rating": draft.rating,
        "is_owner_reply": draft.is_owner_reply,
    }
