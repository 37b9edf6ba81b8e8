"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import logfire
import pytest

from cookbook.domain.model import Comment
from cookbook.domain.value import AuthorDisplay, CommentId, RecipeId, UserId

# Keep test output quiet and never ship spans anywhere
logfire.configure(send_to_logfire=False, console=False)

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_author(name: str = "cook") -> AuthorDisplay:
    """Author display details for test comments."""
    return AuthorDisplay(
        email=f"{name}@example.com",
        display_name=name.title(),
        photo_url=None,
    )


def make_comment(
    recipe_id: RecipeId,
    author_id: UserId | None = None,
    *,
    rating: int | None = None,
    parent_id: CommentId | None = None,
    minutes: int = 0,
    text: str = "Lovely recipe",
    is_owner_reply: bool = False,
) -> Comment:
    """Build a comment with ``created_at`` offset from a fixed base time."""
    return Comment(
        id=CommentId(uuid4()),
        recipe_id=recipe_id,
        author_id=author_id or UserId(uuid4()),
        author=make_author(),
        text=text,
        rating=rating,
        parent_id=parent_id,
        is_owner_reply=is_owner_reply,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )


@pytest.fixture
def recipe_id() -> RecipeId:
    return RecipeId(uuid4())


@pytest.fixture
def owner_id() -> UserId:
    return UserId(uuid4())
