"""Caller identity resolved upstream and forwarded as headers.

The gateway in front of this service authenticates the user and sets
``X-User-Id`` and ``X-User-Email``; display name and photo are optional.
"""

from uuid import UUID

from fastapi import Header, HTTPException, status
from pydantic import BaseModel

from cookbook.interface.error import IdentityError


class CurrentUser(BaseModel):
    """Authenticated caller."""

    user_id: str
    email: str
    display_name: str | None = None
    photo_url: str | None = None


def parse_identity(
    user_id: str | None,
    email: str | None,
    display_name: str | None = None,
    photo_url: str | None = None,
) -> CurrentUser:
    """Build the caller from raw header values.

    Raises:
        IdentityError: If the user ID or email is missing, or the ID is not a UUID
    """
    if not user_id or not email:
        raise IdentityError("X-User-Id and X-User-Email headers are required")
    try:
        UUID(user_id)
    except ValueError as e:
        raise IdentityError(f"Invalid user ID: {user_id}") from e

    return CurrentUser(
        user_id=user_id,
        email=email,
        display_name=display_name or None,
        photo_url=photo_url or None,
    )


def require_user(
    x_user_id: str | None = Header(default=None),
    x_user_email: str | None = Header(default=None),
    x_user_name: str | None = Header(default=None),
    x_user_photo: str | None = Header(default=None),
) -> CurrentUser:
    """FastAPI dependency for routes that act on behalf of a user."""
    try:
        return parse_identity(x_user_id, x_user_email, x_user_name, x_user_photo)
    except IdentityError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        ) from e
