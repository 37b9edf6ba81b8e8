"""Rating policy guard.

Enforces, at write time, that recipe owners never rate their own recipe
and that a user holds at most one rated review per recipe.
"""

from typing import Iterable

from cookbook.domain.error import DuplicateRatingError, OwnerCannotRateError
from cookbook.domain.model.comment import Comment
from cookbook.domain.value import RecipeId, UserId


def find_existing_rating(
    comments: Iterable[Comment], author_id: UserId
) -> Comment | None:
    """The author's rated top-level comment among ``comments``, if any."""
    return next(
        (c for c in comments if c.author_id == author_id and c.is_rated_review),
        None,
    )


def check_rating_policy(
    existing: Iterable[Comment],
    recipe_id: RecipeId,
    author_id: UserId,
    owner_id: UserId,
    *,
    has_rating: bool,
    is_new_top_level_rating: bool,
) -> None:
    """Reject ratings that break the owner and one-rating rules.

    Updating the rating on a user's existing rated review passes
    ``is_new_top_level_rating=False`` and is allowed.

    Args:
        existing: Current comments for the recipe
        recipe_id: Recipe being commented on
        author_id: User attempting the write
        owner_id: Recipe owner
        has_rating: Whether the write attaches a rating
        is_new_top_level_rating: Whether it would create a second rated review

    Raises:
        OwnerCannotRateError: Owner attached a rating
        DuplicateRatingError: Author already has a rated review
    """
    if author_id == owner_id:
        if has_rating:
            raise OwnerCannotRateError(recipe_id)
        return

    if is_new_top_level_rating:
        previous = find_existing_rating(existing, author_id)
        if previous is not None:
            raise DuplicateRatingError(recipe_id, previous.id)
