"""Unit tests for the rating policy guard."""

from uuid import uuid4

import pytest

from cookbook.domain.error import DuplicateRatingError, OwnerCannotRateError
from cookbook.domain.service import check_rating_policy, find_existing_rating
from cookbook.domain.value import UserId
from tests.conftest import make_comment


class TestCheckRatingPolicy:
    """Tests for check_rating_policy."""

    def test_owner_cannot_rate(self, recipe_id, owner_id):
        with pytest.raises(OwnerCannotRateError):
            check_rating_policy(
                [],
                recipe_id,
                owner_id,
                owner_id,
                has_rating=True,
                is_new_top_level_rating=True,
            )

    def test_owner_can_comment_without_rating(self, recipe_id, owner_id):
        check_rating_policy(
            [],
            recipe_id,
            owner_id,
            owner_id,
            has_rating=False,
            is_new_top_level_rating=False,
        )

    def test_second_rating_is_rejected(self, recipe_id, owner_id):
        """A user already holding a rated review can't add another."""
        author_id = UserId(uuid4())
        existing = make_comment(recipe_id, author_id, rating=4)

        with pytest.raises(DuplicateRatingError) as exc_info:
            check_rating_policy(
                [existing],
                recipe_id,
                author_id,
                owner_id,
                has_rating=True,
                is_new_top_level_rating=True,
            )

        assert exc_info.value.existing_id == existing.id

    def test_changing_existing_rating_is_allowed(self, recipe_id, owner_id):
        """Re-rating the same review is not a new rating."""
        author_id = UserId(uuid4())
        existing = make_comment(recipe_id, author_id, rating=4)

        for _ in range(2):
            check_rating_policy(
                [existing],
                recipe_id,
                author_id,
                owner_id,
                has_rating=True,
                is_new_top_level_rating=False,
            )

    def test_unrated_comment_never_conflicts(self, recipe_id, owner_id):
        author_id = UserId(uuid4())
        existing = make_comment(recipe_id, author_id, rating=4)

        check_rating_policy(
            [existing],
            recipe_id,
            author_id,
            owner_id,
            has_rating=False,
            is_new_top_level_rating=False,
        )

    def test_other_users_ratings_do_not_count(self, recipe_id, owner_id):
        existing = make_comment(recipe_id, UserId(uuid4()), rating=2)

        check_rating_policy(
            [existing],
            recipe_id,
            UserId(uuid4()),
            owner_id,
            has_rating=True,
            is_new_top_level_rating=True,
        )


class TestFindExistingRating:
    """Tests for find_existing_rating."""

    def test_ignores_unrated_and_replies(self, recipe_id):
        author_id = UserId(uuid4())
        review = make_comment(recipe_id, UserId(uuid4()), rating=5)
        unrated = make_comment(recipe_id, author_id)
        reply = make_comment(recipe_id, author_id, parent_id=review.id)

        assert find_existing_rating([review, unrated, reply], author_id) is None

    def test_finds_rated_review(self, recipe_id):
        author_id = UserId(uuid4())
        rated = make_comment(recipe_id, author_id, rating=3)

        assert find_existing_rating([rated], author_id) == rated
