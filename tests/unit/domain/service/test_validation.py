"""Unit tests for comment input validation."""

import pytest

from cookbook.domain.error import ValidationError
from cookbook.domain.service import ensure_valid_comment, validate_comment
from cookbook.domain.value import ValidationIssue


class TestValidateComment:
    """Tests for validate_comment."""

    def test_text_at_limit_is_valid(self):
        """Exactly 1000 characters should pass."""
        assert validate_comment("a" * 1000) == []

    def test_text_over_limit_is_rejected(self):
        """1001 characters should fail."""
        assert validate_comment("a" * 1001) == [ValidationIssue.TEXT_TOO_LONG]

    def test_length_is_measured_after_trimming(self):
        """Surrounding whitespace doesn't count toward the limit."""
        assert validate_comment("  " + "a" * 1000 + "\n") == []

    @pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
    def test_blank_text_is_rejected(self, text):
        """Empty or whitespace-only text should fail."""
        assert validate_comment(text) == [ValidationIssue.EMPTY_TEXT]

    @pytest.mark.parametrize("rating", [0, 6, -1, 3.5, "3", True])
    def test_invalid_ratings_are_rejected(self, rating):
        """Ratings outside 1-5 or not integers should fail."""
        assert validate_comment("Tasty", rating) == [
            ValidationIssue.RATING_OUT_OF_RANGE
        ]

    @pytest.mark.parametrize("rating", [1, 3, 5, None])
    def test_valid_ratings_pass(self, rating):
        """1-5 and no rating at all are fine."""
        assert validate_comment("Tasty", rating) == []

    def test_all_issues_are_collected(self):
        """Empty text and a bad rating are both reported."""
        issues = validate_comment(" ", 9)

        assert issues == [
            ValidationIssue.EMPTY_TEXT,
            ValidationIssue.RATING_OUT_OF_RANGE,
        ]

    def test_custom_limits(self):
        """Limits can be tightened through keyword arguments."""
        assert validate_comment("abcdef", max_length=5) == [
            ValidationIssue.TEXT_TOO_LONG
        ]
        assert validate_comment("ok", 5, max_rating=4) == [
            ValidationIssue.RATING_OUT_OF_RANGE
        ]


class TestEnsureValidComment:
    """Tests for ensure_valid_comment."""

    def test_raises_with_every_issue(self):
        with pytest.raises(ValidationError) as exc_info:
            ensure_valid_comment("", 0)

        assert exc_info.value.issues == [
            ValidationIssue.EMPTY_TEXT,
            ValidationIssue.RATING_OUT_OF_RANGE,
        ]

    def test_valid_input_returns_none(self):
        assert ensure_valid_comment("Great with rice", 4) is None
