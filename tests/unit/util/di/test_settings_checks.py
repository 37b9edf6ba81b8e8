"""Unit tests for startup configuration checks."""

import pytest

from cookbook.config import CommentSettings, FeedSettings, Settings
from cookbook.util.di.core import check_settings
from cookbook.util.error import ConfigurationError
from tests.di import build_test_container


class TestCheckSettings:
    """Tests for check_settings."""

    def test_defaults_pass(self):
        settings = Settings()

        assert check_settings(settings) is settings

    @pytest.mark.parametrize(
        "comments",
        [
            CommentSettings(min_rating=4, max_rating=2),
            CommentSettings(min_rating=0),
            CommentSettings(max_text_length=0),
        ],
    )
    def test_unusable_comment_rules(self, comments):
        with pytest.raises(ConfigurationError):
            check_settings(Settings(comments=comments))

    def test_empty_feed_buffer(self):
        with pytest.raises(ConfigurationError, match="feed buffer"):
            check_settings(Settings(feed=FeedSettings(max_pending=0)))


class TestTestContainerOptions:
    def test_unknown_component(self):
        with pytest.raises(ConfigurationError, match="Unknown components"):
            build_test_container(unmock={"search"})
