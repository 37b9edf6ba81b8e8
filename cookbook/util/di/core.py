"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from cookbook.config import CommentSettings, FeedSettings, Settings
from cookbook.util.di.base import ProviderBase
from cookbook.util.error import ConfigurationError


def check_settings(settings: Settings) -> Settings:
    """Reject settings the comment rules cannot work with.

    Args:
        settings: Loaded settings

    Returns:
        The same settings

    Raises:
        ConfigurationError: If the star range or feed buffer is unusable
    """
    comments = settings.comments
    if comments.min_rating < 1 or comments.min_rating > comments.max_rating:
        raise ConfigurationError(
            f"Invalid rating range {comments.min_rating}-{comments.max_rating}"
        )
    if comments.max_text_length < 1:
        raise ConfigurationError(
            f"Invalid comment length limit {comments.max_text_length}"
        )
    if settings.feed.max_pending < 1:
        raise ConfigurationError(
            f"Invalid feed buffer size {settings.feed.max_pending}"
        )
    return settings


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide checked application settings from environment."""
        return check_settings(Settings())

    @provide(scope=Scope.APP)
    def provide_comment_settings(self, settings: Settings) -> CommentSettings:
        """Provide comment rules."""
        return settings.comments

    @provide(scope=Scope.APP)
    def provide_feed_settings(self, settings: Settings) -> FeedSettings:
        """Provide change feed settings."""
        return settings.feed
