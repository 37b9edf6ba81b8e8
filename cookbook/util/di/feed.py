"""Change feed DI provider."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from cookbook.config import FeedSettings
from cookbook.domain.service import CommentFeed
from cookbook.util.di.base import ProviderBase


class ProdFeedProvider(ProviderBase):
    """Change feed provider - concrete, no mocks needed.

    One feed per container: requests that mutate comments and WebSocket
    subscribers must share it.
    """

    @provide(scope=Scope.APP)
    async def get_comment_feed(
        self, feed_settings: FeedSettings
    ) -> AsyncIterator[CommentFeed]:
        """Provide the comment feed, closing every subscription on shutdown."""
        feed = CommentFeed(max_pending=feed_settings.max_pending)
        yield feed
        await feed.close()
