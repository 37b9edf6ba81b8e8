"""Comment change feed.

Pushes the full comment list of a recipe to subscribers whenever it
changes. Each subscriber owns a queue and a delivery task, so a slow
callback only holds up its own deliveries.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable

import logfire

from cookbook.domain.error import StoreUnavailableError
from cookbook.domain.model.comment import Comment
from cookbook.domain.value import RecipeId

OnChange = Callable[[list[Comment]], Awaitable[None] | None]
SnapshotLoader = Callable[[], Awaitable[list[Comment]]]
RecipeLoader = Callable[[RecipeId], Awaitable[list[Comment]]]


class Subscription:
    """Handle for one subscriber of a recipe's comment feed.

    Snapshots are delivered in the order they were published. Once
    :meth:`close` is called no further snapshot reaches the callback.
    """

    def __init__(
        self,
        feed: "CommentFeed",
        recipe_id: RecipeId,
        on_change: OnChange,
        max_pending: int,
    ) -> None:
        self.recipe_id = recipe_id
        self._feed = feed
        self._on_change = on_change
        self._queue: asyncio.Queue[list[Comment]] = asyncio.Queue(
            maxsize=max_pending
        )
        self._closed = False
        self._task = asyncio.create_task(
            self._deliver(), name=f"comment-feed:{recipe_id}"
        )

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def offer(self, snapshot: list[Comment]) -> None:
        """Queue a snapshot, dropping the oldest pending one when full."""
        if self._closed:
            return
        if self._queue.full():
            self._queue.get_nowait()
            logfire.warn(
                "Comment feed subscriber lagging, dropped stale snapshot",
                recipe_id=str(self.recipe_id),
            )
        self._queue.put_nowait(list(snapshot))

    async def _deliver(self) -> None:
        while not self._closed:
            snapshot = await self._queue.get()
            if self._closed:
                return
            try:
                result = self._on_change(snapshot)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                # One bad subscriber must not stop its own feed
                logfire.exception(
                    "Comment feed subscriber failed",
                    recipe_id=str(self.recipe_id),
                )

    async def close(self) -> None:
        """Stop delivery and release the delivery task."""
        if self._closed:
            return
        self._closed = True
        self._feed._remove(self)

        if asyncio.current_task() is self._task:
            # Closed from inside the callback; the loop exits after it returns
            return

        self._task.cancel()
        await asyncio.gather(self._task, return_exceptions=True)
        logfire.info("Comment feed subscription closed", recipe_id=str(self.recipe_id))

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


class CommentFeed:
    """Per-recipe fan-out of comment list snapshots.

    Publishing for a recipe is serialized by a per-recipe lock: the
    snapshot is loaded and queued to every subscriber before the next
    publish for that recipe starts.
    """

    def __init__(self, max_pending: int = 32) -> None:
        """Initialize the feed.

        Args:
            max_pending: Snapshots buffered per subscriber
        """
        self.max_pending = max_pending
        self._subscribers: dict[RecipeId, list[Subscription]] = {}
        self._locks: dict[RecipeId, asyncio.Lock] = {}

    def _lock(self, recipe_id: RecipeId) -> asyncio.Lock:
        return self._locks.setdefault(recipe_id, asyncio.Lock())

    def subscriber_count(self, recipe_id: RecipeId) -> int:
        return len(self._subscribers.get(recipe_id, []))

    async def subscribe(
        self,
        recipe_id: RecipeId,
        on_change: OnChange,
        load: SnapshotLoader | None = None,
    ) -> Subscription:
        """Register a subscriber.

        Args:
            recipe_id: Recipe to watch
            on_change: Called with the full comment list on every change
            load: If given, its result is delivered first as the current state

        Returns:
            Subscription handle; call ``close()`` to stop delivery
        """
        async with self._lock(recipe_id):
            subscription = Subscription(self, recipe_id, on_change, self.max_pending)
            self._subscribers.setdefault(recipe_id, []).append(subscription)
            if load is not None:
                try:
                    subscription.offer(await load())
                except BaseException:
                    await subscription.close()
                    raise

        logfire.info(
            "Comment feed subscription opened",
            recipe_id=str(recipe_id),
            subscribers=self.subscriber_count(recipe_id),
        )
        return subscription

    async def publish(self, recipe_id: RecipeId, load: SnapshotLoader) -> int:
        """Load the current comment list and queue it for every subscriber.

        Nothing is loaded when the recipe has no subscribers.

        Args:
            recipe_id: Recipe whose comments changed
            load: Reads the current comment list

        Returns:
            Number of subscribers the snapshot was queued for
        """
        if not self._subscribers.get(recipe_id):
            return 0

        async with self._lock(recipe_id):
            subscribers = list(self._subscribers.get(recipe_id, []))
            if not subscribers:
                return 0
            snapshot = await load()
            for subscription in subscribers:
                subscription.offer(snapshot)

        return len(subscribers)

    async def close(self) -> None:
        """Close every open subscription."""
        subscriptions = [s for subs in self._subscribers.values() for s in subs]
        for subscription in subscriptions:
            await subscription.close()

    def _remove(self, subscription: Subscription) -> None:
        subscribers = self._subscribers.get(subscription.recipe_id)
        if not subscribers:
            return
        if subscription in subscribers:
            subscribers.remove(subscription)
        if not subscribers:
            del self._subscribers[subscription.recipe_id]
            lock = self._locks.get(subscription.recipe_id)
            if lock is not None and not lock.locked():
                del self._locks[subscription.recipe_id]


class FeedOutbox:
    """Recipes changed by one unit of work, published once it is durable.

    A transactional store records changes while the transaction is open,
    then calls :meth:`flush` after commit or :meth:`discard` after
    rollback. Snapshots are loaded after the commit, so subscribers never
    see rolled-back state and the last snapshot includes every change
    committed before it. With ``immediate`` set, a change is published as
    soon as it is recorded, for stores whose writes are visible at once.
    """

    def __init__(
        self, feed: CommentFeed, load: RecipeLoader, *, immediate: bool = False
    ) -> None:
        """Initialize the outbox.

        Args:
            feed: Feed to publish to
            load: Reads a recipe's current comment list
            immediate: Publish on record instead of waiting for flush
        """
        self.feed = feed
        self.immediate = immediate
        self._load = load
        self._pending: list[RecipeId] = []

    @property
    def pending(self) -> list[RecipeId]:
        return list(self._pending)

    async def record(self, recipe_id: RecipeId) -> None:
        """Note that a recipe's comments changed."""
        if recipe_id not in self._pending:
            self._pending.append(recipe_id)
        if self.immediate:
            await self.flush()

    async def flush(self) -> None:
        """Publish a fresh snapshot for every recorded recipe.

        A failed load is logged and skipped; subscribers catch up on the
        recipe's next change.
        """
        pending, self._pending = self._pending, []
        for recipe_id in pending:
            try:
                await self.feed.publish(recipe_id, lambda: self._load(recipe_id))
            except StoreUnavailableError as e:
                logfire.warn(
                    "Comment feed not refreshed",
                    recipe_id=str(recipe_id),
                    error=str(e),
                )

    def discard(self) -> None:
        """Forget recorded changes that were rolled back."""
        if self._pending:
            logfire.info("Comment feed changes discarded", recipes=len(self._pending))
        self._pending.clear()
