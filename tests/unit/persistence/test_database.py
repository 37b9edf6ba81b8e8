"""Unit tests for the per-request unit of work."""

import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from cookbook.domain.service import CommentFeed, FeedOutbox
from cookbook.persistence.database import unit_of_work
from tests.conftest import make_comment


class FakeSession:
    """Stands in for AsyncSession and records what the unit of work does."""

    def __init__(self, events: list[str], fail_commit: bool = False) -> None:
        self.events = events
        self.fail_commit = fail_commit

    async def __aenter__(self) -> "FakeSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.events.append("close")

    async def commit(self) -> None:
        if self.fail_commit:
            raise OperationalError("COMMIT", {}, Exception("connection lost"))
        self.events.append("commit")

    async def rollback(self) -> None:
        self.events.append("rollback")


class FeedWatcher:
    """Subscribes to a recipe and keeps every snapshot."""

    def __init__(self) -> None:
        self.snapshots: list[list] = []

    async def __call__(self, comments) -> None:
        self.snapshots.append(comments)


async def watched_outbox(recipe_id, events: list[str]):
    feed = CommentFeed()
    watcher = FeedWatcher()
    subscription = await feed.subscribe(recipe_id, watcher)

    async def load(changed_recipe):
        events.append("load")
        return [make_comment(changed_recipe, text="saved")]

    return FeedOutbox(feed, load), watcher, subscription


class TestUnitOfWork:
    """Tests for unit_of_work."""

    @pytest.mark.asyncio
    async def test_publishes_after_commit(self, recipe_id):
        events: list[str] = []
        outbox, watcher, subscription = await watched_outbox(recipe_id, events)

        async with unit_of_work(lambda: FakeSession(events), outbox):
            await outbox.record(recipe_id)
            assert events == []

        await asyncio.sleep(0.01)
        await subscription.close()

        assert events == ["commit", "close", "load"]
        assert [[c.text for c in s] for s in watcher.snapshots] == [["saved"]]

    @pytest.mark.asyncio
    async def test_no_publish_on_rollback(self, recipe_id):
        events: list[str] = []
        outbox, watcher, subscription = await watched_outbox(recipe_id, events)

        with pytest.raises(RuntimeError):
            async with unit_of_work(lambda: FakeSession(events), outbox):
                await outbox.record(recipe_id)
                raise RuntimeError("handler failed")

        await asyncio.sleep(0.01)
        await subscription.close()

        assert events == ["rollback", "close"]
        assert watcher.snapshots == []
        assert outbox.pending == []

    @pytest.mark.asyncio
    async def test_no_publish_when_commit_fails(self, recipe_id):
        events: list[str] = []
        outbox, watcher, subscription = await watched_outbox(recipe_id, events)

        with pytest.raises(OperationalError):
            async with unit_of_work(
                lambda: FakeSession(events, fail_commit=True), outbox
            ):
                await outbox.record(recipe_id)

        await asyncio.sleep(0.01)
        await subscription.close()

        assert events == ["rollback", "close"]
        assert watcher.snapshots == []
