"""Unit tests for thread assembly."""

from uuid import uuid4

from cookbook.domain.service import assemble_threads, replies_of, top_level
from cookbook.domain.value import CommentId
from tests.conftest import make_comment


class TestAssembleThreads:
    """Tests for assemble_threads."""

    def test_every_comment_appears_exactly_once(self, recipe_id):
        """Each review heads one thread; each reply sits under its parent."""
        first = make_comment(recipe_id, rating=5, minutes=0)
        second = make_comment(recipe_id, minutes=10)
        reply_a = make_comment(recipe_id, parent_id=first.id, minutes=20)
        reply_b = make_comment(recipe_id, parent_id=first.id, minutes=30)
        reply_c = make_comment(recipe_id, parent_id=second.id, minutes=40)

        # Newest first, as the store returns them
        comments = [reply_c, reply_b, reply_a, second, first]

        threads = assemble_threads(comments)

        assert [t.comment.id for t in threads] == [second.id, first.id]
        by_id = {t.comment.id: t for t in threads}
        assert [r.id for r in by_id[first.id].replies] == [reply_a.id, reply_b.id]
        assert [r.id for r in by_id[second.id].replies] == [reply_c.id]

        seen = [t.comment.id for t in threads] + [
            r.id for t in threads for r in t.replies
        ]
        assert sorted(seen) == sorted(c.id for c in comments)

    def test_replies_are_oldest_first(self, recipe_id):
        """Replies read top to bottom even from a newest-first list."""
        review = make_comment(recipe_id)
        late = make_comment(recipe_id, parent_id=review.id, minutes=50)
        early = make_comment(recipe_id, parent_id=review.id, minutes=5)

        threads = assemble_threads([late, early, review])

        assert [r.id for r in threads[0].replies] == [early.id, late.id]

    def test_orphan_replies_are_left_out(self, recipe_id):
        review = make_comment(recipe_id)
        orphan = make_comment(recipe_id, parent_id=CommentId(uuid4()))

        threads = assemble_threads([orphan, review])

        assert len(threads) == 1
        assert threads[0].replies == []

    def test_empty_list(self):
        assert assemble_threads([]) == []


class TestFilters:
    """Tests for top_level and replies_of."""

    def test_top_level_keeps_order(self, recipe_id):
        a = make_comment(recipe_id, minutes=2)
        b = make_comment(recipe_id, minutes=1)
        reply = make_comment(recipe_id, parent_id=a.id)

        assert top_level([a, reply, b]) == [a, b]

    def test_replies_of(self, recipe_id):
        a = make_comment(recipe_id)
        b = make_comment(recipe_id)
        reply = make_comment(recipe_id, parent_id=a.id)

        assert replies_of([a, b, reply], a.id) == [reply]
        assert replies_of([a, b, reply], b.id) == []
